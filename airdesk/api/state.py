"""Shared application state (injected into routes)."""
from typing import Optional

from airdesk.core.airtable_client import AirtableClient, client_for
from airdesk.core.config_store import ConfigStore
from airdesk.models.table import TableConfig


class AppState:
    def __init__(self) -> None:
        self.config_store = ConfigStore()
        self._client: Optional[AirtableClient] = None

    def get_config(self) -> Optional[TableConfig]:
        return self.config_store.get()

    def save_config(self, config: TableConfig) -> None:
        self.config_store.save(config)
        self._drop_client()

    def clear_config(self) -> None:
        self.config_store.clear()
        self._drop_client()

    def _drop_client(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

    def client(self) -> AirtableClient:
        """Airtable client for the saved config; raises NotConfiguredError if unset.

        One client (and one requests.Session) per saved config, replaced when the config changes.
        """
        config = self.config_store.get()
        if self._client is None or self._client.config is not config:
            self._drop_client()
            self._client = client_for(config)
        return self._client


_state = AppState()


def get_state() -> AppState:
    return _state
