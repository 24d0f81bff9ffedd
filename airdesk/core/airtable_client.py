"""Airtable REST client via requests; forwards CRUD calls for one base."""
import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

import requests

from airdesk.config import AIRTABLE_API_URL, AIRTABLE_TIMEOUT_SEC
from airdesk.models.table import TableConfig

logger = logging.getLogger(__name__)


class AirtableError(Exception):
    """Base for every failure talking to Airtable."""
    status_code = 500


class NotConfiguredError(AirtableError):
    """Raised when a table operation runs before credentials were saved."""
    status_code = 400

    def __init__(self) -> None:
        super().__init__("Airtable not configured")


class AirtableAPIError(AirtableError):
    """Airtable answered with a non-2xx status; status and body are relayed as-is."""

    def __init__(self, status_code: int, text: str) -> None:
        super().__init__(f"Airtable API error: {text}")
        self.status_code = status_code
        self.text = text


class AirtableTransportError(AirtableError):
    """Network failure before Airtable answered."""
    status_code = 500


def _segment(value: str) -> str:
    return quote(value, safe="")


class AirtableClient:
    """Thin pass-through over https://api.airtable.com/v0/{base}/{table}[/{record}].

    No retries and no interpretation of errors: every non-2xx response
    becomes an AirtableAPIError carrying the upstream status code.
    """

    def __init__(
        self,
        config: TableConfig,
        base_url: str = AIRTABLE_API_URL,
        timeout: float = AIRTABLE_TIMEOUT_SEC,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.config = config
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.update(
            {
                "Authorization": f"Bearer {config.api_key}",
                "Content-Type": "application/json",
            }
        )

    def _url(self, table: str, record_id: Optional[str] = None) -> str:
        url = f"{self._base_url}/{_segment(self.config.base_id)}/{_segment(table)}"
        if record_id is not None:
            url = f"{url}/{_segment(record_id)}"
        return url

    def _request(self, method: str, url: str, **kwargs: Any) -> dict:
        try:
            response = self._session.request(method, url, timeout=self._timeout, **kwargs)
        except requests.RequestException as e:
            logger.warning("Airtable %s %s failed: %s", method, url, e)
            raise AirtableTransportError(str(e)) from e
        if not response.ok:
            logger.info("Airtable %s %s -> %s", method, url, response.status_code)
            raise AirtableAPIError(response.status_code, response.text)
        try:
            return response.json()
        except ValueError as e:
            # 2xx with a body that is not JSON (proxy page, truncated response)
            logger.warning("Airtable %s %s returned non-JSON body", method, url)
            raise AirtableAPIError(502, response.text) from e

    def close(self) -> None:
        self._session.close()

    def list_records(self, table: str, offset: Optional[str] = None) -> dict:
        """Return one page of records: {"records": [...], "offset"?: str}."""
        params = {"offset": offset} if offset else None
        return self._request("GET", self._url(table), params=params)

    def create_record(self, table: str, fields: Dict[str, Any]) -> dict:
        return self._request("POST", self._url(table), json={"fields": fields})

    def update_record(self, table: str, record_id: str, fields: Dict[str, Any]) -> dict:
        """PATCH only the given fields; Airtable leaves the others untouched."""
        return self._request("PATCH", self._url(table, record_id), json={"fields": fields})

    def delete_record(self, table: str, record_id: str) -> dict:
        return self._request("DELETE", self._url(table, record_id))

    def attach_file(
        self,
        table: str,
        record_id: str,
        field_name: str,
        attachment: Dict[str, Any],
    ) -> dict:
        """Set field_name to [attachment]. Replaces existing attachments rather than appending."""
        body = {"fields": {field_name: [attachment]}}
        return self._request("PATCH", self._url(table, record_id), json=body)


def client_for(config: Optional[TableConfig], **kwargs: Any) -> AirtableClient:
    """Return a client for the saved config, or raise NotConfiguredError."""
    if config is None:
        raise NotConfiguredError()
    return AirtableClient(config, **kwargs)
