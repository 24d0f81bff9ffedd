"""In-memory holder for the one Airtable configuration (lost on restart)."""
import logging
from typing import Optional

from airdesk.models.table import TableConfig

logger = logging.getLogger(__name__)


class ConfigStore:
    """Single shared cell. Concurrent saves race; the last one wins."""

    def __init__(self) -> None:
        self._config: Optional[TableConfig] = None

    def get(self) -> Optional[TableConfig]:
        return self._config

    def save(self, config: TableConfig) -> None:
        """Replace the current configuration entirely (no merge)."""
        self._config = config
        logger.info("Airtable config saved (base %s, table %s)", config.base_id, config.table_name)

    def clear(self) -> None:
        self._config = None
        logger.info("Airtable config cleared")

    @property
    def is_configured(self) -> bool:
        return self._config is not None
