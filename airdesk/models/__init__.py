"""Data models for table credentials and records."""
from airdesk.models.table import AirtableRecord, RecordCollection, TableConfig

__all__ = [
    "AirtableRecord",
    "RecordCollection",
    "TableConfig",
]
