"""Airtable credentials and record shapes."""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class TableConfig:
    """Credentials for one Airtable table (held in memory only)."""
    api_key: str
    base_id: str
    table_name: str

    def to_dict(self) -> dict:
        # camelCase matches what the web UI posts back
        return {"apiKey": self.api_key, "baseId": self.base_id, "tableName": self.table_name}


@dataclass
class AirtableRecord:
    """One row as returned by Airtable: {id, fields, createdTime?}."""
    id: str
    fields: Dict[str, Any] = field(default_factory=dict)
    created_time: Optional[str] = None

    @classmethod
    def from_api(cls, data: dict) -> "AirtableRecord":
        return cls(
            id=data["id"],
            fields=dict(data.get("fields") or {}),
            created_time=data.get("createdTime"),
        )


@dataclass
class RecordCollection:
    """A page of records plus Airtable's continuation token."""
    records: List[AirtableRecord]
    offset: Optional[str] = None

    @classmethod
    def from_api(cls, data: dict) -> "RecordCollection":
        return cls(
            records=[AirtableRecord.from_api(r) for r in data.get("records") or []],
            offset=data.get("offset"),
        )
