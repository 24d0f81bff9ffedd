"""Record CRUD and attachments: pass-through to the configured Airtable base."""
from typing import Annotated, Any, Dict, Optional

from fastapi import APIRouter, Depends
from pydantic import AfterValidator, AnyUrl, BaseModel, TypeAdapter, ValidationError

from airdesk.api.state import AppState, get_state
from airdesk.core.field_classifier import (
    attachment_fields,
    attachment_target_field,
    editable_fields,
    read_only_fields,
)
from airdesk.core.forms import table_field_names
from airdesk.models.table import RecordCollection

router = APIRouter()


class RecordBody(BaseModel):
    fields: Dict[str, Any]


_URL = TypeAdapter(AnyUrl)


def _check_url(value: str) -> str:
    """Validate as a URL but keep the caller's string (AnyUrl would normalize it)."""
    try:
        _URL.validate_python(value)
    except ValidationError as e:
        raise ValueError(f"Invalid URL: {value}") from e
    return value


class AttachmentBody(BaseModel):
    url: Annotated[str, AfterValidator(_check_url)]
    filename: Optional[str] = None

    def to_attachment(self) -> Dict[str, str]:
        out = {"url": self.url}
        if self.filename is not None:
            out["filename"] = self.filename
        return out


@router.get("/{table_name}")
def list_records(
    table_name: str,
    offset: Optional[str] = None,
    state: AppState = Depends(get_state),
):
    """List records (one Airtable page; offset is passed through)."""
    return state.client().list_records(table_name, offset=offset)


@router.get("/{table_name}/fields")
def classify_fields(table_name: str, state: AppState = Depends(get_state)):
    """Field names of the table split into editable / read-only, plus the upload target."""
    data = state.client().list_records(table_name)
    names = table_field_names(RecordCollection.from_api(data).records)
    return {
        "fields": names,
        "editable": editable_fields(names),
        "read_only": read_only_fields(names),
        "attachment_fields": attachment_fields(names),
        "attachment_target": attachment_target_field(names),
    }


@router.post("/{table_name}")
def create_record(
    table_name: str,
    body: RecordBody,
    state: AppState = Depends(get_state),
):
    return state.client().create_record(table_name, body.fields)


@router.patch("/{table_name}/{record_id}")
def update_record(
    table_name: str,
    record_id: str,
    body: RecordBody,
    state: AppState = Depends(get_state),
):
    """Partial update: fields not in the body are left as they are in Airtable."""
    return state.client().update_record(table_name, record_id, body.fields)


@router.delete("/{table_name}/{record_id}")
def delete_record(
    table_name: str,
    record_id: str,
    state: AppState = Depends(get_state),
):
    """Delete a record; returns Airtable's {id, deleted} confirmation."""
    return state.client().delete_record(table_name, record_id)


@router.post("/{table_name}/{record_id}/attachment/{field_name}")
def attach_file(
    table_name: str,
    record_id: str,
    field_name: str,
    body: AttachmentBody,
    state: AppState = Depends(get_state),
):
    """Set field_name to a single attachment (replaces any existing ones)."""
    return state.client().attach_file(table_name, record_id, field_name, body.to_attachment())
