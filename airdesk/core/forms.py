"""Form, search and upload logic behind the web UI."""
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple
from urllib.parse import quote

from airdesk.config import MAX_UPLOAD_BYTES, UPLOAD_URL_BASE
from airdesk.core.field_classifier import (
    attachment_fields,
    attachment_target_field,
    is_read_only_field,
)
from airdesk.models.table import AirtableRecord

STATUS_OPTIONS = ("Open", "In Progress", "Closed")
PRIORITY_OPTIONS = ("Low", "Medium", "High")


class FormError(ValueError):
    """Rejected before any call to Airtable."""
    title = "Error"


class EmptySubmissionError(FormError):
    title = "No Data to Save"

    def __init__(self) -> None:
        super().__init__("Please fill in at least one field before saving")


class UploadTooLargeError(FormError):
    title = "File Too Large"

    def __init__(self, max_bytes: int) -> None:
        super().__init__(f"Please select a file smaller than {format_file_size(max_bytes)}")
        self.max_bytes = max_bytes


class NoAttachmentFieldError(FormError):
    title = "No Attachment Field"

    def __init__(self) -> None:
        super().__init__("This table doesn't have any attachment fields to upload to")


@dataclass
class FieldInput:
    """One input of the record form."""
    name: str
    kind: str  # "select" | "textarea" | "text"
    options: Tuple[str, ...] = ()
    value: Any = ""
    required: bool = False

    @property
    def placeholder(self) -> str:
        if self.kind == "select":
            return "Select priority" if self.options == PRIORITY_OPTIONS else "Select status"
        return f"Enter {self.name.lower()}"


def field_input(name: str, value: Any = "") -> FieldInput:
    """Pick the input widget from the field name."""
    lower = name.lower()
    required = "title" in lower
    if value is None:
        value = ""
    if "status" in lower:
        return FieldInput(name, "select", STATUS_OPTIONS, value, required)
    if "priority" in lower:
        return FieldInput(name, "select", PRIORITY_OPTIONS, value, required)
    if "description" in lower or "notes" in lower:
        return FieldInput(name, "textarea", (), value, required)
    return FieldInput(name, "text", (), value, required)


def is_form_field(name: str) -> bool:
    """Editable and not an upload target; attachments are only written through the upload flow."""
    return not is_read_only_field(name) and not attachment_fields([name])


def is_text_value(value: Any) -> bool:
    return value is None or isinstance(value, str)


def build_form(fields: Iterable[str], values: Optional[Dict[str, Any]] = None) -> List[FieldInput]:
    """Inputs for the editable fields only; read-only and attachment fields never become inputs.

    Fields whose current value is not a string (numbers, checkboxes, multi-selects,
    linked records) are left out: posted back as text they would overwrite the typed value.
    """
    values = values or {}
    return [
        field_input(name, values.get(name))
        for name in fields
        if is_form_field(name) and is_text_value(values.get(name))
    ]


def prepare_submission(values: Dict[str, Any]) -> Dict[str, Any]:
    """Keep form fields with non-empty values, strings trimmed. Raises EmptySubmissionError."""
    out: Dict[str, Any] = {}
    for key, value in values.items():
        if not is_form_field(key):
            continue
        if isinstance(value, str):
            value = value.strip()
        if value is None or value == "":
            continue
        out[key] = value
    if not out:
        raise EmptySubmissionError()
    return out


def record_matches(record: AirtableRecord, query: str) -> bool:
    needle = query.lower()
    return any(needle in str(v).lower() for v in record.fields.values())


def filter_records(records: List[AirtableRecord], query: Optional[str]) -> List[AirtableRecord]:
    """Case-insensitive substring search over every field value, applied after fetch."""
    if not query:
        return list(records)
    return [r for r in records if record_matches(r, query)]


def table_field_names(records: List[AirtableRecord]) -> List[str]:
    """Column names come from the first record (Airtable omits empty fields)."""
    return list(records[0].fields.keys()) if records else []


@dataclass
class UploadPlan:
    """Where and what to PATCH for a simulated upload."""
    field_name: str
    url: str
    filename: str
    size: str = ""

    def attachment(self) -> Dict[str, str]:
        return {"url": self.url, "filename": self.filename}


def mock_upload_url(filename: str) -> str:
    # No real storage: Airtable is pointed at a placeholder URL
    return f"{UPLOAD_URL_BASE.rstrip('/')}/{quote(filename)}"


def check_upload_size(size_bytes: int, max_bytes: int = MAX_UPLOAD_BYTES) -> None:
    """Advisory cap (10 MiB by default), enforced before any network call."""
    if size_bytes > max_bytes:
        raise UploadTooLargeError(max_bytes)


def plan_upload(
    fields: Iterable[str],
    filename: str,
    size_bytes: int,
    max_bytes: int = MAX_UPLOAD_BYTES,
) -> UploadPlan:
    """Validate a selected file and choose its target field.

    Checks run in the order the UI applies them: size first, then whether
    the table has any attachment-like field at all.
    """
    check_upload_size(size_bytes, max_bytes)
    fields = list(fields)
    if not attachment_fields(fields):
        raise NoAttachmentFieldError()
    return UploadPlan(
        field_name=attachment_target_field(fields),
        url=mock_upload_url(filename),
        filename=filename,
        size=format_file_size(size_bytes),
    )


def format_file_size(size_bytes: int) -> str:
    if size_bytes <= 0:
        return "0 Bytes"
    units = ["Bytes", "KB", "MB", "GB"]
    value = float(size_bytes)
    i = 0
    while value >= 1024 and i < len(units) - 1:
        value /= 1024
        i += 1
    return f"{round(value, 2):g} {units[i]}"


def status_badge(value: Any) -> str:
    lower = str(value or "").lower()
    if "open" in lower:
        return "open"
    if "progress" in lower:
        return "progress"
    if "closed" in lower or "done" in lower:
        return "closed"
    return "secondary"


def priority_badge(value: Any) -> str:
    lower = str(value or "").lower()
    for level in ("high", "medium", "low"):
        if level in lower:
            return level
    return "secondary"
