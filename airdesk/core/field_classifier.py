"""Name-based field heuristics: which fields are editable, which take uploads.

Airtable's record API does not say which fields are computed, so both
decisions are made from the field name alone (case-insensitive).

Attachment-like names ("Photo", "Files", ...) are deliberately on both
sides: they are read-only for the record form, and they are exactly the
fields the upload flow writes to.
"""
import re
from typing import Iterable, List

FALLBACK_ATTACHMENT_FIELD = "Attachments"

_READ_ONLY_PATTERNS = [
    # AI and computed fields
    r"ai", r"summary", r"formula", r"computed", r"calculated",
    # Counting and mathematical fields
    r"number of", r"count", r"total", r"sum", r"average", r"max", r"min",
    # Time-based computed fields
    r"days? (open|since|elapsed)", r"time elapsed", r"duration",
    r"created time", r"created by", r"last modified", r"modified by",
    # Attachment and media fields
    r"photo", r"image", r"picture", r"attachment", r"file", r"document",
    # Lookup and reference fields
    r"rollup", r"lookup", r"reference",
    # Auto-generated fields
    r"auto number", r"barcode", r"autonumber",
    # Status and severity fields that are usually computed
    r"severity", r"priority level", r"bug severity",
    r"bug status", r"status update", r"current status",
    r"comment sentiment", r"sentiment", r"author role",
    # Parentheses usually mark a formula, e.g. "Cost (USD)"
    r"\([^)]*\)",
]
READ_ONLY_PATTERNS = [re.compile(p, re.IGNORECASE) for p in _READ_ONLY_PATTERNS]

IMAGE_TERMS = ("image", "photo", "picture", "screenshot", "pic")
GENERAL_ATTACHMENT_TERMS = ("attachment", "file", "document", "upload")


def is_read_only_field(name: str) -> bool:
    """True if the name looks like a computed, system or attachment field."""
    return any(p.search(name) for p in READ_ONLY_PATTERNS)


def editable_fields(names: Iterable[str]) -> List[str]:
    return [n for n in names if not is_read_only_field(n)]


def read_only_fields(names: Iterable[str]) -> List[str]:
    return [n for n in names if is_read_only_field(n)]


def _matching(names: Iterable[str], terms: Iterable[str]) -> List[str]:
    terms = tuple(terms)
    return [n for n in names if any(t in n.lower() for t in terms)]


def image_fields(names: Iterable[str]) -> List[str]:
    return _matching(names, IMAGE_TERMS)


def general_attachment_fields(names: Iterable[str]) -> List[str]:
    return _matching(names, GENERAL_ATTACHMENT_TERMS)


def attachment_fields(names: Iterable[str]) -> List[str]:
    """Upload candidates: image-like fields first, then general attachment fields.

    A name matching both groups (e.g. "Image File") appears in both, image slot first.
    """
    names = list(names)
    return image_fields(names) + general_attachment_fields(names)


def attachment_target_field(names: Iterable[str]) -> str:
    """Field an upload is written to; falls back to "Attachments"."""
    candidates = attachment_fields(names)
    return candidates[0] if candidates else FALLBACK_ATTACHMENT_FIELD
