"""Server-rendered dashboard: config form, searchable records table, record and upload forms."""
import logging
from typing import Optional
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from fastapi.responses import RedirectResponse
from fastapi.templating import Jinja2Templates
from starlette.concurrency import run_in_threadpool

from airdesk.api.state import AppState, get_state
from airdesk.config import MAX_UPLOAD_BYTES, TEMPLATES_DIR
from airdesk.core.airtable_client import AirtableError
from airdesk.core.field_classifier import attachment_fields, attachment_target_field
from airdesk.core.forms import (
    FormError,
    build_form,
    check_upload_size,
    filter_records,
    plan_upload,
    prepare_submission,
    priority_badge,
    status_badge,
    table_field_names,
)
from airdesk.models.table import RecordCollection, TableConfig

logger = logging.getLogger(__name__)

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.globals.update(status_badge=status_badge, priority_badge=priority_badge)
router = APIRouter(tags=["web"])

# Form inputs for record fields are named "field:<Airtable field name>"
_FIELD_PREFIX = "field:"


def _redirect(**params: Optional[str]) -> RedirectResponse:
    query = urlencode({k: v for k, v in params.items() if v})
    return RedirectResponse(url=f"/?{query}" if query else "/", status_code=303)


def _fetch(state: AppState, config: TableConfig) -> RecordCollection:
    data = state.client().list_records(config.table_name)
    return RecordCollection.from_api(data)


@router.get("/")
def dashboard(
    request: Request,
    q: str = "",
    edit: Optional[str] = None,
    create: bool = False,
    upload: Optional[str] = None,
    notice: Optional[str] = None,
    error: Optional[str] = None,
    state: AppState = Depends(get_state),
):
    config = state.get_config()
    context = {
        "config": config,
        "q": q,
        "notice": notice,
        "error": error,
        "records": [],
        "total": 0,
        "columns": [],
        "form": None,
        "form_record_id": None,
        "upload_record_id": None,
        "upload_target": None,
        "load_error": None,
    }
    if config is None:
        return templates.TemplateResponse(request, "dashboard.html", context)

    try:
        collection = _fetch(state, config)
    except AirtableError as e:
        context["load_error"] = str(e)
        return templates.TemplateResponse(request, "dashboard.html", context)

    records = collection.records
    columns = table_field_names(records)
    context.update(
        records=filter_records(records, q),
        total=len(records),
        columns=columns,
    )
    if create:
        context["form"] = build_form(columns)
    elif edit:
        existing = next((r for r in records if r.id == edit), None)
        if existing is not None:
            context["form"] = build_form(columns, existing.fields)
            context["form_record_id"] = edit
    if upload:
        context["upload_record_id"] = upload
        if attachment_fields(columns):
            context["upload_target"] = attachment_target_field(columns)
    return templates.TemplateResponse(request, "dashboard.html", context)


@router.post("/ui/config")
def save_config(
    api_key: str = Form(""),
    base_id: str = Form(""),
    table_name: str = Form(""),
    state: AppState = Depends(get_state),
):
    if not api_key or not base_id or not table_name:
        return _redirect(error="API Key, Base ID and Table Name are required")
    state.save_config(TableConfig(api_key=api_key, base_id=base_id, table_name=table_name))
    return _redirect(notice="Configuration saved")


@router.post("/ui/config/clear")
def clear_config(state: AppState = Depends(get_state)):
    state.clear_config()
    return _redirect(notice="Configuration cleared")


async def _submitted_fields(request: Request) -> dict:
    form = await request.form()
    return {
        key[len(_FIELD_PREFIX):]: value
        for key, value in form.items()
        if key.startswith(_FIELD_PREFIX)
    }


@router.post("/ui/records")
async def create_record(request: Request, state: AppState = Depends(get_state)):
    config = state.get_config()
    if config is None:
        return _redirect(error="Airtable not configured")
    try:
        fields = prepare_submission(await _submitted_fields(request))
        await run_in_threadpool(state.client().create_record, config.table_name, fields)
    except (FormError, AirtableError) as e:
        return _redirect(error=str(e), create="1")
    return _redirect(notice="New record has been added successfully")


@router.post("/ui/records/{record_id}")
async def update_record(record_id: str, request: Request, state: AppState = Depends(get_state)):
    config = state.get_config()
    if config is None:
        return _redirect(error="Airtable not configured")
    try:
        fields = prepare_submission(await _submitted_fields(request))
        await run_in_threadpool(state.client().update_record, config.table_name, record_id, fields)
    except (FormError, AirtableError) as e:
        return _redirect(error=str(e), edit=record_id)
    return _redirect(notice="Changes have been saved successfully")


@router.post("/ui/records/{record_id}/delete")
def delete_record(record_id: str, state: AppState = Depends(get_state)):
    config = state.get_config()
    if config is None:
        return _redirect(error="Airtable not configured")
    try:
        state.client().delete_record(config.table_name, record_id)
    except AirtableError as e:
        return _redirect(error=str(e))
    return _redirect(notice="The record has been removed successfully")


@router.post("/ui/records/{record_id}/upload")
async def upload_attachment(
    record_id: str,
    file: UploadFile = File(...),
    state: AppState = Depends(get_state),
):
    """Simulated upload: size-check the file, then PATCH a mock URL into the target field."""
    config = state.get_config()
    if config is None:
        return _redirect(error="Airtable not configured")
    filename = file.filename or "upload"
    size = file.size
    if size is None:
        # Never buffer more than one byte past the cap
        size = len(await file.read(MAX_UPLOAD_BYTES + 1))
    try:
        check_upload_size(size)
        collection = await run_in_threadpool(_fetch, state, config)
        plan = plan_upload(table_field_names(collection.records), filename, size)
        await run_in_threadpool(
            state.client().attach_file,
            config.table_name,
            record_id,
            plan.field_name,
            plan.attachment(),
        )
    except (FormError, AirtableError) as e:
        return _redirect(error=str(e), upload=record_id)
    logger.info("Attached %s (%s) to %s.%s", filename, plan.size, record_id, plan.field_name)
    return _redirect(notice="Attachment has been added to the record")
