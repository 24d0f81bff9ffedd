"""Airtable credentials: save, read and clear the in-memory configuration."""
from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field

from airdesk.api.state import AppState, get_state
from airdesk.models.table import TableConfig

router = APIRouter()


class ConfigBody(BaseModel):
    """Same keys the web UI posts (camelCase); snake_case accepted too."""
    model_config = ConfigDict(populate_by_name=True)

    api_key: str = Field(alias="apiKey", min_length=1)
    base_id: str = Field(alias="baseId", min_length=1)
    table_name: str = Field(alias="tableName", min_length=1)


@router.get("/config")
def get_config(state: AppState = Depends(get_state)):
    """Return the current configuration, or null if none was saved."""
    config = state.get_config()
    return config.to_dict() if config else None


@router.post("/config")
def save_config(body: ConfigBody, state: AppState = Depends(get_state)):
    """Replace the configuration (last write wins)."""
    state.save_config(
        TableConfig(api_key=body.api_key, base_id=body.base_id, table_name=body.table_name)
    )
    return {"success": True}


@router.delete("/config")
def clear_config(state: AppState = Depends(get_state)):
    state.clear_config()
    return {"success": True}
