"""FastAPI app, CORS, error mapping, and route registration."""
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# Configure logging in the worker process (so INFO logs are visible with uvicorn --reload)
logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s: %(name)s: %(message)s",
)

from airdesk.api.state import AppState, get_state
from airdesk.config import CORS_ORIGINS
from airdesk.core.airtable_client import AirtableError

# Import routes after state to avoid circular imports
from airdesk.api.routes import config, records
from airdesk.web.routes import router as web_router

__all__ = ["app", "AppState", "get_state"]

logger = logging.getLogger(__name__)


def _validation_message(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "; ".join(parts) or "Invalid request"


app = FastAPI(
    title="Airdesk API",
    description="Web UI and REST proxy for one Airtable table",
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(AirtableError)
async def airtable_error_handler(request: Request, exc: AirtableError):
    if exc.status_code >= 500:
        logger.warning("%s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc)})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"error": _validation_message(exc)})


# Config routes first so /config is not captured by /{table_name}
app.include_router(config.router, prefix="/api/airtable", tags=["config"])
app.include_router(records.router, prefix="/api/airtable", tags=["records"])
app.include_router(web_router)
