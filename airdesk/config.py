"""Configuration: env, Airtable endpoint, upload limits."""
import os
from pathlib import Path

from dotenv import load_dotenv

# Base paths (project root = parent of airdesk package)
BASE_DIR = Path(__file__).resolve().parent.parent
PACKAGE_DIR = Path(__file__).resolve().parent
TEMPLATES_DIR = PACKAGE_DIR / "templates"

# Load .env from project root so AIRTABLE_API_URL etc. are set
load_dotenv(BASE_DIR / ".env")

# API
API_HOST = os.getenv("AIRDESK_API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("AIRDESK_API_PORT", "8000"))
# Comma-separated; "*" allows any origin (e.g. a Vite dev server on :5173)
CORS_ORIGINS = [o.strip() for o in os.getenv("AIRDESK_CORS_ORIGINS", "*").split(",") if o.strip()]

# Airtable REST API (credentials are supplied at runtime through /config, never via env)
AIRTABLE_API_URL = os.getenv("AIRTABLE_API_URL", "https://api.airtable.com/v0")
AIRTABLE_TIMEOUT_SEC = float(os.getenv("AIRTABLE_TIMEOUT_SEC", "30"))

# Uploads are simulated: the file is never stored, Airtable gets a mock URL under this base
MAX_UPLOAD_BYTES = int(os.getenv("AIRDESK_MAX_UPLOAD_BYTES", str(10 * 1024 * 1024)))
UPLOAD_URL_BASE = os.getenv("AIRDESK_UPLOAD_URL_BASE", "https://example.com/uploads")
