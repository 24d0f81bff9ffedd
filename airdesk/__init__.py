"""Airdesk: web UI and REST proxy for one Airtable table."""
__version__ = "0.1.0"
