"""Core services: config holder, Airtable client, field heuristics, form logic."""
from airdesk.core.airtable_client import AirtableClient
from airdesk.core.config_store import ConfigStore

__all__ = ["AirtableClient", "ConfigStore"]
