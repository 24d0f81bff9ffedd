import pytest
from fastapi.testclient import TestClient

from airdesk.api.app import app
from airdesk.api.state import get_state
from airdesk.core import airtable_client
from airdesk.models.table import TableConfig
from tests.helpers import FakeAirtable


@pytest.fixture(autouse=True)
def reset_config():
    get_state().clear_config()
    yield
    get_state().clear_config()


@pytest.fixture()
def airtable(monkeypatch):
    fake = FakeAirtable()
    monkeypatch.setattr(airtable_client.requests, "Session", lambda: fake)
    return fake


@pytest.fixture()
def configured(airtable):
    get_state().save_config(TableConfig(api_key="keyTest", base_id="appBase", table_name="Tasks"))
    return airtable


@pytest.fixture()
def client():
    with TestClient(app) as test_client:
        yield test_client
