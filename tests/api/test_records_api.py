import pytest

from airdesk.api.state import get_state
from airdesk.models.table import TableConfig
from tests.helpers import connection_error


@pytest.mark.parametrize(
    "method,path,body",
    [
        ("GET", "/api/airtable/Tasks", None),
        ("POST", "/api/airtable/Tasks", {"fields": {"Title": "A"}}),
        ("PATCH", "/api/airtable/Tasks/rec001", {"fields": {"Title": "A"}}),
        ("DELETE", "/api/airtable/Tasks/rec001", None),
        ("POST", "/api/airtable/Tasks/rec001/attachment/Photo", {"url": "https://example.com/a.png"}),
    ],
)
def test_operations_fail_when_not_configured(client, airtable, method, path, body):
    response = client.request(method, path, json=body)
    assert response.status_code == 400
    assert response.json() == {"error": "Airtable not configured"}
    assert airtable.calls == []


def test_list_records_passes_through(client, configured):
    configured.add("Tasks", {"Title": "Fix login"})
    response = client.get("/api/airtable/Tasks")
    assert response.status_code == 200
    assert response.json()["records"][0]["fields"] == {"Title": "Fix login"}


def test_create_record(client, configured):
    response = client.post("/api/airtable/Tasks", json={"fields": {"Title": "New"}})
    assert response.status_code == 200
    body = response.json()
    assert body["id"] and body["createdTime"]
    assert body["fields"] == {"Title": "New"}


def test_create_requires_fields_body(client, configured):
    response = client.post("/api/airtable/Tasks", json={"Title": "New"})
    assert response.status_code == 400
    assert configured.calls == []


def test_update_leaves_other_fields_unchanged(client, configured):
    rec = configured.add("Tasks", {"Title": "Fix login", "Status": "Open", "Priority": "High"})
    response = client.patch(f"/api/airtable/Tasks/{rec['id']}", json={"fields": {"Status": "Closed"}})
    assert response.status_code == 200
    assert response.json()["fields"] == {"Title": "Fix login", "Status": "Closed", "Priority": "High"}


def test_delete_record(client, configured):
    rec = configured.add("Tasks", {"Title": "Old"})
    response = client.delete(f"/api/airtable/Tasks/{rec['id']}")
    assert response.json() == {"id": rec["id"], "deleted": True}


def test_attach_file_replaces_field(client, configured):
    rec = configured.add("Tasks", {"Title": "A", "Photo": [{"url": "https://old.example/x.png"}]})
    response = client.post(
        f"/api/airtable/Tasks/{rec['id']}/attachment/Photo",
        json={"url": "https://example.com/uploads/y.png", "filename": "y.png"},
    )
    assert response.status_code == 200
    assert response.json()["fields"]["Photo"] == [
        {"url": "https://example.com/uploads/y.png", "filename": "y.png"}
    ]
    assert response.json()["fields"]["Title"] == "A"


def test_attach_file_rejects_invalid_url(client, configured):
    rec = configured.add("Tasks", {"Title": "A"})
    response = client.post(f"/api/airtable/Tasks/{rec['id']}/attachment/Photo", json={"url": "not a url"})
    assert response.status_code == 400
    assert len(configured.calls) == 0


def test_upstream_status_and_body_relayed(client, configured):
    configured.fail_with = (403, '{"error":"INVALID_PERMISSIONS"}')
    response = client.get("/api/airtable/Tasks")
    assert response.status_code == 403
    assert response.json() == {"error": 'Airtable API error: {"error":"INVALID_PERMISSIONS"}'}


def test_missing_record_404_relayed(client, configured):
    response = client.patch("/api/airtable/Tasks/recMissing", json={"fields": {"Status": "Closed"}})
    assert response.status_code == 404


def test_transport_failure_is_500(client, configured):
    configured.raise_with = connection_error()
    response = client.delete("/api/airtable/Tasks/rec001")
    assert response.status_code == 500
    assert "connection refused" in response.json()["error"]


def test_field_classification(client, configured):
    configured.add("Tasks", {"Title": "A", "Status": "Open", "Screenshot": [], "Attachments": [], "Created Time": "x"})
    body = client.get("/api/airtable/Tasks/fields").json()
    # "Screenshot" is not on the read-only list, but it is still the upload target
    assert body["editable"] == ["Title", "Status", "Screenshot"]
    assert body["read_only"] == ["Attachments", "Created Time"]
    assert body["attachment_target"] == "Screenshot"


def test_attachment_url_forwarded_as_given(client, configured):
    rec = configured.add("Tasks", {"Title": "A"})
    response = client.post(
        f"/api/airtable/Tasks/{rec['id']}/attachment/Photo",
        json={"url": "https://cdn.example.com"},
    )
    assert response.status_code == 200
    assert configured.calls[-1]["json"] == {"fields": {"Photo": [{"url": "https://cdn.example.com"}]}}


def test_non_json_success_body_is_error_json(client, configured):
    configured.non_json_body = "<html>gateway</html>"
    response = client.get("/api/airtable/Tasks")
    assert response.status_code == 502
    assert "error" in response.json()


def test_one_session_per_saved_config(client, configured):
    state = get_state()
    first = state.client()
    client.get("/api/airtable/Tasks")
    assert state.client() is first
    state.save_config(TableConfig(api_key="key2", base_id="appBase", table_name="Tasks"))
    assert configured.closed
    assert state.client() is not first
