from urllib.parse import unquote

import requests

API_URL = "https://api.airtable.com/v0"


class FakeResponse:
    def __init__(self, status_code: int, payload=None, text: str = ""):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def json(self):
        if self._payload is None:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self._payload


class FakeAirtable:
    """Stands in for requests.Session; keeps tables in memory with Airtable's PATCH semantics."""

    def __init__(self, base_id: str = "appBase"):
        self.base_id = base_id
        self.headers = {}
        self.tables = {}
        self.calls = []
        self.fail_with = None  # (status, text)
        self.raise_with = None  # requests exception instance
        self.non_json_body = None  # 200 with this text instead of JSON
        self.closed = False
        self._next_id = 1

    def add(self, table: str, fields: dict, record_id: str | None = None) -> dict:
        if record_id is None:
            record_id = f"rec{self._next_id:03d}"
            self._next_id += 1
        record = {"id": record_id, "createdTime": "2026-01-01T00:00:00.000Z", "fields": dict(fields)}
        self.tables.setdefault(table, {})[record_id] = record
        return record

    def request(self, method, url, timeout=None, params=None, json=None):
        self.calls.append({"method": method, "url": url, "params": params, "json": json})
        if self.raise_with is not None:
            raise self.raise_with
        if self.fail_with is not None:
            status, text = self.fail_with
            return FakeResponse(status, text=text)
        if self.non_json_body is not None:
            return FakeResponse(200, text=self.non_json_body)

        parts = [unquote(p) for p in url[len(API_URL) + 1:].split("/")]
        base, table = parts[0], parts[1]
        record_id = parts[2] if len(parts) > 2 else None
        if base != self.base_id:
            return FakeResponse(404, text='{"error":"NOT_FOUND"}')
        rows = self.tables.setdefault(table, {})

        if method == "GET":
            return FakeResponse(200, {"records": list(rows.values())})
        if method == "POST":
            return FakeResponse(200, self.add(table, json["fields"]))
        if record_id not in rows:
            return FakeResponse(404, text='{"error":"NOT_FOUND"}')
        if method == "PATCH":
            rows[record_id]["fields"].update(json["fields"])
            return FakeResponse(200, rows[record_id])
        if method == "DELETE":
            del rows[record_id]
            return FakeResponse(200, {"id": record_id, "deleted": True})
        raise AssertionError(f"unexpected method {method}")

    def close(self):
        self.closed = True


def connection_error() -> requests.ConnectionError:
    return requests.ConnectionError("connection refused")
