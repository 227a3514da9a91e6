import json

import requests

from src.catalog.condition_repository import DEFAULT_CONDITIONS_PATH
from src.client.catalog_client import CatalogClient
from src.client.main import format_detail, format_results

RAW_CONDITIONS = json.loads(DEFAULT_CONDITIONS_PATH.read_text(encoding="utf-8"))


class FakeResponse:
    def __init__(self, status_code: int, payload: object = None, text: str = "") -> None:
        self.status_code = status_code
        self._payload = payload
        self.text = text or json.dumps(payload)

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def json(self) -> object:
        if self._payload is None:
            raise ValueError("no json")
        return self._payload


class FakeSession:
    def __init__(self, responses: list[object]) -> None:
        self.responses = responses
        self.calls: list[str] = []

    def get(self, url: str, timeout: int) -> FakeResponse:  # noqa: ARG002
        self.calls.append(url)
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item  # type: ignore[return-value]


def _client(responses: list[object], retries: int = 1) -> tuple[CatalogClient, FakeSession]:
    client = CatalogClient(base_url="http://catalog.test/", retries=retries, retry_delay_sec=0)
    session = FakeSession(responses)
    client.session = session  # type: ignore[assignment]
    return client, session


def test_refresh_loads_snapshot() -> None:
    client, session = _client([FakeResponse(200, RAW_CONDITIONS)])
    assert client.refresh() is True
    assert len(client.conditions) == len(RAW_CONDITIONS)
    assert session.calls == ["http://catalog.test/api/conditions"]


def test_refresh_retries_then_succeeds() -> None:
    client, session = _client([requests.ConnectionError("down"), FakeResponse(200, RAW_CONDITIONS)])
    assert client.refresh() is True
    assert len(session.calls) == 2


def test_failed_refresh_keeps_previous_snapshot() -> None:
    client, _ = _client([FakeResponse(200, RAW_CONDITIONS), FakeResponse(500, text="boom"), FakeResponse(500, text="boom")])
    assert client.refresh() is True
    before = client.conditions
    assert client.refresh() is False
    assert client.conditions is before


def test_invalid_collection_is_rejected() -> None:
    client, _ = _client([FakeResponse(200, [{"id": "x"}])])
    assert client.refresh() is False
    assert client.conditions == ()


def test_fetch_condition_not_found() -> None:
    client, _ = _client([FakeResponse(404, {"detail": "Not found"})])
    assert client.fetch_condition("nope") is None


def test_fetch_condition_detail_and_format() -> None:
    sciatic = next(item for item in RAW_CONDITIONS if item["id"] == "sciatic-nerve")
    client, _ = _client([FakeResponse(200, sciatic)])
    condition = client.fetch_condition("sciatic-nerve")
    assert condition is not None
    lines = format_detail(condition, jump="dc 8520")
    assert lines[0] == "Sciatic Nerve Paralysis"
    assert lines[-1] == "Jumped to: jump-dc-8520"


def test_format_results() -> None:
    client, _ = _client([FakeResponse(200, RAW_CONDITIONS)])
    client.refresh()
    lines = format_results(client.conditions, "dc 8100")
    assert lines[0] == "Migraine Headaches [migraine] (Neurological)"
    assert lines[-1] == "  Matched: Diagnostic Code (score 1000)"
    assert format_results(client.conditions, "zzz")[0].startswith("No matches.")


def test_format_detail_shows_disclaimer() -> None:
    raw = dict(next(item for item in RAW_CONDITIONS if item["id"] == "tinnitus"))
    raw["disclaimer"] = "Ratings are assigned by VA, not by this tool."
    client, _ = _client([FakeResponse(200, raw)])
    condition = client.fetch_condition("tinnitus")
    assert condition is not None
    lines = format_detail(condition)
    assert lines[:2] == ["Tinnitus", "Note: Ratings are assigned by VA, not by this tool."]
