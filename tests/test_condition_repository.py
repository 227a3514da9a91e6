import json
from pathlib import Path

import pytest

from src.catalog.condition_repository import (
    DEFAULT_CONDITIONS_PATH,
    ConditionRepository,
    ConditionValidationError,
    load_conditions,
    parse_conditions,
)


def _raw(condition_id: str = "tinnitus", **overrides: object) -> dict:
    item = {
        "id": condition_id,
        "name": "Tinnitus",
        "body_system": "Ear",
        "cfr": [
            {
                "section": "38 CFR § 4.87",
                "diagnostic_code": "6260",
                "title": "Schedule of ratings - ear",
                "url": "https://example.test/4.87",
            }
        ],
    }
    item.update(overrides)
    return item


def _write(path: Path, data: object) -> Path:
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def test_bundled_conditions_are_valid() -> None:
    conditions = load_conditions(DEFAULT_CONDITIONS_PATH)
    ids = [condition.id for condition in conditions]
    assert len(ids) == len(set(ids))
    assert all(condition.cfr for condition in conditions)


def test_parse_conditions_returns_immutable_snapshot() -> None:
    conditions = parse_conditions([_raw()])
    assert isinstance(conditions, tuple)
    assert conditions[0].aliases == []
    assert conditions[0].cfr[0].diagnostic_code == "6260"


def test_numeric_diagnostic_code_is_coerced_to_string() -> None:
    raw = _raw()
    raw["cfr"][0]["diagnostic_code"] = 6260
    assert parse_conditions([raw])[0].cfr[0].diagnostic_code == "6260"


@pytest.mark.parametrize(
    ("data", "message"),
    [
        ({"id": "x"}, "must be a JSON array"),
        ([_raw(condition_id="")], "missing a string 'id'"),
        ([_raw(), _raw()], "Duplicate id found: 'tinnitus'"),
        ([_raw(name=None)], "missing a string 'name'"),
        ([_raw(cfr=[])], "non-empty 'cfr' array"),
        ([_raw(cfr=[{"section": "38 CFR § 4.87", "diagnostic_code": "6260", "title": "t"}])], "cfr[0] missing"),
    ],
)
def test_invalid_collections_are_rejected(data: object, message: str) -> None:
    with pytest.raises(ConditionValidationError) as exc_info:
        parse_conditions(data)
    assert message in str(exc_info.value)


def test_invalid_json_raises(tmp_path: Path) -> None:
    path = tmp_path / "conditions.json"
    path.write_text("[{", encoding="utf-8")
    with pytest.raises(json.JSONDecodeError):
        load_conditions(path)


def test_failed_reload_keeps_previous_snapshot(tmp_path: Path) -> None:
    path = _write(tmp_path / "conditions.json", [_raw()])
    repository = ConditionRepository(path)
    repository.load()
    assert repository.count() == 1

    _write(path, [_raw(), _raw()])
    assert repository.reload() is False
    assert [condition.id for condition in repository.snapshot()] == ["tinnitus"]

    _write(path, [_raw(), _raw("hearing-loss")])
    assert repository.reload() is True
    assert repository.count() == 2
    assert repository.get("hearing-loss") is not None
    assert repository.get("missing") is None
