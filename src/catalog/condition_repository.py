import json
import logging
from pathlib import Path
from threading import Lock
from typing import Any

from src.catalog.models import Condition

LOGGER = logging.getLogger(__name__)
DEFAULT_CONDITIONS_PATH = Path(__file__).with_name("default_conditions.json")
REQUIRED_CITATION_FIELDS = ("section", "diagnostic_code", "title", "url")


class ConditionValidationError(ValueError):
    pass


def _validate(data: Any) -> None:
    if not isinstance(data, list):
        raise ConditionValidationError("conditions.json must be a JSON array []")

    seen: set[str] = set()
    for index, item in enumerate(data):
        if not isinstance(item, dict):
            raise ConditionValidationError(f"Condition at index {index} must be a JSON object")

        condition_id = item.get("id")
        if not condition_id or not isinstance(condition_id, str):
            raise ConditionValidationError(f"Condition at index {index} is missing a string 'id'")
        if condition_id in seen:
            raise ConditionValidationError(f"Duplicate id found: '{condition_id}'")
        seen.add(condition_id)

        name = item.get("name")
        if not name or not isinstance(name, str):
            raise ConditionValidationError(f"Condition '{condition_id}' is missing a string 'name'")

        refs = item.get("cfr")
        if not isinstance(refs, list) or not refs:
            raise ConditionValidationError(f"Condition '{condition_id}' must have a non-empty 'cfr' array")

        for ref_index, ref in enumerate(refs):
            if not isinstance(ref, dict) or not all(ref.get(field) for field in REQUIRED_CITATION_FIELDS):
                raise ConditionValidationError(
                    f"Condition '{condition_id}' cfr[{ref_index}] missing section/diagnostic_code/title/url"
                )


def parse_conditions(data: Any) -> tuple[Condition, ...]:
    """Validate raw JSON data and build the immutable condition snapshot.

    Any violation rejects the whole collection.
    """
    _validate(data)
    normalized: list[Condition] = []
    for item in data:
        payload = dict(item)
        payload["cfr"] = [{**ref, "diagnostic_code": str(ref["diagnostic_code"])} for ref in item["cfr"]]
        normalized.append(Condition.model_validate(payload))
    return tuple(normalized)


def load_conditions(conditions_path: Path | None = None) -> tuple[Condition, ...]:
    path = conditions_path or DEFAULT_CONDITIONS_PATH
    raw = path.read_text(encoding="utf-8")
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        LOGGER.error("%s is invalid JSON: %s", path, exc)
        raise

    conditions = parse_conditions(data)
    LOGGER.info("Loaded %s conditions from %s", len(conditions), path)
    return conditions


class ConditionRepository:
    """Holds the live condition snapshot and swaps it wholesale on reload."""

    def __init__(self, conditions_path: str | Path | None = None) -> None:
        self.conditions_path = Path(conditions_path) if conditions_path else DEFAULT_CONDITIONS_PATH
        self._conditions: tuple[Condition, ...] = ()
        self._lock = Lock()

    def load(self) -> tuple[Condition, ...]:
        conditions = load_conditions(self.conditions_path)
        with self._lock:
            self._conditions = conditions
        return conditions

    def reload(self) -> bool:
        try:
            self.load()
        except Exception:
            LOGGER.exception("Condition reload failed. Keeping previous snapshot of %s", self.count())
            return False
        return True

    def snapshot(self) -> tuple[Condition, ...]:
        with self._lock:
            return self._conditions

    def count(self) -> int:
        return len(self.snapshot())

    def get(self, condition_id: str) -> Condition | None:
        return next((item for item in self.snapshot() if item.id == condition_id), None)
