import json
import logging
import re
from pathlib import Path
from threading import Lock
from typing import Callable, Protocol

from src.catalog.models import Condition

LOGGER = logging.getLogger(__name__)


class ProgressStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def update(self, key: str, fn: Callable[[str | None], str]) -> str: ...


class InMemoryProgressStore:
    def __init__(self, values: dict[str, str] | None = None) -> None:
        self._values: dict[str, str] = dict(values or {})
        self._lock = Lock()

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._values[key] = value

    def update(self, key: str, fn: Callable[[str | None], str]) -> str:
        with self._lock:
            value = fn(self._values.get(key))
            self._values[key] = value
            return value


class JsonFileProgressStore:
    """Key/value store persisted as a single JSON object on local disk."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._lock = Lock()

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            LOGGER.warning("Progress file is not valid JSON, starting empty: path=%s error=%s", self.path, exc)
            return {}
        return {str(key): str(value) for key, value in data.items()} if isinstance(data, dict) else {}

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._read().get(key)

    def _write(self, data: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        with self._lock:
            data = self._read()
            data[key] = value
            self._write(data)

    def update(self, key: str, fn: Callable[[str | None], str]) -> str:
        # Read, transform and write happen under one lock hold.
        with self._lock:
            data = self._read()
            value = fn(data.get(key))
            data[key] = value
            self._write(data)
            return value


def notes_key(condition_id: str) -> str:
    return f"notes:{condition_id}"


def evidence_key(condition_id: str) -> str:
    return f"evidence:{condition_id}"


class ProgressTracker:
    def __init__(self, store: ProgressStore) -> None:
        self.store = store

    def load_notes(self, condition_id: str) -> str:
        return self.store.get(notes_key(condition_id)) or ""

    def save_notes(self, condition_id: str, text: str | None) -> None:
        self.store.set(notes_key(condition_id), text or "")

    def clear_notes(self, condition_id: str) -> None:
        self.save_notes(condition_id, "")

    @staticmethod
    def _decode_evidence(condition_id: str, raw: str | None) -> dict[int, bool]:
        if not raw:
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            LOGGER.warning("Ignoring unreadable checklist state for %s", condition_id)
            return {}
        if not isinstance(data, dict):
            return {}
        state: dict[int, bool] = {}
        for key, value in data.items():
            try:
                state[int(key)] = bool(value)
            except (TypeError, ValueError):
                continue
        return state

    @staticmethod
    def _encode_evidence(state: dict[int, bool] | None) -> str:
        return json.dumps({str(index): bool(checked) for index, checked in (state or {}).items()})

    def load_evidence(self, condition_id: str) -> dict[int, bool]:
        return self._decode_evidence(condition_id, self.store.get(evidence_key(condition_id)))

    def save_evidence(self, condition_id: str, state: dict[int, bool] | None) -> None:
        self.store.set(evidence_key(condition_id), self._encode_evidence(state))

    def set_evidence_item(self, condition_id: str, index: int, checked: bool) -> dict[int, bool]:
        def _apply(raw: str | None) -> str:
            state = self._decode_evidence(condition_id, raw)
            state[index] = checked
            return self._encode_evidence(state)

        return self._decode_evidence(condition_id, self.store.update(evidence_key(condition_id), _apply))

    def clear_evidence(self, condition_id: str) -> None:
        self.save_evidence(condition_id, {})

    def completed_count(self, condition: Condition) -> int:
        state = self.load_evidence(condition.id)
        return sum(1 for index in range(len(condition.evidence_checklist)) if state.get(index))

    def export_checklist_text(self, condition: Condition) -> str:
        state = self.load_evidence(condition.id)
        lines = [f"{condition.name} — Evidence Checklist", "(Educational tool; not legal advice)", ""]
        for index, item in enumerate(condition.evidence_checklist):
            mark = "[x]" if state.get(index) else "[ ]"
            lines.append(f"{mark} {item}")
        lines.extend(["", "", "Notes:"])
        notes = self.load_notes(condition.id).strip()
        lines.append(notes or "(none)")
        lines.extend(["", "Source links:"])
        for ref in condition.cfr:
            lines.append(f"- {ref.section} DC {ref.diagnostic_code}: {ref.url}")
        return "\n".join(lines)


def export_filename(condition_id: str) -> str:
    safe = re.sub(r"[^a-z0-9_-]+", "_", condition_id or "condition", flags=re.IGNORECASE)
    return f"{safe}_evidence_checklist.txt"
