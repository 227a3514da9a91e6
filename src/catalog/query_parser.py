import re
from dataclasses import dataclass
from typing import Callable, ClassVar, Union

NOTES_TARGET = "notes"
EVIDENCE_TARGET = "evidence"

_SEPARATORS = re.compile(r"[:=]")
_WHITESPACE = re.compile(r"\s+")
_DC_COMMAND = re.compile(r"^(dc)\s+(\d{3,5})$")
_SECTION_COMMAND = re.compile(r"^(sec|section|§)\s+([0-9]+\.[0-9]+[a-z]?)$")
_BARE_SECTION = re.compile(r"^§?([0-9]+\.[0-9]+[a-z]?)$")
_SYSTEM_COMMAND = re.compile(r"^(system|sys)\s+(.+)$")

_QUICK_JUMPS: dict[str, str] = {
    "notes": NOTES_TARGET,
    "note": NOTES_TARGET,
    "evidence": EVIDENCE_TARGET,
    "checklist": EVIDENCE_TARGET,
}


@dataclass(frozen=True)
class JumpIntent:
    target: str
    text: str = ""
    mode: ClassVar[str] = "jump"


@dataclass(frozen=True)
class SystemFilterIntent:
    system: str
    mode: ClassVar[str] = "system"

    @property
    def text(self) -> str:
        return ""


@dataclass(frozen=True)
class TextIntent:
    text: str
    mode: ClassVar[str] = "text"


Intent = Union[JumpIntent, SystemFilterIntent, TextIntent]


@dataclass(frozen=True)
class QueryInput:
    raw: str
    normalized: str


Rule = Callable[[QueryInput], Intent | None]


def normalize_command(raw: str | None) -> str:
    # "DC:8100" -> "dc 8100"
    lowered = (raw or "").strip().lower()
    return _WHITESPACE.sub(" ", _SEPARATORS.sub(" ", lowered)).strip()


def _quick_jump(query: QueryInput) -> Intent | None:
    target = _QUICK_JUMPS.get(query.normalized)
    if target is None:
        return None
    return JumpIntent(target=target)


def _dc_command(query: QueryInput) -> Intent | None:
    match = _DC_COMMAND.match(query.normalized)
    if not match:
        return None
    return JumpIntent(target=match.group(2), text=match.group(2))


def _section_command(query: QueryInput) -> Intent | None:
    match = _SECTION_COMMAND.match(query.normalized)
    if not match:
        return None
    return JumpIntent(target=match.group(2), text=match.group(2))


def _bare_section(query: QueryInput) -> Intent | None:
    # A bare decimal such as "4.124a" stays a text search unless the user typed "§".
    if "§" not in query.raw:
        return None
    match = _BARE_SECTION.match(query.normalized)
    if not match:
        return None
    return JumpIntent(target=match.group(1), text=match.group(1))


def _system_command(query: QueryInput) -> Intent | None:
    match = _SYSTEM_COMMAND.match(query.normalized)
    if not match:
        return None
    return SystemFilterIntent(system=match.group(2).strip())


RULES: tuple[tuple[str, Rule], ...] = (
    ("quick_jump", _quick_jump),
    ("dc_command", _dc_command),
    ("section_command", _section_command),
    ("bare_section", _bare_section),
    ("system_command", _system_command),
)


def parse(raw: str | None) -> Intent:
    """Turn raw search box input into a structured intent.

    Rules are tried in order and the first one that produces an intent wins.
    Anything no rule claims is a plain text search over the trimmed input with
    its original casing kept for highlighting.
    """
    text = (raw or "").strip()
    query = QueryInput(raw=text, normalized=normalize_command(text))
    for _name, rule in RULES:
        intent = rule(query)
        if intent is not None:
            return intent
    return TextIntent(text=text)


def jump_hint(intent: Intent, raw: str | None) -> str:
    # Selecting a result carries the jump target, or the raw input otherwise.
    if isinstance(intent, JumpIntent):
        return intent.target
    return (raw or "").strip()
