from dataclasses import dataclass
from typing import Iterable, Sequence

from src.catalog.models import Condition
from src.catalog.query_parser import Intent, SystemFilterIntent, parse
from src.catalog.text import normalize, short_section

DC_EXACT = 1000
DC_CONTAINS = 500
ID_EXACT = 450
ID_CONTAINS = 200
NAME_EXACT = 420
NAME_STARTS_WITH = 260
NAME_CONTAINS = 160
ALIAS_EXACT = 180
ALIAS_STARTS_WITH = 120
ALIAS_CONTAINS = 80
SECTION_EXACT = 160
SECTION_CONTAINS = 90
SECTION_FULL_CONTAINS = 70
TITLE_CONTAINS = 60


@dataclass(frozen=True)
class CitationFields:
    dc: str
    section: str
    section_short: str
    title: str


@dataclass(frozen=True)
class SearchHit:
    condition: Condition
    score: int
    reason: str


@dataclass(frozen=True)
class SearchResult:
    intent: Intent
    query: str
    system: str
    hits: tuple[SearchHit, ...]


def _citation_fields(condition: Condition) -> list[CitationFields]:
    return [
        CitationFields(
            dc=normalize(ref.diagnostic_code),
            section=normalize(ref.section),
            section_short=short_section(ref.section),
            title=normalize(ref.title),
        )
        for ref in (condition.cfr or [])
    ]


def _aliases(condition: Condition) -> list[str]:
    return [normalize(alias) for alias in (condition.aliases or [])]


def matches(condition: Condition, query: str | None) -> bool:
    q = normalize(query)
    if not q:
        return True

    haystack = [normalize(condition.name), normalize(condition.id), *_aliases(condition)]
    for ref in _citation_fields(condition):
        haystack.extend([ref.dc, ref.section, ref.section_short, ref.title])
    return any(q in value for value in haystack)


def _tier(values: Iterable[str], q: str, exact: int, starts_with: int | None, contains: int) -> int:
    values = list(values)
    if any(value == q for value in values):
        return exact
    if starts_with is not None and any(value.startswith(q) for value in values):
        return starts_with
    if any(q in value for value in values):
        return contains
    return 0


def score(condition: Condition, query: str | None) -> int:
    """Additive relevance score of one condition for a search query.

    Each signal category contributes only its best tier (exact, starts-with,
    contains). The full-section form is a weaker fallback of the short-section
    category and only counts when the short form did not hit.
    """
    q = normalize(query)
    if not q:
        return 0

    refs = _citation_fields(condition)
    total = 0
    total += _tier((ref.dc for ref in refs), q, DC_EXACT, None, DC_CONTAINS)
    total += _tier([normalize(condition.id)], q, ID_EXACT, None, ID_CONTAINS)
    total += _tier([normalize(condition.name)], q, NAME_EXACT, NAME_STARTS_WITH, NAME_CONTAINS)
    total += _tier(_aliases(condition), q, ALIAS_EXACT, ALIAS_STARTS_WITH, ALIAS_CONTAINS)

    section_score = _tier((ref.section_short for ref in refs), q, SECTION_EXACT, None, SECTION_CONTAINS)
    if not section_score and any(q in ref.section for ref in refs):
        section_score = SECTION_FULL_CONTAINS
    total += section_score

    if any(q in ref.title for ref in refs):
        total += TITLE_CONTAINS
    return total


def explain_match(condition: Condition, query: str | None) -> str:
    """Label describing why a condition matched.

    Categories are checked in a fixed order and the first hit wins, so a
    diagnostic code or section hit is reported before a name, id or alias hit
    regardless of which one scores higher.
    """
    q = normalize(query)
    if not q:
        return ""

    refs = _citation_fields(condition)
    for ref in refs:
        if ref.dc == q:
            return "Diagnostic Code"
        if q in ref.dc:
            return "Diagnostic Code (partial)"

    for ref in refs:
        if q in (ref.section_short, ref.section):
            return "CFR Section"
        if q in ref.section_short or q in ref.section:
            return "CFR Section (partial)"

    name = normalize(condition.name)
    if name == q:
        return "Name"
    if name.startswith(q):
        return "Name (starts with)"
    if q in name:
        return "Name (contains)"

    condition_id = normalize(condition.id)
    if condition_id == q:
        return "ID"
    if q in condition_id:
        return "ID (partial)"

    aliases = _aliases(condition)
    if any(alias == q for alias in aliases):
        return "Alias"
    if any(alias.startswith(q) for alias in aliases):
        return "Alias (starts with)"
    if any(q in alias for alias in aliases):
        return "Alias (contains)"

    if any(q in ref.title for ref in refs):
        return "CFR Title"

    return "Match"


def rank(conditions: Sequence[Condition], query: str | None) -> list[Condition]:
    # sorted() is stable, so equal scores keep their incoming order.
    scored = [(score(condition, query), condition) for condition in conditions]
    return [condition for _, condition in sorted(scored, key=lambda item: item[0], reverse=True)]


def resolve_system(target: str, systems: Iterable[str]) -> str:
    """Best-effort match of a typed system name against the known body systems."""
    wanted = normalize(target)
    if not wanted:
        return ""
    options = [system for system in systems if system]
    for predicate in (
        lambda option: option.lower() == wanted,
        lambda option: wanted in option.lower(),
        lambda option: option.lower() in wanted,
    ):
        found = next((option for option in options if predicate(option)), None)
        if found is not None:
            return found
    return ""


def body_systems(conditions: Iterable[Condition]) -> list[str]:
    return sorted({condition.body_system for condition in conditions if condition.body_system})


def search(conditions: Sequence[Condition], raw: str | None, system: str = "") -> SearchResult:
    """Run the full filter, match, score and sort pipeline over a snapshot.

    ``system`` is the explicitly selected body system. A ``system <name>``
    command overrides it when the name resolves to a known system.
    """
    intent = parse(raw)
    query = intent.text

    selected = system or ""
    if isinstance(intent, SystemFilterIntent) and intent.system:
        selected = resolve_system(intent.system, body_systems(conditions)) or selected

    filtered = [
        condition
        for condition in conditions
        if (not selected or condition.body_system == selected) and matches(condition, query)
    ]

    if normalize(query):
        ordered = rank(filtered, query)
    else:
        ordered = sorted(filtered, key=lambda condition: (condition.name or "").lower())

    hits = tuple(
        SearchHit(condition=condition, score=score(condition, query), reason=explain_match(condition, query))
        for condition in ordered
    )
    return SearchResult(intent=intent, query=query, system=selected, hits=hits)
