import html
import re

from src.catalog.anchors import (
    CFR_ANCHOR,
    EVIDENCE_ANCHOR,
    NOTES_ANCHOR,
    RATING_ANCHOR,
    REFS_ANCHOR,
    dc_anchor,
    section_anchor,
)
from src.catalog.models import Condition
from src.catalog.text import display_section, normalize

_CLASS_STRIP = re.compile(r"[^a-z0-9]+")

# Common label variants map onto stable badge classes.
_SYSTEM_CLASSES: tuple[tuple[tuple[str, ...], str], ...] = (
    (("mental",), "sys-mental-health"),
    (("neuro",), "sys-neurological"),
    (("musculo", "ortho"), "sys-musculoskeletal"),
    (("auditory",), "sys-ear"),
    (("resp",), "sys-respiratory"),
    (("cardio", "heart"), "sys-cardiovascular"),
)


def system_class_name(body_system: str | None) -> str:
    label = normalize(body_system)
    if not label:
        return ""
    if label == "ear":
        return "sys-ear"
    for keywords, class_name in _SYSTEM_CLASSES:
        if any(keyword in label for keyword in keywords):
            return class_name
    return f"sys-{_CLASS_STRIP.sub('-', label)}"


def cfr_summary(condition: Condition, limit: int = 2) -> str:
    parts: list[str] = []
    for ref in (condition.cfr or [])[:limit]:
        short = display_section(ref.section)
        line = f"§ {short}" if short else (ref.section or "")
        if ref.diagnostic_code:
            line += f" • DC {ref.diagnostic_code}"
        if ref.title:
            line += f" • {ref.title}"
        parts.append(line)
    return " | ".join(parts)


def highlight(text: str | None, query: str | None) -> str:
    """HTML-escape ``text`` and wrap case-insensitive hits of ``query`` in <mark>."""
    escaped = html.escape(text or "")
    q = normalize(query)
    if not q:
        return escaped
    pattern = re.compile(re.escape(html.escape(q)), re.IGNORECASE)
    return pattern.sub(lambda match: f'<mark class="hl">{match.group(0)}</mark>', escaped)


def citation_anchors(condition: Condition) -> list[str]:
    anchors: list[str] = []
    for ref in condition.cfr or []:
        for anchor in (dc_anchor(ref.diagnostic_code), section_anchor(display_section(ref.section))):
            if anchor and anchor not in anchors:
                anchors.append(anchor)
    return anchors


def section_anchors(condition: Condition) -> list[str]:
    # The references block is only rendered when the condition has a primary citation.
    anchors = [CFR_ANCHOR]
    if condition.primary_citation is not None:
        anchors.append(REFS_ANCHOR)
    anchors.extend([RATING_ANCHOR, EVIDENCE_ANCHOR, NOTES_ANCHOR])
    return anchors


def rating_lines(condition: Condition) -> list[str]:
    logic = condition.rating_logic
    if logic is None:
        return []
    if logic.is_thresholds:
        return [
            f"Flexion limited to {item.flexion_deg}° → {item.rating_percent}%"
            for item in logic.thresholds
        ]
    if logic.is_severity_ladder:
        return [f"{item.level} → {item.rating_percent}%" for item in logic.levels]
    return [logic.summary] if logic.summary else []
