import re
from dataclasses import dataclass
from typing import Iterable

from src.catalog.query_parser import EVIDENCE_TARGET, Intent, JumpIntent
from src.catalog.text import normalize, section_anchor_id

NOTES_ANCHOR = "jump-notes"
EVIDENCE_ANCHOR = "jump-evidence"
REFS_ANCHOR = "jump-refs"
CFR_ANCHOR = "jump-cfr"
RATING_ANCHOR = "jump-rating"
DC_ANCHOR_PREFIX = "jump-dc-"
SECTION_ANCHOR_PREFIX = "jump-sec-"

SECTION_ANCHORS: frozenset[str] = frozenset(
    {NOTES_ANCHOR, EVIDENCE_ANCHOR, REFS_ANCHOR, CFR_ANCHOR, RATING_ANCHOR}
)
RATING_KEYWORDS: tuple[str, ...] = ("cpap", "hypersomnol", "prostrat", "flare")

_DC_TARGET = re.compile(r"^\d{3,5}$")
_SECTION_TARGET = re.compile(r"^\d+\.\d+[a-z]?$")


@dataclass(frozen=True)
class AnchorResolution:
    anchor: str | None
    focus_notes: bool = False


def dc_anchor(diagnostic_code: str | None) -> str:
    code = (diagnostic_code or "").strip()
    return f"{DC_ANCHOR_PREFIX}{code}" if code else ""


def section_anchor(short_section: str | None) -> str:
    cleaned = section_anchor_id(normalize(short_section))
    return f"{SECTION_ANCHOR_PREFIX}{cleaned}" if cleaned else ""


def _target_of(intent_or_target: Intent | str | None) -> str:
    if isinstance(intent_or_target, JumpIntent):
        return normalize(intent_or_target.target)
    if isinstance(intent_or_target, str) or intent_or_target is None:
        return normalize(intent_or_target)
    return normalize(intent_or_target.text)


def resolve_jump(
    intent_or_target: Intent | str | None,
    anchors: Iterable[str],
    section_anchors: Iterable[str] = SECTION_ANCHORS,
) -> AnchorResolution:
    """Pick the detail-view anchor a query should scroll to.

    ``anchors`` holds the citation anchors rendered for the condition
    (``jump-dc-<code>`` / ``jump-sec-<section>``). ``section_anchors`` holds
    the fixed headings of the view; a preferred heading that is missing falls
    through to the next step of the chain.
    """
    target = _target_of(intent_or_target)
    if not target:
        return AnchorResolution(anchor=None)

    available = set(anchors)
    headings = set(section_anchors)

    if target in {"notes", "note"} or "notes" in target:
        if NOTES_ANCHOR in headings:
            return AnchorResolution(anchor=NOTES_ANCHOR, focus_notes=True)
        return AnchorResolution(anchor=None, focus_notes=True)

    # Only for evidence/checklist: stands in for the trailing jump-cfr fallback.
    if target == EVIDENCE_TARGET or target == "checklist":
        if EVIDENCE_ANCHOR in headings:
            return AnchorResolution(anchor=EVIDENCE_ANCHOR)

    if _DC_TARGET.match(target):
        wanted = dc_anchor(target)
        if wanted in available:
            return AnchorResolution(anchor=wanted)
        if REFS_ANCHOR in headings:
            return AnchorResolution(anchor=REFS_ANCHOR)

    if _SECTION_TARGET.match(target):
        wanted = f"{SECTION_ANCHOR_PREFIX}{section_anchor_id(target)}"
        if wanted in available:
            return AnchorResolution(anchor=wanted)
        if CFR_ANCHOR in headings:
            return AnchorResolution(anchor=CFR_ANCHOR)

    if any(keyword in target for keyword in RATING_KEYWORDS) and RATING_ANCHOR in headings:
        return AnchorResolution(anchor=RATING_ANCHOR)

    return AnchorResolution(anchor=CFR_ANCHOR if CFR_ANCHOR in headings else None)


def resolve_anchor(
    intent_or_target: Intent | str | None,
    anchors: Iterable[str],
    section_anchors: Iterable[str] = SECTION_ANCHORS,
) -> str | None:
    return resolve_jump(intent_or_target, anchors, section_anchors).anchor
