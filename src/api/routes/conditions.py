import logging
from typing import Any

from fastapi import APIRouter, Depends, Query

from src.api.app_runtime import ApiRuntime
from src.api.models import BodySystemOut, IntentOut, JumpResponse, SearchHitOut, SearchResponse
from src.api.routes.deps import get_condition, get_runtime
from src.catalog.anchors import resolve_jump
from src.catalog.models import Condition
from src.catalog.presentation import cfr_summary, citation_anchors, highlight, section_anchors, system_class_name
from src.catalog.query_parser import Intent, JumpIntent, SystemFilterIntent, jump_hint, parse
from src.catalog.ranking import SearchHit, body_systems, search

router = APIRouter(prefix="/api")
LOGGER = logging.getLogger(__name__)


def _hit_out(hit: SearchHit, query: str) -> SearchHitOut:
    condition = hit.condition
    summary = cfr_summary(condition)
    primary = condition.primary_citation
    return SearchHitOut(
        id=condition.id,
        name=condition.name,
        body_system=condition.body_system,
        system_class=system_class_name(condition.body_system),
        score=hit.score,
        reason=hit.reason,
        cfr_summary=summary,
        name_html=highlight(condition.name, query),
        cfr_html=highlight(summary, query),
        primary_dc=primary.diagnostic_code if primary else None,
    )


def _intent_out(intent: Intent) -> IntentOut:
    if isinstance(intent, JumpIntent):
        return IntentOut(mode=intent.mode, target=intent.target, text=intent.text)
    if isinstance(intent, SystemFilterIntent):
        return IntentOut(mode=intent.mode, system=intent.system)
    return IntentOut(mode=intent.mode, text=intent.text)


@router.get("/conditions")
def list_conditions(runtime: ApiRuntime = Depends(get_runtime)) -> list[dict[str, Any]]:
    return [condition.model_dump(mode="json", exclude_none=True) for condition in runtime.repository.snapshot()]


@router.get("/conditions/{condition_id}")
def get_condition_detail(condition: Condition = Depends(get_condition)) -> dict[str, Any]:
    return condition.model_dump(mode="json", exclude_none=True)


@router.get("/conditions/{condition_id}/jump", response_model=JumpResponse)
def resolve_condition_jump(
    q: str = Query(default=""),
    anchors: str | None = Query(default=None),
    condition: Condition = Depends(get_condition),
) -> JumpResponse:
    intent = parse(q)
    target = jump_hint(intent, q)
    if anchors is not None:
        available = [item.strip() for item in anchors.split(",") if item.strip()]
    else:
        available = citation_anchors(condition)
    resolution = resolve_jump(target, available, section_anchors(condition))
    return JumpResponse(
        condition_id=condition.id,
        target=target,
        anchor=resolution.anchor,
        focus_notes=resolution.focus_notes,
    )


@router.get("/search", response_model=SearchResponse)
def search_conditions(
    q: str = Query(default=""),
    system: str = Query(default=""),
    runtime: ApiRuntime = Depends(get_runtime),
) -> SearchResponse:
    result = search(runtime.repository.snapshot(), q, system=system)
    LOGGER.debug("Search handled. q=%r mode=%s hits=%s", q, result.intent.mode, len(result.hits))
    return SearchResponse(
        query=result.query,
        intent=_intent_out(result.intent),
        system=result.system,
        count=len(result.hits),
        results=[_hit_out(hit, result.query) for hit in result.hits],
    )


@router.get("/systems", response_model=list[BodySystemOut])
def list_body_systems(runtime: ApiRuntime = Depends(get_runtime)) -> list[BodySystemOut]:
    return [
        BodySystemOut(name=name, system_class=system_class_name(name))
        for name in body_systems(runtime.repository.snapshot())
    ]
