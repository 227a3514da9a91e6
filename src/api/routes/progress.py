import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import PlainTextResponse

from src.api.app_runtime import ApiRuntime
from src.api.models import EvidenceResponse, EvidenceUpdate, NotesPayload, NotesResponse
from src.api.routes.deps import get_condition, get_runtime
from src.catalog.models import Condition
from src.catalog.progress import export_filename

router = APIRouter(prefix="/api/progress")
LOGGER = logging.getLogger(__name__)


def _evidence_response(runtime: ApiRuntime, condition: Condition) -> EvidenceResponse:
    state = runtime.progress.load_evidence(condition.id)
    total = len(condition.evidence_checklist)
    return EvidenceResponse(
        condition_id=condition.id,
        checked={index: checked for index, checked in state.items() if index < total},
        completed=runtime.progress.completed_count(condition),
        total=total,
    )


@router.get("/{condition_id}/notes", response_model=NotesResponse)
def get_notes(condition: Condition = Depends(get_condition), runtime: ApiRuntime = Depends(get_runtime)) -> NotesResponse:
    return NotesResponse(condition_id=condition.id, notes=runtime.progress.load_notes(condition.id))


@router.put("/{condition_id}/notes", response_model=NotesResponse)
def put_notes(
    payload: NotesPayload,
    condition: Condition = Depends(get_condition),
    runtime: ApiRuntime = Depends(get_runtime),
) -> NotesResponse:
    runtime.progress.save_notes(condition.id, payload.notes)
    return NotesResponse(condition_id=condition.id, notes=payload.notes)


@router.get("/{condition_id}/evidence", response_model=EvidenceResponse)
def get_evidence(condition: Condition = Depends(get_condition), runtime: ApiRuntime = Depends(get_runtime)) -> EvidenceResponse:
    return _evidence_response(runtime, condition)


@router.put("/{condition_id}/evidence", response_model=EvidenceResponse)
def put_evidence(
    update: EvidenceUpdate,
    condition: Condition = Depends(get_condition),
    runtime: ApiRuntime = Depends(get_runtime),
) -> EvidenceResponse:
    if update.index >= len(condition.evidence_checklist):
        raise HTTPException(status_code=422, detail="Checklist index out of range")
    runtime.progress.set_evidence_item(condition.id, update.index, update.checked)
    LOGGER.info("Checklist updated. condition_id=%s index=%s checked=%s", condition.id, update.index, update.checked)
    return _evidence_response(runtime, condition)


@router.delete("/{condition_id}/evidence", response_model=EvidenceResponse)
def clear_evidence(condition: Condition = Depends(get_condition), runtime: ApiRuntime = Depends(get_runtime)) -> EvidenceResponse:
    runtime.progress.clear_evidence(condition.id)
    return _evidence_response(runtime, condition)


@router.get("/{condition_id}/export", response_class=PlainTextResponse)
def export_checklist(condition: Condition = Depends(get_condition), runtime: ApiRuntime = Depends(get_runtime)) -> PlainTextResponse:
    text = runtime.progress.export_checklist_text(condition)
    headers = {"Content-Disposition": f'attachment; filename="{export_filename(condition.id)}"'}
    return PlainTextResponse(text, headers=headers)
