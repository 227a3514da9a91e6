from pydantic import BaseModel, Field


class SearchHitOut(BaseModel):
    id: str
    name: str
    body_system: str
    system_class: str
    score: int
    reason: str
    cfr_summary: str
    name_html: str
    cfr_html: str
    primary_dc: str | None = None


class IntentOut(BaseModel):
    mode: str
    target: str | None = None
    system: str | None = None
    text: str = ""


class SearchResponse(BaseModel):
    query: str
    intent: IntentOut
    system: str
    count: int
    results: list[SearchHitOut] = Field(default_factory=list)


class JumpResponse(BaseModel):
    condition_id: str
    target: str
    anchor: str | None
    focus_notes: bool = False


class BodySystemOut(BaseModel):
    name: str
    system_class: str


class NotesPayload(BaseModel):
    notes: str = ""


class NotesResponse(BaseModel):
    condition_id: str
    notes: str


class EvidenceUpdate(BaseModel):
    index: int = Field(ge=0)
    checked: bool


class EvidenceResponse(BaseModel):
    condition_id: str
    checked: dict[int, bool] = Field(default_factory=dict)
    completed: int
    total: int
