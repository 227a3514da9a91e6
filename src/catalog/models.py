from pydantic import BaseModel, ConfigDict, Field


class Citation(BaseModel):
    model_config = ConfigDict(frozen=True)

    section: str = ""
    diagnostic_code: str = ""
    title: str = ""
    url: str = ""


class Threshold(BaseModel):
    model_config = ConfigDict(frozen=True, extra="allow")

    flexion_deg: int | float | None = None
    rating_percent: int


class SeverityLevel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="allow")

    level: str
    rating_percent: int


class RatingLogic(BaseModel):
    model_config = ConfigDict(frozen=True, extra="allow")

    type: str = "summary"
    summary: str = ""
    thresholds: list[Threshold] = Field(default_factory=list)
    levels: list[SeverityLevel] = Field(default_factory=list)

    @property
    def is_thresholds(self) -> bool:
        return self.type == "thresholds" and bool(self.thresholds)

    @property
    def is_severity_ladder(self) -> bool:
        return self.type == "severity_ladder" and bool(self.levels)


class Excerpt(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: str = "Excerpt"
    text: str = ""
    source_url: str | None = None


class Condition(BaseModel):
    model_config = ConfigDict(frozen=True, extra="allow")

    id: str
    name: str = ""
    aliases: list[str] = Field(default_factory=list)
    body_system: str = ""
    cfr: list[Citation] = Field(default_factory=list)
    rating_logic: RatingLogic | None = None
    evidence_checklist: list[str] = Field(default_factory=list)
    excerpts: list[Excerpt] = Field(default_factory=list)
    disclaimer: str | None = None

    @property
    def primary_citation(self) -> Citation | None:
        return self.cfr[0] if self.cfr else None
