from pathlib import Path
from typing import Any

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.catalog.condition_repository import DEFAULT_CONDITIONS_PATH

DEFAULT_DATA_PATH = "data/conditions.json"


class CatalogConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    host: str = Field(default="0.0.0.0", validation_alias="API_HOST")
    port: int = Field(default=3000, validation_alias="API_PORT")
    conditions_path: str = Field(default=DEFAULT_DATA_PATH, validation_alias="CONDITIONS_PATH")
    progress_path: str = Field(default="data/progress/progress.json", validation_alias="PROGRESS_PATH")
    reload_on_request: bool = Field(default=False, validation_alias="RELOAD_ON_REQUEST")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_log_level(cls, value: Any) -> str:
        text = str(value or "").strip().upper()
        return text or "INFO"

    @model_validator(mode="after")
    def _fallback_to_bundled_conditions(self) -> "CatalogConfig":
        if self.conditions_path == DEFAULT_DATA_PATH and not Path(self.conditions_path).exists():
            self.conditions_path = str(DEFAULT_CONDITIONS_PATH)
        return self

    @classmethod
    def from_env(cls) -> "CatalogConfig":
        return cls()
