import os
from contextlib import contextmanager
from typing import Iterator

from src.api.config import CatalogConfig
from src.catalog.condition_repository import DEFAULT_CONDITIONS_PATH


@contextmanager
def _temporary_env(values: dict[str, str]) -> Iterator[None]:
    previous: dict[str, str | None] = {key: os.environ.get(key) for key in values}
    try:
        for key, value in values.items():
            os.environ[key] = value
        yield
    finally:
        for key, original in previous.items():
            if original is None:
                os.environ.pop(key, None)
            else:
                os.environ[key] = original


def test_settings_env_parsing(tmp_path) -> None:  # type: ignore[no-untyped-def]
    data_path = tmp_path / "conditions.json"
    data_path.write_text("[]", encoding="utf-8")
    env_values = {
        "API_HOST": "127.0.0.1",
        "API_PORT": "8080",
        "CONDITIONS_PATH": str(data_path),
        "PROGRESS_PATH": str(tmp_path / "progress.json"),
        "RELOAD_ON_REQUEST": "true",
        "LOG_LEVEL": " debug ",
    }
    with _temporary_env(env_values):
        config = CatalogConfig(_env_file=None)

    assert config.host == "127.0.0.1"
    assert config.port == 8080
    assert config.conditions_path == str(data_path)
    assert config.reload_on_request is True
    assert config.log_level == "DEBUG"


def test_missing_default_data_file_falls_back_to_bundled(tmp_path, monkeypatch) -> None:  # type: ignore[no-untyped-def]
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("CONDITIONS_PATH", raising=False)
    config = CatalogConfig(_env_file=None)
    assert config.conditions_path == str(DEFAULT_CONDITIONS_PATH)


def test_explicit_missing_path_is_kept(tmp_path) -> None:  # type: ignore[no-untyped-def]
    missing = str(tmp_path / "missing.json")
    config = CatalogConfig(_env_file=None, conditions_path=missing)
    assert config.conditions_path == missing


def test_from_env_compatibility_method() -> None:
    config = CatalogConfig.from_env()
    assert isinstance(config, CatalogConfig)
