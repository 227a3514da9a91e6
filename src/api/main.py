import logging

import uvicorn
from fastapi import FastAPI

from src.api.app_runtime import ApiRuntime
from src.api.config import CatalogConfig
from src.api.routes import conditions, health, progress
from src.catalog.condition_repository import ConditionRepository
from src.catalog.progress import JsonFileProgressStore, ProgressTracker

LOGGER = logging.getLogger(__name__)


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )


def build_runtime(config: CatalogConfig) -> ApiRuntime:
    repository = ConditionRepository(config.conditions_path)
    repository.load()
    return ApiRuntime(
        config=config,
        repository=repository,
        progress=ProgressTracker(JsonFileProgressStore(config.progress_path)),
    )


def create_app(runtime: ApiRuntime | None = None) -> FastAPI:
    if runtime is None:
        config = CatalogConfig.from_env()
        _setup_logging(config.log_level)
        runtime = build_runtime(config)

    app = FastAPI(title="VA CFR Condition Catalog API", version="0.3.0")
    app.state.runtime = runtime

    app.include_router(health.router)
    app.include_router(conditions.router)
    app.include_router(progress.router)

    LOGGER.info(
        "Catalog API ready. conditions=%s data_path=%s",
        runtime.repository.count(),
        runtime.repository.conditions_path,
    )
    return app


app = create_app()


def run() -> None:
    config = app.state.runtime.config
    uvicorn.run(app, host=config.host, port=config.port)


if __name__ == "__main__":
    run()
