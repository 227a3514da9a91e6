from typing import Any

from fastapi import APIRouter, Depends

from src.api.app_runtime import ApiRuntime
from src.api.routes.deps import get_runtime

router = APIRouter()


@router.get("/health")
def health(runtime: ApiRuntime = Depends(get_runtime)) -> dict[str, Any]:
    return {
        "status": "ok",
        "condition_count": runtime.repository.count(),
        "data_path": str(runtime.repository.conditions_path),
        "reload_on_request": runtime.config.reload_on_request,
    }
