from fastapi import Depends, HTTPException, Request

from src.api.app_runtime import ApiRuntime
from src.catalog.models import Condition


def get_runtime(request: Request) -> ApiRuntime:
    runtime = getattr(request.app.state, "runtime", None)
    if runtime is None:
        raise RuntimeError("ApiRuntime is not initialized.")
    if runtime.config.reload_on_request:
        runtime.repository.reload()
    return runtime


def get_condition(condition_id: str, runtime: ApiRuntime = Depends(get_runtime)) -> Condition:
    condition = runtime.repository.get(condition_id)
    if condition is None:
        raise HTTPException(status_code=404, detail="Not found")
    return condition
