from dataclasses import dataclass

from src.api.config import CatalogConfig
from src.catalog.condition_repository import ConditionRepository
from src.catalog.progress import ProgressTracker


@dataclass
class ApiRuntime:
    config: CatalogConfig
    repository: ConditionRepository
    progress: ProgressTracker
