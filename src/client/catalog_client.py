import logging
import time
from typing import Any

import requests
from pydantic import ValidationError

from src.catalog.condition_repository import ConditionValidationError, parse_conditions
from src.catalog.models import Condition


class CatalogClient:
    """Fetches the condition collection and keeps the last good snapshot.

    Searching happens locally against the snapshot, so a failed refresh
    leaves earlier results usable.
    """

    def __init__(self, base_url: str, timeout_sec: int = 5, retries: int = 2, retry_delay_sec: float = 0.4) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout_sec = timeout_sec
        self.retries = retries
        self.retry_delay_sec = retry_delay_sec
        self.logger = logging.getLogger(__name__)
        self.session = requests.Session()
        self._conditions: tuple[Condition, ...] = ()

    @property
    def conditions(self) -> tuple[Condition, ...]:
        return self._conditions

    def _get_json(self, path: str) -> Any | None:
        url = f"{self.base_url}{path}"
        last_error: Exception | None = None

        for attempt in range(1, self.retries + 2):
            try:
                response = self.session.get(url, timeout=self.timeout_sec)
                if response.status_code == 404:
                    self.logger.info("Not found: %s", url)
                    return None
                if response.ok:
                    return response.json()
                last_error = RuntimeError(f"status={response.status_code} body={response.text[:200]}")
            except (requests.RequestException, ValueError) as exc:
                last_error = exc

            self.logger.warning("Request failed (attempt %s): %s", attempt, last_error)
            time.sleep(self.retry_delay_sec)

        self.logger.error("Request failed after retries: url=%s error=%s", url, last_error)
        return None

    def refresh(self) -> bool:
        data = self._get_json("/api/conditions")
        if data is None:
            return False
        try:
            conditions = parse_conditions(data)
        except (ConditionValidationError, ValidationError) as exc:
            self.logger.error("Rejected condition collection from server: %s", exc)
            return False
        self._conditions = conditions
        self.logger.info("Fetched %s conditions", len(conditions))
        return True

    def fetch_condition(self, condition_id: str) -> Condition | None:
        data = self._get_json(f"/api/conditions/{condition_id}")
        if not isinstance(data, dict):
            return None
        try:
            return Condition.model_validate(data)
        except ValidationError as exc:
            self.logger.warning("Condition detail failed validation: id=%s error=%s", condition_id, exc)
            return None
