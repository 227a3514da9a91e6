import os
from dataclasses import dataclass


@dataclass
class ClientConfig:
    base_url: str = "http://127.0.0.1:3000"
    timeout_sec: int = 5
    retries: int = 2
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls) -> "ClientConfig":
        return cls(
            base_url=os.getenv("CATALOG_BASE_URL", "http://127.0.0.1:3000").strip(),
            timeout_sec=int(os.getenv("CATALOG_TIMEOUT_SEC", "5")),
            retries=int(os.getenv("CATALOG_RETRIES", "2")),
            log_level=os.getenv("CLIENT_LOG_LEVEL", "WARNING").upper(),
        )
