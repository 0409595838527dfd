# sdk/config.py
import os
from pathlib import Path
from pydantic import BaseModel, field_validator

DEFAULT_STORAGE_PATH = str(Path.home() / ".supergains" / "storage.json")


class Settings(BaseModel):
    api_url: str = "http://127.0.0.1:8085"
    timeout: float = 10
    inventory_ttl_ms: int = 5 * 60 * 1000
    rate_limit_pause: float = 2.0
    storage_path: str = DEFAULT_STORAGE_PATH
    log_level: str = "WARNING"

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, v: str) -> str:
        # logging only knows upper-case level names
        return v.strip().upper()

    @classmethod
    def from_env(cls, environ=None) -> "Settings":
        env = os.environ if environ is None else environ
        values = {}
        for field, var in (
            ("api_url", "SUPERGAINS_API_URL"),
            ("timeout", "SUPERGAINS_TIMEOUT"),
            ("inventory_ttl_ms", "SUPERGAINS_INVENTORY_TTL_MS"),
            ("rate_limit_pause", "SUPERGAINS_RATE_LIMIT_PAUSE"),
            ("storage_path", "SUPERGAINS_STORAGE_PATH"),
            ("log_level", "SUPERGAINS_LOG_LEVEL"),
        ):
            if env.get(var):
                values[field] = env[var]
        # pydantic coerces "10" -> 10.0 etc.
        return cls(**values)
