"""
Runtime configuration read from the process environment.
"""

import os
from dataclasses import dataclass

from explorer.models import DEFAULT_MODEL
from explorer.provider import DEFAULT_TASK_TIMEOUT


@dataclass(frozen=True)
class Settings:
    """Explorer settings."""
    runway_api_secret: str = ""
    runway_model: str = DEFAULT_MODEL
    task_timeout: float = DEFAULT_TASK_TIMEOUT
    gateway_url: str = "http://localhost:8000"
    output_dir: str = "/tmp/runway-explorer"
    http_timeout: float = DEFAULT_TASK_TIMEOUT + 60

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            runway_api_secret=os.environ.get("RUNWAYML_API_SECRET", ""),
            runway_model=os.environ.get("RUNWAY_MODEL", DEFAULT_MODEL),
            task_timeout=float(os.environ.get("RUNWAY_TASK_TIMEOUT", DEFAULT_TASK_TIMEOUT)),
            gateway_url=os.environ.get("EXPLORER_GATEWAY_URL", "http://localhost:8000").rstrip("/"),
            output_dir=os.environ.get("EXPLORER_OUTPUT_DIR", "/tmp/runway-explorer"),
            http_timeout=float(os.environ.get("EXPLORER_HTTP_TIMEOUT", DEFAULT_TASK_TIMEOUT + 60)),
        )
