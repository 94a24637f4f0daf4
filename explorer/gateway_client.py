"""
HTTP client for the generation gateway, used by the UI controllers.
"""

import json
import logging
from typing import Optional

import requests

from explorer.errors import GatewayError
from explorer.models import GenerationResult, ExplorationResult

logger = logging.getLogger(__name__)


class GatewayClient:
    """Calls ``POST /generate`` and ``POST /explore`` on the gateway server."""

    def __init__(self, base_url: str, session: Optional[requests.Session] = None, timeout: float = 660):
        """Initialize the client.

        Args:
            base_url: Gateway root URL, e.g. http://localhost:8000
            session: requests session to reuse
            timeout: Per-request timeout in seconds; must exceed the provider bound
        """
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def _post(self, path: str, payload: dict) -> dict:
        url = f"{self.base_url}{path}"
        try:
            resp = self.session.post(url, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error("Gateway request to %s failed: %s", url, e)
            raise GatewayError(str(e)) from e

        try:
            body = resp.json() if resp.content else {}
        except (json.JSONDecodeError, ValueError):
            body = {}

        if not resp.ok:
            raise GatewayError(body.get("error") if isinstance(body, dict) else None, status_code=resp.status_code)
        if not isinstance(body, dict):
            raise GatewayError(f"Invalid response from {path}", status_code=resp.status_code)
        return body

    def generate(self, front_image: str, background_image: str) -> GenerationResult:
        """Request the setting and person videos."""
        body = self._post("/generate", {"frontImage": front_image, "backgroundImage": background_image})
        return GenerationResult(
            setting_video_url=body.get("settingVideoUrl"),
            person_video_url=body.get("personVideoUrl"),
        )

    def explore(self, image: str, prompt: str) -> ExplorationResult:
        """Request one exploration video from a captured frame."""
        body = self._post("/explore", {"image": image, "prompt": prompt})
        return ExplorationResult(video_url=body.get("videoUrl"))
