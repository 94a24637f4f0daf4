"""
Error taxonomy for the Runway explorer.
Raised by the core library and translated to responses at the HTTP boundary.
"""

from typing import Optional


class ExplorerError(Exception):
    """Base class for all explorer errors."""


class InvalidInput(ExplorerError):
    """A required request field was missing or empty (HTTP 400)."""

    status_code = 400


class GenerationFailed(ExplorerError):
    """The provider rejected, failed or timed out a generation task (HTTP 500)."""

    status_code = 500
    DEFAULT_MESSAGE = "Video generation failed"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.DEFAULT_MESSAGE)


class CaptureUnavailable(ExplorerError):
    """The video surface has no decodable frame to hand out."""


class GatewayError(ExplorerError):
    """A gateway call made by the UI did not return a usable result."""

    DEFAULT_MESSAGE = "Generation failed"

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message or self.DEFAULT_MESSAGE)
        self.status_code = status_code
