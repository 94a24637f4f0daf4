"""
Generation and exploration gateways.
Stateless request handling on top of a VideoProvider; no HTTP concerns here.
"""

import logging
from typing import Optional

from explorer.errors import InvalidInput
from explorer.models import (
    GenerationRequest, GenerationResult, ExplorationResult,
    SETTING_PROMPT, PERSON_PROMPT, DEFAULT_MODEL,
)
from explorer.provider import VideoProvider, DEFAULT_TASK_TIMEOUT

logger = logging.getLogger(__name__)


class GenerationGateway:
    """Turns validated payloads into provider tasks and maps their output."""

    def __init__(self, provider: VideoProvider, model: str = DEFAULT_MODEL,
                 timeout: float = DEFAULT_TASK_TIMEOUT):
        """Initialize the gateway.

        Args:
            provider: Provider used to run generation tasks
            model: Provider model identifier
            timeout: Bound in seconds for each task wait
        """
        self.provider = provider
        self.model = model
        self.timeout = timeout

    def generate(self, front_image: Optional[str], background_image: Optional[str]) -> GenerationResult:
        """
        Generate the setting pan and the animated person videos in parallel.

        Args:
            front_image: Front person photo as a data URI
            background_image: Background/setting photo as a data URI

        Returns:
            GenerationResult with one URL (or None) per video

        Raises:
            InvalidInput: If either image is missing
            GenerationFailed: If either task fails; there is no partial result
        """
        if not front_image or not background_image:
            raise InvalidInput("Front image and background image are required")

        setting_url, person_url = self.provider.run([
            GenerationRequest(image=background_image, prompt=SETTING_PROMPT, model=self.model),
            GenerationRequest(image=front_image, prompt=PERSON_PROMPT, model=self.model),
        ], timeout=self.timeout)

        return GenerationResult(setting_video_url=setting_url, person_video_url=person_url)

    def explore(self, image: Optional[str], prompt: Optional[str]) -> ExplorationResult:
        """
        Generate one video from a captured frame and a user prompt.

        Raises:
            InvalidInput: If the image or the prompt is missing
            GenerationFailed: If the task fails
        """
        if not image or not prompt:
            raise InvalidInput("Image and prompt are required")

        (video_url,) = self.provider.run(
            [GenerationRequest(image=image, prompt=prompt, model=self.model)],
            timeout=self.timeout,
        )
        return ExplorationResult(video_url=video_url)
