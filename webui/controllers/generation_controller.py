"""
Generation controller for the Runway explorer.
Runs the main two-video generation in the background and tracks its status.
"""

import logging
from concurrent.futures import Executor, Future
from typing import Dict, List, Optional

from explorer.errors import GatewayError
from explorer.gateway_client import GatewayClient
from explorer.image_encoding import file_to_data_uri
from explorer.models import ImageSlot, GenerationResult
from explorer.status import (
    GenerationState, TaskStatus,
    begin_generation, advance_generation, complete_generation, fail_generation,
)

logger = logging.getLogger(__name__)

FRONT_KEY = "front"
BACKGROUND_KEY = "background"


def find_slot(slots: List[ImageSlot], key: str) -> Optional[ImageSlot]:
    return next((slot for slot in slots if slot.key == key), None)


def required_slots_filled(slots: List[ImageSlot]) -> bool:
    """Front and background are the only slots the gateway needs."""
    front = find_slot(slots, FRONT_KEY)
    background = find_slot(slots, BACKGROUND_KEY)
    return bool(front and front.is_filled and background and background.is_filled)


class GenerationController:
    """Handles the coordination of the main generation workflow."""

    def __init__(self, client: GatewayClient, executor: Executor):
        """Initialize the generation controller.

        Args:
            client: Gateway client
            executor: Executor that runs gateway calls off the UI thread
        """
        self.client = client
        self.executor = executor
        self.state = GenerationState()
        self._inflight: Dict[int, Future] = {}

    def can_generate(self, slots: List[ImageSlot]) -> bool:
        return required_slots_filled(slots) and not self.state.task.is_busy

    def start(self, slots: List[ImageSlot]) -> Optional[int]:
        """
        Encode the required images and submit them to the gateway.

        Args:
            slots: Intake slots

        Returns:
            Token of the submitted request, or None if generation is not allowed
        """
        if not self.can_generate(slots):
            return None

        self.state = begin_generation(self.state)
        token = self.state.task.token

        try:
            front = find_slot(slots, FRONT_KEY)
            background = find_slot(slots, BACKGROUND_KEY)
            front_uri = file_to_data_uri(front.raw_image, mime_type=front.mime_type)
            background_uri = file_to_data_uri(background.raw_image, mime_type=background.mime_type)
        except (ValueError, OSError) as e:
            self.state = fail_generation(self.state, token, f"Could not read images: {e}")
            return token

        self.state = advance_generation(
            self.state, token, TaskStatus.GENERATING,
            "Sending to Runway ML... This may take a few minutes."
        )
        self._inflight[token] = self.executor.submit(self.client.generate, front_uri, background_uri)
        return token

    def poll(self) -> bool:
        """
        Apply finished requests to the state.

        Returns:
            True if the state changed
        """
        before = self.state
        for token, future in list(self._inflight.items()):
            if not future.done():
                if self.state.task.status == TaskStatus.GENERATING:
                    self.state = advance_generation(
                        self.state, token, TaskStatus.POLLING,
                        "Videos are being generated... Polling for results."
                    )
                continue

            del self._inflight[token]
            try:
                result: GenerationResult = future.result()
            except GatewayError as e:
                self.state = fail_generation(self.state, token, str(e))
            except Exception as e:
                logger.exception("Generation request %s failed", token)
                self.state = fail_generation(self.state, token, str(e) or "An error occurred")
            else:
                if token != self.state.task.token:
                    logger.info("Discarding stale generation result %s", token)
                self.state = complete_generation(self.state, token, result)
        return self.state != before

    @property
    def has_pending(self) -> bool:
        return bool(self._inflight)

    @property
    def result(self) -> Optional[GenerationResult]:
        return self.state.result
