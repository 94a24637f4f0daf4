"""
Exploration controller for the Runway explorer.
Owns the exploration chain and binds every gateway response to the request
that produced it.
"""

import logging
from concurrent.futures import Executor, Future
from typing import Dict, Optional, Tuple

from explorer import chain
from explorer.chain import ExplorationState
from explorer.errors import GatewayError
from explorer.frame_capture import VideoSurface, capture_frame
from explorer.gateway_client import GatewayClient
from explorer.models import ExplorationNode, ExplorationResult
from explorer.status import TaskStatus

logger = logging.getLogger(__name__)


class ExplorationController:
    """Handles frame capture, exploration requests and chain navigation."""

    def __init__(self, client: GatewayClient, executor: Executor):
        self.client = client
        self.executor = executor
        self.state = ExplorationState()
        self._inflight: Dict[int, Tuple[Future, str, str]] = {}

    def capture(self, surface: VideoSurface) -> Optional[str]:
        """
        Capture the paused frame of ``surface`` as the next exploration seed.

        Returns:
            The captured data URI, or None if nothing was captured
        """
        # The in-flight request still owns the current frame
        if self.state.task.is_busy:
            return None

        frame = capture_frame(surface)
        if frame is not None:
            self.state = chain.set_pending_frame(self.state, frame)
        return frame

    def discard_frame(self) -> None:
        self.state = chain.set_pending_frame(self.state, None)

    def can_explore(self, prompt: str) -> bool:
        return bool(self.state.pending_frame and prompt and prompt.strip()) and not self.state.task.is_busy

    def submit(self, prompt: str) -> Optional[int]:
        """
        Send the pending frame and ``prompt`` to the exploration gateway.

        Returns:
            Token of the submitted request, or None if nothing was submitted
        """
        if not self.can_explore(prompt):
            return None

        prompt = prompt.strip()
        frame = self.state.pending_frame
        self.state, token = chain.begin_request(self.state)
        future = self.executor.submit(self.client.explore, frame, prompt)
        self._inflight[token] = (future, frame, prompt)
        return token

    def poll(self) -> bool:
        """
        Apply finished requests; responses for abandoned requests are dropped.

        Returns:
            True if the state changed
        """
        before = self.state
        for token, (future, frame, prompt) in list(self._inflight.items()):
            if not future.done():
                if self.state.task.status == TaskStatus.GENERATING:
                    self.state = chain.mark_polling(self.state, token)
                continue

            del self._inflight[token]
            if not chain.is_active(self.state, token):
                logger.info("Discarding stale exploration result %s", token)
                continue

            try:
                result: ExplorationResult = future.result()
            except GatewayError as e:
                self.state = chain.fail_request(self.state, token, str(e))
            except Exception as e:
                logger.exception("Exploration request %s failed", token)
                self.state = chain.fail_request(self.state, token, str(e) or "An error occurred")
            else:
                node = ExplorationNode(prompt=prompt, source_frame_image=frame, video_url=result.video_url)
                self.state = chain.complete_request(self.state, token, node)
        return self.state != before

    def navigate_to(self, index: int) -> None:
        self.state = chain.navigate_to(self.state, index)

    def reset(self) -> None:
        self.state = chain.reset(self.state)

    @property
    def has_pending(self) -> bool:
        return bool(self._inflight)
