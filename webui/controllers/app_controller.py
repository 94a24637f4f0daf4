"""
Main application controller for the Runway explorer.
Coordinates all business logic and owns the session's explicit state.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional

from explorer.cache import VideoCache
from explorer.frame_capture import VideoSurface
from explorer.gateway_client import GatewayClient
from explorer.models import ImageSlot, ExplorationNode
from explorer.settings import Settings

from .generation_controller import GenerationController
from .exploration_controller import ExplorationController
from .cache_controller import CacheController

logger = logging.getLogger(__name__)


class AppController:
    """Main application controller coordinating all operations."""

    def __init__(self, settings: Optional[Settings] = None, client: Optional[GatewayClient] = None,
                 cache: Optional[VideoCache] = None):
        """Initialize the application controller."""
        self.settings = settings or Settings.from_env()
        self.client = client or GatewayClient(self.settings.gateway_url, timeout=self.settings.http_timeout)
        self.executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix="gateway")

        self.generation_controller = GenerationController(self.client, self.executor)
        self.exploration_controller = ExplorationController(self.client, self.executor)
        self.cache_controller = CacheController(cache or VideoCache(self.settings.output_dir))

    def periodic_cleanup(self) -> None:
        """Perform periodic cleanup of downloaded videos."""
        self.cache_controller.periodic_cleanup()

    # Main generation

    def can_generate(self, slots: List[ImageSlot]) -> bool:
        return self.generation_controller.can_generate(slots)

    def generate(self, slots: List[ImageSlot]) -> Optional[int]:
        """
        Start the two-video generation; a new generation returns the chain to its root.

        Returns:
            Request token, or None if the required slots are not filled
        """
        token = self.generation_controller.start(slots)
        if token is not None:
            self.exploration_controller.reset()
            self._release_hidden_surfaces()
        return token

    # Exploration

    def current_node(self) -> Optional[ExplorationNode]:
        return self.exploration_controller.state.current

    def surface_for(self, url: str) -> VideoSurface:
        return self.cache_controller.surface_for(url)

    def capture(self, surface: VideoSurface) -> Optional[str]:
        return self.exploration_controller.capture(surface)

    def explore(self, prompt: str) -> Optional[int]:
        return self.exploration_controller.submit(prompt)

    def navigate_to(self, index: int) -> None:
        self.exploration_controller.navigate_to(index)
        self._release_hidden_surfaces()

    def reset(self) -> None:
        self.exploration_controller.reset()
        self._release_hidden_surfaces()

    def _active_video_urls(self) -> List[str]:
        """URLs of the videos the current view can show."""
        urls = []
        result = self.generation_controller.result
        if result is not None:
            urls.extend([result.setting_video_url, result.person_video_url])
        node = self.current_node()
        if node is not None:
            urls.append(node.video_url)
        return [url for url in urls if url]

    def _release_hidden_surfaces(self) -> None:
        # Each open surface holds a decoder process
        self.cache_controller.retain(self._active_video_urls())

    # Background work

    @property
    def has_pending(self) -> bool:
        return self.generation_controller.has_pending or self.exploration_controller.has_pending

    def poll(self) -> bool:
        """Apply any finished gateway responses; True if the UI must refresh."""
        generation_changed = self.generation_controller.poll()
        exploration_changed = self.exploration_controller.poll()
        if generation_changed or exploration_changed:
            self._release_hidden_surfaces()
        return generation_changed or exploration_changed

    def to_dict(self) -> dict:
        """Serializable snapshot of the session state."""
        return {
            "generation": self.generation_controller.state.to_dict(),
            "exploration": self.exploration_controller.state.to_dict(),
        }

    def shutdown(self) -> None:
        self.executor.shutdown(wait=False)
