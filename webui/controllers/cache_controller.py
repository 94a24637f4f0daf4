"""
Cache controller for the Runway explorer.
Keeps decodable local copies of result videos and prunes them over time.
"""

import logging
from typing import Any, Callable, Dict, Iterable

import imageio

from explorer.cache import VideoCache
from explorer.frame_capture import VideoSurface

logger = logging.getLogger(__name__)


class CacheController:
    """Manages downloaded videos and the surfaces opened on them."""

    def __init__(self, cache: VideoCache, reader_factory: Callable[[str], Any] = imageio.get_reader):
        self.cache = cache
        self.reader_factory = reader_factory
        self.cleanup_counter = 0
        self._surfaces: Dict[str, VideoSurface] = {}

    def surface_for(self, url: str) -> VideoSurface:
        """
        Return the surface for ``url``, downloading the video on first use.

        Raises:
            requests.RequestException: If the download fails
        """
        surface = self._surfaces.get(url)
        if surface is None:
            surface = VideoSurface(self.cache.fetch(url), reader_factory=self.reader_factory)
            self._surfaces[url] = surface
        return surface

    def release(self, url: str) -> None:
        surface = self._surfaces.pop(url, None)
        if surface is not None:
            surface.close()

    def retain(self, urls: Iterable[str]) -> None:
        """Close every open surface whose URL is not in ``urls``."""
        keep = set(urls)
        for url in list(self._surfaces):
            if url not in keep:
                self.release(url)

    @property
    def open_urls(self) -> list:
        return list(self._surfaces)

    def periodic_cleanup(self, max_age_hours: float = 24) -> None:
        """
        Prune old downloads every 20 interactions.
        Videos that still have an open surface are kept.
        """
        self.cleanup_counter += 1
        if self.cleanup_counter > 1000:
            self.cleanup_counter = 0

        if self.cleanup_counter % 20 == 0:
            for url, surface in list(self._surfaces.items()):
                if self.cache.is_expired(surface.source, max_age_hours):
                    self.release(url)
            removed = self.cache.cleanup(max_age_hours=max_age_hours)
            logger.info("Periodic cleanup (interaction #%s) removed %s files", self.cleanup_counter, removed)
