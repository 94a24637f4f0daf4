"""
Local cache of generated videos.
Result videos are downloaded here so their frames can be decoded; old files
are removed periodically.
"""

import os
import glob
import time
import hashlib
import logging
from typing import Optional
from urllib.parse import urlparse

import requests

logger = logging.getLogger(__name__)

VIDEO_PATTERNS = ["*.mp4", "*.webm", "*.mov", "*.part"]
CHUNK_SIZE = 1 << 16


class VideoCache:
    """Downloads result videos into ``output_dir``."""

    def __init__(self, output_dir: str, session: Optional[requests.Session] = None, timeout: float = 120):
        self.output_dir = output_dir
        self.session = session or requests.Session()
        self.timeout = timeout
        os.makedirs(self.output_dir, exist_ok=True)

    def path_for(self, url: str) -> str:
        """Stable local path for ``url``."""
        digest = hashlib.md5(url.encode()).hexdigest()
        extension = os.path.splitext(urlparse(url).path)[1] or ".mp4"
        return os.path.join(self.output_dir, f"{digest}{extension}")

    def fetch(self, url: str) -> str:
        """
        Return the local path of ``url``, downloading it if needed.

        Raises:
            requests.RequestException: If the download fails
        """
        path = self.path_for(url)
        if os.path.exists(path):
            return path

        partial = f"{path}.part"
        logger.info("Downloading %s", url)
        with self.session.get(url, stream=True, timeout=self.timeout) as response:
            response.raise_for_status()
            with open(partial, "wb") as f:
                for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                    f.write(chunk)
        os.replace(partial, path)
        return path

    def is_expired(self, path: str, max_age_hours: float) -> bool:
        try:
            return time.time() - os.path.getmtime(path) > max_age_hours * 3600
        except OSError:
            return True

    def cleanup(self, max_age_hours: float = 24) -> int:
        """
        Remove cached videos older than ``max_age_hours``.

        Returns:
            Number of files removed
        """
        current_time = time.time()
        max_age_seconds = max_age_hours * 3600
        removed = 0

        for pattern in VIDEO_PATTERNS:
            for file_path in glob.glob(os.path.join(self.output_dir, pattern)):
                try:
                    if current_time - os.path.getmtime(file_path) > max_age_seconds:
                        os.remove(file_path)
                        removed += 1
                except OSError as e:
                    logger.warning("Could not remove %s: %s", file_path, e)
        return removed
