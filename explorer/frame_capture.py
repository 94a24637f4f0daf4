"""
Frame capture from a paused video.

VideoSurface is a seekable, decodable view of a downloaded video with
play/pause state. capture_frame turns whatever the surface currently shows
into an inline JPEG that can seed the next generation.
"""

import logging
from typing import Any, Callable, Optional

import imageio
import numpy as np
from PIL import Image

from explorer.errors import CaptureUnavailable
from explorer.image_encoding import image_to_data_uri

logger = logging.getLogger(__name__)

CAPTURE_FORMAT = "JPEG"
CAPTURE_QUALITY = 90


class VideoSurface:
    """A decodable video with a playhead."""

    def __init__(self, source: str, reader_factory: Callable[[str], Any] = imageio.get_reader):
        """Initialize the surface.

        Args:
            source: Local path of the video file
            reader_factory: Callable returning an imageio-style reader for ``source``
        """
        self.source = source
        self.reader_factory = reader_factory
        self.paused = True
        self.position = 0
        self._reader: Optional[Any] = None
        self._frame_count: Optional[int] = None

    def rendering_context(self) -> Any:
        """
        Open (once) and return the frame reader.

        Raises:
            CaptureUnavailable: If the video cannot be decoded
        """
        if self._reader is None:
            try:
                self._reader = self.reader_factory(self.source)
            except Exception as e:
                raise CaptureUnavailable(f"Cannot decode {self.source}: {e}") from e
        return self._reader

    @property
    def fps(self) -> float:
        return float(self.rendering_context().get_meta_data().get("fps", 24.0))

    @property
    def frame_count(self) -> int:
        # count_frames decodes the whole stream; do it once per reader
        if self._frame_count is None:
            reader = self.rendering_context()
            try:
                self._frame_count = int(reader.count_frames())
            except (AttributeError, RuntimeError):
                meta = reader.get_meta_data()
                self._frame_count = int(meta.get("duration", 0) * meta.get("fps", 0))
        return self._frame_count

    @property
    def current_time(self) -> float:
        return self.position / self.fps

    def play(self) -> None:
        self.paused = False

    def pause(self) -> None:
        self.paused = True

    def seek_frame(self, index: int) -> None:
        """Move the playhead to frame ``index``, clamped to the video."""
        last = max(self.frame_count - 1, 0)
        self.position = min(max(int(index), 0), last)

    def seek(self, seconds: float) -> None:
        self.seek_frame(round(seconds * self.fps))

    def current_frame(self) -> np.ndarray:
        """
        Decode the frame under the playhead.

        Returns:
            (H, W, 3) uint8 array at the video's native resolution

        Raises:
            CaptureUnavailable: If the frame cannot be decoded
        """
        reader = self.rendering_context()
        try:
            frame = reader.get_data(self.position)
        except (IndexError, RuntimeError, OSError) as e:
            raise CaptureUnavailable(f"Cannot decode frame {self.position}: {e}") from e
        return _convert_frame_to_uint8(frame)

    def close(self) -> None:
        if self._reader is not None:
            self._reader.close()
            self._reader = None
        self._frame_count = None


def _convert_frame_to_uint8(frame: Any) -> np.ndarray:
    """Coerce a decoded frame to an RGB uint8 array."""
    frame = np.nan_to_num(np.asarray(frame), nan=0, posinf=255, neginf=0)
    frame = np.asarray(frame, dtype=np.uint8)
    if frame.ndim == 2:
        frame = np.stack([frame] * 3, axis=-1)
    elif frame.shape[-1] == 4:
        frame = frame[..., :3]
    return frame


def capture_frame(surface: VideoSurface, quality: int = CAPTURE_QUALITY) -> Optional[str]:
    """
    Capture the visible frame of a paused surface as a JPEG data URI.

    Args:
        surface: Video surface to read from
        quality: JPEG quality factor

    Returns:
        data URI, or None if the surface is playing or cannot be decoded
    """
    if not surface.paused:
        return None

    try:
        frame = surface.current_frame()
    except CaptureUnavailable as e:
        logger.debug("Frame capture skipped: %s", e)
        return None

    return image_to_data_uri(Image.fromarray(frame), CAPTURE_FORMAT, quality)
