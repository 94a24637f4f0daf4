"""
Video provider adapter.

Wraps the external image-to-video service behind a small submit/wait
interface so that the gateways can fan out several tasks before waiting on
any of them, and so tests can substitute a stub.
"""

import logging
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from typing import Any, List, Optional, Sequence

from explorer.models import GenerationRequest
from explorer.errors import GenerationFailed

logger = logging.getLogger(__name__)

DEFAULT_TASK_TIMEOUT = 10 * 60  # seconds


class VideoProvider:
    """Base provider: ``submit`` starts a task, ``wait`` blocks for its output URLs."""

    def submit(self, request: GenerationRequest) -> Any:
        raise NotImplementedError

    def wait(self, handle: Any, timeout: float) -> List[str]:
        raise NotImplementedError

    def run(self, requests: Sequence[GenerationRequest], timeout: float = DEFAULT_TASK_TIMEOUT) -> List[Optional[str]]:
        """
        Submit every request, then wait for all of them concurrently.

        Args:
            requests: Tasks to run
            timeout: Upper bound in seconds for each individual wait

        Returns:
            First output URL of each task (None when a task produced no output),
            in the same order as ``requests``

        Raises:
            GenerationFailed: If any submission or wait fails
        """
        executor = None
        try:
            # All submissions go out before the first wait starts
            handles = [self.submit(request) for request in requests]

            executor = ThreadPoolExecutor(max_workers=max(len(handles), 1))
            futures = [executor.submit(self.wait, handle, timeout) for handle in handles]
            # Stop at the first failure instead of waiting out the siblings
            done, _ = wait(futures, return_when=FIRST_EXCEPTION)
            for future in futures:
                if future in done and future.exception() is not None:
                    raise future.exception()
            outputs = [future.result() for future in futures]
        except GenerationFailed:
            raise
        except Exception as e:
            raise GenerationFailed(str(e)) from e
        finally:
            if executor is not None:
                executor.shutdown(wait=False)

        return [first_output(output) for output in outputs]


def first_output(output: Optional[Sequence[str]]) -> Optional[str]:
    """Map a provider output list to its first URL, or None when empty."""
    if not output:
        return None
    return output[0]


class RunwayProvider(VideoProvider):
    """Runway ML image-to-video provider."""

    def __init__(self, api_key: Optional[str] = None):
        """Initialize the provider.

        Args:
            api_key: Runway API secret; the SDK falls back to RUNWAYML_API_SECRET
        """
        self.api_key = api_key
        self._client = None

    @property
    def client(self):
        """Create the SDK client lazily so the app can start without a credential."""
        if self._client is None:
            from runwayml import RunwayML
            self._client = RunwayML(api_key=self.api_key)
        return self._client

    def submit(self, request: GenerationRequest) -> Any:
        logger.info("Submitting %s task (%s, %ss)", request.model, request.ratio, request.duration)
        return self.client.image_to_video.create(
            model=request.model,
            prompt_image=request.image,
            prompt_text=request.prompt,
            ratio=request.ratio,
            duration=request.duration,
        )

    def wait(self, handle: Any, timeout: float) -> List[str]:
        task = handle.wait_for_task_output(timeout=timeout)
        logger.info("Task %s finished with status %s", getattr(task, "id", "?"), getattr(task, "status", "?"))
        return list(task.output or [])
