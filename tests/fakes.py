"""Test doubles shared by the test modules."""

import threading
from concurrent.futures import Future
from typing import Dict, List, Optional

import numpy as np

from explorer.provider import VideoProvider


class RecordingProvider(VideoProvider):
    """Provider stub that records calls and returns canned outputs keyed by prompt image."""

    def __init__(self, outputs: Optional[Dict[str, List[str]]] = None, errors: Optional[Dict[str, Exception]] = None):
        self.outputs = outputs or {}
        self.errors = errors or {}
        self.events: List[tuple] = []
        self.requests = []
        self._lock = threading.Lock()

    def _record(self, *event):
        with self._lock:
            self.events.append(event)

    def submit(self, request):
        self._record("submit", request.image)
        self.requests.append(request)
        return request.image

    def wait(self, handle, timeout):
        self._record("wait", handle)
        if handle in self.errors:
            raise self.errors[handle]
        self._record("done", handle)
        return self.outputs.get(handle, [])


class FakeReader:
    """imageio-style reader over in-memory frames."""

    def __init__(self, frames, fps=24.0):
        self.frames = frames
        self.fps = fps
        self.closed = False
        self.count_calls = 0

    def get_meta_data(self):
        return {"fps": self.fps, "duration": len(self.frames) / self.fps}

    def count_frames(self):
        self.count_calls += 1
        return len(self.frames)

    def get_data(self, index):
        if index >= len(self.frames):
            raise IndexError(index)
        return self.frames[index]

    def close(self):
        self.closed = True


def solid_frames(count=3, width=64, height=36):
    """Frames whose pixel value equals 10 * frame index."""
    return [np.full((height, width, 3), (10 * i) % 256, dtype=np.uint8) for i in range(count)]


class ManualExecutor:
    """Executor whose futures are resolved by the test."""

    def __init__(self):
        self.calls = []

    def submit(self, fn, *args, **kwargs):
        future = Future()
        self.calls.append((fn, args, future))
        return future


class FakeResponse:
    def __init__(self, status_code=200, body=None, content=None):
        import json
        self.status_code = status_code
        if content is None:
            content = json.dumps(body).encode() if body is not None else b""
        self.content = content
        self.text = content.decode(errors="replace")

    @property
    def ok(self):
        return 200 <= self.status_code < 400

    def json(self):
        import json
        return json.loads(self.content)


class FakeSession:
    """requests.Session stand-in returning queued responses."""

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.posts = []

    def post(self, url, json=None, timeout=None):
        self.posts.append((url, json, timeout))
        if self.error is not None:
            raise self.error
        return self.response
