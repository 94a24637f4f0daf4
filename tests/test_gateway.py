"""
Unit tests for the generation and exploration gateways.
"""

import threading
import time
import unittest

from explorer.errors import InvalidInput, GenerationFailed
from explorer.gateway import GenerationGateway
from explorer.models import SETTING_PROMPT, PERSON_PROMPT, DEFAULT_RATIO, DEFAULT_DURATION
from explorer.provider import VideoProvider, first_output

from tests.fakes import RecordingProvider

FRONT = "data:image/png;base64,A"
BACKGROUND = "data:image/png;base64,B"


class SkewedProvider(VideoProvider):
    """Task A only completes once task B's wait has started."""

    def __init__(self):
        self.events = []
        self.b_waiting = threading.Event()
        self.a_saw_b = None

    def submit(self, request):
        self.events.append(("submit", request.image))
        return request.image

    def wait(self, handle, timeout):
        if handle == BACKGROUND:
            self.a_saw_b = self.b_waiting.wait(timeout=5)
            self.events.append(("done", handle))
            return ["setting-url"]
        self.events.append(("done", handle))
        self.b_waiting.set()
        return ["person-url"]


class StalledProvider(VideoProvider):
    """Task A fails at once while task B stays pending until released."""

    def __init__(self):
        self.release = threading.Event()

    def submit(self, request):
        return request.image

    def wait(self, handle, timeout):
        if handle == FRONT:
            raise RuntimeError("Task failed: content moderation")
        self.release.wait(timeout=5)
        return ["setting-url"]


class TestGenerationGateway(unittest.TestCase):

    def test_both_tasks_submitted_before_any_wait(self):
        provider = RecordingProvider(outputs={BACKGROUND: ["urlB"], FRONT: ["urlA"]})
        GenerationGateway(provider).generate(FRONT, BACKGROUND)

        kinds = [event[0] for event in provider.events]
        self.assertEqual(kinds[:2], ["submit", "submit"])
        self.assertNotIn("submit", kinds[2:])

    def test_waits_run_concurrently(self):
        provider = SkewedProvider()
        result = GenerationGateway(provider).generate(FRONT, BACKGROUND)

        self.assertTrue(provider.a_saw_b, "the second wait did not start while the first was pending")
        self.assertEqual(provider.events[:2], [("submit", BACKGROUND), ("submit", FRONT)])
        self.assertEqual(provider.events[2:], [("done", FRONT), ("done", BACKGROUND)])
        self.assertEqual(result.setting_video_url, "setting-url")
        self.assertEqual(result.person_video_url, "person-url")

    def test_requests_carry_fixed_prompts_and_format(self):
        provider = RecordingProvider()
        GenerationGateway(provider).generate(FRONT, BACKGROUND)

        setting, person = provider.requests
        self.assertEqual((setting.image, setting.prompt), (BACKGROUND, SETTING_PROMPT))
        self.assertEqual((person.image, person.prompt), (FRONT, PERSON_PROMPT))
        for request in provider.requests:
            self.assertEqual(request.ratio, DEFAULT_RATIO)
            self.assertEqual(request.duration, DEFAULT_DURATION)
            self.assertEqual(request.model, "gen4_turbo")

    def test_output_mapping(self):
        provider = RecordingProvider(outputs={BACKGROUND: ["urlB", "extra"], FRONT: ["urlA"]})
        result = GenerationGateway(provider).generate(FRONT, BACKGROUND)
        self.assertEqual(result.setting_video_url, "urlB")
        self.assertEqual(result.person_video_url, "urlA")

    def test_empty_output_maps_to_none(self):
        provider = RecordingProvider(outputs={BACKGROUND: [], FRONT: ["urlA"]})
        result = GenerationGateway(provider).generate(FRONT, BACKGROUND)
        self.assertIsNone(result.setting_video_url)
        self.assertEqual(result.person_video_url, "urlA")

    def test_missing_inputs_make_no_provider_call(self):
        for front, background in ((None, BACKGROUND), (FRONT, None), ("", BACKGROUND), (None, None)):
            provider = RecordingProvider()
            with self.assertRaises(InvalidInput):
                GenerationGateway(provider).generate(front, background)
            self.assertEqual(provider.events, [])

    def test_one_failure_fails_the_whole_call(self):
        provider = RecordingProvider(
            outputs={BACKGROUND: ["urlB"]},
            errors={FRONT: RuntimeError("Task failed: content moderation")},
        )
        with self.assertRaises(GenerationFailed) as ctx:
            GenerationGateway(provider).generate(FRONT, BACKGROUND)
        self.assertEqual(str(ctx.exception), "Task failed: content moderation")
        self.assertIsInstance(ctx.exception.__cause__, RuntimeError)

    def test_failure_is_raised_without_waiting_for_siblings(self):
        provider = StalledProvider()
        started = time.monotonic()
        try:
            with self.assertRaises(GenerationFailed) as ctx:
                GenerationGateway(provider).generate(FRONT, BACKGROUND)
            elapsed = time.monotonic() - started
        finally:
            provider.release.set()

        self.assertEqual(str(ctx.exception), "Task failed: content moderation")
        self.assertLess(elapsed, 2)

    def test_submission_error_is_generation_failed(self):
        class Rejecting(RecordingProvider):
            def submit(self, request):
                raise ValueError("invalid api key")

        with self.assertRaises(GenerationFailed) as ctx:
            GenerationGateway(Rejecting()).generate(FRONT, BACKGROUND)
        self.assertEqual(str(ctx.exception), "invalid api key")

    def test_timeout_is_passed_to_each_wait(self):
        seen = []

        class Timed(RecordingProvider):
            def wait(self, handle, timeout):
                seen.append(timeout)
                return []

        GenerationGateway(Timed(), timeout=42).generate(FRONT, BACKGROUND)
        self.assertEqual(seen, [42, 42])


class TestExplorationGateway(unittest.TestCase):

    def test_explore_uses_caller_prompt(self):
        provider = RecordingProvider(outputs={"data:image/jpeg;base64,F": ["urlX"]})
        result = GenerationGateway(provider).explore("data:image/jpeg;base64,F", "zoom in")

        self.assertEqual(result.video_url, "urlX")
        (request,) = provider.requests
        self.assertEqual(request.prompt, "zoom in")
        self.assertEqual(request.ratio, "1280:720")
        self.assertEqual(request.duration, 10)

    def test_explore_empty_output(self):
        result = GenerationGateway(RecordingProvider()).explore("data:image/jpeg;base64,F", "zoom in")
        self.assertIsNone(result.video_url)

    def test_explore_missing_inputs(self):
        for image, prompt in ((None, "zoom in"), ("data:image/jpeg;base64,F", None), ("data:x", "")):
            provider = RecordingProvider()
            with self.assertRaises(InvalidInput):
                GenerationGateway(provider).explore(image, prompt)
            self.assertEqual(provider.events, [])

    def test_explore_failure_message(self):
        provider = RecordingProvider(errors={"img": TimeoutError("Task timed out")})
        with self.assertRaises(GenerationFailed) as ctx:
            GenerationGateway(provider).explore("img", "pan left")
        self.assertEqual(str(ctx.exception), "Task timed out")

    def test_blank_error_message_falls_back(self):
        provider = RecordingProvider(errors={"img": RuntimeError()})
        with self.assertRaises(GenerationFailed) as ctx:
            GenerationGateway(provider).explore("img", "pan left")
        self.assertEqual(str(ctx.exception), "Video generation failed")


class TestFirstOutput(unittest.TestCase):

    def test_first_output(self):
        self.assertIsNone(first_output(None))
        self.assertIsNone(first_output([]))
        self.assertEqual(first_output(["a", "b"]), "a")


if __name__ == "__main__":
    unittest.main()
