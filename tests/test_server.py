"""
HTTP tests for the gateway endpoints.
"""

import unittest

from fastapi.testclient import TestClient

from explorer.gateway import GenerationGateway
from server import create_app

from tests.fakes import RecordingProvider

FRONT = "data:image/png;base64,A"
BACKGROUND = "data:image/png;base64,B"


def client_for(provider):
    return TestClient(create_app(gateway=GenerationGateway(provider)))


class TestGenerateEndpoint(unittest.TestCase):

    def test_generate_returns_both_urls(self):
        provider = RecordingProvider(outputs={FRONT: ["urlA"], BACKGROUND: ["urlB"]})
        resp = client_for(provider).post("/generate", json={"frontImage": FRONT, "backgroundImage": BACKGROUND})

        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"settingVideoUrl": "urlB", "personVideoUrl": "urlA"})

    def test_missing_field_is_400_without_provider_call(self):
        provider = RecordingProvider()
        resp = client_for(provider).post("/generate", json={"frontImage": FRONT})

        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {"error": "Front image and background image are required"})
        self.assertEqual(provider.events, [])

    def test_provider_failure_is_500_with_message(self):
        provider = RecordingProvider(errors={BACKGROUND: RuntimeError("Task FAILED")})
        resp = client_for(provider).post("/generate", json={"frontImage": FRONT, "backgroundImage": BACKGROUND})

        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json(), {"error": "Task FAILED"})

    def test_non_json_body_is_400(self):
        resp = client_for(RecordingProvider()).post(
            "/generate", content=b"not json", headers={"Content-Type": "application/json"}
        )
        self.assertEqual(resp.status_code, 400)
        self.assertIn("error", resp.json())


class TestExploreEndpoint(unittest.TestCase):

    def test_empty_output_is_null(self):
        resp = client_for(RecordingProvider()).post(
            "/explore", json={"image": "data:image/jpeg;base64,F", "prompt": "zoom in"}
        )
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"videoUrl": None})

    def test_explore_returns_url(self):
        provider = RecordingProvider(outputs={"data:image/jpeg;base64,F": ["urlX"]})
        resp = client_for(provider).post("/explore", json={"image": "data:image/jpeg;base64,F", "prompt": "zoom in"})
        self.assertEqual(resp.json(), {"videoUrl": "urlX"})

    def test_missing_prompt_is_400(self):
        resp = client_for(RecordingProvider()).post("/explore", json={"image": "data:image/jpeg;base64,F"})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {"error": "Image and prompt are required"})


class TestHealth(unittest.TestCase):

    def test_health(self):
        resp = client_for(RecordingProvider()).get("/health")
        self.assertEqual(resp.json(), {"status": "ok"})


if __name__ == "__main__":
    unittest.main()
