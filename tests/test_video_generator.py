"""
Unit tests for the dispatch router in video_generator.py.

Covers provider lookup, the not-implemented path, conversion of adapter
exceptions into failed results, and background submission.
"""

import threading
import unittest
from unittest.mock import MagicMock, patch

from video_router.config import RouterConfig
from video_router.exceptions import ErrorKind, RateLimitError
from video_router.models import GenerationRequest, GenerationResult
from video_router.providers import Veo2Client, Veo3Client, VideoProviderAdapter
from video_router.registry import get_provider_by_id
from video_router.video_generator import VideoGenerator, create_default_adapters


def _request(provider_id="luma"):
    return GenerationRequest(
        prompt="A paper boat on a river",
        duration_seconds=5,
        aspect_ratio="16:9",
        number_of_videos=1,
        provider_id=provider_id,
    )


class TestAdapterTable(unittest.TestCase):

    def test_default_adapters(self):
        adapters = create_default_adapters()
        self.assertEqual(
            set(adapters),
            {"veo-2", "veo-3", "runwayml", "luma", "stability", "openai-sora"}
        )
        self.assertNotIn("pika", adapters)
        self.assertIsInstance(adapters["veo-2"], Veo2Client)
        self.assertIsInstance(adapters["veo-3"], Veo3Client)

    def test_config_flows_into_adapters(self):
        config = RouterConfig(poll_interval=2, max_wait=20, request_timeout=15, status_timeout=5)
        adapters = create_default_adapters(config)
        self.assertEqual(adapters["veo-3"].poll_interval, 2)
        self.assertEqual(adapters["veo-3"].max_wait, 20)
        self.assertEqual(adapters["veo-3"].status_timeout, 5)
        self.assertEqual(adapters["luma"].request_timeout, 15)

    def test_register_adapter(self):
        generator = VideoGenerator(adapters={})
        self.assertFalse(generator.has_adapter("pika"))
        generator.register_adapter("pika", MagicMock(spec=VideoProviderAdapter))
        self.assertTrue(generator.has_adapter("pika"))


class TestGenerateVideo(unittest.TestCase):
    """generate_video never raises."""

    def test_unknown_provider(self):
        generator = VideoGenerator()
        with self.assertLogs("video_router", level="INFO") as logs:
            result = generator.generate_video("unknown", _request("unknown"), "key")
        self.assertFalse(result.success)
        self.assertEqual(result.provider, "unknown")
        self.assertEqual(result.error, "Provider unknown not found")
        self.assertEqual(result.error_kind, ErrorKind.PROVIDER_NOT_FOUND)
        self.assertTrue(any("unknown" in line for line in logs.output))

    def test_registered_provider_without_adapter(self):
        result = VideoGenerator().generate_video("pika", _request("pika"), "key")
        self.assertFalse(result.success)
        self.assertEqual(result.error, "Provider pika not implemented yet")
        self.assertEqual(result.error_kind, ErrorKind.PROVIDER_NOT_IMPLEMENTED)

    def test_delegates_to_adapter(self):
        adapter = MagicMock(spec=VideoProviderAdapter)
        expected = GenerationResult.succeeded("luma", ["https://v/1.mp4"], 0.1)
        adapter.generate.return_value = expected
        generator = VideoGenerator(adapters={"luma": adapter})
        request = _request()

        result = generator.generate_video("luma", request, "lk_test")

        self.assertIs(result, expected)
        adapter.generate.assert_called_once_with(
            get_provider_by_id("luma"), request, "lk_test", cancel_event=None
        )

    def test_taxonomy_error_becomes_failed_result(self):
        adapter = MagicMock(spec=VideoProviderAdapter)
        adapter.generate.side_effect = RateLimitError("Rate limit exceeded (429)", provider="luma", status_code=429)
        generator = VideoGenerator(adapters={"luma": adapter})

        result = generator.generate_video("luma", _request(), "lk_test")

        self.assertFalse(result.success)
        self.assertEqual(result.error_kind, ErrorKind.RATE_LIMITED)
        self.assertEqual(result.error, "Rate limit exceeded (429)")
        self.assertEqual(result.videos, ())

    def test_unexpected_error_becomes_provider_error(self):
        adapter = MagicMock(spec=VideoProviderAdapter)
        adapter.generate.side_effect = KeyError("videoUrl")
        generator = VideoGenerator(adapters={"luma": adapter})

        result = generator.generate_video("luma", _request(), "lk_test")

        self.assertFalse(result.success)
        self.assertEqual(result.error_kind, ErrorKind.PROVIDER_ERROR)
        self.assertIn("videoUrl", result.error)

    def test_missing_credential_reported(self):
        result = VideoGenerator().generate_video("luma", _request(), None)
        self.assertFalse(result.success)
        self.assertEqual(result.error_kind, ErrorKind.MISSING_CREDENTIAL)

    @patch("video_router.providers.base.requests.post")
    def test_end_to_end_sync_provider(self, mock_post):
        mock_resp = MagicMock()
        mock_resp.status_code = 200
        mock_resp.json.return_value = {"video_url": "https://cdn.example/v.mp4"}
        mock_post.return_value = mock_resp

        result = VideoGenerator().generate_video("stability", _request("stability"), "st_test")

        self.assertTrue(result.success)
        data = result.to_dict()
        self.assertEqual(data["provider"], "stability")
        self.assertEqual(data["videos"], ["https://cdn.example/v.mp4"])
        self.assertAlmostEqual(data["cost"], 0.05)
        self.assertNotIn("error", data)

    def test_cancel_event_passed_through(self):
        adapter = MagicMock(spec=VideoProviderAdapter)
        adapter.generate.return_value = GenerationResult.succeeded("veo-3", ["https://v/1.mp4"])
        generator = VideoGenerator(adapters={"veo-3": adapter})
        cancel_event = threading.Event()

        generator.generate_video("veo-3", _request("veo-3"), "key", cancel_event=cancel_event)

        self.assertIs(adapter.generate.call_args[1]["cancel_event"], cancel_event)


class TestSubmitVideo(unittest.TestCase):

    def test_future_resolves_to_same_envelope(self):
        adapter = MagicMock(spec=VideoProviderAdapter)
        expected = GenerationResult.succeeded("luma", ["https://v/1.mp4"], 0.1)
        adapter.generate.return_value = expected
        generator = VideoGenerator(adapters={"luma": adapter}, max_workers=2)
        try:
            future = generator.submit_video("luma", _request(), "lk_test")
            self.assertIs(future.result(timeout=5), expected)
        finally:
            generator.shutdown()

    def test_future_reports_failures_as_results(self):
        generator = VideoGenerator(adapters={})
        try:
            result = generator.submit_video("unknown", _request("unknown")).result(timeout=5)
        finally:
            generator.shutdown()
        self.assertFalse(result.success)
        self.assertEqual(result.error_kind, ErrorKind.PROVIDER_NOT_FOUND)


class TestEstimateCost(unittest.TestCase):

    def test_estimate(self):
        generator = VideoGenerator(adapters={})
        self.assertAlmostEqual(generator.estimate_cost("openai-sora", 10, 2), 2.0)

    def test_unknown_provider(self):
        with self.assertRaises(ValueError):
            VideoGenerator(adapters={}).estimate_cost("unknown", 5)


if __name__ == "__main__":
    unittest.main()
