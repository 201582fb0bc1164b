"""
Unit tests for the single-request provider adapters and shared HTTP
error classification.
"""

import unittest
from unittest.mock import MagicMock, patch

import requests

from video_router.exceptions import (
    AuthenticationError,
    ErrorKind,
    InsufficientCreditsError,
    MissingCredentialError,
    NoVideoReturnedError,
    ProviderAPIError,
    RateLimitError,
)
from video_router.models import ConditioningImage, GenerationRequest
from video_router.providers.base import is_insufficient_credits
from video_router.providers.luma_client import LumaClient
from video_router.providers.runway_client import RunwayClient
from video_router.providers.sora_client import SoraClient
from video_router.providers.stability_client import StabilityClient
from video_router.registry import get_provider_by_id


def _response(status_code=200, json_data=None, text=""):
    mock_resp = MagicMock()
    mock_resp.status_code = status_code
    mock_resp.text = text
    mock_resp.json.return_value = json_data if json_data is not None else {}
    return mock_resp


def _request(provider_id, **overrides):
    fields = dict(
        prompt="A lighthouse in a storm",
        duration_seconds=5,
        aspect_ratio="16:9",
        number_of_videos=1,
        provider_id=provider_id,
    )
    fields.update(overrides)
    return GenerationRequest(**fields)


class TestStatusClassification(unittest.TestCase):
    """Non-success responses map to specific error kinds."""

    def setUp(self):
        self.client = LumaClient()
        self.descriptor = get_provider_by_id("luma")
        self.request = _request("luma")

    @patch("video_router.providers.base.requests.post")
    def test_401_is_authentication_failure(self, mock_post):
        mock_post.return_value = _response(401, text="bad key")
        with self.assertRaises(AuthenticationError) as ctx:
            self.client.generate(self.descriptor, self.request, "lk_test")
        self.assertEqual(ctx.exception.kind, ErrorKind.AUTHENTICATION_FAILED)
        self.assertEqual(ctx.exception.status_code, 401)
        self.assertIn("401", str(ctx.exception))
        self.assertIn("bad key", str(ctx.exception))

    @patch("video_router.providers.base.requests.post")
    def test_429_is_rate_limited(self, mock_post):
        mock_post.return_value = _response(429, text="slow down")
        with self.assertRaises(RateLimitError) as ctx:
            self.client.generate(self.descriptor, self.request, "lk_test")
        self.assertEqual(ctx.exception.kind, ErrorKind.RATE_LIMITED)

    @patch("video_router.providers.base.requests.post")
    def test_402_is_insufficient_credits(self, mock_post):
        mock_post.return_value = _response(402, text="payment required")
        with self.assertRaises(InsufficientCreditsError):
            self.client.generate(self.descriptor, self.request, "lk_test")

    @patch("video_router.providers.base.requests.post")
    def test_400_mentioning_credits_is_insufficient_credits(self, mock_post):
        mock_post.return_value = _response(400, text="You do not have enough credits to run this task.")
        with self.assertRaises(InsufficientCreditsError) as ctx:
            self.client.generate(self.descriptor, self.request, "lk_test")
        self.assertEqual(ctx.exception.kind, ErrorKind.INSUFFICIENT_CREDITS)

    @patch("video_router.providers.base.requests.post")
    def test_other_status_is_provider_error(self, mock_post):
        mock_post.return_value = _response(500, text="internal error")
        with self.assertRaises(ProviderAPIError) as ctx:
            self.client.generate(self.descriptor, self.request, "lk_test")
        self.assertEqual(ctx.exception.kind, ErrorKind.PROVIDER_ERROR)
        self.assertIn("500", str(ctx.exception))
        self.assertIn("internal error", str(ctx.exception))

    @patch("video_router.providers.base.requests.post")
    def test_plain_400_is_provider_error(self, mock_post):
        mock_post.return_value = _response(400, text="prompt too long")
        with self.assertRaises(ProviderAPIError) as ctx:
            self.client.generate(self.descriptor, self.request, "lk_test")
        self.assertNotIsInstance(ctx.exception, InsufficientCreditsError)

    @patch("video_router.providers.base.requests.post")
    def test_transport_error_is_provider_error(self, mock_post):
        mock_post.side_effect = requests.exceptions.ConnectionError("connection refused")
        with self.assertRaises(ProviderAPIError) as ctx:
            self.client.generate(self.descriptor, self.request, "lk_test")
        self.assertIn("connection refused", str(ctx.exception))

    @patch("video_router.providers.base.requests.post")
    def test_non_json_body_is_provider_error(self, mock_post):
        mock_resp = _response(200, text="<html>")
        mock_resp.json.side_effect = ValueError("no json")
        mock_post.return_value = mock_resp
        with self.assertRaises(ProviderAPIError):
            self.client.generate(self.descriptor, self.request, "lk_test")

    def test_credit_keywords(self):
        self.assertTrue(is_insufficient_credits("Insufficient credits"))
        self.assertFalse(is_insufficient_credits("Invalid prompt"))
        self.assertFalse(is_insufficient_credits(None))


class TestCredentials(unittest.TestCase):
    """Missing or placeholder keys fail before any network call."""

    @patch("video_router.providers.base.requests.post")
    def test_missing_key(self, mock_post):
        with self.assertRaises(MissingCredentialError) as ctx:
            StabilityClient().generate(get_provider_by_id("stability"), _request("stability"), None)
        self.assertIn("Stability AI", str(ctx.exception))
        self.assertEqual(ctx.exception.kind, ErrorKind.MISSING_CREDENTIAL)
        mock_post.assert_not_called()

    @patch("video_router.providers.base.requests.post")
    def test_blank_and_placeholder_keys(self, mock_post):
        for key in ("", "   ", "your_api_key_here"):
            with self.subTest(key=key):
                with self.assertRaises(MissingCredentialError):
                    StabilityClient().generate(get_provider_by_id("stability"), _request("stability"), key)
        mock_post.assert_not_called()


class TestSyncGeneration(unittest.TestCase):
    """Successful single-request generation."""

    @patch("video_router.providers.base.requests.post")
    def test_luma_success(self, mock_post):
        mock_post.return_value = _response(200, {"video_url": "https://cdn.example/v.mp4"})

        result = LumaClient().generate(get_provider_by_id("luma"), _request("luma"), "lk_test")

        self.assertTrue(result.success)
        self.assertEqual(result.provider, "luma")
        self.assertEqual(result.videos, ("https://cdn.example/v.mp4",))
        self.assertAlmostEqual(result.cost, 0.10)

        url = mock_post.call_args[0][0]
        kwargs = mock_post.call_args[1]
        self.assertEqual(url, "https://api.lumalabs.ai/dream-machine/v1/generations")
        self.assertEqual(kwargs["headers"]["Authorization"], "Bearer lk_test")
        self.assertEqual(kwargs["json"], {
            "prompt": "A lighthouse in a storm",
            "duration": 5,
            "aspect_ratio": "16:9",
            "model": "dream_machine_v1",
        })
        self.assertEqual(kwargs["timeout"], 30)

    @patch("video_router.providers.base.requests.post")
    def test_video_field_fallback(self, mock_post):
        mock_post.return_value = _response(200, {"video": "https://cdn.example/fallback.mp4"})
        result = LumaClient().generate(get_provider_by_id("luma"), _request("luma"), "lk_test")
        self.assertEqual(result.videos, ("https://cdn.example/fallback.mp4",))

    @patch("video_router.providers.base.requests.post")
    def test_no_video_returned(self, mock_post):
        mock_post.return_value = _response(200, {"id": "abc"})
        with self.assertRaises(NoVideoReturnedError) as ctx:
            LumaClient().generate(get_provider_by_id("luma"), _request("luma"), "lk_test")
        self.assertIn("Luma", str(ctx.exception))

    @patch("video_router.providers.base.requests.post")
    def test_runway_payload_and_header(self, mock_post):
        mock_post.return_value = _response(200, {"video_url": "https://cdn.example/r.mp4"})
        request = _request(
            "runwayml",
            duration_seconds=10,
            number_of_videos=2,
            negative_prompt="blurry",
            conditioning_image=ConditioningImage("image/png", "AAAA"),
            resolution="1080p",
            fps=30,
        )

        result = RunwayClient().generate(get_provider_by_id("runwayml"), request, "rw_test")

        kwargs = mock_post.call_args[1]
        payload = kwargs["json"]
        self.assertEqual(kwargs["headers"]["X-Runway-Version"], "2024-11-06")
        self.assertEqual(payload["model"], "gen4")
        self.assertTrue(payload["style_consistency"])
        self.assertTrue(payload["camera_controls"])
        self.assertTrue(payload["keyframe_controls"])
        self.assertEqual(payload["negative_prompt"], "blurry")
        self.assertEqual(payload["image"], "data:image/png;base64,AAAA")
        self.assertEqual(payload["resolution"], "1080p")
        self.assertEqual(payload["fps"], 30)
        # Cost covers every requested clip
        self.assertAlmostEqual(result.cost, 0.05 * 10 * 2)
        self.assertEqual(len(result.videos), 1)

    @patch("video_router.providers.base.requests.post")
    def test_sora_quality_and_model(self, mock_post):
        mock_post.return_value = _response(200, {"video_url": "https://cdn.example/s.mp4"})
        request = _request("openai-sora", duration_seconds=10, model="sora-1.0")

        result = SoraClient().generate(get_provider_by_id("openai-sora"), request, "sk-test")

        payload = mock_post.call_args[1]["json"]
        self.assertEqual(payload["quality"], "hd")
        self.assertEqual(payload["model"], "sora-1.0")
        self.assertAlmostEqual(result.cost, 1.0)

    @patch("video_router.providers.base.requests.post")
    def test_optional_fields_gated_by_capabilities(self, mock_post):
        # Luma does not accept fps even when the request carries it
        mock_post.return_value = _response(200, {"video_url": "https://cdn.example/v.mp4"})
        request = _request("luma", fps=30)

        LumaClient().generate(get_provider_by_id("luma"), request, "lk_test")

        self.assertNotIn("fps", mock_post.call_args[1]["json"])

    @patch("video_router.providers.base.requests.post")
    def test_endpoint_override(self, mock_post):
        mock_post.return_value = _response(200, {"video_url": "https://cdn.example/v.mp4"})
        client = StabilityClient(endpoint="http://localhost:8080/generate", request_timeout=5)

        client.generate(get_provider_by_id("stability"), _request("stability"), "st_test")

        self.assertEqual(mock_post.call_args[0][0], "http://localhost:8080/generate")
        self.assertEqual(mock_post.call_args[1]["timeout"], 5)


if __name__ == "__main__":
    unittest.main()
