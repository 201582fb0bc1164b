"""
Template for providers that answer a generation request in a single call.

RunwayML, Luma, Stability and OpenAI Sora share the same shape: one JSON
POST with bearer authorization, a video locator in the response, and no
cost reported by the provider. Subclasses only describe how their request
body differs.
"""

import threading
from typing import Any, Dict, Optional

from ..exceptions import NoVideoReturnedError
from ..models import ConditioningImage, GenerationRequest, GenerationResult
from ..pricing import estimate_cost
from ..registry import ProviderDescriptor
from .base import VideoProviderAdapter

VIDEO_URL_FIELDS = ("video_url", "video")


class SyncVideoClient(VideoProviderAdapter):
    """Single-request provider adapter."""

    def __init__(self, endpoint: Optional[str] = None, **kwargs):
        """
        Args:
            endpoint: Override for the generation URL. Defaults to the
                descriptor's api_endpoint.
            **kwargs: Timeouts passed to VideoProviderAdapter
        """
        super().__init__(**kwargs)
        self.endpoint = endpoint

    def generate(
        self,
        descriptor: ProviderDescriptor,
        request: GenerationRequest,
        api_key: Optional[str],
        cancel_event: Optional[threading.Event] = None
    ) -> GenerationResult:
        api_key = self._require_credential(api_key, descriptor)

        payload = self.build_payload(descriptor, request)
        self.logger.info(
            f"Creating {self.provider_name} generation: model={payload.get('model')}, "
            f"{request.duration_seconds}s, {request.aspect_ratio}"
        )
        self.logger.debug(f"Prompt: {request.prompt[:100]}...")

        data = self._post_json(self.endpoint or descriptor.api_endpoint, api_key, payload, descriptor.id)

        video_url = self.extract_video_url(data)
        if not video_url:
            raise NoVideoReturnedError(
                f"No video URL returned from {self.provider_name} API",
                provider=descriptor.id
            )

        # These providers do not report cost, so it is computed from pricing
        cost = estimate_cost(descriptor, request.duration_seconds, request.number_of_videos)
        self.logger.info(f"{self.provider_name} generation complete: {video_url}")
        return GenerationResult.succeeded(descriptor.id, [video_url], cost)

    def build_payload(self, descriptor: ProviderDescriptor, request: GenerationRequest) -> Dict[str, Any]:
        """
        Build the request body.

        Optional fields are added only when the request carries them and the
        provider's capability descriptor says it accepts them.
        """
        payload = self._base_payload(descriptor, request)
        payload.update(self.fixed_fields())

        caps = descriptor.capabilities
        if request.negative_prompt and caps.supports_negative_prompt:
            self._set_negative_prompt(payload, request.negative_prompt)
        if request.conditioning_image is not None and caps.supports_conditioning_image:
            self._set_conditioning_image(payload, request.conditioning_image)
        if request.resolution and caps.supports_resolution:
            self._set_resolution(payload, request.resolution)
        if request.fps and caps.supports_fps:
            self._set_fps(payload, request.fps)
        return payload

    def _base_payload(self, descriptor: ProviderDescriptor, request: GenerationRequest) -> Dict[str, Any]:
        return {
            "prompt": request.prompt,
            "duration": request.duration_seconds,
            "aspect_ratio": request.aspect_ratio,
            "model": request.model or descriptor.default_model,
        }

    def fixed_fields(self) -> Dict[str, Any]:
        """Provider-specific fields sent with every request."""
        return {}

    def _set_negative_prompt(self, payload: Dict[str, Any], negative_prompt: str) -> None:
        payload["negative_prompt"] = negative_prompt

    def _set_conditioning_image(self, payload: Dict[str, Any], image: ConditioningImage) -> None:
        payload["image"] = image.data_uri

    def _set_resolution(self, payload: Dict[str, Any], resolution: str) -> None:
        payload["resolution"] = resolution

    def _set_fps(self, payload: Dict[str, Any], fps: int) -> None:
        payload["fps"] = fps

    @staticmethod
    def extract_video_url(data: Dict[str, Any]) -> Optional[str]:
        """Providers are inconsistent about the field name; accept either."""
        for field_name in VIDEO_URL_FIELDS:
            value = data.get(field_name)
            if value:
                return value
        return None
