"""
Veo 3 adapter for the veo3gen task API.

A generation is submitted to ``/generate`` and returns a task ID. The task
is then polled at ``/status/{taskId}`` until it reports ``completed``,
``failed`` or ``timeout``.

Request body:
    {
      "model": "veo3-fast" | "veo3-quality",
      "prompt": str,
      "audio": bool,
      "options": {
        "resolution": "720p" | "1080p",
        "negativePrompt": str,      # optional
        "image": "data:...;base64"  # optional
      }
    }
"""

from typing import Any, Dict, Optional

from ..exceptions import (
    GenerationFailedError,
    NoTaskIdError,
    NoVideoReturnedError,
    ProviderTimeoutError,
)
from ..models import GenerationRequest, GenerationResult
from ..pricing import estimate_cost
from ..registry import ProviderDescriptor
from .polling import JobVideoClient, PollState, PollStatus

DEFAULT_MODEL = "veo3-fast"
DEFAULT_RESOLUTION = "720p"

STATUS_COMPLETED = "completed"
STATUS_FAILED = "failed"
STATUS_TIMEOUT = "timeout"


class Veo3Client(JobVideoClient):
    """Veo 3 client with task polling."""

    provider_name = "VEO3"

    def __init__(self, base_url: Optional[str] = None, **kwargs):
        """
        Args:
            base_url: Override for the API base. Defaults to the descriptor's api_endpoint.
            **kwargs: Poll and timeout settings passed to JobVideoClient
        """
        super().__init__(**kwargs)
        self.base_url = base_url

    def _base(self, descriptor: ProviderDescriptor) -> str:
        return (self.base_url or descriptor.api_endpoint).rstrip("/")

    def build_payload(self, descriptor: ProviderDescriptor, request: GenerationRequest) -> Dict[str, Any]:
        caps = descriptor.capabilities
        options: Dict[str, Any] = {
            "resolution": request.resolution or DEFAULT_RESOLUTION,
        }
        if request.negative_prompt and caps.supports_negative_prompt:
            options["negativePrompt"] = request.negative_prompt
        if request.conditioning_image is not None and caps.supports_conditioning_image:
            options["image"] = request.conditioning_image.data_uri

        # The task API has no duration or aspect ratio fields. The model sets
        # the clip length; the normalizer still checks the request against the
        # catalog so the fallback cost uses a duration the provider offers.
        return {
            "model": request.model or DEFAULT_MODEL,
            # Audio is on unless explicitly disabled
            "audio": request.audio is not False,
            "prompt": request.prompt,
            "options": options,
        }

    def submit(self, descriptor: ProviderDescriptor, request: GenerationRequest, api_key: str) -> str:
        payload = self.build_payload(descriptor, request)
        self.logger.info(
            f"Creating VEO3 task: model={payload['model']}, "
            f"resolution={payload['options']['resolution']}, audio={payload['audio']}"
        )
        self.logger.debug(f"Prompt: {request.prompt[:100]}...")

        data = self._post_json(f"{self._base(descriptor)}/generate", api_key, payload, descriptor.id)
        task_id = data.get("taskId")
        if not task_id:
            raise NoTaskIdError("No task ID returned from VEO3 API", provider=descriptor.id)
        return str(task_id)

    def check_status(
        self,
        descriptor: ProviderDescriptor,
        request: GenerationRequest,
        api_key: str,
        state: PollState
    ) -> Optional[GenerationResult]:
        data = self._get_json(f"{self._base(descriptor)}/status/{state.task_id}", api_key, descriptor.id)
        status = data.get("status")
        self.logger.info(f"VEO3 status: {status}")

        if status == STATUS_COMPLETED:
            result = data.get("result") or {}
            video_url = result.get("videoUrl")
            if not video_url:
                raise NoVideoReturnedError("No video URL returned from VEO3 API", provider=descriptor.id)
            return GenerationResult.succeeded(
                descriptor.id, [video_url], self._reported_cost(data, descriptor, request)
            )

        if status == STATUS_FAILED:
            state.status = PollStatus.FAILED
            error = data.get("error") or {}
            message = error.get("message") if isinstance(error, dict) else str(error)
            raise GenerationFailedError(
                f"VEO3 generation failed: {message or 'Generation failed'}",
                provider=descriptor.id
            )

        if status == STATUS_TIMEOUT:
            state.status = PollStatus.TIMED_OUT
            raise ProviderTimeoutError("VEO3 generation timed out", provider=descriptor.id)

        return None

    def _reported_cost(
        self,
        data: Dict[str, Any],
        descriptor: ProviderDescriptor,
        request: GenerationRequest
    ) -> float:
        """Credits charged by the provider, or the catalog price when not reported."""
        credits = data.get("credits")
        if isinstance(credits, dict) and credits.get("charged") is not None:
            try:
                return float(credits["charged"])
            except (TypeError, ValueError):
                self.logger.warning(f"Ignoring unreadable VEO3 credit charge: {credits['charged']!r}")
        return estimate_cost(descriptor, request.duration_seconds, request.number_of_videos)
