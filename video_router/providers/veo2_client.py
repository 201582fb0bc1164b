"""
Veo 2 adapter for the Gemini API long-running operation protocol.

This is the older Veo integration. A ``predictLongRunning`` call returns an
operation name; the operation is fetched until ``done`` is true. The API key
goes in the ``x-goog-api-key`` header instead of a bearer token.
"""

from typing import Any, Dict, List, Optional

from ..exceptions import GenerationFailedError, NoTaskIdError, NoVideoReturnedError
from ..models import GenerationRequest, GenerationResult
from ..pricing import estimate_cost
from ..registry import ProviderDescriptor
from .polling import JobVideoClient, PollState, PollStatus


class Veo2Client(JobVideoClient):
    """Google Veo 2 client with operation polling."""

    provider_name = "Google Veo 2"

    def __init__(self, base_url: Optional[str] = None, **kwargs):
        super().__init__(**kwargs)
        self.base_url = base_url

    def _base(self, descriptor: ProviderDescriptor) -> str:
        return (self.base_url or descriptor.api_endpoint).rstrip("/")

    def _get_headers(self, api_key: str) -> Dict[str, str]:
        return {
            "x-goog-api-key": api_key,
            "Content-Type": "application/json",
        }

    def build_payload(self, descriptor: ProviderDescriptor, request: GenerationRequest) -> Dict[str, Any]:
        """
        Build the predictLongRunning body.

        Request Structure:
            {
              "instances": [{
                "prompt": str,
                "image": {"bytesBase64Encoded": str, "mimeType": str}   # optional
              }],
              "parameters": {
                "aspectRatio": str,
                "durationSeconds": int,
                "sampleCount": int,
                "negativePrompt": str                                  # optional
              }
            }
        """
        caps = descriptor.capabilities
        instance: Dict[str, Any] = {"prompt": request.prompt}
        if request.conditioning_image is not None and caps.supports_conditioning_image:
            instance["image"] = {
                "bytesBase64Encoded": request.conditioning_image.image_bytes,
                "mimeType": request.conditioning_image.mime_type,
            }

        parameters: Dict[str, Any] = {
            "aspectRatio": request.aspect_ratio,
            "durationSeconds": request.duration_seconds,
            "sampleCount": request.number_of_videos,
        }
        if request.negative_prompt and caps.supports_negative_prompt:
            parameters["negativePrompt"] = request.negative_prompt

        return {"instances": [instance], "parameters": parameters}

    def submit(self, descriptor: ProviderDescriptor, request: GenerationRequest, api_key: str) -> str:
        model = request.model or descriptor.default_model
        payload = self.build_payload(descriptor, request)
        self.logger.info(
            f"Creating Veo 2 operation: model={model}, {request.duration_seconds}s, {request.aspect_ratio}"
        )
        self.logger.debug(f"Prompt: {request.prompt[:100]}...")

        url = f"{self._base(descriptor)}/models/{model}:predictLongRunning"
        data = self._post_json(url, api_key, payload, descriptor.id)
        operation_name = data.get("name")
        if not operation_name:
            raise NoTaskIdError("No operation name returned from Veo 2 API", provider=descriptor.id)
        return str(operation_name)

    def check_status(
        self,
        descriptor: ProviderDescriptor,
        request: GenerationRequest,
        api_key: str,
        state: PollState
    ) -> Optional[GenerationResult]:
        data = self._get_json(f"{self._base(descriptor)}/{state.task_id}", api_key, descriptor.id)
        if not data.get("done"):
            return None

        error = data.get("error")
        if error:
            state.status = PollStatus.FAILED
            message = error.get("message") if isinstance(error, dict) else str(error)
            raise GenerationFailedError(
                f"Veo 2 generation failed: {message or 'Generation failed'}",
                provider=descriptor.id
            )

        video_response = (data.get("response") or {}).get("generateVideoResponse") or {}
        videos = self._extract_video_uris(video_response)
        if not videos:
            filtered = video_response.get("raiMediaFilteredReasons")
            if filtered:
                state.status = PollStatus.FAILED
                raise GenerationFailedError(
                    f"Veo 2 generation blocked by safety filters: {'; '.join(map(str, filtered))}",
                    provider=descriptor.id
                )
            raise NoVideoReturnedError("No video URI returned from Veo 2 API", provider=descriptor.id)

        cost = estimate_cost(descriptor, request.duration_seconds, request.number_of_videos)
        return GenerationResult.succeeded(descriptor.id, videos, cost)

    @staticmethod
    def _extract_video_uris(video_response: Dict[str, Any]) -> List[str]:
        uris = []
        for sample in video_response.get("generatedSamples") or []:
            uri = (sample.get("video") or {}).get("uri")
            if uri:
                uris.append(uri)
        return uris
