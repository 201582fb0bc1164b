"""
Request normalization.

Turns raw parameters from an upstream form (strings or numbers) into a
validated ``GenerationRequest``. Values the selected provider cannot accept
are rejected; optional features it cannot use are dropped with a warning so
they never reach the provider.

Defaults for provider-specific extension fields (model tier, resolution,
audio) are not filled in here; each adapter owns its defaults.
"""
from __future__ import annotations

from dataclasses import replace
from typing import Any, Mapping, Optional

from .exceptions import InvalidRequestError
from .logger import get_library_logger
from .media import ImageSource, load_conditioning_image
from .models import ConditioningImage, GenerationRequest
from .registry import ProviderDescriptor, get_provider_by_id, is_duration_supported

DEFAULT_DURATION_SECONDS = 5
DEFAULT_ASPECT_RATIO = "16:9"
DEFAULT_NUMBER_OF_VIDEOS = 1

_TRUE_VALUES = ("true", "1", "yes", "on")
_FALSE_VALUES = ("false", "0", "no", "off")


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _optional_str(value: Any) -> Optional[str]:
    if _is_blank(value):
        return None
    return str(value).strip()


def coerce_int(value: Any, field_name: str, default: Optional[int] = None) -> Optional[int]:
    """
    Coerce a form value to a positive integer.

    Raises:
        InvalidRequestError: If the value is not a whole number of at least 1
    """
    if _is_blank(value):
        return default
    if isinstance(value, bool):
        raise InvalidRequestError(f"{field_name} must be a whole number")
    if isinstance(value, float):
        if not value.is_integer():
            raise InvalidRequestError(f"{field_name} must be a whole number, got {value}")
        value = int(value)
    try:
        number = int(str(value).strip())
    except ValueError:
        raise InvalidRequestError(f"{field_name} must be a whole number, got '{value}'")
    if number < 1:
        raise InvalidRequestError(f"{field_name} must be at least 1, got {number}")
    return number


def coerce_bool(value: Any, field_name: str) -> Optional[bool]:
    if _is_blank(value):
        return None
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise InvalidRequestError(f"{field_name} must be true or false, got '{value}'")


def default_duration(descriptor: Optional[ProviderDescriptor]) -> int:
    """
    Clip length used when the caller gives none.

    Providers with a fixed set of durations that excludes the standard
    default get the first duration from their set instead.
    """
    if descriptor is None:
        return DEFAULT_DURATION_SECONDS
    durations = descriptor.capabilities.supported_durations
    if durations and DEFAULT_DURATION_SECONDS not in durations:
        return durations[0]
    return DEFAULT_DURATION_SECONDS


def normalize_request(
    form: Mapping[str, Any],
    conditioning_image: Optional[ImageSource] = None,
    image_mime_type: Optional[str] = None
) -> GenerationRequest:
    """
    Validate raw parameters and build a GenerationRequest.

    Recognized keys: ``prompt``, ``provider``, ``negative_prompt``,
    ``duration_seconds``, ``aspect_ratio``, ``number_of_videos``, ``model``,
    ``resolution``, ``fps`` and ``audio``.

    Args:
        form: Raw parameters
        conditioning_image: Optional image path, bytes, file object, or an
            already encoded ConditioningImage
        image_mime_type: Declared MIME type of the conditioning image

    Returns:
        Validated request

    Raises:
        InvalidRequestError: If any parameter is missing, malformed, or not
            supported by the selected provider
    """
    prompt = form.get("prompt")
    if _is_blank(prompt):
        raise InvalidRequestError("Prompt is required")

    provider_id = _optional_str(form.get("provider"))
    if provider_id is None:
        raise InvalidRequestError("Provider is required")

    image = None
    if isinstance(conditioning_image, ConditioningImage):
        image = conditioning_image
    elif conditioning_image is not None:
        image = load_conditioning_image(conditioning_image, mime_type=image_mime_type)

    descriptor = get_provider_by_id(provider_id)

    request = GenerationRequest(
        prompt=str(prompt).strip(),
        provider_id=provider_id,
        negative_prompt=_optional_str(form.get("negative_prompt")),
        duration_seconds=coerce_int(
            form.get("duration_seconds"), "Duration", default_duration(descriptor)
        ),
        aspect_ratio=_optional_str(form.get("aspect_ratio")) or DEFAULT_ASPECT_RATIO,
        number_of_videos=coerce_int(
            form.get("number_of_videos"), "Number of videos", DEFAULT_NUMBER_OF_VIDEOS
        ),
        conditioning_image=image,
        model=_optional_str(form.get("model")),
        resolution=_optional_str(form.get("resolution")),
        fps=coerce_int(form.get("fps"), "FPS"),
        audio=coerce_bool(form.get("audio"), "Audio"),
    )

    if descriptor is None:
        # Unknown ids are reported by the router as ProviderNotFound
        return request
    return enforce_capabilities(request, descriptor)


def enforce_capabilities(
    request: GenerationRequest,
    descriptor: ProviderDescriptor
) -> GenerationRequest:
    """
    Check a request against a provider's capability descriptor.

    Durations outside the provider's supported set are rejected rather than
    clamped. Optional features the provider does not support are removed.

    Returns:
        The request, possibly with unsupported optional fields cleared

    Raises:
        InvalidRequestError: If a required value is outside what the provider accepts
    """
    logger = get_library_logger()
    caps = descriptor.capabilities
    name = descriptor.name

    if not is_duration_supported(descriptor, request.duration_seconds):
        if caps.supported_durations:
            allowed = ", ".join(str(d) for d in caps.supported_durations)
            message = (f"{name} does not support {request.duration_seconds}s clips. "
                       f"Supported durations: {allowed}")
        else:
            message = (f"{name} supports at most {descriptor.max_duration}s, "
                       f"got {request.duration_seconds}s")
        raise InvalidRequestError(message, provider=descriptor.id)

    if request.aspect_ratio not in descriptor.supported_aspect_ratios:
        raise InvalidRequestError(
            f"{name} does not support aspect ratio {request.aspect_ratio}. "
            f"Supported: {', '.join(descriptor.supported_aspect_ratios)}",
            provider=descriptor.id
        )

    if request.number_of_videos > caps.max_videos:
        raise InvalidRequestError(
            f"{name} can generate at most {caps.max_videos} video(s) per request, "
            f"got {request.number_of_videos}",
            provider=descriptor.id
        )

    if request.model is not None and request.model not in descriptor.models:
        raise InvalidRequestError(
            f"Model '{request.model}' is not available for {name}. "
            f"Available models: {', '.join(descriptor.models)}",
            provider=descriptor.id
        )

    changes = {}

    if request.negative_prompt is not None and not caps.supports_negative_prompt:
        logger.warning(f"{name} does not support negative prompts; ignoring it")
        changes["negative_prompt"] = None

    if request.conditioning_image is not None and not caps.supports_conditioning_image:
        logger.warning(f"{name} does not support conditioning images; ignoring it")
        changes["conditioning_image"] = None

    if request.resolution is not None:
        if not caps.supports_resolution:
            logger.warning(f"{name} does not support resolution selection; ignoring it")
            changes["resolution"] = None
        elif request.resolution not in caps.supported_resolutions:
            raise InvalidRequestError(
                f"{name} does not support resolution {request.resolution}. "
                f"Supported: {', '.join(caps.supported_resolutions)}",
                provider=descriptor.id
            )

    if request.fps is not None:
        if not caps.supports_fps:
            logger.warning(f"{name} does not support FPS selection; ignoring it")
            changes["fps"] = None
        elif request.fps not in caps.supported_fps:
            allowed = ", ".join(str(f) for f in caps.supported_fps)
            raise InvalidRequestError(
                f"{name} does not support {request.fps} FPS. Supported: {allowed}",
                provider=descriptor.id
            )

    if request.audio is not None and not caps.supports_audio:
        logger.warning(f"{name} does not generate audio; ignoring the audio setting")
        changes["audio"] = None

    if changes:
        return replace(request, **changes)
    return request
