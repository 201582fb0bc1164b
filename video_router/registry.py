"""
Provider registry.

Static catalog of the video generation providers the router knows about:
pricing, capabilities and the enumerations each provider accepts. The
catalog is built and validated once at import time and is read-only
afterwards, so it can be shared across threads without locking.
"""
from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import List, Literal, Mapping, Optional, Tuple

AuthType = Literal["api_key", "oauth", "bearer"]


@dataclass(frozen=True)
class FreeTier:
    seconds: int
    description: str


@dataclass(frozen=True)
class Pricing:
    cost_per_second: float
    currency: str = "USD"
    free_tier: Optional[FreeTier] = None


@dataclass(frozen=True)
class ProviderCapabilities:
    """What a provider accepts beyond prompt, duration and aspect ratio.

    An empty ``supported_durations`` means any whole number of seconds up
    to the provider's ``max_duration``.
    """
    supports_multiple_videos: bool = False
    supports_conditioning_image: bool = False
    supports_negative_prompt: bool = False
    supports_resolution: bool = False
    supports_fps: bool = False
    supports_audio: bool = False
    max_videos: int = 1
    supported_resolutions: Tuple[str, ...] = ()
    supported_fps: Tuple[int, ...] = ()
    supported_durations: Tuple[int, ...] = ()


@dataclass(frozen=True)
class ProviderDescriptor:
    """Capability descriptor for one provider."""
    id: str
    name: str
    description: str
    pricing: Pricing
    features: Tuple[str, ...]
    max_duration: int
    supported_aspect_ratios: Tuple[str, ...]
    api_endpoint: str
    auth_type: AuthType
    capabilities: ProviderCapabilities
    models: Tuple[str, ...]
    requires_auth: bool = True

    @property
    def default_model(self) -> str:
        return self.models[0]

    def to_dict(self) -> dict:
        free_tier = self.pricing.free_tier
        caps = self.capabilities
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "pricing": {
                "cost_per_second": self.pricing.cost_per_second,
                "currency": self.pricing.currency,
                "free_tier": (
                    {"seconds": free_tier.seconds, "description": free_tier.description}
                    if free_tier else None
                ),
            },
            "features": list(self.features),
            "max_duration": self.max_duration,
            "supported_aspect_ratios": list(self.supported_aspect_ratios),
            "api_endpoint": self.api_endpoint,
            "auth_type": self.auth_type,
            "requires_auth": self.requires_auth,
            "models": list(self.models),
            "capabilities": {
                "supports_multiple_videos": caps.supports_multiple_videos,
                "supports_conditioning_image": caps.supports_conditioning_image,
                "supports_negative_prompt": caps.supports_negative_prompt,
                "supports_resolution": caps.supports_resolution,
                "supports_fps": caps.supports_fps,
                "supports_audio": caps.supports_audio,
                "max_videos": caps.max_videos,
                "supported_resolutions": list(caps.supported_resolutions),
                "supported_fps": list(caps.supported_fps),
                "supported_durations": list(caps.supported_durations),
            },
        }


def validate_descriptor(descriptor: ProviderDescriptor) -> None:
    """
    Check that a descriptor is internally consistent.

    Raises:
        ValueError: If any field contradicts another
    """
    caps = descriptor.capabilities
    prefix = f"Provider '{descriptor.id}'"

    if descriptor.pricing.cost_per_second < 0:
        raise ValueError(f"{prefix}: cost per second must not be negative")
    if descriptor.max_duration <= 0:
        raise ValueError(f"{prefix}: max duration must be positive")
    if not descriptor.supported_aspect_ratios:
        raise ValueError(f"{prefix}: at least one aspect ratio is required")
    if not descriptor.models:
        raise ValueError(f"{prefix}: at least one model is required")

    for seconds in caps.supported_durations:
        if not 1 <= seconds <= descriptor.max_duration:
            raise ValueError(
                f"{prefix}: supported duration {seconds}s outside 1-{descriptor.max_duration}s"
            )

    if caps.max_videos < 1:
        raise ValueError(f"{prefix}: max videos must be at least 1")
    if not caps.supports_multiple_videos and caps.max_videos != 1:
        raise ValueError(f"{prefix}: max videos must be 1 without multiple video support")
    if not caps.supports_resolution and caps.supported_resolutions:
        raise ValueError(f"{prefix}: resolutions listed but resolution is unsupported")
    if caps.supports_resolution and not caps.supported_resolutions:
        raise ValueError(f"{prefix}: resolution supported but no resolutions listed")
    if not caps.supports_fps and caps.supported_fps:
        raise ValueError(f"{prefix}: FPS values listed but FPS is unsupported")
    if caps.supports_fps and not caps.supported_fps:
        raise ValueError(f"{prefix}: FPS supported but no values listed")


def is_duration_supported(descriptor: ProviderDescriptor, duration_seconds: int) -> bool:
    """Return True if the provider accepts a clip of this length."""
    if not 1 <= duration_seconds <= descriptor.max_duration:
        return False
    durations = descriptor.capabilities.supported_durations
    return not durations or duration_seconds in durations


_CATALOG: Tuple[ProviderDescriptor, ...] = (
    ProviderDescriptor(
        id="veo-2",
        name="Google Veo 2.0",
        description="Google's latest video generation model with high quality output",
        pricing=Pricing(0.35, "USD", FreeTier(30, "30 seconds free per month")),
        features=("Text-to-video", "Image-to-video", "High quality", "Fast generation"),
        max_duration=8,
        supported_aspect_ratios=("16:9", "9:16"),
        api_endpoint="https://generativelanguage.googleapis.com/v1beta",
        auth_type="api_key",
        capabilities=ProviderCapabilities(
            supports_conditioning_image=True,
            supports_negative_prompt=True,
            supported_durations=(5, 6, 7, 8),
        ),
        models=("veo-2.0-generate-001",),
    ),
    ProviderDescriptor(
        id="veo-3",
        name="VEO3 API",
        description="Advanced video generation with enhanced capabilities and audio generation",
        pricing=Pricing(0.08, "USD", FreeTier(20, "20 seconds free per month")),
        features=(
            "Text-to-video", "Image-to-video", "Audio generation",
            "Enhanced prompts", "Advanced features",
        ),
        max_duration=8,
        supported_aspect_ratios=("16:9",),
        api_endpoint="https://api.veo3gen.app/api",
        auth_type="bearer",
        capabilities=ProviderCapabilities(
            supports_conditioning_image=True,
            supports_negative_prompt=True,
            supports_resolution=True,
            supports_audio=True,
            supported_resolutions=("720p", "1080p"),
            supported_durations=(4, 6, 8),
        ),
        models=("veo3-fast", "veo3-quality"),
    ),
    ProviderDescriptor(
        id="runwayml",
        name="RunwayML Gen-4",
        description=(
            "Professional video generation with Gen-4 model featuring enhanced "
            "camera controls and style consistency"
        ),
        pricing=Pricing(0.05, "USD", FreeTier(125, "125 seconds free per month")),
        features=(
            "Text-to-video", "Image-to-video", "Video-to-video", "Camera controls",
            "Keyframe controls", "Style consistency",
        ),
        max_duration=18,
        supported_aspect_ratios=("16:9", "9:16", "1:1"),
        api_endpoint="https://api.runwayml.com/v1/image_to_video",
        auth_type="bearer",
        capabilities=ProviderCapabilities(
            supports_multiple_videos=True,
            supports_conditioning_image=True,
            supports_negative_prompt=True,
            supports_resolution=True,
            supports_fps=True,
            max_videos=4,
            supported_resolutions=("720p", "1080p", "4K"),
            supported_fps=(24, 30, 60),
            supported_durations=tuple(range(3, 19)),
        ),
        models=("gen4", "gen4_turbo"),
    ),
    ProviderDescriptor(
        id="luma",
        name="Luma Dream Machine",
        description=(
            "State-of-the-art video generation producing 120 frames in 2 minutes "
            "with character consistency and realistic physics"
        ),
        pricing=Pricing(0.02, "USD", FreeTier(30, "30 seconds free per month")),
        features=(
            "Text-to-video", "Image-to-video", "Character consistency",
            "Realistic physics", "Camera motion control", "Loop creation",
        ),
        max_duration=5,
        supported_aspect_ratios=("16:9", "9:16", "1:1"),
        api_endpoint="https://api.lumalabs.ai/dream-machine/v1/generations",
        auth_type="bearer",
        capabilities=ProviderCapabilities(
            supports_conditioning_image=True,
            supports_negative_prompt=True,
            supports_resolution=True,
            supported_resolutions=("720p", "1080p"),
            supported_durations=(3, 4, 5),
        ),
        models=("dream_machine_v1",),
    ),
    ProviderDescriptor(
        id="pika",
        name="Pika Labs 2.2",
        description="Enhanced video generation with improved image integration and faster generation speeds",
        pricing=Pricing(0.03, "USD", FreeTier(20, "20 seconds free per month")),
        features=(
            "Text-to-video", "Image-to-video", "Custom image integration",
            "Faster generation", "Artistic styles", "Creative effects",
        ),
        max_duration=4,
        supported_aspect_ratios=("16:9", "9:16", "1:1"),
        api_endpoint="https://api.pika.art/v1/generate",
        auth_type="bearer",
        capabilities=ProviderCapabilities(
            supports_multiple_videos=True,
            supports_conditioning_image=True,
            supports_negative_prompt=True,
            supports_resolution=True,
            supports_fps=True,
            max_videos=3,
            supported_resolutions=("720p", "1080p"),
            supported_fps=(24, 30),
            supported_durations=(3, 4),
        ),
        models=("pika-2.2",),
    ),
    ProviderDescriptor(
        id="stability",
        name="Stability AI",
        description="Open-source video generation with competitive pricing",
        pricing=Pricing(0.01, "USD", FreeTier(50, "50 seconds free per month")),
        features=("Text-to-video", "Open source", "Highly customizable", "Cost-effective"),
        max_duration=5,
        supported_aspect_ratios=("16:9", "9:16", "1:1", "4:3"),
        api_endpoint="https://api.stability.ai/v2beta/image-to-video",
        auth_type="bearer",
        capabilities=ProviderCapabilities(
            supports_multiple_videos=True,
            supports_conditioning_image=True,
            supports_negative_prompt=True,
            supports_resolution=True,
            supports_fps=True,
            max_videos=4,
            supported_resolutions=("720p", "1080p"),
            supported_fps=(24, 30),
            supported_durations=(3, 4, 5),
        ),
        models=("stable-video-diffusion",),
    ),
    ProviderDescriptor(
        id="openai-sora",
        name="OpenAI Sora",
        description="Advanced video generation with exceptional quality and realistic physics",
        pricing=Pricing(0.10, "USD", FreeTier(10, "10 seconds free per month")),
        features=(
            "Text-to-video", "Image-to-video", "Exceptional quality",
            "Realistic physics", "Complex scenes", "Long-form content",
        ),
        max_duration=60,
        supported_aspect_ratios=("16:9", "9:16", "1:1", "4:3", "21:9"),
        api_endpoint="https://api.openai.com/v1/video/generations",
        auth_type="bearer",
        capabilities=ProviderCapabilities(
            supports_multiple_videos=True,
            supports_conditioning_image=True,
            supports_negative_prompt=True,
            supports_resolution=True,
            supports_fps=True,
            max_videos=4,
            supported_resolutions=("720p", "1080p", "4K"),
            supported_fps=(24, 30, 60),
            supported_durations=(5, 10, 15, 20, 30, 45, 60),
        ),
        models=("sora-1.0",),
    ),
)


def _build_registry(catalog) -> Mapping[str, ProviderDescriptor]:
    providers = {}
    for descriptor in catalog:
        validate_descriptor(descriptor)
        if descriptor.id in providers:
            raise ValueError(f"Duplicate provider id: {descriptor.id}")
        providers[descriptor.id] = descriptor
    return MappingProxyType(providers)


VIDEO_PROVIDERS: Mapping[str, ProviderDescriptor] = _build_registry(_CATALOG)


def get_provider_by_id(provider_id: str) -> Optional[ProviderDescriptor]:
    return VIDEO_PROVIDERS.get(provider_id)


def get_all_providers() -> List[ProviderDescriptor]:
    """Return every provider in registration order."""
    return list(VIDEO_PROVIDERS.values())


def get_provider_ids() -> List[str]:
    return list(VIDEO_PROVIDERS.keys())


def get_providers_by_budget(max_cost_per_second: float) -> List[ProviderDescriptor]:
    """Return providers whose per-second price does not exceed the budget."""
    return [
        provider for provider in get_all_providers()
        if provider.pricing.cost_per_second <= max_cost_per_second
    ]


def get_default_model(provider_id: str) -> str:
    """
    Get the default model tier for a provider.

    Raises:
        ValueError: If provider is not registered
    """
    descriptor = get_provider_by_id(provider_id)
    if descriptor is None:
        raise ValueError(f"Unsupported provider: {provider_id}")
    return descriptor.default_model
