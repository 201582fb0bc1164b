"""
Request and result types shared by the normalizer, router and adapters.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from .exceptions import ErrorKind, VideoGenerationError


@dataclass(frozen=True)
class ConditioningImage:
    """Reference image used to steer image-to-video generation."""
    mime_type: str
    image_bytes: str  # base64 encoded payload

    @property
    def data_uri(self) -> str:
        return f"data:{self.mime_type};base64,{self.image_bytes}"


@dataclass(frozen=True)
class GenerationRequest:
    """A validated, provider-agnostic video generation request.

    ``model``, ``resolution``, ``fps`` and ``audio`` are extension fields.
    They are left as ``None`` when the caller did not set them; the adapter
    for the selected provider decides the default.
    """
    prompt: str
    duration_seconds: int
    aspect_ratio: str
    number_of_videos: int
    provider_id: str
    negative_prompt: Optional[str] = None
    conditioning_image: Optional[ConditioningImage] = None
    model: Optional[str] = None
    resolution: Optional[str] = None
    fps: Optional[int] = None
    audio: Optional[bool] = None

    @property
    def total_seconds(self) -> int:
        return self.duration_seconds * self.number_of_videos


@dataclass(frozen=True)
class GenerationResult:
    """Normalized outcome of one generation call.

    Built by an adapter (or by the router for routing failures) and handed
    to the caller unchanged.
    """
    success: bool
    provider: str
    videos: Tuple[str, ...] = field(default_factory=tuple)
    error: Optional[str] = None
    error_kind: Optional[str] = None
    cost: Optional[float] = None

    @classmethod
    def succeeded(cls, provider: str, videos, cost: Optional[float] = None) -> "GenerationResult":
        return cls(success=True, provider=provider, videos=tuple(videos), cost=cost)

    @classmethod
    def failed(
        cls,
        provider: str,
        error: Exception,
        kind: Optional[str] = None
    ) -> "GenerationResult":
        """Build a failure envelope from an exception."""
        if kind is None:
            if isinstance(error, VideoGenerationError):
                kind = error.kind
            else:
                kind = ErrorKind.PROVIDER_ERROR
        message = str(error) or error.__class__.__name__
        return cls(success=False, provider=provider, error=message, error_kind=kind)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "success": self.success,
            "provider": self.provider,
        }
        if self.success:
            data["videos"] = list(self.videos)
        else:
            data["error"] = self.error
            data["error_kind"] = self.error_kind
        if self.cost is not None:
            data["cost"] = self.cost
        return data
