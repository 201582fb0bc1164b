"""
Main video generation routing module.

This module provides the unified interface for video generation across the
registered providers (Veo 2, Veo 3, RunwayML, Luma, Pika, Stability, OpenAI
Sora). ``generate_video()`` looks the provider up in the registry, picks the
protocol adapter for it and returns the adapter's normalized result.

Routing never raises. Every failure, including unknown providers and
unexpected adapter errors, comes back as a failed ``GenerationResult``.

Provider-specific protocol handling lives in ``video_router.providers``.
"""
from __future__ import annotations

import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Dict, Optional

from .config import RouterConfig
from .exceptions import ProviderNotFoundError, ProviderNotImplementedError, VideoGenerationError
from .logger import get_library_logger
from .models import GenerationRequest, GenerationResult
from .pricing import estimate_cost as _estimate_cost
from .providers import (
    LumaClient,
    RunwayClient,
    SoraClient,
    StabilityClient,
    Veo2Client,
    Veo3Client,
    VideoProviderAdapter,
)
from .registry import get_provider_by_id

DEFAULT_MAX_WORKERS = 4


def create_default_adapters(config: Optional[RouterConfig] = None) -> Dict[str, VideoProviderAdapter]:
    """
    Build the provider id to adapter table.

    ``pika`` is registered in the catalog but has no adapter, so requests
    for it are reported as not implemented.

    Args:
        config: Timeout and polling settings. Defaults to RouterConfig().
    """
    config = config or RouterConfig()
    http = dict(request_timeout=config.request_timeout, status_timeout=config.status_timeout)
    polling = dict(poll_interval=config.poll_interval, max_wait=config.max_wait, **http)
    return {
        "veo-2": Veo2Client(**polling),
        "veo-3": Veo3Client(**polling),
        "runwayml": RunwayClient(**http),
        "luma": LumaClient(**http),
        "stability": StabilityClient(**http),
        "openai-sora": SoraClient(**http),
    }


class VideoGenerator:
    """Dispatches generation requests to provider adapters.

    Holds no per-request state; one instance can serve concurrent callers.
    """

    def __init__(
        self,
        adapters: Optional[Dict[str, VideoProviderAdapter]] = None,
        config: Optional[RouterConfig] = None,
        max_workers: int = DEFAULT_MAX_WORKERS
    ):
        self._adapters = dict(adapters) if adapters is not None else create_default_adapters(config)
        self._max_workers = max_workers
        self._executor: Optional[ThreadPoolExecutor] = None
        self._executor_lock = threading.Lock()
        self.logger = get_library_logger()

    def register_adapter(self, provider_id: str, adapter: VideoProviderAdapter) -> None:
        """Add or replace the adapter for a provider id."""
        self._adapters[provider_id] = adapter

    def has_adapter(self, provider_id: str) -> bool:
        return provider_id in self._adapters

    def generate_video(
        self,
        provider_id: str,
        request: GenerationRequest,
        api_key: Optional[str] = None,
        *,
        cancel_event: Optional[threading.Event] = None
    ) -> GenerationResult:
        """
        Generate video with the given provider.

        Args:
            provider_id: Registered provider id, e.g. "veo-3"
            request: Normalized generation request
            api_key: Credential for the provider. Never logged.
            cancel_event: Set it to stop polling a job-based provider

        Returns:
            GenerationResult. Failures are reported in the result, never raised.
        """
        self.logger.info(f"Generating video with provider: {provider_id}")

        descriptor = get_provider_by_id(provider_id)
        if descriptor is None:
            self.logger.error(f"Provider {provider_id} not found")
            return GenerationResult.failed(
                provider_id, ProviderNotFoundError(f"Provider {provider_id} not found", provider=provider_id)
            )

        adapter = self._adapters.get(provider_id)
        if adapter is None:
            self.logger.error(f"Provider {provider_id} not implemented yet")
            return GenerationResult.failed(
                provider_id,
                ProviderNotImplementedError(f"Provider {provider_id} not implemented yet", provider=provider_id)
            )

        try:
            result = adapter.generate(descriptor, request, api_key, cancel_event=cancel_event)
        except VideoGenerationError as e:
            self.logger.error(f"{descriptor.name} generation failed [{e.kind}]: {e}")
            return GenerationResult.failed(provider_id, e)
        except Exception as e:
            self.logger.exception(f"Unexpected error from {descriptor.name} adapter: {e}")
            return GenerationResult.failed(provider_id, e)

        if result.success:
            self.logger.info(
                f"{descriptor.name} returned {len(result.videos)} video(s)"
                + (f", cost {result.cost:.4f}" if result.cost is not None else "")
            )
        return result

    def submit_video(
        self,
        provider_id: str,
        request: GenerationRequest,
        api_key: Optional[str] = None,
        *,
        cancel_event: Optional[threading.Event] = None
    ) -> "Future[GenerationResult]":
        """Run ``generate_video`` on a worker thread and return its future."""
        return self._get_executor().submit(
            self.generate_video, provider_id, request, api_key, cancel_event=cancel_event
        )

    def estimate_cost(self, provider_id: str, duration_seconds: int, number_of_videos: int = 1) -> float:
        """
        Estimate the cost of a request before sending it.

        Raises:
            ValueError: If provider is not registered
        """
        descriptor = get_provider_by_id(provider_id)
        if descriptor is None:
            raise ValueError(f"Unsupported provider: {provider_id}")
        return _estimate_cost(descriptor, duration_seconds, number_of_videos)

    def shutdown(self, wait: bool = True) -> None:
        with self._executor_lock:
            if self._executor is not None:
                self._executor.shutdown(wait=wait)
                self._executor = None

    def _get_executor(self) -> ThreadPoolExecutor:
        with self._executor_lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=self._max_workers, thread_name_prefix="video_router"
                )
            return self._executor


_default_generator: Optional[VideoGenerator] = None
_default_lock = threading.Lock()


def get_default_generator() -> VideoGenerator:
    """Process-wide router using environment configuration."""
    global _default_generator
    with _default_lock:
        if _default_generator is None:
            _default_generator = VideoGenerator(config=RouterConfig.from_environment())
        return _default_generator


def generate_video(
    provider_id: str,
    request: GenerationRequest,
    api_key: Optional[str] = None,
    *,
    cancel_event: Optional[threading.Event] = None
) -> GenerationResult:
    """Generate video with the default router. See VideoGenerator.generate_video."""
    return get_default_generator().generate_video(provider_id, request, api_key, cancel_event=cancel_event)


def submit_video(
    provider_id: str,
    request: GenerationRequest,
    api_key: Optional[str] = None,
    *,
    cancel_event: Optional[threading.Event] = None
) -> "Future[GenerationResult]":
    return get_default_generator().submit_video(provider_id, request, api_key, cancel_event=cancel_event)


def estimate_cost(provider_id: str, duration_seconds: int, number_of_videos: int = 1) -> float:
    return get_default_generator().estimate_cost(provider_id, duration_seconds, number_of_videos)
