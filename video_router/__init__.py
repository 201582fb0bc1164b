"""
Video Generation Router Package

Routes one provider-agnostic video generation request to one of several
AI video providers and normalizes the answer:
- Veo 2 (Gemini API long-running operations)
- Veo 3 (veo3gen task API)
- RunwayML, Luma, Stability AI, OpenAI Sora (single-request APIs)
- Pika (catalog entry only)

Core Modules:
- registry: Immutable provider catalog with pricing and capabilities
- pricing: Cost calculation
- normalizer: Raw parameters to a validated GenerationRequest
- video_generator: Dispatch to provider adapters, never raises
- providers/: Protocol adapters (synchronous and job-based)
- config: Environment settings and API key resolution
- logger: Centralized logging infrastructure
"""

__version__ = "1.0.0"

from .exceptions import ErrorKind, VideoGenerationError
from .models import ConditioningImage, GenerationRequest, GenerationResult
from .registry import (
    get_all_providers,
    get_default_model,
    get_provider_by_id,
    get_providers_by_budget,
)
from .pricing import calculate_cost
from .normalizer import normalize_request
from .config import RouterConfig, get_available_providers, print_available_providers, resolve_api_key
from .video_generator import VideoGenerator, estimate_cost, generate_video, submit_video
from .logger import init_library_logger, get_library_logger

__all__ = [
    'ErrorKind',
    'VideoGenerationError',
    'ConditioningImage',
    'GenerationRequest',
    'GenerationResult',
    'get_all_providers',
    'get_default_model',
    'get_provider_by_id',
    'get_providers_by_budget',
    'calculate_cost',
    'normalize_request',
    'RouterConfig',
    'get_available_providers',
    'print_available_providers',
    'resolve_api_key',
    'VideoGenerator',
    'estimate_cost',
    'generate_video',
    'submit_video',
    'init_library_logger',
    'get_library_logger',
]
