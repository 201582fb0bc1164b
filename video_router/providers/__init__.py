"""
Protocol adapters for video generation backends.

Each adapter translates a ``GenerationRequest`` into one provider's HTTP
protocol and normalizes the answer into a ``GenerationResult``.

Synchronous providers (one POST, video locator in the response):
- RunwayClient: RunwayML Gen-4
- LumaClient: Luma Dream Machine
- StabilityClient: Stable Video Diffusion
- SoraClient: OpenAI Sora

Job-based providers (submit, then poll a status endpoint):
- Veo3Client: Veo 3 through the veo3gen task API
- Veo2Client: Veo 2 through the Gemini long-running operation API
"""

from .base import VideoProviderAdapter, raise_for_provider_status
from .luma_client import LumaClient
from .polling import JobVideoClient, PollState, PollStatus
from .runway_client import RunwayClient
from .sora_client import SoraClient
from .stability_client import StabilityClient
from .sync_client import SyncVideoClient
from .veo2_client import Veo2Client
from .veo3_client import Veo3Client

__all__ = [
    'VideoProviderAdapter',
    'SyncVideoClient',
    'JobVideoClient',
    'PollState',
    'PollStatus',
    'raise_for_provider_status',
    'RunwayClient',
    'LumaClient',
    'StabilityClient',
    'SoraClient',
    'Veo3Client',
    'Veo2Client',
]
