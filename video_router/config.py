"""
Configuration module for the video generation router.

Handles environment variables, API keys, and default polling/timeout
settings. Values are read from the process environment and from a ``.env``
file in the working directory, if one exists.

The router itself never reads configuration. Callers resolve a credential
here and pass it to ``generate_video`` explicitly.
"""

import os
from dataclasses import dataclass
from typing import Dict, List, Optional

from dotenv import load_dotenv

from .registry import get_all_providers, get_providers_by_budget
from .pricing import format_cost

load_dotenv()

# Defaults
DEFAULT_POLL_INTERVAL = 10.0
DEFAULT_MAX_WAIT = 300.0
DEFAULT_REQUEST_TIMEOUT = 30.0
DEFAULT_STATUS_TIMEOUT = 10.0
DEFAULT_LOG_DIR = "logs"

# Error messages
ERROR_POLL_INTERVAL_INVALID = "Poll interval must be positive"
ERROR_MAX_WAIT_INVALID = "Maximum wait must be positive"
ERROR_TIMEOUT_INVALID = "Request timeouts must be positive"

# Named secret for each provider
API_KEY_ENV_VARS: Dict[str, str] = {
    "veo-2": "GOOGLE_API_KEY",
    "veo-3": "VEO3_API_KEY",
    "runwayml": "RUNWAY_API_KEY",
    "luma": "LUMA_API_KEY",
    "pika": "PIKA_API_KEY",
    "stability": "STABILITY_API_KEY",
    "openai-sora": "OPENAI_API_KEY",
}


def _float_from_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got '{raw}'")


@dataclass
class RouterConfig:
    """Polling, timeout and logging settings for the router and its adapters."""

    poll_interval: float = DEFAULT_POLL_INTERVAL    # seconds between status checks
    max_wait: float = DEFAULT_MAX_WAIT              # ceiling on total polling time
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    status_timeout: float = DEFAULT_STATUS_TIMEOUT
    log_dir: str = DEFAULT_LOG_DIR

    @classmethod
    def from_environment(cls) -> "RouterConfig":
        """
        Create configuration from environment variables.

        Reads VIDEO_ROUTER_POLL_INTERVAL, VIDEO_ROUTER_MAX_WAIT,
        VIDEO_ROUTER_REQUEST_TIMEOUT, VIDEO_ROUTER_STATUS_TIMEOUT and
        VIDEO_ROUTER_LOG_DIR. Unset variables keep their defaults.

        Returns:
            RouterConfig: Validated configuration instance

        Raises:
            ValueError: If a variable is not a number or fails validation
        """
        config = cls(
            poll_interval=_float_from_env("VIDEO_ROUTER_POLL_INTERVAL", DEFAULT_POLL_INTERVAL),
            max_wait=_float_from_env("VIDEO_ROUTER_MAX_WAIT", DEFAULT_MAX_WAIT),
            request_timeout=_float_from_env("VIDEO_ROUTER_REQUEST_TIMEOUT", DEFAULT_REQUEST_TIMEOUT),
            status_timeout=_float_from_env("VIDEO_ROUTER_STATUS_TIMEOUT", DEFAULT_STATUS_TIMEOUT),
            log_dir=os.getenv("VIDEO_ROUTER_LOG_DIR", DEFAULT_LOG_DIR),
        )
        config.validate()
        return config

    def validate(self) -> None:
        """
        Validate configuration values.

        Raises:
            ValueError: If any configuration values are invalid
        """
        if self.poll_interval <= 0:
            raise ValueError(ERROR_POLL_INTERVAL_INVALID)
        if self.max_wait <= 0:
            raise ValueError(ERROR_MAX_WAIT_INVALID)
        if self.request_timeout <= 0 or self.status_timeout <= 0:
            raise ValueError(ERROR_TIMEOUT_INVALID)


def get_api_key_env_var(provider_id: str) -> str:
    """
    Name of the environment variable holding a provider's API key.

    Raises:
        ValueError: If provider is not supported
    """
    if provider_id not in API_KEY_ENV_VARS:
        raise ValueError(f"Unsupported provider: {provider_id}")
    return API_KEY_ENV_VARS[provider_id]


def resolve_api_key(provider_id: str) -> Optional[str]:
    """
    Read a provider's API key from the environment.

    Returns:
        The key, or None when unset or blank. Unknown providers also give None
        so the router can report them.
    """
    env_var = API_KEY_ENV_VARS.get(provider_id)
    if env_var is None:
        return None
    value = os.getenv(env_var)
    if not value or not value.strip():
        return None
    return value.strip()


def get_available_providers() -> List[str]:
    """
    Get list of providers whose API key is set in the environment.

    Returns:
        Provider ids in registration order
    """
    return [d.id for d in get_all_providers() if resolve_api_key(d.id)]


def print_available_providers(max_cost_per_second: Optional[float] = None) -> None:
    """
    Print registered providers with pricing and credential status.

    Args:
        max_cost_per_second: Only show providers at or under this price
    """
    if max_cost_per_second is None:
        providers = get_all_providers()
    else:
        providers = get_providers_by_budget(max_cost_per_second)

    print("=" * 60)
    print("Available video providers")
    if max_cost_per_second is not None:
        print(f"(cost per second <= {format_cost(max_cost_per_second)})")
    print("=" * 60)

    if not providers:
        print("\nNo providers match.")

    for descriptor in providers:
        configured = "configured" if resolve_api_key(descriptor.id) else f"set {API_KEY_ENV_VARS[descriptor.id]}"
        price = format_cost(descriptor.pricing.cost_per_second, descriptor.pricing.currency)
        print(f"\n{descriptor.name} [{descriptor.id}]  {price}/s  ({configured})")
        print(f"  {descriptor.description}")
        print(f"  Max duration: {descriptor.max_duration}s   "
              f"Aspect ratios: {', '.join(descriptor.supported_aspect_ratios)}")
        print(f"  Models: {', '.join(descriptor.models)} (default: {descriptor.default_model})")
        if descriptor.pricing.free_tier:
            print(f"  Free tier: {descriptor.pricing.free_tier.description}")

    print()
    print("=" * 60)
