"""
Adapter interface and shared HTTP handling for provider clients.

Every provider adapter turns a ``GenerationRequest`` into one provider's
wire protocol and returns a ``GenerationResult``. Failures are raised as
``VideoGenerationError`` subclasses; the router converts them into failed
results.
"""

import threading
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import requests

from ..exceptions import (
    AuthenticationError,
    InsufficientCreditsError,
    MissingCredentialError,
    ProviderAPIError,
    RateLimitError,
)
from ..logger import get_library_logger
from ..models import GenerationRequest, GenerationResult
from ..registry import ProviderDescriptor

# HTTP Status Code Constants
HTTP_BAD_REQUEST = 400
HTTP_UNAUTHORIZED = 401
HTTP_PAYMENT_REQUIRED = 402
HTTP_RATE_LIMIT = 429

DEFAULT_REQUEST_TIMEOUT = 30
DEFAULT_STATUS_TIMEOUT = 10

PLACEHOLDER_KEYS = ("your_api_key_here", "your-api-key", "sk-...")

CREDIT_KEYWORDS = (
    "insufficient credits",
    "not enough credit",
    "do not have enough credits",
)


def is_insufficient_credits(response_text: str) -> bool:
    """Return True if an error body says the account ran out of credits."""
    combined = (response_text or "").lower()
    return any(keyword in combined for keyword in CREDIT_KEYWORDS)


def raise_for_provider_status(response, provider_name: str, provider_id: Optional[str] = None) -> None:
    """
    Raise the most specific error for a non-success HTTP response.

    The body is read as text whatever its content type, and both the status
    code and the body appear in the message.

    Raises:
        AuthenticationError: 401
        InsufficientCreditsError: 402, or 400 whose body mentions credits
        RateLimitError: 429
        ProviderAPIError: Any other non-2xx status
    """
    status = response.status_code
    if 200 <= status < 300:
        return

    error_text = response.text or ""
    if status == HTTP_UNAUTHORIZED:
        raise AuthenticationError(
            f"Authentication failed ({status}). Please check your {provider_name} API key. - {error_text}",
            provider=provider_id,
            status_code=status
        )
    if status == HTTP_RATE_LIMIT:
        raise RateLimitError(
            f"Rate limit exceeded ({status}). Please try again later. - {error_text}",
            provider=provider_id,
            status_code=status
        )
    if status == HTTP_PAYMENT_REQUIRED or (
        status == HTTP_BAD_REQUEST and is_insufficient_credits(error_text)
    ):
        raise InsufficientCreditsError(
            f"Insufficient credits ({status}). Please add credits to your {provider_name} account. - {error_text}",
            provider=provider_id,
            status_code=status
        )
    raise ProviderAPIError(
        f"{provider_name} API error: {status} - {error_text}",
        provider=provider_id,
        status_code=status
    )


def summarize_payload(payload: Dict[str, Any]) -> Dict[str, Any]:
    """Shorten long values (encoded images) for debug logging."""
    summary = {}
    for key, value in payload.items():
        if isinstance(value, dict):
            summary[key] = summarize_payload(value)
        elif isinstance(value, str) and len(value) > 100:
            summary[key] = f"<{len(value)} chars>"
        elif isinstance(value, list):
            summary[key] = f"<{len(value)} items>"
        else:
            summary[key] = value
    return summary


class VideoProviderAdapter(ABC):
    """Base class for provider protocol adapters.

    Adapters hold configuration only, never per-call state, so one instance
    can serve concurrent requests.
    """

    provider_name = "Provider"

    def __init__(
        self,
        request_timeout: float = DEFAULT_REQUEST_TIMEOUT,
        status_timeout: float = DEFAULT_STATUS_TIMEOUT
    ):
        self.request_timeout = request_timeout
        self.status_timeout = status_timeout
        self.logger = get_library_logger()

    @abstractmethod
    def generate(
        self,
        descriptor: ProviderDescriptor,
        request: GenerationRequest,
        api_key: Optional[str],
        cancel_event: Optional[threading.Event] = None
    ) -> GenerationResult:
        """Submit the request to the provider and return a normalized result."""

    def _require_credential(self, api_key: Optional[str], descriptor: ProviderDescriptor) -> str:
        if not api_key or not api_key.strip():
            raise MissingCredentialError(
                f"{self.provider_name} API key required",
                provider=descriptor.id
            )
        api_key = api_key.strip()
        if api_key in PLACEHOLDER_KEYS:
            raise MissingCredentialError(
                f"{self.provider_name} API key appears to be a placeholder: '{api_key}'",
                provider=descriptor.id
            )
        return api_key

    def _get_headers(self, api_key: str) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }

    def _post_json(
        self,
        url: str,
        api_key: str,
        payload: Dict[str, Any],
        provider_id: Optional[str] = None
    ) -> Dict[str, Any]:
        """POST a JSON body and return the decoded JSON response."""
        self.logger.debug(f"POST {url} payload: {summarize_payload(payload)}")
        try:
            response = requests.post(
                url,
                headers=self._get_headers(api_key),
                json=payload,
                timeout=self.request_timeout
            )
        except requests.exceptions.RequestException as e:
            self.logger.error(f"{self.provider_name} API error: {e}")
            raise ProviderAPIError(f"{self.provider_name} API request failed: {e}", provider=provider_id)

        raise_for_provider_status(response, self.provider_name, provider_id)
        return self._parse_json(response, provider_id)

    def _get_json(self, url: str, api_key: str, provider_id: Optional[str] = None) -> Dict[str, Any]:
        """GET a JSON resource such as a job status."""
        try:
            response = requests.get(
                url,
                headers=self._get_headers(api_key),
                timeout=self.status_timeout
            )
        except requests.exceptions.RequestException as e:
            self.logger.error(f"{self.provider_name} status check error: {e}")
            raise ProviderAPIError(f"{self.provider_name} status check failed: {e}", provider=provider_id)

        raise_for_provider_status(response, self.provider_name, provider_id)
        return self._parse_json(response, provider_id)

    def _parse_json(self, response, provider_id: Optional[str] = None) -> Dict[str, Any]:
        try:
            data = response.json()
        except ValueError:
            raise ProviderAPIError(
                f"{self.provider_name} returned a non-JSON response: {(response.text or '')[:500]}",
                provider=provider_id
            )
        if not isinstance(data, dict):
            raise ProviderAPIError(
                f"{self.provider_name} returned an unexpected response: {str(data)[:500]}",
                provider=provider_id
            )
        return data
