"""
Template for job-based providers.

Video synthesis routinely takes longer than an ordinary HTTP timeout, so
some providers accept a job and report completion through a status
endpoint. The poll loop below waits a fixed interval between status checks
and gives up once a wall-clock ceiling has passed.

Waits go through ``threading.Event.wait`` so a caller can cancel a
generation that is being polled by setting the event.
"""

import threading
import time
from abc import abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from ..exceptions import ClientTimeoutError, GenerationCancelledError
from ..models import GenerationRequest, GenerationResult
from ..registry import ProviderDescriptor
from .base import VideoProviderAdapter

DEFAULT_POLL_INTERVAL = 10.0   # seconds between status checks
DEFAULT_MAX_WAIT = 300.0       # 5 minute ceiling on total wait


class PollStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    TIMED_OUT = "timed-out"


@dataclass
class PollState:
    """Progress of one submitted job. Lives only as long as the poll loop."""
    task_id: str
    started_at: float
    status: PollStatus = PollStatus.PENDING
    attempts: int = 0

    def elapsed(self, now: float) -> float:
        return now - self.started_at


class JobVideoClient(VideoProviderAdapter):
    """Adapter for providers that generate asynchronously.

    Subclasses implement ``submit`` to start the job and ``check_status`` to
    inspect it. ``check_status`` returns a result once the job completed,
    ``None`` while it is still running, and raises for terminal failures.
    """

    def __init__(
        self,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        max_wait: float = DEFAULT_MAX_WAIT,
        clock: Callable[[], float] = time.monotonic,
        **kwargs
    ):
        super().__init__(**kwargs)
        if poll_interval <= 0:
            raise ValueError("Poll interval must be positive")
        if max_wait <= 0:
            raise ValueError("Maximum wait must be positive")
        self.poll_interval = poll_interval
        self.max_wait = max_wait
        self._clock = clock

    @abstractmethod
    def submit(
        self,
        descriptor: ProviderDescriptor,
        request: GenerationRequest,
        api_key: str
    ) -> str:
        """Start the job and return its identifier."""

    @abstractmethod
    def check_status(
        self,
        descriptor: ProviderDescriptor,
        request: GenerationRequest,
        api_key: str,
        state: PollState
    ) -> Optional[GenerationResult]:
        """Return a result when done, None while running; raise on failure."""

    def generate(
        self,
        descriptor: ProviderDescriptor,
        request: GenerationRequest,
        api_key: Optional[str],
        cancel_event: Optional[threading.Event] = None
    ) -> GenerationResult:
        api_key = self._require_credential(api_key, descriptor)
        self._raise_if_cancelled(cancel_event, descriptor)

        task_id = self.submit(descriptor, request, api_key)
        self.logger.info(f"{self.provider_name} generation started with task ID: {task_id}")

        state = PollState(task_id=task_id, started_at=self._clock())
        return self.poll(descriptor, request, api_key, state, cancel_event)

    def poll(
        self,
        descriptor: ProviderDescriptor,
        request: GenerationRequest,
        api_key: str,
        state: PollState,
        cancel_event: Optional[threading.Event] = None
    ) -> GenerationResult:
        """
        Poll until the job reaches a terminal status or the ceiling passes.

        No status request is made once ``max_wait`` seconds have elapsed
        since ``state.started_at``.

        Raises:
            ClientTimeoutError: If the ceiling elapses first
            GenerationCancelledError: If ``cancel_event`` is set while waiting
        """
        deadline = state.started_at + self.max_wait

        while True:
            remaining = deadline - self._clock()
            if remaining <= 0:
                break

            if self._wait(min(self.poll_interval, remaining), cancel_event):
                self._raise_if_cancelled(cancel_event, descriptor)

            state.attempts += 1
            result = self.check_status(descriptor, request, api_key, state)
            if result is not None:
                state.status = PollStatus.COMPLETED
                return result

            self.logger.debug(
                f"{self.provider_name} task {state.task_id} still running "
                f"({state.elapsed(self._clock()):.0f}s elapsed, attempt {state.attempts})"
            )

        state.status = PollStatus.TIMED_OUT
        minutes = self.max_wait / 60
        self.logger.error(
            f"{self.provider_name} task {state.task_id} did not finish within {minutes:g} minutes"
        )
        raise ClientTimeoutError(
            f"{self.provider_name} generation timed out after {minutes:g} minutes",
            provider=descriptor.id
        )

    def _wait(self, seconds: float, cancel_event: Optional[threading.Event]) -> bool:
        """Block for ``seconds``. Returns True if woken by cancellation."""
        event = cancel_event if cancel_event is not None else threading.Event()
        return event.wait(seconds)

    def _raise_if_cancelled(
        self,
        cancel_event: Optional[threading.Event],
        descriptor: ProviderDescriptor
    ) -> None:
        if cancel_event is not None and cancel_event.is_set():
            self.logger.warning(f"{self.provider_name} generation cancelled by caller")
            raise GenerationCancelledError(
                f"{self.provider_name} generation cancelled",
                provider=descriptor.id
            )
