"""Bounded retry with backoff for remote calls.

`RetryPolicy` holds the knobs; `retrying()` turns it into a tenacity
AsyncRetrying whose sleep is injectable so tests run without waiting.

Timeline for max_attempts=3, pre_attempt_delay=0.1, backoff 0.5 x2:

    sleep(0.1) attempt 1 -> fail
    sleep(0.5) sleep(0.1) attempt 2 -> fail
    sleep(1.0) sleep(0.1) attempt 3 -> fail -> re-raise last error
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    max_attempts: int = 3
    backoff_initial: float = 0.5
    backoff_factor: float = 2.0
    backoff_max: float = 5.0
    pre_attempt_delay: float = 0.0

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {self.max_attempts}")


def retrying(
    policy: RetryPolicy,
    retry_on: tuple[type[BaseException], ...],
    *,
    sleep: Sleep = asyncio.sleep,
    label: str = "remote call",
) -> AsyncRetrying:
    """AsyncRetrying for `policy`; only `retry_on` exceptions are retried.

        body = await retrying(policy, (httpx.TransportError,), sleep=sleep)(fetch)

    Anything else propagates at once. After the last attempt the final
    exception is re-raised as is, not wrapped in tenacity.RetryError.
    """

    async def _pause(retry_state: RetryCallState) -> None:
        if policy.pre_attempt_delay > 0:
            await sleep(policy.pre_attempt_delay)

    def _log_retry(retry_state: RetryCallState) -> None:
        logger.warning(
            "%s attempt %d/%d failed (%s), retrying in %.2fs",
            label,
            retry_state.attempt_number,
            policy.max_attempts,
            retry_state.outcome.exception() if retry_state.outcome else None,
            retry_state.next_action.sleep if retry_state.next_action else 0.0,
        )

    return AsyncRetrying(
        sleep=sleep,
        stop=stop_after_attempt(policy.max_attempts),
        wait=wait_exponential(
            multiplier=policy.backoff_initial,
            exp_base=policy.backoff_factor,
            max=policy.backoff_max,
        ),
        retry=retry_if_exception_type(retry_on),
        before=_pause,
        before_sleep=_log_retry,
        reraise=True,
    )
