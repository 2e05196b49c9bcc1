"""Bounded convergence polling for an eventually consistent backend.

Every mutating call is followed by a wait until the backend reports the
expected state. Attempts are capped and delays grow geometrically up to a
ceiling; running out of attempts raises ``ConvergenceTimeoutError`` instead of
blocking the caller forever.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

from packages.regstore_shared.logging import fields, log_context
from packages.regstore_shared.storage_driver import ConvergenceTimeoutError

logger = logging.getLogger(__name__)

Sleeper = Callable[[float], None]
Clock = Callable[[], float]


@dataclass(frozen=True)
class ConvergencePolicy:
    """Attempt cap and backoff shape for one convergence wait."""

    max_attempts: int = 30
    initial_delay_seconds: float = 1.0
    backoff_multiplier: float = 1.5
    max_delay_seconds: float = 10.0

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1.")
        if self.initial_delay_seconds < 0:
            raise ValueError("initial_delay_seconds must be >= 0.")
        if self.backoff_multiplier < 1:
            raise ValueError("backoff_multiplier must be >= 1.")
        if self.max_delay_seconds < 0:
            raise ValueError("max_delay_seconds must be >= 0.")

    def delay_for(self, attempt: int) -> float:
        """Return the sleep after failed attempt number ``attempt`` (1-based)."""
        if attempt <= 0:
            raise ValueError("attempt must be >= 1.")
        delay = self.initial_delay_seconds * self.backoff_multiplier ** (attempt - 1)
        return min(delay, self.max_delay_seconds)


class ConsistencyPoller:
    """Run checks on the calling thread until the backend converges."""

    def __init__(
        self,
        *,
        policy: ConvergencePolicy,
        driver_name: str,
        sleep: Sleeper = time.sleep,
        clock: Clock = time.monotonic,
    ) -> None:
        self._policy = policy
        self._driver_name = driver_name
        self._sleep = sleep
        self._clock = clock

    @property
    def policy(self) -> ConvergencePolicy:
        return self._policy

    def wait_until(
        self,
        condition: Callable[[], bool],
        *,
        path: str,
        retry_on: tuple[type[Exception], ...] = (),
    ) -> int:
        """Call ``condition`` until it returns True and return the attempts used.

        Exceptions listed in ``retry_on`` count as one failed attempt; any
        other exception propagates immediately.
        """
        started = self._clock()
        for attempt in range(1, self._policy.max_attempts + 1):
            try:
                if condition():
                    return attempt
                reason = "state mismatch"
            except retry_on as exc:
                reason = f"{type(exc).__name__}: {exc}"

            if attempt == self._policy.max_attempts:
                break
            delay = self._policy.delay_for(attempt)
            with log_context(
                {
                    fields.PATH: path,
                    fields.ATTEMPT: attempt,
                    fields.DELAY_SECONDS: delay,
                    fields.ERRORS: reason,
                }
            ):
                logger.debug("Backend not converged; retrying")
            self._sleep(delay)

        elapsed = self._clock() - started
        with log_context({fields.PATH: path, fields.ATTEMPT: self._policy.max_attempts}):
            logger.warning("Backend did not converge within retry policy")
        raise ConvergenceTimeoutError(
            driver_name=self._driver_name,
            path=path,
            attempts=self._policy.max_attempts,
            elapsed_seconds=elapsed,
        )

    def retry(
        self,
        action: Callable[[], None],
        *,
        path: str,
        retry_on: tuple[type[Exception], ...],
    ) -> int:
        """Repeat ``action`` until it stops raising one of ``retry_on``."""

        def succeeded() -> bool:
            action()
            return True

        return self.wait_until(succeeded, path=path, retry_on=retry_on)
