# ABOUTME: Bounded wait for asynchronous server-side create and delete operations
# ABOUTME: Re-samples resource existence on a fixed cadence until it matches

"""
Existence poller.

Some operations (creating or deleting a project) are accepted by the server
immediately but finish in the background. ``wait_for_existence`` blocks the
calling thread until the resource's existence matches the expectation:

    sleep -> look up -> matches? done : sleep -> look up -> ...

The number of lookups is capped at ``max_attempts + 1``. If the expected
state is never observed, VstsError(kind=TIMEOUT) is raised.

The loop is driven by tenacity's ``Retrying``. The ``sleep`` argument is
handed straight to tenacity, so tests can pass a no-op and run instantly.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

import structlog
from tenacity import RetryError, Retrying, retry_if_result, stop_after_attempt, wait_fixed

from vsts_client.utils.client import ErrorKind, VstsError

if TYPE_CHECKING:
    from collections.abc import Callable

logger = structlog.get_logger(__name__)

DEFAULT_MAX_ATTEMPTS = 30
DEFAULT_INTERVAL = 2.0


def wait_for_existence(
    name: str,
    should_exist: bool,
    exists: Callable[[str], bool],
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    interval: float = DEFAULT_INTERVAL,
    sleep: Callable[[float], None] = time.sleep,
) -> None:
    """
    Block until ``exists(name)`` returns ``should_exist``.

    Args:
        name: Resource name, passed to ``exists`` and used in messages
        should_exist: Expected existence state
        exists: Callable answering "does this resource exist right now?"
        max_attempts: Attempt budget; at most max_attempts + 1 lookups run
        interval: Seconds slept before every lookup
        sleep: Sleep function (injectable for tests)

    Raises:
        VstsError: TIMEOUT when the budget is exhausted. Errors raised by
            ``exists`` propagate unchanged.
    """
    log = logger.bind(resource=name, should_exist=should_exist)

    def observe() -> bool:
        observed = exists(name)
        log.debug("Polled resource existence", observed=observed)
        return observed

    retrying = Retrying(
        stop=stop_after_attempt(max_attempts + 1),
        wait=wait_fixed(interval),
        retry=retry_if_result(lambda observed: observed != should_exist),
        sleep=sleep,
    )

    # tenacity waits between attempts only; the first lookup is also delayed
    sleep(interval)
    try:
        retrying(observe)
    except RetryError as e:
        attempts = e.last_attempt.attempt_number
        state = "exist" if should_exist else "be removed"
        log.warning("Gave up waiting for resource", attempts=attempts)
        raise VstsError(
            ErrorKind.TIMEOUT,
            f"Timed out waiting for '{name}' to {state} after {attempts} attempts",
        ) from e
