# ================================================================================
# Readiness Wait Engine
# ================================================================================
#
# Polling utilities that decide when a browser navigation has settled on the
# expected page.
#
# Key Features:
#   - Generic "poll until predicate or timeout" loop (async)
#   - Page readiness predicate built from a PageDescriptor
#   - Optional interval backoff through WaitConfig
#   - Single timeout error type (WaitTimeoutError, a builtin TimeoutError)
#
# Usage:
#   config = WaitConfig(timeout=30)
#   await wait_for_page_ready(session, LoginPage.descriptor(), config)
#   await poll_until(lambda: has_focus("username"), config, "username focused")
#
# ================================================================================

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Optional

from loguru import logger
from playwright.async_api import Error as PlaywrightError

if TYPE_CHECKING:
    from .browser_manager import NavigationSession


READY_STATE_SCRIPT = "document.readyState"
READY_STATE_COMPLETE = "complete"

Predicate = Callable[[], Awaitable[Any]]

# Floor for a single evaluation so the first one still gets to run at a zero timeout
MIN_EVALUATION_SECONDS = 0.05


class WaitTimeoutError(TimeoutError):
    """Raised when a wait operation exceeds its bound."""
    pass


@dataclass(frozen=True)
class PageDescriptor:
    """
    Immutable per-page-type metadata used by the readiness wait.

    Attributes:
        path: Canonical relative path (e.g. "/LoginPage.do")
        alias_path: Path also accepted as "arrived"
        reject_path: Path that settles the wait immediately (caller decides outcome)
        ready_indicator: Name of a script variable that must be defined and truthy
        server: Server group the page lives on ("emr", "lab", "facility")
    """
    path: str
    alias_path: Optional[str] = None
    reject_path: Optional[str] = None
    ready_indicator: Optional[str] = None
    server: str = "emr"


@dataclass(frozen=True)
class WaitConfig:
    """
    Configuration for wait operations.

    Attributes:
        timeout: Total timeout in seconds
        poll_interval: Initial interval between evaluations in seconds
        multiplier: Interval multiplier per attempt (1.0 keeps it fixed)
        max_interval: Upper bound for the interval in seconds
    """
    timeout: float = 30.0
    poll_interval: float = 0.5
    multiplier: float = 1.0
    max_interval: float = 5.0

    def with_timeout(self, timeout: Optional[float]) -> "WaitConfig":
        """Return a copy bound to another timeout (None keeps the current one)."""
        if timeout is None:
            return self
        return WaitConfig(
            timeout=timeout,
            poll_interval=self.poll_interval,
            multiplier=self.multiplier,
            max_interval=self.max_interval,
        )


def calculate_next_interval(current_interval: float, config: WaitConfig) -> float:
    """Calculate the next poll interval, capped at max_interval."""
    return min(current_interval * config.multiplier, config.max_interval)


def indicator_script(name: str) -> str:
    """JavaScript expression that is true only when `name` is defined and truthy."""
    return f"(typeof {name} !== 'undefined') && !!{name}"


async def poll_until(
    predicate: Predicate,
    config: WaitConfig,
    description: str = "Waiting for condition",
    timeout_log_level: str = "ERROR",
) -> Any:
    """
    Re-evaluate `predicate` until it returns a truthy value.

    The predicate is evaluated at least once, even with a zero timeout.
    Browser errors raised while a navigation is in flight (destroyed execution
    context and the like) count as "not yet". Each evaluation is cut off at
    the time left in the bound (a page script blocked by an open native dialog
    never returns on its own).

    Args:
        predicate: Async callable re-evaluated on every poll
        config: Wait configuration
        description: Human-readable description for logging
        timeout_log_level: Level the timeout is logged at (probes use DEBUG)

    Returns:
        The first truthy predicate result

    Raises:
        WaitTimeoutError: If the timeout is exceeded
    """
    start_time = time.monotonic()
    interval = config.poll_interval
    attempt = 0
    last_error: Optional[str] = None

    while True:
        attempt += 1
        remaining = config.timeout - (time.monotonic() - start_time)
        try:
            result = await asyncio.wait_for(predicate(), max(remaining, MIN_EVALUATION_SECONDS))
            if result:
                logger.debug(
                    f"Wait successful after {attempt} attempts "
                    f"({time.monotonic() - start_time:.2f}s): {description}"
                )
                return result
        except asyncio.TimeoutError:
            last_error = "evaluation did not finish in time"
            logger.debug(f"Attempt {attempt} for '{description}' stalled")
        except PlaywrightError as e:
            last_error = str(e).splitlines()[0] if str(e) else type(e).__name__
            logger.debug(f"Attempt {attempt} for '{description}' raised: {last_error}")

        elapsed = time.monotonic() - start_time
        if elapsed >= config.timeout:
            error_msg = f"Timeout after {elapsed:.1f}s waiting for: {description}"
            if last_error:
                error_msg += f". Last error: {last_error}"
            logger.log(timeout_log_level, error_msg)
            raise WaitTimeoutError(error_msg)

        await asyncio.sleep(min(interval, max(config.timeout - elapsed, 0)))
        interval = calculate_next_interval(interval, config)


def page_ready_condition(
    session: "NavigationSession",
    descriptor: PageDescriptor,
) -> Predicate:
    """
    Build the readiness predicate for `descriptor`.

    Settled when:
        1. a reject path is configured and the current URL contains it, or
        2. the URL contains the canonical (or alias) path, the document
           ready state is "complete" and the ready indicator, when
           configured, is defined and truthy.
    """
    page = session.page

    async def is_ready() -> bool:
        current_url = page.url or ""

        if descriptor.reject_path and descriptor.reject_path in current_url:
            logger.debug(f"Landed on reject path {descriptor.reject_path}: {current_url}")
            return True

        if descriptor.path not in current_url:
            if not descriptor.alias_path or descriptor.alias_path not in current_url:
                return False

        if await page.evaluate(READY_STATE_SCRIPT) != READY_STATE_COMPLETE:
            return False

        if descriptor.ready_indicator:
            return bool(await page.evaluate(indicator_script(descriptor.ready_indicator)))
        return True

    return is_ready


async def wait_for_page_ready(
    session: "NavigationSession",
    descriptor: PageDescriptor,
    config: WaitConfig,
) -> None:
    """Block until the browser has settled on `descriptor` or raise WaitTimeoutError."""
    await poll_until(
        page_ready_condition(session, descriptor),
        config,
        description=f"page {descriptor.path} to be ready",
    )


__all__ = [
    "PageDescriptor",
    "WaitConfig",
    "WaitTimeoutError",
    "READY_STATE_SCRIPT",
    "calculate_next_interval",
    "indicator_script",
    "page_ready_condition",
    "poll_until",
    "wait_for_page_ready",
]
