"""HTTP fetching with bounded retries, request pacing and batched fan-out."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Awaitable, Callable, Iterable, Sequence, TypeVar

import aiohttp

from config import Config

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


def _describe(error: BaseException | str | None) -> str:
    return str(error) or type(error).__name__


class NetworkError(Exception):
    """A URL could not be fetched within its attempt budget."""

    def __init__(self, url: str, attempts: int, cause: BaseException | str | None) -> None:
        self.url = url
        self.attempts = attempts
        self.cause = cause
        super().__init__(f"failed to fetch {url} after {attempts} attempt(s): {_describe(cause)}")


class RequestPacer:
    """Hand out request start times at least ``delay_sec`` apart.

    Each caller reserves the next free slot and then sleeps until it arrives,
    so concurrent callers queue up behind one another without holding a lock
    while they wait.
    """

    def __init__(
        self,
        delay_sec: float,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self.delay_sec = max(0.0, delay_sec)
        self._clock = clock
        self._sleep = sleep
        self._next_slot: float | None = None

    def reserve(self) -> float:
        """Claim the next slot and return how long to wait for it."""
        now = self._clock()
        slot = now if self._next_slot is None else max(now, self._next_slot)
        self._next_slot = slot + self.delay_sec
        return slot - now

    async def wait_turn(self) -> None:
        if self.delay_sec <= 0:
            return
        wait_for = self.reserve()
        if wait_for > 0:
            await self._sleep(wait_for)


async def fetch_text(
    session: Any,
    url: str,
    *,
    attempts: int = 3,
    timeout_sec: float = 15.0,
    backoff_sec: float = 1.0,
    pacer: RequestPacer | None = None,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
) -> str:
    """GET ``url`` and return the body text, retrying with linear backoff.

    Every attempt is bounded by ``timeout_sec``. A transport error, a timeout,
    a non-2xx status or an undecodable body is a failed attempt; after
    attempt ``i`` fails the call waits ``backoff_sec * (i + 1)`` before trying
    again. Once ``attempts`` have failed, :class:`NetworkError` is raised
    carrying the last observed cause.
    """
    attempts = max(1, attempts)
    timeout = aiohttp.ClientTimeout(total=timeout_sec)
    last_error: BaseException | str | None = None

    for attempt in range(attempts):
        if pacer is not None:
            await pacer.wait_turn()
        try:
            async with session.get(url, timeout=timeout) as resp:
                if 200 <= resp.status < 300:
                    return await resp.text()
                last_error = f"HTTP {resp.status}"
        except (aiohttp.ClientError, asyncio.TimeoutError, UnicodeDecodeError) as exc:
            last_error = exc
        logger.warning("Attempt %s/%s for %s failed: %s", attempt + 1, attempts, url, _describe(last_error))
        if attempt + 1 < attempts:
            await sleep(backoff_sec * (attempt + 1))

    raise NetworkError(url, attempts, last_error)


def open_session(config: Config) -> aiohttp.ClientSession:
    """Create the shared client session for one synchronizer run."""
    connector = aiohttp.TCPConnector(limit=max(8, config.batch_size * 2))
    return aiohttp.ClientSession(
        connector=connector,
        headers={"User-Agent": config.user_agent},
    )


def chunked(items: Sequence[T], size: int) -> Iterable[Sequence[T]]:
    size = max(1, size)
    for start in range(0, len(items), size):
        yield items[start : start + size]


async def gather_in_batches(
    items: Sequence[T],
    worker: Callable[[T], Awaitable[R]],
    batch_size: int,
) -> list[R | BaseException]:
    """Run ``worker`` over ``items`` in waves of at most ``batch_size``.

    Waves run one after another in input order. Inside a wave every call runs
    concurrently and a failure is returned in place of its result, so one
    failing item never cancels its siblings. The output is aligned with
    ``items``.
    """
    results: list[R | BaseException] = []
    for batch in chunked(items, batch_size):
        settled = await asyncio.gather(*(worker(item) for item in batch), return_exceptions=True)
        results.extend(settled)
    return results
