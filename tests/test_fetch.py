import asyncio

import aiohttp
import pytest

from fetch import NetworkError, RequestPacer, chunked, fetch_text, gather_in_batches

URL = "https://example.test/page/"


def _recorder():
    delays = []

    async def sleep(seconds):
        delays.append(seconds)

    return delays, sleep


def test_fetch_text_returns_body(make_session):
    session = make_session({URL: (200, "<html></html>")})
    assert asyncio.run(fetch_text(session, URL)) == "<html></html>"
    assert session.calls == [URL]


def test_fetch_text_gives_up_after_max_attempts(make_session):
    session = make_session({URL: aiohttp.ClientConnectionError("refused")})
    delays, sleep = _recorder()

    with pytest.raises(NetworkError) as excinfo:
        asyncio.run(fetch_text(session, URL, attempts=3, backoff_sec=0.5, sleep=sleep))

    assert len(session.calls) == 3
    assert excinfo.value.attempts == 3
    assert isinstance(excinfo.value.cause, aiohttp.ClientConnectionError)
    assert delays == [0.5, 1.0]


def test_fetch_text_counts_bad_status_as_failure(make_session):
    session = make_session({URL: (503, "busy")})
    delays, sleep = _recorder()

    with pytest.raises(NetworkError, match="HTTP 503"):
        asyncio.run(fetch_text(session, URL, attempts=2, sleep=sleep))

    assert len(session.calls) == 2


def test_fetch_text_retries_until_success(make_session):
    session = make_session({URL: [asyncio.TimeoutError(), (500, ""), (200, "ok")]})
    delays, sleep = _recorder()

    assert asyncio.run(fetch_text(session, URL, attempts=4, backoff_sec=1.0, sleep=sleep)) == "ok"
    assert len(session.calls) == 3
    assert delays == [1.0, 2.0]


def test_fetch_text_treats_undecodable_body_as_failed_attempt(make_session):
    session = make_session({URL: [(200, b"\xff\xfe"), (200, "<html></html>")]})
    delays, sleep = _recorder()

    assert asyncio.run(fetch_text(session, URL, attempts=2, backoff_sec=0.5, sleep=sleep)) == "<html></html>"
    assert delays == [0.5]


def test_fetch_text_reports_undecodable_body_as_network_error(make_session):
    session = make_session({URL: (200, b"\xff")})

    with pytest.raises(NetworkError) as excinfo:
        asyncio.run(fetch_text(session, URL, attempts=1))

    assert session.calls == [URL]
    assert isinstance(excinfo.value.cause, UnicodeDecodeError)


def test_request_pacer_without_delay_does_not_wait():
    pacer = RequestPacer(0)

    async def go():
        for _ in range(3):
            await pacer.wait_turn()

    asyncio.run(go())


def test_request_pacer_spaces_request_starts():
    delays, sleep = _recorder()
    pacer = RequestPacer(0.5, clock=lambda: 100.0, sleep=sleep)

    async def go():
        for _ in range(3):
            await pacer.wait_turn()

    asyncio.run(go())
    assert delays == [0.5, 1.0]


def test_request_pacer_does_not_wait_once_the_gap_has_passed():
    now = [10.0]
    pacer = RequestPacer(0.5, clock=lambda: now[0])

    assert pacer.reserve() == 0
    now[0] = 12.0
    assert pacer.reserve() == 0
    assert pacer.reserve() == 0.5


def test_chunked():
    assert [list(batch) for batch in chunked([1, 2, 3, 4, 5], 2)] == [[1, 2], [3, 4], [5]]


def test_gather_in_batches_isolates_failures_and_bounds_concurrency():
    in_flight = 0
    peak = 0

    async def worker(n):
        nonlocal in_flight, peak
        in_flight += 1
        peak = max(peak, in_flight)
        await asyncio.sleep(0)
        in_flight -= 1
        if n == 3:
            raise ValueError("bad item")
        return n * 10

    results = asyncio.run(gather_in_batches(list(range(7)), worker, 3))

    assert peak == 3
    assert [r for r in results if not isinstance(r, BaseException)] == [0, 10, 20, 40, 50, 60]
    assert isinstance(results[3], ValueError)
