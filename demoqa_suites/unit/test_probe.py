import asyncio
import time

import pytest

from demoqa_suites.ui_testing.framework.probe import (
    PollPolicy,
    Probe,
    attached,
    hidden,
    probe,
    text_contains,
    url_contains,
    visible,
)
from demoqa_suites.unit.fakes import FakeLocator, FakePage


@pytest.mark.asyncio
async def test_visible_element_is_found_immediately():
    locator = FakeLocator(visible=True)

    start = time.monotonic()
    assert await probe(visible(locator), 5000) is True
    assert time.monotonic() - start < 0.2
    assert locator.checks == 1


@pytest.mark.asyncio
async def test_never_visible_returns_false_within_bound():
    locator = FakeLocator(visible=False)

    start = time.monotonic()
    assert await probe(visible(locator), 500) is False
    elapsed = time.monotonic() - start

    assert 0.45 <= elapsed <= 0.9


@pytest.mark.asyncio
async def test_element_appearing_later_is_found():
    locator = FakeLocator(appears_after=0.3)

    result = await Probe().run(visible(locator), 2000, "late element")

    assert result.found
    assert 250 <= result.elapsed_ms < 1000


@pytest.mark.asyncio
async def test_zero_timeout_checks_exactly_once():
    locator = FakeLocator(visible=False)

    assert await probe(visible(locator), 0) is False
    assert locator.checks == 1


@pytest.mark.asyncio
async def test_raising_check_counts_as_false(recording_logger):
    locator = FakeLocator(check_error=RuntimeError("detached from DOM"))

    result = await Probe(logger=recording_logger).run(visible(locator), 300, "flaky")

    assert not result.found
    assert locator.checks > 1
    assert any("detached" in m for m in recording_logger.messages("DEBUG"))


@pytest.mark.asyncio
async def test_hanging_check_is_bounded():
    locator = FakeLocator(hang=True)

    start = time.monotonic()
    assert await probe(visible(locator), 300) is False
    assert time.monotonic() - start < 1.0


@pytest.mark.asyncio
async def test_sync_condition_is_supported():
    page = FakePage(url="https://demoqa.com/profile")

    assert await probe(url_contains(page, "/profile"), 100)
    assert not await probe(url_contains(page, "/login"), 100)


@pytest.mark.asyncio
async def test_hidden_attached_and_text_conditions():
    gone = FakeLocator(visible=False)
    present = FakeLocator(text="Cierra Vega 39")

    assert await probe(hidden(gone), 100)
    assert await probe(attached(present), 100)
    assert not await probe(attached(gone), 100)
    assert await probe(text_contains(present, "cierra"), 100)
    assert not await probe(text_contains(present, "cierra", case_sensitive=True), 100)


@pytest.mark.asyncio
async def test_backoff_policy_spaces_out_checks():
    fixed = FakeLocator(visible=False)
    backing_off = FakeLocator(visible=False)

    await asyncio.gather(
        Probe(PollPolicy(interval_ms=50)).run(visible(fixed), 600),
        Probe(PollPolicy(interval_ms=50, multiplier=2.0, max_interval_ms=400)).run(visible(backing_off), 600),
    )

    assert backing_off.checks < fixed.checks


def test_poll_policy_interval_is_capped():
    policy = PollPolicy(interval_ms=100, multiplier=3.0, max_interval_ms=500)

    assert policy.next_interval(100) == 300
    assert policy.next_interval(300) == 500
    assert PollPolicy().next_interval(100) == 100
