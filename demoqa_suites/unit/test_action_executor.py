import pytest

from demoqa_suites.ui_testing.framework.element_actions import (
    ActionExecutor,
    ActionOutcome,
    perform_action,
)
from demoqa_suites.ui_testing.framework.errors import (
    DiagnosticsLog,
    InteractionError,
    TransientUIError,
)
from demoqa_suites.unit.fakes import FakeLocator


class SleepRecorder:
    def __init__(self):
        self.calls = []

    async def __call__(self, seconds):
        self.calls.append(seconds)


async def click(locator):
    await locator.click()


@pytest.mark.asyncio
async def test_invisible_target_is_transient_and_action_not_run():
    target = FakeLocator(visible=False)

    outcome = await perform_action(target, click, timeout_ms=200, description="add button")

    assert not outcome.succeeded
    assert outcome.attempts == 1
    assert isinstance(outcome.last_error, TransientUIError)
    assert outcome.error_kind == "transient"
    assert target.actions == []


@pytest.mark.asyncio
async def test_failing_action_is_interaction_error():
    target = FakeLocator(action_error=RuntimeError("element intercepted"))

    outcome = await perform_action(target, click, timeout_ms=200)

    assert not outcome
    assert isinstance(outcome.last_error, InteractionError)
    assert isinstance(outcome.last_error.cause, RuntimeError)


@pytest.mark.asyncio
async def test_visible_target_runs_action_once():
    target = FakeLocator()

    outcome = await perform_action(target, click, timeout_ms=200)

    assert outcome.ok
    assert target.actions == [("click",)]


@pytest.mark.asyncio
async def test_candidate_list_acts_on_first_visible():
    primary = FakeLocator("primary", visible=False)
    fallback = FakeLocator("fallback")

    outcome = await perform_action([primary, fallback], click, timeout_ms=200)

    assert outcome.ok
    assert primary.actions == []
    assert fallback.actions == [("click",)]


@pytest.mark.asyncio
async def test_executor_retries_and_counts_attempts(fake_page):
    sleep = SleepRecorder()
    diagnostics = DiagnosticsLog()
    actions = ActionExecutor(
        fake_page, default_timeout=100, max_attempts=3, retry_delay_ms=200,
        diagnostics=diagnostics, sleep=sleep,
    )

    outcome = await actions.click(FakeLocator(visible=False), description="submit")

    assert not outcome.succeeded
    assert outcome.attempts == 3
    assert sleep.calls == [0.2, 0.2]
    assert len(diagnostics) == 1
    assert diagnostics.entries[0].kind == "transient"
    assert diagnostics.entries[0].description == "submit"


@pytest.mark.asyncio
async def test_executor_success_leaves_diagnostics_empty(fake_page):
    diagnostics = DiagnosticsLog()
    actions = ActionExecutor(fake_page, default_timeout=100, diagnostics=diagnostics)
    field = FakeLocator(text="old")

    outcome = await actions.fill(field, "John", description="First Name")

    assert outcome.ok
    assert field.value == "John"
    assert field.actions == [("clear",), ("fill", "John")]
    assert len(diagnostics) == 0


@pytest.mark.asyncio
async def test_type_text_clears_then_types(fake_page):
    actions = ActionExecutor(fake_page, default_timeout=100)
    box = FakeLocator()

    assert await actions.type_text(box, "Cierra", description="search")
    assert fake_page.keyboard.pressed == ["Control+A", "Delete"]
    assert box.actions[-1] == ("press_sequentially", "Cierra")

    assert await actions.type_text(box, "", description="search")
    assert box.actions[-1] == ("click",)


@pytest.mark.asyncio
async def test_clear_and_type_verifies_value(fake_page):
    actions = ActionExecutor(fake_page, default_timeout=100)

    assert await actions.clear_and_type(FakeLocator(), "42", description="age")


@pytest.mark.asyncio
async def test_press_without_target_uses_keyboard(fake_page):
    actions = ActionExecutor(fake_page)

    assert await actions.press("Escape")
    assert fake_page.keyboard.pressed == ["Escape"]


def test_outcome_merge_keeps_last_failure():
    first = TransientUIError("modal missing")
    last = InteractionError("submit failed")
    merged = ActionOutcome.merge(
        [
            ActionOutcome.success("open"),
            ActionOutcome.failure(first, "modal"),
            ActionOutcome.failure(last, "submit", attempts=2),
        ],
        "Add user",
    )

    assert not merged.succeeded
    assert merged.attempts == 4
    assert merged.last_error is last
    assert merged.description == "Add user"


def test_raise_for_failure():
    assert ActionOutcome.success("ok").raise_for_failure().ok

    with pytest.raises(TransientUIError):
        ActionOutcome.failure(TransientUIError("gone"), "click").raise_for_failure()


@pytest.mark.asyncio
async def test_explicit_zero_attempts_is_rejected(fake_page):
    actions = ActionExecutor(fake_page, default_timeout=100, max_attempts=3)

    with pytest.raises(ValueError):
        await actions.perform(FakeLocator(), click, max_attempts=0)
