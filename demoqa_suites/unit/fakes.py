"""
In-memory stand-ins for Playwright pages and locators.

Unit tests drive the framework against these fakes: no browser, no network.
Visibility can be immediate, delayed, never, raising or hanging.
"""

from __future__ import annotations

import asyncio
import time
from typing import Any, Callable, Dict, List, Optional


class RecordingLogger:
    """Logger double that keeps (level, message) pairs."""

    def __init__(self) -> None:
        self.records: List[tuple] = []

    def _log(self, level: str, message: str) -> None:
        self.records.append((level, message))

    def debug(self, message: str, *args: Any, **kwargs: Any) -> None:
        self._log("DEBUG", message)

    def info(self, message: str, *args: Any, **kwargs: Any) -> None:
        self._log("INFO", message)

    def warning(self, message: str, *args: Any, **kwargs: Any) -> None:
        self._log("WARNING", message)

    def error(self, message: str, *args: Any, **kwargs: Any) -> None:
        self._log("ERROR", message)

    def messages(self, level: str) -> List[str]:
        return [m for lvl, m in self.records if lvl == level]


class FakeKeyboard:
    def __init__(self) -> None:
        self.pressed: List[str] = []

    async def press(self, key: str) -> None:
        self.pressed.append(key)


class FakeLocator:
    """
    Locator double.

    Args:
        selector: Selector it was created for
        visible: Whether the element is (eventually) visible
        appears_after: Seconds after creation before it turns visible
        check_error: Exception raised by every state check
        hang: Make state checks sleep far past any probe bound
        action_error: Exception raised by click/fill/press
        text: Text content (and initial input value)
        on_click: Called after each successful click
    """

    def __init__(
        self,
        selector: str = "",
        visible: bool = True,
        appears_after: Optional[float] = None,
        check_error: Optional[Exception] = None,
        hang: bool = False,
        action_error: Optional[Exception] = None,
        text: str = "",
        on_click: Optional[Callable[[], None]] = None,
    ) -> None:
        self.selector = selector
        self.visible = visible
        self.appears_after = appears_after
        self.check_error = check_error
        self.hang = hang
        self.action_error = action_error
        self.text = text
        self.value = text
        self.on_click = on_click
        self.created = time.monotonic()
        self.checks = 0
        self.actions: List[tuple] = []

    # State ------------------------------------------------------------

    @property
    def first(self) -> "FakeLocator":
        return self

    def nth(self, index: int) -> "FakeLocator":
        return self

    async def _state(self) -> bool:
        self.checks += 1
        if self.hang:
            await asyncio.sleep(60)
        if self.check_error is not None:
            raise self.check_error
        if not self.visible:
            return False
        if self.appears_after is not None:
            return time.monotonic() - self.created >= self.appears_after
        return True

    async def is_visible(self, **kwargs: Any) -> bool:
        return await self._state()

    async def is_enabled(self, **kwargs: Any) -> bool:
        return await self._state()

    async def count(self) -> int:
        return 1 if await self._state() else 0

    async def text_content(self, **kwargs: Any) -> str:
        return self.text

    async def input_value(self, **kwargs: Any) -> str:
        return self.value

    async def all(self) -> List["FakeLocator"]:
        return [self] if await self._state() else []

    # Actions ----------------------------------------------------------

    def _act(self, name: str, *args: Any) -> None:
        self.actions.append((name, *args))
        if self.action_error is not None:
            raise self.action_error

    async def click(self, **kwargs: Any) -> None:
        self._act("click")
        if self.on_click is not None:
            self.on_click()

    async def clear(self, **kwargs: Any) -> None:
        self._act("clear")
        self.value = ""

    async def fill(self, value: str, **kwargs: Any) -> None:
        self._act("fill", value)
        self.value = value

    async def press_sequentially(self, text: str, **kwargs: Any) -> None:
        self._act("press_sequentially", text)
        self.value = text

    async def press(self, key: str, **kwargs: Any) -> None:
        self._act("press", key)

    async def scroll_into_view_if_needed(self, **kwargs: Any) -> None:
        self._act("scroll")


class FakePage:
    """
    Page double. Unregistered selectors resolve to invisible locators.
    """

    def __init__(self, url: str = "https://demoqa.com/") -> None:
        self.url = url
        self.keyboard = FakeKeyboard()
        self._locators: Dict[str, FakeLocator] = {}
        self.visited: List[str] = []
        self.screenshot_error: Optional[Exception] = None
        self.ready = True
        self.handlers: Dict[str, List[Callable]] = {}

    def add(self, selector: str, **kwargs: Any) -> FakeLocator:
        locator = FakeLocator(selector, **kwargs)
        self._locators[selector] = locator
        return locator

    def locator(self, selector: str) -> FakeLocator:
        if selector not in self._locators:
            self._locators[selector] = FakeLocator(selector, visible=False)
        return self._locators[selector]

    async def goto(self, url: str, **kwargs: Any) -> None:
        self.visited.append(url)
        self.url = url

    async def wait_for_timeout(self, ms: float) -> None:
        await asyncio.sleep(0)

    async def wait_for_load_state(self, state: str = "load", **kwargs: Any) -> None:
        return None

    async def title(self) -> str:
        return "DEMOQA"

    async def evaluate(self, expression: str) -> Any:
        return self.ready

    def on(self, event: str, handler: Callable) -> None:
        self.handlers.setdefault(event, []).append(handler)

    async def screenshot(self, path: Optional[str] = None, **kwargs: Any) -> bytes:
        if self.screenshot_error is not None:
            raise self.screenshot_error
        data = b"\x89PNG fake"
        if path:
            with open(path, "wb") as f:
                f.write(data)
        return data


