"""
================================================================================
UI Error Taxonomy
================================================================================

Error kinds raised or reported by the UI framework:

    - TransientUIError: element not (yet) present within the wait bound
    - InteractionError: an action raised while executing against the page
    - AssertionFailure: an explicit check failed; the only kind that fails a test

Transient and interaction errors are not raised by the action layer. They are
returned inside an ActionOutcome and recorded in a DiagnosticsLog so they stay
observable after the test has moved on.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import List, Optional

import allure


class UIAutomationError(Exception):
    """Base class for recoverable UI errors."""

    kind: str = "ui_error"

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        if self.cause is not None:
            return f"{self.message} (caused by {type(self.cause).__name__}: {self.cause})"
        return self.message


class TransientUIError(UIAutomationError):
    """Element did not become available within the wait bound."""

    kind = "transient"


class InteractionError(UIAutomationError):
    """An action (click, fill, type) raised while executing."""

    kind = "interaction"


class AssertionFailure(AssertionError):
    """An explicit invariant check failed. Fails the test."""

    kind = "assertion"


@dataclass
class DiagnosticEntry:
    """Single recorded non-fatal error."""
    kind: str
    description: str
    message: str
    timestamp: str = field(default_factory=lambda: datetime.now().isoformat())


class DiagnosticsLog:
    """
    Per-test collector of non-fatal UI errors.

    Page objects and the action executor append to it instead of dropping
    errors; the UI conftest attaches the collected entries to Allure at
    teardown.
    """

    def __init__(self) -> None:
        self._entries: List[DiagnosticEntry] = []

    def record(self, error: BaseException, description: str = "") -> DiagnosticEntry:
        """Record an error under a short description of what was attempted."""
        kind = getattr(error, "kind", type(error).__name__)
        entry = DiagnosticEntry(kind=kind, description=description, message=str(error))
        self._entries.append(entry)
        return entry

    @property
    def entries(self) -> List[DiagnosticEntry]:
        return list(self._entries)

    def by_kind(self, kind: str) -> List[DiagnosticEntry]:
        return [e for e in self._entries if e.kind == kind]

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        # An empty log is still a valid log object
        return True

    def to_json(self) -> str:
        return json.dumps([asdict(e) for e in self._entries], indent=2)

    def attach_to_allure(self, name: str = "UI Diagnostics") -> None:
        """Attach collected entries to the current Allure test, if any."""
        if not self._entries:
            return
        allure.attach(
            self.to_json(),
            name=name,
            attachment_type=allure.attachment_type.JSON,
        )


__all__ = [
    "UIAutomationError",
    "TransientUIError",
    "InteractionError",
    "AssertionFailure",
    "DiagnosticEntry",
    "DiagnosticsLog",
]
