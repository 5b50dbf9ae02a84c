"""
================================================================================
UI Testing Framework
================================================================================

Playwright-based UI automation framework for unreliable, asynchronously
rendering targets.

Components:
    - probe: bounded condition polling
    - retry: fixed-delay Retry Policy
    - smart_locator: fallback selector resolution and named locators
    - element_actions: non-throwing probe-then-act executor (ActionOutcome)
    - data_factory: Web Tables user records
    - page_base: base page object
    - browser_manager: browser lifecycle and tracing
    - config_loader: YAML + environment configuration

Author: Automation Team
License: MIT
================================================================================
"""

from .browser_manager import BrowserManager
from .config_loader import ConfigLoader, UIConfig, load_ui_config
from .data_factory import UserDataFactory, UserRecord
from .element_actions import ActionExecutor, ActionOutcome, perform_action
from .errors import AssertionFailure, DiagnosticsLog, InteractionError, TransientUIError
from .page_base import BasePage, PageBase
from .probe import PollPolicy, Probe, ProbeResult, probe
from .retry import RetryConfig, retry, with_retry
from .smart_locator import ElementNotFoundError, SmartLocator, resolve_first_matching

__all__ = [
    "ActionExecutor",
    "ActionOutcome",
    "AssertionFailure",
    "BasePage",
    "BrowserManager",
    "ConfigLoader",
    "DiagnosticsLog",
    "ElementNotFoundError",
    "InteractionError",
    "PageBase",
    "PollPolicy",
    "Probe",
    "ProbeResult",
    "RetryConfig",
    "SmartLocator",
    "TransientUIError",
    "UIConfig",
    "UserDataFactory",
    "UserRecord",
    "load_ui_config",
    "perform_action",
    "probe",
    "resolve_first_matching",
    "retry",
    "with_retry",
]
