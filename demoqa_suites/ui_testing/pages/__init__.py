"""
================================================================================
Page Objects
================================================================================

Page Object Model implementations for DemoQA pages.

Each page class encapsulates:
    - Named element locators (with fallbacks)
    - Page-specific flows returning ActionOutcome
    - Verification methods

Author: Automation Team
License: MIT
================================================================================
"""

from .dashboard_page import DashboardPage
from .login_page import LoginPage
from .web_tables_page import WebTablesPage

__all__ = [
    "DashboardPage",
    "LoginPage",
    "WebTablesPage",
]
