"""
================================================================================
Suite Pytest Configuration
================================================================================

Registers the project-wide markers and tags tests by directory.

================================================================================
"""

from pathlib import Path
from typing import List

import pytest


def pytest_configure(config):
    """Configure pytest with project-wide custom markers."""

    # Priority markers
    config.addinivalue_line(
        "markers", "P0: Critical priority tests - must pass for deployment"
    )
    config.addinivalue_line(
        "markers", "P1: High priority tests - important functionality"
    )
    config.addinivalue_line(
        "markers", "P2: Medium priority tests - edge cases and minor features"
    )
    config.addinivalue_line(
        "markers", "P3: Low priority tests - extensive validation"
    )

    # Test type markers
    config.addinivalue_line(
        "markers", "smoke: Quick verification tests"
    )
    config.addinivalue_line(
        "markers", "regression: Full regression test suite"
    )
    config.addinivalue_line(
        "markers", "e2e: End-to-end tests against the live site (deselected by default)"
    )
    config.addinivalue_line(
        "markers", "unit: Framework tests with fake pages, no browser"
    )
    config.addinivalue_line(
        "markers", "ui: UI-specific tests"
    )

    # Feature markers
    config.addinivalue_line(
        "markers", "login: Tests related to authentication"
    )
    config.addinivalue_line(
        "markers", "web_tables: Tests related to Web Tables CRUD"
    )
    config.addinivalue_line(
        "markers", "search: Tests related to table search and filtering"
    )


def directory_markers(path: Path) -> List[str]:
    """Markers implied by the test's directory: ui_testing/ -> ui + e2e, unit/ -> unit."""
    parts = path.parts
    if "ui_testing" in parts:
        return ["ui", "e2e"]
    if "unit" in parts:
        return ["unit"]
    return []


@pytest.hookimpl(tryfirst=True)
def pytest_collection_modifyitems(config, items):
    for item in items:
        for name in directory_markers(item.path):
            item.add_marker(getattr(pytest.mark, name))


def pytest_report_header(config):
    """Add custom header to pytest output."""
    return [
        "",
        "=" * 60,
        "DemoQA Resilient UI Automation",
        "=" * 60,
        "",
    ]
