"""
Repository-level pytest configuration.

Why this exists:
  - Provide placeholder login credentials so runs never need real secrets
  - Make the repo runnable right after cloning
  - Keep the defaults explicit and discoverable

Important:
  DemoQA is a public demo site. Real projects should load credentials from a
  secret manager (or a local `.env`, which the config loader reads).
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Generator

import pytest


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Return repo root path."""
    return Path(__file__).parent


@pytest.fixture(scope="session", autouse=True)
def _demo_safe_env_defaults() -> Generator[None, None, None]:
    """
    Set placeholder credentials if not already provided by the user/CI.

    Only credentials are defaulted here; UI settings come from
    config/config.yaml so that overrides stay visible in one place.
    """
    defaults = {
        "UI_USERNAME": "testuser",
        "UI_PASSWORD": "Test@123",
    }

    for k, v in defaults.items():
        os.environ.setdefault(k, v)

    yield
