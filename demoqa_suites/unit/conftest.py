"""Fixtures for framework unit tests."""

import pytest

from demoqa_suites.ui_testing.framework.config_loader import ConfigLoader
from demoqa_suites.unit.fakes import FakePage, RecordingLogger


@pytest.fixture
def fake_page() -> FakePage:
    return FakePage()


@pytest.fixture
def recording_logger() -> RecordingLogger:
    return RecordingLogger()


@pytest.fixture
def fresh_config_loader():
    """Drop the ConfigLoader singleton before and after a test."""
    ConfigLoader.reset()
    yield
    ConfigLoader.reset()
