"""
================================================================================
Configuration Loader
================================================================================

YAML-based configuration management with environment variable override support.

Features:
    - YAML configuration loading (config/config.yaml)
    - `.env` file support via python-dotenv
    - Environment variable override (UI_BASE_URL overrides ui.base_url)
    - Short aliases kept for CI scripts (BASE_URL, TIMEOUT, RETRIES, HEADLESS, SLOW_MO)
    - Typed UIConfig snapshot for fixtures and page objects

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from dotenv import load_dotenv
from loguru import logger


# Default configuration file path (repo root /config/config.yaml)
DEFAULT_CONFIG_PATH = Path(__file__).parents[3] / "config" / "config.yaml"

# Extra environment variable names accepted per key, checked after the
# canonical KEY_PATH form.
ENV_ALIASES: Dict[str, List[str]] = {
    "ui.base_url": ["BASE_URL"],
    "ui.timeout_ms": ["TIMEOUT"],
    "ui.retries": ["RETRIES"],
    "ui.headless": ["HEADLESS"],
    "ui.slow_mo_ms": ["SLOW_MO"],
}


class ConfigurationError(Exception):
    """Raised when configuration loading or access fails."""
    pass


class ConfigLoader:
    """
    Configuration loader with YAML and environment variable support.

    Configuration hierarchy (highest to lowest priority):
        1. Environment variables (UI_BASE_URL, then alias BASE_URL)
        2. YAML configuration file
        3. Default values

    Usage:
        >>> config = ConfigLoader()
        >>> config.get("ui.base_url", "https://demoqa.com")
        'https://demoqa.com'
        >>> config.get("ui.retries", 1)
        1
    """

    _instance: Optional["ConfigLoader"] = None
    _config: Dict[str, Any] = {}

    def __new__(cls, config_path: Optional[Path] = None) -> "ConfigLoader":
        """Singleton: configuration is loaded once per process."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self, config_path: Optional[Path] = None) -> None:
        """
        Initialize configuration loader.

        Args:
            config_path: Path to YAML configuration file.
                        Uses DEFAULT_CONFIG_PATH if not specified.
        """
        if getattr(self, "_initialized", False):
            return

        self._config_path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH
        self._load_config()
        self._initialized = True

    def _load_config(self) -> None:
        """Load `.env` (if any) and the YAML file."""
        load_dotenv(override=False)

        if not self._config_path.exists():
            logger.warning(
                f"Configuration file not found: {self._config_path}. "
                f"Using defaults and environment variables only."
            )
            self._config = {}
            return

        try:
            with open(self._config_path, "r", encoding="utf-8") as f:
                self._config = yaml.safe_load(f) or {}
            logger.debug(f"Loaded configuration from: {self._config_path}")
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Invalid YAML in configuration file: {e}"
            ) from e

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value by dot-notation path.

        Checks environment variables first, then YAML config, then default.

        Args:
            key: Dot-notation path (e.g., "ui.base_url")
            default: Default value if key not found
        """
        for env_key in [key.upper().replace(".", "_")] + ENV_ALIASES.get(key, []):
            env_value = os.environ.get(env_key)
            if env_value is not None:
                return self._convert_type(env_value, default)

        value: Any = self._config
        for part in key.split("."):
            if isinstance(value, dict):
                value = value.get(part)
            else:
                value = None

            if value is None:
                return default

        return value

    def get_section(self, section: str) -> Dict[str, Any]:
        """Get entire configuration section, or an empty dict."""
        return self._config.get(section, {}) or {}

    def reload(self) -> None:
        """Reload configuration from file."""
        self._load_config()
        logger.info(f"Configuration reloaded from: {self._config_path}")

    def _convert_type(self, value: str, reference: Any) -> Any:
        """Convert an env string to the type of the default value."""
        if reference is None:
            return value

        if isinstance(reference, bool):
            return value.strip().lower() in ("true", "1", "yes", "on")
        if isinstance(reference, int):
            try:
                return int(value)
            except ValueError:
                return value
        if isinstance(reference, float):
            try:
                return float(value)
            except ValueError:
                return value

        return value

    @classmethod
    def reset(cls) -> None:
        """Drop the singleton so the next instance reloads everything."""
        cls._instance = None
        cls._config = {}


@dataclass(frozen=True)
class UIConfig:
    """
    Resolved settings for a UI test run.

    Attributes:
        base_url: Target origin
        timeout_ms: Default bound for probes and flows
        action_timeout_ms: Playwright action timeout
        navigation_timeout_ms: Playwright navigation timeout
        retries: Default Retry Policy attempt count
        headless: Browser display mode
        slow_mo_ms: Artificial per-action delay
        browser: chromium / firefox / webkit
        screenshot_dir: Where screenshots are written
        trace_dir: Where failure traces are written
        strict_crud: Fail tests when a CRUD flow did not complete
        seed: Seed for deterministic test data (None = random)
    """
    base_url: str = "https://demoqa.com"
    timeout_ms: int = 30000
    action_timeout_ms: int = 15000
    navigation_timeout_ms: int = 20000
    retries: int = 1
    headless: bool = True
    slow_mo_ms: int = 0
    browser: str = "chromium"
    screenshot_dir: str = "screenshots"
    trace_dir: str = "test-results"
    strict_crud: bool = False
    seed: Optional[int] = None

    @classmethod
    def from_loader(cls, loader: Optional[ConfigLoader] = None) -> "UIConfig":
        """Build a UIConfig from the `ui` section plus env overrides."""
        loader = loader or ConfigLoader()
        defaults = cls()

        seed = loader.get("ui.seed", None)
        if seed is not None and str(seed).strip() != "":
            try:
                seed = int(seed)
            except ValueError as e:
                raise ConfigurationError(f"ui.seed must be an integer, got {seed!r}") from e
        else:
            seed = None

        config = cls(
            base_url=str(loader.get("ui.base_url", defaults.base_url)).rstrip("/"),
            timeout_ms=loader.get("ui.timeout_ms", defaults.timeout_ms),
            action_timeout_ms=loader.get("ui.action_timeout_ms", defaults.action_timeout_ms),
            navigation_timeout_ms=loader.get("ui.navigation_timeout_ms", defaults.navigation_timeout_ms),
            retries=loader.get("ui.retries", defaults.retries),
            headless=loader.get("ui.headless", defaults.headless),
            slow_mo_ms=loader.get("ui.slow_mo_ms", defaults.slow_mo_ms),
            browser=loader.get("ui.browser", defaults.browser),
            screenshot_dir=loader.get("ui.screenshot_dir", defaults.screenshot_dir),
            trace_dir=loader.get("ui.trace_dir", defaults.trace_dir),
            strict_crud=loader.get("ui.strict_crud", defaults.strict_crud),
            seed=seed,
        )
        config.validate()
        return config

    def validate(self) -> None:
        """Reject values that would make waits unbounded or meaningless."""
        for name in ("timeout_ms", "action_timeout_ms", "navigation_timeout_ms", "slow_mo_ms"):
            value = getattr(self, name)
            if not isinstance(value, int) or value < 0:
                raise ConfigurationError(f"ui.{name} must be a non-negative integer, got {value!r}")
        if not isinstance(self.retries, int) or self.retries < 1:
            raise ConfigurationError(f"ui.retries must be >= 1, got {self.retries!r}")
        if self.browser not in ("chromium", "firefox", "webkit"):
            raise ConfigurationError(f"Unknown browser: {self.browser}")


def load_ui_config(config_path: Optional[Path] = None) -> UIConfig:
    """Convenience wrapper: load the `ui` section into a UIConfig."""
    return UIConfig.from_loader(ConfigLoader(config_path))


__all__ = [
    "ConfigLoader",
    "ConfigurationError",
    "UIConfig",
    "load_ui_config",
]
