import pytest
import yaml

from demoqa_suites.ui_testing.framework.config_loader import (
    ConfigLoader,
    ConfigurationError,
    UIConfig,
    load_ui_config,
)


ENV_VARS = [
    "UI_BASE_URL", "BASE_URL", "UI_TIMEOUT_MS", "TIMEOUT", "UI_RETRIES", "RETRIES",
    "UI_HEADLESS", "HEADLESS", "UI_SLOW_MO_MS", "SLOW_MO", "UI_BROWSER", "UI_SEED",
    "UI_STRICT_CRUD",
]


@pytest.fixture
def clean_env(monkeypatch, fresh_config_loader):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def write_config(tmp_path, ui):
    config_path = tmp_path / "config.yaml"
    config_path.write_text(yaml.dump({"ui": ui}), encoding="utf-8")
    return config_path


def test_yaml_values_and_defaults(clean_env, tmp_path):
    config_path = write_config(tmp_path, {"base_url": "https://example.com/", "retries": 3})

    config = load_ui_config(config_path)

    assert config.base_url == "https://example.com"
    assert config.retries == 3
    assert config.timeout_ms == 30000
    assert config.headless is True
    assert config.strict_crud is False
    assert config.seed is None


def test_missing_file_falls_back_to_defaults(clean_env, tmp_path):
    assert load_ui_config(tmp_path / "missing.yaml") == UIConfig()


def test_env_overrides_yaml(clean_env, tmp_path):
    config_path = write_config(tmp_path, {"base_url": "https://example.com", "headless": True})
    clean_env.setenv("UI_BASE_URL", "https://env.example.com")
    clean_env.setenv("UI_HEADLESS", "false")
    clean_env.setenv("UI_SLOW_MO_MS", "250")

    config = load_ui_config(config_path)

    assert config.base_url == "https://env.example.com"
    assert config.headless is False
    assert config.slow_mo_ms == 250


def test_short_aliases(clean_env, tmp_path):
    config_path = write_config(tmp_path, {})
    clean_env.setenv("BASE_URL", "https://alias.example.com")
    clean_env.setenv("TIMEOUT", "5000")
    clean_env.setenv("RETRIES", "2")
    clean_env.setenv("HEADLESS", "0")
    clean_env.setenv("SLOW_MO", "100")

    config = load_ui_config(config_path)

    assert config.base_url == "https://alias.example.com"
    assert config.timeout_ms == 5000
    assert config.retries == 2
    assert config.headless is False
    assert config.slow_mo_ms == 100


def test_canonical_name_beats_alias(clean_env, tmp_path):
    config_path = write_config(tmp_path, {})
    clean_env.setenv("UI_RETRIES", "4")
    clean_env.setenv("RETRIES", "2")

    assert load_ui_config(config_path).retries == 4


def test_seed_from_env(clean_env, tmp_path):
    clean_env.setenv("UI_SEED", "1234")

    assert load_ui_config(write_config(tmp_path, {})).seed == 1234


def test_invalid_seed_is_rejected(clean_env, tmp_path):
    clean_env.setenv("UI_SEED", "abc")

    with pytest.raises(ConfigurationError, match="seed"):
        load_ui_config(write_config(tmp_path, {}))


@pytest.mark.parametrize(
    "ui",
    [
        {"retries": 0},
        {"timeout_ms": -1},
        {"browser": "netscape"},
    ],
)
def test_invalid_values_are_rejected(clean_env, tmp_path, ui):
    with pytest.raises(ConfigurationError):
        load_ui_config(write_config(tmp_path, ui))


def test_non_numeric_env_value_is_rejected(clean_env, tmp_path):
    clean_env.setenv("UI_TIMEOUT_MS", "soon")

    with pytest.raises(ConfigurationError, match="timeout_ms"):
        load_ui_config(write_config(tmp_path, {}))


def test_invalid_yaml_raises(clean_env, tmp_path):
    config_path = tmp_path / "config.yaml"
    config_path.write_text("ui: [unclosed", encoding="utf-8")

    with pytest.raises(ConfigurationError, match="Invalid YAML"):
        ConfigLoader(config_path)


def test_reload_updates_values(clean_env, tmp_path):
    config_path = write_config(tmp_path, {"retries": 1})
    loader = ConfigLoader(config_path)
    assert loader.get("ui.retries") == 1

    write_config(tmp_path, {"retries": 3})
    loader.reload()
    assert loader.get("ui.retries") == 3


def test_repository_config_is_valid(clean_env):
    config = load_ui_config()

    assert config.base_url == "https://demoqa.com"
    assert config.browser == "chromium"
