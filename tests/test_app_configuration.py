from pathlib import Path
from unittest.mock import patch

import pytest

from cordscribe.configuration.app_configuration import AppConfig, load_environment
from cordscribe.configuration.fetch_settings import FetchSettings
from cordscribe.datatypes.errors import ConfigError


@pytest.fixture()
def config_path(tmp_path: Path) -> Path:
    return tmp_path / "app_config.yml"


def test_app_config_reload_parses_yaml(config_path: Path) -> None:
    config_path.write_text(
        "output_dir: ~/discord-out\n"
        "fetch:\n"
        "  page_size: 50\n"
        "  delay_seconds: '0.5'\n"
        "  max_pages: 3\n"
        "  skip_channels: [123, ' 456 ']\n",
        encoding="utf-8",
    )

    config = AppConfig(config_path)

    assert config.output_dir == Path("~/discord-out").expanduser()
    settings = config.fetch_settings
    assert settings.page_size == 50
    assert settings.delay_seconds == pytest.approx(0.5)
    assert settings.max_pages == 3
    assert settings.skip_channels == ["123", "456"]
    assert config.get("fetch")["page_size"] == 50


def test_app_config_missing_file_returns_defaults(tmp_path: Path) -> None:
    config = AppConfig(tmp_path / "does_not_exist.yml")

    assert config.data == {}
    assert config.output_dir is None
    settings = config.fetch_settings
    assert settings.page_size == 100
    assert settings.delay_seconds == pytest.approx(1.0)
    assert settings.max_pages is None
    assert settings.skip_channels == []


@pytest.mark.parametrize("content", ["fetch: [unclosed", "- just\n- a list\n", ""])
def test_app_config_invalid_file_returns_defaults(config_path: Path, content: str) -> None:
    config_path.write_text(content, encoding="utf-8")

    assert AppConfig(config_path).data == {}


def test_app_config_reload_picks_up_changes(config_path: Path) -> None:
    config_path.write_text("fetch: {page_size: 10}\n", encoding="utf-8")
    config = AppConfig(config_path)
    config_path.write_text("fetch: {page_size: 20}\n", encoding="utf-8")

    config.reload()

    assert config.fetch_settings.page_size == 20


def test_fetch_settings_coercion_and_bounds() -> None:
    settings = FetchSettings({"page_size": 500, "delay_seconds": -1, "max_pages": 0, "skip_channels": "nope"})

    assert settings.page_size == 100
    assert settings.delay_seconds == 0.0
    assert settings.max_pages is None
    assert settings.skip_channels == []
    assert FetchSettings({"page_size": 0}).page_size == 1
    assert settings.get("missing", "x") == "x"


def test_load_environment_returns_token(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("DISCORD_TOKEN", " abc ")

    assert load_environment(tmp_path / ".env") == "abc"


def test_load_environment_reads_dotenv_file(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.delenv("DISCORD_TOKEN", raising=False)
    env_file = tmp_path / ".env"
    env_file.write_text("DISCORD_TOKEN=from-file\n", encoding="utf-8")

    assert load_environment(env_file) == "from-file"
    monkeypatch.delenv("DISCORD_TOKEN", raising=False)


def test_load_environment_missing_token_raises(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.delenv("DISCORD_TOKEN", raising=False)

    with pytest.raises(ConfigError, match="DISCORD_TOKEN"):
        load_environment(tmp_path / "missing.env")


@pytest.mark.parametrize(
    "data, page_size, delay",
    [
        ({"page_size": "abc"}, 100, 1.0),
        ({"delay_seconds": "x"}, 100, 1.0),
        ({"page_size": [1], "delay_seconds": {"a": 1}}, 100, 1.0),
        ({"page_size": "25", "delay_seconds": "0"}, 25, 0.0),
    ],
)
def test_fetch_settings_invalid_values_fall_back_to_defaults(data, page_size, delay) -> None:
    settings = FetchSettings(data)

    assert settings.page_size == page_size
    assert settings.delay_seconds == pytest.approx(delay)


@pytest.mark.parametrize("max_pages", [-1, "-5", "lots"])
def test_fetch_settings_unusable_max_pages_means_no_limit(max_pages) -> None:
    assert FetchSettings({"max_pages": max_pages}).max_pages is None


def test_fetch_settings_invalid_value_is_logged() -> None:
    with patch("cordscribe.configuration.fetch_settings.logger") as logger:
        assert FetchSettings({"page_size": "abc"}).page_size == 100

    logger.error.assert_called_once()
