"""Tests for configuration loading."""

import json

import pytest
import yaml
from pydantic import ValidationError

from argumentor.config.settings import (
    AppConfig,
    MatchmakingConfig,
    get_default_config,
    get_template_config,
)


def test_template_config_defaults() -> None:
    config = get_template_config()

    assert config.database.path == "argumentor.db"
    assert config.matchmaking.search_interval_seconds == 3.0
    assert config.matchmaking.category == "matchmaking"
    assert config.notifications.webhook_url is None
    assert config.system.log_level == "INFO"


def test_default_config_created_from_template(tmp_path, monkeypatch) -> None:
    """A missing config file is written from the template and then loaded."""
    monkeypatch.delenv("ARGUMENTOR_DB_PATH", raising=False)
    monkeypatch.delenv("ARGUMENTOR_WEBHOOK_URL", raising=False)
    config_path = tmp_path / "argumentor_config.json"

    config = get_default_config(config_path)

    assert config_path.exists()
    assert config == get_template_config()


def test_default_config_copied_from_example(tmp_path, monkeypatch) -> None:
    """An example file next to the config path seeds the real config."""
    monkeypatch.delenv("ARGUMENTOR_DB_PATH", raising=False)
    monkeypatch.delenv("ARGUMENTOR_WEBHOOK_URL", raising=False)
    example = get_template_config().model_dump()
    example["database"]["path"] = "from_example.db"
    (tmp_path / "argumentor_config.example.json").write_text(json.dumps(example))

    config = get_default_config(tmp_path / "argumentor_config.json")

    assert config.database.path == "from_example.db"


def test_environment_overrides(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("ARGUMENTOR_DB_PATH", "/data/override.db")
    monkeypatch.setenv("ARGUMENTOR_WEBHOOK_URL", "https://hooks.test/env")

    config = get_default_config(tmp_path / "argumentor_config.json")

    assert config.database.path == "/data/override.db"
    assert config.notifications.webhook_url == "https://hooks.test/env"


def test_missing_sections_rejected(tmp_path) -> None:
    config_path = tmp_path / "partial.json"
    config_path.write_text(json.dumps({"database": {"path": "x.db"}}))

    with pytest.raises(ValueError, match="Missing required config sections"):
        AppConfig.load_from_file(config_path)


def test_missing_file_rejected(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        AppConfig.load_from_file(tmp_path / "absent.json")


def test_matchmaking_intervals_validated() -> None:
    """The interval must be positive and the backoff cap at least the interval."""
    with pytest.raises(ValidationError):
        MatchmakingConfig(search_interval_seconds=0)
    with pytest.raises(ValidationError):
        MatchmakingConfig(search_interval_seconds=5.0, max_backoff_seconds=1.0)


def test_save_to_file_writes_yaml(tmp_path) -> None:
    config = get_template_config()
    config_path = tmp_path / "out" / "config.yaml"

    config.save_to_file(config_path)

    data = yaml.safe_load(config_path.read_text())
    assert data["database"]["path"] == "argumentor.db"
    assert data["matchmaking"]["max_backoff_seconds"] == 30.0
