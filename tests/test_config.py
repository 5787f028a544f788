# tests/test_config.py

import os

import pytest

from core.config import ConfigError, load_config, parse_config


def test_load_shipped_config():
    path = os.path.join(os.path.dirname(__file__), "..", "configs", "green.yaml")
    config = load_config(path)

    assert config.server.port == 8080
    assert config.flake.input == "ultron"
    assert not config.flake.path.startswith("~")
    assert config.deploy.branch == "refs/heads/main"
    assert config.notifier.enabled


def test_defaults_for_missing_sections():
    config = parse_config({"flake": {"path": "/etc/nixos/flake.nix"}})

    assert config.flake.path == "/etc/nixos/flake.nix"
    assert config.flake.input == "ultron"
    assert config.server.log_level == "info"
    assert not config.notifier.enabled


def test_missing_file(tmp_path):
    with pytest.raises(ConfigError):
        load_config(str(tmp_path / "nope.yaml"))


def test_bad_values(tmp_path):
    path = tmp_path / "green.yaml"
    path.write_text("server:\n  port: not-a-port\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(str(path))


def test_non_mapping(tmp_path):
    path = tmp_path / "green.yaml"
    path.write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(str(path))


def test_unknown_log_level():
    with pytest.raises(ConfigError):
        parse_config({"server": {"log_level": "chatty"}})
    assert parse_config({"server": {"log_level": "debug"}}).server.log_level == "debug"
