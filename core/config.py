# core/config.py

from __future__ import annotations

import logging
import os
import yaml
from dataclasses import dataclass, field
from typing import Any, Dict

DEFAULT_CONFIG_PATH = "configs/green.yaml"


class ConfigError(Exception):
    pass


@dataclass
class ServerConfig:
    port: int = 8080
    log_level: str = "info"


@dataclass
class FlakeConfig:
    path: str = "~/.local/share/chezmoi/nixos/flake.nix"
    input: str = "ultron"


@dataclass
class DeployConfig:
    repository: str = "covercash2/ultron"
    branch: str = "refs/heads/main"


@dataclass
class NotifierConfig:
    url: str | None = None
    channel: str | None = None
    user: str = "green"
    timeout: float = 10.0

    @property
    def enabled(self) -> bool:
        return bool(self.url and self.channel)


@dataclass
class Config:
    server: ServerConfig = field(default_factory=ServerConfig)
    flake: FlakeConfig = field(default_factory=FlakeConfig)
    deploy: DeployConfig = field(default_factory=DeployConfig)
    notifier: NotifierConfig = field(default_factory=NotifierConfig)


def config_path_from_env() -> str:
    return os.environ.get("GREEN_CONFIG", DEFAULT_CONFIG_PATH)


def load_config(path: str) -> Config:
    try:
        with open(path, "r", encoding="utf-8") as f:
            cfg = yaml.safe_load(f) or {}
    except OSError as e:
        raise ConfigError(f"unable to read config file `{path}`: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"unable to parse config file `{path}`: {e}") from e

    if not isinstance(cfg, dict):
        raise ConfigError(f"config file `{path}` must contain a mapping")

    return parse_config(cfg)


def parse_config(cfg: Dict[str, Any]) -> Config:
    server_cfg = cfg.get("server") or {}
    flake_cfg = cfg.get("flake") or {}
    deploy_cfg = cfg.get("deploy") or {}
    notifier_cfg = cfg.get("notifier") or {}

    try:
        server = ServerConfig(
            port=int(server_cfg.get("port", 8080)),
            log_level=str(server_cfg.get("log_level", "info")),
        )
        flake = FlakeConfig(
            path=os.path.expanduser(
                flake_cfg.get("path", FlakeConfig.path)
            ),
            input=flake_cfg.get("input", FlakeConfig.input),
        )
        deploy = DeployConfig(
            repository=deploy_cfg.get("repository", DeployConfig.repository),
            branch=deploy_cfg.get("branch", DeployConfig.branch),
        )
        notifier = NotifierConfig(
            url=notifier_cfg.get("url"),
            channel=notifier_cfg.get("channel"),
            user=notifier_cfg.get("user", "green"),
            timeout=float(notifier_cfg.get("timeout", 10.0)),
        )
    except (TypeError, ValueError) as e:
        raise ConfigError(f"invalid config value: {e}") from e

    if not isinstance(logging.getLevelName(server.log_level.upper()), int):
        raise ConfigError(f"unknown log level `{server.log_level}`")

    return Config(server=server, flake=flake, deploy=deploy, notifier=notifier)
