"""cypherbolt configuration management."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml


@dataclass
class Config:
    """cypherbolt configuration."""

    config_path: Path = field(default_factory=lambda: Path.home() / ".cypherbolt" / "config.yaml")
    log_level: str = "INFO"

    # Variable the relationship is bound to in compiled statements
    default_alias: str = "rel"

    @classmethod
    def load(cls, config_path: Path | None = None) -> Config:
        """Load config from defaults, then the YAML file, then env vars."""
        config = cls()

        env_path = os.environ.get("CYPHERBOLT_CONFIG")
        if config_path:
            config.config_path = config_path
        elif env_path:
            config.config_path = Path(env_path)

        if config.config_path.exists():
            with open(config.config_path) as f:
                data = yaml.safe_load(f) or {}
            for key, value in data.items():
                if key == "config_path" or not hasattr(config, key):
                    continue
                expected_type = type(getattr(config, key))
                setattr(config, key, expected_type(value))

        env_log = os.environ.get("CYPHERBOLT_LOG_LEVEL")
        if env_log:
            config.log_level = env_log

        env_alias = os.environ.get("CYPHERBOLT_DEFAULT_ALIAS")
        if env_alias is not None:
            config.default_alias = env_alias

        return config

    def configure_logging(self) -> None:
        logging.basicConfig(
            level=self.log_level.upper(),
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )

    def save(self) -> None:
        """Save current config to YAML."""
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        data = {
            "log_level": self.log_level,
            "default_alias": self.default_alias,
        }
        with open(self.config_path, "w") as f:
            yaml.dump(data, f, default_flow_style=False)
