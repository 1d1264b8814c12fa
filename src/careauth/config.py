"""careauth configuration management."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from careauth.models.policy import RolePolicy


@dataclass
class Config:
    """careauth configuration."""

    config_path: Path = field(default_factory=lambda: Path.home() / ".careauth")
    policy_path: Path | None = None
    log_level: str = "INFO"

    # Access tokens
    token_issuer: str = "careauth"
    token_audience: str = "careauth-api"
    access_token_minutes: int = 15

    @classmethod
    def load(cls, config_path: Path | None = None) -> Config:
        """Load config from defaults, env vars, then the YAML file."""
        config = cls()

        if config_path:
            config.config_path = config_path

        # Override from env
        env_home = os.environ.get("CAREAUTH_HOME")
        if env_home:
            config.config_path = Path(env_home)

        env_policy = os.environ.get("CAREAUTH_POLICY")
        if env_policy:
            config.policy_path = Path(env_policy)

        env_log = os.environ.get("CAREAUTH_LOG_LEVEL")
        if env_log:
            config.log_level = env_log

        # Load YAML config if exists
        config_file = config.config_path / "config.yaml"
        if config_file.exists():
            with open(config_file) as f:
                data = yaml.safe_load(f) or {}
            for key, value in data.items():
                if key == "policy_path":
                    config.policy_path = Path(value) if value else None
                elif key != "config_path" and hasattr(config, key):
                    expected_type = type(getattr(config, key))
                    setattr(config, key, expected_type(value))

        return config

    def load_policy(self) -> RolePolicy:
        """Return the configured policy, or the built-in one."""
        if self.policy_path is None:
            from careauth.defaults import DEFAULT_POLICY

            return DEFAULT_POLICY

        from careauth.loader import load_policy

        return load_policy(self.policy_path)

    def save(self) -> None:
        """Save current config to YAML."""
        self.config_path.mkdir(parents=True, exist_ok=True)
        config_file = self.config_path / "config.yaml"
        data = {
            "policy_path": str(self.policy_path) if self.policy_path else None,
            "log_level": self.log_level,
            "token_issuer": self.token_issuer,
            "token_audience": self.token_audience,
            "access_token_minutes": self.access_token_minutes,
        }
        with open(config_file, "w") as f:
            yaml.dump(data, f, default_flow_style=False)
