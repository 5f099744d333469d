"""Environment-based authentication for the GitLab client.

Resolves the access token from configuration, environment variables, or a
``.env`` file loaded with python-dotenv.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from .config import ConfigError, NotifierConfig
from .logging import get_logger

TOKEN_ALTERNATIVES = ("GL_TOKEN", "GITLAB_PRIVATE_TOKEN")


@dataclass
class EnvAuthConfig:
    """Configuration for environment-based authentication."""

    load_dotenv: bool = True
    dotenv_path: str | None = None
    gitlab_token_var: str = "GITLAB_TOKEN"


class EnvironmentAuthManager:
    """Manages authentication through environment variables and .env files."""

    def __init__(self, config: EnvAuthConfig):
        self.config = config
        self.logger = get_logger()
        self._dotenv_loaded = False

        if config.load_dotenv:
            self._load_dotenv()

    def _load_dotenv(self) -> None:
        """Load the first .env file found; existing environment values win."""
        candidates = [self.config.dotenv_path] if self.config.dotenv_path else []
        candidates.extend(['.env', '.env.local'])
        for location in candidates:
            env_path = Path(location)
            if env_path.exists():
                load_dotenv(str(env_path))
                self._dotenv_loaded = True
                self.logger.debug(f"Loaded environment variables from {env_path}")
                return

    @property
    def dotenv_loaded(self) -> bool:
        return self._dotenv_loaded

    def get_gitlab_token(self) -> str | None:
        """Get GitLab token from environment variables."""
        token = os.getenv(self.config.gitlab_token_var)
        if token:
            self.logger.debug("Found GitLab token in environment variables")
            return token

        for alt_var in TOKEN_ALTERNATIVES:
            token = os.getenv(alt_var)
            if token:
                self.logger.debug(f"Found GitLab token in {alt_var}")
                return token

        return None


def create_env_auth_manager(cfg: NotifierConfig) -> EnvironmentAuthManager:
    return EnvironmentAuthManager(
        EnvAuthConfig(
            load_dotenv=cfg.env_auth_load_dotenv,
            dotenv_path=cfg.env_auth_dotenv_path,
        )
    )


def resolve_gitlab_token(cfg: NotifierConfig, manager: EnvironmentAuthManager | None = None) -> str:
    if cfg.gitlab_token:
        return cfg.gitlab_token
    manager = manager or create_env_auth_manager(cfg)
    token = manager.get_gitlab_token()
    if not token:
        raise ConfigError(
            "GitLab token not found; set gitlab.token or the GITLAB_TOKEN environment variable"
        )
    return token


__all__ = [
    "EnvAuthConfig",
    "EnvironmentAuthManager",
    "create_env_auth_manager",
    "resolve_gitlab_token",
]
