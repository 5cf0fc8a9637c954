"""Configuration management for quillsh."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .logging_utils import configure_logging


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_prefix="QUILLSH_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Session
    workspace: Path | None = Field(default=None, description="Host directory mounted as '/'; unset means in-memory")
    cwd: str = Field(default="/", description="Initial working directory inside the sandbox")
    user: str = Field(default="user", description="Name reported by whoami")
    hostname: str = Field(default="quillsh", description="Host name reported in the environment")
    env: dict[str, str] = Field(default_factory=dict, description="Extra environment variables shown by env")

    # Network
    curl_proxy: str | None = Field(default=None, description="Proxy URL template containing '{url}'")
    curl_timeout: float = Field(default=30.0, description="Default curl timeout in seconds")

    # Logging
    log_level: str = Field(default="INFO", description="Log level")

    def environment(self, cwd: str) -> dict[str, str]:
        """Build the variables reported by ``env`` for the given cwd."""
        variables = {
            "HOME": "/",
            "HOSTNAME": self.hostname,
            "LANG": "en_US.UTF-8",
            "PATH": "/usr/local/bin:/usr/bin:/bin",
            "PWD": cwd,
            "SHELL": "/bin/quillsh",
            "USER": self.user,
        }
        variables.update(self.env)
        return variables


def get_settings(workspace: Path | None = None) -> Settings:
    """Get application settings.

    Args:
        workspace: Optional workspace path override

    Returns:
        Settings instance
    """
    settings = Settings() if workspace is None else Settings(workspace=workspace)
    configure_logging(level=settings.log_level)
    return settings
