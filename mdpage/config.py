"""Application configuration.

Configuration is loaded from environment variables. For local development, you can provide a
`.env` file and set `MDPAGE_ENV_FILE` to point to it.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

PACKAGE_DIR = Path(__file__).parent


class Settings(BaseSettings):
    """mdpage settings.

    All fields are environment-configurable. Prefix is `MDPAGE_`.
    """

    model_config = SettingsConfigDict(
        env_prefix="MDPAGE_",
        env_file=None,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Core
    app_env: Literal["dev", "prod"] = Field(default="dev")
    log_level: str = Field(default="INFO")
    port: int = Field(default=8000, ge=1, le=65535)

    # Document
    document_path: str = Field(default="/pages/functional-programming.md")
    # Empty means this server itself, http://127.0.0.1:<port>
    document_base: str = Field(default="")
    pages_dir: Path = Field(default=PACKAGE_DIR / "pages")

    # Networking
    http_timeout_s: float = Field(default=10.0, ge=0.1, le=300.0)
    http_user_agent: str = Field(default="mdpage/0.1")

    # Rendering
    highlight_style: str = Field(default="dracula")
    toc_marker: str = Field(default="[TOC]", min_length=1)
    toc_min_level: int = Field(default=2, ge=1, le=6)
    toc_max_level: int = Field(default=6, ge=1, le=6)
    slug_max_length: int = Field(default=64, ge=8, le=256)
    heading_permalinks: bool = Field(default=True)


def load_settings() -> Settings:
    """Load settings from env.

    Returns:
        Settings: Parsed settings.
    """

    env_file_override = os.getenv("MDPAGE_ENV_FILE")
    if env_file_override:
        env_path = Path(env_file_override)
        return Settings(_env_file=env_path)

    default_env = Path.cwd() / ".env"
    if default_env.exists():
        return Settings(_env_file=default_env)

    return Settings()
