"""Core configuration.

- Centralizes environment variables (pydantic-settings) away from the CLI.
- Adapters (HTTP client, encoder) read the same settings object.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.domain.domain_type import DomainType


def get_user_config_dir() -> Path:
    """Per-user configuration directory (cross-platform, no extra dependencies)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "geosite-d2"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "geosite-d2"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "geosite-d2"
    return Path.home() / ".config" / "geosite-d2"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


class AppSettings(BaseSettings):
    """Application settings.

    Every field can be set through a `GEOSITE_D2_*` environment variable or a
    `.env` file; CLI flags override them per invocation.
    """

    model_config = SettingsConfigDict(
        env_prefix="GEOSITE_D2_",
        extra="ignore",
        case_sensitive=False,
        # Project first, then the user's global config.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    url_file: Path = Field(
        default=Path("urls.txt"),
        description="File with one `LABEL,URL` source per line.",
    )
    output_dir: Path = Field(
        default=Path("./output"),
        description="Directory that receives the generated database.",
    )
    output_name: str = Field(
        default="geosite.dat",
        min_length=1,
        description="File name of the generated database.",
    )
    domain_type: DomainType = Field(
        default=DomainType.FULL,
        description="Rule kind attached to every domain entry.",
    )

    http_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Per-request timeout (seconds).",
    )
    user_agent: str = Field(
        default="geosite-d2/0.1",
        min_length=1,
        description="User-Agent sent with every list download.",
    )

    @property
    def output_path(self) -> Path:
        return self.output_dir / self.output_name
