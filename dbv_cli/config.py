"""Configuration management for dbv."""

import os
from pathlib import Path
from pydantic_settings import BaseSettings
from pydantic import Field
from typing import List, Optional


def _find_env_file() -> Optional[str]:
    """Find .env file in multiple locations.

    Search order:
    1. Current working directory
    2. ~/.dbv/.env
    3. Package directory (where this file is located)
    """
    # Current directory
    if os.path.exists(".env"):
        return ".env"

    # User config directory
    user_env = Path.home() / ".dbv" / ".env"
    if user_env.exists():
        return str(user_env)

    # Package directory
    package_dir = Path(__file__).parent.parent
    package_env = package_dir / ".env"
    if package_env.exists():
        return str(package_env)

    return None


class Settings(BaseSettings):
    """Application settings loaded from DBV_* environment variables."""

    database_url: Optional[str] = Field(
        default=None,
        description="Database connection URL (postgres://... or sqlite://...)"
    )

    # Output configuration
    default_format: str = Field(
        default="mermaid",
        description="Output format: mermaid, plantuml, graphviz"
    )
    output_file: Optional[str] = Field(
        default=None,
        description="Output file path (default: schema.<ext> for the format)"
    )

    # Schema filtering
    include_views: bool = Field(
        default=False,
        description="Include database views"
    )
    include_tables: List[str] = Field(
        default_factory=list,
        description="Only include these tables (JSON list)"
    )
    exclude_tables: List[str] = Field(
        default_factory=list,
        description="Tables to exclude (JSON list)"
    )

    log_level: str = Field(
        default="WARNING",
        description="Logging level when --verbose is not given"
    )

    class Config:
        env_prefix = "DBV_"
        env_file = _find_env_file()
        env_file_encoding = "utf-8"
        extra = "ignore"


# Global settings instance
settings = Settings()
