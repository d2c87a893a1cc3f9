# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Application settings loaded from environment variables."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration for the permissions service."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_name: str = "Bar Staff Permissions"
    # None keeps custom presets in memory for the lifetime of the process
    database_url: str | None = None
    log_level: str = "INFO"
    log_permission_checks: bool = False
    allow_custom_presets: bool = True
    cors_origins: list[str] = ["http://localhost:5173"]


settings = Settings()
