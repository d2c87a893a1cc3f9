# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Persisted custom permission presets."""

from sqlalchemy import JSON, Boolean, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.models.base import Base, TimestampMixin


class PermissionPresetModel(Base, TimestampMixin):
    """A custom preset created by an administrator.

    Built-in presets are derived from the static role table and are never
    stored here.
    """

    __tablename__ = "permission_presets"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    role: Mapped[str] = mapped_column(String(32), nullable=False)
    # {"module": {"view": true, ...}, ...}
    permissions: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    is_customizable: Mapped[bool] = mapped_column(
        Boolean, default=True, nullable=False
    )
