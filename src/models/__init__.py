# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Database models and enumerations package."""

from src.models.base import Base, TimestampMixin
from src.models.enums import (
    AccessLevel,
    BarRole,
    ModuleCategory,
    PermissionAction,
    SystemModule,
    UserType,
)
from src.models.permission_preset import PermissionPresetModel

__all__ = [
    "AccessLevel",
    "BarRole",
    "Base",
    "ModuleCategory",
    "PermissionAction",
    "PermissionPresetModel",
    "SystemModule",
    "TimestampMixin",
    "UserType",
]
