# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Static permission model: value types, module metadata and role table."""

from src.rbac.modules import MODULE_DESCRIPTIONS, ModuleDescription
from src.rbac.permissions import (
    EMPTY_PERMISSION,
    FULL_PERMISSION,
    OPERATIONAL_PERMISSION,
    READ_ONLY_PERMISSION,
    READ_WRITE_PERMISSION,
    ModulePermission,
    ModulePermissions,
)
from src.rbac.roles import ROLE_PERMISSION_CONFIGS, RolePermissionConfig

__all__ = [
    "EMPTY_PERMISSION",
    "FULL_PERMISSION",
    "MODULE_DESCRIPTIONS",
    "ModuleDescription",
    "ModulePermission",
    "ModulePermissions",
    "OPERATIONAL_PERMISSION",
    "READ_ONLY_PERMISSION",
    "READ_WRITE_PERMISSION",
    "ROLE_PERMISSION_CONFIGS",
    "RolePermissionConfig",
]
