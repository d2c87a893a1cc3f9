# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Static role configuration: default permissions, hierarchy and management."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from src.models.enums import AccessLevel, BarRole, SystemModule, UserType
from src.rbac.permissions import (
    FULL_PERMISSION,
    OPERATIONAL_PERMISSION,
    READ_ONLY_PERMISSION,
    READ_WRITE_PERMISSION,
    ModulePermission,
)


@dataclass(frozen=True)
class RolePermissionConfig:
    """Metadata and default permissions of a role."""

    role: BarRole
    display_name: str
    description: str
    hierarchy: int  # higher is more senior
    access_level: AccessLevel
    user_type: UserType
    permissions: Mapping[SystemModule, ModulePermission]
    # Enumerated explicitly rather than derived from hierarchy
    manageable_roles: frozenset[BarRole] = field(default_factory=frozenset)


def _config(
    permissions: dict[SystemModule, ModulePermission], **kwargs
) -> RolePermissionConfig:
    return RolePermissionConfig(permissions=MappingProxyType(permissions), **kwargs)


ROLE_PERMISSION_CONFIGS: Mapping[BarRole, RolePermissionConfig] = MappingProxyType({
    BarRole.CASHIER: _config(
        role=BarRole.CASHIER,
        display_name="Cashier Attendant",
        description="Serves customers at the counter and operates the cash register",
        hierarchy=2,
        access_level=AccessLevel.USER,
        user_type=UserType.EMPLOYEE,
        permissions={
            SystemModule.DASHBOARD: READ_ONLY_PERMISSION,
            SystemModule.CASH_REGISTER: OPERATIONAL_PERMISSION,
            SystemModule.CUSTOMERS: READ_WRITE_PERMISSION,
            SystemModule.BAR_SERVICE: READ_ONLY_PERMISSION,
            SystemModule.PROMOTIONS: READ_ONLY_PERMISSION,
        },
    ),
    BarRole.WAITER: _config(
        role=BarRole.WAITER,
        display_name="Waiter",
        description="Serves tables and takes orders",
        hierarchy=2,
        access_level=AccessLevel.USER,
        user_type=UserType.EMPLOYEE,
        permissions={
            SystemModule.DASHBOARD: READ_ONLY_PERMISSION,
            SystemModule.BAR_SERVICE: OPERATIONAL_PERMISSION,
            SystemModule.CUSTOMERS: READ_WRITE_PERMISSION,
            SystemModule.MENU: READ_ONLY_PERMISSION,
            SystemModule.PROMOTIONS: READ_ONLY_PERMISSION,
        },
    ),
    BarRole.COOK: _config(
        role=BarRole.COOK,
        display_name="Cook",
        description="Prepares dishes and runs the kitchen",
        hierarchy=2,
        access_level=AccessLevel.USER,
        user_type=UserType.EMPLOYEE,
        permissions={
            SystemModule.DASHBOARD: READ_ONLY_PERMISSION,
            SystemModule.KITCHEN_MONITOR: OPERATIONAL_PERMISSION,
            SystemModule.INVENTORY: READ_WRITE_PERMISSION,
            SystemModule.MENU: READ_WRITE_PERMISSION,
        },
    ),
    BarRole.BARTENDER: _config(
        role=BarRole.BARTENDER,
        display_name="Bartender",
        description="Prepares drinks and runs the bar",
        hierarchy=3,
        access_level=AccessLevel.USER,
        user_type=UserType.EMPLOYEE,
        permissions={
            SystemModule.DASHBOARD: READ_ONLY_PERMISSION,
            SystemModule.BAR_MONITOR: OPERATIONAL_PERMISSION,
            SystemModule.BAR_SERVICE: READ_WRITE_PERMISSION,
            SystemModule.INVENTORY: READ_WRITE_PERMISSION,
            SystemModule.MENU: READ_WRITE_PERMISSION,
            SystemModule.CUSTOMERS: READ_ONLY_PERMISSION,
        },
    ),
    BarRole.MANAGER: _config(
        role=BarRole.MANAGER,
        display_name="Manager",
        description="Runs the establishment",
        hierarchy=5,
        access_level=AccessLevel.MANAGER,
        user_type=UserType.ADMINISTRATOR,
        manageable_roles=frozenset(
            {BarRole.CASHIER, BarRole.WAITER, BarRole.COOK, BarRole.BARTENDER}
        ),
        permissions={
            SystemModule.DASHBOARD: FULL_PERMISSION,
            SystemModule.BAR_MONITOR: FULL_PERMISSION,
            SystemModule.BAR_SERVICE: FULL_PERMISSION,
            SystemModule.KITCHEN_MONITOR: FULL_PERMISSION,
            SystemModule.CASH_REGISTER: FULL_PERMISSION,
            SystemModule.CUSTOMERS: FULL_PERMISSION,
            SystemModule.EMPLOYEES: FULL_PERMISSION,
            SystemModule.REPORTS: FULL_PERMISSION,
            SystemModule.SETTINGS: READ_WRITE_PERMISSION,
            SystemModule.INVENTORY: FULL_PERMISSION,
            SystemModule.MENU: FULL_PERMISSION,
            SystemModule.PROMOTIONS: FULL_PERMISSION,
            SystemModule.FINANCE: READ_WRITE_PERMISSION,
        },
    ),
})

_unconfigured = set(BarRole) - set(ROLE_PERMISSION_CONFIGS)
if _unconfigured:
    raise RuntimeError(f"Roles without permission config: {sorted(_unconfigured)}")
