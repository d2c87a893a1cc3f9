# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Descriptions of the application modules."""

from dataclasses import dataclass, field

from src.models.enums import BarRole, ModuleCategory, SystemModule


@dataclass(frozen=True)
class ModuleDescription:
    """Display metadata for a module and the roles that need it."""

    name: str
    description: str
    category: ModuleCategory
    required_for_roles: frozenset[BarRole] = field(default_factory=frozenset)
    icon: str | None = None


MODULE_DESCRIPTIONS: dict[SystemModule, ModuleDescription] = {
    SystemModule.DASHBOARD: ModuleDescription(
        name="Dashboard",
        description="Overview of the establishment",
        category=ModuleCategory.OPERATIONAL,
        required_for_roles=frozenset(BarRole),
        icon="dashboard",
    ),
    SystemModule.BAR_MONITOR: ModuleDescription(
        name="Bar Monitor",
        description="Drink order queue and preparation status",
        category=ModuleCategory.OPERATIONAL,
        required_for_roles=frozenset({BarRole.BARTENDER, BarRole.MANAGER}),
        icon="local_bar",
    ),
    SystemModule.BAR_SERVICE: ModuleDescription(
        name="Bar Service",
        description="Table service, comandas and customer orders",
        category=ModuleCategory.OPERATIONAL,
        required_for_roles=frozenset(
            {BarRole.WAITER, BarRole.CASHIER, BarRole.MANAGER}
        ),
        icon="restaurant_menu",
    ),
    SystemModule.KITCHEN_MONITOR: ModuleDescription(
        name="Kitchen Monitor",
        description="Dish order queue and preparation status",
        category=ModuleCategory.OPERATIONAL,
        required_for_roles=frozenset({BarRole.COOK, BarRole.MANAGER}),
        icon="restaurant",
    ),
    SystemModule.CASH_REGISTER: ModuleDescription(
        name="Cash Register",
        description="Sales, payments and cash closing",
        category=ModuleCategory.FINANCIAL,
        required_for_roles=frozenset({BarRole.CASHIER, BarRole.MANAGER}),
        icon="point_of_sale",
    ),
    SystemModule.CUSTOMERS: ModuleDescription(
        name="Customers",
        description="Customer registry",
        category=ModuleCategory.OPERATIONAL,
        required_for_roles=frozenset(
            {BarRole.CASHIER, BarRole.WAITER, BarRole.MANAGER}
        ),
        icon="people",
    ),
    SystemModule.EMPLOYEES: ModuleDescription(
        name="Employees",
        description="Staff registry and role assignment",
        category=ModuleCategory.ADMINISTRATIVE,
        required_for_roles=frozenset({BarRole.MANAGER}),
        icon="badge",
    ),
    SystemModule.REPORTS: ModuleDescription(
        name="Reports",
        description="Sales and performance reports",
        category=ModuleCategory.REPORTS,
        required_for_roles=frozenset({BarRole.MANAGER}),
        icon="analytics",
    ),
    SystemModule.SETTINGS: ModuleDescription(
        name="Settings",
        description="Establishment and environment configuration",
        category=ModuleCategory.ADMINISTRATIVE,
        required_for_roles=frozenset({BarRole.MANAGER}),
        icon="settings",
    ),
    SystemModule.INVENTORY: ModuleDescription(
        name="Inventory",
        description="Products and ingredients stock",
        category=ModuleCategory.OPERATIONAL,
        required_for_roles=frozenset(
            {BarRole.COOK, BarRole.BARTENDER, BarRole.MANAGER}
        ),
        icon="inventory",
    ),
    SystemModule.MENU: ModuleDescription(
        name="Menu",
        description="Dishes and drinks on offer",
        category=ModuleCategory.OPERATIONAL,
        required_for_roles=frozenset(
            {BarRole.COOK, BarRole.BARTENDER, BarRole.MANAGER}
        ),
        icon="menu_book",
    ),
    SystemModule.PROMOTIONS: ModuleDescription(
        name="Promotions",
        description="Promotions and discounts",
        category=ModuleCategory.ADMINISTRATIVE,
        required_for_roles=frozenset({BarRole.MANAGER}),
        icon="local_offer",
    ),
    SystemModule.FINANCE: ModuleDescription(
        name="Finance",
        description="Financial control and bookkeeping",
        category=ModuleCategory.FINANCIAL,
        required_for_roles=frozenset({BarRole.MANAGER}),
        icon="account_balance",
    ),
}
