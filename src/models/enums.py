# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Enumeration types for the permission model."""

from enum import Enum


class BarRole(str, Enum):
    """Employee job functions in the establishment."""

    CASHIER = "cashier"
    WAITER = "waiter"
    COOK = "cook"
    BARTENDER = "bartender"
    MANAGER = "manager"


class SystemModule(str, Enum):
    """Functional areas of the application that permissions are scoped to."""

    DASHBOARD = "dashboard"
    BAR_MONITOR = "bar_monitor"
    BAR_SERVICE = "bar_service"
    KITCHEN_MONITOR = "kitchen_monitor"
    CASH_REGISTER = "cash_register"
    CUSTOMERS = "customers"
    EMPLOYEES = "employees"
    REPORTS = "reports"
    SETTINGS = "settings"
    INVENTORY = "inventory"
    MENU = "menu"
    PROMOTIONS = "promotions"
    FINANCE = "finance"


class PermissionAction(str, Enum):
    """Capabilities evaluated per module."""

    VIEW = "view"
    CREATE = "create"
    EDIT = "edit"
    DELETE = "delete"
    ADMINISTER = "administer"


class AccessLevel(str, Enum):
    """Access tier of a role."""

    USER = "USER"
    MANAGER = "MANAGER"
    ADMIN = "ADMIN"


class UserType(str, Enum):
    """Whether a role belongs to regular staff or administration."""

    EMPLOYEE = "employee"
    ADMINISTRATOR = "administrator"


class ModuleCategory(str, Enum):
    """Grouping used when listing modules."""

    OPERATIONAL = "operational"
    ADMINISTRATIVE = "administrative"
    FINANCIAL = "financial"
    REPORTS = "reports"
