# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""API dependencies for dependency injection."""

import logging
from collections.abc import Callable
from dataclasses import dataclass

from fastapi import Depends, Header, HTTPException, Request, status

from src.config import Settings
from src.models.enums import BarRole, PermissionAction, SystemModule
from src.rbac.permissions import ModulePermissions
from src.services import permission_service
from src.services.permission_preset_service import PermissionPresetManager

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CurrentEmployee:
    """The authenticated employee as resolved by the upstream gateway."""

    user_id: str
    role: BarRole
    custom_permissions: ModulePermissions | None = None


def get_settings(request: Request) -> Settings:
    """Get the settings the application was created with."""
    return request.app.state.settings


def get_preset_manager(request: Request) -> PermissionPresetManager:
    """Get the preset manager owned by the application."""
    return request.app.state.preset_manager


def get_current_employee(
    manager: PermissionPresetManager = Depends(get_preset_manager),
    x_employee_id: str | None = Header(default=None),
    x_employee_role: str | None = Header(default=None),
    x_employee_preset: str | None = Header(default=None),
) -> CurrentEmployee:
    """Get the current employee from the identity headers."""
    if not x_employee_id or not x_employee_role:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )

    role_value = x_employee_role.strip().lower()
    if not manager.is_known_role(role_value):
        logger.warning(f"Rejected employee {x_employee_id} with unknown role {role_value!r}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unknown employee role",
        )

    custom_permissions = None
    if x_employee_preset:
        preset = manager.get_preset_by_id(x_employee_preset)
        if preset is None:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Unknown permission preset",
            )
        if preset.role != BarRole(role_value):
            logger.warning(
                f"Rejected preset {preset.id} of role {preset.role.value} "
                f"for employee {x_employee_id} with role {role_value}"
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Permission preset does not match employee role",
            )
        custom_permissions = preset.permissions

    return CurrentEmployee(
        user_id=x_employee_id,
        role=BarRole(role_value),
        custom_permissions=custom_permissions,
    )


def require_module_permission(
    module: SystemModule, action: PermissionAction
) -> Callable[..., CurrentEmployee]:
    """Dependency for module/action based authorization.

    A preset in the identity headers replaces the role default.
    """

    def dependency(
        manager: PermissionPresetManager = Depends(get_preset_manager),
        employee: CurrentEmployee = Depends(get_current_employee),
    ) -> CurrentEmployee:
        context = manager.create_user_permission_context(
            employee.user_id, employee.role, employee.custom_permissions
        )
        if not context.can_access(module, action):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Permission denied: {module.value}.{action.value}",
            )
        return employee

    return dependency


def require_manage_role(
    role: BarRole,
    manager: PermissionPresetManager = Depends(get_preset_manager),
    employee: CurrentEmployee = Depends(get_current_employee),
) -> CurrentEmployee:
    """Dependency requiring the employee to manage the role in the path."""
    if not permission_service.can_manage_user(manager, employee.role, role):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Cannot manage role: {role.value}",
        )
    return employee
