# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Permission, role and preset API endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from src.api.deps import (
    CurrentEmployee,
    get_current_employee,
    get_preset_manager,
    get_settings,
    require_manage_role,
    require_module_permission,
)
from src.config import Settings
from src.models.enums import BarRole, PermissionAction, SystemModule
from src.rbac.permissions import ModulePermission
from src.rbac.roles import RolePermissionConfig
from src.schemas.permissions import (
    MissingPermission,
    PermissionCheckRequest,
    PermissionPreset,
    PermissionSetRequest,
    PermissionSetValidationResponse,
    PermissionSummary,
    PermissionValidationResult,
    PresetCreateSchema,
    PresetUpdateSchema,
    RoleConfigSchema,
    UserPermissionContextSchema,
)
from src.services import permission_service
from src.services.permission_preset_service import (
    PermissionPresetManager,
    UnknownRoleError,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/permissions", tags=["permissions"])

require_preset_admin = require_module_permission(
    SystemModule.EMPLOYEES, PermissionAction.ADMINISTER
)


def _role_schema(config: RolePermissionConfig) -> RoleConfigSchema:
    return RoleConfigSchema(
        role=config.role,
        display_name=config.display_name,
        description=config.description,
        hierarchy=config.hierarchy,
        access_level=config.access_level,
        user_type=config.user_type,
        permissions=dict(config.permissions),
        manageable_roles=[r for r in BarRole if r in config.manageable_roles],
    )


@router.get("/roles", response_model=list[RoleConfigSchema], summary="List all roles")
def list_roles(
    manager: PermissionPresetManager = Depends(get_preset_manager),
    employee: CurrentEmployee = Depends(get_current_employee),
):
    """Retrieve every role with its default permissions and hierarchy."""
    return [_role_schema(config) for config in manager.get_all_role_configs().values()]


@router.get("/roles/{role}", response_model=RoleConfigSchema, summary="Get a role")
def get_role(
    role: str,
    manager: PermissionPresetManager = Depends(get_preset_manager),
    employee: CurrentEmployee = Depends(get_current_employee),
):
    """Retrieve the configuration of a single role."""
    try:
        config = manager.get_role_config(role)
    except UnknownRoleError:
        raise HTTPException(status_code=404, detail="Role not found")
    return _role_schema(config)


@router.get(
    "/roles/{role}/defaults",
    response_model=dict[SystemModule, ModulePermission],
    summary="Get the default permissions of a managed role",
)
def get_managed_role_defaults(
    role: BarRole,
    manager: PermissionPresetManager = Depends(get_preset_manager),
    employee: CurrentEmployee = Depends(require_manage_role),
):
    """Retrieve default permissions of a role the caller is allowed to manage."""
    return manager.get_default_permissions(role)


@router.get("/me", response_model=UserPermissionContextSchema, summary="Get my permissions")
def get_my_permissions(
    manager: PermissionPresetManager = Depends(get_preset_manager),
    employee: CurrentEmployee = Depends(get_current_employee),
):
    """Resolve the effective permissions of the current employee."""
    context = manager.create_user_permission_context(
        employee.user_id, employee.role, employee.custom_permissions
    )
    return UserPermissionContextSchema(
        user_id=context.user_id,
        role=context.role,
        permissions=context.permissions,
        effective_permissions=context.effective_permissions,
        manageable_roles=manager.get_manageable_roles(context.role),
    )


@router.post("/check", response_model=PermissionValidationResult, summary="Check a permission")
def check_permission(
    check: PermissionCheckRequest,
    manager: PermissionPresetManager = Depends(get_preset_manager),
    employee: CurrentEmployee = Depends(get_current_employee),
):
    """Check the current employee for a module and action.

    Without a preset the role default is validated. With a preset, its
    permissions replace the role default, as for /me and the route guards.
    """
    if employee.custom_permissions is None:
        return manager.validate_permission(employee.role, check.module, check.action)

    context = manager.create_user_permission_context(
        employee.user_id, employee.role, employee.custom_permissions
    )
    has_access = context.can_access(check.module, check.action)
    return PermissionValidationResult(
        is_valid=True,
        has_access=has_access,
        missing_permissions=[]
        if has_access
        else [MissingPermission(module=check.module, action=check.action)],
    )


@router.post(
    "/validate",
    response_model=PermissionSetValidationResponse,
    summary="Validate a permission set",
)
def validate_permission_set(
    request: PermissionSetRequest,
    employee: CurrentEmployee = Depends(get_current_employee),
):
    """Validate a permission set and return a sanitized copy."""
    return PermissionSetValidationResponse(
        validation=permission_service.validate_permission_configuration(
            request.permissions, request.role
        ),
        sanitized=permission_service.sanitize_permissions(request.permissions),
    )


@router.post("/summary", response_model=PermissionSummary, summary="Summarize a permission set")
def summarize_permission_set(
    request: PermissionSetRequest,
    employee: CurrentEmployee = Depends(get_current_employee),
):
    """Count the accessible, editable and administrable modules of a set."""
    return permission_service.generate_permission_summary(request.permissions)


@router.get("/presets", response_model=list[PermissionPreset], summary="List presets")
def list_presets(
    manager: PermissionPresetManager = Depends(get_preset_manager),
    employee: CurrentEmployee = Depends(get_current_employee),
):
    """Retrieve built-in and custom presets."""
    return manager.get_all_presets()


@router.get("/presets/{preset_id}", response_model=PermissionPreset, summary="Get a preset")
def get_preset(
    preset_id: str,
    manager: PermissionPresetManager = Depends(get_preset_manager),
    employee: CurrentEmployee = Depends(get_current_employee),
):
    """Retrieve a preset by ID."""
    preset = manager.get_preset_by_id(preset_id)
    if preset is None:
        raise HTTPException(status_code=404, detail="Preset not found")
    return preset


@router.post(
    "/presets",
    response_model=PermissionPreset,
    status_code=status.HTTP_201_CREATED,
    summary="Create a custom preset",
)
def create_preset(
    preset_in: PresetCreateSchema,
    manager: PermissionPresetManager = Depends(get_preset_manager),
    app_settings: Settings = Depends(get_settings),
    employee: CurrentEmployee = Depends(require_preset_admin),
):
    """Create a custom preset derived from a base role.
    Requires employees.administer permission.
    """
    if not app_settings.allow_custom_presets:
        raise HTTPException(status_code=403, detail="Custom presets are disabled")

    preset = manager.create_custom_preset(
        preset_in.name,
        preset_in.description,
        preset_in.base_role,
        preset_in.permissions,
    )
    logger.info(f"Employee {employee.user_id} created preset {preset.id}")
    return preset


@router.patch("/presets/{preset_id}", response_model=PermissionPreset, summary="Update a custom preset")
def update_preset(
    preset_id: str,
    preset_in: PresetUpdateSchema,
    manager: PermissionPresetManager = Depends(get_preset_manager),
    employee: CurrentEmployee = Depends(require_preset_admin),
):
    """Update a custom preset. Built-in presets cannot be modified.
    Requires employees.administer permission.
    """
    preset = manager.update_custom_preset(preset_id, preset_in)
    if preset is None:
        raise HTTPException(status_code=404, detail="Custom preset not found")
    return preset


@router.delete(
    "/presets/{preset_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a custom preset",
)
def delete_preset(
    preset_id: str,
    manager: PermissionPresetManager = Depends(get_preset_manager),
    employee: CurrentEmployee = Depends(require_preset_admin),
):
    """Delete a custom preset. Built-in presets cannot be deleted.
    Requires employees.administer permission.
    """
    if not manager.delete_custom_preset(preset_id):
        raise HTTPException(status_code=404, detail="Custom preset not found")
    return
