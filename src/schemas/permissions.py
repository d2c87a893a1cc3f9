# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Schemas for presets, validation results and API payloads."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from src.models.enums import (
    AccessLevel,
    BarRole,
    PermissionAction,
    SystemModule,
    UserType,
)
from src.rbac.permissions import ModulePermission

# Permission records as received from outside; not normalized on parse
RawModulePermissions = dict[SystemModule, dict[PermissionAction, bool]]


class PermissionPreset(BaseModel):
    """A named bundle of module permissions derived from a base role."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: str
    name: str
    description: str = ""
    role: BarRole
    permissions: dict[SystemModule, ModulePermission]
    is_default: bool
    is_customizable: bool
    created_at: datetime
    updated_at: datetime


class PresetCreateSchema(BaseModel):
    """Schema for creating a custom preset."""

    name: str = Field(min_length=1, max_length=100)
    description: str = ""
    base_role: BarRole
    permissions: dict[SystemModule, dict[PermissionAction, bool]] = {}


class PresetUpdateSchema(BaseModel):
    """Schema for updating a custom preset. Omitted fields are kept."""

    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = None
    permissions: dict[SystemModule, ModulePermission] | None = None


class MissingPermission(BaseModel):
    """A module/action pair a role was checked for but does not hold."""

    module: SystemModule
    action: PermissionAction
    required: bool = True
    current: bool = False


class PermissionValidationResult(BaseModel):
    """Outcome of a permission check or configuration validation."""

    is_valid: bool
    has_access: bool
    missing_permissions: list[MissingPermission] = []
    warnings: list[str] = []
    errors: list[str] = []


class PermissionSummary(BaseModel):
    """Counts describing a permission set."""

    total_modules: int
    accessible_modules: int
    editable_modules: int
    admin_modules: int
    permission_level: Literal["low", "medium", "high", "complete"]


class PermissionCheck(BaseModel):
    """One entry of a multi-permission check."""

    module: SystemModule
    action: PermissionAction
    required: bool = True


class PermissionCheckResult(BaseModel):
    """Result of one entry of a multi-permission check."""

    module: SystemModule
    action: PermissionAction
    has_permission: bool


class MultiplePermissionResult(BaseModel):
    """Aggregated result of a multi-permission check."""

    has_access: bool
    results: list[PermissionCheckResult]


class ModulePermissionDiff(BaseModel):
    """A single action on which two module permissions disagree."""

    action: PermissionAction
    first: bool
    second: bool


class RoleConfigSchema(BaseModel):
    """Schema representing a role configuration."""

    model_config = ConfigDict(from_attributes=True)

    role: BarRole
    display_name: str
    description: str
    hierarchy: int
    access_level: AccessLevel
    user_type: UserType
    permissions: dict[SystemModule, ModulePermission]
    manageable_roles: list[BarRole]


class UserPermissionContextSchema(BaseModel):
    """Schema representing the resolved permissions of a user."""

    user_id: str
    role: BarRole
    permissions: dict[SystemModule, ModulePermission]
    effective_permissions: dict[SystemModule, ModulePermission]
    manageable_roles: list[BarRole]


class PermissionCheckRequest(BaseModel):
    """Schema for checking a single module/action for the current user."""

    module: SystemModule
    action: PermissionAction


class PermissionSetRequest(BaseModel):
    """Schema carrying a permission set to validate or summarize."""

    role: BarRole
    permissions: RawModulePermissions


class PermissionSetValidationResponse(BaseModel):
    """Validation result together with the sanitized permission set."""

    validation: PermissionValidationResult
    sanitized: dict[SystemModule, ModulePermission]
