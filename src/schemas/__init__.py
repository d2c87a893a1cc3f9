"""Pydantic schemas package."""
from src.schemas.common import HealthResponse
from src.schemas.permissions import (
    MissingPermission,
    MultiplePermissionResult,
    PermissionCheck,
    PermissionCheckRequest,
    PermissionCheckResult,
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

__all__ = [
    "HealthResponse",
    "MissingPermission",
    "MultiplePermissionResult",
    "PermissionCheck",
    "PermissionCheckRequest",
    "PermissionCheckResult",
    "PermissionPreset",
    "PermissionSetRequest",
    "PermissionSetValidationResponse",
    "PermissionSummary",
    "PermissionValidationResult",
    "PresetCreateSchema",
    "PresetUpdateSchema",
    "RoleConfigSchema",
    "UserPermissionContextSchema",
]
