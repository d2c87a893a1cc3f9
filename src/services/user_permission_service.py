# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Working permission set of a single employee while it is being edited."""

import logging
from collections.abc import Sequence

from src.models.enums import BarRole, PermissionAction, SystemModule
from src.rbac.permissions import ModulePermissions
from src.rbac.roles import RolePermissionConfig
from src.schemas.permissions import (
    MultiplePermissionResult,
    PermissionPreset,
    PermissionSummary,
    PermissionValidationResult,
)
from src.services import permission_service
from src.services.permission_preset_service import (
    PermissionPresetManager,
    PermissionServiceError,
    UserPermissionContext,
)
from src.services.permission_service import CheckSpec, PermissionSet

logger = logging.getLogger(__name__)


class InvalidPermissionError(PermissionServiceError):
    """A permission change would leave the set inconsistent."""

    def __init__(self, errors: list[str]) -> None:
        self.errors = errors
        super().__init__("; ".join(errors))


class UserPermissionSession:
    """Holds and edits the permissions of one employee.

    Starts from the employee's stored customization or from the role default.
    Every change is validated before it replaces the current set.
    """

    def __init__(
        self,
        manager: PermissionPresetManager,
        role: BarRole | str,
        user_id: str | None = None,
        custom_permissions: PermissionSet | None = None,
    ) -> None:
        """Initialize the session.

        Args:
            manager: Preset manager used for defaults and presets
            role: Role of the employee
            user_id: Employee identifier, if known
            custom_permissions: Previously stored customization

        Raises:
            UnknownRoleError: If the role is not configured
        """
        self._manager = manager
        self.role_config: RolePermissionConfig = manager.get_role_config(role)
        self.role = self.role_config.role
        self.user_id = user_id
        if custom_permissions is not None:
            self._permissions = permission_service.as_module_permissions(
                custom_permissions
            )
        else:
            self._permissions = manager.get_default_permissions(self.role)

    @property
    def permissions(self) -> ModulePermissions:
        """Copy of the current permission set."""
        return dict(self._permissions)

    # -- checks -------------------------------------------------------------

    def has_permission(
        self, module: SystemModule | str, action: PermissionAction | str
    ) -> bool:
        return permission_service.has_permission(
            self._manager, self.role, module, action, self._permissions
        )

    def can_access(self, module: SystemModule | str) -> bool:
        return permission_service.can_access_module(
            self._manager, self.role, module, self._permissions
        )

    def can_manage(self, target_role: BarRole | str) -> bool:
        return permission_service.can_manage_user(self._manager, self.role, target_role)

    def check_multiple(self, checks: Sequence[CheckSpec]) -> MultiplePermissionResult:
        return permission_service.check_multiple_permissions(
            self._manager, self.role, checks, self._permissions
        )

    # -- derived state ------------------------------------------------------

    @property
    def validation(self) -> PermissionValidationResult:
        return permission_service.validate_permission_configuration(
            self._permissions, self.role
        )

    @property
    def is_valid_configuration(self) -> bool:
        return self.validation.is_valid

    @property
    def summary(self) -> PermissionSummary:
        return permission_service.generate_permission_summary(self._permissions)

    @property
    def is_default(self) -> bool:
        return permission_service.is_default_permission_set(
            self._manager, self._permissions, self.role
        )

    def context(self) -> UserPermissionContext:
        """Build a permission context from the current set."""
        return self._manager.create_user_permission_context(
            self.user_id or "", self.role, self._permissions
        )

    # -- changes ------------------------------------------------------------

    def update_permissions(self, updates: PermissionSet) -> ModulePermissions:
        """Merge changes into the current set.

        Raises:
            InvalidPermissionError: If the merged set is inconsistent
        """
        merged = permission_service.merge_permissions(self._permissions, updates)
        result = permission_service.validate_permission_configuration(merged, self.role)
        if not result.is_valid:
            logger.warning(
                f"Rejected permission update for {self.user_id or self.role.value}: "
                f"{result.errors}"
            )
            raise InvalidPermissionError(result.errors)

        self._permissions = merged
        return self.permissions

    def reset_to_default(self) -> ModulePermissions:
        """Replace the current set with the role default."""
        self._permissions = self._manager.get_default_permissions(self.role)
        return self.permissions

    def sanitize(self) -> ModulePermissions:
        """Repair inconsistencies in the current set."""
        self._permissions = permission_service.sanitize_permissions(self._permissions)
        return self.permissions

    def apply_preset(self, preset_id: str) -> bool:
        """Replace the current set with a preset's permissions.

        Returns:
            False if the preset does not exist
        """
        preset = self._manager.get_preset_by_id(preset_id)
        if preset is None:
            return False
        self._permissions = dict(preset.permissions)
        return True

    def save_as_preset(self, name: str, description: str) -> PermissionPreset:
        """Store the current set as a custom preset based on this role."""
        return self._manager.create_custom_preset(
            name, description, self.role, self._permissions
        )
