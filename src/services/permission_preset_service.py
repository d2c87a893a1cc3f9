# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Role permission defaults and the custom preset registry."""

import logging
import threading
import uuid
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from src.models.enums import BarRole, PermissionAction, SystemModule
from src.rbac.modules import MODULE_DESCRIPTIONS
from src.rbac.permissions import ModulePermission, ModulePermissions
from src.rbac.roles import ROLE_PERMISSION_CONFIGS, RolePermissionConfig
from src.schemas.permissions import (
    MissingPermission,
    PermissionPreset,
    PermissionValidationResult,
    PresetUpdateSchema,
)
from src.services.permission_service import (
    PermissionSet,
    as_module_permissions,
    merge_permissions,
    sanitize_permissions,
)
from src.services.preset_store import InMemoryPresetStore, PresetStore

logger = logging.getLogger(__name__)

CUSTOM_PRESET_PREFIX = "custom_"

# Fields of a preset that an update may change
UPDATABLE_PRESET_FIELDS = ("name", "description", "permissions")


class PermissionServiceError(Exception):
    """Base exception for permission service errors."""


class UnknownRoleError(PermissionServiceError, LookupError):
    """A role has no entry in the role configuration table."""

    def __init__(self, role: object) -> None:
        self.role = role
        super().__init__(f"Unknown role: {role!r}")


@dataclass(frozen=True)
class UserPermissionContext:
    """Resolved permissions of one user, with bound query helpers."""

    user_id: str
    role: BarRole
    permissions: ModulePermissions
    effective_permissions: ModulePermissions
    can_access: Callable[[SystemModule | str, PermissionAction | str], bool]
    can_manage: Callable[[BarRole | str], bool]


class PermissionPresetManager:
    """Source of truth for role permissions and custom presets.

    One instance is created by the application and handed to whoever needs
    it. Role configuration is immutable; the custom preset registry is
    guarded by a lock and written through to the preset store.
    """

    def __init__(
        self,
        store: PresetStore | None = None,
        role_configs: Mapping[BarRole, RolePermissionConfig] = ROLE_PERMISSION_CONFIGS,
        log_checks: bool = False,
    ) -> None:
        """Initialize the manager.

        Args:
            store: Persistence for custom presets (in-memory if omitted)
            role_configs: Static role configuration table
            log_checks: Emit a debug log line for every permission check
        """
        self._store = store if store is not None else InMemoryPresetStore()
        self._role_configs = role_configs
        self._lock = threading.RLock()
        self._started_at = datetime.now(UTC)
        self.log_checks = log_checks
        self._custom_presets: dict[str, PermissionPreset] = {
            preset.id: preset for preset in self._store.load_all()
        }
        if self._custom_presets:
            logger.info(f"Loaded {len(self._custom_presets)} custom presets")

    # -- role configuration -------------------------------------------------

    def _find_config(self, role: object) -> RolePermissionConfig | None:
        try:
            return self._role_configs.get(BarRole(role))
        except ValueError:
            return None

    def _require_config(self, role: object) -> RolePermissionConfig:
        config = self._find_config(role)
        if config is None:
            raise UnknownRoleError(role)
        return config

    def is_known_role(self, role: object) -> bool:
        """Check whether a role has a configuration entry."""
        return self._find_config(role) is not None

    def get_default_permissions(self, role: BarRole | str) -> ModulePermissions:
        """Get a copy of the default permissions of a role.

        Raises:
            UnknownRoleError: If the role is not configured
        """
        return dict(self._require_config(role).permissions)

    def get_role_config(self, role: BarRole | str) -> RolePermissionConfig:
        """Get the full configuration of a role.

        Raises:
            UnknownRoleError: If the role is not configured
        """
        return self._require_config(role)

    def get_all_role_configs(self) -> dict[BarRole, RolePermissionConfig]:
        """Get the configuration of every role."""
        return dict(self._role_configs)

    def can_manage_role(
        self, manager_role: BarRole | str, target_role: BarRole | str
    ) -> bool:
        """Check whether one role is allowed to manage another.

        Unknown roles never manage and are never managed.
        """
        manager_config = self._find_config(manager_role)
        target_config = self._find_config(target_role)
        if manager_config is None or target_config is None:
            logger.warning(
                f"Management check with unknown role: {manager_role!r} -> {target_role!r}"
            )
            return False
        return target_config.role in manager_config.manageable_roles

    def validate_permission(
        self,
        role: BarRole | str,
        module: SystemModule | str,
        action: PermissionAction | str,
    ) -> PermissionValidationResult:
        """Check a role's default permission for a module and action.

        An unknown role yields ``is_valid=False``. A known role lacking the
        permission yields ``is_valid=True`` and ``has_access=False`` with the
        gap listed in ``missing_permissions``.
        """
        module = SystemModule(module)
        action = PermissionAction(action)

        config = self._find_config(role)
        if config is None:
            return PermissionValidationResult(
                is_valid=False,
                has_access=False,
                errors=[f"Unknown role: {role}"],
            )

        missing = [MissingPermission(module=module, action=action)]
        permission = config.permissions.get(module)
        if permission is None:
            return PermissionValidationResult(
                is_valid=True,
                has_access=False,
                missing_permissions=missing,
                warnings=[
                    f"Module {module.value} is not configured for role {config.role.value}"
                ],
            )

        has_access = permission.allows(action)
        if self.log_checks:
            logger.debug(
                f"Validated {config.role.value}:{module.value}.{action.value} -> {has_access}"
            )
        return PermissionValidationResult(
            is_valid=True,
            has_access=has_access,
            missing_permissions=[] if has_access else missing,
        )

    # -- user contexts ------------------------------------------------------

    def create_user_permission_context(
        self,
        user_id: str,
        role: BarRole | str,
        custom_permissions: PermissionSet | None = None,
    ) -> UserPermissionContext:
        """Resolve the effective permissions of a user.

        Custom permissions, when given, replace the role default entirely.

        Raises:
            UnknownRoleError: If the role is not configured
        """
        config = self._require_config(role)
        defaults = dict(config.permissions)
        if custom_permissions is not None:
            effective = as_module_permissions(custom_permissions)
        else:
            effective = dict(defaults)

        def can_access(
            module: SystemModule | str, action: PermissionAction | str
        ) -> bool:
            permission = effective.get(SystemModule(module))
            return permission is not None and permission.allows(action)

        def can_manage(target_role: BarRole | str) -> bool:
            return self.can_manage_role(config.role, target_role)

        return UserPermissionContext(
            user_id=user_id,
            role=config.role,
            permissions=defaults,
            effective_permissions=effective,
            can_access=can_access,
            can_manage=can_manage,
        )

    # -- presets ------------------------------------------------------------

    def _preset_from_role(self, config: RolePermissionConfig) -> PermissionPreset:
        return PermissionPreset(
            id=config.role.value,
            name=config.display_name,
            description=config.description,
            role=config.role,
            permissions=dict(config.permissions),
            is_default=True,
            is_customizable=False,
            created_at=self._started_at,
            updated_at=self._started_at,
        )

    def get_preset_by_id(self, preset_id: str) -> PermissionPreset | None:
        """Get a custom or built-in preset by ID."""
        with self._lock:
            preset = self._custom_presets.get(preset_id)
        if preset is not None:
            return preset.model_copy(deep=True)

        config = self._find_config(preset_id)
        if config is not None:
            return self._preset_from_role(config)
        return None

    def get_all_presets(self) -> list[PermissionPreset]:
        """List built-in presets followed by custom presets."""
        defaults = [
            self._preset_from_role(config) for config in self._role_configs.values()
        ]
        with self._lock:
            custom = sorted(self._custom_presets.values(), key=lambda p: p.created_at)
        return defaults + [preset.model_copy(deep=True) for preset in custom]

    def create_custom_preset(
        self,
        name: str,
        description: str,
        base_role: BarRole | str,
        overrides: PermissionSet,
    ) -> PermissionPreset:
        """Create a custom preset from a role default and overrides.

        Raises:
            UnknownRoleError: If the base role is not configured
        """
        config = self._require_config(base_role)
        permissions = sanitize_permissions(
            merge_permissions(config.permissions, overrides)
        )
        now = datetime.now(UTC)
        preset = PermissionPreset(
            id=f"{CUSTOM_PRESET_PREFIX}{uuid.uuid4().hex}",
            name=name,
            description=description,
            role=config.role,
            permissions=permissions,
            is_default=False,
            is_customizable=True,
            created_at=now,
            updated_at=now,
        )

        with self._lock:
            self._store.save(preset)
            self._custom_presets[preset.id] = preset

        logger.info(f"Created custom preset {preset.id} ({name}) from {config.role.value}")
        return preset.model_copy(deep=True)

    def update_custom_preset(
        self,
        preset_id: str,
        updates: PresetUpdateSchema | Mapping[str, Any],
    ) -> PermissionPreset | None:
        """Apply name, description or permission changes to a custom preset.

        Returns:
            The updated preset, or None if the ID is unknown or built-in

        Raises:
            ValidationError: If the changes violate the update schema
        """
        if not isinstance(updates, PresetUpdateSchema):
            updates = PresetUpdateSchema.model_validate(dict(updates))
        updates = updates.model_dump(exclude_unset=True)

        changes: dict[str, Any] = {
            field: updates[field]
            for field in UPDATABLE_PRESET_FIELDS
            if updates.get(field) is not None
        }
        if "permissions" in changes:
            changes["permissions"] = sanitize_permissions(changes["permissions"])

        with self._lock:
            preset = self._custom_presets.get(preset_id)
            if preset is None or not preset.is_customizable:
                return None

            updated = preset.model_copy(
                update={**changes, "updated_at": datetime.now(UTC)}
            )
            self._store.save(updated)
            self._custom_presets[preset_id] = updated

        logger.info(f"Updated custom preset {preset_id}: {sorted(changes)}")
        return updated.model_copy(deep=True)

    def delete_custom_preset(self, preset_id: str) -> bool:
        """Delete a custom preset. Built-in and unknown IDs return False."""
        with self._lock:
            preset = self._custom_presets.get(preset_id)
            if preset is None or not preset.is_customizable:
                return False
            self._store.delete(preset_id)
            del self._custom_presets[preset_id]

        logger.info(f"Deleted custom preset {preset_id}")
        return True

    # -- role queries -------------------------------------------------------

    def get_required_modules_for_role(self, role: BarRole | str) -> list[SystemModule]:
        """List the modules a role needs to do its job."""
        config = self._find_config(role)
        if config is None:
            return []
        return [
            module
            for module, description in MODULE_DESCRIPTIONS.items()
            if config.role in description.required_for_roles
        ]

    def get_role_hierarchy(self, role: BarRole | str) -> int:
        """Get the hierarchy rank of a role (0 if unknown)."""
        config = self._find_config(role)
        return config.hierarchy if config is not None else 0

    def get_manageable_roles(self, role: BarRole | str) -> list[BarRole]:
        """List the roles a role may manage (empty if unknown)."""
        config = self._find_config(role)
        if config is None:
            return []
        return [r for r in BarRole if r in config.manageable_roles]
