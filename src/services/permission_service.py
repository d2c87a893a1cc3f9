# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Permission checks, validation and transformation helpers.

All functions are free of state. Role defaults are resolved through the
``PermissionPresetManager`` passed as the first argument; permission sets
supplied by callers may hold raw mappings as well as ``ModulePermission``
records.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from typing import TYPE_CHECKING, Any, Literal

from src.models.enums import BarRole, PermissionAction, SystemModule
from src.rbac.modules import MODULE_DESCRIPTIONS
from src.rbac.permissions import (
    ALL_ACTIONS,
    EMPTY_PERMISSION,
    FULL_PERMISSION,
    OPERATIONAL_PERMISSION,
    READ_ONLY_PERMISSION,
    VIEW_IMPLYING_ACTIONS,
    ModulePermission,
    ModulePermissions,
)
from src.schemas.permissions import (
    ModulePermissionDiff,
    MultiplePermissionResult,
    PermissionCheck,
    PermissionCheckResult,
    PermissionSummary,
    PermissionValidationResult,
)

if TYPE_CHECKING:
    from src.services.permission_preset_service import PermissionPresetManager

logger = logging.getLogger(__name__)

PermissionEntry = ModulePermission | Mapping[str, Any]
PermissionSet = Mapping[SystemModule | str, PermissionEntry]
CheckSpec = PermissionCheck | Mapping[str, Any] | tuple[str, str]

# Actions an administrator of a module is normally granted as well
ADMINISTER_COMPANION_ACTIONS: tuple[PermissionAction, ...] = (
    PermissionAction.CREATE,
    PermissionAction.EDIT,
    PermissionAction.DELETE,
)

ACTION_NAMES: dict[PermissionAction, str] = {
    PermissionAction.VIEW: "View",
    PermissionAction.CREATE: "Create",
    PermissionAction.EDIT: "Edit",
    PermissionAction.DELETE: "Delete",
    PermissionAction.ADMINISTER: "Administer",
}


def as_module_permissions(permissions: PermissionSet) -> ModulePermissions:
    """Key a permission set by ``SystemModule`` without normalizing entries."""
    return {
        SystemModule(module): ModulePermission.coerce(entry)
        for module, entry in permissions.items()
    }


# ---------------------------------------------------------------------------
# Checks
# ---------------------------------------------------------------------------


def has_permission(
    manager: PermissionPresetManager,
    role: BarRole | str,
    module: SystemModule | str,
    action: PermissionAction | str,
    override_permissions: PermissionSet | None = None,
) -> bool:
    """Check whether a role may perform an action on a module.

    An override entry for the module takes precedence over the role default.
    Modules missing from both deny every action.
    """
    module = SystemModule(module)
    action = PermissionAction(action)

    entry: ModulePermission | None = None
    if override_permissions is not None:
        entry = as_module_permissions(override_permissions).get(module)

    if entry is None:
        if not manager.is_known_role(role):
            logger.warning(f"Denied {module.value}.{action.value} for unknown role {role!r}")
            return False
        entry = manager.get_default_permissions(role).get(module)

    allowed = entry is not None and entry.allows(action)
    if manager.log_checks:
        logger.debug(f"Check {role}:{module.value}.{action.value} -> {allowed}")
    return allowed


def _as_check(check: CheckSpec) -> PermissionCheck:
    if isinstance(check, PermissionCheck):
        return check
    if isinstance(check, tuple):
        module, action = check
        return PermissionCheck(module=module, action=action)
    return PermissionCheck(**check)


def check_multiple_permissions(
    manager: PermissionPresetManager,
    role: BarRole | str,
    checks: Sequence[CheckSpec],
    override_permissions: PermissionSet | None = None,
) -> MultiplePermissionResult:
    """Evaluate several checks and report each outcome.

    Access is granted when every check marked as required passes.
    """
    parsed = [_as_check(check) for check in checks]
    results = [
        PermissionCheckResult(
            module=check.module,
            action=check.action,
            has_permission=has_permission(
                manager, role, check.module, check.action, override_permissions
            ),
        )
        for check in parsed
    ]
    has_access = all(
        result.has_permission
        for check, result in zip(parsed, results, strict=True)
        if check.required
    )
    return MultiplePermissionResult(has_access=has_access, results=results)


def has_multiple_permissions(
    manager: PermissionPresetManager,
    role: BarRole | str,
    checks: Sequence[CheckSpec],
    override_permissions: PermissionSet | None = None,
) -> bool:
    """Return True when every check passes. An empty list passes."""
    return check_multiple_permissions(
        manager, role, checks, override_permissions
    ).has_access


def can_access_module(
    manager: PermissionPresetManager,
    role: BarRole | str,
    module: SystemModule | str,
    override_permissions: PermissionSet | None = None,
) -> bool:
    """Check whether a role may at least view a module."""
    return has_permission(
        manager, role, module, PermissionAction.VIEW, override_permissions
    )


def can_manage_user(
    manager: PermissionPresetManager,
    manager_role: BarRole | str,
    target_role: BarRole | str,
) -> bool:
    """Check whether an employee of one role may manage one of another."""
    return manager.can_manage_role(manager_role, target_role)


# ---------------------------------------------------------------------------
# Validation and sanitization
# ---------------------------------------------------------------------------


def validate_permission_configuration(
    permissions: PermissionSet,
    role: BarRole | str,
) -> PermissionValidationResult:
    """Check a permission set for internal consistency.

    Any action granted without view is an error. Administer without the other
    actions, delete without edit, and required modules that are not viewable
    are reported as warnings. The role only selects the required modules and
    labels the messages; its default permissions are not consulted.
    """
    errors: list[str] = []
    warnings: list[str] = []
    entries = as_module_permissions(permissions)

    for module, permission in entries.items():
        for action in VIEW_IMPLYING_ACTIONS:
            if permission.allows(action) and not permission.view:
                errors.append(
                    f"Module {module.value}: {action.value} permission requires view"
                )

        if permission.administer:
            for action in ADMINISTER_COMPANION_ACTIONS:
                if not permission.allows(action):
                    warnings.append(
                        f"Module {module.value}: administer permission usually "
                        f"includes {action.value}"
                    )
        if permission.delete and not permission.edit:
            warnings.append(
                f"Module {module.value}: delete permission usually includes edit"
            )

    role_value = role.value if isinstance(role, BarRole) else role
    try:
        known_role = BarRole(role)
    except ValueError:
        known_role = None
    if known_role is not None:
        for module, description in MODULE_DESCRIPTIONS.items():
            if known_role not in description.required_for_roles:
                continue
            entry = entries.get(module)
            if entry is None or not entry.view:
                warnings.append(
                    f"Module {module.value} is required for role {role_value} "
                    "but is not viewable"
                )

    return PermissionValidationResult(
        is_valid=not errors,
        has_access=True,
        warnings=warnings,
        errors=errors,
    )


def sanitize_permissions(permissions: PermissionSet) -> ModulePermissions:
    """Return a copy in which view is granted wherever another action is.

    Entries that are already consistent keep their flags. The input is not
    modified.
    """
    return {
        module: ModulePermission(**permission.model_dump())
        for module, permission in as_module_permissions(permissions).items()
    }


# ---------------------------------------------------------------------------
# Comparison
# ---------------------------------------------------------------------------


def compare_module_permissions(
    first: PermissionEntry,
    second: PermissionEntry,
) -> tuple[bool, list[ModulePermissionDiff]]:
    """Compare two module permissions action by action.

    Returns:
        Tuple of (is_equal, list of differing actions)
    """
    first = ModulePermission.coerce(first)
    second = ModulePermission.coerce(second)
    differences = [
        ModulePermissionDiff(
            action=action,
            first=first.allows(action),
            second=second.allows(action),
        )
        for action in ALL_ACTIONS
        if first.allows(action) != second.allows(action)
    ]
    return not differences, differences


def is_more_restrictive(first: PermissionEntry, second: PermissionEntry) -> bool:
    """True if ``first`` grants nothing that ``second`` does not."""
    first = ModulePermission.coerce(first)
    second = ModulePermission.coerce(second)
    return all(
        not first.allows(action) or second.allows(action) for action in ALL_ACTIONS
    )


def calculate_permission_level(permission: PermissionEntry) -> int:
    """Number of granted actions, from 0 to 5."""
    permission = ModulePermission.coerce(permission)
    return sum(1 for action in ALL_ACTIONS if permission.allows(action))


# ---------------------------------------------------------------------------
# Transformation
# ---------------------------------------------------------------------------


def merge_permissions(
    base: PermissionSet,
    overrides: PermissionSet,
) -> ModulePermissions:
    """Merge override flags into a base set, module by module.

    Partial mappings only replace the actions they name. The result is not
    normalized; use ``sanitize_permissions`` when consistency is required.
    """
    merged = as_module_permissions(base)
    for module, override in overrides.items():
        module = SystemModule(module)
        if isinstance(override, ModulePermission):
            flags = override.model_dump()
        else:
            flags = {
                PermissionAction(action).value: bool(value)
                for action, value in override.items()
            }
        current = merged.get(module, EMPTY_PERMISSION).model_dump()
        merged[module] = ModulePermission.unchecked(**{**current, **flags})
    return merged


def add_permissions(
    permissions: PermissionSet,
    grants: Mapping[SystemModule | str, Iterable[PermissionAction | str]],
) -> ModulePermissions:
    """Grant actions on modules, creating entries that do not exist yet."""
    result = as_module_permissions(permissions)
    for module, actions in grants.items():
        module = SystemModule(module)
        current = result.get(module, EMPTY_PERMISSION)
        result[module] = current.with_flags(
            **{PermissionAction(action).value: True for action in actions}
        )
    return result


def remove_permissions(
    permissions: PermissionSet,
    revocations: Mapping[SystemModule | str, Iterable[PermissionAction | str]],
) -> ModulePermissions:
    """Revoke actions on modules. Revoking view revokes every action."""
    result = as_module_permissions(permissions)
    for module, actions in revocations.items():
        module = SystemModule(module)
        if module not in result:
            continue
        revoked = {PermissionAction(action) for action in actions}
        if PermissionAction.VIEW in revoked:
            result[module] = EMPTY_PERMISSION
            continue
        result[module] = result[module].with_flags(
            **{action.value: False for action in revoked}
        )
    return result


def create_permissions_from_template(
    template: Literal["read_only", "operational", "full", "custom"],
    modules: Iterable[SystemModule | str],
    custom_permission: ModulePermission | None = None,
) -> ModulePermissions:
    """Apply the same permission to every listed module."""
    templates = {
        "read_only": READ_ONLY_PERMISSION,
        "operational": OPERATIONAL_PERMISSION,
        "full": FULL_PERMISSION,
        "custom": custom_permission or EMPTY_PERMISSION,
    }
    permission = templates.get(template, EMPTY_PERMISSION)
    return {SystemModule(module): permission for module in modules}


# ---------------------------------------------------------------------------
# Presentation
# ---------------------------------------------------------------------------


def generate_permission_summary(permissions: PermissionSet) -> PermissionSummary:
    """Count the modules present, viewable, editable and administrable.

    A module with an entry counts toward the total even if it grants nothing.
    """
    entries = as_module_permissions(permissions)
    total = len(entries)
    level_total = sum(calculate_permission_level(p) for p in entries.values())
    average = level_total / (total * len(ALL_ACTIONS)) if total else 0.0

    if average < 0.25:
        level = "low"
    elif average < 0.5:
        level = "medium"
    elif average < 0.8:
        level = "high"
    else:
        level = "complete"

    return PermissionSummary(
        total_modules=total,
        accessible_modules=sum(1 for p in entries.values() if p.view),
        editable_modules=sum(1 for p in entries.values() if p.edit),
        admin_modules=sum(1 for p in entries.values() if p.administer),
        permission_level=level,
    )


def format_permissions_for_display(
    permissions: PermissionSet,
) -> list[dict[str, Any]]:
    """Format permissions for UI display, one entry per module."""
    result = []
    for module, permission in as_module_permissions(permissions).items():
        description = MODULE_DESCRIPTIONS.get(module)
        result.append({
            "module": module.value,
            "module_name": description.name if description else module.value,
            "permissions": [
                {
                    "action": action.value,
                    "action_name": ACTION_NAMES[action],
                    "has_permission": permission.allows(action),
                }
                for action in ALL_ACTIONS
            ],
        })
    return result


# ---------------------------------------------------------------------------
# Role defaults
# ---------------------------------------------------------------------------


def get_default_permissions_for_role(
    manager: PermissionPresetManager,
    role: BarRole | str,
) -> ModulePermissions:
    """Return the default permissions of a role."""
    return manager.get_default_permissions(role)


def is_default_permission_set(
    manager: PermissionPresetManager,
    permissions: PermissionSet,
    role: BarRole | str,
) -> bool:
    """True if the set matches the role default exactly."""
    defaults = manager.get_default_permissions(role)
    entries = as_module_permissions(permissions)
    if entries.keys() != defaults.keys():
        return False
    return all(
        entries[module].model_dump() == defaults[module].model_dump()
        for module in defaults
    )
