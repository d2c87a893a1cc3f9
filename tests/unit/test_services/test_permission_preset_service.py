# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Tests for the permission preset manager."""

import pytest
from pydantic import ValidationError

from src.models.enums import BarRole, PermissionAction, SystemModule
from src.rbac.permissions import (
    FULL_PERMISSION,
    READ_ONLY_PERMISSION,
    ModulePermission,
)
from src.schemas.permissions import PresetUpdateSchema
from src.services.permission_preset_service import (
    CUSTOM_PRESET_PREFIX,
    PermissionPresetManager,
    UnknownRoleError,
)


class TestRoleConfiguration:
    """Tests for role default lookups."""

    def test_default_permissions_for_manager(self, manager):
        """Test the manager's default permissions."""
        permissions = manager.get_default_permissions(BarRole.MANAGER)
        assert permissions[SystemModule.EMPLOYEES] == FULL_PERMISSION

    def test_default_permissions_accept_strings(self, manager):
        """Test looking up defaults by role name."""
        assert manager.get_default_permissions("waiter") == manager.get_default_permissions(
            BarRole.WAITER
        )

    def test_default_permissions_are_a_copy(self, manager):
        """Test that returned defaults are a copy."""
        permissions = manager.get_default_permissions(BarRole.WAITER)
        permissions[SystemModule.FINANCE] = FULL_PERMISSION
        assert SystemModule.FINANCE not in manager.get_default_permissions(BarRole.WAITER)

    def test_unknown_role_raises(self, manager):
        """Test that an unknown role raises UnknownRoleError."""
        with pytest.raises(UnknownRoleError) as exc_info:
            manager.get_default_permissions("nonexistent-role")
        assert exc_info.value.role == "nonexistent-role"

    def test_unknown_role_is_lookup_error(self, manager):
        """Test that UnknownRoleError is a LookupError."""
        with pytest.raises(LookupError):
            manager.get_role_config("nonexistent-role")

    def test_all_role_configs(self, manager):
        """Test listing every role configuration."""
        assert set(manager.get_all_role_configs()) == set(BarRole)

    def test_is_known_role(self, manager):
        """Test checking whether a role is configured."""
        assert manager.is_known_role("cook") is True
        assert manager.is_known_role("dj") is False


class TestCanManageRole:
    """Tests for the role management relation."""

    @pytest.mark.parametrize(
        "target", [BarRole.CASHIER, BarRole.WAITER, BarRole.COOK, BarRole.BARTENDER]
    )
    def test_manager_manages_staff(self, manager, target):
        """Test that the manager manages staff roles."""
        assert manager.can_manage_role(BarRole.MANAGER, target) is True

    def test_manager_does_not_manage_itself(self, manager):
        """Test that the manager does not manage its own role."""
        assert manager.can_manage_role(BarRole.MANAGER, BarRole.MANAGER) is False

    def test_staff_does_not_manage_manager(self, manager):
        """Test that staff cannot manage the manager."""
        assert manager.can_manage_role(BarRole.WAITER, BarRole.MANAGER) is False

    def test_bartender_manages_nobody(self, manager):
        """Test that the bartender manages no role."""
        assert manager.can_manage_role(BarRole.BARTENDER, BarRole.WAITER) is False

    def test_unknown_roles_never_manage(self, manager):
        """Test that unknown roles are never in the relation."""
        assert manager.can_manage_role("nonexistent-role", BarRole.WAITER) is False
        assert manager.can_manage_role(BarRole.MANAGER, "nonexistent-role") is False


class TestValidatePermission:
    """Tests for single permission validation against role defaults."""

    def test_granted(self, manager):
        """Test a permission the role has."""
        result = manager.validate_permission(
            BarRole.WAITER, SystemModule.BAR_SERVICE, PermissionAction.EDIT
        )
        assert result.is_valid is True
        assert result.has_access is True
        assert result.missing_permissions == []

    def test_configured_but_denied(self, manager):
        """Test a configured module lacking the action."""
        result = manager.validate_permission(
            BarRole.WAITER, SystemModule.MENU, PermissionAction.EDIT
        )
        assert result.is_valid is True
        assert result.has_access is False
        assert len(result.missing_permissions) == 1
        assert result.missing_permissions[0].module == SystemModule.MENU
        assert result.missing_permissions[0].action == PermissionAction.EDIT

    def test_unconfigured_module(self, manager):
        """Test a module missing from the role defaults."""
        result = manager.validate_permission("waiter", "finance", "view")
        assert result.is_valid is True
        assert result.has_access is False
        assert len(result.missing_permissions) == 1
        assert result.warnings

    def test_unknown_role(self, manager):
        """Test validation with an unknown role."""
        result = manager.validate_permission("nonexistent-role", "dashboard", "view")
        assert result.is_valid is False
        assert result.has_access is False
        assert result.errors == ["Unknown role: nonexistent-role"]


class TestUserPermissionContext:
    """Tests for resolved user contexts."""

    def test_role_defaults(self, manager):
        """Test a context built from role defaults."""
        context = manager.create_user_permission_context("emp-1", BarRole.COOK)
        assert context.user_id == "emp-1"
        assert context.role == BarRole.COOK
        assert context.effective_permissions == context.permissions
        assert context.can_access(SystemModule.KITCHEN_MONITOR, PermissionAction.DELETE)
        assert not context.can_access(SystemModule.FINANCE, PermissionAction.VIEW)

    def test_custom_permissions_replace_defaults(self, manager):
        """Test that custom permissions replace the defaults."""
        context = manager.create_user_permission_context(
            "emp-2",
            "waiter",
            {"finance": {"view": True}},
        )
        assert context.can_access("finance", "view") is True
        # Default modules are not carried over
        assert context.can_access("bar_service", "view") is False
        assert SystemModule.BAR_SERVICE in context.permissions

    def test_can_manage(self, manager):
        """Test the bound manage check."""
        context = manager.create_user_permission_context("mgr", "manager")
        assert context.can_manage("waiter") is True
        assert context.can_manage("manager") is False

    def test_unknown_role_raises(self, manager):
        """Test that an unknown role raises UnknownRoleError."""
        with pytest.raises(UnknownRoleError):
            manager.create_user_permission_context("emp-3", "nonexistent-role")


class TestBuiltInPresets:
    """Tests for presets derived from role defaults."""

    def test_all_presets_start_with_roles(self, manager):
        """Test that built-in presets are listed first."""
        presets = manager.get_all_presets()
        assert [p.id for p in presets] == [role.value for role in BarRole]
        assert all(p.is_default and not p.is_customizable for p in presets)

    def test_get_built_in_preset(self, manager):
        """Test getting a built-in preset."""
        preset = manager.get_preset_by_id("manager")
        assert preset.role == BarRole.MANAGER
        assert preset.permissions == manager.get_default_permissions(BarRole.MANAGER)

    def test_unknown_preset(self, manager):
        """Test getting a preset that does not exist."""
        assert manager.get_preset_by_id("custom_missing") is None

    def test_built_in_preset_cannot_be_updated(self, manager):
        """Test that built-in presets cannot be updated."""
        assert manager.update_custom_preset("manager", {"name": "Boss"}) is None
        assert manager.get_role_config("manager").display_name == "Manager"
        assert manager.get_preset_by_id("manager").name == "Manager"

    def test_built_in_preset_cannot_be_deleted(self, manager):
        """Test that built-in presets cannot be deleted."""
        assert manager.delete_custom_preset("manager") is False
        assert manager.get_preset_by_id("manager") is not None


class TestCustomPresets:
    """Tests for the custom preset lifecycle."""

    def test_create(self, manager):
        """Test creating a custom preset."""
        preset = manager.create_custom_preset(
            "Senior Waiter",
            "Waiter who also edits the menu",
            BarRole.WAITER,
            {SystemModule.MENU: {"edit": True}},
        )
        assert preset.id.startswith(CUSTOM_PRESET_PREFIX)
        assert preset.is_default is False
        assert preset.is_customizable is True
        assert preset.role == BarRole.WAITER
        # Override merged and normalized
        assert preset.permissions[SystemModule.MENU] == ModulePermission(
            view=True, edit=True
        )
        # Untouched defaults kept
        assert (
            preset.permissions[SystemModule.DASHBOARD] == READ_ONLY_PERMISSION
        )

    def test_create_normalizes_new_module(self, manager):
        """Test that new modules in overrides are normalized."""
        preset = manager.create_custom_preset(
            "Cashier with reports", "", "cashier", {"reports": {"create": True}}
        )
        assert preset.permissions[SystemModule.REPORTS].view is True

    def test_create_unknown_role_raises(self, manager):
        """Test creating a preset from an unknown role."""
        with pytest.raises(UnknownRoleError):
            manager.create_custom_preset("x", "", "nonexistent-role", {})

    def test_ids_are_unique(self, manager):
        """Test that every preset gets a new ID."""
        first = manager.create_custom_preset("A", "", "cook", {})
        second = manager.create_custom_preset("A", "", "cook", {})
        assert first.id != second.id

    def test_listed_after_built_ins(self, manager):
        """Test that custom presets are listed after built-ins."""
        preset = manager.create_custom_preset("A", "", "cook", {})
        presets = manager.get_all_presets()
        assert len(presets) == len(BarRole) + 1
        assert presets[-1].id == preset.id

    def test_update(self, manager):
        """Test updating name and description."""
        preset = manager.create_custom_preset("A", "", "cook", {})
        updated = manager.update_custom_preset(
            preset.id, PresetUpdateSchema(name="B", description="renamed")
        )
        assert updated.name == "B"
        assert updated.description == "renamed"
        assert updated.role == BarRole.COOK
        assert updated.updated_at >= preset.updated_at
        assert manager.get_preset_by_id(preset.id).name == "B"

    def test_update_permissions_are_sanitized(self, manager):
        """Test that updated permissions are sanitized."""
        preset = manager.create_custom_preset("A", "", "cook", {})
        updated = manager.update_custom_preset(
            preset.id, {"permissions": {"finance": {"administer": True}}}
        )
        assert updated.permissions == {
            SystemModule.FINANCE: ModulePermission(view=True, administer=True)
        }

    def test_update_ignores_identity_fields(self, manager):
        """Test that ID, role and flags cannot be updated."""
        preset = manager.create_custom_preset("A", "", "cook", {})
        updated = manager.update_custom_preset(
            preset.id, {"id": "other", "role": "manager", "is_default": True}
        )
        assert updated.id == preset.id
        assert updated.role == BarRole.COOK
        assert updated.is_default is False

    @pytest.mark.parametrize(
        "updates", [{"name": ""}, {"description": 42}, {"permissions": {"bar": {}}}]
    )
    def test_update_rejects_invalid_fields(self, manager, updates):
        """Test that raw updates are held to the update schema."""
        preset = manager.create_custom_preset("A", "", "cook", {})
        with pytest.raises(ValidationError):
            manager.update_custom_preset(preset.id, updates)
        stored = manager.get_preset_by_id(preset.id)
        assert stored.name == "A"
        assert stored.description == ""

    def test_update_unknown(self, manager):
        """Test updating a preset that does not exist."""
        assert manager.update_custom_preset("custom_missing", {"name": "B"}) is None

    def test_delete(self, manager):
        """Test deleting a preset."""
        preset = manager.create_custom_preset("A", "", "cook", {})
        assert manager.delete_custom_preset(preset.id) is True
        assert manager.get_preset_by_id(preset.id) is None
        assert manager.delete_custom_preset(preset.id) is False

    def test_returned_preset_is_detached(self, manager):
        """Test that returned presets do not share state."""
        preset = manager.create_custom_preset("A", "", "cook", {})
        preset.permissions[SystemModule.FINANCE] = FULL_PERMISSION
        stored = manager.get_preset_by_id(preset.id)
        assert SystemModule.FINANCE not in stored.permissions


class TestRoleQueries:
    """Tests for hierarchy, required modules and manageable roles."""

    def test_hierarchy(self, manager):
        """Test hierarchy ranks."""
        assert manager.get_role_hierarchy(BarRole.MANAGER) == 5
        assert manager.get_role_hierarchy(BarRole.BARTENDER) == 3
        assert manager.get_role_hierarchy(BarRole.WAITER) == 2
        assert manager.get_role_hierarchy("nonexistent-role") == 0

    def test_required_modules(self, manager):
        """Test the required modules of a role."""
        modules = manager.get_required_modules_for_role(BarRole.COOK)
        assert SystemModule.DASHBOARD in modules
        assert SystemModule.KITCHEN_MONITOR in modules
        assert SystemModule.FINANCE not in modules

    def test_required_modules_unknown_role(self, manager):
        """Test required modules of an unknown role."""
        assert manager.get_required_modules_for_role("nonexistent-role") == []

    def test_manageable_roles(self, manager):
        """Test listing manageable roles."""
        assert manager.get_manageable_roles(BarRole.MANAGER) == [
            BarRole.CASHIER,
            BarRole.WAITER,
            BarRole.COOK,
            BarRole.BARTENDER,
        ]
        assert manager.get_manageable_roles(BarRole.COOK) == []
        assert manager.get_manageable_roles("nonexistent-role") == []

    def test_independent_instances(self):
        """Test that managers do not share presets."""
        first = PermissionPresetManager()
        second = PermissionPresetManager()
        first.create_custom_preset("A", "", "cook", {})
        assert len(second.get_all_presets()) == len(BarRole)
