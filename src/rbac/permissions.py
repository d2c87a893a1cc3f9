# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Module permission value type and the named permission constants."""

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator

from src.models.enums import PermissionAction, SystemModule

# Actions that cannot be granted without also granting view
VIEW_IMPLYING_ACTIONS: tuple[PermissionAction, ...] = (
    PermissionAction.CREATE,
    PermissionAction.EDIT,
    PermissionAction.DELETE,
    PermissionAction.ADMINISTER,
)

ALL_ACTIONS: tuple[PermissionAction, ...] = tuple(PermissionAction)


class ModulePermission(BaseModel):
    """Capabilities granted on a single module.

    Regular construction always yields a consistent record: any of create,
    edit, delete or administer switches view on. Use ``unchecked`` to
    represent a record as it arrived from an untrusted source.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    view: bool = False
    create: bool = False
    edit: bool = False
    delete: bool = False
    administer: bool = False

    @model_validator(mode="before")
    @classmethod
    def _grant_implied_view(cls, data: Any) -> Any:
        if isinstance(data, Mapping) and any(
            data.get(action.value) for action in VIEW_IMPLYING_ACTIONS
        ):
            return {**data, "view": True}
        return data

    @classmethod
    def unchecked(cls, **flags: bool) -> "ModulePermission":
        """Build a record without normalization (may violate the view rule)."""
        return cls.model_construct(**flags)

    @classmethod
    def coerce(
        cls, entry: "ModulePermission | Mapping[str, Any]"
    ) -> "ModulePermission":
        """Turn a raw mapping into an unchecked record; records pass through."""
        if isinstance(entry, ModulePermission):
            return entry
        flags = {action.value: False for action in ALL_ACTIONS}
        for action, granted in entry.items():
            flags[PermissionAction(action).value] = bool(granted)
        return cls.unchecked(**flags)

    def allows(self, action: PermissionAction | str) -> bool:
        """Return whether the given action is granted."""
        return bool(getattr(self, PermissionAction(action).value))

    @property
    def is_consistent(self) -> bool:
        """True unless an action is granted while view is not."""
        return self.view or not any(
            self.allows(action) for action in VIEW_IMPLYING_ACTIONS
        )

    def with_flags(self, **flags: bool) -> "ModulePermission":
        """Return a normalized copy with the given flags replaced."""
        return ModulePermission(**{**self.model_dump(), **flags})


ModulePermissions = dict[SystemModule, ModulePermission]

EMPTY_PERMISSION = ModulePermission()

READ_ONLY_PERMISSION = ModulePermission(view=True)

READ_WRITE_PERMISSION = ModulePermission(view=True, create=True, edit=True)

# Day-to-day operation of a module, including removing records, but not its
# administration
OPERATIONAL_PERMISSION = ModulePermission(
    view=True, create=True, edit=True, delete=True
)

FULL_PERMISSION = ModulePermission(
    view=True, create=True, edit=True, delete=True, administer=True
)
