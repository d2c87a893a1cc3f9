# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Storage backends for custom permission presets."""

import logging
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Protocol

from sqlalchemy.orm import Session

from src.models.enums import BarRole, SystemModule
from src.models.permission_preset import PermissionPresetModel
from src.rbac.permissions import ModulePermission
from src.schemas.permissions import PermissionPreset

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    # SQLite drops the offset of timezone-aware columns
    return value if value.tzinfo is not None else value.replace(tzinfo=UTC)


class PresetStore(Protocol):
    """Persistence collaborator for custom presets."""

    def load_all(self) -> list[PermissionPreset]:
        """Return every stored preset."""
        ...

    def save(self, preset: PermissionPreset) -> None:
        """Insert or replace a preset."""
        ...

    def delete(self, preset_id: str) -> bool:
        """Remove a preset. Returns False if it was not stored."""
        ...


class InMemoryPresetStore:
    """Keeps presets for the lifetime of the process only."""

    def __init__(self) -> None:
        self._presets: dict[str, PermissionPreset] = {}

    def load_all(self) -> list[PermissionPreset]:
        return list(self._presets.values())

    def save(self, preset: PermissionPreset) -> None:
        self._presets[preset.id] = preset

    def delete(self, preset_id: str) -> bool:
        return self._presets.pop(preset_id, None) is not None


class SqlAlchemyPresetStore:
    """Stores presets in the ``permission_presets`` table."""

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        """Initialize the store.

        Args:
            session_factory: Callable returning a new database session
        """
        self._session_factory = session_factory

    def load_all(self) -> list[PermissionPreset]:
        db = self._session_factory()
        try:
            rows = (
                db.query(PermissionPresetModel)
                .order_by(PermissionPresetModel.created_at)
                .all()
            )
            presets = []
            for row in rows:
                preset = self._to_preset(row)
                if preset is not None:
                    presets.append(preset)
            return presets
        finally:
            db.close()

    def save(self, preset: PermissionPreset) -> None:
        db = self._session_factory()
        try:
            row = db.get(PermissionPresetModel, preset.id)
            if row is None:
                row = PermissionPresetModel(id=preset.id, created_at=preset.created_at)
                db.add(row)
            row.name = preset.name
            row.description = preset.description
            row.role = preset.role.value
            row.permissions = {
                module.value: permission.model_dump()
                for module, permission in preset.permissions.items()
            }
            row.is_customizable = preset.is_customizable
            row.updated_at = preset.updated_at
            db.commit()
        finally:
            db.close()

    def delete(self, preset_id: str) -> bool:
        db = self._session_factory()
        try:
            row = db.get(PermissionPresetModel, preset_id)
            if row is None:
                return False
            db.delete(row)
            db.commit()
            return True
        finally:
            db.close()

    @staticmethod
    def _to_preset(row: PermissionPresetModel) -> PermissionPreset | None:
        try:
            role = BarRole(row.role)
            permissions = {
                SystemModule(module): ModulePermission(**flags)
                for module, flags in (row.permissions or {}).items()
            }
        except ValueError as e:
            logger.warning(f"Skipping stored preset {row.id} with invalid data: {e}")
            return None

        return PermissionPreset(
            id=row.id,
            name=row.name,
            description=row.description or "",
            role=role,
            permissions=permissions,
            is_default=False,
            is_customizable=row.is_customizable,
            created_at=_as_utc(row.created_at),
            updated_at=_as_utc(row.updated_at),
        )
