# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Tests for custom preset storage backends."""

from datetime import UTC, datetime

import pytest

from src.database import create_db_engine, create_session_factory
from src.models.enums import BarRole, SystemModule
from src.models.permission_preset import PermissionPresetModel
from src.rbac.permissions import FULL_PERMISSION, READ_ONLY_PERMISSION
from src.schemas.permissions import PermissionPreset
from src.services.permission_preset_service import PermissionPresetManager
from src.services.preset_store import InMemoryPresetStore, SqlAlchemyPresetStore


def make_preset(preset_id: str = "custom_abc", name: str = "Night Shift") -> PermissionPreset:
    now = datetime.now(UTC)
    return PermissionPreset(
        id=preset_id,
        name=name,
        description="Late shift bartender",
        role=BarRole.BARTENDER,
        permissions={
            SystemModule.DASHBOARD: READ_ONLY_PERMISSION,
            SystemModule.BAR_MONITOR: FULL_PERMISSION,
        },
        is_default=False,
        is_customizable=True,
        created_at=now,
        updated_at=now,
    )


@pytest.fixture
def session_factory(tmp_path):
    """Create a session factory backed by a temporary SQLite database."""
    engine = create_db_engine(f"sqlite:///{tmp_path}/presets.db")
    yield create_session_factory(engine)
    engine.dispose()


class TestInMemoryPresetStore:
    """Tests for the in-memory store."""

    def test_starts_empty(self):
        """Test that a new store is empty."""
        assert InMemoryPresetStore().load_all() == []

    def test_save_and_load(self):
        """Test saving and loading a preset."""
        store = InMemoryPresetStore()
        preset = make_preset()
        store.save(preset)
        assert store.load_all() == [preset]

    def test_save_replaces(self):
        """Test that saving an existing ID replaces it."""
        store = InMemoryPresetStore()
        store.save(make_preset())
        store.save(make_preset(name="Renamed"))
        presets = store.load_all()
        assert len(presets) == 1
        assert presets[0].name == "Renamed"

    def test_delete(self):
        """Test deleting a preset."""
        store = InMemoryPresetStore()
        store.save(make_preset())
        assert store.delete("custom_abc") is True
        assert store.delete("custom_abc") is False
        assert store.load_all() == []


class TestSqlAlchemyPresetStore:
    """Tests for the database backed store."""

    def test_save_and_load(self, session_factory):
        """Test saving and loading a preset."""
        store = SqlAlchemyPresetStore(session_factory)
        store.save(make_preset())

        presets = store.load_all()
        assert len(presets) == 1
        loaded = presets[0]
        assert loaded.id == "custom_abc"
        assert loaded.name == "Night Shift"
        assert loaded.role == BarRole.BARTENDER
        assert loaded.permissions[SystemModule.BAR_MONITOR] == FULL_PERMISSION
        assert loaded.is_default is False
        assert loaded.is_customizable is True

    def test_save_updates_existing_row(self, session_factory):
        """Test that saving an existing ID updates the row."""
        store = SqlAlchemyPresetStore(session_factory)
        store.save(make_preset())
        store.save(make_preset(name="Renamed"))

        presets = store.load_all()
        assert [p.name for p in presets] == ["Renamed"]

    def test_delete(self, session_factory):
        """Test deleting a preset."""
        store = SqlAlchemyPresetStore(session_factory)
        store.save(make_preset())
        assert store.delete("custom_abc") is True
        assert store.delete("custom_abc") is False
        assert store.load_all() == []

    def test_invalid_rows_are_skipped(self, session_factory):
        """Test that rows with invalid data are skipped."""
        db = session_factory()
        db.add(
            PermissionPresetModel(
                id="custom_broken",
                name="Broken",
                role="dj",
                permissions={},
                is_customizable=True,
            )
        )
        db.commit()
        db.close()

        store = SqlAlchemyPresetStore(session_factory)
        store.save(make_preset())
        assert [p.id for p in store.load_all()] == ["custom_abc"]

    def test_manager_reloads_presets(self, session_factory):
        """Test that a new manager loads stored presets."""
        manager = PermissionPresetManager(store=SqlAlchemyPresetStore(session_factory))
        preset = manager.create_custom_preset(
            "Closing Cashier", "", "cashier", {"reports": {"view": True}}
        )

        reloaded = PermissionPresetManager(store=SqlAlchemyPresetStore(session_factory))
        stored = reloaded.get_preset_by_id(preset.id)
        assert stored is not None
        assert stored.name == "Closing Cashier"
        assert stored.permissions == preset.permissions

    def test_reloaded_and_new_presets_list_together(self, session_factory):
        """Test listing loaded and new presets together."""
        manager = PermissionPresetManager(store=SqlAlchemyPresetStore(session_factory))
        first = manager.create_custom_preset("First", "", "cook", {})

        reloaded = PermissionPresetManager(store=SqlAlchemyPresetStore(session_factory))
        second = reloaded.create_custom_preset("Second", "", "cook", {})
        custom_ids = [p.id for p in reloaded.get_all_presets() if not p.is_default]
        assert custom_ids == [first.id, second.id]

    def test_manager_delete_removes_row(self, session_factory):
        """Test that deleting through the manager removes the row."""
        manager = PermissionPresetManager(store=SqlAlchemyPresetStore(session_factory))
        preset = manager.create_custom_preset("A", "", "cook", {})
        manager.delete_custom_preset(preset.id)

        reloaded = PermissionPresetManager(store=SqlAlchemyPresetStore(session_factory))
        assert reloaded.get_preset_by_id(preset.id) is None
