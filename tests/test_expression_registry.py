"""Tests for ExpressionRegistry - SQLite persistent storage for named expressions."""

import os
import sqlite3
from pathlib import Path
from unittest.mock import patch

import pytest

from cronops.infra import metrics
from cronops.registry import (
    PRESETS,
    SCHEMA_VERSION,
    ExpressionNotFoundError,
    ExpressionRecord,
    ExpressionRegistry,
    close_registry,
    get_registry,
    init_registry,
)


class TestExpressionRegistryInit:
    """Test ExpressionRegistry initialization."""

    def test_init_creates_db_file(self, tmp_path):
        """Test that initialization creates the database file."""
        db_path = str(tmp_path / "test_registry.db")
        registry = ExpressionRegistry(db_path=db_path)

        assert Path(db_path).exists()
        registry.close()

    def test_init_creates_parent_directory(self, tmp_path):
        """Test that initialization creates parent directories if needed."""
        nested_path = tmp_path / "nested" / "dir" / "test.db"
        registry = ExpressionRegistry(db_path=str(nested_path))

        assert nested_path.exists()
        registry.close()

    def test_init_uses_env_var_for_db_path(self, tmp_path):
        """Test that DB path can be set via environment variable."""
        env_db_path = str(tmp_path / "env_registry.db")

        with patch.dict(os.environ, {"CRONOPS_DB_PATH": env_db_path}):
            registry = ExpressionRegistry()
            assert registry.db_path == env_db_path
            registry.close()

    def test_schema_version_is_set(self, tmp_path):
        """Test that schema version is recorded in meta table."""
        db_path = str(tmp_path / "test.db")
        registry = ExpressionRegistry(db_path=db_path)

        conn = sqlite3.connect(db_path)
        cursor = conn.cursor()
        cursor.execute("SELECT value FROM meta WHERE key = 'schema_version'")
        row = cursor.fetchone()
        conn.close()

        assert row is not None
        assert row[0] == SCHEMA_VERSION
        registry.close()

    def test_connection_failure_is_counted_and_raised(self, tmp_path):
        """A failed connect increments db_connection_errors_total and propagates."""
        with patch(
            "cronops.registry.expression_registry.sqlite3.connect",
            side_effect=sqlite3.OperationalError("unable to open database file"),
        ):
            with pytest.raises(sqlite3.OperationalError):
                ExpressionRegistry(db_path=str(tmp_path / "unreachable.db"))

        assert metrics.db_connection_errors_total.get() == 1
        assert "db_connection_errors_total 1.0" in metrics.REGISTRY.export()

    def test_successful_connection_is_not_counted(self, registry):
        assert metrics.db_connection_errors_total.get() == 0

    def test_unseeded_registry_is_empty(self, registry):
        assert registry.count() == 0
        assert registry.list_all() == []

    def test_seed_presets_on_new_database(self, tmp_path):
        registry = ExpressionRegistry(db_path=str(tmp_path / "seeded.db"), seed_presets=True)

        assert registry.count() == len(PRESETS)
        assert {r.expression for r in registry.list_all()} == {p[1] for p in PRESETS}
        registry.close()

    def test_presets_are_not_reseeded_on_reopen(self, tmp_path):
        db_path = str(tmp_path / "seeded.db")
        ExpressionRegistry(db_path=db_path, seed_presets=True).close()

        registry = ExpressionRegistry(db_path=db_path, seed_presets=True)

        assert registry.count() == len(PRESETS)
        registry.close()


class TestExpressionRegistryCrud:
    """Tests for create/get/list/update/delete."""

    def test_create_assigns_id_and_timestamps(self, registry):
        record = registry.create("Nightly", "0 0 * * *", "Backups")

        assert isinstance(record, ExpressionRecord)
        assert record.id > 0
        assert record.name == "Nightly"
        assert record.expression == "0 0 * * *"
        assert record.description == "Backups"
        assert record.created_at == record.updated_at

    def test_create_defaults_description(self, registry):
        assert registry.create("Hourly", "0 * * * *").description == ""

    def test_ids_are_unique(self, registry):
        first = registry.create("a", "* * * * *")
        second = registry.create("b", "* * * * *")

        assert first.id != second.id

    def test_get(self, registry):
        created = registry.create("Nightly", "0 0 * * *")

        assert registry.get(created.id) == created

    def test_get_unknown_raises(self, registry):
        with pytest.raises(ExpressionNotFoundError) as exc_info:
            registry.get(999)

        assert exc_info.value.expression_id == 999

    def test_list_newest_first(self, registry):
        first = registry.create("first", "* * * * *")
        second = registry.create("second", "0 * * * *")

        assert [r.id for r in registry.list_all()] == [second.id, first.id]

    def test_update_replaces_fields(self, registry):
        created = registry.create("Nightly", "0 0 * * *", "old")

        updated = registry.update(created.id, "Weekly", "0 0 * * 0", "new")

        assert updated.id == created.id
        assert updated.name == "Weekly"
        assert updated.expression == "0 0 * * 0"
        assert updated.description == "new"
        assert updated.created_at == created.created_at
        assert updated.updated_at >= created.updated_at
        assert registry.get(created.id) == updated

    def test_update_unknown_raises(self, registry):
        with pytest.raises(ExpressionNotFoundError):
            registry.update(999, "x", "* * * * *")

    def test_delete(self, registry):
        created = registry.create("Nightly", "0 0 * * *")

        registry.delete(created.id)

        assert registry.count() == 0
        with pytest.raises(ExpressionNotFoundError):
            registry.get(created.id)

    def test_delete_unknown_raises(self, registry):
        with pytest.raises(ExpressionNotFoundError):
            registry.delete(999)

    def test_persists_across_instances(self, tmp_path):
        db_path = str(tmp_path / "persist.db")
        registry = ExpressionRegistry(db_path=db_path)
        created = registry.create("Nightly", "0 0 * * *")
        registry.close()

        reopened = ExpressionRegistry(db_path=db_path)

        assert reopened.get(created.id).name == "Nightly"
        reopened.close()

    def test_to_dict(self, registry):
        record = registry.create("Nightly", "0 0 * * *")

        data = record.to_dict()

        assert set(data) == {"id", "name", "expression", "description", "created_at", "updated_at"}


class TestModuleFunctions:
    """Tests for the module-level registry singleton."""

    def test_init_get_close(self, tmp_path):
        registry = init_registry(db_path=str(tmp_path / "global.db"))

        assert get_registry() is registry

        close_registry()

    def test_get_registry_creates_from_settings(self, tmp_path):
        close_registry()
        db_path = str(tmp_path / "lazy.db")

        with patch.dict(os.environ, {"CRONOPS_DB_PATH": db_path}):
            registry = get_registry()
            assert registry.db_path == db_path

        close_registry()
