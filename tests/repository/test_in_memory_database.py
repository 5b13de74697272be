"""
Tests for the in-memory tables backing the in-memory repositories.

This module tests:
1. Key generation (floor, explicit keys, atomicity under threads)
2. Unique column enforcement
3. Copy semantics of reads and writes
"""

from concurrent.futures import ThreadPoolExecutor

import pytest

from crudkit.exceptions import DatabaseError, EntityAlreadyExistsError
from crudkit.repository.memory import InMemoryDatabase, InMemoryTable, TableSpec


class TestInMemoryTable:
    @pytest.fixture
    def table(self) -> InMemoryTable:
        return InMemoryTable(
            "things",
            TableSpec(key_column="key", unique_columns=("name",)),
            first_generated_key=1000,
        )

    # ==================== Key generation ====================

    def test_generated_keys_start_at_floor(self, table: InMemoryTable) -> None:
        assert table.insert({"name": "a"}) == 1000
        assert table.insert({"name": "b"}) == 1001

    def test_explicit_keys_do_not_move_generator(self, table: InMemoryTable) -> None:
        """Seed rows inserted with explicit keys leave the generator untouched."""
        table.insert({"name": "seed"}, key=1)

        assert table.insert({"name": "generated"}) == 1000
        assert table.get(1) == {"name": "seed", "key": 1}

    def test_explicit_duplicate_key_is_rejected(self, table: InMemoryTable) -> None:
        table.insert({"name": "seed"}, key=1)

        with pytest.raises(EntityAlreadyExistsError, match="key '1'"):
            table.insert({"name": "other"}, key=1)

    def test_concurrent_inserts_get_unique_keys(self, table: InMemoryTable) -> None:
        with ThreadPoolExecutor(max_workers=8) as executor:
            keys = list(executor.map(lambda i: table.insert({"name": f"n{i}"}), range(200)))

        assert sorted(keys) == list(range(1000, 1200))

    # ==================== Unique columns ====================

    def test_duplicate_unique_value_is_rejected(self, table: InMemoryTable) -> None:
        table.insert({"name": "a"})

        with pytest.raises(EntityAlreadyExistsError, match="name 'a'"):
            table.insert({"name": "a"})
        assert len(table) == 1

    def test_update_to_taken_value_is_rejected(self, table: InMemoryTable) -> None:
        table.insert({"name": "a"})
        key = table.insert({"name": "b"})

        with pytest.raises(EntityAlreadyExistsError):
            table.update(key, {"name": "a"})
        assert table.get(key) == {"name": "b", "key": key}

    def test_update_keeping_own_value_is_allowed(self, table: InMemoryTable) -> None:
        key = table.insert({"name": "a", "flag": False})

        assert table.update(key, {"name": "a", "flag": True})
        assert table.get(key) == {"name": "a", "flag": True, "key": key}

    def test_insert_many_is_atomic(self, table: InMemoryTable) -> None:
        """A batch with an internal duplicate inserts nothing."""
        with pytest.raises(EntityAlreadyExistsError):
            table.insert_many([{"name": "x"}, {"name": "y"}, {"name": "x"}])

        assert len(table) == 0
        assert table.insert({"name": "z"}) == 1000

    # ==================== Reads and deletes ====================

    def test_reads_return_copies(self, table: InMemoryTable) -> None:
        key = table.insert({"name": "a"})

        table.get(key)["name"] = "changed"  # type: ignore[index]
        table.select()[0]["name"] = "changed"

        assert table.get(key) == {"name": "a", "key": key}

    def test_select_filters_in_key_order(self, table: InMemoryTable) -> None:
        table.insert({"name": "late"}, key=5)
        table.insert({"name": "early"}, key=2)
        table.insert({"name": "skip"}, key=3)

        rows = table.select(lambda row: row["name"] != "skip")

        assert [row["key"] for row in rows] == [2, 5]

    def test_missing_keys_report_false(self, table: InMemoryTable) -> None:
        assert table.get(42) is None
        assert table.update(42, {"name": "a"}) is False
        assert table.delete(42) is False


class TestInMemoryDatabase:
    def test_seeded_holds_the_seed_classifications(self) -> None:
        rows = InMemoryDatabase.seeded().table("employee_classification").select()

        assert [
            (r["employee_classification_key"], r["employee_classification_name"]) for r in rows
        ] == [(1, "Exempt"), (2, "Non-Exempt"), (3, "Contractor")]

    def test_seeded_employee_table_is_empty(self) -> None:
        assert len(InMemoryDatabase.seeded().table("employee")) == 0

    def test_unknown_table_raises(self) -> None:
        with pytest.raises(DatabaseError, match="Table departments does not exist"):
            InMemoryDatabase().table("departments")
