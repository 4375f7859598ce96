"""Tests for storage backends and the persistent document store."""

import json
from datetime import datetime, timezone

import pytest

from notebk.models import AppState, AuditEventType
from notebk.services.storage import (
    FileStorage,
    InvalidKeyError,
    MemoryStorage,
    StateStore,
    StorageReadError,
    StorageWriteError,
    default_state,
)
from notebk.state import mutators


FIXED_NOW = datetime(2024, 5, 17, 10, 30, 0, tzinfo=timezone.utc)


class UnreadableStorage(MemoryStorage):
    def read(self, key):
        raise StorageReadError("disk on fire")


class ReadOnlyStorage(MemoryStorage):
    def write(self, key, text):
        raise StorageWriteError("quota exceeded")


def event_types(audit_logger):
    return [event.event_type for event in audit_logger.events]


class TestLoad:
    """Tests for reading the stored document."""

    def test_empty_slot_gives_default(self, store, audit_logger):
        """Test an absent slot loads as the empty document."""
        state = store.load()
        assert state == default_state()
        assert state.to_document()["monthlyNotes"] == {}
        assert AuditEventType.STATE_DEFAULTED in event_types(audit_logger)

    def test_invalid_json_gives_default(self, memory_backend, store, audit_logger):
        """Test a corrupt blob falls back to the empty document."""
        memory_backend.write("notebk_data", "{not json")
        assert store.load() == default_state()
        assert AuditEventType.STATE_CORRUPT in event_types(audit_logger)

    def test_wrong_shape_gives_default(self, memory_backend, store):
        """Test valid JSON with the wrong shape falls back too."""
        memory_backend.write("notebk_data", json.dumps({"notes": ["not", "a", "map"]}))
        assert store.load() == default_state()

    def test_json_that_is_not_an_object_gives_default(self, memory_backend, store, audit_logger):
        """Test a JSON array is treated like unparseable text."""
        memory_backend.write("notebk_data", "[1, 2]")
        assert store.load() == default_state()
        assert AuditEventType.STATE_CORRUPT in event_types(audit_logger)

    def test_non_numeric_amount_keeps_document(self, memory_backend, store):
        """Test one odd amount does not throw away the rest of the document."""
        memory_backend.write("notebk_data", json.dumps({
            "notes": {"2024-05-01": "querido diario"},
            "expenses": {"2024-05": [{"id": "e1", "concept": "Luz", "income": "abc", "expense": 20}]},
        }))
        state = store.load()
        assert state.notes == {"2024-05-01": "querido diario"}
        row = state.expenses["2024-05"][0]
        assert row.income is None
        assert row.expense == 20

    def test_invalid_entry_is_dropped_not_the_document(self, memory_backend, store, audit_logger):
        """Test entries that cannot be read are dropped one by one."""
        memory_backend.write("notebk_data", json.dumps({
            "notes": {"2024-05-01": "hola"},
            "health": {"2024": [{"id": "h1"}], "2025": [{"id": "h2", "title": "Dentista"}]},
            "customTables": "broken",
        }))
        state = store.load()
        assert state.notes == {"2024-05-01": "hola"}
        assert list(state.health) == ["2025"]
        assert state.custom_tables == {}

        event = audit_logger.events[-1]
        assert event.event_type == AuditEventType.STATE_REPAIRED
        assert event.details["dropped"] == ["health.2024", "customTables"]

    def test_repaired_document_is_preserved(self, memory_backend, audit_logger):
        """Test the original blob is copied aside before a repair when asked to."""
        raw = json.dumps({"notes": {"2024-05-01": 5}})
        memory_backend.write("notebk_data", raw)
        store = StateStore(
            memory_backend,
            audit_logger=audit_logger,
            preserve_corrupt=True,
            clock=lambda: FIXED_NOW,
        )
        assert store.load().notes == {}
        assert memory_backend.read("notebk_data.corrupt-20240517T103000") == raw

    def test_read_error_gives_default(self, audit_logger):
        """Test an unreadable slot never raises."""
        store = StateStore(UnreadableStorage(), audit_logger=audit_logger)
        assert store.load() == default_state()
        assert AuditEventType.STATE_READ_FAILED in event_types(audit_logger)

    def test_old_document_without_monthly_notes(self, memory_backend, store):
        """Test documents missing newer mappings still load."""
        memory_backend.write("notebk_data", json.dumps({"notes": {"2024-05-01": "hola"}}))
        state = store.load()
        assert state.notes == {"2024-05-01": "hola"}
        assert state.monthly_notes == {}

    def test_corrupt_blob_is_overwritten_by_default(self, memory_backend, store):
        """Test the next save replaces the unreadable blob."""
        memory_backend.write("notebk_data", "{not json")
        store.save(store.load())
        assert memory_backend.keys() == ["notebk_data"]
        assert json.loads(memory_backend.read("notebk_data"))["notes"] == {}

    def test_preserve_corrupt(self, memory_backend, audit_logger):
        """Test the unreadable blob is copied aside when asked to."""
        memory_backend.write("notebk_data", "{not json")
        store = StateStore(
            memory_backend,
            audit_logger=audit_logger,
            preserve_corrupt=True,
            clock=lambda: FIXED_NOW,
        )
        assert store.load() == default_state()
        assert memory_backend.read("notebk_data.corrupt-20240517T103000") == "{not json"
        assert AuditEventType.STATE_PRESERVED in event_types(audit_logger)


class TestSave:
    """Tests for writing the document."""

    def test_round_trip(self, store):
        """Test a saved document loads back equal."""
        state = mutators.set_note(AppState(), "2024-05-01", "hola")
        state = mutators.set_saving(state, "2024", "Enero", 1200)
        store.save(state)
        assert store.load() == state

    def test_save_is_idempotent(self, memory_backend, store):
        """Test saving the same document twice writes the same bytes."""
        state = mutators.add_custom_table(AppState(), "2024", "Libros", table_id="t1")
        store.save(state)
        first = memory_backend.read("notebk_data")
        store.save(state)
        assert memory_backend.read("notebk_data") == first

    def test_saved_edits_always_load_back(self, store):
        """Test a bad savings amount cannot make the document unloadable."""
        state = mutators.set_note(AppState(), "2024-05-01", "keep me")
        state = mutators.set_saving(state, "2024", "Enero", "abc")
        store.save(state)

        loaded = store.load()
        assert loaded.notes == {"2024-05-01": "keep me"}
        assert loaded.savings == {"2024": {"Enero": None}}

    def test_save_failure_raises(self, audit_logger):
        """Test a rejected write is reported to the caller."""
        store = StateStore(ReadOnlyStorage(), audit_logger=audit_logger)
        with pytest.raises(StorageWriteError):
            store.save(AppState())
        assert AuditEventType.SAVE_FAILED in event_types(audit_logger)

    def test_invalid_key(self, memory_backend):
        """Test slot names cannot escape the store."""
        with pytest.raises(InvalidKeyError):
            StateStore(memory_backend, key="../etc/passwd")
        with pytest.raises(InvalidKeyError):
            StateStore(memory_backend, key="notebk_data\n")


class TestFileStorage:
    """Tests for the directory-backed slots."""

    def test_missing_file_reads_none(self, tmp_path):
        """Test an absent slot reads as None."""
        assert FileStorage(tmp_path / "data").read("notebk_data") is None

    def test_write_then_read(self, tmp_path):
        """Test the slot is one JSON file in the directory."""
        storage = FileStorage(tmp_path / "data")
        storage.write("notebk_data", '{"notes": {}}')
        assert (tmp_path / "data" / "notebk_data.json").read_text(encoding="utf-8") == '{"notes": {}}'
        assert storage.read("notebk_data") == '{"notes": {}}'
        assert storage.keys() == ["notebk_data"]

    def test_no_temp_files_left(self, tmp_path):
        """Test atomic writes clean up after themselves."""
        storage = FileStorage(tmp_path)
        storage.write("notebk_data", "uno")
        storage.write("notebk_data", "dos")
        assert [p.name for p in tmp_path.iterdir()] == ["notebk_data.json"]
        assert storage.read("notebk_data") == "dos"

    def test_store_over_files(self, tmp_path, audit_logger):
        """Test a table row persists across store instances."""
        storage = FileStorage(tmp_path)
        state = mutators.add_custom_table(AppState(), "2024", "Libros", table_id="t1")
        state = mutators.add_table_row(state, "2024", "t1", val1="Dune", row_id="r1")
        StateStore(storage, audit_logger=audit_logger).save(state)

        reloaded = StateStore(FileStorage(tmp_path), audit_logger=audit_logger).load()
        table = reloaded.custom_tables["2024"][0]
        assert table.col1_title == "Columna 1"
        assert table.rows[0].val1 == "Dune"

    def test_non_utf8_file_is_a_read_error(self, tmp_path):
        """Test undecodable content raises StorageReadError."""
        (tmp_path / "notebk_data.json").write_bytes(b"\xff\xfe\x00")
        with pytest.raises(StorageReadError):
            FileStorage(tmp_path).read("notebk_data")
