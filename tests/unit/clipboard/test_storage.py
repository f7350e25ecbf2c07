"""Tests for clipboard storage module."""

import json
from pathlib import Path

import pytest

from clipmulti.clipboard.storage import StoreFile, deserialize_state, serialize_state
from clipmulti.clipboard.types import StoreState
from clipmulti.core.errors import StoreCorruptError, StoreIOError


@pytest.fixture
def state() -> StoreState:
    return StoreState(
        slots={2: "two", 1: "one"},
        history=["b", "a"],
        pinned=["p"],
        last_deleted="gone",
        timestamps={"a": 1.0, "b": 2.0, "p": 3.0, "gone": 4.0},
    )


class TestSerializeState:
    """Tests for serialize_state()."""

    def test_all_fields_present(self, state: StoreState) -> None:
        data = serialize_state(state)

        assert data["slots"] == {"1": "one", "2": "two"}
        assert data["history"] == ["b", "a"]
        assert data["pinned"] == ["p"]
        assert data["lastDeleted"] == "gone"

    def test_all_is_flattened_view(self, state: StoreState) -> None:
        """``all`` lists pinned first, then history, with sequential indices."""
        data = serialize_state(state)

        assert data["all"] == [
            {"index": 0, "content": "p"},
            {"index": 1, "content": "b"},
            {"index": 2, "content": "a"},
        ]

    def test_timestamps_only_for_live_content(self, state: StoreState) -> None:
        data = serialize_state(state)

        assert data["timestamps"] == {"a": 1.0, "b": 2.0, "p": 3.0}

    def test_empty_state(self) -> None:
        data = serialize_state(StoreState())

        assert data == {
            "slots": {},
            "history": [],
            "pinned": [],
            "all": [],
            "lastDeleted": None,
            "timestamps": {},
        }


class TestDeserializeState:
    """Tests for deserialize_state() and its repairs."""

    def test_round_trip(self, state: StoreState) -> None:
        restored = deserialize_state(serialize_state(state))

        assert restored.slots == state.slots
        assert restored.history == state.history
        assert restored.pinned == state.pinned
        assert restored.last_deleted == "gone"

    def test_missing_fields_default_empty(self) -> None:
        restored = deserialize_state({})

        assert restored == StoreState()

    def test_unknown_fields_ignored(self) -> None:
        restored = deserialize_state({"history": ["a"], "future": {"x": 1}})

        assert restored.history == ["a"]

    def test_non_integer_slot_keys_dropped(self) -> None:
        restored = deserialize_state({"slots": {"1": "ok", "abc": "bad", "7": 5}})

        assert restored.slots == {1: "ok"}

    def test_non_string_entries_dropped(self) -> None:
        restored = deserialize_state({"history": ["a", 3, None, "b"], "pinned": [{}]})

        assert restored.history == ["a", "b"]
        assert restored.pinned == []

    def test_pinned_wins_over_history(self) -> None:
        """Content in both lists stays pinned only."""
        restored = deserialize_state({"history": ["x", "y"], "pinned": ["x"]})

        assert restored.pinned == ["x"]
        assert restored.history == ["y"]

    def test_duplicates_keep_first_occurrence(self) -> None:
        restored = deserialize_state({"history": ["a", "b", "a"]})

        assert restored.history == ["a", "b"]

    def test_non_list_history_ignored(self) -> None:
        restored = deserialize_state({"history": "a", "pinned": None})

        assert restored.history == []
        assert restored.pinned == []

    def test_last_deleted_must_be_string(self) -> None:
        assert deserialize_state({"lastDeleted": 12}).last_deleted is None

    def test_bad_timestamps_dropped(self) -> None:
        restored = deserialize_state(
            {
                "history": ["a", "b", "c"],
                "timestamps": {"a": 10, "b": True, "c": "soon", "gone": 5.0},
            }
        )

        assert restored.timestamps == {"a": 10.0}


class TestStoreFile:
    """Tests for StoreFile reading and writing."""

    def test_save_creates_parent_and_file(self, tmp_path: Path, state: StoreState) -> None:
        path = tmp_path / "nested" / "dir" / "clipboard_history.json"
        store_file = StoreFile(path)

        store_file.save(state)

        assert path.exists()
        assert store_file.load() == StoreState(
            slots=state.slots,
            history=state.history,
            pinned=state.pinned,
            last_deleted=state.last_deleted,
            timestamps={"a": 1.0, "b": 2.0, "p": 3.0},
        )

    def test_written_json_is_readable_utf8(self, tmp_path: Path) -> None:
        path = tmp_path / "h.json"
        StoreFile(path).save(StoreState(history=["héllo ✓"]))

        text = path.read_text(encoding="utf-8")
        assert "héllo ✓" in text
        assert json.loads(text)["history"] == ["héllo ✓"]

    def test_no_temp_files_left(self, tmp_path: Path) -> None:
        path = tmp_path / "h.json"
        store_file = StoreFile(path)
        for i in range(3):
            store_file.save(StoreState(history=[str(i)]))

        assert [p.name for p in tmp_path.iterdir()] == ["h.json"]

    def test_read_missing_raises_io_error(self, tmp_path: Path) -> None:
        with pytest.raises(StoreIOError, match="not found"):
            StoreFile(tmp_path / "missing.json").read_raw()

    def test_read_empty_file_is_empty_state(self, tmp_path: Path) -> None:
        path = tmp_path / "h.json"
        path.write_text("  \n", encoding="utf-8")

        assert StoreFile(path).load() == StoreState()

    def test_read_with_bom(self, tmp_path: Path) -> None:
        path = tmp_path / "h.json"
        path.write_bytes(b"\xef\xbb\xbf" + json.dumps({"history": ["a"]}).encode())

        assert StoreFile(path).load().history == ["a"]

    def test_invalid_json_is_corrupt(self, tmp_path: Path) -> None:
        path = tmp_path / "h.json"
        path.write_text("{broken", encoding="utf-8")

        with pytest.raises(StoreCorruptError) as exc_info:
            StoreFile(path).read_raw()
        assert exc_info.value.path == str(path)
        assert "invalid JSON" in exc_info.value.reason

    def test_non_object_is_corrupt(self, tmp_path: Path) -> None:
        path = tmp_path / "h.json"
        path.write_text("[1, 2]", encoding="utf-8")

        with pytest.raises(StoreCorruptError, match="expected object, got list"):
            StoreFile(path).read_raw()

    def test_invalid_utf8_is_corrupt(self, tmp_path: Path) -> None:
        path = tmp_path / "h.json"
        path.write_bytes(b'{"history": ["\xff\xfe"]}')

        with pytest.raises(StoreCorruptError, match="not UTF-8"):
            StoreFile(path).read_raw()

    def test_write_failure_raises_store_io_error(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        def failing_write(path: Path, content: str | bytes) -> None:
            raise OSError("read-only file system")

        monkeypatch.setattr("clipmulti.clipboard.storage.secure_write_atomic", failing_write)

        with pytest.raises(StoreIOError, match="read-only file system"):
            StoreFile(tmp_path / "h.json").save(StoreState())

    @pytest.mark.unix_only
    def test_file_is_owner_only(self, tmp_path: Path) -> None:
        path = tmp_path / "h.json"
        StoreFile(path).save(StoreState())

        assert path.stat().st_mode & 0o777 == 0o600
