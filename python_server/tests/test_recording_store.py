"""Tests for RecordingStore and save-file naming."""

import pytest

from matchrecorder.persistence.recording_store import RecordingStore, recording_filename


class TestFilename:
    def test_pattern(self):
        assert recording_filename("evening", 3, 2) == "evening_match3recording2.cfg"


class TestRecordingStore:
    def test_save_and_load(self, tmp_path):
        store = RecordingStore(tmp_path / "recs")
        path = store.save("a.cfg", "<x>1</x>\n")
        assert path == tmp_path / "recs" / "a.cfg"
        assert store.load("a.cfg") == "<x>1</x>\n"
        assert store.exists("a.cfg")

    def test_save_replaces(self, tmp_path):
        store = RecordingStore(tmp_path)
        store.save("a.cfg", "old")
        store.save("a.cfg", "new")
        assert store.load("a.cfg") == "new"
        assert [p.name for p in tmp_path.iterdir()] == ["a.cfg"]

    def test_names_sorted_and_filtered(self, tmp_path):
        store = RecordingStore(tmp_path)
        store.save("b.cfg", "")
        store.save("a.cfg", "")
        (tmp_path / "notes.txt").write_text("x")
        assert store.names() == ["a.cfg", "b.cfg"]

    def test_names_missing_dir(self, tmp_path):
        assert RecordingStore(tmp_path / "nope").names() == []

    def test_load_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            RecordingStore(tmp_path).load("nope.cfg")

    @pytest.mark.parametrize("name", ["", "..", "../escape.cfg", "sub/a.cfg"])
    def test_rejects_paths(self, tmp_path, name):
        with pytest.raises(ValueError):
            RecordingStore(tmp_path).save(name, "x")
