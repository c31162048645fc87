"""Tests for the recorder config loader."""

from matchrecorder.loaders.config_loader import RecorderConfig, load_recorder_config


class TestLoadRecorderConfig:
    def test_missing_file_gives_defaults(self, tmp_path):
        cfg = load_recorder_config(str(tmp_path / "missing.yaml"))
        assert cfg == RecorderConfig()
        assert cfg.snap_threshold == 4.0

    def test_values_override_defaults(self, tmp_path):
        path = tmp_path / "recorder.yaml"
        path.write_text(
            "snap_threshold: 2.5\n"
            "autorecord: true\n"
            "session_name: cup\n"
            "operator_uids: [1, 2]\n"
        )
        cfg = load_recorder_config(str(path))
        assert cfg.snap_threshold == 2.5
        assert cfg.autorecord is True
        assert cfg.session_name == "cup"
        assert cfg.operator_uids == [1, 2]
        assert cfg.tick_ms == RecorderConfig().tick_ms

    def test_unknown_keys_ignored(self, tmp_path, caplog):
        path = tmp_path / "recorder.yaml"
        path.write_text("bogus: 1\nrest_port: 9999\n")
        cfg = load_recorder_config(str(path))
        assert cfg.rest_port == 9999
        assert "bogus" in caplog.text

    def test_empty_file(self, tmp_path):
        path = tmp_path / "recorder.yaml"
        path.write_text("")
        assert load_recorder_config(str(path)) == RecorderConfig()

    def test_non_mapping(self, tmp_path):
        path = tmp_path / "recorder.yaml"
        path.write_text("- a\n- b\n")
        assert load_recorder_config(str(path)) == RecorderConfig()
