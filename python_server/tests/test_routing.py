"""Tests for command parsing, routing and handlers."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from matchrecorder.loaders.config_loader import RecorderConfig
from matchrecorder.main import create_services
from matchrecorder.network.commands import (
    COMMAND_TYPES,
    LoadRecording,
    StartReplay,
    parse_command,
)


@pytest.fixture
def services(tmp_path):
    return create_services(RecorderConfig(recordings_dir=str(tmp_path), session_name="s"))


class TestParseCommand:
    def test_parse_start_replay(self):
        cmd = parse_command({"type": "start_replay", "save_point": "mid"})
        assert isinstance(cmd, StartReplay)
        assert cmd.save_point == "mid"

    def test_parse_load(self):
        cmd = parse_command({"type": "load_recording", "filename": "a.cfg"})
        assert isinstance(cmd, LoadRecording)

    def test_missing_field(self):
        with pytest.raises(ValidationError):
            parse_command({"type": "load_recording"})

    def test_parse_unknown_type(self):
        cmd = parse_command({"type": "nonexistent", "sender": 1})
        assert cmd.type == "nonexistent"

    def test_all_types_registered(self):
        for key, cls in COMMAND_TYPES.items():
            assert cls.model_fields["type"].default == key


class TestRouter:
    def test_every_command_has_handler(self, services):
        assert sorted(services.router.registered_types) == sorted(COMMAND_TYPES)

    async def test_unknown_command_returns_none(self, services):
        assert await services.router.route({"type": "nonexistent"}, 1) is None

    async def test_start_stop_recording(self, services):
        router = services.router
        resp = await router.route({"type": "start_recording"}, 1)
        assert resp == {
            "type": "command_result",
            "command": "start_recording",
            "ok": True,
            "message": "Recording started on default",
            "data": {},
        }
        services.game_loop.step()
        resp = await router.route({"type": "stop_recording"}, 1)
        assert resp["ok"]
        assert services.controller.recording.num_recorded_ticks == 1

    async def test_invalid_transition_reports(self, services):
        resp = await services.router.route({"type": "stop_replay"}, 1)
        assert resp["ok"] is False
        assert resp["message"] == "Not replaying"

    async def test_save_and_list(self, services):
        router = services.router
        await router.route({"type": "start_recording"}, 1)
        resp = await router.route({"type": "save_recording"}, 1)
        assert resp["ok"]
        resp = await router.route({"type": "list_recordings"}, 1)
        assert resp["data"]["recordings"] == ["s_match0recording1.cfg"]

    async def test_load_and_replay_from_save_point(self, services):
        router = services.router
        services.world.add_player(1, "alice")
        await router.route({"type": "start_recording"}, 1)
        services.game_loop.step()
        await router.route({"type": "create_save_point", "name": "p"}, 1)
        services.game_loop.step()
        await router.route({"type": "save_recording"}, 1)
        resp = await router.route({"type": "load_recording", "filename": "s_match0recording1.cfg"}, 1)
        assert resp["ok"]
        resp = await router.route({"type": "start_replay", "save_point": "p"}, 1)
        assert resp["ok"]
        assert services.controller.replay.fake_t == 1

    async def test_autorecord_and_spectate(self, services):
        router = services.router
        services.world.add_player(1, "alice")
        assert (await router.route({"type": "start_autorecord"}, 1))["ok"]
        assert (await router.route({"type": "force_spectate"}, 1))["ok"]
        assert (await router.route({"type": "stop_autorecord"}, 1))["ok"]
        assert services.world.entities() == []

    async def test_status(self, services):
        resp = await services.router.route({"type": "status"}, 1)
        assert resp["message"] == "idle"
        assert resp["data"]["session_name"] == "s"


class TestHandlerTypeCheck:
    async def test_mismatched_model_rejected(self, services):
        from matchrecorder.network.handlers import handle_load_recording

        with pytest.raises(TypeError, match="LoadRecording handler got StartReplay"):
            await handle_load_recording(StartReplay(), 1)
        assert services.controller.mode.value == "idle"

    async def test_matching_model_accepted(self, services):
        from matchrecorder.network.handlers import handle_start_replay

        resp = await handle_start_replay(StartReplay(), 1)
        assert resp["command"] == "start_replay"
        assert resp["ok"] is False
