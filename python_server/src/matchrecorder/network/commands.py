"""Operator command models.

Typed Pydantic models for every command a privileged operator can
issue. The chat/text front end that produces them is not part of the
recorder; it only has to build the dict and hand it to the router.
"""

from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import BaseModel


# -- Base ----------------------------------------------------------------

class OperatorCommand(BaseModel):
    """Base class for all operator commands."""

    type: str
    sender: int = 0


# -- Autorecord ----------------------------------------------------------

class StartAutorecord(OperatorCommand):
    type: Literal["start_autorecord"] = "start_autorecord"


class StopAutorecord(OperatorCommand):
    type: Literal["stop_autorecord"] = "stop_autorecord"


# -- Recording -----------------------------------------------------------

class StartRecording(OperatorCommand):
    type: Literal["start_recording"] = "start_recording"


class StopRecording(OperatorCommand):
    type: Literal["stop_recording"] = "stop_recording"


class SaveRecording(OperatorCommand):
    type: Literal["save_recording"] = "save_recording"


class CreateSavePoint(OperatorCommand):
    type: Literal["create_save_point"] = "create_save_point"
    name: str


class LoadRecording(OperatorCommand):
    type: Literal["load_recording"] = "load_recording"
    filename: str


class ListRecordings(OperatorCommand):
    type: Literal["list_recordings"] = "list_recordings"


# -- Replay --------------------------------------------------------------

class StartReplay(OperatorCommand):
    type: Literal["start_replay"] = "start_replay"
    save_point: Optional[str] = None


class StopReplay(OperatorCommand):
    type: Literal["stop_replay"] = "stop_replay"


# -- Players / status ----------------------------------------------------

class ForceSpectate(OperatorCommand):
    type: Literal["force_spectate"] = "force_spectate"


class StatusRequest(OperatorCommand):
    type: Literal["status"] = "status"


# -- Response ------------------------------------------------------------

class CommandResponse(BaseModel):
    type: Literal["command_result"] = "command_result"
    command: str
    ok: bool
    message: str = ""
    data: dict[str, Any] = {}


# -- Registry ------------------------------------------------------------

COMMAND_TYPES: dict[str, type[OperatorCommand]] = {
    "start_autorecord": StartAutorecord,
    "stop_autorecord": StopAutorecord,
    "start_recording": StartRecording,
    "stop_recording": StopRecording,
    "save_recording": SaveRecording,
    "create_save_point": CreateSavePoint,
    "load_recording": LoadRecording,
    "list_recordings": ListRecordings,
    "start_replay": StartReplay,
    "stop_replay": StopReplay,
    "force_spectate": ForceSpectate,
    "status": StatusRequest,
}


def parse_command(data: dict[str, Any]) -> OperatorCommand:
    """Parse a raw dict into the matching typed command model."""
    cmd_type = data.get("type", "")
    model_cls = COMMAND_TYPES.get(cmd_type, OperatorCommand)
    return model_cls.model_validate(data)
