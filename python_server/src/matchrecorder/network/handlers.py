"""Command handlers — one handler per operator command.

Each handler is an async function that receives a parsed
``OperatorCommand`` and the sender UID and returns a
``CommandResponse`` dict. Handlers only translate; every state
decision lives in the mode controller, so a command issued in the
wrong mode yields ``ok: False`` and changes nothing.

To add a command:

1. Add its model to ``commands.py``.
2. Write the handler below.
3. Register it in :func:`register_all_handlers`.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, TypeVar, TYPE_CHECKING

from matchrecorder.network.commands import (
    CreateSavePoint,
    CommandResponse,
    LoadRecording,
    OperatorCommand,
    StartReplay,
)

if TYPE_CHECKING:
    from matchrecorder.engine.controller import CommandResult, ModeController
    from matchrecorder.main import Services

log = logging.getLogger(__name__)

_C = TypeVar("_C", bound=OperatorCommand)

# Module-level reference set by register_all_handlers()
_services: Optional[Services] = None


def _svc() -> Services:
    """Get the Services container. Raises if not initialized."""
    assert _services is not None, "handlers: services not initialized"
    return _services


def _controller() -> ModeController:
    return _svc().controller


def _expect(command: OperatorCommand, cls: type[_C]) -> _C:
    """Narrow ``command`` to the model a handler was registered for."""
    if not isinstance(command, cls):
        raise TypeError(f"{cls.__name__} handler got {type(command).__name__}")
    return command


def _respond(command: OperatorCommand, result: CommandResult,
             data: Optional[dict[str, Any]] = None) -> dict[str, Any]:
    return CommandResponse(
        command=command.type, ok=result.ok, message=result.message, data=data or {},
    ).model_dump()


# ===================================================================
# Autorecord
# ===================================================================

async def handle_start_autorecord(command: OperatorCommand, sender_uid: int) -> dict[str, Any]:
    return _respond(command, _controller().start_autorecord())


async def handle_stop_autorecord(command: OperatorCommand, sender_uid: int) -> dict[str, Any]:
    return _respond(command, _controller().stop_autorecord())


# ===================================================================
# Recording
# ===================================================================

async def handle_start_recording(command: OperatorCommand, sender_uid: int) -> dict[str, Any]:
    return _respond(command, _controller().start_recording())


async def handle_stop_recording(command: OperatorCommand, sender_uid: int) -> dict[str, Any]:
    return _respond(command, _controller().stop_recording())


async def handle_save_recording(command: OperatorCommand, sender_uid: int) -> dict[str, Any]:
    return _respond(command, _controller().save_recording())


async def handle_create_save_point(command: OperatorCommand, sender_uid: int) -> dict[str, Any]:
    cmd = _expect(command, CreateSavePoint)
    return _respond(cmd, _controller().create_save_point(cmd.name))


async def handle_load_recording(command: OperatorCommand, sender_uid: int) -> dict[str, Any]:
    cmd = _expect(command, LoadRecording)
    return _respond(cmd, _controller().load_recording(cmd.filename))


async def handle_list_recordings(command: OperatorCommand, sender_uid: int) -> dict[str, Any]:
    names = _controller().list_recordings()
    return CommandResponse(
        command=command.type, ok=True, message=f"{len(names)} recordings",
        data={"recordings": names},
    ).model_dump()


# ===================================================================
# Replay
# ===================================================================

async def handle_start_replay(command: OperatorCommand, sender_uid: int) -> dict[str, Any]:
    cmd = _expect(command, StartReplay)
    return _respond(cmd, _controller().start_replay(save_point=cmd.save_point))


async def handle_stop_replay(command: OperatorCommand, sender_uid: int) -> dict[str, Any]:
    return _respond(command, _controller().stop_replay())


# ===================================================================
# Players / status
# ===================================================================

async def handle_force_spectate(command: OperatorCommand, sender_uid: int) -> dict[str, Any]:
    return _respond(command, _controller().force_all_to_spectate())


async def handle_status(command: OperatorCommand, sender_uid: int) -> dict[str, Any]:
    status = _controller().status()
    return CommandResponse(
        command=command.type, ok=True, message=status["mode"], data=status,
    ).model_dump()


# ===================================================================
# Registration
# ===================================================================

def register_all_handlers(services: Services) -> None:
    """Register all command handlers on the router.

    Called once during startup from ``main.py``.

    Args:
        services: Fully initialized Services container.
    """
    global _services
    _services = services

    router = services.router

    # -- Autorecord ------------------------------------------------------
    router.register("start_autorecord", handle_start_autorecord)
    router.register("stop_autorecord", handle_stop_autorecord)

    # -- Recording -------------------------------------------------------
    router.register("start_recording", handle_start_recording)
    router.register("stop_recording", handle_stop_recording)
    router.register("save_recording", handle_save_recording)
    router.register("create_save_point", handle_create_save_point)
    router.register("load_recording", handle_load_recording)
    router.register("list_recordings", handle_list_recordings)

    # -- Replay ----------------------------------------------------------
    router.register("start_replay", handle_start_replay)
    router.register("stop_replay", handle_stop_replay)

    # -- Players / status ------------------------------------------------
    router.register("force_spectate", handle_force_spectate)
    router.register("status", handle_status)

    log.info("%d command handlers registered", len(router.registered_types))
