"""Mode controller — idle / recording / replaying state machine.

Owns the current recording and replay and decides, once per tick,
which of them runs. Every operator command goes through here. Commands
that do not fit the current mode are refused with a report and change
nothing.

Autorecord is a standing flag: while it is on, a session restart
starts a recording and a game over stops and saves it. Autorecord and
replay exclude each other; autorecord wins.

All methods are synchronous and expect to be called from the single
thread (or asyncio loop) that also drives ``update()``.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional

from matchrecorder.engine.recording import SessionRecording
from matchrecorder.engine.replay import SessionReplay
from matchrecorder.persistence.recording_format import parse_recording
from matchrecorder.persistence.recording_store import recording_filename
from matchrecorder.persistence.tagged_text import RecordingFormatError
from matchrecorder.util.constants import SNAP_THRESHOLD
from matchrecorder.util.events import GameOver, ModeChanged, RecordingSaved, SessionRestarted

if TYPE_CHECKING:
    from matchrecorder.engine.host import Host
    from matchrecorder.persistence.recording_store import RecordingStore
    from matchrecorder.util.events import EventBus

log = logging.getLogger(__name__)


class Mode(str, Enum):
    IDLE = "idle"
    RECORDING = "recording"
    REPLAYING = "replaying"


@dataclass(frozen=True)
class CommandResult:
    """Outcome of an operator command."""

    ok: bool
    message: str


class ModeController:
    """Top-level recorder context, one per host integration.

    Args:
        host: Host simulation.
        store: Durable storage for saved recordings.
        event_bus: Bus to subscribe to session events on (optional).
        session_name: Prefix for save files; generated from the start
            time when empty.
        snap_threshold: Passed to every replay.
        autorecord: Initial autorecord flag.
    """

    def __init__(
        self,
        host: Host,
        store: RecordingStore,
        event_bus: Optional[EventBus] = None,
        session_name: str = "",
        snap_threshold: float = SNAP_THRESHOLD,
        autorecord: bool = False,
    ) -> None:
        self._host = host
        self._store = store
        self._events = event_bus
        self.session_name = session_name or time.strftime("%Y%m%d_%H%M%S")
        self.snap_threshold = snap_threshold
        self.autorecord = autorecord

        self.mode = Mode.IDLE
        self.recording: Optional[SessionRecording] = None
        self.replay: Optional[SessionReplay] = None
        self.match_number: int = 0
        self.recording_number: int = 0

        if event_bus is not None:
            event_bus.on(SessionRestarted, self.on_session_restarted)
            event_bus.on(GameOver, self.on_game_over)

    # -- Reporting -------------------------------------------------------

    def _report(self, ok: bool, message: str) -> CommandResult:
        if ok:
            log.info(message)
        else:
            log.info("Refused: %s", message)
        self._host.broadcast(message)
        return CommandResult(ok, message)

    def _set_mode(self, mode: Mode) -> None:
        old, self.mode = self.mode, mode
        if self._events is not None and old is not mode:
            self._events.emit(ModeChanged(old_mode=old.value, new_mode=mode.value))

    # -- Tick ------------------------------------------------------------

    def update(self) -> None:
        """Run one simulation step worth of recording or replay."""
        if self.mode is Mode.RECORDING:
            self.recording.capture_tick(self._host)
        elif self.mode is Mode.REPLAYING:
            if self.replay.is_finished():
                self.replay.restart()
            else:
                self.replay.advance()

    # -- Recording -------------------------------------------------------

    def start_recording(self) -> CommandResult:
        if self.mode is Mode.RECORDING:
            return self._report(False, "Already recording")
        if self.mode is Mode.REPLAYING:
            return self._report(False, "Cannot record while a replay is running")
        self.recording = SessionRecording()
        self.recording.start(self._host)
        self._set_mode(Mode.RECORDING)
        return self._report(True, f"Recording started on {self.recording.map_name}")

    def stop_recording(self) -> CommandResult:
        if self.mode is not Mode.RECORDING:
            return self._report(False, "Not recording")
        self.recording.end(self._host)
        self._set_mode(Mode.IDLE)
        return self._report(
            True, f"Recording stopped ({self.recording.num_recorded_ticks} ticks)")

    def save_recording(self) -> CommandResult:
        """Stop (if needed), serialize and persist the current recording."""
        if self.recording is None:
            return self._report(False, "No recording to save")
        if self.mode is Mode.RECORDING:
            self.stop_recording()

        number = self.recording_number + 1
        filename = recording_filename(self.session_name, self.match_number, number)
        try:
            self._store.save(filename, self.recording.serialize())
        except (OSError, ValueError) as e:
            return self._report(False, f"Saving {filename} failed: {e}")
        self.recording_number = number
        if self._events is not None:
            self._events.emit(RecordingSaved(filename=filename,
                                             num_ticks=self.recording.num_recorded_ticks))
        return self._report(True, f"Recording saved as {filename}")

    def create_save_point(self, name: str) -> CommandResult:
        if self.mode is not Mode.RECORDING:
            return self._report(False, "Save points can only be created while recording")
        tick = self.recording.create_save_point(name)
        return self._report(True, f"Save point {name!r} at tick {tick}")

    def load_recording(self, filename: str) -> CommandResult:
        """Make a stored recording the current one."""
        if self.mode is not Mode.IDLE:
            return self._report(False, f"Cannot load while {self.mode.value}")
        try:
            recording = parse_recording(self._store.load(filename))
        except FileNotFoundError:
            return self._report(False, f"No recording named {filename}")
        except (RecordingFormatError, ValueError, OSError) as e:
            return self._report(False, f"Cannot load {filename}: {e}")
        self.recording = recording
        return self._report(
            True, f"Loaded {filename} ({recording.num_recorded_ticks} ticks, "
                  f"map {recording.map_name})")

    def list_recordings(self) -> list[str]:
        return self._store.names()

    # -- Replay ----------------------------------------------------------

    def start_replay(self, save_point: Optional[str] = None) -> CommandResult:
        if self.mode is Mode.REPLAYING:
            return self._report(False, "Already replaying")
        if self.autorecord:
            return self._report(False, "Autorecord is on; turn it off to replay")
        if self.mode is Mode.RECORDING:
            return self._report(False, "Stop recording before replaying")
        if self.recording is None:
            return self._report(False, "No recording to replay")
        if self.recording.num_recorded_ticks == 0:
            return self._report(False, "Recording is empty")

        from_tick = 0
        if save_point is not None:
            from_tick = self.recording.save_point_tick(save_point)
            if from_tick is None:
                return self._report(False, f"Unknown save point {save_point!r}")

        replay = SessionReplay(self.recording, self._host, self.snap_threshold)
        if not replay.start(from_tick):
            return self._report(False, f"Replay could not start at tick {from_tick}")
        self.replay = replay
        self._set_mode(Mode.REPLAYING)
        return self._report(True, f"Replay started ({self.recording.num_recorded_ticks} ticks)")

    def stop_replay(self) -> CommandResult:
        if self.mode is not Mode.REPLAYING:
            return self._report(False, "Not replaying")
        self._set_mode(Mode.IDLE)
        self.replay = None
        self._host.load_map(self.recording.map_name)
        return self._report(True, f"Replay stopped, reloading {self.recording.map_name}")

    # -- Autorecord ------------------------------------------------------

    def start_autorecord(self) -> CommandResult:
        if self.autorecord:
            return self._report(False, "Autorecord already on")
        self.autorecord = True
        if self.mode is Mode.REPLAYING:
            self.stop_replay()
        return self._report(True, "Autorecord on")

    def stop_autorecord(self) -> CommandResult:
        if not self.autorecord:
            return self._report(False, "Autorecord already off")
        self.autorecord = False
        return self._report(True, "Autorecord off")

    def on_session_restarted(self, event: SessionRestarted) -> None:
        self.match_number += 1
        log.info("Session restarted on %r (match %d)", event.map_name, self.match_number)
        if self.autorecord:
            self.start_recording()

    def on_game_over(self, event: GameOver) -> None:
        log.info("Game over (winning team %d)", event.winning_team)
        if self.autorecord and self.mode is Mode.RECORDING:
            self.stop_recording()
            self.save_recording()

    # -- Players ---------------------------------------------------------

    def force_all_to_spectate(self) -> CommandResult:
        players = self._host.players()
        for player in players:
            self._host.force_spectator(player)
        return self._report(True, f"Moved {len(players)} players to spectator")

    # -- Status ----------------------------------------------------------

    def status(self) -> dict[str, Any]:
        """Snapshot for operators and the REST status endpoint."""
        recording = self.recording
        return {
            "mode": self.mode.value,
            "autorecord": self.autorecord,
            "session_name": self.session_name,
            "match_number": self.match_number,
            "recording_number": self.recording_number,
            "recorded_ticks": recording.num_recorded_ticks if recording else 0,
            "recorded_entities": len(recording.metas) if recording else 0,
            "map_name": recording.map_name if recording else "",
            "replay_tick": self.replay.fake_t if self.replay else None,
        }
