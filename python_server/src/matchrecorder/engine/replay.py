"""Session replay — re-simulates a recording tick by tick.

States:
    not started → ``start()`` → active → ``advance()`` ... → finished
    finished → ``start()`` → active again at the first tick (looping)

Each applied tick spawns entities on first sight of their recorded
netid, rubber-bands live entities that drifted further than the snap
threshold, sets the aim point and replays the full key state.

The recording is never mutated.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, Optional

from matchrecorder.engine.spawn import spawn_entity
from matchrecorder.models.keys import expand_bitmask
from matchrecorder.util.constants import SNAP_THRESHOLD

if TYPE_CHECKING:
    from matchrecorder.engine.host import Host, HostEntity
    from matchrecorder.engine.recording import SessionRecording
    from matchrecorder.models.entity_sample import EntitySample

log = logging.getLogger(__name__)


class ReplayError(RuntimeError):
    """A replay was driven outside its contract (e.g. advanced past the end)."""


class ReplayState(str, Enum):
    NOT_STARTED = "not_started"
    ACTIVE = "active"
    FINISHED = "finished"


class SessionReplay:
    """Drives synthetic entities from a completed recording.

    Args:
        recording: The recording to replay (read only).
        host: Host simulation to spawn and steer entities in.
        snap_threshold: Drift distance above which entities are teleported.
    """

    def __init__(
        self,
        recording: SessionRecording,
        host: Host,
        snap_threshold: float = SNAP_THRESHOLD,
    ) -> None:
        self._recording = recording
        self._host = host
        self.snap_threshold = snap_threshold
        self.fake_t: int = 0
        self.loop_start: int = 0
        self._started = False
        # recorded netid -> simulation-assigned netid of the live copy
        self._live_ids: dict[int, int] = {}
        # recorded netids whose spawn failed this run; never retried
        self._failed_spawns: set[int] = set()

    # -- State -----------------------------------------------------------

    @property
    def recording(self) -> SessionRecording:
        return self._recording

    @property
    def num_ticks(self) -> int:
        return self._recording.num_recorded_ticks

    @property
    def live_ids(self) -> dict[int, int]:
        """Copy of the recorded → live netid mapping."""
        return dict(self._live_ids)

    @property
    def state(self) -> ReplayState:
        if not self._started:
            return ReplayState.NOT_STARTED
        if self.is_finished():
            return ReplayState.FINISHED
        return ReplayState.ACTIVE

    def is_finished(self) -> bool:
        return self.fake_t >= self.num_ticks - 1

    # -- Control ---------------------------------------------------------

    def start(self, from_tick: int = 0) -> bool:
        """(Re)start the replay and apply its first tick immediately.

        Args:
            from_tick: Tick to start (and later loop back) from.

        Returns:
            False if the recording is empty or ``from_tick`` is out of
            range; nothing is changed in that case.
        """
        if self.num_ticks == 0:
            log.warning("Replay start refused: recording has no ticks")
            return False
        if not 0 <= from_tick < self.num_ticks:
            log.warning("Replay start refused: tick %d outside [0, %d)", from_tick, self.num_ticks)
            return False

        self._clear_stage()
        self.loop_start = from_tick
        self.fake_t = from_tick
        self._live_ids.clear()
        self._failed_spawns.clear()
        self._started = True
        log.info("Replay started at tick %d/%d on map %r",
                 from_tick, self.num_ticks, self._recording.map_name)
        self._apply_tick(self.fake_t)
        return True

    def restart(self) -> bool:
        """Loop back to where the replay was last started from."""
        return self.start(self.loop_start)

    def advance(self) -> None:
        """Step to the next recorded tick and apply it.

        Raises:
            ReplayError: If the replay was never started or the next
                tick does not exist. Callers check ``is_finished()``.
        """
        if not self._started:
            raise ReplayError("advance() called before start()")
        next_t = self.fake_t + 1
        if next_t >= self.num_ticks:
            raise ReplayError(f"advance() past last tick ({next_t} >= {self.num_ticks})")
        self.fake_t = next_t
        self._apply_tick(next_t)

    # -- Internals -------------------------------------------------------

    def _clear_stage(self) -> None:
        """Move players to spectator and remove entities the replay re-creates."""
        for player in self._host.players():
            self._host.force_spectator(player)
        kinds = self._recording.kinds
        doomed = [e for e in self._host.entities() if e.kind in kinds]
        for entity in doomed:
            self._host.destroy_entity(entity)
        log.debug("Cleared stage: %d entities of kinds %s removed", len(doomed), sorted(kinds))

    def _apply_tick(self, index: int) -> None:
        for sample in self._recording.tick(index):
            meta = self._recording.lookup_meta(sample.netid)
            if meta is None:
                log.error("Tick %d: no meta for netid %d, sample skipped", index, sample.netid)
                continue

            if sample.netid in self._failed_spawns:
                continue

            live_id = self._live_ids.get(sample.netid)
            if live_id is None:
                entity = spawn_entity(self._host, meta, sample)
                if entity is None:
                    log.error("Tick %d: failed to spawn %r (team=%d, pos=%s) for netid %d",
                              index, meta.name, meta.team_num, sample.position.to_text(),
                              sample.netid)
                    self._failed_spawns.add(sample.netid)
                    continue
                self._live_ids[sample.netid] = entity.netid
                log.debug("Tick %d: spawned %s netid %d as %d",
                          index, meta.name, sample.netid, entity.netid)
            else:
                entity = self._host.get_entity(live_id)
                if entity is None:
                    log.warning("Tick %d: live entity %d for netid %d has vanished",
                                index, live_id, sample.netid)
                    continue

            self._apply_sample(entity, sample)

    def _apply_sample(self, entity: HostEntity, sample: EntitySample) -> None:
        if entity.position.distance_to(sample.position) > self.snap_threshold:
            entity.set_position(sample.position)
        entity.set_aim_position(sample.aim_position)
        for key, pressed in expand_bitmask(sample.keys).items():
            entity.set_key_pressed(key, pressed)

    def live_entity(self, recorded_netid: int) -> Optional[HostEntity]:
        """The live copy of a recorded entity, if it exists."""
        live_id = self._live_ids.get(recorded_netid)
        if live_id is None:
            return None
        return self._host.get_entity(live_id)
