"""Session recording — tick-indexed history of entity samples.

A recording is created empty, ``start()`` stamps the start time and map
and seeds metas for entities already present, ``capture_tick()`` is
called once per simulation step and appends one tick (possibly empty),
and ``end()`` stamps the end time.

Only entities accepted by the recording predicate are captured. The
default predicate records player-controlled entities only.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Optional

from matchrecorder.models.entity_meta import EntityMeta
from matchrecorder.models.entity_sample import EntitySample

if TYPE_CHECKING:
    from matchrecorder.engine.host import Host, HostEntity

log = logging.getLogger(__name__)

RecordingPredicate = Callable[["HostEntity"], bool]


def has_player(entity: HostEntity) -> bool:
    """Default predicate: record player-controlled entities only."""
    return entity.player is not None and entity.player.player_id != 0


@dataclass
class SessionRecording:
    """Full history of one recorded session.

    Attributes:
        ticks: One list of samples per recorded tick, in capture order.
        metas: Metas keyed by netid; only grows while recording.
        init_t: Host time at ``start()``.
        end_t: Host time at ``end()`` (0 while still recording).
        map_name: Map the session was played on.
        save_points: Named tick-index checkpoints.
        predicate: Decides which live entities are recorded.
    """

    ticks: list[list[EntitySample]] = field(default_factory=list)
    metas: dict[int, EntityMeta] = field(default_factory=dict)
    init_t: int = 0
    end_t: int = 0
    map_name: str = ""
    save_points: dict[str, int] = field(default_factory=dict)
    predicate: RecordingPredicate = field(default=has_player, repr=False, compare=False)

    # -- Lifecycle -------------------------------------------------------

    def start(self, host: Host) -> None:
        """Stamp start time and map, seed metas for present entities."""
        self.init_t = host.time()
        self.map_name = host.map_name
        for entity in host.entities():
            if self.predicate(entity) and entity.netid not in self.metas:
                self.metas[entity.netid] = EntityMeta.from_entity(entity)
        log.info("Recording started on map %r at t=%d (%d entities)",
                 self.map_name, self.init_t, len(self.metas))

    def capture_tick(self, host: Host) -> list[EntitySample]:
        """Append one tick of samples for every qualifying live entity.

        An empty tick is still appended so tick indices stay aligned
        with elapsed simulation steps.
        """
        samples: list[EntitySample] = []
        for entity in host.entities():
            if not self.predicate(entity):
                continue
            if entity.netid not in self.metas:
                meta = EntityMeta.from_entity(entity)
                self.metas[entity.netid] = meta
                log.debug("New entity %d (%s) at tick %d",
                          meta.netid, meta.name, len(self.ticks))
            samples.append(EntitySample.from_entity(entity))
        self.ticks.append(samples)
        return samples

    def end(self, host: Host) -> None:
        self.end_t = host.time()
        log.info("Recording ended at t=%d after %d ticks", self.end_t, len(self.ticks))

    # -- Queries ---------------------------------------------------------

    @property
    def num_recorded_ticks(self) -> int:
        return len(self.ticks)

    def lookup_meta(self, netid: int) -> Optional[EntityMeta]:
        """Return the meta for a netid, or None if it was never observed."""
        return self.metas.get(netid)

    def tick(self, index: int) -> list[EntitySample]:
        return self.ticks[index]

    @property
    def kinds(self) -> set[str]:
        """Every entity kind name this recording can re-create."""
        return {meta.name for meta in self.metas.values()}

    # -- Save points -----------------------------------------------------

    def create_save_point(self, name: str) -> int:
        """Mark the index of the next tick to be captured under ``name``.

        Re-using a name moves the checkpoint.
        """
        index = len(self.ticks)
        self.save_points[name] = index
        log.info("Save point %r at tick %d", name, index)
        return index

    def save_point_tick(self, name: str) -> Optional[int]:
        return self.save_points.get(name)

    # -- Serialization ---------------------------------------------------

    def serialize(self) -> str:
        """Encode as the versioned tagged-block text format."""
        from matchrecorder.persistence.recording_format import serialize_recording
        return serialize_recording(self)
