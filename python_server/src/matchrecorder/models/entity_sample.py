"""Entity sample — one entity's dynamic state at one tick."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from matchrecorder.models.keys import ALL_KEYS
from matchrecorder.models.vec import Vec2
from matchrecorder.persistence.tagged_text import NodeCursor, RecordingFormatError, TagWriter

if TYPE_CHECKING:
    from matchrecorder.engine.host import HostEntity


@dataclass(frozen=True)
class EntitySample:
    """State of a single entity at a single tick.

    Attributes:
        netid: Foreign key into the recording's metas.
        position: World position.
        aim_position: Point the entity was aiming at.
        keys: Input bitmask, one bit per :class:`ControlKey`.
        health: Current health.
    """

    netid: int
    position: Vec2
    aim_position: Vec2
    keys: int
    health: float

    @classmethod
    def from_entity(cls, entity: HostEntity) -> EntitySample:
        keys = 0
        for key in ALL_KEYS:
            if entity.is_key_pressed(key):
                keys |= int(key)
        return cls(
            netid=entity.netid,
            position=entity.position,
            aim_position=entity.aim_position,
            keys=keys,
            health=float(entity.health),
        )

    def write(self, w: TagWriter) -> None:
        w.open("blobdata")
        w.value("netid", self.netid)
        w.value("position", self.position.to_text())
        w.value("aimpos", self.aim_position.to_text())
        w.value("keys", self.keys)
        w.value("health", repr(float(self.health)))
        w.close("blobdata")

    def serialize(self) -> str:
        w = TagWriter()
        self.write(w)
        return w.getvalue()

    @classmethod
    def read(cls, c: NodeCursor) -> EntitySample:
        """Read the children of a ``<blobdata>`` block."""
        netid = c.int_value("netid")
        try:
            position = Vec2.from_text(c.text("position"))
            aim_position = Vec2.from_text(c.text("aimpos"))
        except ValueError as e:
            raise RecordingFormatError(f"blobdata {netid}: {e}")
        keys = c.int_value("keys")
        if not 0 <= keys <= 0xFFFF:
            raise RecordingFormatError(f"blobdata {netid}: <keys> out of UINT16 range: {keys}")
        health = c.float_value("health")
        c.finish()
        return cls(netid, position, aim_position, keys, health)
