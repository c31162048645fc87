"""Entity meta — per-entity identity and appearance snapshot.

Captured once, the first time an entity is observed during a
recording, and never re-read afterwards. Later team or appearance
changes of the live entity do not touch an existing meta.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from matchrecorder.persistence.tagged_text import NodeCursor, RecordingFormatError, TagWriter
from matchrecorder.util.constants import NO_PLAYER_ID

if TYPE_CHECKING:
    from matchrecorder.engine.host import HostEntity


@dataclass(frozen=True)
class PlayerIdentity:
    """The player that controlled an entity when it was first seen."""

    player_id: int
    username: str
    char_name: str


@dataclass(frozen=True)
class EntityMeta:
    """Immutable identity/appearance of one recorded entity.

    Attributes:
        netid: Recording-time entity id, the join key for samples.
        name: Entity kind name (e.g. ``"knight"``).
        team_num: Team the entity was on.
        sex_num: Appearance selector.
        head_num: Appearance selector.
        player: Controlling player, or None for non-player entities.
    """

    netid: int
    name: str
    team_num: int
    sex_num: int = 0
    head_num: int = 0
    player: Optional[PlayerIdentity] = None

    def has_player(self) -> bool:
        return self.player is not None and self.player.player_id != NO_PLAYER_ID

    @classmethod
    def from_entity(cls, entity: HostEntity) -> EntityMeta:
        """Snapshot a live entity's identity at this instant."""
        player = None
        if entity.player is not None and entity.player.player_id != NO_PLAYER_ID:
            player = PlayerIdentity(
                player_id=entity.player.player_id,
                username=entity.player.username,
                char_name=entity.player.char_name,
            )
        return cls(
            netid=entity.netid,
            name=entity.kind,
            team_num=entity.team,
            sex_num=entity.sex,
            head_num=entity.head,
            player=player,
        )

    # -- Serialization ---------------------------------------------------

    def write(self, w: TagWriter) -> None:
        w.open("blobmeta")
        w.value("netid", self.netid)
        w.value("name", self.name)
        w.value("teamNum", self.team_num)
        w.value("sexNum", self.sex_num)
        w.value("headNum", self.head_num)
        # Player fields are omitted entirely for non-player entities
        if self.has_player():
            w.value("playerid", self.player.player_id)
            w.value("playerusername", self.player.username)
            w.value("playercharname", self.player.char_name)
        w.close("blobmeta")

    def serialize(self) -> str:
        w = TagWriter()
        self.write(w)
        return w.getvalue()

    @classmethod
    def read(cls, c: NodeCursor) -> EntityMeta:
        """Read the children of a ``<blobmeta>`` block."""
        netid = c.int_value("netid")
        name = c.text("name")
        team_num = c.int_value("teamNum")
        sex_num = c.int_value("sexNum")
        head_num = c.int_value("headNum")
        player = None
        if c.peek() == "playerid":
            player_id = c.int_value("playerid")
            if player_id == NO_PLAYER_ID:
                raise RecordingFormatError(f"blobmeta {netid}: <playerid> must be non-zero")
            player = PlayerIdentity(
                player_id=player_id,
                username=c.text("playerusername"),
                char_name=c.text("playercharname"),
            )
        c.finish()
        return cls(netid, name, team_num, sex_num, head_num, player)
