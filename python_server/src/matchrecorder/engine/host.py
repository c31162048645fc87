"""Host interface — what the recorder needs from the simulation.

The host simulation owns entity spawning/destruction, teams, players,
maps, the clock and message broadcasting. The recorder only talks to
it through the protocols below, so any simulation (the in-memory
``SimWorld`` or a real game server adapter) can drive it.
"""

from __future__ import annotations

from typing import Optional, Protocol

from matchrecorder.models.keys import ControlKey
from matchrecorder.models.vec import Vec2


class HostPlayer(Protocol):
    """A connected player as seen by the host."""

    player_id: int
    username: str
    char_name: str
    team: int


class HostEntity(Protocol):
    """A live entity in the host simulation.

    ``netid`` is the simulation-assigned id. Appearance fields (team,
    sex, head) are writable so uninitialized entities can be set up
    before :meth:`init` is called.
    """

    netid: int
    kind: str
    team: int
    sex: int
    head: int
    health: float
    player: Optional[HostPlayer]

    @property
    def position(self) -> Vec2: ...

    @property
    def aim_position(self) -> Vec2: ...

    def set_position(self, pos: Vec2) -> None: ...

    def set_aim_position(self, pos: Vec2) -> None: ...

    def is_key_pressed(self, key: ControlKey) -> bool: ...

    def set_key_pressed(self, key: ControlKey, pressed: bool) -> None: ...

    def init(self) -> None:
        """Activate an entity created via ``create_uninitialized_entity``."""
        ...


class Host(Protocol):
    """Primitives the recorder consumes from the host simulation."""

    @property
    def map_name(self) -> str: ...

    def time(self) -> int:
        """Current simulation time (game ticks since map load)."""
        ...

    def entities(self) -> list[HostEntity]: ...

    def get_entity(self, netid: int) -> Optional[HostEntity]: ...

    def create_entity(self, kind: str, team: int, position: Vec2) -> Optional[HostEntity]: ...

    def create_uninitialized_entity(self, kind: str) -> Optional[HostEntity]: ...

    def destroy_entity(self, entity: HostEntity) -> None: ...

    def players(self) -> list[HostPlayer]: ...

    def force_spectator(self, player: HostPlayer) -> None: ...

    def load_map(self, name: str) -> None: ...

    def broadcast(self, message: str) -> None: ...
