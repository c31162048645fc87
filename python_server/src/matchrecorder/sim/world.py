"""Simulated world — a small in-memory host for the recorder.

Implements the ``Host`` protocol with plain dataclasses and a trivial
movement step (held direction keys move an entity by its speed each
tick). Used by the standalone entry point and by the tests; a real
game integration provides its own adapter instead.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from matchrecorder.models.keys import ControlKey
from matchrecorder.models.vec import Vec2
from matchrecorder.util.constants import TEAM_SPECTATOR
from matchrecorder.util.events import EventBus, GameOver, SessionRestarted

log = logging.getLogger(__name__)

_DIRECTIONS: dict[ControlKey, Vec2] = {
    ControlKey.LEFT: Vec2(-1.0, 0.0),
    ControlKey.RIGHT: Vec2(1.0, 0.0),
    ControlKey.UP: Vec2(0.0, -1.0),
    ControlKey.DOWN: Vec2(0.0, 1.0),
}


@dataclass
class SimPlayer:
    """A connected player."""

    player_id: int
    username: str
    char_name: str = ""
    team: int = 0


@dataclass
class SimEntity:
    """An entity in the simulated world.

    Attributes:
        netid: Simulation-assigned id.
        kind: Kind name (``"knight"``, ``"arrow"``, ...).
        speed: Distance moved per tick while a direction key is held.
        initialized: False between ``create_uninitialized_entity`` and ``init()``.
    """

    netid: int
    kind: str
    team: int = 0
    sex: int = 0
    head: int = 0
    health: float = 1.0
    player: Optional[SimPlayer] = None
    pos: Vec2 = field(default_factory=Vec2)
    aim: Vec2 = field(default_factory=Vec2)
    pressed: set[ControlKey] = field(default_factory=set)
    speed: float = 1.0
    initialized: bool = True

    @property
    def position(self) -> Vec2:
        return self.pos

    @property
    def aim_position(self) -> Vec2:
        return self.aim

    def set_position(self, pos: Vec2) -> None:
        self.pos = pos

    def set_aim_position(self, pos: Vec2) -> None:
        self.aim = pos

    def is_key_pressed(self, key: ControlKey) -> bool:
        return key in self.pressed

    def set_key_pressed(self, key: ControlKey, pressed: bool) -> None:
        if pressed:
            self.pressed.add(key)
        else:
            self.pressed.discard(key)

    def init(self) -> None:
        self.initialized = True


class SimWorld:
    """In-memory host simulation.

    Args:
        map_name: Map loaded at construction.
        event_bus: If given, ``load_map`` emits ``SessionRestarted`` and
            ``end_match`` emits ``GameOver`` on it.
    """

    def __init__(self, map_name: str = "default", event_bus: Optional[EventBus] = None) -> None:
        self._map_name = map_name
        self._events = event_bus
        self._time = 0
        self._next_netid = 1
        self._entities: dict[int, SimEntity] = {}
        self._players: list[SimPlayer] = []
        self.messages: list[str] = []
        self.fail_kinds: set[str] = set()

    # -- Host protocol ---------------------------------------------------

    @property
    def map_name(self) -> str:
        return self._map_name

    def time(self) -> int:
        return self._time

    def entities(self) -> list[SimEntity]:
        return [e for e in self._entities.values() if e.initialized]

    def get_entity(self, netid: int) -> Optional[SimEntity]:
        entity = self._entities.get(netid)
        if entity is None or not entity.initialized:
            return None
        return entity

    def _new_entity(self, kind: str, initialized: bool) -> Optional[SimEntity]:
        if kind in self.fail_kinds:
            log.debug("Refusing to create %r", kind)
            return None
        entity = SimEntity(netid=self._next_netid, kind=kind, initialized=initialized)
        self._next_netid += 1
        self._entities[entity.netid] = entity
        return entity

    def create_entity(self, kind: str, team: int, position: Vec2) -> Optional[SimEntity]:
        entity = self._new_entity(kind, initialized=True)
        if entity is not None:
            entity.team = team
            entity.pos = position
        return entity

    def create_uninitialized_entity(self, kind: str) -> Optional[SimEntity]:
        return self._new_entity(kind, initialized=False)

    def destroy_entity(self, entity: SimEntity) -> None:
        self._entities.pop(entity.netid, None)

    def players(self) -> list[SimPlayer]:
        return list(self._players)

    def force_spectator(self, player: SimPlayer) -> None:
        player.team = TEAM_SPECTATOR
        for entity in list(self._entities.values()):
            if entity.player is player:
                entity.player = None
                self.destroy_entity(entity)

    def load_map(self, name: str) -> None:
        """Wipe all entities and start a new match on ``name``."""
        log.info("Loading map %r", name)
        self._map_name = name
        self._entities.clear()
        self._time = 0
        if self._events is not None:
            self._events.emit(SessionRestarted(map_name=name))

    def broadcast(self, message: str) -> None:
        self.messages.append(message)

    # -- Simulation ------------------------------------------------------

    def add_player(self, player_id: int, username: str, kind: str = "knight",
                   team: int = 0, position: Vec2 = Vec2()) -> SimEntity:
        """Join a player and give them an entity to control."""
        player = SimPlayer(player_id=player_id, username=username,
                           char_name=username.capitalize(), team=team)
        self._players.append(player)
        entity = self.create_entity(kind, team, position)
        entity.player = player
        return entity

    def spawn(self, kind: str, team: int = 0, position: Vec2 = Vec2()) -> Optional[SimEntity]:
        """Spawn a non-player entity."""
        return self.create_entity(kind, team, position)

    def step(self) -> None:
        """Advance one tick: move every entity along its held direction keys."""
        for entity in self.entities():
            for key, direction in _DIRECTIONS.items():
                if key in entity.pressed:
                    entity.pos = Vec2(entity.pos.x + direction.x * entity.speed,
                                      entity.pos.y + direction.y * entity.speed)
        self._time += 1

    def end_match(self, winning_team: int = -1) -> None:
        if self._events is not None:
            self._events.emit(GameOver(winning_team=winning_team))
