"""Spawn policy — how a recorded entity is re-created during replay.

Avatar kinds with selectable appearance cannot go through the generic
creation call (it takes no appearance parameters). They are created
uninitialized, set up field by field, then explicitly initialized.
Everything else uses the generic ``(kind, team, position)`` call.

To support a new appearance-bearing kind, add it to ``SPAWN_PATHS``.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from matchrecorder.engine.host import Host, HostEntity
    from matchrecorder.models.entity_meta import EntityMeta
    from matchrecorder.models.entity_sample import EntitySample

log = logging.getLogger(__name__)


class SpawnPath(str, Enum):
    """Creation path for an entity kind."""

    APPEARANCE = "appearance"
    GENERIC = "generic"


SPAWN_PATHS: dict[str, SpawnPath] = {
    "knight": SpawnPath.APPEARANCE,
    "archer": SpawnPath.APPEARANCE,
    "builder": SpawnPath.APPEARANCE,
}


def spawn_path_for(kind: str) -> SpawnPath:
    return SPAWN_PATHS.get(kind, SpawnPath.GENERIC)


def spawn_entity(host: Host, meta: EntityMeta, sample: EntitySample) -> Optional[HostEntity]:
    """Create a live entity for a recorded meta at the sample's position.

    Returns None if the host could not create the entity.
    """
    path = spawn_path_for(meta.name)
    if path is SpawnPath.GENERIC:
        return host.create_entity(meta.name, meta.team_num, sample.position)

    entity = host.create_uninitialized_entity(meta.name)
    if entity is None:
        return None
    entity.team = meta.team_num
    entity.set_position(sample.position)
    entity.sex = meta.sex_num
    entity.head = meta.head_num
    entity.init()
    return entity
