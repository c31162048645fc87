"""Recorder constants — format version, thresholds, defaults.

All magic numbers used by recording, replay and the save format,
centralized here.
"""

# -- Save format ---------------------------------------------------------

FORMAT_VERSION: int = 1
"""Version written into every serialized recording."""

SUPPORTED_FORMAT_VERSIONS: frozenset[int] = frozenset({1})
"""Versions the parser accepts. Anything else is rejected."""

RECORDING_FILE_SUFFIX: str = ".cfg"

# -- Replay --------------------------------------------------------------

SNAP_THRESHOLD: float = 4.0
"""Distance above which a replayed entity is teleported to its recorded position."""

# -- Timing --------------------------------------------------------------

TICK_MS: float = 33.0
"""Default simulation step length in milliseconds (~30 ticks/s)."""

# -- Entities ------------------------------------------------------------

TEAM_SPECTATOR: int = 200
"""Team number of the spectator team in the host simulation."""

NO_PLAYER_ID: int = 0
"""Player id meaning 'no player attached'."""
