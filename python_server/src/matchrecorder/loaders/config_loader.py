"""Recorder configuration — loads tunables from config/recorder.yaml.

Provides a single ``RecorderConfig`` dataclass that is loaded once at
startup and passed wherever the values are needed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from matchrecorder.util.constants import SNAP_THRESHOLD, TICK_MS

log = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "config/recorder.yaml"


@dataclass
class RecorderConfig:
    """All tunable recorder settings.

    Every field has a default so the recorder can start without the file.
    """

    # -- Timing ------------------------------------------------------
    tick_ms: float = TICK_MS

    # -- Replay ------------------------------------------------------
    snap_threshold: float = SNAP_THRESHOLD

    # -- Recording / storage -----------------------------------------
    recordings_dir: str = "recordings"
    session_name: str = ""
    autorecord: bool = False

    # -- Host --------------------------------------------------------
    initial_map: str = "default"

    # -- Operator API ------------------------------------------------
    rest_port: int = 8081
    operator_uids: list[int] = field(default_factory=list)


def load_recorder_config(path: str = DEFAULT_CONFIG_PATH) -> RecorderConfig:
    """Load recorder configuration from a YAML file.

    Missing keys fall back to dataclass defaults. If the file does not
    exist, a warning is logged and pure defaults are returned.
    """
    p = Path(path)
    if not p.exists():
        log.warning("Recorder config not found at %s, using defaults", p)
        return RecorderConfig()

    with p.open() as f:
        raw = yaml.safe_load(f) or {}

    if not isinstance(raw, dict):
        log.warning("Recorder config %s is not a mapping, using defaults", p)
        return RecorderConfig()

    unknown = sorted(k for k in raw if k not in RecorderConfig.__dataclass_fields__)
    if unknown:
        log.warning("Ignoring unknown recorder config keys: %s", ", ".join(unknown))

    log.info("Loaded recorder config from %s (%d keys)", p, len(raw))
    return RecorderConfig(**{
        k: v for k, v in raw.items()
        if k in RecorderConfig.__dataclass_fields__
    })
