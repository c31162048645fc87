"""Control keys — the input bitmask recorded per entity per tick.

One bit per recognized control key. The bitmask fits in 16 bits so it
serializes as a UINT16.
"""

from __future__ import annotations

from enum import IntFlag


class ControlKey(IntFlag):
    """Recognized control keys and their bit in the input bitmask."""

    UP = 1 << 0
    DOWN = 1 << 1
    LEFT = 1 << 2
    RIGHT = 1 << 3
    ACTION1 = 1 << 4
    ACTION2 = 1 << 5
    ACTION3 = 1 << 6
    USE = 1 << 7
    INVENTORY = 1 << 8
    PICKUP = 1 << 9
    JUMP = 1 << 10
    TAUNTS = 1 << 11
    MAP = 1 << 12
    BUBBLES = 1 << 13
    CROUCH = 1 << 14


ALL_KEYS: tuple[ControlKey, ...] = tuple(ControlKey)
"""Every recognized key, in bit order."""


def expand_bitmask(bitmask: int) -> dict[ControlKey, bool]:
    """Expand a bitmask into a pressed/released state for every key."""
    return {key: bool(bitmask & key) for key in ALL_KEYS}


def pack_keys(pressed: dict[ControlKey, bool]) -> int:
    """Pack per-key pressed states back into a bitmask."""
    bitmask = 0
    for key, is_down in pressed.items():
        if is_down:
            bitmask |= int(key)
    return bitmask
