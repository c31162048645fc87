"""2D vector value type used for positions and aim points."""

from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class Vec2:
    """Immutable 2D vector.

    Attributes:
        x: Horizontal component.
        y: Vertical component.
    """

    x: float = 0.0
    y: float = 0.0

    def __add__(self, other: Vec2) -> Vec2:
        return Vec2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vec2) -> Vec2:
        return Vec2(self.x - other.x, self.y - other.y)

    def length(self) -> float:
        return math.hypot(self.x, self.y)

    def distance_to(self, other: Vec2) -> float:
        """Euclidean distance to another vector."""
        return (self - other).length()

    def to_text(self) -> str:
        """Format as ``"x,y"`` with full float precision."""
        return f"{float(self.x)!r},{float(self.y)!r}"

    @classmethod
    def from_text(cls, text: str) -> Vec2:
        """Parse the ``"x,y"`` form written by :meth:`to_text`.

        Raises:
            ValueError: If the text is not two comma-separated floats.
        """
        parts = text.split(",")
        if len(parts) != 2:
            raise ValueError(f"Expected 'x,y', got {text!r}")
        return cls(float(parts[0]), float(parts[1]))
