"""components.spatial — Moving bodies.

All coordinates are pixels of the play field; velocities are px/tick.
"""

from __future__ import annotations
from dataclasses import dataclass

from core.collision import Box
from core.constants import (
    PLAYER_WIDTH, PLAYER_HEIGHT, CHASER_WIDTH, CHASER_HEIGHT,
    CHASE_DEFAULT_SPEED,
)


@dataclass
class Body:
    """A box that moves, falls and lands on platforms."""
    x: float = 0.0
    y: float = 0.0
    vx: float = 0.0
    vy: float = 0.0
    width: float = PLAYER_WIDTH
    height: float = PLAYER_HEIGHT
    grounded: bool = False

    def box(self) -> Box:
        return Box(self.x, self.y, self.width, self.height)

    @property
    def center_x(self) -> float:
        return self.x + self.width / 2

    def place(self, x: float, y: float) -> None:
        """Teleport to (x, y) and stop dead."""
        self.x = float(x)
        self.y = float(y)
        self.vx = 0.0
        self.vy = 0.0


@dataclass
class Player(Body):
    """Mia.  One instance lives for the whole session.

    The player is never recreated between levels, only re-placed, so
    cosmetic state such as ``talking`` survives level loads.
    """
    width: float = PLAYER_WIDTH
    height: float = PLAYER_HEIGHT
    facing: int = 1           # +1 right, -1 left (cosmetic)
    talking: bool = False     # mouth animation while the Narrator speaks


@dataclass
class Chaser(Body):
    """The thing that follows Mia in the chase level."""
    width: float = CHASER_WIDTH
    height: float = CHASER_HEIGHT
    speed: float = CHASE_DEFAULT_SPEED
