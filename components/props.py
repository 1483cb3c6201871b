"""components.props — Static level furniture: platforms, goal, key, door.

Platforms and goals are inert boxes.  The key and door carry small
state machines; their transitions are methods here so every caller goes
through the same guard.  None of them touch pygame.
"""

from __future__ import annotations
import math
from dataclasses import dataclass
from enum import Enum

from core.collision import Box, intersects, padded
from core.constants import (
    GOAL_WIDTH, GOAL_HEIGHT, GOAL_ANIM_RATE,
    KEY_WIDTH, KEY_HEIGHT, KEY_SWING_RATE, KEY_SWING_ANGLE, KEY_SWING_REACH,
    DOOR_WIDTH, DOOR_HEIGHT, DOOR_INTERACT_RANGE,
    DOOR_OPEN_RATE, DOOR_ENTER_RATE,
)
from components.spatial import Body


@dataclass(frozen=True)
class Platform:
    """Immutable static box.  ``bloody`` is cosmetic only."""
    x: float
    y: float
    width: float
    height: float
    bloody: bool = False

    def box(self) -> Box:
        return Box(self.x, self.y, self.width, self.height)

    @property
    def bottom(self) -> float:
        return self.y + self.height


@dataclass
class Goal:
    """Level-exit flag.  A trigger region with a cosmetic wave phase."""
    x: float
    y: float
    bloody: bool = False
    width: float = GOAL_WIDTH
    height: float = GOAL_HEIGHT
    anim_phase: float = 0.0

    def box(self) -> Box:
        return Box(self.x, self.y, self.width, self.height)

    def update(self) -> None:
        self.anim_phase += GOAL_ANIM_RATE

    def touches(self, player: Body) -> bool:
        return intersects(player.box(), self.box())


@dataclass
class Key:
    """Collectible key hanging from a rope.

    The swing is cosmetic but it also moves the hitbox: collision is
    tested against the swung position, not the anchor.
    """
    x: float
    y: float
    phase: float = 0.0
    width: float = KEY_WIDTH
    height: float = KEY_HEIGHT
    collected: bool = False
    swing_angle: float = 0.0

    def update(self, tick: int) -> None:
        if not self.collected:
            self.swing_angle = math.sin(tick * KEY_SWING_RATE + self.phase) * KEY_SWING_ANGLE

    @property
    def swing_offset(self) -> float:
        return math.sin(self.swing_angle) * KEY_SWING_REACH

    def box(self) -> Box:
        return Box(self.x + self.swing_offset, self.y, self.width, self.height)

    def check_collision(self, player: Body) -> bool:
        """One-shot pickup test.  True exactly once, on the first touch."""
        if self.collected:
            return False
        if intersects(player.box(), self.box()):
            self.collected = True
            return True
        return False


class DoorState(Enum):
    LOCKED = "locked"
    UNLOCKED = "unlocked"
    OPEN = "open"
    ENTERED = "entered"


# action → (required state, next state).  Doors only ever move forward.
_DOOR_EDGES: dict[str, tuple[DoorState, DoorState]] = {
    "unlock": (DoorState.LOCKED, DoorState.UNLOCKED),
    "open":   (DoorState.UNLOCKED, DoorState.OPEN),
    "enter":  (DoorState.OPEN, DoorState.ENTERED),
}


@dataclass
class Door:
    """Locked door between stage 1 and stage 2.

    ``locked → unlocked → open → entered``.  Every transition is
    triggered by the player's interact action, never by collision.
    Out-of-order calls are no-ops that return False.
    """
    x: float
    y: float
    width: float = DOOR_WIDTH
    height: float = DOOR_HEIGHT
    state: DoorState = DoorState.LOCKED
    open_progress: float = 0.0
    enter_progress: float = 0.0

    def box(self) -> Box:
        return Box(self.x, self.y, self.width, self.height)

    # ── state machine ───────────────────────────────────────────────

    def _advance(self, action: str) -> bool:
        required, target = _DOOR_EDGES[action]
        if self.state is not required:
            return False
        if action == "enter" and self.open_progress < 1.0:
            return False
        self.state = target
        return True

    def unlock(self) -> bool:
        """Caller must already have checked that the key is collected."""
        return self._advance("unlock")

    def open(self) -> bool:
        return self._advance("open")

    def enter(self) -> bool:
        return self._advance("enter")

    def is_fully_open(self) -> bool:
        return self.state is DoorState.OPEN and self.open_progress >= 1.0

    # ── per-tick ────────────────────────────────────────────────────

    def update(self) -> None:
        if self.state is DoorState.OPEN and self.open_progress < 1.0:
            self.open_progress = min(1.0, self.open_progress + DOOR_OPEN_RATE)
        if self.state is DoorState.ENTERED and self.enter_progress < 1.0:
            self.enter_progress = min(1.0, self.enter_progress + DOOR_ENTER_RATE)

    # ── player queries ──────────────────────────────────────────────

    def is_near(self, player: Body) -> bool:
        """Within interaction range (horizontal padding only)."""
        return intersects(player.box(), padded(self.box(), DOOR_INTERACT_RANGE))

    def blocks_player(self, player: Body) -> bool:
        if self.is_fully_open():
            return False
        return intersects(player.box(), self.box())


@dataclass
class PeekPoint:
    """A window or gap Mia can look through (interact to peek)."""
    x: float
    y: float
    width: float
    height: float
    tree: str = "peek_window"
    seen: bool = False

    def box(self) -> Box:
        return Box(self.x, self.y, self.width, self.height)

    def contains(self, player: Body) -> bool:
        return intersects(player.box(), self.box())
