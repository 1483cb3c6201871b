"""logic/physics.py — Platformer physics / collision system.

One call per simulated tick moves a body, resolves it against every
platform in list order, clamps it to the play field and reports the
landing.  No ``dt``: every constant is per tick.

Resolution is pairwise, not a global solve.  Each platform may override
``grounded`` and the position independently, so a later platform can
undo an earlier correction.  When a body overlaps a platform but neither
the top, underside nor side test fires (typically a diagonal approach),
no correction is applied and the next tick re-evaluates.  Level layouts
are tuned around that behaviour, so it is kept as is.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable

from core import tuning
from core.collision import overlap
from core.constants import (
    GRAVITY, FRICTION, JUMP_FORCE, MOVE_SPEED, WORLD_WIDTH, WORLD_HEIGHT,
)
from core.events import EventBus, Jumped, Landed
from components import Body, Player, Platform, Door


@dataclass(frozen=True)
class PhysicsConfig:
    gravity: float = GRAVITY
    friction: float = FRICTION
    jump_force: float = JUMP_FORCE
    move_speed: float = MOVE_SPEED
    world_width: float = WORLD_WIDTH
    world_height: float = WORLD_HEIGHT

    @classmethod
    def from_tuning(cls) -> "PhysicsConfig":
        """Defaults overridden by the ``[physics]`` table of tuning.toml."""
        return cls(
            gravity=float(tuning.get("physics", "gravity", GRAVITY)),
            friction=float(tuning.get("physics", "friction", FRICTION)),
            jump_force=float(tuning.get("physics", "jump_force", JUMP_FORCE)),
            move_speed=float(tuning.get("physics", "move_speed", MOVE_SPEED)),
            world_width=float(tuning.get("physics", "world_width", WORLD_WIDTH)),
            world_height=float(tuning.get("physics", "world_height", WORLD_HEIGHT)),
        )


@dataclass(frozen=True)
class Controls:
    """Held-key state for one tick.  The core never sees keycodes."""
    left: bool = False
    right: bool = False
    jump: bool = False


NO_INPUT = Controls()


# ── Per-platform resolution ─────────────────────────────────────────

def resolve_platform(body: Body, platform: Platform) -> None:
    """Push *body* out of *platform* if they overlap.

    ``prev_bottom`` / ``prev_top`` are where the body was before this
    tick's vertical move; they decide top-landing vs. head-bump.  Only
    when neither applies do we fall back to comparing overlaps for a
    side hit.
    """
    ox, oy = overlap(body.box(), platform.box())
    if ox <= 0 or oy <= 0:
        return

    prev_bottom = body.y + body.height - body.vy
    prev_top = body.y - body.vy

    if prev_bottom <= platform.y and body.vy >= 0:
        # Landing on top
        body.y = platform.y - body.height
        body.vy = 0.0
        body.grounded = True
    elif prev_top >= platform.bottom and body.vy < 0:
        # Hitting the underside
        body.y = platform.bottom
        body.vy = 0.0
    elif ox < oy:
        # Side collision: snap to whichever edge the body came from
        if body.x < platform.x:
            body.x = platform.x - body.width
        else:
            body.x = platform.x + platform.width
        body.vx = 0.0


def clamp_to_world(body: Body, cfg: PhysicsConfig) -> None:
    """Keep *body* inside the play field; the bottom edge is a floor."""
    if body.x < 0:
        body.x = 0.0
    if body.x + body.width > cfg.world_width:
        body.x = cfg.world_width - body.width
    if body.y + body.height > cfg.world_height:
        body.y = cfg.world_height - body.height
        body.vy = 0.0
        body.grounded = True


def integrate(body: Body, platforms: Iterable[Platform], cfg: PhysicsConfig) -> bool:
    """Gravity, move, resolve, clamp.  Returns True on the landing tick."""
    body.vy += cfg.gravity
    body.x += body.vx
    body.y += body.vy

    was_grounded = body.grounded
    body.grounded = False
    for platform in platforms:
        resolve_platform(body, platform)
    clamp_to_world(body, cfg)

    return not was_grounded and body.grounded


# ── Player ──────────────────────────────────────────────────────────

def step_player(player: Player, controls: Controls, platforms: Iterable[Platform],
                cfg: PhysicsConfig, bus: EventBus | None = None) -> None:
    """Advance the player one tick from held input."""
    if controls.left:
        player.vx = -cfg.move_speed
    elif controls.right:
        player.vx = cfg.move_speed
    else:
        player.vx *= cfg.friction

    if player.vx > 0.01:
        player.facing = 1
    elif player.vx < -0.01:
        player.facing = -1

    if controls.jump and player.grounded:
        player.vy = cfg.jump_force
        player.grounded = False
        if bus is not None:
            bus.emit(Jumped())

    if integrate(player, platforms, cfg) and bus is not None:
        bus.emit(Landed())


def push_out_of_door(player: Body, door: Door) -> bool:
    """Shove the player back out of a closed door.  Returns True if moved."""
    if not door.blocks_player(player):
        return False
    if player.center_x < door.x + door.width / 2:
        player.x = door.x - player.width
    else:
        player.x = door.x + door.width
    player.vx = 0.0
    return True
