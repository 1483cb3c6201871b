"""logic/chase.py — Scripted pursuit for levels with a ``[chase]`` table.

Timeline for one chase level::

    load → chase_timer counts up → == delay: Chaser spawns
         → chaser walks toward Mia every simulated tick
         → contact: TRANSITIONING("caught"), Mia faints
         → faint_timer reaches faint_ticks: back to PLAYING, level complete

Reaching the goal before contact ends the level normally.
"""

from __future__ import annotations
from typing import TYPE_CHECKING

from core.collision import intersects
from core.events import ChaserSpawned, Caught
from components import Chaser
from logic.game_mode import Trigger
from logic.levels import complete_level
from logic.physics import integrate

if TYPE_CHECKING:
    from logic.session import GameSession


def chase_system(session: "GameSession") -> None:
    """One simulated tick of the chase.  Only called while PLAYING."""
    spec = session.level.chase
    if spec is None or session.level_complete:
        return

    if session.chaser is None:
        session.chase_timer += 1
        if session.chase_timer >= spec.delay:
            session.chaser = Chaser(speed=spec.speed)
            session.chaser.place(*spec.spawn)
            session.bus.emit(ChaserSpawned())
            print(f"[CHASE] spawned at {spec.spawn} after {session.chase_timer} ticks")
        return

    chaser = session.chaser
    step_chaser(chaser, session.player.center_x)
    integrate(chaser, session.platforms, session.physics)

    if intersects(chaser.box(), session.player.box()):
        catch_player(session)


def step_chaser(chaser: Chaser, target_x: float) -> None:
    """Point the chaser's horizontal speed at *target_x*."""
    dx = target_x - chaser.center_x
    if abs(dx) <= chaser.speed:
        chaser.vx = 0.0
    elif dx > 0:
        chaser.vx = chaser.speed
    else:
        chaser.vx = -chaser.speed


def catch_player(session: "GameSession") -> bool:
    if not session.mode.fire(Trigger.CAUGHT, reason="caught"):
        return False
    session.player.vx = 0.0
    session.player.vy = 0.0
    session.faint_timer = 0
    session.bus.emit(Caught())
    print("[CHASE] caught")
    return True


def faint_system(session: "GameSession") -> None:
    """Run the faint counter while TRANSITIONING."""
    session.faint_timer += 1
    if session.faint_timer < session.faint_ticks:
        return
    session.faint_timer = 0
    session.chaser = None
    session.chase_timer = 0
    if session.mode.fire(Trigger.TRANSITION_DONE):
        complete_level(session, caught=True)
