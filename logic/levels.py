"""logic/levels.py — Level and stage loading, completion flow.

Builds fresh entities from a read-only ``LevelDescriptor`` every time a
level (or its second stage) is entered.  The player is the exception:
it is re-placed, never recreated.

Stage index only ever moves 1 → 2 inside a level; ``load_level`` always
starts again at stage 1.
"""

from __future__ import annotations
import math
from typing import TYPE_CHECKING

from core.constants import LEVEL_COMPLETE_TICKS
from core.data import PlatformSpec
from core.events import LevelComplete, MusicCue
from components import Platform, Goal, Key, Door, PeekPoint
from logic.game_mode import Trigger

if TYPE_CHECKING:
    from logic.session import GameSession


def _build_platforms(specs: tuple[PlatformSpec, ...]) -> tuple[Platform, ...]:
    return tuple(Platform(p.x, p.y, p.w, p.h, p.bloody) for p in specs)


def load_level(session: "GameSession", index: int) -> None:
    """Reset everything for level *index* (wrapped modulo the level count)."""
    index %= session.level_count
    level = session.levels[index]
    session.level_index = index
    session.stage = 1

    if level.has_stages:
        specs = level.stage1.platforms if level.stage1 else level.platforms
        session.goal = None          # the goal appears in stage 2
    else:
        specs = level.platforms
        session.goal = Goal(*level.goal, bloody=level.bloody)
    session.platforms = _build_platforms(specs)

    if level.has_key and level.key_position:
        phase = session.rng.uniform(0.0, 2 * math.pi)
        session.key = Key(*level.key_position, phase=phase)
    else:
        session.key = None

    if level.has_door and level.door_position:
        session.door = Door(*level.door_position)
    else:
        session.door = None

    if level.peek:
        pk = level.peek
        session.peek = PeekPoint(pk.x, pk.y, pk.w, pk.h, tree=pk.tree)
    else:
        session.peek = None
    session.pending_beats = sorted(level.story_beats, key=lambda b: b.x)

    session.chaser = None
    session.chase_timer = 0
    session.faint_timer = 0
    session.stage_timer = 0

    session.player.place(*level.player_start)
    session.player.grounded = False
    session.player.talking = False

    session.level_complete = False
    session.complete_timer = 0
    session.last_prompt = ""

    if level.no_music:
        track = "none"
    elif level.scary_music:
        track = "scary"
    else:
        track = "calm"
    session.bus.emit(MusicCue(track=track))

    # Story calls ring once per level index, no matter how often it's replayed
    if level.call and index not in session.calls_triggered:
        session.calls_triggered.add(index)
        ring_phone(session, level.call)

    print(f"[LEVEL] Loaded {index + 1}/{session.level_count}: {level.name}")


def load_stage2(session: "GameSession") -> bool:
    """Swap in stage-2 layout.  No-op (False) on single-stage levels."""
    level = session.level
    if not level.has_stages or level.stage2 is None:
        return False

    stage = level.stage2
    session.stage = 2
    session.platforms = _build_platforms(stage.platforms)
    session.goal = Goal(*stage.goal, bloody=level.bloody)
    session.key = None
    session.door = None
    session.stage_timer = 0
    start = stage.player_start or level.player_start
    session.player.place(*start)
    print(f"[LEVEL] {level.name}: stage 2")
    return True


def restart_level(session: "GameSession") -> None:
    load_level(session, session.level_index)


def complete_level(session: "GameSession", caught: bool = False) -> None:
    """Enter the display-only "complete" sub-state."""
    if session.level_complete:
        return
    session.level_complete = True
    session.complete_timer = 0
    session.bus.emit(LevelComplete(level=session.level_index, caught=caught))
    print(f"[LEVEL] Complete: {session.level.name}" + (" (caught)" if caught else ""))


def tick_complete(session: "GameSession") -> None:
    """Count the banner down, then move on."""
    session.complete_timer += 1
    if session.complete_timer > LEVEL_COMPLETE_TICKS:
        advance_after_complete(session)


def advance_after_complete(session: "GameSession") -> None:
    """Cut to the cutscene (flagged levels) or load the next level."""
    if session.level.trigger_cutscene:
        session.level_complete = False
        session.cutscene_timer = 0
        session.cutscene_phase = 0
        session.bus.emit(MusicCue(track="none"))
        session.mode.fire(Trigger.START_CUTSCENE)
    else:
        load_level(session, session.level_index + 1)


def ring_phone(session: "GameSession", tree_id: str) -> None:
    session.phone_ringing = True
    session.phone_ring_timer = 0
    session.pending_call = tree_id
