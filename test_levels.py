"""test_levels.py — Level descriptors, level loading and stage swaps.

Loads the shipped data/levels.toml, then exercises load_level /
load_stage2 / restart_level on a seeded GameSession.  Also checks that
malformed level tables are rejected with LevelDataError.

Run:  python test_levels.py
"""
from __future__ import annotations
import sys, traceback
from pathlib import Path

from core.data import LevelDataError, load_levels, parse_levels
from core.events import MusicCue
from logic.levels import load_level, load_stage2, restart_level
from logic.session import GameSession


# ── Test harness ─────────────────────────────────────────────────────

_passed = 0
_failed = 0

def ok(label: str):
    global _passed
    _passed += 1
    print(f"  [PASS] {label}")

def fail(label: str, detail: str = ""):
    global _failed
    _failed += 1
    msg = f"  [FAIL] {label}"
    if detail:
        msg += f" — {detail}"
    print(msg)

def check(cond: bool, label: str, detail: str = ""):
    if cond:
        ok(label)
    else:
        fail(label, detail)
        raise AssertionError(f"{label}: {detail}")


LEVELS = load_levels()

LEVEL_LOCK_AND_KEY = 8
LEVEL_NEW_DAWN = 7


def _session(seed: int = 1) -> GameSession:
    return GameSession(LEVELS, seed=seed)


def _music(session: GameSession) -> list[str]:
    return [e.track for e in session.bus.pending() if isinstance(e, MusicCue)]


def _raises(data: dict) -> bool:
    try:
        parse_levels(data)
    except LevelDataError:
        return True
    return False


def _minimal(**extra) -> dict:
    level = {"name": "t", "player_start": [0, 0], "goal": [10, 10],
             "platforms": [[0, 550, 800, 50]]}
    level.update(extra)
    return {"level": [level]}


# ═════════════════════════════════════════════════════════════════════
#  1. Descriptor data
# ═════════════════════════════════════════════════════════════════════

def test_descriptors():
    print("\n=== 1: Level Descriptors ===")
    check(len(LEVELS) == 10, "1a: ten levels shipped", f"got {len(LEVELS)}")
    check(LEVELS[0].name == "Getting Started" and LEVELS[0].player_start == (50.0, 480.0),
          "1b: level 1 name and start")
    check(len(LEVELS[0].platforms) == 4 and LEVELS[0].platforms[0].w == 800,
          "1c: level 1 platforms parsed")

    lk = LEVELS[LEVEL_LOCK_AND_KEY]
    check(lk.has_stages and lk.stage1 is not None and lk.stage2 is not None,
          "1d: Lock & Key has two stages")
    check(lk.has_key and lk.key_position == (400.0, 150.0), "1e: key position")
    check(lk.has_door and lk.door_position == (700.0, 470.0), "1f: door position")
    check(lk.goal is None and lk.stage2.goal == (720.0, 470.0), "1g: goal only in stage 2")

    check(LEVELS[6].trigger_cutscene and LEVELS[6].glitch_title, "1h: RUN flags")
    check(LEVELS[6].platforms[-1].bloody, "1i: inline-table platform keeps bloody flag")

    chase = LEVELS[9]
    check(chase.chase is not None and chase.chase.delay == 420 and chase.chase.spawn == (0.0, 480.0),
          "1j: chase table parsed")
    check(chase.peek is not None and chase.peek.tree == "peek_window", "1k: peek table parsed")
    check(len(chase.story_beats) == 1 and chase.story_beats[0].tree == "chase_warning",
          "1l: story beat parsed")


def test_malformed_levels():
    print("\n=== 2: Malformed Level Data ===")
    check(_raises({}), "2a: no [[level]] tables")
    check(_raises({"level": []}), "2b: empty level list")
    check(_raises({"level": [{"player_start": [0, 0], "goal": [1, 1],
                              "platforms": [[0, 0, 1, 1]]}]}), "2c: missing name")
    bad = _minimal()
    del bad["level"][0]["goal"]
    check(_raises(bad), "2d: single-stage level without goal")
    check(_raises(_minimal(platforms=[[0, 0, 10]])), "2e: platform with three numbers")
    check(_raises(_minimal(platforms=[[0, 0, 0, 10]])), "2f: zero-width platform")
    check(_raises(_minimal(platforms=[{"x": 0, "y": 0, "w": 5}])), "2g: table platform missing h")
    check(_raises(_minimal(player_start=[1])), "2h: start with one coordinate")
    check(_raises(_minimal(has_key=True)), "2i: has_key without key_position")
    check(_raises(_minimal(has_door=True)), "2j: has_door without door_position")
    check(_raises(_minimal(has_stages=True, stage1={"platforms": [[0, 0, 5, 5]]},
                           stage2={"platforms": [[0, 0, 5, 5]]})),
          "2k: stage2 without goal")
    check(_raises(_minimal(has_stages=True, stage1={"platforms": [[0, 0, 5, 5]]})),
          "2k: has_stages without a second stage")
    check(_raises(_minimal(chase=3)), "2l: chase that is not a table")
    check(_raises(_minimal(peek={"x": 1})), "2m: incomplete peek table")
    check(_raises(_minimal(story_beats=[{"x": 5}])), "2n: story beat without tree")

    try:
        load_levels(Path(__file__).parent / "data" / "no_such_levels.toml")
        check(False, "2o: missing file raises LevelDataError")
    except LevelDataError:
        ok("2o: missing file raises LevelDataError")

    check(isinstance(LevelDataError("x"), ValueError), "2p: LevelDataError is a ValueError")
    levels = parse_levels(_minimal(chase={"spawn": [0, 0]}))
    check(levels[0].chase.delay == 600 and levels[0].chase.speed == 2.2,
          "2q: chase defaults fill missing delay/speed")


# ═════════════════════════════════════════════════════════════════════
#  3. load_level
# ═════════════════════════════════════════════════════════════════════

def test_load_level():
    print("\n=== 3: load_level ===")
    s = _session()

    load_level(s, 0)
    check(s.level_index == 0 and s.stage == 1, "3a: level 1 loaded at stage 1")
    check(len(s.platforms) == 4 and s.goal is not None, "3b: platforms and goal built")
    check(s.key is None and s.door is None and s.chaser is None, "3c: no key/door/chaser")
    check((s.player.x, s.player.y, s.player.vx, s.player.vy) == (50.0, 480.0, 0.0, 0.0),
          "3d: player placed at start with zero velocity")
    check(_music(s)[-1] == "calm", "3e: ordinary level cues calm music")

    # ── wrap-around ──────────────────────────────────────────────────
    load_level(s, 10)
    check(s.level_index == 0, "3f: index == count wraps to 0", f"{s.level_index}")
    load_level(s, -1)
    check(s.level_index == 9, "3g: negative index wraps from the end", f"{s.level_index}")
    load_level(s, 23)
    check(s.level_index == 3, "3h: large index wraps modulo count")

    # ── music cues ───────────────────────────────────────────────────
    s.bus.clear()
    load_level(s, 5)
    check(_music(s) == ["none"], "3i: no_music level cues silence", f"{_music(s)}")
    s.bus.clear()
    load_level(s, 6)
    check(_music(s) == ["scary"], "3j: scary level cues scary music")

    # ── the player is the same object across loads ───────────────────
    p = s.player
    load_level(s, 2)
    check(s.player is p, "3k: the player is re-placed, never recreated")

    # ── stale state is cleared ───────────────────────────────────────
    s.level_complete = True
    s.complete_timer = 50
    s.chase_timer = 99
    load_level(s, 9)
    check(not s.level_complete and s.complete_timer == 0 and s.chase_timer == 0,
          "3l: complete flag and timers reset")
    check(s.peek is not None and len(s.pending_beats) == 1, "3m: peek + story beats built")


def test_key_phase_seeded():
    print("\n=== 4: Seeded Key Phase ===")
    a, b, c = _session(5), _session(5), _session(6)
    for s in (a, b, c):
        load_level(s, LEVEL_LOCK_AND_KEY)
    check(a.key.phase == b.key.phase, "4a: same seed gives same key phase")
    check(a.key.phase != c.key.phase, "4b: different seed gives a different phase")
    check(0.0 <= a.key.phase <= 6.3, "4c: phase is an angle")


# ═════════════════════════════════════════════════════════════════════
#  5. Stages
# ═════════════════════════════════════════════════════════════════════

def test_stages():
    print("\n=== 5: Stages ===")

    # ── 5a: stage isolation on a single-stage level ──────────────────
    s = _session()
    load_level(s, 0)
    s.player.place(321, 123)
    platforms, goal = s.platforms, s.goal
    changed = load_stage2(s)
    check(changed is False, "5a: load_stage2 on a single-stage level returns False")
    check(s.platforms is platforms and s.goal is goal and s.stage == 1,
          "5a: platforms, goal and stage untouched")
    check((s.player.x, s.player.y) == (321.0, 123.0), "5a: player position untouched")

    # ── 5b: stage 2 swaps layout, goal and start ─────────────────────
    s = _session()
    load_level(s, LEVEL_LOCK_AND_KEY)
    check(s.goal is None and s.key is not None and s.door is not None,
          "5b: stage 1 has key and door but no goal")
    check(len(s.platforms) == len(LEVELS[LEVEL_LOCK_AND_KEY].stage1.platforms),
          "5b: stage 1 platforms in use")
    changed = load_stage2(s)
    stage2 = LEVELS[LEVEL_LOCK_AND_KEY].stage2
    check(changed and s.stage == 2, "5b: stage 2 loaded")
    check(s.goal is not None and (s.goal.x, s.goal.y) == stage2.goal,
          "5b: goal comes from stage 2", f"{s.goal}")
    check(s.key is None and s.door is None, "5b: key and door cleared")
    check(len(s.platforms) == len(stage2.platforms), "5b: stage 2 platforms in use")
    check((s.player.x, s.player.y) == stage2.player_start, "5b: player moved to stage-2 start")

    # ── 5c: reloading the level always goes back to stage 1 ──────────
    restart_level(s)
    check(s.stage == 1 and s.goal is None and s.door is not None,
          "5c: restart returns to stage 1")


# ═════════════════════════════════════════════════════════════════════
#  6. Scripted calls
# ═════════════════════════════════════════════════════════════════════

def test_calls_once():
    print("\n=== 6: Calls Ring Once ===")
    s = _session()
    load_level(s, LEVEL_NEW_DAWN)
    check(s.phone_ringing and s.pending_call == "level8_call", "6a: level 8 call rings")

    s.phone_ringing = False
    s.pending_call = None
    restart_level(s)
    check(not s.phone_ringing, "6b: restarting does not ring again")

    load_level(s, 0)
    load_level(s, LEVEL_NEW_DAWN)
    check(not s.phone_ringing, "6c: revisiting the level does not ring again")

    load_level(s, LEVEL_LOCK_AND_KEY)
    check(s.phone_ringing and s.pending_call == "level9_call", "6d: level 9 has its own call")


if __name__ == "__main__":
    sections = [
        ("Descriptors", test_descriptors),
        ("Malformed Levels", test_malformed_levels),
        ("load_level", test_load_level),
        ("Seeded Key Phase", test_key_phase_seeded),
        ("Stages", test_stages),
        ("Calls Once", test_calls_once),
    ]

    for name, fn in sections:
        try:
            fn()
        except AssertionError:
            pass
        except Exception:
            _failed += 1
            print(f"\n  [CRASH] {name} — unhandled exception:")
            traceback.print_exc()

    total = _passed + _failed
    print(f"\n{'=' * 60}")
    print(f"  Level Tests: {_passed} passed, {_failed} failed  (total {total})")
    print(f"{'=' * 60}")
    sys.exit(1 if _failed else 0)
