"""test_props.py — Key, door, goal and peek-point behaviour.

Covers the one-shot key pickup, the forward-only door state machine,
door proximity and the goal trigger.  No pygame needed.

Run:  python test_props.py
"""
from __future__ import annotations
import sys, traceback

from core.constants import DOOR_INTERACT_RANGE
from components import Player, Key, Door, DoorState, Goal, PeekPoint


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


def _player_at(x: float, y: float) -> Player:
    p = Player()
    p.place(x, y)
    return p


def _ramp_open(door: Door, ticks: int = 30) -> None:
    for _ in range(ticks):
        door.update()


# ═════════════════════════════════════════════════════════════════════
#  1. Key
# ═════════════════════════════════════════════════════════════════════

def test_key():
    print("\n=== 1: Key ===")

    # ── 1a: pickup is one-shot ───────────────────────────────────────
    key = Key(400, 150)
    p = _player_at(395, 140)
    first = key.check_collision(p)
    second = key.check_collision(p)
    check(first is True and key.collected, "1a: first overlapping check collects")
    check(second is False, "1a: second identical check returns False")

    # ── 1b: no pickup without overlap ────────────────────────────────
    key = Key(400, 150)
    check(not key.check_collision(_player_at(100, 400)) and not key.collected,
          "1b: distant player does not collect")

    # ── 1c: the swing moves the hitbox ───────────────────────────────
    key = Key(400, 150, phase=0.0)
    key.update(60)                  # sin(1.0) * 0.15 rad of swing
    check(key.swing_angle != 0.0 and key.box().x != key.x,
          "1c: swing offsets the collision box", f"box.x={key.box().x:.3f}")
    for t in range(0, 400, 7):
        key.update(t)
        if abs(key.swing_angle) > 0.15 + 1e-9:
            check(False, "1c: swing stays within ±KEY_SWING_ANGLE", f"{key.swing_angle}")
    ok("1c: swing stays within ±KEY_SWING_ANGLE")

    # ── 1d: a collected key stops swinging ───────────────────────────
    key.collected = True
    frozen = key.swing_angle
    key.update(1234)
    check(key.swing_angle == frozen, "1d: collected key no longer animates")


# ═════════════════════════════════════════════════════════════════════
#  2. Door state machine
# ═════════════════════════════════════════════════════════════════════

def test_door_state_machine():
    print("\n=== 2: Door ===")

    # ── 2a: forward-only — open before unlock is refused ─────────────
    door = Door(700, 470)
    check(door.open() is False and door.state is DoorState.LOCKED,
          "2a: open() on a locked door returns False, stays locked")
    check(door.enter() is False and door.state is DoorState.LOCKED,
          "2a: enter() on a locked door returns False")

    # ── 2b: unlock → open → enter, repeats refused ───────────────────
    door = Door(700, 470)
    check(door.unlock() is True and door.state is DoorState.UNLOCKED, "2b: unlock()")
    check(door.unlock() is False, "2b: second unlock() refused")
    check(door.open() is True and door.state is DoorState.OPEN, "2b: open()")
    check(door.open() is False, "2b: second open() refused")
    check(door.enter() is False, "2b: enter() waits for the open animation",
          f"progress={door.open_progress}")
    _ramp_open(door)
    check(door.is_fully_open() and door.open_progress == 1.0,
          "2b: open_progress ramps and clamps at 1.0")
    check(door.enter() is True and door.state is DoorState.ENTERED, "2b: enter()")
    check(door.enter() is False, "2b: second enter() refused")
    check(door.unlock() is False and door.open() is False,
          "2b: no transition ever goes backwards")

    # ── 2c: enter ramp ───────────────────────────────────────────────
    for _ in range(40):
        door.update()
    check(door.enter_progress == 1.0, "2c: enter_progress clamps at 1.0")

    # ── 2d: open progress only ramps while OPEN ──────────────────────
    door = Door(700, 470)
    _ramp_open(door, 10)
    check(door.open_progress == 0.0, "2d: locked door does not animate")


def test_door_proximity():
    print("\n=== 3: Door Proximity ===")
    door = Door(700, 470)

    near_left = _player_at(700 - 32 - DOOR_INTERACT_RANGE + 1, 502)
    check(door.is_near(near_left), "3a: within range on the left")

    far_left = _player_at(700 - 32 - DOOR_INTERACT_RANGE - 1, 502)
    check(not door.is_near(far_left), "3b: just outside range on the left")

    near_right = _player_at(750 + DOOR_INTERACT_RANGE - 1, 502)
    check(door.is_near(near_right), "3c: within range on the right")

    above = _player_at(710, 300)
    check(not door.is_near(above), "3d: range is horizontal only")

    check(door.blocks_player(_player_at(690, 502)), "3e: closed door blocks overlap")
    door.state = DoorState.OPEN
    door.open_progress = 0.5
    check(door.blocks_player(_player_at(690, 502)), "3f: half-open door still blocks")
    door.open_progress = 1.0
    check(not door.blocks_player(_player_at(690, 502)), "3g: fully open door lets through")


# ═════════════════════════════════════════════════════════════════════
#  4. Goal + peek point
# ═════════════════════════════════════════════════════════════════════

def test_goal_and_peek():
    print("\n=== 4: Goal + Peek ===")
    goal = Goal(700, 490)
    check(goal.touches(_player_at(690, 500)), "4a: overlapping player touches goal")
    check(not goal.touches(_player_at(600, 500)), "4b: distant player does not")
    check(not goal.touches(_player_at(700 - 32, 500)), "4c: edge contact is not overlap")

    phase = goal.anim_phase
    goal.update()
    check(goal.anim_phase > phase, "4d: goal animates every update")

    peek = PeekPoint(120, 490, 40, 60)
    check(peek.contains(_player_at(130, 500)), "4e: peek point overlap")
    check(peek.tree == "peek_window" and not peek.seen, "4f: default tree, unseen")


if __name__ == "__main__":
    sections = [
        ("Key", test_key),
        ("Door", test_door_state_machine),
        ("Door Proximity", test_door_proximity),
        ("Goal + Peek", test_goal_and_peek),
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
    print(f"  Prop Tests: {_passed} passed, {_failed} failed  (total {total})")
    print(f"{'=' * 60}")
    sys.exit(1 if _failed else 0)
