"""test_physics.py — Player physics and platform resolution.

Tests gravity, friction, landing, jumping and the pairwise platform
resolver with exact per-tick numbers.  No pygame needed.

Run:  python test_physics.py
"""
from __future__ import annotations
import sys, traceback
import tempfile
from pathlib import Path

from core import tuning
from core.constants import GRAVITY, FRICTION, JUMP_FORCE, MOVE_SPEED, PLAYER_HEIGHT
from core.events import EventBus, Jumped, Landed
from components import Player, Platform, Door, DoorState
from logic.physics import (
    PhysicsConfig, Controls, NO_INPUT, step_player, resolve_platform,
    push_out_of_door,
)


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

def close(a: float, b: float, tol: float = 1e-9) -> bool:
    return abs(a - b) <= tol


CFG = PhysicsConfig()
GROUND = Platform(0, 550, 800, 50)


def _grounded_player(x: float = 100.0) -> Player:
    p = Player()
    p.place(x, GROUND.y - PLAYER_HEIGHT)
    p.grounded = True
    return p


# ═════════════════════════════════════════════════════════════════════
#  1. Gravity and friction
# ═════════════════════════════════════════════════════════════════════

def test_gravity_and_friction():
    print("\n=== 1: Gravity + Friction ===")

    # ── 1a: vy grows by exactly GRAVITY each tick in free fall ───────
    p = Player()
    p.place(100, 0)
    prev_vy = p.vy
    steady = True
    for _ in range(20):
        step_player(p, NO_INPUT, [], CFG)
        if not close(p.vy - prev_vy, GRAVITY):
            steady = False
        prev_vy = p.vy
    check(steady, "1a: free fall adds GRAVITY to vy every tick",
          f"vy={p.vy:.3f}")
    check(not p.grounded, "1a: still airborne after 20 ticks", f"y={p.y:.2f}")

    # ── 1b: the bottom of the world is a floor ───────────────────────
    for _ in range(200):
        step_player(p, NO_INPUT, [], CFG)
    check(close(p.y, CFG.world_height - p.height) and p.vy == 0.0 and p.grounded,
          "1b: world floor clamps y, zeroes vy, grounds",
          f"y={p.y} vy={p.vy} grounded={p.grounded}")

    # ── 1c: friction decays vx geometrically, never to exactly 0 ─────
    p = _grounded_player(300)
    p.vx = 3.0
    for _ in range(10):
        step_player(p, NO_INPUT, [GROUND], CFG)
    expected = 3.0 * FRICTION ** 10
    check(close(p.vx, expected, 1e-9), "1c: |vx| == vx0 * FRICTION^n",
          f"vx={p.vx:.6f} expected={expected:.6f}")
    for _ in range(100):
        step_player(p, NO_INPUT, [GROUND], CFG)
    check(0.0 < p.vx < 1e-6, "1c: vx approaches but never reaches 0", f"vx={p.vx!r}")

    # ── 1d: held input sets vx directly, left wins over right ────────
    p = _grounded_player(300)
    step_player(p, Controls(right=True), [GROUND], CFG)
    check(p.vx == MOVE_SPEED and p.facing == 1, "1d: right sets vx=+MOVE_SPEED")
    step_player(p, Controls(left=True, right=True), [GROUND], CFG)
    check(p.vx == -MOVE_SPEED and p.facing == -1, "1d: left takes priority over right")


# ═════════════════════════════════════════════════════════════════════
#  2. Landing and jumping
# ═════════════════════════════════════════════════════════════════════

def test_landing_and_jumping():
    print("\n=== 2: Landing + Jumping ===")

    # ── 2a: fall onto the ground platform ─────────────────────────────
    bus = EventBus()
    p = Player()
    p.place(50, 480)
    step_player(p, NO_INPUT, [GROUND], CFG, bus)
    check(close(p.vy, 0.6) and close(p.y, 480.6) and not p.grounded,
          "2a: after 1 tick vy=0.6, y=480.6, not grounded",
          f"vy={p.vy} y={p.y} grounded={p.grounded}")

    ticks = 1
    while not p.grounded and ticks < 60:
        step_player(p, NO_INPUT, [GROUND], CFG, bus)
        ticks += 1
    check(p.y == 502.0 and p.vy == 0.0 and p.grounded,
          "2a: snaps to y=502 with vy=0 and grounded",
          f"y={p.y} vy={p.vy} ticks={ticks}")
    landed = [e for e in bus.pending() if isinstance(e, Landed)]
    check(len(landed) == 1, "2a: exactly one Landed event", f"got {len(landed)}")

    # ── 2b: resting on a platform is idempotent ──────────────────────
    p = _grounded_player(200)
    bus = EventBus()
    stable = True
    for _ in range(120):
        step_player(p, NO_INPUT, [GROUND], CFG, bus)
        if p.y != 502.0 or not p.grounded:
            stable = False
            break
    check(stable, "2b: resting player stays at y=502 for 120 ticks", f"y={p.y}")
    check(bus.pending_count() == 0, "2b: no Landed spam while resting",
          f"{bus.pending()}")

    # ── 2c: jump needs grounded ──────────────────────────────────────
    p = Player()
    p.place(200, 100)
    p.vy = 2.0
    step_player(p, Controls(jump=True), [], CFG)
    check(close(p.vy, 2.0 + GRAVITY), "2c: airborne jump changes nothing but gravity",
          f"vy={p.vy}")

    bus = EventBus()
    p = _grounded_player(200)
    step_player(p, Controls(jump=True), [GROUND], CFG, bus)
    check(close(p.vy, JUMP_FORCE + GRAVITY) and not p.grounded,
          "2c: grounded jump sets vy=JUMP_FORCE (then gravity)", f"vy={p.vy}")
    check(any(isinstance(e, Jumped) for e in bus.pending()), "2c: Jumped emitted")

    # ── 2d: full jump arc comes back down to the same surface ────────
    for _ in range(60):
        step_player(p, NO_INPUT, [GROUND], CFG, bus)
    check(p.grounded and p.y == 502.0, "2d: lands back on the ground after a jump",
          f"y={p.y}")


# ═════════════════════════════════════════════════════════════════════
#  3. Resolver cases
# ═════════════════════════════════════════════════════════════════════

def test_resolver():
    print("\n=== 3: Platform Resolver ===")

    # ── 3a: head bump against an underside ───────────────────────────
    ceiling = Platform(0, 300, 800, 20)
    p = Player()
    p.place(100, 325)
    p.vy = -10.0
    p.y += p.vy            # moved this tick, now overlapping the ceiling
    resolve_platform(p, ceiling)
    check(p.y == ceiling.bottom and p.vy == 0.0, "3a: underside hit pushes down, vy=0",
          f"y={p.y} vy={p.vy}")
    check(not p.grounded, "3a: head bump does not ground")

    # ── 3b: side hit from the left snaps to the wall's left edge ─────
    wall = Platform(400, 300, 40, 250)
    p = _grounded_player(360)
    for _ in range(10):
        step_player(p, Controls(right=True), [GROUND, wall], CFG)
    check(p.x == wall.x - p.width and p.vx == 0.0, "3b: walking into a wall stops at it",
          f"x={p.x} vx={p.vx}")

    # ── 3c: side hit from the right ──────────────────────────────────
    p = _grounded_player(450)
    for _ in range(10):
        step_player(p, Controls(left=True), [GROUND, wall], CFG)
    check(p.x == wall.x + wall.width, "3c: wall stops a body from the right",
          f"x={p.x}")

    # ── 3d: no overlap, no change ────────────────────────────────────
    p = Player()
    p.place(0, 0)
    p.vx, p.vy = 1.0, 1.0
    resolve_platform(p, Platform(500, 500, 10, 10))
    check((p.x, p.y, p.vx, p.vy) == (0.0, 0.0, 1.0, 1.0), "3d: separated boxes untouched")

    # ── 3e: diagonal overlap with no top/bottom/side match is left alone
    block = Platform(100, 100, 100, 100)
    p = Player()
    p.place(95, 180)
    before = (p.x, p.y)
    # ox = 27, oy = 20 and neither the top nor the underside test applies
    resolve_platform(p, block)
    check((p.x, p.y) == before, "3e: unresolved diagonal overlap is kept as is",
          f"{before} → {(p.x, p.y)}")


# ═════════════════════════════════════════════════════════════════════
#  4. Door blocking
# ═════════════════════════════════════════════════════════════════════

def test_door_blocking():
    print("\n=== 4: Door Blocking ===")
    door = Door(400, 470)
    p = _grounded_player(380)
    for _ in range(20):
        step_player(p, Controls(right=True), [GROUND], CFG)
        push_out_of_door(p, door)
    check(p.x + p.width <= door.x, "4a: closed door keeps the player out", f"x={p.x}")

    door.state = DoorState.OPEN
    door.open_progress = 1.0
    for _ in range(20):
        step_player(p, Controls(right=True), [GROUND], CFG)
        push_out_of_door(p, door)
    check(p.x > door.x, "4b: fully open door lets the player through", f"x={p.x}")

    p2 = _grounded_player(door.x + door.width - 10)
    moved = push_out_of_door(p2, Door(400, 470))
    check(moved and p2.x == door.x + door.width, "4c: pushed out the side it is closer to",
          f"x={p2.x}")


# ═════════════════════════════════════════════════════════════════════
#  5. Tuning overrides
# ═════════════════════════════════════════════════════════════════════

def test_tuning_overrides():
    print("\n=== 5: Tuning Overrides ===")
    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "tuning.toml"
        path.write_text("[physics]\ngravity = 1.0\n\n[chase]\nfaint_ticks = 10\n")
        try:
            check(tuning.load(path), "5a: file parsed")
            cfg = PhysicsConfig.from_tuning()
            check(cfg.gravity == 1.0 and cfg.friction == FRICTION,
                  "5b: overridden key wins, missing key keeps its default")

            path.write_text("[physics\ngravity = ")
            check(not tuning.reload(), "5c: broken file reported on reload")
            check(tuning.get("physics", "gravity") == 1.0, "5d: previous values survive")
        finally:
            tuning.reset()
    check(PhysicsConfig.from_tuning() == PhysicsConfig(), "5e: reset restores defaults")
    check(not tuning.load(Path("no/such/tuning.toml")) and tuning.get("chase", "delay", 7) == 7,
          "5f: missing file means no overrides")
    tuning.reset()


if __name__ == "__main__":
    sections = [
        ("Gravity + Friction", test_gravity_and_friction),
        ("Landing + Jumping", test_landing_and_jumping),
        ("Resolver", test_resolver),
        ("Door Blocking", test_door_blocking),
        ("Tuning Overrides", test_tuning_overrides),
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
    print(f"  Physics Tests: {_passed} passed, {_failed} failed  (total {total})")
    print(f"{'=' * 60}")
    sys.exit(1 if _failed else 0)
