"""
core/data.py — TOML → level descriptors

Reads ``data/levels.toml`` once at startup and turns every ``[[level]]``
table into a frozen ``LevelDescriptor``.  Descriptors are read-only:
the level manager builds fresh entities from them on every load and
never writes back.

You define your level content in levels.toml.
You define the entity classes in components/.
This file connects them.

Usage:
    levels = load_levels()                     # data/levels.toml
    levels = parse_levels({"level": [...]})    # tests / inline data

Platform entries are either ``[x, y, w, h]`` arrays or inline tables
``{ x = .., y = .., w = .., h = .., bloody = true }``.  Positions are
``[x, y]`` arrays.
"""

from __future__ import annotations
try:
    import tomllib
except ModuleNotFoundError:  # Python < 3.11
    import tomli as tomllib
from pathlib import Path
from dataclasses import dataclass

from core import tuning
from core.constants import CHASE_DEFAULT_DELAY, CHASE_DEFAULT_SPEED


class LevelDataError(ValueError):
    """A level table is missing a field or has the wrong shape."""


@dataclass(frozen=True)
class PlatformSpec:
    x: float
    y: float
    w: float
    h: float
    bloody: bool = False


@dataclass(frozen=True)
class StageDescriptor:
    platforms: tuple[PlatformSpec, ...]
    goal: tuple[float, float] | None = None
    player_start: tuple[float, float] | None = None


@dataclass(frozen=True)
class ChaseSpec:
    """Scripted pursuit: spawn the chaser ``delay`` ticks after load."""
    spawn: tuple[float, float]
    delay: int = CHASE_DEFAULT_DELAY
    speed: float = CHASE_DEFAULT_SPEED


@dataclass(frozen=True)
class PeekSpec:
    x: float
    y: float
    w: float
    h: float
    tree: str = "peek_window"


@dataclass(frozen=True)
class StoryBeat:
    """Open ``tree`` the first time the player's centre passes ``x``."""
    x: float
    tree: str


@dataclass(frozen=True)
class LevelDescriptor:
    name: str
    player_start: tuple[float, float]
    platforms: tuple[PlatformSpec, ...] = ()
    goal: tuple[float, float] | None = None
    has_stages: bool = False
    stage1: StageDescriptor | None = None
    stage2: StageDescriptor | None = None
    has_key: bool = False
    key_position: tuple[float, float] | None = None
    has_door: bool = False
    door_position: tuple[float, float] | None = None
    # Narrative hooks
    call: str | None = None
    trigger_cutscene: bool = False
    chase: ChaseSpec | None = None
    peek: PeekSpec | None = None
    story_beats: tuple[StoryBeat, ...] = ()
    # Cosmetic flags (render/audio only)
    no_music: bool = False
    scary_music: bool = False
    bloody: bool = False
    glitch_title: bool = False


# ── Loading ─────────────────────────────────────────────────────────

def default_levels_path() -> Path:
    return Path(__file__).resolve().parent.parent / "data" / "levels.toml"


def load_levels(path: str | Path | None = None) -> tuple[LevelDescriptor, ...]:
    """Load every ``[[level]]`` table from *path* (default data/levels.toml)."""
    path = Path(path) if path is not None else default_levels_path()
    if not path.exists():
        raise LevelDataError(f"level file not found: {path}")
    with open(path, "rb") as f:
        data = tomllib.load(f)
    levels = parse_levels(data)
    print(f"[LEVEL] Loaded {len(levels)} levels from {path}")
    return levels


def parse_levels(data: dict) -> tuple[LevelDescriptor, ...]:
    """Build descriptors from an already-parsed ``{"level": [...]}`` dict."""
    raw_levels = data.get("level")
    if not isinstance(raw_levels, list) or not raw_levels:
        raise LevelDataError("expected at least one [[level]] table")
    return tuple(_parse_level(i, raw) for i, raw in enumerate(raw_levels))


def _parse_level(index: int, raw: dict) -> LevelDescriptor:
    where = f"level {index + 1}"
    if not isinstance(raw, dict):
        raise LevelDataError(f"{where}: expected a table")
    name = raw.get("name")
    if not isinstance(name, str):
        raise LevelDataError(f"{where}: missing 'name'")
    where = f"level {index + 1} ({name!r})"

    has_stages = bool(raw.get("has_stages", False))
    stage1 = _parse_stage(f"{where} stage1", raw["stage1"]) if "stage1" in raw else None
    stage2 = _parse_stage(f"{where} stage2", raw["stage2"]) if "stage2" in raw else None
    platforms = _parse_platforms(where, raw.get("platforms", []))
    goal = _point(where, "goal", raw["goal"]) if "goal" in raw else None

    if has_stages:
        if stage1 is None and not platforms:
            raise LevelDataError(f"{where}: has_stages needs [stage1] platforms")
        if stage2 is None:
            raise LevelDataError(f"{where}: has_stages needs [stage2]")
        if stage2.goal is None:
            raise LevelDataError(f"{where}: stage2 needs a 'goal'")
    else:
        if not platforms:
            raise LevelDataError(f"{where}: no platforms")
        if goal is None:
            raise LevelDataError(f"{where}: missing 'goal'")

    has_key = bool(raw.get("has_key", False))
    has_door = bool(raw.get("has_door", False))
    key_pos = _point(where, "key_position", raw["key_position"]) if "key_position" in raw else None
    door_pos = _point(where, "door_position", raw["door_position"]) if "door_position" in raw else None
    if has_key and key_pos is None:
        raise LevelDataError(f"{where}: has_key needs 'key_position'")
    if has_door and door_pos is None:
        raise LevelDataError(f"{where}: has_door needs 'door_position'")

    chase = None
    if "chase" in raw:
        c = raw["chase"]
        if not isinstance(c, dict):
            raise LevelDataError(f"{where}: 'chase' must be a table")
        chase = ChaseSpec(
            spawn=_point(where, "chase.spawn", c.get("spawn")),
            delay=int(c.get("delay", tuning.get("chase", "delay", CHASE_DEFAULT_DELAY))),
            speed=float(c.get("speed", tuning.get("chase", "speed", CHASE_DEFAULT_SPEED))),
        )

    peek = None
    if "peek" in raw:
        p = raw["peek"]
        try:
            peek = PeekSpec(float(p["x"]), float(p["y"]), float(p["w"]), float(p["h"]),
                            str(p.get("tree", "peek_window")))
        except (KeyError, TypeError, ValueError) as exc:
            raise LevelDataError(f"{where}: bad 'peek' table ({exc})") from exc

    try:
        beats = tuple(
            StoryBeat(float(b["x"]), str(b["tree"])) for b in raw.get("story_beats", [])
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise LevelDataError(f"{where}: bad 'story_beats' entry ({exc})") from exc

    return LevelDescriptor(
        name=name,
        player_start=_point(where, "player_start", raw.get("player_start")),
        platforms=platforms,
        goal=goal,
        has_stages=has_stages,
        stage1=stage1,
        stage2=stage2,
        has_key=has_key,
        key_position=key_pos,
        has_door=has_door,
        door_position=door_pos,
        call=raw.get("call"),
        trigger_cutscene=bool(raw.get("trigger_cutscene", False)),
        chase=chase,
        peek=peek,
        story_beats=beats,
        no_music=bool(raw.get("no_music", False)),
        scary_music=bool(raw.get("scary_music", False)),
        bloody=bool(raw.get("bloody", False)),
        glitch_title=bool(raw.get("glitch_title", False)),
    )


def _parse_stage(where: str, raw: dict) -> StageDescriptor:
    if not isinstance(raw, dict):
        raise LevelDataError(f"{where}: expected a table")
    platforms = _parse_platforms(where, raw.get("platforms", []))
    if not platforms:
        raise LevelDataError(f"{where}: no platforms")
    return StageDescriptor(
        platforms=platforms,
        goal=_point(where, "goal", raw["goal"]) if "goal" in raw else None,
        player_start=_point(where, "player_start", raw["player_start"])
        if "player_start" in raw else None,
    )


def _parse_platforms(where: str, raw: list) -> tuple[PlatformSpec, ...]:
    out: list[PlatformSpec] = []
    for i, p in enumerate(raw):
        try:
            if isinstance(p, dict):
                spec = PlatformSpec(float(p["x"]), float(p["y"]), float(p["w"]),
                                    float(p["h"]), bool(p.get("bloody", False)))
            else:
                x, y, w, h = p
                spec = PlatformSpec(float(x), float(y), float(w), float(h))
        except (KeyError, TypeError, ValueError) as exc:
            raise LevelDataError(f"{where}: bad platform #{i} {p!r}") from exc
        if spec.w <= 0 or spec.h <= 0:
            raise LevelDataError(f"{where}: platform #{i} has non-positive size")
        out.append(spec)
    return tuple(out)


def _point(where: str, key: str, value) -> tuple[float, float]:
    try:
        x, y = value
        return float(x), float(y)
    except (TypeError, ValueError) as exc:
        raise LevelDataError(f"{where}: '{key}' must be [x, y], got {value!r}") from exc
