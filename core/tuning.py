"""core/tuning.py — Optional overrides for gameplay feel numbers.

``data/tuning.toml`` holds two flat tables, ``[physics]`` and
``[chase]``.  ``main.py`` loads it once; F5 in game re-reads it.  Code
reads a value with its built-in default as the fallback::

    gravity = tuning.get("physics", "gravity", GRAVITY)

Nothing is loaded until ``load()`` is called, so tests always see the
defaults from ``core.constants`` unless they load a file themselves.
A missing file means "no overrides"; a file that fails to parse on
reload leaves the previous values in place.
"""

from __future__ import annotations
from pathlib import Path

try:
    import tomllib
except ModuleNotFoundError:  # Python < 3.11
    import tomli as tomllib

DEFAULT_PATH = Path(__file__).resolve().parent.parent / "data" / "tuning.toml"

_values: dict[str, dict] = {}
_source: Path = DEFAULT_PATH


def load(path: str | Path | None = None) -> bool:
    """Read *path* (default data/tuning.toml).  Returns True if it parsed."""
    global _values, _source
    _source = Path(path) if path is not None else DEFAULT_PATH

    if not _source.exists():
        print(f"[TUNING] {_source} not found, using built-in defaults")
        _values = {}
        return False

    try:
        with open(_source, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as exc:
        print(f"[TUNING] {_source}: {exc} (keeping previous values)")
        return False

    _values = {name: table for name, table in data.items() if isinstance(table, dict)}
    n = sum(len(t) for t in _values.values())
    print(f"[TUNING] {n} overrides from {_source.name}")
    return True


def reload() -> bool:
    """Re-read the file last passed to ``load()``."""
    return load(_source)


def reset() -> None:
    """Drop every override."""
    global _values, _source
    _values = {}
    _source = DEFAULT_PATH


def get(table: str, key: str, default=None):
    """``[table].key`` from the file, else *default*."""
    return _values.get(table, {}).get(key, default)
