"""core/events.py — Trigger events and the queue that carries them.

The simulation never plays a sound or draws a sprite.  It *signals*
what happened and the host reacts::

    session.bus.emit(Landed())              # core, during tick()
    bus.subscribe(Landed, board.on_land)    # host, once at startup
    bus.drain()                             # host, once after each tick

Every event class carries a ``name`` class attribute ("jumped",
"landed", ...).  Handlers are keyed on that name, so ``subscribe``
takes either the class or the bare string; ``"*"`` receives everything.

A handler that raises is logged and skipped; the rest still run.
Events a handler emits during ``drain()`` are delivered in the same
drain, after the ones already queued.
"""

from __future__ import annotations
import traceback
from collections import Counter, deque
from dataclasses import dataclass
from typing import Any, Callable, ClassVar


# ═══════════════════════════════════════════════════════════════════
#  Physics triggers
# ═══════════════════════════════════════════════════════════════════

@dataclass
class Jumped:
    name: ClassVar[str] = "jumped"


@dataclass
class Landed:
    name: ClassVar[str] = "landed"


@dataclass
class Collected:
    """The level key was picked up."""
    name: ClassVar[str] = "collected"


@dataclass
class LevelComplete:
    level: int = 0
    caught: bool = False
    name: ClassVar[str] = "level-complete"


# ═══════════════════════════════════════════════════════════════════
#  Door triggers
# ═══════════════════════════════════════════════════════════════════

@dataclass
class DoorUnlocked:
    name: ClassVar[str] = "door-unlocked"


@dataclass
class DoorLockedPrompt:
    """Interact on a locked door without the key — nothing happens."""
    name: ClassVar[str] = "door-locked"


@dataclass
class DoorOpened:
    name: ClassVar[str] = "door-opened"


@dataclass
class DoorEntered:
    name: ClassVar[str] = "door-entered"


# ═══════════════════════════════════════════════════════════════════
#  Narrative triggers
# ═══════════════════════════════════════════════════════════════════

@dataclass
class DialogueTyped:
    """One typewriter blip; ``speaker`` picks the voice."""
    speaker: str = ""
    name: ClassVar[str] = "dialogue-typed"


@dataclass
class PhoneRing:
    name: ClassVar[str] = "phone-ring"


@dataclass
class Whisper:
    """A cutscene caption started."""
    phase: int = 0
    name: ClassVar[str] = "whisper"


@dataclass
class ChaserSpawned:
    name: ClassVar[str] = "chaser-spawned"


@dataclass
class Caught:
    name: ClassVar[str] = "caught"


# ═══════════════════════════════════════════════════════════════════
#  Session / host triggers
# ═══════════════════════════════════════════════════════════════════

@dataclass
class MusicCue:
    """Switch background music: "menu", "calm", "scary" or "none"."""
    track: str = "calm"
    name: ClassVar[str] = "music"


@dataclass
class AudioInit:
    """First user gesture seen — the audio device may now be opened."""
    name: ClassVar[str] = "audio-init"


@dataclass
class MuteToggled:
    muted: bool = False
    name: ClassVar[str] = "mute"


@dataclass
class ModeChanged:
    old: str = ""
    new: str = ""
    name: ClassVar[str] = "mode-changed"


# ═══════════════════════════════════════════════════════════════════
#  Bus
# ═══════════════════════════════════════════════════════════════════

Handler = Callable[[Any], None]

# Upper bound on events delivered by one drain (handlers re-emitting forever)
MAX_EVENTS_PER_DRAIN = 10_000


class EventBus:
    def __init__(self):
        self._queue: deque[Any] = deque()
        self._handlers: dict[str, list[Handler]] = {}
        self._delivered: Counter[str] = Counter()

    def emit(self, event) -> None:
        self._queue.append(event)

    def subscribe(self, trigger: str | type, handler: Handler) -> None:
        key = trigger if isinstance(trigger, str) else trigger.name
        self._handlers.setdefault(key, []).append(handler)

    def drain(self) -> int:
        """Deliver everything queued, in order.  Returns how many events."""
        count = 0
        while self._queue:
            if count >= MAX_EVENTS_PER_DRAIN:
                print(f"[EVENT] drain stopped after {count} events, "
                      f"{len(self._queue)} dropped")
                self._queue.clear()
                break
            event = self._queue.popleft()
            count += 1
            self._delivered[event.name] += 1
            for handler in self._handlers.get(event.name, []) + self._handlers.get("*", []):
                try:
                    handler(event)
                except Exception as exc:
                    print(f"[EVENT] {event.name} handler {getattr(handler, '__name__', handler)} "
                          f"failed: {exc}")
                    traceback.print_exc()
        return count

    # ── inspection (tests, debug overlay) ───────────────────────────

    def pending(self) -> list[Any]:
        return list(self._queue)

    def pending_count(self) -> int:
        return len(self._queue)

    def clear(self) -> None:
        self._queue.clear()

    def stats(self) -> dict[str, int]:
        """Events delivered so far, by trigger name."""
        return dict(self._delivered)

    def __repr__(self) -> str:
        return f"EventBus(pending={len(self._queue)}, triggers={sorted(self._handlers)})"
