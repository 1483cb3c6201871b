"""logic/game_mode.py — Top-level game mode state machine.

Exactly one mode is active.  Every change goes through
``ModeMachine.fire(trigger)``, which looks the pair up in ``_EDGES``;
anything not in the table is rejected (returns False, mode unchanged).

    MENU ⇄ SETTINGS
    MENU → PLAYING                          (Play)
    PLAYING → CUTSCENE → PLAYING            (flagged level completed)
    PLAYING ⇄ DIALOGUE(kind)                (call, story beat, peek)
    DIALOGUE(kind) → DIALOGUE(kind')        (call → choice → response)
    PLAYING → TRANSITIONING("caught") → PLAYING
    PLAYING / DIALOGUE / CUTSCENE / TRANSITIONING → MENU   (Escape)

Only PLAYING runs the simulation step.  DIALOGUE and TRANSITIONING
freeze the player but the world is still drawn underneath.
"""

from __future__ import annotations
from enum import Enum, auto

from core.events import EventBus, ModeChanged


class Mode(Enum):
    MENU = auto()
    SETTINGS = auto()
    PLAYING = auto()
    CUTSCENE = auto()
    DIALOGUE = auto()
    TRANSITIONING = auto()


class DialogueKind(Enum):
    CALL = auto()        # answered phone call
    CHOICE = auto()      # waiting on a player choice
    RESPONSE = auto()    # lines that follow a choice
    STORY = auto()       # scripted story beat
    PEEK = auto()        # looking through an observation point


class Trigger(Enum):
    OPEN_SETTINGS = auto()
    CLOSE_SETTINGS = auto()
    PLAY = auto()
    START_CUTSCENE = auto()
    END_CUTSCENE = auto()
    OPEN_DIALOGUE = auto()
    CHAIN_DIALOGUE = auto()
    CLOSE_DIALOGUE = auto()
    CAUGHT = auto()
    TRANSITION_DONE = auto()
    ESCAPE = auto()


_EDGES: dict[tuple[Mode, Trigger], Mode] = {
    (Mode.MENU, Trigger.OPEN_SETTINGS): Mode.SETTINGS,
    (Mode.SETTINGS, Trigger.CLOSE_SETTINGS): Mode.MENU,
    (Mode.SETTINGS, Trigger.ESCAPE): Mode.MENU,
    (Mode.MENU, Trigger.PLAY): Mode.PLAYING,
    (Mode.PLAYING, Trigger.START_CUTSCENE): Mode.CUTSCENE,
    (Mode.CUTSCENE, Trigger.END_CUTSCENE): Mode.PLAYING,
    (Mode.PLAYING, Trigger.OPEN_DIALOGUE): Mode.DIALOGUE,
    (Mode.DIALOGUE, Trigger.CHAIN_DIALOGUE): Mode.DIALOGUE,
    (Mode.DIALOGUE, Trigger.CLOSE_DIALOGUE): Mode.PLAYING,
    (Mode.PLAYING, Trigger.CAUGHT): Mode.TRANSITIONING,
    (Mode.TRANSITIONING, Trigger.TRANSITION_DONE): Mode.PLAYING,
    (Mode.PLAYING, Trigger.ESCAPE): Mode.MENU,
    (Mode.DIALOGUE, Trigger.ESCAPE): Mode.MENU,
    (Mode.CUTSCENE, Trigger.ESCAPE): Mode.MENU,
    (Mode.TRANSITIONING, Trigger.ESCAPE): Mode.MENU,
}

# Triggers that must name their dialogue kind
_NEEDS_KIND = {Trigger.OPEN_DIALOGUE, Trigger.CHAIN_DIALOGUE}


class ModeMachine:
    """Holds the active mode plus its payload (dialogue kind / reason)."""

    def __init__(self, bus: EventBus | None = None):
        self.mode: Mode = Mode.MENU
        self.kind: DialogueKind | None = None
        self.reason: str = ""
        self._bus = bus

    # ── queries ─────────────────────────────────────────────────────

    @property
    def simulating(self) -> bool:
        """True only when the physics step may run this tick."""
        return self.mode is Mode.PLAYING

    @property
    def world_visible(self) -> bool:
        return self.mode in (Mode.PLAYING, Mode.DIALOGUE, Mode.TRANSITIONING)

    @property
    def in_dialogue(self) -> bool:
        return self.mode is Mode.DIALOGUE

    def can_fire(self, trigger: Trigger) -> bool:
        return (self.mode, trigger) in _EDGES

    def label(self) -> str:
        if self.mode is Mode.DIALOGUE and self.kind is not None:
            return f"DIALOGUE({self.kind.name})"
        if self.mode is Mode.TRANSITIONING:
            return f"TRANSITIONING({self.reason})"
        return self.mode.name

    # ── the one transition function ─────────────────────────────────

    def fire(self, trigger: Trigger, kind: DialogueKind | None = None,
             reason: str = "") -> bool:
        target = _EDGES.get((self.mode, trigger))
        if target is None:
            return False
        if trigger in _NEEDS_KIND and kind is None:
            return False

        old = self.label()
        self.mode = target
        self.kind = kind if target is Mode.DIALOGUE else None
        if target is Mode.TRANSITIONING:
            self.reason = reason or "caught"
        else:
            self.reason = ""

        new = self.label()
        print(f"[MODE] {old} -> {new}")
        if self._bus is not None:
            self._bus.emit(ModeChanged(old=old, new=new))
        return True

    def __repr__(self) -> str:
        return f"ModeMachine({self.label()})"
