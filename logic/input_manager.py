"""logic/input_manager.py — Keys → intents.

The core never sees keycodes.  Each frame it gets a ``Controls`` for
held movement plus the set of intent names pressed this frame.  Which
keys mean what depends on the **input context**: Enter confirms in the
menu, skips a line in dialogue, and does nothing while platforming.

Intent names
    everywhere   menu  mute
    menu         confirm   (buttons inject play / settings / back / mute)
    gameplay     move_left  move_right  jump  (held)
                 interact  restart  toggle_debug  level_1 .. level_9
    dialogue     advance  choice_up  choice_down  choose_1 .. choose_9

Frame order (see scenes/game_scene.py)::

    feed(event) for every pygame event
    end_frame()                       # sample held keys
    tick(session, controls(), any_pressed())
    begin_frame()                     # forget this frame's presses
"""

from __future__ import annotations
from enum import Enum, auto
import pygame

from logic.physics import Controls


class InputContext(Enum):
    MENU = auto()        # main menu and settings
    GAMEPLAY = auto()    # platforming, faint, cutscene
    DIALOGUE = auto()    # a dialogue box is up


Bindings = dict[str, tuple[int, ...]]

_DIGITS = (pygame.K_1, pygame.K_2, pygame.K_3, pygame.K_4, pygame.K_5,
           pygame.K_6, pygame.K_7, pygame.K_8, pygame.K_9)

_ALWAYS: Bindings = {
    "menu": (pygame.K_ESCAPE,),
    "mute": (pygame.K_m,),
}

DEFAULT_BINDINGS: dict[InputContext, Bindings] = {
    InputContext.MENU: {
        **_ALWAYS,
        "confirm": (pygame.K_RETURN, pygame.K_SPACE),
    },
    InputContext.GAMEPLAY: {
        **_ALWAYS,
        "move_left": (pygame.K_a, pygame.K_LEFT),
        "move_right": (pygame.K_d, pygame.K_RIGHT),
        "jump": (pygame.K_w, pygame.K_UP, pygame.K_SPACE),
        "interact": (pygame.K_e,),
        "restart": (pygame.K_r,),
        "toggle_debug": (pygame.K_TAB,),
        **{f"level_{n}": (key,) for n, key in enumerate(_DIGITS, start=1)},
    },
    InputContext.DIALOGUE: {
        **_ALWAYS,
        "advance": (pygame.K_RETURN, pygame.K_SPACE),
        "choice_up": (pygame.K_UP, pygame.K_w),
        "choice_down": (pygame.K_DOWN, pygame.K_s),
        **{f"choose_{n}": (key,) for n, key in enumerate(_DIGITS, start=1)},
    },
}


class InputManager:
    """Maps KEYDOWN events to intents for the active context.

    ``just()`` is a rising edge (pressed this frame); ``held()`` is the
    key state sampled in ``end_frame()``.
    """

    def __init__(self, bindings: dict[InputContext, Bindings] | None = None):
        self.context = InputContext.MENU
        self._bindings = bindings or DEFAULT_BINDINGS
        self._pressed: set[str] = set()
        self._held: set[str] = set()

    # ── frame lifecycle ─────────────────────────────────────────────

    def begin_frame(self):
        self._pressed.clear()

    def feed(self, event: pygame.event.Event):
        if event.type != pygame.KEYDOWN:
            return
        for intent, keys in self._active().items():
            if event.key in keys:
                self._pressed.add(intent)

    def end_frame(self):
        state = pygame.key.get_pressed()
        self._held = {
            intent for intent, keys in self._active().items()
            if any(state[k] for k in keys)
        }

    def press(self, intent: str) -> None:
        """Inject an intent, e.g. from a clicked menu button."""
        self._pressed.add(intent)

    # ── queries ─────────────────────────────────────────────────────

    def just(self, intent: str) -> bool:
        return intent in self._pressed

    def held(self, intent: str) -> bool:
        return intent in self._held

    def any_pressed(self) -> set[str]:
        return set(self._pressed)

    def controls(self) -> Controls:
        """Held movement for this tick (empty outside gameplay)."""
        return Controls(
            left=self.held("move_left"),
            right=self.held("move_right"),
            jump=self.held("jump"),
        )

    def _active(self) -> Bindings:
        return self._bindings[self.context]
