"""
scenes/game_scene.py — The one scene the game runs in

Feeds pygame input into the InputManager, advances the session by one
fixed tick per frame, drains the event bus, and draws the frame
snapshot.  Menus, settings, dialogue, the cutscene and the faint all
live in this scene; the mode machine decides which of them is drawn.

Tab toggles a debug line; F5 hot-reloads data/tuning.toml.
"""

from __future__ import annotations
import pygame

from core.app import App
from core.audio import SoundBoard
from core.scene import Scene
from core import tuning as tuning_mod
from logic.game_mode import Mode
from logic.input_manager import InputManager, InputContext
from logic.physics import PhysicsConfig
from logic.session import GameSession
from logic.tick import tick, start_game
from scenes.menu_draw import draw_main_menu, draw_settings
from scenes.world_draw import draw_world, draw_cutscene
from ui.dialogue_box import draw_dialogue, draw_phone


GLITCH_TITLES = [
    "M̷i̸a̵'̶s̷ ̴A̶d̸v̷e̸n̴t̷u̸r̵e̶", "MIA'S ADVENTURE", "h̷e̸l̵p̶ ̷m̸e̵",
    "R̶U̷N̸", "IT SEES YOU", "D̷O̸N̵'̶T̷ ̸L̵O̸O̶K̷",
]


class GameScene(Scene):
    def __init__(self, session: GameSession, sound: SoundBoard | None = None,
                 start_level: int | None = None):
        self.session = session
        self.sound = sound
        self.input = InputManager()
        self.show_debug = False
        self._buttons: dict[str, pygame.Rect] = {}
        self._choice_rects: list[pygame.Rect] = []
        self._mouse: tuple[int, int] = (0, 0)
        self._start_level = start_level

    def on_enter(self, app: App):
        print(f"[SCENE] GameScene ({self.session.level_count} levels)")
        if self._start_level is not None:
            # --level N skips the menu
            start_game(self.session, self._start_level)
            self._start_level = None
            self.session.bus.drain()

    # ── input ───────────────────────────────────────────────────────

    def _update_input_context(self):
        mode = self.session.mode.mode
        if mode is Mode.DIALOGUE:
            self.input.context = InputContext.DIALOGUE
        elif mode in (Mode.PLAYING, Mode.TRANSITIONING, Mode.CUTSCENE):
            self.input.context = InputContext.GAMEPLAY
        else:
            self.input.context = InputContext.MENU

    def handle_event(self, event: pygame.event.Event, app: App):
        self._update_input_context()
        self.input.feed(event)

        if event.type == pygame.MOUSEMOTION:
            self._mouse = event.pos
        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            for intent, rect in self._buttons.items():
                if rect.collidepoint(event.pos):
                    self.input.press(intent)
            for i, rect in enumerate(self._choice_rects):
                if rect.collidepoint(event.pos):
                    self.input.press(f"choose_{i + 1}")
        elif event.type == pygame.KEYDOWN and event.key == pygame.K_F5:
            tuning_mod.reload()
            self.session.physics = PhysicsConfig.from_tuning()
            print("[SCENE] tuning reloaded")

    # ── update ──────────────────────────────────────────────────────

    def update(self, dt: float, app: App):
        self._update_input_context()
        self.input.end_frame()
        intents = self.input.any_pressed()
        if "toggle_debug" in intents:
            self.show_debug = not self.show_debug

        tick(self.session, self.input.controls(), intents)
        self.session.bus.drain()
        self.input.begin_frame()

        level = self.session.level
        if level.glitch_title and self.session.mode.world_visible:
            app.set_title(GLITCH_TITLES[(self.session.tick_count // 20) % len(GLITCH_TITLES)])
        else:
            app.set_title("Mia's Adventure")

    # ── draw ────────────────────────────────────────────────────────

    def draw(self, surface: pygame.Surface, app: App):
        snap = self.session.snapshot()
        mode = self.session.mode.mode
        self._buttons = {}
        self._choice_rects = []

        if mode is Mode.MENU:
            self._buttons = draw_main_menu(surface, app, snap.tick, self._mouse)
        elif mode is Mode.SETTINGS:
            self._buttons = draw_settings(surface, app, snap.muted, self._mouse)
        elif mode is Mode.CUTSCENE:
            draw_cutscene(surface, app, snap)
        else:
            draw_world(surface, app, snap)
            draw_phone(surface, app, snap)
            if snap.dialogue is not None:
                self._choice_rects = draw_dialogue(surface, app, snap.dialogue)

        if self.show_debug:
            fps = app.clock.get_fps()
            line = f"{snap.mode}  tick {snap.tick}  fps {fps:.0f}  events {self.session.bus.stats()}"
            app.draw_text_bg(surface, line[:110], 8, surface.get_height() - 22,
                             (200, 255, 200), font=app.font_sm)
