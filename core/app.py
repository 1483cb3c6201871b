"""
core/app.py — Pygame window and frame driver

Owns the window, the clock and a small scene stack.  Every frame is
exactly one simulation tick: ``clock.tick(fps)`` only caps the rate.

    app = App()
    app.push_scene(GameScene(session, sound))
    app.run()

Scenes always draw to a fixed 800x600 play-field surface.  The window
can be resized or made fullscreen (F11); the play field is then scaled
to fit and letterboxed, and mouse positions are mapped back into
play-field coordinates before the scene sees them.
"""

from __future__ import annotations
import pygame

from core.constants import TICK_RATE, WORLD_WIDTH, WORLD_HEIGHT
from core.scene import Scene

_MOUSE_EVENTS = (pygame.MOUSEBUTTONDOWN, pygame.MOUSEBUTTONUP, pygame.MOUSEMOTION)
_FONT_FACE = "segoeui,arial,sans"


class App:
    def __init__(self, title: str = "Mia's Adventure",
                 width: int = WORLD_WIDTH, height: int = WORLD_HEIGHT):
        pygame.init()
        self.field_size = (width, height)
        self.field = pygame.Surface(self.field_size)
        self._window_size = (width, height)
        self.screen = pygame.display.set_mode(self._window_size, pygame.RESIZABLE)
        self.title = title
        pygame.display.set_caption(title)

        self.clock = pygame.time.Clock()
        self.fps = TICK_RATE
        self.running = True
        self.fullscreen = False
        self._scenes: list[Scene] = []

        self.font = pygame.font.SysFont(_FONT_FACE, 18)
        self.font_sm = pygame.font.SysFont(_FONT_FACE, 14)
        self.font_lg = pygame.font.SysFont(_FONT_FACE, 28, bold=True)
        self.font_xl = pygame.font.SysFont(_FONT_FACE, 48, bold=True)

    # -- Scenes --

    @property
    def scene(self) -> Scene | None:
        return self._scenes[-1] if self._scenes else None

    def push_scene(self, scene: Scene):
        if self.scene:
            self.scene.on_exit(self)
        self._scenes.append(scene)
        scene.on_enter(self)

    # -- Window --

    def set_title(self, title: str):
        """Change the window caption (the glitched-title levels call this a lot)."""
        if title != self.title:
            self.title = title
            pygame.display.set_caption(title)

    def toggle_fullscreen(self):
        self.fullscreen = not self.fullscreen
        if self.fullscreen:
            self.screen = pygame.display.set_mode((0, 0), pygame.FULLSCREEN)
        else:
            self.screen = pygame.display.set_mode(self._window_size, pygame.RESIZABLE)
        print(f"[APP] fullscreen={'on' if self.fullscreen else 'off'}")

    def viewport(self) -> pygame.Rect:
        """Where the play field lands on the window (aspect kept, centred)."""
        sw, sh = self.screen.get_size()
        fw, fh = self.field_size
        scale = min(sw / fw, sh / fh)
        w, h = int(fw * scale), int(fh * scale)
        return pygame.Rect((sw - w) // 2, (sh - h) // 2, w, h)

    def to_field(self, pos: tuple[int, int]) -> tuple[int, int]:
        """Window pixel → play-field pixel."""
        view = self.viewport()
        fw, fh = self.field_size
        x = (pos[0] - view.x) * fw / max(1, view.w)
        y = (pos[1] - view.y) * fh / max(1, view.h)
        return int(x), int(y)

    def _field_event(self, event: pygame.event.Event) -> pygame.event.Event:
        attrs = dict(event.dict)
        attrs["pos"] = self.to_field(event.pos)
        return pygame.event.Event(event.type, attrs)

    # -- Main loop --

    def run(self):
        while self.running and self.scene:
            self.clock.tick(self.fps)
            self._pump_events()

            scene = self.scene
            if scene is None:
                break
            scene.update(1.0 / self.fps, self)
            scene.draw(self.field, self)
            self._present()

        pygame.quit()

    def _pump_events(self):
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.KEYDOWN and event.key == pygame.K_F11:
                self.toggle_fullscreen()
            elif event.type == pygame.VIDEORESIZE:
                if not self.fullscreen:
                    self._window_size = (event.w, event.h)
                    self.screen = pygame.display.set_mode(self._window_size, pygame.RESIZABLE)
            elif self.scene:
                if event.type in _MOUSE_EVENTS:
                    event = self._field_event(event)
                self.scene.handle_event(event, self)

    def _present(self):
        view = self.viewport()
        self.screen.fill((0, 0, 0))
        if view.size == self.field_size:
            self.screen.blit(self.field, view.topleft)
        else:
            self.screen.blit(pygame.transform.scale(self.field, view.size), view.topleft)
        pygame.display.flip()

    # -- Text helpers --

    def draw_text(self, surface: pygame.Surface, text: str, x: int, y: int,
                  color=(255, 255, 255), font=None, center: bool = False):
        """Blit one line of text.  ``center`` centres it on *x*.  Returns the rect."""
        img = (font or self.font).render(text, True, color)
        if center:
            x -= img.get_width() // 2
        return surface.blit(img, (x, y))

    def draw_text_bg(self, surface: pygame.Surface, text: str, x: int, y: int,
                     color=(255, 255, 255), bg=(0, 0, 0, 160), font=None,
                     pad: int = 4):
        """Text on a translucent box, for prompts over the world."""
        img = (font or self.font).render(text, True, color)
        box = pygame.Surface((img.get_width() + pad * 2, img.get_height() + pad * 2),
                             pygame.SRCALPHA)
        box.fill(bg)
        surface.blit(box, (x - pad, y - pad))
        return surface.blit(img, (x, y))
