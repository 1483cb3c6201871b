"""scenes/menu_draw.py — Main menu and settings screens.

Each draw function returns ``{intent: Rect}`` for its buttons so the
scene can turn a click into the same intent a key press would give.
"""

from __future__ import annotations
import math
import pygame

from core.app import App
from core.constants import COLORS
from scenes.world_draw import draw_background
from ui.helpers import draw_button


def draw_main_menu(surface: pygame.Surface, app: App, tick: int,
                   mouse: tuple[int, int]) -> dict[str, pygame.Rect]:
    draw_background(surface)
    cx = surface.get_width() // 2
    bob = int(math.sin(tick * 0.05) * 4)
    app.draw_text(surface, "Mia's Adventure", cx, 150 + bob, COLORS["accent"],
                  font=app.font_xl, center=True)
    app.draw_text(surface, "a tiny platformer", cx, 215, (170, 170, 200), center=True)

    buttons: dict[str, pygame.Rect] = {}
    for i, (intent, label) in enumerate((("play", "PLAY"), ("settings", "SETTINGS"))):
        y = 300 + i * 70
        probe = pygame.Rect(cx - 110, y, 220, 48)
        buttons[intent] = draw_button(surface, app, cx, y, label,
                                      hovered=probe.collidepoint(mouse))
    return buttons


def draw_settings(surface: pygame.Surface, app: App, muted: bool,
                  mouse: tuple[int, int]) -> dict[str, pygame.Rect]:
    draw_background(surface)
    cx = surface.get_width() // 2
    app.draw_text(surface, "Settings", cx, 90, COLORS["accent"], font=app.font_xl, center=True)

    buttons: dict[str, pygame.Rect] = {}
    sound = "SOUND: OFF" if muted else "SOUND: ON"
    probe = pygame.Rect(cx - 110, 190, 220, 48)
    buttons["mute"] = draw_button(surface, app, cx, 190, sound,
                                  hovered=probe.collidepoint(mouse))

    lines = [
        "A / D or arrows   move",
        "W / Up / Space    jump",
        "E                 answer phone, use door, look",
        "Enter             next line / pick choice",
        "1-9               level select (or choice)",
        "R restart    M mute    Esc menu    F11 fullscreen",
    ]
    y = 270
    for line in lines:
        app.draw_text(surface, line, cx - 230, y, (200, 200, 220), font=app.font_sm)
        y += 24

    probe = pygame.Rect(cx - 110, 440, 220, 48)
    buttons["back"] = draw_button(surface, app, cx, 440, "BACK",
                                  hovered=probe.collidepoint(mouse))
    return buttons
