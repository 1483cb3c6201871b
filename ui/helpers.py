"""ui.helpers — Shared drawing utilities for overlays and panels."""

from __future__ import annotations
import pygame


def draw_overlay(surface: pygame.Surface, alpha: int = 200) -> None:
    """Full-screen semi-transparent dark overlay."""
    overlay = pygame.Surface(surface.get_size(), pygame.SRCALPHA)
    overlay.fill((0, 0, 0, alpha))
    surface.blit(overlay, (0, 0))


def draw_panel(surface: pygame.Surface, rect: pygame.Rect,
               fill=(20, 20, 40, 230), border=(233, 69, 96)) -> None:
    """Rounded translucent box with a 2 px border."""
    panel = pygame.Surface(rect.size, pygame.SRCALPHA)
    pygame.draw.rect(panel, fill, panel.get_rect(), border_radius=10)
    surface.blit(panel, rect.topleft)
    pygame.draw.rect(surface, border, rect, 2, border_radius=10)


def wrap_text(font: pygame.font.Font, text: str, width: int) -> list[str]:
    """Greedy word wrap to *width* pixels."""
    lines: list[str] = []
    line = ""
    for word in text.split(" "):
        trial = f"{line} {word}" if line else word
        if font.size(trial)[0] <= width or not line:
            line = trial
        else:
            lines.append(line)
            line = word
    if line:
        lines.append(line)
    return lines


# ── buttons ────────────────────────────────────────────────────────

BUTTON_W = 220
BUTTON_H = 48


def draw_button(
    surface: pygame.Surface, app,
    cx: int, y: int, label: str,
    *,
    hovered: bool = False,
) -> pygame.Rect:
    """Draw a centred menu button.  Returns its ``Rect`` for hit-testing."""
    rect = pygame.Rect(cx - BUTTON_W // 2, y, BUTTON_W, BUTTON_H)
    fill = (233, 69, 96) if hovered else (40, 40, 70)
    pygame.draw.rect(surface, fill, rect, border_radius=8)
    pygame.draw.rect(surface, (233, 69, 96), rect, 2, border_radius=8)
    img = app.font_lg.render(label, True, (255, 255, 255))
    surface.blit(img, img.get_rect(center=rect.center))
    return rect
