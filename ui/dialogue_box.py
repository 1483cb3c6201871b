"""ui/dialogue_box.py — Narrator dialogue box and phone prompt.

Pure drawing: everything comes from the frozen ``DialogueView`` in the
frame snapshot.  Input for choices goes through the InputManager, not
through this module.
"""

from __future__ import annotations
import pygame

from core.constants import COLORS
from logic.session import DialogueView, FrameSnapshot
from ui.helpers import draw_panel, wrap_text


BOX_MARGIN = 40
BOX_H = 130


def draw_dialogue(surface: pygame.Surface, app, view: DialogueView) -> list[pygame.Rect]:
    """Draw the speaker box (or choice list).  Returns the choice rects."""
    sw, sh = surface.get_size()
    rect = pygame.Rect(BOX_MARGIN, sh - BOX_H - 20, sw - BOX_MARGIN * 2, BOX_H)
    draw_panel(surface, rect)

    if view.choices:
        return _draw_choices(surface, app, rect, view)

    speaker_color = COLORS["narrator"] if view.speaker != "Mia" else COLORS["player"]
    app.draw_text(surface, view.speaker, rect.x + 16, rect.y + 10,
                  speaker_color, font=app.font_lg)

    y = rect.y + 48
    for line in wrap_text(app.font, view.text, rect.w - 32):
        app.draw_text(surface, line, rect.x + 16, y, COLORS["text"])
        y += 24

    if view.line_done:
        hint = app.font_sm.render("Enter ▸", True, (150, 150, 170))
        surface.blit(hint, (rect.right - hint.get_width() - 12, rect.bottom - 24))
    return []


def _draw_choices(surface: pygame.Surface, app, rect: pygame.Rect,
                  view: DialogueView) -> list[pygame.Rect]:
    app.draw_text(surface, "Choose a response", rect.x + 16, rect.y + 10,
                  COLORS["narrator"], font=app.font_sm)
    rects: list[pygame.Rect] = []
    y = rect.y + 38
    for i, label in enumerate(view.choices):
        selected = i == view.cursor
        row = pygame.Rect(rect.x + 12, y, rect.w - 24, 32)
        if selected:
            pygame.draw.rect(surface, (60, 40, 70), row, border_radius=6)
        prefix = "▸ " if selected else "  "
        color = (255, 255, 255) if selected else (160, 160, 160)
        app.draw_text(surface, f"{prefix}{i + 1}. {label}", row.x + 8, row.y + 5, color)
        rects.append(row)
        y += 38
    return rects


def draw_phone(surface: pygame.Surface, app, snap: FrameSnapshot) -> None:
    """Ringing phone icon in the corner, shaking on the ring beat."""
    if not snap.phone_ringing:
        return
    sw, _ = surface.get_size()
    shake = 3 if (snap.phone_ring_timer // 4) % 2 else -3
    x, y = sw - 80 + shake, 70
    pygame.draw.rect(surface, (30, 30, 30), (x, y, 36, 60), border_radius=6)
    pygame.draw.rect(surface, (120, 200, 255), (x + 4, y + 8, 28, 38))
    pygame.draw.circle(surface, (90, 90, 90), (x + 18, y + 52), 4)
    app.draw_text_bg(surface, "E", x + 12, y + 70, COLORS["accent"], font=app.font_sm)
