"""scenes/world_draw.py — Rendering helpers for the game scene.

All pure-draw functions live here so that GameScene.draw() stays thin.
Every function takes the ``FrameSnapshot`` (or a piece of it); none of
them reach into the session.
"""

from __future__ import annotations
import math
import pygame

from core.app import App
from core.collision import Box
from core.constants import COLORS
from logic.session import FrameSnapshot
from ui.helpers import draw_overlay


def _rect(box: Box) -> pygame.Rect:
    return pygame.Rect(int(box.x), int(box.y), int(box.width), int(box.height))


# ── Background ─────────────────────────────────────────────────────

def draw_background(surface: pygame.Surface, bloody: bool = False):
    sw, sh = surface.get_size()
    top, bottom = COLORS["sky_top"], COLORS["sky_bottom"]
    if bloody:
        top, bottom = (30, 8, 12), (45, 12, 18)
    for y in range(0, sh, 4):
        t = y / sh
        color = tuple(int(a + (b - a) * t) for a, b in zip(top, bottom))
        pygame.draw.rect(surface, color, (0, y, sw, 4))

    # Stars on a fixed pattern so they don't flicker
    for i in range(50):
        x = (i * 73) % sw
        y = (i * 47) % (sh - 100)
        pygame.draw.circle(surface, (180, 180, 200), (x, y), i % 3 + 1)


# ── Static props ───────────────────────────────────────────────────

def draw_platforms(surface: pygame.Surface, platforms):
    for box, bloody in platforms:
        r = _rect(box)
        pygame.draw.rect(surface, (42, 26, 26) if bloody else COLORS["platform"], r)
        top = pygame.Rect(r.x, r.y, r.w, min(6, r.h))
        pygame.draw.rect(surface, COLORS["blood"] if bloody else COLORS["platform_top"], top)
        if bloody:
            # Drips hang off the top edge
            for i, x in enumerate(range(r.x + 8, r.right - 4, 23)):
                pygame.draw.rect(surface, COLORS["blood"], (x, r.y + 6, 3, 4 + (i * 7) % 10))


def draw_goal(surface: pygame.Surface, box: Box, phase: float, bloody: bool):
    r = _rect(box)
    pole_x = r.x + 4
    pygame.draw.rect(surface, COLORS["goal_pole"], (pole_x, r.y, 4, r.h))
    flag = COLORS["blood"] if bloody else COLORS["goal_flag"]
    wave = [
        (pole_x + 4 + i * 6, r.y + 4 + int(math.sin(phase + i * 0.8) * 3))
        for i in range(6)
    ]
    points = wave + [(x, y + 20) for x, y in reversed(wave)]
    pygame.draw.polygon(surface, flag, points)


def draw_key(surface: pygame.Surface, box: Box):
    r = _rect(box)
    anchor = (r.centerx, 0)
    pygame.draw.line(surface, (120, 100, 70), anchor, (r.centerx, r.y), 2)
    pygame.draw.circle(surface, COLORS["key"], (r.centerx, r.y + 7), 7, 3)
    pygame.draw.rect(surface, COLORS["key"], (r.centerx - 2, r.y + 12, 4, r.h - 12))
    pygame.draw.rect(surface, COLORS["key"], (r.centerx, r.bottom - 8, 6, 3))


def draw_door(surface: pygame.Surface, box: Box, state: str, progress: float, near: bool):
    r = _rect(box)
    pygame.draw.rect(surface, COLORS["door_frame"], r.inflate(8, 4))
    pygame.draw.rect(surface, (10, 10, 16), r)
    # The panel swings open by shrinking toward its hinge
    panel_w = int(r.w * (1.0 - 0.85 * progress))
    color = COLORS["door_locked"] if state == "locked" else COLORS["door"]
    if panel_w > 0:
        pygame.draw.rect(surface, color, (r.x, r.y, panel_w, r.h))
    if state == "locked":
        pygame.draw.rect(surface, COLORS["key"], (r.x + panel_w - 14, r.centery - 6, 8, 10))
    if near:
        pygame.draw.rect(surface, COLORS["accent"], r.inflate(12, 8), 2)


def draw_peek(surface: pygame.Surface, box: Box):
    r = _rect(box)
    pygame.draw.rect(surface, (15, 15, 25), r)
    pygame.draw.rect(surface, (90, 90, 120), r, 2)
    pygame.draw.line(surface, (90, 90, 120), (r.centerx, r.y), (r.centerx, r.bottom), 1)


# ── Characters ─────────────────────────────────────────────────────

def draw_player(surface: pygame.Surface, snap: FrameSnapshot):
    r = _rect(snap.player)
    pygame.draw.rect(surface, COLORS["player"], r)
    eye_x = r.x + (18 if snap.player_facing > 0 else 8)
    pygame.draw.circle(surface, (255, 255, 255), (eye_x, r.y + 15), 4)
    pygame.draw.circle(surface, (26, 26, 46), (eye_x + snap.player_facing, r.y + 15), 2)
    if snap.player_talking and (snap.tick // 6) % 2:
        pygame.draw.ellipse(surface, (26, 26, 46), (r.x + 11, r.y + 26, 10, 6))
    else:
        pygame.draw.arc(surface, (26, 26, 46), (r.x + 10, r.y + 22, 12, 12),
                        math.pi * 1.1, math.pi * 1.9, 2)
    if snap.key_held:
        pygame.draw.circle(surface, COLORS["key"], (r.right + 4, r.y + 30), 4, 2)


def draw_chaser(surface: pygame.Surface, box: Box, tick: int):
    r = _rect(box)
    jitter = 1 if (tick // 3) % 2 else -1
    body = r.move(jitter, 0)
    pygame.draw.rect(surface, COLORS["chaser"], body)
    pygame.draw.rect(surface, (60, 0, 0), body, 1)
    for ex in (body.x + 9, body.x + 23):
        pygame.draw.circle(surface, (255, 255, 255), (ex, body.y + 14), 3)


# ── HUD / overlays ─────────────────────────────────────────────────

def draw_hud(surface: pygame.Surface, app: App, snap: FrameSnapshot):
    title = f"Level {snap.level_index + 1}/{snap.level_count}: {snap.level_name}"
    if snap.stage > 1:
        title += "  (stage 2)"
    app.draw_text_bg(surface, title, 12, 12, COLORS["text"])
    controls = "A/D move  W jump  E interact  R restart  Esc menu"
    app.draw_text(surface, controls, 12, 40, (150, 150, 170), font=app.font_sm)
    if snap.muted:
        app.draw_text_bg(surface, "muted", surface.get_width() - 70, 12,
                         (180, 180, 180), font=app.font_sm)
    if snap.prompt:
        img = app.font.render(snap.prompt, True, COLORS["text"])
        x = surface.get_width() // 2 - img.get_width() // 2
        app.draw_text_bg(surface, snap.prompt, x, 80, COLORS["text"])


def draw_level_complete(surface: pygame.Surface, app: App):
    draw_overlay(surface, alpha=128)
    cx, cy = surface.get_width() // 2, surface.get_height() // 2
    app.draw_text(surface, "Level Complete!", cx, cy - 40, (255, 215, 0),
                  font=app.font_xl, center=True)
    app.draw_text(surface, "Get ready for the next level...", cx, cy + 20,
                  COLORS["text"], center=True)


def draw_faint(surface: pygame.Surface, progress: float):
    """Screen closes to black as Mia faints."""
    draw_overlay(surface, alpha=int(255 * min(1.0, progress)))


def draw_cutscene(surface: pygame.Surface, app: App, snap: FrameSnapshot):
    surface.fill((0, 0, 0))
    if snap.cutscene_black:
        return
    t = snap.tick
    cx = surface.get_width() // 2 + int(math.sin(t * 0.1) * 2)
    cy = surface.get_height() // 2 - 50 + int(math.cos(t * 0.15))
    pygame.draw.rect(surface, COLORS["player"], (cx - 64, cy - 96, 128, 192))
    pygame.draw.circle(surface, (255, 255, 255), (cx + 24, cy - 36), 24)
    px = cx + 24 + int(math.sin(t * 0.05) * 4)
    py = cy - 36 + int(math.cos(t * 0.07) * 2)
    pygame.draw.circle(surface, (26, 26, 46), (px, py), 12)
    pygame.draw.line(surface, (26, 26, 46), (cx - 24, cy + 20), (cx + 24, cy + 20), 4)
    if snap.cutscene_caption:
        app.draw_text(surface, f'"{snap.cutscene_caption}"', surface.get_width() // 2,
                      surface.get_height() - 100, COLORS["blood"], font=app.font_lg,
                      center=True)


def draw_world(surface: pygame.Surface, app: App, snap: FrameSnapshot):
    """Background, props, characters and HUD in back-to-front order."""
    draw_background(surface, snap.bloody)
    draw_platforms(surface, snap.platforms)
    if snap.peek is not None:
        draw_peek(surface, snap.peek)
    if snap.door is not None:
        draw_door(surface, snap.door, snap.door_state, snap.door_open_progress, snap.door_near)
    if snap.goal is not None:
        draw_goal(surface, snap.goal, snap.goal_phase, snap.bloody)
    if snap.key is not None:
        draw_key(surface, snap.key)
    draw_player(surface, snap)
    if snap.chaser is not None:
        draw_chaser(surface, snap.chaser, snap.tick)
    draw_hud(surface, app, snap)
    if snap.level_complete:
        draw_level_complete(surface, app)
    if snap.faint_progress > 0:
        draw_faint(surface, snap.faint_progress)
