"""
core/scene.py — Base class for whatever the App is showing

The game itself runs in a single ``GameScene``; menus, dialogue and the
cutscene are modes inside it, not separate scenes.  ``App.push_scene``
covers the current scene with a new one; the top of the stack is the
one that runs.

Override only what you need; every hook defaults to doing nothing.
``update`` is called once per frame and must advance at most one
simulation tick.  ``dt`` is informational.
"""

from __future__ import annotations
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import pygame
    from core.app import App


class Scene:
    def on_enter(self, app: App):
        """Pushed onto the App."""

    def on_exit(self, app: App):
        """Covered by a push."""

    def handle_event(self, event: pygame.event.Event, app: App):
        """One pygame event; mouse positions are already in play-field pixels."""

    def update(self, dt: float, app: App):
        pass

    def draw(self, surface: pygame.Surface, app: App):
        """Draw onto the fixed-size play-field surface."""
