"""ui — Overlay drawing for the game scene.

Draws the dialogue box, the phone prompt and menu buttons from a
``FrameSnapshot``.  Nothing here mutates game state.
"""

from ui.helpers import draw_overlay, draw_panel, draw_button, wrap_text
from ui.dialogue_box import draw_dialogue, draw_phone

__all__ = [
    "draw_overlay", "draw_panel", "draw_button", "wrap_text",
    "draw_dialogue", "draw_phone",
]
