"""components — Entity dataclasses, organised by domain.

Submodules
----------
spatial        Body, Player, Chaser
props          Platform, Goal, Key, Door, DoorState, PeekPoint

All public names are re-exported here so code can simply do
``from components import Player``.
"""

# ── Spatial ──────────────────────────────────────────────────────────
from components.spatial import Body, Player, Chaser

# ── Props ────────────────────────────────────────────────────────────
from components.props import Platform, Goal, Key, Door, DoorState, PeekPoint

__all__ = [
    # spatial
    "Body", "Player", "Chaser",
    # props
    "Platform", "Goal", "Key", "Door", "DoorState", "PeekPoint",
]
