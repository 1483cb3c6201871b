"""logic — Game systems package.

Top-level modules
-----------------
session         — GameSession (all per-run state) + FrameSnapshot
tick            — per-tick orchestrator and host actions (start, escape, mute)
physics         — gravity / friction / platform resolution
levels          — level and stage loading, completion flow
chase           — chaser spawn, pursuit, contact and faint
game_mode       — top-level mode state machine
dialogue        — dialogue trees, story flags and the line runner
input_manager   — raw input → intent mapping (pygame)

Only ``input_manager`` imports pygame; everything else runs headless.
"""
