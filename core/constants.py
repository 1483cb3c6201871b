"""core/constants.py — Shared constants used across the codebase.

Centralises magic numbers so there's exactly one place to change them.

Unit System
-----------
All gameplay distances are measured in **pixels** of the 800×600 play
field, and all time in **ticks** of the fixed 60 Hz simulation:

    Distance / position     px
    Speed                   px/tick
    Acceleration            px/tick²
    Time                    ticks   (60 ticks = 1 s at the reference rate)

There is no ``dt`` anywhere in the simulation.  Every narrative timer
is an integer tick counter so a run is fully deterministic: drive N
ticks and you get the same frame every time.

Physics values here are the defaults; ``data/tuning.toml`` may override
them through ``logic.physics.PhysicsConfig.from_tuning()``.
"""

# ── Simulation clock ────────────────────────────────────────────────
TICK_RATE = 60                 # ticks per second (reference rate)

# ── Play field ──────────────────────────────────────────────────────
WORLD_WIDTH = 800
WORLD_HEIGHT = 600

# ── Physics ─────────────────────────────────────────────────────────
GRAVITY = 0.6                  # px/tick², applied every tick
FRICTION = 0.85                # horizontal decay when no direction held
JUMP_FORCE = -14.0             # px/tick (negative = up)
MOVE_SPEED = 3.0               # px/tick

# ── Entity sizes ────────────────────────────────────────────────────
PLAYER_WIDTH = 32
PLAYER_HEIGHT = 48
CHASER_WIDTH = 32
CHASER_HEIGHT = 48
GOAL_WIDTH = 40
GOAL_HEIGHT = 60
KEY_WIDTH = 20
KEY_HEIGHT = 30
DOOR_WIDTH = 50
DOOR_HEIGHT = 80

# ── Props ───────────────────────────────────────────────────────────
GOAL_ANIM_RATE = 0.05          # cosmetic flag wave, per tick
KEY_SWING_RATE = 1.0 / TICK_RATE   # radians per tick of the swing clock
KEY_SWING_ANGLE = 0.15         # max rope angle (radians)
KEY_SWING_REACH = 10.0         # px of sideways travel at sin(angle) = 1
DOOR_INTERACT_RANGE = 20       # px of horizontal padding for "near"
DOOR_OPEN_RATE = 0.05          # open_progress per tick
DOOR_ENTER_RATE = 0.03         # enter_progress per tick (cosmetic)
DOOR_ENTER_DELAY = 30          # ticks between entering and stage 2

# ── Level flow ──────────────────────────────────────────────────────
LEVEL_COMPLETE_TICKS = 120     # "Level complete!" banner (~2 s)
PHONE_RING_INTERVAL = 60       # one ring per second while unanswered

# ── Chase ───────────────────────────────────────────────────────────
CHASE_DEFAULT_DELAY = 600      # ticks before the chaser appears
CHASE_DEFAULT_SPEED = 2.2      # px/tick, a little slower than Mia
FAINT_TICKS = 150              # forced faint after being caught

# ── Cutscene ────────────────────────────────────────────────────────
CUTSCENE_CAPTIONS: tuple[tuple[str, int], ...] = (
    ("wait...", 120),
    ("its not too late", 150),
    ("log off", 120),
    ("fast", 100),
)
CUTSCENE_PHASE_GAP = 60        # ticks after each caption
CUTSCENE_FADE_TICKS = 60       # black screen before the next level
CUTSCENE_CAPTION_DELAY = 30    # caption fades in after this many ticks

# ── Dialogue ────────────────────────────────────────────────────────
DIALOGUE_TICKS_PER_CHAR = 2    # typewriter speed
DIALOGUE_VOICE_EVERY = 3       # one voice blip every N ticks while typing
DIALOGUE_BASE_DURATION = 100   # default line duration = base + 2 * len
DIALOGUE_DEFAULT_GAP = 20

# ── Render palette (host only) ──────────────────────────────────────
COLORS = {
    "sky_top":      (26, 26, 46),
    "sky_bottom":   (22, 33, 62),
    "platform":     (61, 90, 128),
    "platform_top": (152, 193, 217),
    "blood":        (139, 0, 0),
    "player":       (233, 69, 96),
    "chaser":       (20, 20, 24),
    "goal_pole":    (200, 200, 200),
    "goal_flag":    (80, 200, 120),
    "key":          (255, 215, 0),
    "door":         (107, 68, 35),
    "door_locked":  (90, 61, 43),
    "door_frame":   (74, 55, 40),
    "text":         (255, 255, 255),
    "narrator":     (74, 144, 217),
    "accent":       (233, 69, 96),
}
