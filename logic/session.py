"""logic/session.py — GameSession: everything one play-through owns.

The frame driver (``scenes/game_scene.py`` or a test) creates exactly
one session and passes it into every system.  There is no module-level
mutable state anywhere in the core; two sessions never share anything.

``snapshot()`` is the render side's only view of the session: a frozen
copy of what to draw this tick.
"""

from __future__ import annotations
import random
from dataclasses import dataclass

from core import tuning
from core.collision import Box
from core.constants import (
    CUTSCENE_CAPTIONS, CUTSCENE_PHASE_GAP, CUTSCENE_CAPTION_DELAY, FAINT_TICKS,
)
from core.data import LevelDescriptor, StoryBeat
from core.events import EventBus
from components import Player, Platform, Goal, Key, Door, Chaser, PeekPoint
from logic.dialogue import DialogueManager, DialogueRunner, StoryLog, load_builtin_trees
from logic.game_mode import ModeMachine
from logic.physics import PhysicsConfig


class GameSession:
    def __init__(self, levels: tuple[LevelDescriptor, ...] | list[LevelDescriptor],
                 physics: PhysicsConfig | None = None, seed: int | None = None):
        if not levels:
            raise ValueError("a session needs at least one level")
        self.levels: tuple[LevelDescriptor, ...] = tuple(levels)
        self.physics = physics or PhysicsConfig()
        self.rng = random.Random(seed)
        self.bus = EventBus()
        self.mode = ModeMachine(self.bus)

        # The one persistent player
        self.player = Player()

        # Level contents (rebuilt by logic.levels)
        self.level_index = 0
        self.stage = 1
        self.platforms: tuple[Platform, ...] = ()
        self.goal: Goal | None = None
        self.key: Key | None = None
        self.door: Door | None = None
        self.chaser: Chaser | None = None
        self.peek: PeekPoint | None = None
        self.pending_beats: list[StoryBeat] = []

        # Level-flow counters (all in ticks)
        self.level_complete = False
        self.complete_timer = 0
        self.stage_timer = 0          # counts down after entering the door
        self.chase_timer = 0
        self.faint_timer = 0
        self.faint_ticks = int(tuning.get("chase", "faint_ticks", FAINT_TICKS))
        self.cutscene_timer = 0
        self.cutscene_phase = 0
        self.tick_count = 0

        # Phone calls
        self.phone_ringing = False
        self.phone_ring_timer = 0
        self.pending_call: str | None = None
        self.calls_triggered: set[int] = set()
        self.first_play = True

        # Narrative
        self.story = StoryLog()
        self.dialogues = DialogueManager()
        load_builtin_trees(self.dialogues)
        self.dialogue = DialogueRunner(self.dialogues, self.story)

        # Host-facing settings
        self.audio_ready = False
        self.muted = False
        self.last_prompt: str = ""

    # ── queries ─────────────────────────────────────────────────────

    @property
    def level(self) -> LevelDescriptor:
        return self.levels[self.level_index]

    @property
    def level_count(self) -> int:
        return len(self.levels)

    def key_held(self) -> bool:
        return self.key is not None and self.key.collected

    def can_reach_goal(self) -> bool:
        return self.door is None or self.door.is_fully_open()

    def snapshot(self) -> "FrameSnapshot":
        p = self.player
        caption, black = _cutscene_caption(self.cutscene_timer, self.cutscene_phase)
        dialogue = None
        if self.dialogue.active:
            dialogue = DialogueView(
                speaker=self.dialogue.speaker,
                text=self.dialogue.visible_text,
                full_text=self.dialogue.text,
                choices=tuple(self.dialogue.choices),
                cursor=self.dialogue.cursor,
                line_done=self.dialogue.line_done,
                timer=self.dialogue.timer,
            )
        return FrameSnapshot(
            mode=self.mode.label(),
            tick=self.tick_count,
            level_index=self.level_index,
            level_name=self.level.name,
            level_count=self.level_count,
            stage=self.stage,
            bloody=self.level.bloody,
            glitch_title=self.level.glitch_title,
            player=p.box(),
            player_facing=p.facing,
            player_grounded=p.grounded,
            player_talking=p.talking,
            platforms=tuple((pl.box(), pl.bloody) for pl in self.platforms),
            goal=self.goal.box() if self.goal else None,
            goal_phase=self.goal.anim_phase if self.goal else 0.0,
            key=self.key.box() if self.key and not self.key.collected else None,
            key_held=self.key_held(),
            door=self.door.box() if self.door else None,
            door_state=self.door.state.value if self.door else None,
            door_open_progress=self.door.open_progress if self.door else 0.0,
            door_near=bool(self.door and self.door.is_near(p)),
            chaser=self.chaser.box() if self.chaser else None,
            peek=self.peek.box() if self.peek else None,
            dialogue=dialogue,
            phone_ringing=self.phone_ringing,
            phone_ring_timer=self.phone_ring_timer,
            cutscene_caption=caption,
            cutscene_black=black,
            level_complete=self.level_complete,
            faint_progress=min(1.0, self.faint_timer / self.faint_ticks) if self.faint_timer else 0.0,
            muted=self.muted,
            prompt=self.last_prompt,
        )


def cutscene_phase_start(phase: int) -> int:
    """Tick on which caption *phase* begins (phase 0 starts at tick 0)."""
    return sum(d + CUTSCENE_PHASE_GAP for _, d in CUTSCENE_CAPTIONS[:phase])


def _cutscene_caption(timer: int, phase: int) -> tuple[str | None, bool]:
    """(caption text, fading-to-black) for the cutscene at *timer*."""
    if phase >= len(CUTSCENE_CAPTIONS):
        return None, True
    start = cutscene_phase_start(phase)
    if timer - start <= CUTSCENE_CAPTION_DELAY:
        return None, False
    return CUTSCENE_CAPTIONS[phase][0], False


@dataclass(frozen=True)
class DialogueView:
    speaker: str
    text: str
    full_text: str
    choices: tuple[str, ...]
    cursor: int
    line_done: bool
    timer: int


@dataclass(frozen=True)
class FrameSnapshot:
    """Everything the renderer needs for one frame, copied out."""
    mode: str
    tick: int
    level_index: int
    level_name: str
    level_count: int
    stage: int
    bloody: bool
    glitch_title: bool
    player: Box
    player_facing: int
    player_grounded: bool
    player_talking: bool
    platforms: tuple[tuple[Box, bool], ...]
    goal: Box | None
    goal_phase: float
    key: Box | None
    key_held: bool
    door: Box | None
    door_state: str | None
    door_open_progress: float
    door_near: bool
    chaser: Box | None
    peek: Box | None
    dialogue: DialogueView | None
    phone_ringing: bool
    phone_ring_timer: int
    cutscene_caption: str | None
    cutscene_black: bool
    level_complete: bool
    faint_progress: float
    muted: bool
    prompt: str
