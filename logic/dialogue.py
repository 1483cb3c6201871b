"""logic/dialogue.py — Narrator dialogue trees and the line-by-line runner.

Dialogue trees are plain dicts stored in a DialogueManager.  Each tree
has named nodes.  A node is either a *line* (someone says something,
then the tree moves on) or a *choice* (the player picks a response).

StoryLog is a companion object — choice actions set flags through it.

Line node::

    {"speaker": "Narrator", "text": "Hello?", "duration": 80, "next": "n2"}

    duration  ticks the line stays up (default 100 + 2 * len(text))
    gap       silent ticks after it before auto-advancing (default 20)
    next      node id to continue with; omit to end the conversation

Choice node::

    {
        "choices": [
            {"label": "...",          "next": "quiet_1"},
            {"label": "Who are you?", "next": "who_1",
             "action": "set_flag:asked_name"},
        ]
    }

Choice fields:
    label     — display text
    next      — node id to continue with (omit to end)
    action    — "set_flag:key" or "set_flag:key:value"
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any

from core.constants import (
    DIALOGUE_TICKS_PER_CHAR, DIALOGUE_VOICE_EVERY,
    DIALOGUE_BASE_DURATION, DIALOGUE_DEFAULT_GAP,
)
from core.events import DialogueTyped


# ── Story flags ──────────────────────────────────────────────────────

@dataclass
class StoryLog:
    """Session-wide narrative flags written by dialogue choices."""
    flags: dict[str, Any] = field(default_factory=dict)

    def set_flag(self, key: str, value: Any = True):
        self.flags[key] = value

    def get_flag(self, key: str, default: Any = None) -> Any:
        return self.flags.get(key, default)


# ── Dialogue manager ────────────────────────────────────────────────

@dataclass
class DialogueManager:
    """Holds every dialogue tree by id."""
    _trees: dict[str, dict] = field(default_factory=dict)

    def register(self, tree_id: str, tree: dict):
        self._trees[tree_id] = tree

    def get_tree(self, tree_id: str) -> dict | None:
        return self._trees.get(tree_id)

    def get_node(self, tree_id: str, node_id: str) -> dict | None:
        tree = self._trees.get(tree_id)
        if tree:
            return tree.get(node_id)
        return None


def _lines(prefix: str, speaker: str | list[str], texts: list[str],
           end: str | None = None, **extra) -> dict:
    """Chain *texts* into nodes ``prefix_1 .. prefix_n``."""
    nodes: dict[str, dict] = {}
    for i, text in enumerate(texts, start=1):
        who = speaker[i - 1] if isinstance(speaker, list) else speaker
        node = {"speaker": who, "text": text, **extra}
        nxt = f"{prefix}_{i + 1}" if i < len(texts) else end
        if nxt:
            node["next"] = nxt
        nodes[f"{prefix}_{i}"] = node
    return nodes


# ── Built-in dialogue trees ─────────────────────────────────────────

_INTRO = {
    "root": {"speaker": "???", "text": "Ahem...", "duration": 90, "gap": 30, "next": "hello"},
    "hello": {"speaker": "???", "text": "Hello?", "duration": 80, "gap": 30, "next": "working"},
    "working": {"speaker": "???", "text": "Is it working?", "duration": 100, "gap": 30,
                "next": "its_you"},
    "its_you": {"speaker": "???", "text": "Ah yes. It's you!", "duration": 110, "gap": 30,
                "next": "player_id"},
    "player_id": {"speaker": "???", "text": "Lets see... player... 34899277?",
                  "duration": 150, "gap": 30, "next": "choice"},
    "choice": {
        "choices": [
            {"label": "...", "next": "quiet_1", "action": "set_flag:narrator_choice:silent"},
            {"label": "Who are you?", "next": "who_1", "action": "set_flag:narrator_choice:asked"},
        ],
    },
}
_INTRO.update(_lines("quiet", ["???", "???", "???", "Narrator", "Narrator"], [
    "Okaaaayyyyyyy...",
    "Not much of a talker!",
    "That's fine...",
    "I'm the Narrator!",
    "I'll be here whenever you need a chat!",
]))
_INTRO.update(_lines("who", ["???", "Narrator", "Narrator", "Narrator", "Narrator"], [
    "Me?",
    "Well I'm the Narrator!",
    "I'm here for a chat if you're stuck or anything!",
    "Not that you'll need help...",
    "You seem capable enough!",
]))

_LEVEL8 = _lines("l8", "Narrator", [
    "Sorry 'bout that...",
    "That's a bug.",
    "We're still tryna sort that out.",
    "You know...",
    "Bugs 'n all that 're in demos, right?",
])
_LEVEL8["root"] = _LEVEL8.pop("l8_1")

_LEVEL9 = _lines("l9", "Narrator", [
    "Okay.",
    "So this level is a teensy bit harder.",
    "All you have to do is grab the key, open the door, and touch the flag!",
    "Easy as- oh...",
    "Sorry... gotta take this call.",
    "...",
    "See ya' in a bit!",
])
_LEVEL9["root"] = _LEVEL9.pop("l9_1")

_CHASE_WARNING = _lines("cw", ["Mia", "Mia", "???"], [
    "Hello? Narrator?",
    "...it's so quiet.",
    "I SEE YOU",
])
_CHASE_WARNING["root"] = _CHASE_WARNING.pop("cw_1")

_PEEK = _lines("pk", "Mia", [
    "There's something on the other side of the wall.",
    "It's standing very still.",
    "I don't think it has seen me yet.",
])
_PEEK["root"] = _PEEK.pop("pk_1")

BUILTIN_TREES: dict[str, dict] = {
    "intro_call": _INTRO,
    "level8_call": _LEVEL8,
    "level9_call": _LEVEL9,
    "chase_warning": _CHASE_WARNING,
    "peek_window": _PEEK,
}


def load_builtin_trees(manager: DialogueManager):
    """Register all built-in dialogue trees."""
    for tree_id, tree in BUILTIN_TREES.items():
        manager.register(tree_id, tree)


# ── Runner ──────────────────────────────────────────────────────────

class DialogueRunner:
    """Plays one tree at a time with a typewriter and auto-advance timer.

    The runner knows nothing about game modes; ``logic.tick`` reads
    ``active`` / ``at_choice`` / ``responded`` and drives the mode
    machine from them.
    """

    def __init__(self, manager: DialogueManager, story: StoryLog):
        self._manager = manager
        self._story = story
        self._tree: dict | None = None
        self.tree_id: str | None = None
        self.node_id: str | None = None
        self.timer = 0
        self.cursor = 0
        self.responded = False

    # ── lifecycle ───────────────────────────────────────────────────

    def start(self, tree_id: str, node_id: str = "root") -> bool:
        if self._manager.get_node(tree_id, node_id) is None:
            print(f"[DIALOGUE] unknown tree {tree_id!r}/{node_id!r}")
            return False
        self._tree = self._manager.get_tree(tree_id)
        self.tree_id = tree_id
        self.responded = False
        self._goto(node_id)
        print(f"[DIALOGUE] start {tree_id}")
        return True

    def stop(self) -> None:
        self._tree = None
        self.tree_id = None
        self.node_id = None
        self.timer = 0
        self.cursor = 0
        self.responded = False

    def _goto(self, node_id: str | None) -> None:
        if node_id is None or self._tree is None or node_id not in self._tree:
            if node_id is not None:
                print(f"[DIALOGUE] {self.tree_id}: missing node {node_id!r}, ending")
            self.stop()
            return
        self.node_id = node_id
        self.timer = 0
        self.cursor = 0

    # ── queries ─────────────────────────────────────────────────────

    @property
    def active(self) -> bool:
        return self.node_id is not None

    @property
    def node(self) -> dict:
        if self._tree is None or self.node_id is None:
            return {}
        return self._tree[self.node_id]

    @property
    def at_choice(self) -> bool:
        return "choices" in self.node

    @property
    def speaker(self) -> str:
        return self.node.get("speaker", "")

    @property
    def text(self) -> str:
        return self.node.get("text", "")

    @property
    def choices(self) -> list[str]:
        return [c.get("label", "?") for c in self.node.get("choices", [])]

    def duration(self) -> int:
        node = self.node
        return int(node.get("duration", DIALOGUE_BASE_DURATION + 2 * len(node.get("text", ""))))

    def gap(self) -> int:
        return int(self.node.get("gap", DIALOGUE_DEFAULT_GAP))

    @property
    def chars_shown(self) -> int:
        return self.timer // DIALOGUE_TICKS_PER_CHAR

    @property
    def visible_text(self) -> str:
        return self.text[:self.chars_shown]

    @property
    def line_done(self) -> bool:
        """The whole line has been typed out."""
        return self.chars_shown >= len(self.text)

    # ── per-tick ────────────────────────────────────────────────────

    def tick(self) -> list[DialogueTyped]:
        """Advance the typewriter.  Returns the voice blips for this tick."""
        if not self.active or self.at_choice:
            return []
        self.timer += 1
        events: list[DialogueTyped] = []
        chars = self.chars_shown
        if 0 < chars <= len(self.text) and self.timer % DIALOGUE_VOICE_EVERY == 1:
            events.append(DialogueTyped(speaker=self.speaker))
        if self.timer > self.duration() + self.gap():
            self._goto(self.node.get("next"))
        return events

    # ── player actions ──────────────────────────────────────────────

    def advance(self) -> bool:
        """Skip to the next line (Enter).  Ignored on a choice node."""
        if not self.active or self.at_choice:
            return False
        self._goto(self.node.get("next"))
        return True

    def select(self, delta: int) -> None:
        n = len(self.choices)
        if n and self.at_choice:
            self.cursor = max(0, min(n - 1, self.cursor + delta))

    def choose(self, index: int) -> bool:
        """Pick choice *index* directly (number keys)."""
        if not self.at_choice or not 0 <= index < len(self.choices):
            return False
        self.cursor = index
        return self.confirm()

    def confirm(self) -> bool:
        """Take the highlighted choice: apply its action, then follow it."""
        if not self.at_choice:
            return False
        choice = self.node["choices"][self.cursor]
        action = choice.get("action", "")
        if action.startswith("set_flag:"):
            parts = action.split(":", 2)
            flag = parts[1] if len(parts) > 1 else ""
            value = parts[2] if len(parts) > 2 else True
            self._story.set_flag(flag, value)
        self.responded = True
        self._goto(choice.get("next"))
        return True
