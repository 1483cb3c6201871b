"""logic/tick.py — Per-tick orchestration and host actions.

``tick()`` is the only entry point the frame driver calls once per
frame.  It reads the active mode and runs exactly the systems that mode
allows::

    MENU / SETTINGS   nothing but menu intents
    PLAYING           interact, phone, simulation, props, goal, chase
    DIALOGUE(kind)    dialogue runner only (player frozen, props animate)
    TRANSITIONING     faint counter (props animate)
    CUTSCENE          caption timeline

Host actions (``start_game``, ``escape_to_menu``, ...) are plain
functions so the menu buttons and the keyboard share one code path.

Usage::

    from logic.tick import tick
    tick(session, controls, {"interact"})
    session.bus.drain()
"""

from __future__ import annotations
from typing import TYPE_CHECKING, Iterable

from core.constants import (
    CUTSCENE_CAPTIONS, CUTSCENE_PHASE_GAP, CUTSCENE_FADE_TICKS,
    DOOR_ENTER_DELAY, PHONE_RING_INTERVAL,
)
from core.events import (
    AudioInit, Collected, DoorEntered, DoorLockedPrompt, DoorOpened,
    DoorUnlocked, MusicCue, MuteToggled, PhoneRing, Whisper,
)
from components import DoorState
from logic.chase import chase_system, faint_system
from logic.game_mode import DialogueKind, Mode, Trigger
from logic.levels import (
    complete_level, load_level, load_stage2, restart_level, ring_phone, tick_complete,
)
from logic.physics import Controls, NO_INPUT, push_out_of_door, step_player
from logic.session import cutscene_phase_start

if TYPE_CHECKING:
    from logic.session import GameSession


# ═══════════════════════════════════════════════════════════════════
#  Host actions
# ═══════════════════════════════════════════════════════════════════

def start_game(session: "GameSession", level: int = 0) -> bool:
    """Menu → Playing.  Opens audio on the first gesture, loads *level*."""
    if not session.mode.fire(Trigger.PLAY):
        return False
    if not session.audio_ready:
        session.audio_ready = True
        session.bus.emit(AudioInit())
    load_level(session, level)
    if session.first_play:
        session.first_play = False
        ring_phone(session, "intro_call")
    return True


def open_settings(session: "GameSession") -> bool:
    return session.mode.fire(Trigger.OPEN_SETTINGS)


def close_settings(session: "GameSession") -> bool:
    return session.mode.fire(Trigger.CLOSE_SETTINGS)


def toggle_mute(session: "GameSession") -> None:
    session.muted = not session.muted
    session.bus.emit(MuteToggled(muted=session.muted))
    print(f"[AUDIO] {'muted' if session.muted else 'unmuted'}")


def escape_to_menu(session: "GameSession") -> bool:
    """Abandon whatever is running and go back to the main menu."""
    if session.mode.mode is Mode.SETTINGS:
        return close_settings(session)
    if not session.mode.fire(Trigger.ESCAPE):
        return False
    session.dialogue.stop()
    session.player.talking = False
    session.chaser = None
    session.chase_timer = 0
    session.faint_timer = 0
    session.level_complete = False
    session.complete_timer = 0
    session.cutscene_timer = 0
    session.cutscene_phase = 0
    session.stage_timer = 0
    # An unanswered call keeps ringing after the next Play
    session.phone_ring_timer = 0
    session.last_prompt = ""
    session.bus.emit(MusicCue(track="menu"))
    return True


def open_dialogue(session: "GameSession", tree_id: str, kind: DialogueKind) -> bool:
    """Start *tree_id* and enter DIALOGUE(kind).  False if either refuses."""
    if not session.mode.can_fire(Trigger.OPEN_DIALOGUE):
        return False
    if not session.dialogue.start(tree_id):
        return False
    session.mode.fire(Trigger.OPEN_DIALOGUE, kind=kind)
    session.player.vx = 0.0
    return True


def answer_phone(session: "GameSession") -> bool:
    if not session.phone_ringing:
        return False
    tree = session.pending_call or "intro_call"
    session.phone_ringing = False
    session.phone_ring_timer = 0
    session.pending_call = None
    return open_dialogue(session, tree, DialogueKind.CALL)


# ═══════════════════════════════════════════════════════════════════
#  Per-tick entry point
# ═══════════════════════════════════════════════════════════════════

def tick(session: "GameSession", controls: Controls = NO_INPUT,
         intents: Iterable[str] = ()) -> None:
    """Advance *session* by one fixed tick."""
    intents = set(intents)
    session.tick_count += 1

    if "mute" in intents:
        toggle_mute(session)

    mode = session.mode.mode
    if mode is Mode.MENU:
        if "confirm" in intents or "play" in intents:
            start_game(session)
        elif "settings" in intents:
            open_settings(session)
        return
    if mode is Mode.SETTINGS:
        if "menu" in intents or "back" in intents:
            close_settings(session)
        return

    if "menu" in intents:
        escape_to_menu(session)
        return

    if mode is Mode.CUTSCENE:
        _cutscene_step(session)
    elif mode is Mode.TRANSITIONING:
        _update_props(session)
        faint_system(session)
    elif mode is Mode.DIALOGUE:
        _update_props(session)
        _dialogue_step(session, intents)
    else:
        _playing_step(session, controls, intents)


# ── PLAYING ──────────────────────────────────────────────────────────

def _playing_step(session: "GameSession", controls: Controls, intents: set[str]) -> None:
    if "restart" in intents:
        restart_level(session)
        return
    for n in range(1, 10):
        if f"level_{n}" in intents and n <= session.level_count:
            load_level(session, n - 1)
            return

    if session.phone_ringing:
        session.phone_ring_timer += 1
        if session.phone_ring_timer % PHONE_RING_INTERVAL == 1:
            session.bus.emit(PhoneRing())

    if "interact" in intents and _interact(session):
        if session.mode.in_dialogue:
            return

    if session.stage_timer > 0:
        session.stage_timer -= 1
        if session.stage_timer == 0:
            load_stage2(session)

    _update_props(session)

    if session.level_complete:
        tick_complete(session)
        session.last_prompt = ""
        return

    p = session.player
    step_player(p, controls, session.platforms, session.physics, session.bus)
    if session.door is not None:
        push_out_of_door(p, session.door)

    if session.key is not None and session.key.check_collision(p):
        session.bus.emit(Collected())
        print("[LEVEL] key collected")

    if session.goal is not None and session.can_reach_goal() and session.goal.touches(p):
        complete_level(session)
        return

    _story_beats(session)
    if session.mode.simulating:
        chase_system(session)
    session.last_prompt = _prompt(session)


def _interact(session: "GameSession") -> bool:
    """E key.  Phone first, then peek point, then door."""
    if session.phone_ringing:
        return answer_phone(session)

    p = session.player
    if session.peek is not None and session.peek.contains(p):
        session.peek.seen = True
        return open_dialogue(session, session.peek.tree, DialogueKind.PEEK)

    door = session.door
    if door is None or not door.is_near(p):
        return False
    if door.state is DoorState.LOCKED:
        if session.key_held():
            door.unlock()
            session.bus.emit(DoorUnlocked())
            return True
        session.bus.emit(DoorLockedPrompt())
        return False
    if door.state is DoorState.UNLOCKED:
        door.open()
        session.bus.emit(DoorOpened())
        return True
    if door.enter():
        session.bus.emit(DoorEntered())
        session.stage_timer = DOOR_ENTER_DELAY
        return True
    return False


def _story_beats(session: "GameSession") -> None:
    beats = session.pending_beats
    if beats and session.player.center_x >= beats[0].x:
        beat = beats.pop(0)
        open_dialogue(session, beat.tree, DialogueKind.STORY)


def _prompt(session: "GameSession") -> str:
    if session.phone_ringing:
        return "Press E to answer"
    p = session.player
    if session.peek is not None and session.peek.contains(p):
        return "Press E to look"
    door = session.door
    if door is None or not door.is_near(p):
        return ""
    if door.state is DoorState.LOCKED:
        return "Press E to unlock" if session.key_held() else "Locked. Find the key"
    if door.state is DoorState.UNLOCKED:
        return "Press E to open"
    if door.is_fully_open():
        return "Press E to enter"
    return ""


def _update_props(session: "GameSession") -> None:
    if session.goal is not None:
        session.goal.update()
    if session.key is not None:
        session.key.update(session.tick_count)
    if session.door is not None:
        session.door.update()


# ── DIALOGUE ─────────────────────────────────────────────────────────

def _dialogue_step(session: "GameSession", intents: set[str]) -> None:
    runner = session.dialogue
    if runner.at_choice:
        picked = False
        for n in range(1, 10):
            if f"choose_{n}" in intents:
                picked = runner.choose(n - 1)
                break
        if not picked:
            if "choice_up" in intents:
                runner.select(-1)
            elif "choice_down" in intents:
                runner.select(1)
            elif "advance" in intents or "confirm" in intents:
                runner.confirm()
    elif "advance" in intents or "confirm" in intents:
        runner.advance()

    for event in runner.tick():
        session.bus.emit(event)

    _sync_dialogue_mode(session)


def _sync_dialogue_mode(session: "GameSession") -> None:
    """Mirror the runner's position into DIALOGUE(kind) / PLAYING."""
    runner = session.dialogue
    machine = session.mode
    if not runner.active:
        session.player.talking = False
        machine.fire(Trigger.CLOSE_DIALOGUE)
        return
    if runner.at_choice:
        if machine.kind is not DialogueKind.CHOICE:
            machine.fire(Trigger.CHAIN_DIALOGUE, kind=DialogueKind.CHOICE)
    elif runner.responded and machine.kind is not DialogueKind.RESPONSE:
        machine.fire(Trigger.CHAIN_DIALOGUE, kind=DialogueKind.RESPONSE)
    session.player.talking = runner.speaker == "Mia" and not runner.line_done


# ── CUTSCENE ─────────────────────────────────────────────────────────

def _cutscene_step(session: "GameSession") -> None:
    session.cutscene_timer += 1
    phase = session.cutscene_phase
    t = session.cutscene_timer - cutscene_phase_start(phase)

    if phase < len(CUTSCENE_CAPTIONS):
        if phase == 0 and t == 1:
            session.bus.emit(Whisper(phase=0))
        if t > CUTSCENE_CAPTIONS[phase][1] + CUTSCENE_PHASE_GAP:
            session.cutscene_phase += 1
            if session.cutscene_phase < len(CUTSCENE_CAPTIONS):
                session.bus.emit(Whisper(phase=session.cutscene_phase))
        return

    if t >= CUTSCENE_FADE_TICKS:
        session.cutscene_timer = 0
        session.cutscene_phase = 0
        if session.mode.fire(Trigger.END_CUTSCENE):
            load_level(session, session.level_index + 1)
