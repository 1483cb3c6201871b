"""
core/audio.py — Synthesised sound effects and music

The SoundBoard is the audio sink for the event bus.  It never decides
*when* to play; it only reacts to trigger events::

    board = SoundBoard(session.bus)     # subscribes itself
    ...
    session.bus.drain()                 # handlers fire here

Nothing is opened until the first ``AudioInit`` (the player's first
gesture).  Every sound is generated at init into a 16-bit buffer and
wrapped in ``pygame.mixer.Sound``, so there are no asset files.

If the mixer can't be opened (no audio device, CI), the board logs once
and stays silent; the game runs the same either way.
"""

from __future__ import annotations
import math
import random
from array import array

import pygame

from core.events import (
    AudioInit, Caught, ChaserSpawned, Collected, DialogueTyped, DoorEntered,
    DoorLockedPrompt, DoorOpened, DoorUnlocked, EventBus, Jumped, Landed,
    LevelComplete, MusicCue, MuteToggled, PhoneRing, Whisper,
)


SAMPLE_RATE = 22050

# (frequency Hz, seconds) note lists for the looping tracks
_CALM_NOTES = [(261.63, 0.5), (329.63, 0.5), (392.00, 0.5), (329.63, 0.5)]
_MENU_NOTES = [(523.25, 0.4), (392.00, 0.4), (440.00, 0.4), (329.63, 0.8),
               (349.23, 0.4), (392.00, 0.4), (261.63, 0.8)]


def _wave(kind: str, phase: float) -> float:
    """One sample of a unit waveform at *phase* (0..1)."""
    if kind == "square":
        return 1.0 if phase < 0.5 else -1.0
    if kind == "triangle":
        return 4.0 * abs(phase - 0.5) - 1.0
    if kind == "saw":
        return 2.0 * phase - 1.0
    return math.sin(2.0 * math.pi * phase)


def tone(freq: float, duration: float, volume: float = 0.3, kind: str = "sine",
         end_freq: float | None = None, decay: bool = True) -> list[float]:
    """Mono float samples for one note, optionally sweeping to *end_freq*."""
    n = int(duration * SAMPLE_RATE)
    out: list[float] = []
    phase = 0.0
    for i in range(n):
        t = i / max(1, n - 1)
        f = freq if end_freq is None else freq + (end_freq - freq) * t
        env = (1.0 - t) ** 2 if decay else min(1.0, i / 200.0, (n - i) / 200.0)
        out.append(_wave(kind, phase) * volume * env)
        phase = (phase + f / SAMPLE_RATE) % 1.0
    return out


def noise(duration: float, volume: float, rng: random.Random) -> list[float]:
    """Soft filtered noise burst (the cutscene whisper)."""
    n = int(duration * SAMPLE_RATE)
    out: list[float] = []
    last = 0.0
    for i in range(n):
        t = i / max(1, n - 1)
        env = math.sin(math.pi * t)
        last = last * 0.85 + rng.uniform(-1.0, 1.0) * 0.15
        out.append(last * volume * env * 3.0)
    return out


def sequence(notes: list[tuple[float, float]], volume: float, kind: str) -> list[float]:
    out: list[float] = []
    for freq, dur in notes:
        out.extend(tone(freq, dur, volume, kind, decay=False) if freq > 0
                   else [0.0] * int(dur * SAMPLE_RATE))
    return out


def mix(*tracks: list[float]) -> list[float]:
    n = max(len(t) for t in tracks)
    out = [0.0] * n
    for track in tracks:
        for i, s in enumerate(track):
            out[i] += s
    return out


class SoundBoard:
    """Plays generated sounds in response to bus events."""

    def __init__(self, bus: EventBus, muted: bool = False):
        self.ready = False
        self.muted = muted
        self.track = "none"
        self._sounds: dict[str, pygame.mixer.Sound] = {}
        self._music: dict[str, pygame.mixer.Sound] = {}
        self._voices: list[pygame.mixer.Sound] = []
        self._music_channel: pygame.mixer.Channel | None = None
        self._channels = 2
        self._rng = random.Random(7)

        bus.subscribe(AudioInit, self.on_audio_init)
        bus.subscribe(MuteToggled, self.on_mute)
        bus.subscribe(MusicCue, self.on_music)
        bus.subscribe(DialogueTyped, self.on_dialogue_typed)
        for event_cls, sound in (
            (Jumped, "jump"),
            (Landed, "land"),
            (Collected, "collect"),
            (LevelComplete, "complete"),
            (DoorUnlocked, "complete"),
            (DoorLockedPrompt, "locked"),
            (DoorOpened, "door"),
            (DoorEntered, "door"),
            (PhoneRing, "ring"),
            (Whisper, "whisper"),
            (ChaserSpawned, "sting"),
            (Caught, "sting"),
        ):
            bus.subscribe(event_cls, self._player_for(sound))

    # ── lifecycle ───────────────────────────────────────────────────

    def init(self) -> bool:
        """Open the mixer and build every buffer.  Safe to call twice."""
        if self.ready:
            return True
        try:
            if pygame.mixer.get_init() is None:
                pygame.mixer.init(SAMPLE_RATE, -16, 2, 512)
            _, _, self._channels = pygame.mixer.get_init()
        except pygame.error as exc:
            print(f"[AUDIO] mixer unavailable ({exc}) — sound disabled")
            return False

        self._sounds = {
            "jump": self._make(tone(300, 0.15, 0.3, "square", end_freq=600)),
            "land": self._make(tone(150, 0.1, 0.2, "triangle", end_freq=80)),
            "collect": self._make(tone(880, 0.08, 0.25) + tone(1320, 0.15, 0.25)),
            "complete": self._make(mix(*[
                [0.0] * int(i * 0.15 * SAMPLE_RATE) + tone(f, 0.3, 0.25)
                for i, f in enumerate((523.25, 659.25, 783.99, 1046.50))
            ])),
            "locked": self._make(tone(110, 0.12, 0.25, "square")),
            "door": self._make(tone(90, 0.35, 0.25, "saw", end_freq=60)),
            "ring": self._make(sequence([(440, 0.1), (480, 0.1), (0, 0.05),
                                         (440, 0.1), (480, 0.1)], 0.25, "sine")),
            "whisper": self._make(noise(1.5, 0.15, self._rng)),
            "sting": self._make(mix(tone(55, 0.8, 0.3, "saw"), tone(58, 0.8, 0.3, "saw"))),
        }
        self._voices = [self._make(tone(f, 0.05, 0.08, "square")) for f in (800, 850, 900, 950)]
        self._music = {
            "calm": self._make(sequence(_CALM_NOTES, 0.12, "sine")),
            "menu": self._make(sequence(_MENU_NOTES, 0.1, "triangle")),
            "scary": self._make(mix(tone(55, 4.0, 0.12, "saw", decay=False),
                                    tone(440, 4.0, 0.03, "sine", decay=False))),
        }
        self._music_channel = pygame.mixer.Channel(0)
        pygame.mixer.set_reserved(1)
        self.ready = True
        print(f"[AUDIO] ready ({len(self._sounds)} effects, {len(self._music)} tracks)")
        self._apply_music()
        return True

    def _make(self, samples: list[float]) -> pygame.mixer.Sound:
        frames = array("h")
        for s in samples:
            v = int(max(-1.0, min(1.0, s)) * 32767)
            for _ in range(self._channels):
                frames.append(v)
        return pygame.mixer.Sound(buffer=frames.tobytes())

    # ── playback ────────────────────────────────────────────────────

    def play(self, name: str) -> None:
        if not self.ready or self.muted:
            return
        sound = self._sounds.get(name)
        if sound is not None:
            sound.play()

    def _player_for(self, name: str):
        def handler(_event):
            self.play(name)
        return handler

    def _apply_music(self) -> None:
        if not self.ready or self._music_channel is None:
            return
        self._music_channel.stop()
        if self.muted:
            return
        sound = self._music.get(self.track)
        if sound is not None:
            self._music_channel.play(sound, loops=-1)

    # ── event handlers ──────────────────────────────────────────────

    def on_audio_init(self, _event) -> None:
        self.init()

    def on_mute(self, event) -> None:
        self.muted = event.muted
        self._apply_music()

    def on_music(self, event) -> None:
        if event.track == self.track:
            return
        self.track = event.track
        self._apply_music()

    def on_dialogue_typed(self, _event) -> None:
        if self.ready and not self.muted and self._voices:
            self._rng.choice(self._voices).play()
