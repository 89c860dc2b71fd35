"""
core/audio.py — Audio feedback for StatClash.

Every sound is synthesized at startup from short note sequences, no
audio files, no numpy. Samples are packed to signed 16-bit stereo PCM
with struct and handed to pygame.mixer.Sound through its buffer argument,
which also works under pygbag.

Sound design (all in C major):
    choose       — E5 blip                  — a card was picked
    correct      — C4 E4 G4 C5 arpeggio     — prediction was right
    wrong        — G4 E4 C4 descent         — session over
    start        — rising sine sweep        — new session
    achievement  — G4 C5 E5 G5 fanfare      — milestone unlocked
    tick         — C6 soft tick             — one cooldown tick

Usage:
    audio = Audio()
    audio.init()
    audio.play("correct")
"""

from __future__ import annotations
import logging
import math
import struct

import pygame

logger = logging.getLogger(__name__)

_SAMPLE_RATE = 22050
_MAX_AMP     = 32767

# Note sequences: (frequency Hz or 0 for rest, seconds, volume)
_SEQUENCES: dict[str, list[tuple[float, float, float]]] = {
    "choose":      [(659, 0.05, 0.22)],
    "correct":     [(261, 0.07, 0.3), (329, 0.07, 0.3), (392, 0.07, 0.3), (523, 0.14, 0.35)],
    "wrong":       [(392, 0.09, 0.3), (329, 0.09, 0.3), (261, 0.18, 0.25)],
    "achievement": [(392, 0.08, 0.3), (523, 0.08, 0.3), (659, 0.08, 0.3), (0, 0.03, 0.0),
                    (784, 0.2, 0.32)],
    "tick":        [(1047, 0.03, 0.12)],
}


def _square(freq: float, duration: float, volume: float) -> list[float]:
    n = int(_SAMPLE_RATE * duration)
    if freq <= 0:
        return [0.0] * n
    period = _SAMPLE_RATE / freq
    return [volume if (i % period) < period / 2 else -volume for i in range(n)]


def _sine_sweep(f_start: float, f_end: float, duration: float, volume: float) -> list[float]:
    n = int(_SAMPLE_RATE * duration)
    phase = 0.0
    samples = []
    for i in range(n):
        phase += 2 * math.pi * (f_start + (f_end - f_start) * i / n) / _SAMPLE_RATE
        samples.append(volume * math.sin(phase))
    return samples


def _fade_out(samples: list[float], tail: float = 0.04) -> list[float]:
    """Linear fade over the last `tail` seconds to avoid clicks."""
    fade_n = min(int(_SAMPLE_RATE * tail), len(samples))
    start = len(samples) - fade_n
    return samples[:start] + [s * (fade_n - i) / fade_n for i, s in enumerate(samples[start:])]


def _to_sound(samples: list[float]) -> pygame.mixer.Sound:
    pcm = b"".join(
        struct.pack("<hh", v, v)
        for v in (int(max(-1.0, min(1.0, s)) * _MAX_AMP) for s in samples)
    )
    return pygame.mixer.Sound(buffer=pcm)


class Audio:
    """Plays synthesized feedback sounds. Silent if the mixer is unavailable.

    Attributes:
        _sounds:    Sound name → pygame.mixer.Sound.
        _available: True once pygame.mixer initialised successfully.
    """

    def __init__(self) -> None:
        self._sounds:    dict[str, pygame.mixer.Sound] = {}
        self._available: bool = False

    def init(self) -> None:
        """Initialise the mixer and synthesize all sounds."""
        try:
            pygame.mixer.pre_init(_SAMPLE_RATE, -16, 2, 512)
            pygame.mixer.init()
        except pygame.error as exc:
            logger.warning("Audio disabled: %s", exc)
            self._available = False
            return
        self._available = True
        for name, notes in _SEQUENCES.items():
            samples: list[float] = []
            for freq, duration, volume in notes:
                samples.extend(_square(freq, duration, volume))
            self._sounds[name] = _to_sound(_fade_out(samples))
        self._sounds["start"] = _to_sound(_fade_out(_sine_sweep(220, 880, 0.25, 0.3)))

    def play(self, name: str) -> None:
        """Play a sound by name. No-op if audio is off or the name is unknown."""
        if not self._available:
            return
        sound = self._sounds.get(name)
        if sound:
            sound.play()

    def quit(self) -> None:
        """Shut the mixer down if it was started."""
        if self._available:
            pygame.mixer.quit()
            self._available = False
