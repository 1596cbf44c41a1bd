"""
Speech engine binding
  • `SpeechEngine` is the small surface the converter needs from a host TTS.
  • `Pyttsx3Engine` binds it to pyttsx3 (SAPI5 / NSSpeech / espeak).
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

import pyttsx3

log = logging.getLogger(__name__)


class SpeechEngine(ABC):
    @abstractmethod
    def select_voice(self, gender: str) -> None:
        """Pick a voice matching the gender hint, or keep the default."""
        raise NotImplementedError

    @abstractmethod
    def set_rate(self, rate: int | None = None) -> None:
        """Set words per minute; None restores the neutral rate."""
        raise NotImplementedError

    @abstractmethod
    def render_to_file(self, text: str, wav_path: str) -> str:
        """Speak text into wav_path and return the path."""
        raise NotImplementedError


def _voice_matches(voice, gender: str) -> bool:
    hint = gender.lower()
    reported = getattr(voice, "gender", None)
    if reported:
        # NSSpeech reports VoiceGenderMale / VoiceGenderFemale
        reported = str(reported).lower()
        if reported.startswith("voicegender"):
            reported = reported[len("voicegender"):]
        return reported == hint
    # espeak and some NSSpeech voices leave gender empty
    name = (getattr(voice, "name", "") or "").lower()
    return hint in name.replace("_", " ").replace("-", " ").split()


class Pyttsx3Engine(SpeechEngine):
    def __init__(self):
        self.engine = pyttsx3.init()
        self.neutral_rate = self.engine.getProperty("rate")

    def select_voice(self, gender: str) -> None:
        for voice in self.engine.getProperty("voices") or []:
            if _voice_matches(voice, gender):
                log.debug("Using voice %s for %s", voice.id, gender)
                self.engine.setProperty("voice", voice.id)
                return
        log.debug("No %s voice found, keeping engine default", gender)

    def set_rate(self, rate: int | None = None) -> None:
        self.engine.setProperty("rate", self.neutral_rate if rate is None else rate)

    def render_to_file(self, text: str, wav_path: str) -> str:
        self.engine.save_to_file(text, wav_path)
        self.engine.runAndWait()
        return wav_path
