from enum import Enum
from pathlib import Path

import pygame

from kidsdoku.log import get_logger

logger = get_logger(__name__)


class FeedbackEvent(Enum):
    CORRECT_PLACEMENT = "correct_placement"
    INCORRECT_PLACEMENT = "incorrect_placement"
    HINT = "hint"
    VICTORY = "victory_sound"


class Feedback:
    """Receives feedback triggers from a game session."""

    def signal(self, event):
        raise NotImplementedError


class NullFeedback(Feedback):
    def signal(self, event):
        pass


class SoundFeedback(Feedback):
    """
    Plays a short .wav effect for each event through pygame's mixer.
    Missing files or audio devices only disable the affected sounds.
    """

    VOLUMES = {
        FeedbackEvent.CORRECT_PLACEMENT: 0.6,
        FeedbackEvent.INCORRECT_PLACEMENT: 0.5,
        FeedbackEvent.HINT: 0.6,
        FeedbackEvent.VICTORY: 0.7,
    }

    def __init__(self, sounds_dir, enabled=True):
        self.sounds_dir = Path(sounds_dir)
        self.enabled = enabled
        self.sounds = {}
        if enabled:
            self.preload_sounds()

    def preload_sounds(self):
        try:
            if not pygame.mixer.get_init():
                pygame.mixer.init()
        except pygame.error as exc:
            logger.warning("Audio unavailable, sounds disabled: %s", exc)
            return

        for event in FeedbackEvent:
            path = self.sounds_dir / f"{event.value}.wav"
            if not path.is_file():
                logger.warning("Sound file not found: %s", path)
                continue
            try:
                sound = pygame.mixer.Sound(str(path))
            except pygame.error as exc:
                logger.warning("Error loading sound %s: %s", path.name, exc)
                continue
            sound.set_volume(self.VOLUMES[event])
            self.sounds[event] = sound

    def toggle(self):
        self.enabled = not self.enabled
        if self.enabled and not self.sounds:
            self.preload_sounds()

    def signal(self, event):
        if not self.enabled:
            return
        sound = self.sounds.get(event)
        if sound is None:
            return
        sound.play()
