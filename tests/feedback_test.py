import pygame
import pytest

from kidsdoku.feedback import Feedback, FeedbackEvent, NullFeedback, SoundFeedback


@pytest.fixture(autouse=True)
def quit_mixer():
    yield
    if pygame.mixer.get_init():
        pygame.mixer.quit()


def test_disabled_feedback_loads_nothing(tmp_path):
    feedback = SoundFeedback(tmp_path, enabled=False)
    assert feedback.sounds == {}
    for event in FeedbackEvent:
        feedback.signal(event)


def test_missing_sound_files_only_warn(tmp_path, caplog):
    feedback = SoundFeedback(tmp_path, enabled=True)

    assert feedback.sounds == {}
    assert "Sound file not found" in caplog.text or "Audio unavailable" in caplog.text
    feedback.signal(FeedbackEvent.VICTORY)


def test_unreadable_sound_file_is_skipped(tmp_path, caplog):
    (tmp_path / "hint.wav").write_bytes(b"not a wave file")
    feedback = SoundFeedback(tmp_path, enabled=True)

    assert FeedbackEvent.HINT not in feedback.sounds
    feedback.signal(FeedbackEvent.HINT)


def test_toggle(tmp_path):
    feedback = SoundFeedback(tmp_path, enabled=False)
    feedback.toggle()
    assert feedback.enabled
    feedback.toggle()
    assert not feedback.enabled


def test_volumes_cover_every_event():
    assert set(SoundFeedback.VOLUMES) == set(FeedbackEvent)
    assert SoundFeedback.VOLUMES[FeedbackEvent.VICTORY] == 0.7


def test_base_feedback_must_be_implemented():
    with pytest.raises(NotImplementedError):
        Feedback().signal(FeedbackEvent.HINT)
    NullFeedback().signal(FeedbackEvent.HINT)
