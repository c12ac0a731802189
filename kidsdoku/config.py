import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

PACKAGE_DIR = Path(__file__).resolve().parent


def _flag(name, default):
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _int(name, default):
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return int(value)


@dataclass(frozen=True)
class Settings:
    data_dir: Path
    sounds_dir: Path
    sound_enabled: bool = True
    show_numbers: bool = True
    board_size: int = 4
    seed: int = None
    log_level: str = "INFO"

    @property
    def history_file(self):
        return self.data_dir / "history.json"

    @property
    def completions_file(self):
        return self.data_dir / "completions.json"

    @property
    def badges_file(self):
        return self.data_dir / "badges.json"


def load_settings(env_file=None):
    """
    Reads settings from the environment, after loading a ``.env`` file.

    Variables already present in the environment win over the file.
    """
    load_dotenv(env_file)

    data_dir = os.getenv("KIDSDOKU_DATA_DIR") or str(Path.home() / ".kidsdoku")
    sounds_dir = os.getenv("KIDSDOKU_SOUNDS_DIR") or str(PACKAGE_DIR / "sounds")

    return Settings(
        data_dir=Path(data_dir).expanduser(),
        sounds_dir=Path(sounds_dir).expanduser(),
        sound_enabled=_flag("KIDSDOKU_SOUND_ENABLED", True),
        show_numbers=_flag("KIDSDOKU_SHOW_NUMBERS", True),
        board_size=_int("KIDSDOKU_BOARD_SIZE", 4),
        seed=_int("KIDSDOKU_SEED", None),
        log_level=os.getenv("KIDSDOKU_LOG_LEVEL", "INFO").upper(),
    )
