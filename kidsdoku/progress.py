import json
from dataclasses import asdict, dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path

from kidsdoku.log import get_logger

logger = get_logger(__name__)

PERFECT_RATING = 3.0


@dataclass(frozen=True)
class CompletionEvent:
    """Reported by a session when its puzzle is solved."""
    puzzle_id: str
    size: int
    difficulty: str
    stars: float
    mistakes: int
    hints: int
    elapsed_time: float


# =========================================================================
# LOCAL JSON STORAGE
# =========================================================================
def _load_json(filename, default):
    if filename is None:
        return default
    try:
        with open(filename, "r", encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError:
        return default
    except (json.JSONDecodeError, OSError) as exc:
        logger.warning("Could not read %s, starting fresh: %s", filename, exc)
        return default


def _save_json(filename, data):
    if filename is None:
        return
    try:
        Path(filename).parent.mkdir(parents=True, exist_ok=True)
        with open(filename, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, sort_keys=True)
    except OSError as exc:
        logger.warning("Could not save %s: %s", filename, exc)


# =========================================================================
# GAME HISTORY
# Every finished game, in order.
# =========================================================================
class GameHistory:
    def __init__(self, filename=None):
        self.filename = filename
        self.history = self.load_history()

    def load_history(self):
        data = _load_json(self.filename, [])
        return data if isinstance(data, list) else []

    def save_history(self):
        _save_json(self.filename, self.history)

    def add_game(self, game_data):
        game_data = dict(game_data)
        game_data["timestamp"] = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        self.history.append(game_data)
        self.save_history()

    def __len__(self):
        return len(self.history)


# =========================================================================
# COMPLETED PREMADE PUZZLES AND THEIR RATINGS
# Ids look like "storybook-4-easy-1".
# =========================================================================
def _id_parts(puzzle_id):
    parts = puzzle_id.split("-")
    if len(parts) != 4:
        return None
    return parts


class CompletionStore:
    def __init__(self, filename=None):
        self.filename = filename
        data = _load_json(filename, {})
        if not isinstance(data, dict):
            data = {}
        self.completed = set(data.get("completed", []))
        self.ratings = {key: float(value) for key, value in data.get("ratings", {}).items()}

    def save(self):
        _save_json(self.filename, {"completed": sorted(self.completed), "ratings": self.ratings})

    def mark_completed(self, puzzle_id):
        self.completed.add(puzzle_id)
        self.save()

    def set_rating(self, puzzle_id, rating):
        self.ratings[puzzle_id] = rating
        self.save()

    def rating(self, puzzle_id):
        return self.ratings.get(puzzle_id)

    def is_completed(self, puzzle_id):
        return puzzle_id in self.completed

    @property
    def completed_count(self):
        return len(self.completed)

    @property
    def perfect_count(self):
        return sum(1 for rating in self.ratings.values() if rating >= PERFECT_RATING)

    def count_for_difficulty(self, difficulty):
        count = 0
        for puzzle_id in self.completed:
            parts = _id_parts(puzzle_id)
            if parts and parts[2] == difficulty:
                count += 1
        return count

    def reset_all(self):
        self.completed.clear()
        self.ratings.clear()
        self.save()

    def reset_size(self, size):
        marker = f"-{size}-"
        self.completed = {key for key in self.completed if marker not in key}
        self.ratings = {key: value for key, value in self.ratings.items() if marker not in key}
        self.save()


# =========================================================================
# BADGES
# =========================================================================
class BadgeCategory(Enum):
    QUESTS = "Quests"
    MILESTONES = "Milestones"
    DIFFICULTY = "Difficulty"
    STARS = "Stars"


class Badge(Enum):
    TINY_TALES_COMPLETE = ("tiny_tales_complete", "Tale Teller", BadgeCategory.QUESTS)
    FABLE_ADVENTURES_COMPLETE = ("fable_adventures_complete", "Fable Master", BadgeCategory.QUESTS)
    KINGDOM_CHRONICLES_COMPLETE = ("kingdom_chronicles_complete", "Chronicle Champion", BadgeCategory.QUESTS)
    FIRST_PUZZLE = ("first_puzzle", "First Steps", BadgeCategory.MILESTONES)
    PUZZLE_MASTER_10 = ("puzzle_master_10", "Rising Star", BadgeCategory.MILESTONES)
    PUZZLE_MASTER_25 = ("puzzle_master_25", "Puzzle Pro", BadgeCategory.MILESTONES)
    PUZZLE_MASTER_50 = ("puzzle_master_50", "Puzzle Expert", BadgeCategory.MILESTONES)
    PUZZLE_MASTER_100 = ("puzzle_master_100", "Puzzle Legend", BadgeCategory.MILESTONES)
    EASY_EXPLORER = ("easy_explorer", "Easy Explorer", BadgeCategory.DIFFICULTY)
    NORMAL_NAVIGATOR = ("normal_navigator", "Normal Navigator", BadgeCategory.DIFFICULTY)
    HARD_HERO = ("hard_hero", "Hard Hero", BadgeCategory.DIFFICULTY)
    PERFECT_STAR = ("perfect_star", "Perfect Star", BadgeCategory.STARS)
    STAR_COLLECTOR_10 = ("star_collector_10", "Star Collector", BadgeCategory.STARS)

    def __init__(self, key, display_name, category):
        self.key = key
        self.display_name = display_name
        self.category = category

    @classmethod
    def from_key(cls, key):
        for badge in cls:
            if badge.key == key:
                return badge
        return None


MILESTONE_BADGES = [
    (1, Badge.FIRST_PUZZLE),
    (10, Badge.PUZZLE_MASTER_10),
    (25, Badge.PUZZLE_MASTER_25),
    (50, Badge.PUZZLE_MASTER_50),
    (100, Badge.PUZZLE_MASTER_100),
]
DIFFICULTY_BADGES = {"easy": Badge.EASY_EXPLORER, "normal": Badge.NORMAL_NAVIGATOR, "hard": Badge.HARD_HERO}
DIFFICULTY_BADGE_THRESHOLD = 5
STAR_BADGES = [(1, Badge.PERFECT_STAR), (10, Badge.STAR_COLLECTOR_10)]
QUEST_BADGES = {3: Badge.TINY_TALES_COMPLETE, 4: Badge.FABLE_ADVENTURES_COMPLETE, 6: Badge.KINGDOM_CHRONICLES_COMPLETE}


class BadgeBook:
    def __init__(self, filename=None):
        self.filename = filename
        data = _load_json(filename, [])
        self.earned = set(data) if isinstance(data, list) else set()

    def has_badge(self, badge):
        return badge.key in self.earned

    def earn_badge(self, badge):
        """Records a badge. Returns False if it was already earned."""
        if self.has_badge(badge):
            return False
        self.earned.add(badge.key)
        _save_json(self.filename, sorted(self.earned))
        logger.info("Badge earned: %s", badge.display_name)
        return True

    def badges(self, category=None):
        return [badge for badge in Badge if category is None or badge.category == category]

    def reset(self):
        self.earned.clear()
        _save_json(self.filename, [])

    def check_and_award(self, completions, catalog=None):
        """Awards every badge the current completion data qualifies for; returns the new ones."""
        qualified = []

        for threshold, badge in MILESTONE_BADGES:
            if completions.completed_count >= threshold:
                qualified.append(badge)

        if catalog is not None:
            for size, badge in QUEST_BADGES.items():
                puzzles = catalog.puzzles(size)
                if puzzles and all(completions.is_completed(puzzle.id) for puzzle in puzzles):
                    qualified.append(badge)

        for difficulty, badge in DIFFICULTY_BADGES.items():
            if completions.count_for_difficulty(difficulty) >= DIFFICULTY_BADGE_THRESHOLD:
                qualified.append(badge)

        for threshold, badge in STAR_BADGES:
            if completions.perfect_count >= threshold:
                qualified.append(badge)

        return [badge for badge in qualified if self.earn_badge(badge)]


# =========================================================================
# PROGRESS TRACKER
# The session's completion listener.
# =========================================================================
class ProgressTracker:
    def __init__(self, completions=None, badges=None, history=None, catalog=None):
        self.completions = completions if completions is not None else CompletionStore()
        self.badges = badges if badges is not None else BadgeBook()
        self.history = history if history is not None else GameHistory()
        self.catalog = catalog
        self.newly_earned = []

    @classmethod
    def from_settings(cls, settings, catalog=None):
        return cls(
            completions=CompletionStore(settings.completions_file),
            badges=BadgeBook(settings.badges_file),
            history=GameHistory(settings.history_file),
            catalog=catalog,
        )

    def puzzle_completed(self, event):
        self.history.add_game(asdict(event))

        # Only catalog puzzles have a stable identity to track
        if event.puzzle_id:
            self.completions.mark_completed(event.puzzle_id)
            self.completions.set_rating(event.puzzle_id, event.stars)

        self.newly_earned = self.badges.check_and_award(self.completions, self.catalog)
        return self.newly_earned
