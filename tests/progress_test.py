import json

from kidsdoku.catalog import PremadePuzzleCatalog
from kidsdoku.config import Settings
from kidsdoku.progress import (
    Badge,
    BadgeBook,
    BadgeCategory,
    CompletionEvent,
    CompletionStore,
    GameHistory,
    ProgressTracker,
)

CATALOG = PremadePuzzleCatalog.default()


def _event(puzzle_id="storybook-4-easy-1", stars=3.0):
    return CompletionEvent(
        puzzle_id=puzzle_id,
        size=4,
        difficulty="easy",
        stars=stars,
        mistakes=0,
        hints=0,
        elapsed_time=42.0,
    )


def _complete(store, count, difficulty="easy", size=4, rating=1.0):
    for number in range(1, count + 1):
        puzzle_id = f"storybook-{size}-{difficulty}-{number}"
        store.mark_completed(puzzle_id)
        store.set_rating(puzzle_id, rating)


# ---------- Storage ----------


def test_history_round_trip(tmp_path):
    path = tmp_path / "history.json"
    history = GameHistory(path)
    history.add_game({"size": 4, "stars": 2.5})

    reloaded = GameHistory(path)
    assert len(reloaded) == 1
    assert reloaded.history[0]["stars"] == 2.5
    assert "timestamp" in reloaded.history[0]


def test_corrupt_file_starts_fresh(tmp_path, caplog):
    path = tmp_path / "completions.json"
    path.write_text("{not json", encoding="utf-8")

    store = CompletionStore(path)
    assert store.completed_count == 0
    assert "Could not read" in caplog.text


def test_completion_store_round_trip(tmp_path):
    path = tmp_path / "nested" / "completions.json"
    store = CompletionStore(path)
    store.mark_completed("storybook-4-easy-1")
    store.set_rating("storybook-4-easy-1", 2.5)

    data = json.loads(path.read_text(encoding="utf-8"))
    assert data == {"completed": ["storybook-4-easy-1"], "ratings": {"storybook-4-easy-1": 2.5}}

    reloaded = CompletionStore(path)
    assert reloaded.is_completed("storybook-4-easy-1")
    assert reloaded.rating("storybook-4-easy-1") == 2.5


def test_completion_counts_and_resets():
    store = CompletionStore()
    _complete(store, 3, "easy", size=4, rating=3.0)
    _complete(store, 2, "hard", size=6, rating=2.0)

    assert store.completed_count == 5
    assert store.count_for_difficulty("easy") == 3
    assert store.count_for_difficulty("hard") == 2
    assert store.perfect_count == 3

    store.reset_size(4)
    assert store.completed_count == 2
    assert store.rating("storybook-4-easy-1") is None

    store.reset_all()
    assert store.completed_count == 0


# ---------- Badges ----------


def test_first_puzzle_badge():
    store = CompletionStore()
    badges = BadgeBook()
    _complete(store, 1)

    earned = badges.check_and_award(store)
    assert Badge.FIRST_PUZZLE in earned
    assert badges.has_badge(Badge.FIRST_PUZZLE)
    # Already earned badges are not reported twice
    assert Badge.FIRST_PUZZLE not in badges.check_and_award(store)


def test_milestone_thresholds():
    store = CompletionStore()
    badges = BadgeBook()

    _complete(store, 9, "easy")
    badges.check_and_award(store)
    assert not badges.has_badge(Badge.PUZZLE_MASTER_10)

    store.mark_completed("storybook-6-normal-1")
    badges.check_and_award(store)
    assert badges.has_badge(Badge.PUZZLE_MASTER_10)
    assert not badges.has_badge(Badge.PUZZLE_MASTER_25)


def test_difficulty_badge_needs_five():
    store = CompletionStore()
    badges = BadgeBook()

    _complete(store, 4, "hard")
    badges.check_and_award(store)
    assert not badges.has_badge(Badge.HARD_HERO)

    _complete(store, 5, "hard")
    badges.check_and_award(store)
    assert badges.has_badge(Badge.HARD_HERO)
    assert not badges.has_badge(Badge.EASY_EXPLORER)


def test_star_badges():
    store = CompletionStore()
    badges = BadgeBook()

    _complete(store, 9, rating=3.0)
    badges.check_and_award(store)
    assert badges.has_badge(Badge.PERFECT_STAR)
    assert not badges.has_badge(Badge.STAR_COLLECTOR_10)

    _complete(store, 10, rating=3.0)
    badges.check_and_award(store)
    assert badges.has_badge(Badge.STAR_COLLECTOR_10)


def test_quest_badge_for_finishing_a_size():
    store = CompletionStore()
    badges = BadgeBook()
    for premade in CATALOG.puzzles(4):
        store.mark_completed(premade.id)

    earned = badges.check_and_award(store, CATALOG)
    assert Badge.FABLE_ADVENTURES_COMPLETE in earned
    assert Badge.KINGDOM_CHRONICLES_COMPLETE not in earned
    # No 3x3 catalog, so that quest cannot be finished
    assert Badge.TINY_TALES_COMPLETE not in earned


def test_badge_book_persists(tmp_path):
    path = tmp_path / "badges.json"
    BadgeBook(path).earn_badge(Badge.PERFECT_STAR)

    book = BadgeBook(path)
    assert book.has_badge(Badge.PERFECT_STAR)
    assert Badge.from_key("perfect_star") is Badge.PERFECT_STAR
    assert len(book.badges(BadgeCategory.MILESTONES)) == 5

    book.reset()
    assert not BadgeBook(path).has_badge(Badge.PERFECT_STAR)


# ---------- Tracker ----------


def test_tracker_records_premade_completion():
    tracker = ProgressTracker(catalog=CATALOG)
    earned = tracker.puzzle_completed(_event())

    assert tracker.completions.is_completed("storybook-4-easy-1")
    assert tracker.completions.rating("storybook-4-easy-1") == 3.0
    assert len(tracker.history) == 1
    assert Badge.FIRST_PUZZLE in earned
    assert Badge.PERFECT_STAR in earned
    assert tracker.newly_earned == earned


def test_tracker_keeps_history_for_generated_puzzles():
    tracker = ProgressTracker()
    earned = tracker.puzzle_completed(_event(puzzle_id=None))

    assert len(tracker.history) == 1
    assert tracker.completions.completed_count == 0
    assert earned == []


def test_tracker_from_settings_uses_data_dir(tmp_path):
    settings = Settings(data_dir=tmp_path, sounds_dir=tmp_path)
    tracker = ProgressTracker.from_settings(settings, CATALOG)
    tracker.puzzle_completed(_event())

    assert (tmp_path / "history.json").exists()
    assert (tmp_path / "completions.json").exists()
    assert (tmp_path / "badges.json").exists()


def test_finishing_the_catalog_reaches_fifty_completions():
    store = CompletionStore()
    badges = BadgeBook()
    for premade in CATALOG:
        store.mark_completed(premade.id)

    earned = badges.check_and_award(store, CATALOG)
    assert Badge.PUZZLE_MASTER_25 in earned
    assert Badge.PUZZLE_MASTER_50 in earned
    assert Badge.PUZZLE_MASTER_100 not in earned
    assert Badge.FABLE_ADVENTURES_COMPLETE in earned
    assert Badge.KINGDOM_CHRONICLES_COMPLETE in earned
