"""End-to-end test of the core workflow."""
import random
from datetime import datetime

from garden_tutor.catalog import CustomImageStore, PlantCatalog, load_base_catalog
from garden_tutor.dashboard import get_leaderboard, get_study_stats
from garden_tutor.db import KeyValueStore
from garden_tutor.progress import ProgressStore
from garden_tutor.session import CYCLE_SECONDS, CycleSession, QuizSession


def test_full_study_day_workflow(tmp_db, make_image):
    """Upload a photo, run a timed cycle and a quiz, and check the dashboard."""
    store = KeyValueStore(tmp_db)
    progress = ProgressStore(store)
    catalog = PlantCatalog(load_base_catalog(), CustomImageStore(store))

    # Custom photo shows up in the merged catalog
    blob = catalog.update_plant_image("lavender", make_image(1500, 1000))
    assert catalog.get("lavender").image_url == blob

    # Cycle runs out the clock
    cycle = CycleSession(catalog.plants, progress, random.Random(0))
    cycle.start()
    cycle.toggle_details()
    cycle.next_plant()
    for _ in range(CYCLE_SECONDS):
        cycle.tick()
    assert cycle.is_finished

    # Quiz: two right, one wrong
    quiz = QuizSession(catalog.plants, progress, random.Random(0))
    quiz.start()
    for i in range(3):
        q = quiz.current_question
        pick = q.correct_answer if i < 2 else next(o for o in q.options if o != q.correct_answer)
        quiz.answer(pick)
        quiz.advance()
    assert quiz.is_finished

    # Everything survives a fresh store instance
    reopened = ProgressStore(KeyValueStore(tmp_db)).load()
    stats = get_study_stats(reopened)
    assert stats["plants_studied"] == 2
    assert stats["streak_days"] == 1
    assert stats["cycles_completed"] == 1
    assert stats["quizzes_taken"] == 1
    assert stats["quiz_accuracy"] == 67
    you = next(e for e in get_leaderboard(reopened) if e["is_you"])
    assert you["points"] == 2 * 10 + 2 * 5

    # Reset the photo and the base image comes back
    catalog.reset_custom_image("lavender")
    base = next(p for p in load_base_catalog() if p.id == "lavender")
    assert catalog.get("lavender").image_url == base.image_url


def test_streak_over_consecutive_days(tmp_db):
    progress = ProgressStore(KeyValueStore(tmp_db))
    for day in (1, 2, 3):
        progress.record_cycle_completion(2, now=datetime(2024, 6, day, 18, 0))
    assert progress.load().streak_days == 3
    progress.record_cycle_completion(2, now=datetime(2024, 6, 3, 21, 0))
    assert progress.load().streak_days == 3
    progress.record_cycle_completion(2, now=datetime(2024, 6, 6, 9, 0))
    assert progress.load().streak_days == 1
