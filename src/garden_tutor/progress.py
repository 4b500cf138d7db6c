"""Progress record persistence and streak bookkeeping."""
import logging
from datetime import date, datetime
from typing import Optional

from garden_tutor.db import KeyValueStore, ParseError, PROGRESS_KEY, read_json, write_json
from garden_tutor.models import SessionKind, StudySession, UserProgress

logger = logging.getLogger(__name__)


def next_streak(last_study_date: Optional[str], streak: int, today: date) -> int:
    """Streak after studying on ``today``.

    Counts calendar days: yesterday extends the streak, today keeps it,
    anything older starts over at 1.
    """
    if not last_study_date:
        return 1
    last = date.fromisoformat(last_study_date)
    diff_days = (today - last).days
    if diff_days == 1:
        return streak + 1
    if diff_days > 1:
        return 1
    return streak


class ProgressStore:
    """Loads and saves the single UserProgress record."""

    def __init__(self, store: KeyValueStore, key: str = PROGRESS_KEY):
        self.store = store
        self.key = key

    def load(self) -> UserProgress:
        result = read_json(self.store, self.key)
        if result is None:
            return UserProgress()
        if isinstance(result, ParseError):
            logger.warning("Stored progress is corrupt (%s); starting from defaults", result.message)
            return UserProgress()
        try:
            return UserProgress.from_dict(result.value)
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Stored progress has an unexpected shape (%s); starting from defaults", e)
            return UserProgress()

    def save(self, progress: UserProgress) -> None:
        write_json(self.store, self.key, progress.to_dict())

    def record_cycle_completion(self, plants_studied: int, now: Optional[datetime] = None) -> UserProgress:
        today = (now or datetime.now()).date()
        progress = self.load()
        progress.streak_days = next_streak(progress.last_study_date, progress.streak_days, today)
        progress.plants_studied_count += plants_studied
        progress.last_study_date = today.isoformat()
        progress.history.append(StudySession(date=today.isoformat(), kind=SessionKind.CYCLE))
        self.save(progress)
        logger.info("Cycle recorded: %d plants, streak %d", plants_studied, progress.streak_days)
        return progress

    def record_quiz_completion(
        self, correct_count: int, total_count: int = 3, now: Optional[datetime] = None,
    ) -> UserProgress:
        """Add a quiz result to the running totals. The streak is left alone."""
        today = (now or datetime.now()).date()
        progress = self.load()
        progress.quiz_total_questions += total_count
        progress.quiz_correct_answers += correct_count
        progress.history.append(
            StudySession(date=today.isoformat(), kind=SessionKind.QUIZ, score=correct_count)
        )
        self.save(progress)
        logger.info("Quiz recorded: %d/%d", correct_count, total_count)
        return progress
