"""State machines for the timed study cycle and the quiz."""
import logging
import random
from enum import Enum
from typing import Optional

from garden_tutor.models import Plant, QuizQuestion
from garden_tutor.progress import ProgressStore
from garden_tutor.quiz import generate_quiz, sample_plants

logger = logging.getLogger(__name__)

CYCLE_SECONDS = 180
PLANTS_PER_CYCLE = 2


class SessionState(Enum):
    LOADING = "loading"
    ACTIVE = "active"
    FINISHED = "finished"


class CycleSession:
    """A timed look at a couple of plants.

    The countdown is advanced by ``tick()`` (one second) or ``elapse()``;
    reaching zero finishes the cycle the same way as ``finish()``.
    """

    def __init__(
        self,
        plants: list[Plant],
        progress: ProgressStore,
        rng: Optional[random.Random] = None,
        duration: int = CYCLE_SECONDS,
        plants_per_cycle: int = PLANTS_PER_CYCLE,
    ):
        self.catalog = plants
        self.progress = progress
        self.rng = rng or random.Random()
        self.duration = duration
        self.plants_per_cycle = plants_per_cycle
        self.state = SessionState.LOADING
        self.plants: list[Plant] = []
        self.index = 0
        self.details_shown = False
        self.time_left = duration

    def start(self) -> None:
        if self.state is not SessionState.LOADING:
            return
        self.plants = sample_plants(self.catalog, self.plants_per_cycle, self.rng)
        self.time_left = self.duration
        self.state = SessionState.ACTIVE

    @property
    def is_active(self) -> bool:
        return self.state is SessionState.ACTIVE

    @property
    def is_finished(self) -> bool:
        return self.state is SessionState.FINISHED

    @property
    def current_plant(self) -> Optional[Plant]:
        return self.plants[self.index] if self.plants else None

    @property
    def is_last_plant(self) -> bool:
        return self.index >= len(self.plants) - 1

    def tick(self) -> None:
        if not self.is_active:
            return
        self.time_left = max(0, self.time_left - 1)
        if self.time_left == 0:
            self.finish()

    def elapse(self, seconds: float) -> None:
        for _ in range(int(seconds)):
            if not self.is_active:
                break
            self.tick()

    def toggle_details(self) -> None:
        if self.is_active:
            self.details_shown = not self.details_shown

    def next_plant(self) -> None:
        if not self.is_active or self.is_last_plant:
            return
        self.index += 1
        self.details_shown = False

    def finish(self) -> None:
        if not self.is_active:
            return
        logger.debug("Cycle finished with %d seconds left", self.time_left)
        self.state = SessionState.FINISHED
        self.progress.record_cycle_completion(len(self.plants))

    def format_time(self) -> str:
        m, s = divmod(self.time_left, 60)
        return f"{m}:{s:02d}"


class QuizSession:
    """Three questions answered in order; the first answer to each one counts."""

    def __init__(self, plants: list[Plant], progress: ProgressStore, rng: Optional[random.Random] = None):
        self.catalog = plants
        self.progress = progress
        self.rng = rng or random.Random()
        self.state = SessionState.LOADING
        self.questions: list[QuizQuestion] = []
        self.index = 0
        self.answered = False
        self.selected: Optional[str] = None
        self.score = 0

    def start(self) -> None:
        if self.state is not SessionState.LOADING:
            return
        self.questions = generate_quiz(self.catalog, self.rng)
        self.state = SessionState.ACTIVE

    @property
    def is_finished(self) -> bool:
        return self.state is SessionState.FINISHED

    @property
    def current_question(self) -> Optional[QuizQuestion]:
        return self.questions[self.index] if self.questions else None

    @property
    def is_last_question(self) -> bool:
        return self.index >= len(self.questions) - 1

    def answer(self, option: str) -> Optional[bool]:
        """Lock in an answer. Returns whether it was correct, or None if ignored."""
        if self.state is not SessionState.ACTIVE or self.answered:
            return None
        self.answered = True
        self.selected = option
        correct = self.current_question.is_correct(option)
        if correct:
            self.score += 1
        return correct

    def advance(self) -> None:
        if self.state is not SessionState.ACTIVE or not self.answered:
            return
        if self.is_last_question:
            self.finish()
            return
        self.index += 1
        self.answered = False
        self.selected = None

    def finish(self) -> None:
        if self.state is not SessionState.ACTIVE:
            return
        logger.debug("Quiz finished with score %d", self.score)
        self.state = SessionState.FINISHED
        self.progress.record_quiz_completion(self.score, len(self.questions))
