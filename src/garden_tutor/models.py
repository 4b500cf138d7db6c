"""Data classes for the garden tutor domain model."""
from dataclasses import dataclass, field, replace
from datetime import date
from enum import Enum
from typing import Optional


class LightRequirement(Enum):
    FULL_SUN = "Full sun"
    PARTIAL_SHADE = "Partial shade"
    SHADE = "Shade"

    @property
    def label(self) -> str:
        return self.value

    @classmethod
    def from_label(cls, label: str) -> "LightRequirement":
        """Accept either the display label or the enum name."""
        for member in cls:
            if label in (member.value, member.name):
                return member
        raise ValueError(f"Unknown light requirement: {label!r}")


class SessionKind(Enum):
    CYCLE = "CYCLE"
    QUIZ = "QUIZ"


class QuestionType(Enum):
    SCIENTIFIC_TO_COMMON = "SCIENTIFIC_TO_COMMON"
    COMMON_TO_LIGHT = "COMMON_TO_LIGHT"
    PHOTO_TO_COMMON = "PHOTO_TO_COMMON"


@dataclass(frozen=True)
class Plant:
    id: str
    common_name: str
    scientific_name: str
    light: LightRequirement
    category: str = ""
    trivia: str = ""
    image_url: str = ""

    def with_image(self, image_url: str) -> "Plant":
        return replace(self, image_url=image_url)

    @classmethod
    def from_dict(cls, data: dict) -> "Plant":
        return cls(
            id=str(data["id"]),
            common_name=data["commonName"],
            scientific_name=data["scientificName"],
            light=LightRequirement.from_label(data["light"]),
            category=data.get("category", ""),
            trivia=data.get("trivia", ""),
            image_url=data.get("imageUrl", ""),
        )


@dataclass(frozen=True)
class StudySession:
    date: str
    kind: SessionKind
    score: Optional[int] = None

    def to_dict(self) -> dict:
        entry = {"date": self.date, "type": self.kind.value}
        if self.kind is SessionKind.QUIZ and self.score is not None:
            entry["score"] = self.score
        return entry

    @classmethod
    def from_dict(cls, data: dict) -> "StudySession":
        kind = SessionKind(data["type"])
        score = data.get("score") if kind is SessionKind.QUIZ else None
        return cls(date=str(data["date"]), kind=kind, score=None if score is None else int(score))


@dataclass
class UserProgress:
    plants_studied_count: int = 0
    last_study_date: Optional[str] = None  # ISO calendar date
    streak_days: int = 0
    quiz_total_questions: int = 0
    quiz_correct_answers: int = 0
    history: list[StudySession] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "plantsStudiedCount": self.plants_studied_count,
            "lastStudyDate": self.last_study_date,
            "streakDays": self.streak_days,
            "quizTotalQuestions": self.quiz_total_questions,
            "quizCorrectAnswers": self.quiz_correct_answers,
            "history": [s.to_dict() for s in self.history],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "UserProgress":
        """Build a record from its stored form. Raises on malformed data."""
        if not isinstance(data, dict):
            raise TypeError(f"Expected an object, got {type(data).__name__}")
        last = data.get("lastStudyDate")
        return cls(
            plants_studied_count=int(data.get("plantsStudiedCount", 0)),
            last_study_date=date.fromisoformat(str(last)).isoformat() if last else None,
            streak_days=int(data.get("streakDays", 0)),
            quiz_total_questions=int(data.get("quizTotalQuestions", 0)),
            quiz_correct_answers=int(data.get("quizCorrectAnswers", 0)),
            history=[StudySession.from_dict(s) for s in data.get("history", [])],
        )


@dataclass
class QuizQuestion:
    id: int
    type: QuestionType
    question_text: str
    options: list[str]
    correct_answer: str
    image_url: Optional[str] = None

    def is_correct(self, option: str) -> bool:
        return option == self.correct_answer
