"""Progress dashboard scoring and statistics."""
from garden_tutor.models import SessionKind, StudySession, UserProgress

# Fixed sample entries shown alongside the user on the weekly ranking.
SAMPLE_RANKING = [
    ("Carlos M.", 450),
    ("Ana P.", 210),
    ("Roberto S.", 180),
]
YOU = "You"


def get_accuracy_label(score: float) -> str:
    if score >= 80:
        return "EXPERT"
    elif score >= 60:
        return "GROWING"
    elif score >= 40:
        return "SPROUTING"
    return "SEEDLING"


def get_accuracy_color(score: float) -> str:
    if score >= 80:
        return "green"
    elif score >= 60:
        return "yellow"
    elif score >= 40:
        return "dark_orange"
    return "red"


def quiz_accuracy(progress: UserProgress) -> int:
    """Percentage of quiz answers that were correct, rounded."""
    if progress.quiz_total_questions == 0:
        return 0
    return round(progress.quiz_correct_answers / progress.quiz_total_questions * 100)


def ranking_points(progress: UserProgress) -> int:
    return progress.plants_studied_count * 10 + progress.quiz_correct_answers * 5


def get_leaderboard(progress: UserProgress) -> list[dict]:
    entries = [(YOU, ranking_points(progress))] + SAMPLE_RANKING
    entries.sort(key=lambda e: e[1], reverse=True)
    return [
        {"rank": i, "name": name, "points": points, "is_you": name == YOU}
        for i, (name, points) in enumerate(entries, 1)
    ]


def get_study_stats(progress: UserProgress) -> dict:
    cycles = sum(1 for s in progress.history if s.kind is SessionKind.CYCLE)
    quizzes = [s for s in progress.history if s.kind is SessionKind.QUIZ]
    return {
        "plants_studied": progress.plants_studied_count,
        "streak_days": progress.streak_days,
        "cycles_completed": cycles,
        "quizzes_taken": len(quizzes),
        "quiz_accuracy": quiz_accuracy(progress),
        "last_study_date": progress.last_study_date,
    }


def recent_history(progress: UserProgress, limit: int = 5) -> list[StudySession]:
    """Most recent sessions first."""
    return list(reversed(progress.history[-limit:])) if limit > 0 else []
