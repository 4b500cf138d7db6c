"""Quiz question generation."""
import random
from typing import Optional

from garden_tutor.models import LightRequirement, Plant, QuestionType, QuizQuestion

NAME_OPTIONS = 4


class EmptyCatalogError(Exception):
    """There are no plants to build a session from."""


def sample_plants(plants: list[Plant], count: int, rng: Optional[random.Random] = None) -> list[Plant]:
    """Pick up to ``count`` distinct plants uniformly at random."""
    if not plants:
        raise EmptyCatalogError("The plant catalog is empty")
    rng = rng or random.Random()
    return rng.sample(plants, min(count, len(plants)))


def _name_options(target: Plant, plants: list[Plant], rng: random.Random) -> list[str]:
    """The target's common name plus distractors with distinct names, shuffled."""
    seen = {target.common_name}
    distractors = []
    for p in rng.sample(plants, len(plants)):
        if p.common_name in seen:
            continue
        seen.add(p.common_name)
        distractors.append(p.common_name)
        if len(distractors) == NAME_OPTIONS - 1:
            break
    options = [target.common_name] + distractors
    rng.shuffle(options)
    return options


def generate_quiz(plants: list[Plant], rng: Optional[random.Random] = None) -> list[QuizQuestion]:
    """Build the three-question quiz: scientific name, light, photo."""
    rng = rng or random.Random()
    q1_plant = sample_plants(plants, 1, rng)[0]
    q2_plant = sample_plants(plants, 1, rng)[0]
    q3_plant = sample_plants(plants, 1, rng)[0]

    lights = [light.label for light in LightRequirement]
    rng.shuffle(lights)

    return [
        QuizQuestion(
            id=1,
            type=QuestionType.SCIENTIFIC_TO_COMMON,
            question_text=f'What is the common name of "{q1_plant.scientific_name}"?',
            options=_name_options(q1_plant, plants, rng),
            correct_answer=q1_plant.common_name,
        ),
        QuizQuestion(
            id=2,
            type=QuestionType.COMMON_TO_LIGHT,
            question_text=f'How much light does "{q2_plant.common_name}" need?',
            options=lights,
            correct_answer=q2_plant.light.label,
        ),
        QuizQuestion(
            id=3,
            type=QuestionType.PHOTO_TO_COMMON,
            question_text="What is this plant called?",
            options=_name_options(q3_plant, plants, rng),
            correct_answer=q3_plant.common_name,
            image_url=q3_plant.image_url,
        ),
    ]
