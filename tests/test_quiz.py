"""Tests for quiz generation."""
import random

import pytest

from garden_tutor.models import LightRequirement, Plant, QuestionType
from garden_tutor.quiz import EmptyCatalogError, generate_quiz, sample_plants

LIGHT_LABELS = {l.label for l in LightRequirement}


def test_generates_three_questions_in_order(plants):
    questions = generate_quiz(plants, random.Random(1))
    assert [q.id for q in questions] == [1, 2, 3]
    assert [q.type for q in questions] == [
        QuestionType.SCIENTIFIC_TO_COMMON,
        QuestionType.COMMON_TO_LIGHT,
        QuestionType.PHOTO_TO_COMMON,
    ]


@pytest.mark.parametrize("seed", range(25))
def test_name_questions_have_four_distinct_options(plants, seed):
    questions = generate_quiz(plants, random.Random(seed))
    for q in (questions[0], questions[2]):
        assert len(q.options) == 4
        assert len(set(q.options)) == 4
        assert q.options.count(q.correct_answer) == 1


@pytest.mark.parametrize("seed", range(25))
def test_light_question_has_every_label_once(plants, seed):
    q = generate_quiz(plants, random.Random(seed))[1]
    assert len(q.options) == 3
    assert set(q.options) == LIGHT_LABELS
    assert q.correct_answer in q.options


def test_scientific_question_matches_plant(plants):
    q = generate_quiz(plants, random.Random(7))[0]
    by_common = {p.common_name: p for p in plants}
    assert by_common[q.correct_answer].scientific_name in q.question_text
    assert q.image_url is None


def test_light_question_answer_matches_plant(plants):
    q = generate_quiz(plants, random.Random(3))[1]
    plant = next(p for p in plants if f'"{p.common_name}"' in q.question_text)
    assert q.correct_answer == plant.light.label


def test_photo_question_uses_effective_image(small_catalog):
    custom = [p.with_image(f"data:image/jpeg;base64,{p.id}") for p in small_catalog]
    q = generate_quiz(custom, random.Random(5))[2]
    plant = next(p for p in custom if p.common_name == q.correct_answer)
    assert q.image_url == plant.image_url
    assert q.image_url.startswith("data:")


def test_duplicate_common_names_are_not_repeated():
    dupes = [
        Plant(id=str(i), common_name="Fern" if i < 4 else f"Plant {i}", scientific_name=f"S{i}",
              light=LightRequirement.SHADE)
        for i in range(8)
    ]
    for seed in range(20):
        q = generate_quiz(dupes, random.Random(seed))[0]
        assert len(q.options) == len(set(q.options)) == 4


def test_small_catalog_gives_fewer_options():
    two = [
        Plant(id="a", common_name="A", scientific_name="Aa", light=LightRequirement.SHADE),
        Plant(id="b", common_name="B", scientific_name="Bb", light=LightRequirement.FULL_SUN),
    ]
    q = generate_quiz(two, random.Random(0))[0]
    assert sorted(q.options) == ["A", "B"]


def test_options_are_shuffled(plants):
    positions = {
        generate_quiz(plants, random.Random(seed))[0].options.index(
            generate_quiz(plants, random.Random(seed))[0].correct_answer
        )
        for seed in range(40)
    }
    assert len(positions) > 1


def test_same_seed_same_quiz(plants):
    assert generate_quiz(plants, random.Random(11)) == generate_quiz(plants, random.Random(11))


# --- Edge case tests ---


def test_empty_catalog_raises():
    with pytest.raises(EmptyCatalogError):
        generate_quiz([])


def test_sample_plants_distinct(plants):
    picked = sample_plants(plants, 2, random.Random(0))
    assert len(picked) == 2
    assert picked[0].id != picked[1].id


def test_sample_plants_count_exceeds_available(small_catalog):
    assert len(sample_plants(small_catalog, 50)) == len(small_catalog)


def test_sample_plants_empty():
    with pytest.raises(EmptyCatalogError):
        sample_plants([], 2)
