import pytest
from pydantic import ValidationError

from quizgen.models.generation import GenerationRequest, StudyLevel
from quizgen.utils.quiz_prompt import SCHEMA_INSTRUCTION, build_quiz_prompt


def test_topic_prompt_contains_topic_and_count(topic_request):
    prompt = build_quiz_prompt(topic_request)

    assert '"Photosynthesis"' in prompt
    assert "Génère 3 questions" in prompt
    assert "niveau seconde" in prompt
    assert "difficulté facile" in prompt
    assert prompt.endswith(SCHEMA_INSTRUCTION)


def test_text_prompt_contains_source_text():
    source = "Les plantes captent la lumière.\nElles produisent du glucose."
    request = GenerationRequest(
        sourceMode="text",
        text=source,
        numberOfQuestions=7,
        difficulty="difficile",
        studyLevel="terminale",
        apiKey="sk-test",
    )

    prompt = build_quiz_prompt(request)

    assert prompt.startswith(f'À partir du texte suivant : "{source}"')
    assert "génère 7 questions" in prompt
    assert "difficulté difficile" in prompt


def test_schema_directive_names_every_field(topic_request):
    prompt = build_quiz_prompt(topic_request)

    for field in ("question (string)", "options (un tableau de 4 strings)", "correctAnswer"):
        assert field in prompt
    assert "Retourne uniquement le JSON" in prompt


def test_specialty_used_for_graduate_levels():
    request = GenerationRequest(
        topic="Graphes",
        studyLevel="master1",
        specialty="Informatique",
        apiKey="sk-test",
    )

    assert "niveau master1 (spécialité : Informatique)" in build_quiz_prompt(request)


def test_specialty_ignored_below_licence():
    request = GenerationRequest(
        topic="Fractions",
        studyLevel="cinquième",
        specialty="Informatique",
        apiKey="sk-test",
    )

    prompt = build_quiz_prompt(request)
    assert "spécialité" not in prompt
    assert "niveau cinquième avec" in prompt


def test_graduate_levels():
    graduate = {level for level in StudyLevel if level.is_graduate}
    assert graduate == {
        StudyLevel.LICENCE1,
        StudyLevel.LICENCE2,
        StudyLevel.LICENCE3,
        StudyLevel.MASTER1,
        StudyLevel.MASTER2,
    }
    assert len(StudyLevel) == 12


@pytest.mark.parametrize(
    "fields",
    [
        {"sourceMode": "topic", "topic": ""},
        {"sourceMode": "topic", "topic": "   "},
        {"sourceMode": "text"},
        {"sourceMode": "topic", "topic": "A", "text": "B"},
    ],
)
def test_request_rejects_missing_or_double_source(fields):
    with pytest.raises(ValidationError):
        GenerationRequest(apiKey="sk-test", **fields)


@pytest.mark.parametrize("count", [0, 11])
def test_request_question_count_bounds(count):
    with pytest.raises(ValidationError):
        GenerationRequest(topic="A", numberOfQuestions=count, apiKey="sk-test")


def test_request_requires_api_key():
    with pytest.raises(ValidationError):
        GenerationRequest(topic="A", apiKey="")
