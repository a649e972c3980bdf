"""
Quiz Prompt Builder
Constructs the French instruction sent to the completion API
"""
from quizgen.models.generation import GenerationRequest, SourceMode


SCHEMA_INSTRUCTION = (
    "Inclus les réponses correctes. "
    "Formatte la réponse en JSON valide avec un tableau de questions, "
    "chaque question ayant les propriétés suivantes : "
    "question (string), options (un tableau de 4 strings), "
    "et correctAnswer (l'index de la bonne réponse, number). "
    "Retourne uniquement le JSON, sans texte supplémentaire."
)


def _level_phrase(request: GenerationRequest) -> str:
    """Study level, with the specialty appended for licence/master levels"""
    level = request.studyLevel.value
    specialty = request.effective_specialty
    if specialty:
        return f"{level} (spécialité : {specialty})"
    return level


def build_quiz_prompt(request: GenerationRequest) -> str:
    """
    Build the quiz generation prompt for a request

    Args:
        request: Validated generation parameters

    Returns:
        A single instruction string asking for a JSON array of questions
    """
    count = request.numberOfQuestions
    level = _level_phrase(request)
    difficulty = request.difficulty.value

    if request.sourceMode == SourceMode.TEXT:
        lead = (
            f'À partir du texte suivant : "{request.text}", '
            f"génère {count} questions à choix multiples "
            f"pour un niveau {level} avec une difficulté {difficulty}."
        )
    else:
        lead = (
            f'Génère {count} questions à choix multiples sur le sujet "{request.topic}" '
            f"pour un niveau {level} avec une difficulté {difficulty}."
        )

    return f"{lead} {SCHEMA_INSTRUCTION}"
