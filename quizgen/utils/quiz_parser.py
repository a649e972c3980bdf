"""
Quiz Parser
Extracts, parses and validates the question array from an LLM completion
"""
import json
import re
import logging
from typing import Any, List, Optional, Tuple

from quizgen.models.quiz_sessions import OPTIONS_COUNT, Question

logger = logging.getLogger(__name__)


class QuizParseError(Exception):
    """Base exception for quiz parsing errors"""
    pass


class NoJsonFoundError(QuizParseError):
    """Raised when the completion contains no [...] span"""
    pass


class JsonParseError(QuizParseError):
    """Raised when the extracted span is not valid JSON"""
    pass


class SchemaValidationError(QuizParseError):
    """Raised when the parsed JSON does not match the question schema"""
    pass


# Greedy: from the first "[" to the last "]", across lines
JSON_ARRAY_PATTERN = re.compile(r"\[.*\]", re.DOTALL)


def _extract_json_array(text: str) -> str:
    """
    Extract the first array-shaped span from the completion text

    Raises:
        NoJsonFoundError: If no bracketed span exists
    """
    match = JSON_ARRAY_PATTERN.search(text or "")
    if not match:
        raise NoJsonFoundError("No JSON array found in response")
    return match.group(0)


def _as_index(value: Any) -> Optional[int]:
    """JSON number with an integral value as an int (1.0 -> 1), else None"""
    # bool is an int subclass but never a valid index
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def _question_error(item: Any, index: int) -> Optional[str]:
    """Return why a single item is not a valid question, or None"""
    label = f"Question {index + 1}"

    if not isinstance(item, dict):
        return f"{label}: Expected object, got {type(item).__name__}"

    question = item.get("question")
    if not isinstance(question, str) or not question:
        return f"{label}: 'question' must be a non-empty string"

    options = item.get("options")
    if not isinstance(options, list):
        return f"{label}: 'options' must be a list"
    if len(options) != OPTIONS_COUNT:
        return f"{label}: Expected {OPTIONS_COUNT} options, got {len(options)}"
    if not all(isinstance(opt, str) for opt in options):
        return f"{label}: every option must be a string"

    answer = _as_index(item.get("correctAnswer"))
    if answer is None:
        return f"{label}: 'correctAnswer' must be an integer"
    if not 0 <= answer < OPTIONS_COUNT:
        return f"{label}: 'correctAnswer' must be between 0 and {OPTIONS_COUNT - 1}, got {answer}"

    return None


def check_question_schema(data: Any) -> Tuple[Optional[List[Question]], Optional[str]]:
    """
    Validate parsed JSON against the question schema, all-or-nothing

    Args:
        data: Decoded JSON value

    Returns:
        Tuple of (questions, error_message)
        - On success: (questions, None)
        - On failure: (None, reason); one bad element rejects the whole set
    """
    if not isinstance(data, list):
        return None, f"Expected a JSON array, got {type(data).__name__}"

    if len(data) == 0:
        return None, "Quiz array is empty"

    for idx, item in enumerate(data):
        error = _question_error(item, idx)
        if error:
            return None, error

    questions = [
        Question(
            question=item["question"],
            options=list(item["options"]),
            correctAnswer=_as_index(item["correctAnswer"])
        )
        for item in data
    ]
    return questions, None


def parse_quiz_json(raw_response: str) -> List[Question]:
    """
    Parse and validate quiz JSON from an LLM response

    Args:
        raw_response: Raw completion text, possibly with prose around the array

    Returns:
        List of validated questions in their original order

    Raises:
        NoJsonFoundError: If no array-shaped span is present
        JsonParseError: If the span is not valid JSON
        SchemaValidationError: If any element breaks the question schema

    Example:
        >>> raw = 'Voici : [{"question": "2+2 ?", "options": ["3","4","5","6"], "correctAnswer": 1}]'
        >>> parse_quiz_json(raw)[0].correctAnswer
        1
    """
    logger.debug(f"Parsing quiz response ({len(raw_response or '')} chars)")

    span = _extract_json_array(raw_response)

    try:
        data = json.loads(span)
    except json.JSONDecodeError as e:
        logger.error(f"❌ JSON parse failed: {e}")
        logger.debug(f"Extracted span: {span[:500]}...")
        raise JsonParseError(f"Failed to parse JSON: {e}")

    questions, error = check_question_schema(data)
    if error:
        logger.error(f"❌ Quiz schema validation failed: {error}")
        raise SchemaValidationError(error)

    logger.info(f"✅ Successfully parsed {len(questions)} quiz questions")
    return questions
