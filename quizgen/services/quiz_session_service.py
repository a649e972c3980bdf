"""
Quiz Session Service
State machine for one quiz run: generate -> answer/advance -> submit -> restart

States:
    empty        no questions yet (initial, and after any generation failure)
    generating   completion request in flight
    in_progress  questions loaded, results hidden
    completed    results visible
"""
import logging
from typing import Awaitable, Callable, Dict, Optional, Type

from quizgen.models.generation import GenerationRequest
from quizgen.models.quiz_sessions import (
    OPTIONS_COUNT,
    Question,
    QuestionResult,
    QuizResults,
    QuizSession,
    SessionState,
)
from quizgen.services.llm_client import (
    LLMClientError,
    MalformedResponseError,
    NetworkError,
    request_completion,
)
from quizgen.utils.quiz_parser import (
    JsonParseError,
    NoJsonFoundError,
    QuizParseError,
    SchemaValidationError,
    parse_quiz_json,
)
from quizgen.utils.quiz_prompt import build_quiz_prompt

logger = logging.getLogger(__name__)

CompletionFunc = Callable[[str, str], Awaitable[str]]

GENERATION_FAILED = "Erreur lors de la génération des questions"

ERROR_MESSAGES: Dict[Type[Exception], str] = {
    NetworkError: GENERATION_FAILED,
    MalformedResponseError: GENERATION_FAILED,
    NoJsonFoundError: "Aucun JSON valide trouvé dans la réponse",
    JsonParseError: "Erreur lors du parsing des questions",
    SchemaValidationError: "Le format des questions est incorrect",
}


class InvalidTransitionError(Exception):
    """Raised when an action is not allowed in the current session state"""
    pass


def error_message_for(exc: Exception) -> str:
    """User-facing message for a generation failure, by failing stage"""
    for exc_type, message in ERROR_MESSAGES.items():
        if isinstance(exc, exc_type):
            return message
    return GENERATION_FAILED


class QuizSessionController:
    """Owns one QuizSession and exposes its allowed transitions"""

    def __init__(self, completion_func: Optional[CompletionFunc] = None):
        """
        Initialize an empty controller

        Args:
            completion_func: async (prompt, api_key) -> raw text;
                defaults to the HTTP completion client
        """
        self.completion_func = completion_func or request_completion
        self.state = SessionState.EMPTY
        self.session = QuizSession()
        self.loading = False
        self.error: Optional[str] = None
        self._generation = 0

    # ==================== GENERATION ====================

    async def generate(self, request: GenerationRequest) -> None:
        """
        Generate a question set and start the quiz

        Any failure is recorded in `error` and leaves the controller empty;
        it is never raised to the caller.

        Raises:
            InvalidTransitionError: If called outside the empty state
        """
        self._require(SessionState.EMPTY, "generate")

        self._generation += 1
        generation = self._generation
        self.state = SessionState.GENERATING
        self.loading = True
        self.error = None

        logger.info(
            f"🎯 Generating {request.numberOfQuestions} questions "
            f"({request.sourceMode.value}, {request.studyLevel.value}, {request.difficulty.value})"
        )

        try:
            prompt = build_quiz_prompt(request)
            raw_response = await self.completion_func(prompt, request.apiKey)
            questions = parse_quiz_json(raw_response)
        except (LLMClientError, QuizParseError) as e:
            self._fail(generation, error_message_for(e))
            logger.error(f"❌ Quiz generation failed ({type(e).__name__}): {e}")
            return
        except Exception as e:
            self._fail(generation, GENERATION_FAILED)
            logger.error(f"❌ Unexpected error during generation: {e}", exc_info=True)
            return
        finally:
            if generation == self._generation:
                self.loading = False

        if generation != self._generation:
            logger.warning("⚠️ Session restarted during generation, discarding questions")
            return

        self.session = QuizSession.start(questions)
        self.state = SessionState.IN_PROGRESS
        logger.info(f"✅ Quiz started with {len(questions)} questions")

    def _fail(self, generation: int, message: str) -> None:
        if generation != self._generation:
            return
        self.state = SessionState.EMPTY
        self.session = QuizSession()
        self.error = message

    # ==================== QUIZ FLOW ====================

    def answer(self, option_index: int) -> None:
        """Select an option for the current question, replacing any earlier pick"""
        self._require(SessionState.IN_PROGRESS, "answer")
        if (
            isinstance(option_index, bool)
            or not isinstance(option_index, int)
            or not 0 <= option_index < OPTIONS_COUNT
        ):
            raise ValueError(
                f"option_index must be between 0 and {OPTIONS_COUNT - 1}, got {option_index}"
            )
        self.session.answers[self.session.currentIndex] = option_index

    def advance(self) -> None:
        """Move to the next question; a no-op on the last one"""
        self._require(SessionState.IN_PROGRESS, "advance")
        if self.session.currentIndex < len(self.session.questions) - 1:
            self.session.currentIndex += 1

    def submit(self) -> None:
        """Show results; unanswered questions count as wrong"""
        self._require(SessionState.IN_PROGRESS, "submit")
        self.session.resultsVisible = True
        self.state = SessionState.COMPLETED
        logger.info(f"🏁 Quiz submitted: {self.score()}/{len(self.session.questions)}")

    def restart(self) -> None:
        """Drop the current quiz and return to the empty state (allowed anywhere)"""
        # Bumping the counter orphans any in-flight generation
        self._generation += 1
        self.state = SessionState.EMPTY
        self.session = QuizSession()
        self.loading = False
        self.error = None

    # ==================== READ ====================

    def current_question(self) -> Question:
        self._require(SessionState.IN_PROGRESS, "read the current question")
        return self.session.questions[self.session.currentIndex]

    def score(self) -> int:
        """Number of answers matching the correct index"""
        return sum(
            1
            for question, answer in zip(self.session.questions, self.session.answers)
            if answer == question.correctAnswer
        )

    def results(self) -> QuizResults:
        self._require(SessionState.COMPLETED, "read results")

        items = [
            QuestionResult(
                question=question.question,
                options=question.options,
                correctAnswer=question.correctAnswer,
                selectedAnswer=answer,
                wasCorrect=answer == question.correctAnswer
            )
            for question, answer in zip(self.session.questions, self.session.answers)
        ]
        total = len(items)
        score = self.score()
        percentage = round(score / total * 100, 2) if total else 0.0

        return QuizResults(score=score, total=total, percentage=percentage, questions=items)

    def _require(self, expected: SessionState, action: str) -> None:
        if self.state != expected:
            raise InvalidTransitionError(
                f"Cannot {action} while session is {self.state.value}"
            )
