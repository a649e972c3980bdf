"""
Quiz API Routes
FastAPI endpoints driving the form -> quiz -> results flow of a session
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status

from quizgen.models.generation import GenerationRequest
from quizgen.models.quiz_sessions import (
    AnswerRequest,
    CurrentQuestionView,
    QuizResults,
    SessionState,
    SessionStateResponse,
)
from quizgen.services.quiz_session_service import (
    InvalidTransitionError,
    QuizSessionController,
)
from quizgen.services.session_store import (
    SessionNotFoundError,
    SessionRegistry,
    get_session_registry,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/quiz", tags=["Quiz"])


# ============================================================================
# HELPERS
# ============================================================================

def build_state_response(
    session_id: str,
    controller: QuizSessionController
) -> SessionStateResponse:
    """Render a controller into the public snapshot"""
    session = controller.session
    total = len(session.questions)

    current_question = None
    if controller.state == SessionState.IN_PROGRESS:
        question = controller.current_question()
        current_question = CurrentQuestionView(
            questionNumber=session.currentIndex + 1,
            totalQuestions=total,
            question=question.question,
            options=question.options,
            selectedAnswer=session.answers[session.currentIndex],
            isLastQuestion=session.currentIndex == total - 1
        )

    results = None
    if controller.state == SessionState.COMPLETED:
        results = controller.results()

    return SessionStateResponse(
        sessionId=session_id,
        state=controller.state,
        loading=controller.loading,
        error=controller.error,
        totalQuestions=total,
        currentIndex=session.currentIndex,
        answeredCount=sum(1 for answer in session.answers if answer is not None),
        currentQuestion=current_question,
        results=results
    )


def _get_controller(registry: SessionRegistry, session_id: str) -> QuizSessionController:
    try:
        return registry.get(session_id)
    except SessionNotFoundError as e:
        logger.warning(f"⚠️ {e}")
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


def _conflict(e: InvalidTransitionError) -> HTTPException:
    logger.warning(f"⚠️ Invalid transition: {e}")
    return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))


# ============================================================================
# SESSION LIFECYCLE
# ============================================================================

@router.post(
    "/sessions",
    response_model=SessionStateResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a quiz session",
    description="Create an empty session; generate questions into it next."
)
async def create_session(
    registry: SessionRegistry = Depends(get_session_registry)
) -> SessionStateResponse:
    session_id = registry.create()
    return build_state_response(session_id, registry.get(session_id))


@router.get(
    "/sessions/{session_id}",
    response_model=SessionStateResponse,
    summary="Get session state"
)
async def get_session(
    session_id: str,
    registry: SessionRegistry = Depends(get_session_registry)
) -> SessionStateResponse:
    controller = _get_controller(registry, session_id)
    return build_state_response(session_id, controller)


@router.delete(
    "/sessions/{session_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a session"
)
async def delete_session(
    session_id: str,
    registry: SessionRegistry = Depends(get_session_registry)
) -> Response:
    try:
        registry.delete(session_id)
    except SessionNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ============================================================================
# GENERATION
# ============================================================================

@router.post(
    "/sessions/{session_id}/generate",
    response_model=SessionStateResponse,
    summary="Generate questions",
    description="""
    Generate a multiple-choice quiz for the session.

    **Workflow:**
    1. Build the French prompt from the form parameters
    2. Call the completion API with the supplied key
    3. Extract and validate the JSON question array
    4. Start the quiz on the first question

    A generation failure is not an HTTP error: the session stays `empty`
    and the reason is returned in `error`.
    """
)
async def generate_questions(
    session_id: str,
    request: GenerationRequest,
    registry: SessionRegistry = Depends(get_session_registry)
) -> SessionStateResponse:
    controller = _get_controller(registry, session_id)

    try:
        await controller.generate(request)
    except InvalidTransitionError as e:
        raise _conflict(e)

    return build_state_response(session_id, controller)


# ============================================================================
# QUIZ FLOW
# ============================================================================

@router.post(
    "/sessions/{session_id}/answer",
    response_model=SessionStateResponse,
    summary="Answer the current question"
)
async def answer_question(
    session_id: str,
    request: AnswerRequest,
    registry: SessionRegistry = Depends(get_session_registry)
) -> SessionStateResponse:
    controller = _get_controller(registry, session_id)

    try:
        controller.answer(request.optionIndex)
    except InvalidTransitionError as e:
        raise _conflict(e)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))

    return build_state_response(session_id, controller)


@router.post(
    "/sessions/{session_id}/next",
    response_model=SessionStateResponse,
    summary="Go to the next question",
    description="Has no effect on the last question; submit instead."
)
async def next_question(
    session_id: str,
    registry: SessionRegistry = Depends(get_session_registry)
) -> SessionStateResponse:
    controller = _get_controller(registry, session_id)

    try:
        controller.advance()
    except InvalidTransitionError as e:
        raise _conflict(e)

    return build_state_response(session_id, controller)


@router.post(
    "/sessions/{session_id}/submit",
    response_model=SessionStateResponse,
    summary="Submit the quiz and show results"
)
async def submit_quiz(
    session_id: str,
    registry: SessionRegistry = Depends(get_session_registry)
) -> SessionStateResponse:
    controller = _get_controller(registry, session_id)

    try:
        controller.submit()
    except InvalidTransitionError as e:
        raise _conflict(e)

    return build_state_response(session_id, controller)


@router.post(
    "/sessions/{session_id}/restart",
    response_model=SessionStateResponse,
    summary="Restart with an empty form"
)
async def restart_quiz(
    session_id: str,
    registry: SessionRegistry = Depends(get_session_registry)
) -> SessionStateResponse:
    controller = _get_controller(registry, session_id)
    controller.restart()
    return build_state_response(session_id, controller)


@router.get(
    "/sessions/{session_id}/results",
    response_model=QuizResults,
    summary="Get quiz results",
    description="Score and per-question correction; only available after submit."
)
async def get_results(
    session_id: str,
    registry: SessionRegistry = Depends(get_session_registry)
) -> QuizResults:
    controller = _get_controller(registry, session_id)

    try:
        return controller.results()
    except InvalidTransitionError as e:
        raise _conflict(e)
