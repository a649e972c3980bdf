"""
Quiz Session Models
Question schema, in-memory session state and the public views built from it
"""
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


OPTIONS_COUNT = 4


class SessionState(str, Enum):
    EMPTY = "empty"
    GENERATING = "generating"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class Question(BaseModel):
    """
    A generated multiple-choice question
    correctAnswer is the zero-based index into options
    """
    question: str = Field(..., min_length=1, description="Question text")
    options: List[str] = Field(
        ...,
        min_length=OPTIONS_COUNT,
        max_length=OPTIONS_COUNT,
        description="Exactly 4 answer options"
    )
    correctAnswer: int = Field(
        ...,
        ge=0,
        le=OPTIONS_COUNT - 1,
        description="Index of the correct option (0-3) - PRIVATE until results"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "question": "Où se déroule la photosynthèse ?",
                "options": ["Mitochondrie", "Chloroplaste", "Noyau", "Ribosome"],
                "correctAnswer": 1
            }
        }


class QuizSession(BaseModel):
    """Mutable state of one quiz run; None in answers means unanswered"""
    questions: List[Question] = Field(default_factory=list)
    currentIndex: int = Field(default=0, ge=0)
    answers: List[Optional[int]] = Field(default_factory=list)
    resultsVisible: bool = False

    @classmethod
    def start(cls, questions: List[Question]) -> "QuizSession":
        """Fresh session positioned on the first question with nothing answered"""
        return cls(
            questions=list(questions),
            currentIndex=0,
            answers=[None] * len(questions),
            resultsVisible=False
        )


class QuestionResult(BaseModel):
    """Per-question outcome shown on the results screen"""
    question: str
    options: List[str]
    correctAnswer: int
    selectedAnswer: Optional[int] = None
    wasCorrect: bool


class QuizResults(BaseModel):
    """Final score, computed on demand from a completed session"""
    score: int = Field(..., ge=0, description="Number of correct answers")
    total: int = Field(..., ge=0, description="Total number of questions")
    percentage: float = Field(..., ge=0.0, le=100.0)
    questions: List[QuestionResult] = Field(default_factory=list)

    class Config:
        json_schema_extra = {
            "example": {
                "score": 1,
                "total": 2,
                "percentage": 50.0,
                "questions": [
                    {
                        "question": "Q1",
                        "options": ["a", "b", "c", "d"],
                        "correctAnswer": 1,
                        "selectedAnswer": 1,
                        "wasCorrect": True
                    },
                    {
                        "question": "Q2",
                        "options": ["a", "b", "c", "d"],
                        "correctAnswer": 2,
                        "selectedAnswer": 0,
                        "wasCorrect": False
                    }
                ]
            }
        }


# ==================== API VIEWS ====================

class AnswerRequest(BaseModel):
    """Request model for selecting an option on the current question"""
    optionIndex: int = Field(
        ...,
        ge=0,
        le=OPTIONS_COUNT - 1,
        description="Selected option index (0-3)"
    )


class CurrentQuestionView(BaseModel):
    """
    Current question as shown during the quiz
    SECURITY: correctAnswer is never exposed here
    """
    questionNumber: int = Field(..., description="1-based position")
    totalQuestions: int
    question: str
    options: List[str]
    selectedAnswer: Optional[int] = None
    isLastQuestion: bool


class SessionStateResponse(BaseModel):
    """Public session snapshot rendered by the client"""
    sessionId: str
    state: SessionState
    loading: bool = False
    error: Optional[str] = None
    totalQuestions: int = 0
    currentIndex: int = 0
    answeredCount: int = 0
    currentQuestion: Optional[CurrentQuestionView] = None
    results: Optional[QuizResults] = None

    class Config:
        json_schema_extra = {
            "example": {
                "sessionId": "session_abc123def456",
                "state": "in_progress",
                "loading": False,
                "error": None,
                "totalQuestions": 3,
                "currentIndex": 0,
                "answeredCount": 0,
                "currentQuestion": {
                    "questionNumber": 1,
                    "totalQuestions": 3,
                    "question": "Où se déroule la photosynthèse ?",
                    "options": ["Mitochondrie", "Chloroplaste", "Noyau", "Ribosome"],
                    "selectedAnswer": None,
                    "isLastQuestion": False
                },
                "results": None
            }
        }
