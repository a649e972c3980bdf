"""
Generation Request Models
Parameters collected from the quiz form before questions are generated
FILE: quizgen/models/generation.py
"""
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, model_validator


MISSING_SOURCE_MESSAGE = "Veuillez entrer un sujet ou un texte"


class SourceMode(str, Enum):
    """Where the questions come from: a topic name or a pasted text"""
    TOPIC = "topic"
    TEXT = "text"


class Difficulty(str, Enum):
    EASY = "facile"
    MEDIUM = "moyen"
    HARD = "difficile"


class StudyLevel(str, Enum):
    """French education levels, from lower secondary to the second master year"""
    SIXIEME = "sixième"
    CINQUIEME = "cinquième"
    QUATRIEME = "quatrième"
    TROISIEME = "troisième"
    SECONDE = "seconde"
    PREMIERE = "première"
    TERMINALE = "terminale"
    LICENCE1 = "licence1"
    LICENCE2 = "licence2"
    LICENCE3 = "licence3"
    MASTER1 = "master1"
    MASTER2 = "master2"

    @property
    def is_graduate(self) -> bool:
        """Whether a specialty is meaningful for this level"""
        return self in GRADUATE_LEVELS


GRADUATE_LEVELS = frozenset({
    StudyLevel.LICENCE1,
    StudyLevel.LICENCE2,
    StudyLevel.LICENCE3,
    StudyLevel.MASTER1,
    StudyLevel.MASTER2,
})


class GenerationRequest(BaseModel):
    """
    Request model for quiz generation

    Exactly one of `topic` / `text` must be filled, the one selected by
    `sourceMode`. The API key is used for this single request and never stored.
    """
    sourceMode: SourceMode = Field(
        default=SourceMode.TOPIC,
        description="Generate from a topic name or from a source text"
    )
    topic: Optional[str] = Field(
        default=None,
        description="Quiz topic (required when sourceMode is 'topic')"
    )
    text: Optional[str] = Field(
        default=None,
        description="Source text (required when sourceMode is 'text')"
    )
    difficulty: Difficulty = Field(default=Difficulty.EASY)
    studyLevel: StudyLevel = Field(default=StudyLevel.SIXIEME)
    specialty: Optional[str] = Field(
        default=None,
        description="Field of study, only used for licence/master levels"
    )
    numberOfQuestions: int = Field(
        default=5,
        ge=1,
        le=10,
        description="Number of questions to generate (1-10)"
    )
    apiKey: str = Field(
        ...,
        min_length=1,
        description="Completion API key, sent as a bearer token"
    )

    @model_validator(mode="after")
    def check_source(self):
        """Ensure the selected source is filled and the other one is not"""
        if self.sourceMode == SourceMode.TOPIC:
            selected, other = self.topic, self.text
        else:
            selected, other = self.text, self.topic

        if not selected or not selected.strip():
            raise ValueError(MISSING_SOURCE_MESSAGE)
        if other and other.strip():
            raise ValueError(
                f"Only one source may be provided for sourceMode '{self.sourceMode.value}'"
            )
        if not self.apiKey.strip():
            raise ValueError("apiKey cannot be empty")
        return self

    @property
    def source_content(self) -> str:
        """The literal topic or text the questions are built from"""
        if self.sourceMode == SourceMode.TEXT:
            return self.text
        return self.topic

    @property
    def effective_specialty(self) -> Optional[str]:
        """Specialty if it applies to the selected level, else None"""
        if self.studyLevel.is_graduate and self.specialty and self.specialty.strip():
            return self.specialty.strip()
        return None

    class Config:
        json_schema_extra = {
            "example": {
                "sourceMode": "topic",
                "topic": "Photosynthèse",
                "difficulty": "facile",
                "studyLevel": "seconde",
                "numberOfQuestions": 3,
                "apiKey": "sk-..."
            }
        }
