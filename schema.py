from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing import Any, Dict, List, Optional
from datetime import datetime
from enum import Enum


# Assume a 5-point scale when a question has no usable option list
DEFAULT_MAX_VALUE = 4

# Id fragments that marked negatively-phrased items before the explicit flag
LEGACY_REVERSED_MARKERS = (
    "phq9",
    "gad7",
    "hot_flashes",
    "joint_pain",
    "memory_recall",
    "word_finding",
)


class Domain(str, Enum):
    MENTAL = "mental"
    PHYSICAL = "physical"
    COGNITIVE = "cognitive"


# One questionnaire item of a domain's question bank
class AssessmentQuestion(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    prompt: str
    options: List[str] = Field(default_factory=list)
    weight: float = Field(gt=0)
    reversed: bool = False

    @model_validator(mode="before")
    @classmethod
    def derive_reversed(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("reversed") is None:
            question_id = str(data.get("id", ""))
            data = {
                **data,
                "reversed": any(marker in question_id for marker in LEGACY_REVERSED_MARKERS),
            }
        return data

    @property
    def max_value(self) -> int:
        if len(self.options) > 1:
            return len(self.options) - 1
        return DEFAULT_MAX_VALUE


# User's answer to one question; value is normally the chosen option index
class Response(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    question_id: str = Field(alias="questionId")
    value: Any = None


# Request body for POST /assess/{domain}
class AssessmentRequest(BaseModel):
    responses: List[Response]


# Final result screen for one completed assessment
class AssessmentReport(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    domain: Domain
    score: int
    interpretation: str
    recommendations: List[str]
    questions_answered: int = Field(alias="questionsAnswered")
    total_questions: int = Field(alias="totalQuestions")


class HealthScores(BaseModel):
    mental: int
    physical: int
    cognitive: int

    @field_validator("mental", "physical", "cognitive")
    @classmethod
    def validate_score(cls, v):
        if not (0 <= v <= 100):
            raise ValueError("Score must be between 0 and 100")
        return v


class HealthScoreSummary(HealthScores):
    overall: int


# Request body for POST /api/health-assessments
class HealthAssessmentCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(alias="userId")
    assessment_type: Domain = Field(alias="assessmentType")
    responses: List[Response]
    score: Optional[int] = Field(default=None, ge=0, le=100)


# Stored assessment record
class HealthAssessment(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    user_id: str = Field(alias="userId")
    assessment_type: Domain = Field(alias="assessmentType")
    score: int
    responses: List[Response]
    completed_at: datetime = Field(alias="completedAt")


class DomainAverages(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(alias="userId")
    total_assessments: int = Field(alias="totalAssessments")
    average_scores: Dict[Domain, int] = Field(alias="averageScores")
