from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, field_validator

QUESTION_TYPES = {"SimpleText", "MultiLineText", "FiveStars"}


class QuestionBase(BaseModel):
    text: Optional[str] = None
    type: str = "SimpleText"
    possible_answers: Optional[str] = None

    @field_validator("type")
    @classmethod
    def _validate_type(cls, v: str):
        if v not in QUESTION_TYPES:
            raise ValueError(f"Invalid question type: {v}")
        return v


class Question(QuestionBase):
    id: int
    survey_id: int
    model_config = ConfigDict(from_attributes=True)


class SurveyContributor(BaseModel):
    survey_id: int
    user_id: int
    model_config = ConfigDict(from_attributes=True)


class ContributorRequest(BaseModel):
    id: int
    survey_id: int
    email_address: Optional[str] = None
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)


class SurveyBase(BaseModel):
    title: Optional[str] = None
    owner_id: Optional[int] = None
    tenant_id: Optional[int] = None
    published: bool = False


class SurveySummary(SurveyBase):
    """List representation; child collections are not loaded for list queries."""
    id: int
    model_config = ConfigDict(from_attributes=True)


class Survey(SurveySummary):
    questions: List[Question] = []
    contributors: List[SurveyContributor] = []
    requests: List[ContributorRequest] = []
