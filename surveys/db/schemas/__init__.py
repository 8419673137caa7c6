"""
Domain-split Pydantic schemas.
"""

from .surveys import (
    QUESTION_TYPES,
    QuestionBase,
    Question,
    SurveyContributor,
    ContributorRequest,
    SurveyBase,
    SurveySummary,
    Survey,
)

__all__ = [
    "QUESTION_TYPES",
    "QuestionBase",
    "Question",
    "SurveyContributor",
    "ContributorRequest",
    "SurveyBase",
    "SurveySummary",
    "Survey",
]
