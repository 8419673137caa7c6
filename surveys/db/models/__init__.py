"""
Domain-split SQLAlchemy models.

Exposes `Base`, `now_utc`, and all ORM classes.
"""

from .base import Base, now_utc  # re-export

# Domain models
from .users import Tenant, User
from .surveys import Survey, Question, SurveyContributor, ContributorRequest
from .tokens import UserTokenCache

__all__ = [
    # base
    "Base",
    "now_utc",
    # tenants/users
    "Tenant",
    "User",
    # surveys
    "Survey",
    "Question",
    "SurveyContributor",
    "ContributorRequest",
    # tokens
    "UserTokenCache",
]
