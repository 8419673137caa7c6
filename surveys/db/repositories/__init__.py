"""
Per-domain repository modules for database access.
"""

from .surveys import SurveyStore

__all__ = ["SurveyStore"]
