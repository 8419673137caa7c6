from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey, Index, CheckConstraint
from sqlalchemy.orm import relationship
from .base import Base, now_utc


class Survey(Base):
    __tablename__ = 'surveys'
    id = Column(Integer, primary_key=True, autoincrement=True)
    owner_id = Column(Integer, ForeignKey('users.id'), nullable=True)
    tenant_id = Column(Integer, ForeignKey('tenants.id'), nullable=True)
    title = Column(String(200), nullable=True)
    published = Column(Boolean, nullable=False, default=False)

    questions = relationship(
        "Question",
        back_populates="survey",
        cascade="all, delete-orphan",
        order_by="Question.id",
    )
    contributors = relationship("SurveyContributor", back_populates="survey", cascade="all, delete-orphan")
    requests = relationship("ContributorRequest", back_populates="survey", cascade="all, delete-orphan")

    __table_args__ = (
        Index('idx_surveys_owner_id', 'owner_id'),
        Index('idx_surveys_tenant_published', 'tenant_id', 'published'),
    )


class Question(Base):
    __tablename__ = 'questions'
    id = Column(Integer, primary_key=True, autoincrement=True)
    survey_id = Column(Integer, ForeignKey('surveys.id', ondelete='CASCADE'), nullable=False)
    text = Column(Text, nullable=True)
    type = Column(String(20), nullable=False, default='SimpleText')  # SimpleText|MultiLineText|FiveStars
    # Newline separated choices; unused for free text questions
    possible_answers = Column(Text, nullable=True)

    survey = relationship("Survey", back_populates="questions")

    __table_args__ = (
        Index('idx_questions_survey_id', 'survey_id'),
        CheckConstraint("type in ('SimpleText','MultiLineText','FiveStars')", name='ck_questions_type'),
    )


class SurveyContributor(Base):
    __tablename__ = 'survey_contributors'
    survey_id = Column(Integer, ForeignKey('surveys.id', ondelete='CASCADE'), primary_key=True)
    user_id = Column(Integer, ForeignKey('users.id'), primary_key=True)

    survey = relationship("Survey", back_populates="contributors")

    __table_args__ = (
        Index('idx_survey_contributors_user_id', 'user_id'),
    )


class ContributorRequest(Base):
    __tablename__ = 'contributor_requests'
    id = Column(Integer, primary_key=True, autoincrement=True)
    survey_id = Column(Integer, ForeignKey('surveys.id', ondelete='CASCADE'), nullable=False)
    email_address = Column(String(320), nullable=True)
    created_at = Column(DateTime(timezone=True), default=now_utc, nullable=False)

    survey = relationship("Survey", back_populates="requests")

    __table_args__ = (
        Index('ix_contributor_requests_email_address', 'email_address'),
    )
