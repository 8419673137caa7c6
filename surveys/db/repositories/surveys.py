"""
Survey repository.

Query access to the Survey aggregate (questions, contributors and pending
contributor requests) over an injected AsyncSession. The caller owns the
session: construct one store per request and never share the session between
concurrent callers.
"""
from __future__ import annotations

import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from surveys.db import models

logger = logging.getLogger(__name__)


class SurveyStore:
    """Reads and writes surveys through a single request-scoped session."""

    def __init__(self, db: AsyncSession):
        if db is None:
            raise ValueError("db session is required")
        self._db = db

    async def _all(self, stmt) -> List[models.Survey]:
        result = await self._db.execute(stmt)
        return list(result.scalars().unique().all())

    async def get_survey(self, survey_id: int) -> Optional[models.Survey]:
        """Return the survey with contributors, questions and requests loaded, or None."""
        stmt = (
            select(models.Survey)
            .options(
                selectinload(models.Survey.contributors),
                selectinload(models.Survey.questions),
                selectinload(models.Survey.requests),
            )
            .where(models.Survey.id == survey_id)
        )
        result = await self._db.execute(stmt)
        return result.scalars().first()

    async def get_surveys_by_owner(self, owner_id: int) -> List[models.Survey]:
        return await self._all(
            select(models.Survey).where(models.Survey.owner_id == owner_id)
        )

    async def get_published_surveys_by_owner(self, owner_id: int) -> List[models.Survey]:
        return await self._all(
            select(models.Survey).where(
                models.Survey.owner_id == owner_id,
                models.Survey.published.is_(True),
            )
        )

    async def get_surveys_by_contributor(self, user_id: int) -> List[models.Survey]:
        return await self._all(
            select(models.Survey)
            .join(models.SurveyContributor, models.SurveyContributor.survey_id == models.Survey.id)
            .where(models.SurveyContributor.user_id == user_id)
        )

    async def get_published_surveys_by_tenant(self, tenant_id: int) -> List[models.Survey]:
        return await self._all(
            select(models.Survey).where(
                models.Survey.tenant_id == tenant_id,
                models.Survey.published.is_(True),
            )
        )

    async def get_unpublished_surveys_by_tenant(self, tenant_id: int) -> List[models.Survey]:
        return await self._all(
            select(models.Survey).where(
                models.Survey.tenant_id == tenant_id,
                models.Survey.published.is_(False),
            )
        )

    async def get_published_surveys(self) -> List[models.Survey]:
        return await self._all(
            select(models.Survey).where(models.Survey.published.is_(True))
        )

    # Write paths

    async def add_survey(self, survey: models.Survey) -> models.Survey:
        self._db.add(survey)
        await self._db.commit()
        await self._db.refresh(survey)
        logger.info("survey_added: id=%s owner_id=%s tenant_id=%s", survey.id, survey.owner_id, survey.tenant_id)
        return survey

    async def update_survey(self, survey: models.Survey) -> models.Survey:
        survey = await self._db.merge(survey)
        await self._db.commit()
        return survey

    async def delete_survey(self, survey_id: int) -> bool:
        # Children must be loaded for the ORM delete cascade
        db_survey = await self.get_survey(survey_id)
        if not db_survey:
            return False
        await self._db.delete(db_survey)
        await self._db.commit()
        logger.info("survey_deleted: id=%s", survey_id)
        return True

    async def _set_published(self, survey_id: int, published: bool) -> Optional[models.Survey]:
        db_survey = await self._db.get(models.Survey, survey_id)
        if db_survey is None:
            return None
        if db_survey.published != published:
            db_survey.published = published
            await self._db.commit()
        return db_survey

    async def publish_survey(self, survey_id: int) -> Optional[models.Survey]:
        return await self._set_published(survey_id, True)

    async def unpublish_survey(self, survey_id: int) -> Optional[models.Survey]:
        return await self._set_published(survey_id, False)

    async def add_contributor_request(self, request: models.ContributorRequest) -> models.ContributorRequest:
        self._db.add(request)
        await self._db.commit()
        await self._db.refresh(request)
        return request

    async def get_contributor_requests_by_email(self, email_address: str) -> List[models.ContributorRequest]:
        result = await self._db.execute(
            select(models.ContributorRequest)
            .where(models.ContributorRequest.email_address == email_address)
            .order_by(models.ContributorRequest.created_at)
        )
        return list(result.scalars().all())
