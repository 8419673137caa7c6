"""
Surveys API endpoints.

Read-only views over the survey store.
"""
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from surveys.api.deps import get_survey_store
from surveys.db import schemas
from surveys.db.repositories import SurveyStore

router = APIRouter(tags=["surveys"])


@router.get("/surveys/published", response_model=List[schemas.SurveySummary])
async def list_published_surveys(store: SurveyStore = Depends(get_survey_store)):
    return await store.get_published_surveys()


@router.get("/surveys/{survey_id}", response_model=schemas.Survey)
async def get_survey(survey_id: int, store: SurveyStore = Depends(get_survey_store)):
    survey = await store.get_survey(survey_id)
    if survey is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Survey not found")
    return survey


@router.get("/users/{owner_id}/surveys", response_model=List[schemas.SurveySummary])
async def list_surveys_by_owner(
    owner_id: int,
    published_only: bool = False,
    store: SurveyStore = Depends(get_survey_store),
):
    if published_only:
        return await store.get_published_surveys_by_owner(owner_id)
    return await store.get_surveys_by_owner(owner_id)


@router.get("/users/{user_id}/contributions", response_model=List[schemas.SurveySummary])
async def list_surveys_by_contributor(user_id: int, store: SurveyStore = Depends(get_survey_store)):
    return await store.get_surveys_by_contributor(user_id)


@router.get("/tenants/{tenant_id}/surveys", response_model=List[schemas.SurveySummary])
async def list_surveys_by_tenant(
    tenant_id: int,
    published: bool = True,
    store: SurveyStore = Depends(get_survey_store),
):
    if published:
        return await store.get_published_surveys_by_tenant(tenant_id)
    return await store.get_unpublished_surveys_by_tenant(tenant_id)
