"""Mentor suggestion routes."""

import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from mentormatch.api.routes.shared import ensure_can_view, load_project
from mentormatch.config import settings
from mentormatch.dependencies import CurrentActor, get_db
from mentormatch.models.suggestion import KeywordSearch
from mentormatch.repositories.project_repo import ProjectRepository
from mentormatch.repositories.user_repo import UserRepository, to_profile
from mentormatch.services.matching import gather_keywords, normalize_keyword_input, suggest

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Suggestions"])


async def _rank(db: AsyncSession, keywords: list[str], limit: int | None = None) -> list[dict]:
    if not keywords:
        return []
    mentors = [to_profile(row) for row in await UserRepository(db).list_mentors()]
    ranked = suggest(mentors, keywords, limit or settings.suggestion_limit)
    logger.debug("Ranked %d of %d mentors for %d keywords", len(ranked), len(mentors), len(keywords))
    return [s.model_dump(mode="json") for s in ranked]


@router.get("/projects/suggestions/by-keywords")
async def suggest_by_keywords(
    actor: CurrentActor,
    keywords: str | None = Query(None, description="Comma or space separated keywords"),
    q: str | None = Query(None),
    limit: int | None = Query(None, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
) -> list[dict]:
    return await _rank(db, normalize_keyword_input(keywords or q), limit)


@router.post("/projects/suggestions")
async def suggest_by_search(
    body: KeywordSearch,
    actor: CurrentActor,
    db: AsyncSession = Depends(get_db),
) -> list[dict]:
    raw = body.keywords if body.keywords is not None else body.keyword
    return await _rank(db, normalize_keyword_input(raw), body.limit)


@router.get("/projects/{project_id}/suggested-mentors")
async def suggested_mentors(
    project_id: str,
    actor: CurrentActor,
    db: AsyncSession = Depends(get_db),
) -> list[dict]:
    _, project = await load_project(ProjectRepository(db), project_id)
    ensure_can_view(actor, project)
    keywords = gather_keywords(project.keywords, project.idea, project.guidance_needed, project.title)
    return await _rank(db, keywords)
