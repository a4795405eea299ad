from typing import Optional

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from achievement_api.database import get_db
from achievement_api.exceptions import NotFoundException
from achievement_api.model.achievements import Achievement
from achievement_api.live_clients import LiveClientRegistry
from achievement_api.router.dependencies import get_lang, get_live_clients
from achievement_api.router.api.logics.catalog_logic import (
    check_cuid,
    clean_icon,
    get_achievement_or_404,
    get_category_or_404,
    required_translations,
)
from achievement_api.router.api.logics.progress_logic import (
    publish_progress,
    reload_progress,
    rederive_progress_for_achievement,
)
from achievement_api.router.api.logics.serializers import serialize_achievement, serialize_progress
from achievement_api.schema.catalog_schema import AchievementCreate, AchievementUpdate
from achievement_api.translations import resolve_translation_input

router = APIRouter()


def _achievement_query():
    return select(Achievement).options(
        selectinload(Achievement.category),
        selectinload(Achievement.reward),
        selectinload(Achievement.progress),
    )


@router.get("", response_model=list, status_code=status.HTTP_200_OK)
async def get_all_achievements(lang: Optional[str] = Depends(get_lang), db: AsyncSession = Depends(get_db)):
    """Get all achievements with category, reward and user progress."""
    result = await db.execute(_achievement_query().order_by(Achievement.created_at))
    return [serialize_achievement(a, lang) for a in result.scalars().all()]


@router.get("/{achievement_id}", response_model=dict, status_code=status.HTTP_200_OK)
async def get_achievement(achievement_id: str, lang: Optional[str] = Depends(get_lang), db: AsyncSession = Depends(get_db)):
    result = await db.execute(_achievement_query().where(Achievement.id == achievement_id))
    achievement = result.scalar_one_or_none()
    if not achievement:
        raise NotFoundException("Achievement not found")
    return serialize_achievement(achievement, lang)


@router.post("", response_model=dict, status_code=status.HTTP_201_CREATED)
async def create_achievement(body: AchievementCreate, db: AsyncSession = Depends(get_db)):
    """Create an achievement in an existing category.

    title and description accept a plain string (stored as English) or a
    map of translations. A target of 0 makes the achievement complete on
    the first progress write.
    """
    check_cuid(body.categoryId, "categoryId")
    await get_category_or_404(db, body.categoryId)

    achievement = Achievement(
        title=required_translations(body.title, "title"),
        description=required_translations(body.description, "description"),
        icon=clean_icon(body.icon),
        hidden=body.hidden,
        target=body.target or 0,
        category_id=body.categoryId,
    )
    db.add(achievement)
    await db.commit()
    return serialize_achievement(achievement, None)


@router.patch("/{achievement_id}", response_model=dict, status_code=status.HTTP_200_OK)
async def update_achievement(
    achievement_id: str,
    body: AchievementUpdate,
    db: AsyncSession = Depends(get_db),
    live_clients: LiveClientRegistry = Depends(get_live_clients),
):
    """Update an achievement.

    Changing `target` re-derives the progress of every user on it, and each
    changed record is pushed to its owner's event stream.
    """
    achievement = await get_achievement_or_404(db, achievement_id)

    if body.categoryId is not None and body.categoryId != achievement.category_id:
        check_cuid(body.categoryId, "categoryId")
        await get_category_or_404(db, body.categoryId)
        achievement.category_id = body.categoryId
    if body.title is not None:
        achievement.title = resolve_translation_input(body.title)
    if body.description is not None:
        achievement.description = resolve_translation_input(body.description)
    if body.icon is not None:
        achievement.icon = clean_icon(body.icon)
    if body.hidden is not None:
        achievement.hidden = body.hidden

    rederived = []
    if body.target is not None and body.target != achievement.target:
        achievement.target = body.target
        rederived = await rederive_progress_for_achievement(db, achievement)

    await db.commit()
    for row in await reload_progress(db, rederived):
        publish_progress(live_clients, row.user_id, serialize_progress(row, None))
    return serialize_achievement(achievement, None)


@router.delete("/{achievement_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_achievement(achievement_id: str, db: AsyncSession = Depends(get_db)):
    """Delete an achievement with its reward and all progress on it."""
    achievement = await get_achievement_or_404(db, achievement_id)
    await db.delete(achievement)
    await db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
