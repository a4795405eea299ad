from typing import Optional

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from achievement_api.database import get_db
from achievement_api.exceptions import ConflictException, NotFoundException
from achievement_api.model.rewards import Reward
from achievement_api.router.dependencies import get_lang
from achievement_api.router.api.logics.catalog_logic import (
    check_cuid,
    clean_icon,
    commit_or_conflict,
    get_achievement_or_404,
    required_translations,
)
from achievement_api.router.api.logics.serializers import serialize_reward
from achievement_api.schema.catalog_schema import RewardCreate, RewardUpdate
from achievement_api.translations import resolve_translation_input

router = APIRouter()

DUPLICATE_REWARD = "Achievement already has a reward"


def _reward_query():
    return select(Reward).options(selectinload(Reward.achievement))


async def _get_reward_or_404(db: AsyncSession, reward_id: str) -> Reward:
    result = await db.execute(_reward_query().where(Reward.id == reward_id))
    reward = result.scalar_one_or_none()
    if not reward:
        raise NotFoundException("Reward not found")
    return reward


@router.get("", response_model=list, status_code=status.HTTP_200_OK)
async def get_all_rewards(lang: Optional[str] = Depends(get_lang), db: AsyncSession = Depends(get_db)):
    result = await db.execute(_reward_query().order_by(Reward.created_at))
    return [serialize_reward(r, lang) for r in result.scalars().all()]


@router.get("/{reward_id}", response_model=dict, status_code=status.HTTP_200_OK)
async def get_reward(reward_id: str, lang: Optional[str] = Depends(get_lang), db: AsyncSession = Depends(get_db)):
    return serialize_reward(await _get_reward_or_404(db, reward_id), lang)


@router.post("", response_model=dict, status_code=status.HTTP_201_CREATED)
async def create_reward(body: RewardCreate, db: AsyncSession = Depends(get_db)):
    """Attach a reward to an achievement. Each achievement has at most one.

    Raises:
        ValidationException: malformed achievementId, icon or translations
        NotFoundException: the achievement does not exist
        ConflictException: the achievement already has a reward
    """
    check_cuid(body.achievementId, "achievementId")
    await get_achievement_or_404(db, body.achievementId)

    existing = await db.execute(select(Reward).where(Reward.achievement_id == body.achievementId))
    if existing.scalar_one_or_none():
        raise ConflictException(DUPLICATE_REWARD)

    reward = Reward(
        type=body.type,
        title=required_translations(body.title, "title"),
        description=required_translations(body.description, "description"),
        icon=clean_icon(body.icon),
        is_applicable=body.isApplicable,
        details=body.details or {},
        achievement_id=body.achievementId,
    )
    db.add(reward)
    await commit_or_conflict(db, DUPLICATE_REWARD)
    return serialize_reward(reward, None)


@router.patch("/{reward_id}", response_model=dict, status_code=status.HTTP_200_OK)
async def update_reward(reward_id: str, body: RewardUpdate, db: AsyncSession = Depends(get_db)):
    reward = await _get_reward_or_404(db, reward_id)

    if body.achievementId is not None and body.achievementId != reward.achievement_id:
        check_cuid(body.achievementId, "achievementId")
        reward.achievement = await get_achievement_or_404(db, body.achievementId)
    if body.type is not None:
        reward.type = body.type
    if body.title is not None:
        reward.title = resolve_translation_input(body.title)
    if body.description is not None:
        reward.description = resolve_translation_input(body.description)
    if body.icon is not None:
        reward.icon = clean_icon(body.icon)
    if body.isApplicable is not None:
        reward.is_applicable = body.isApplicable
    if body.details is not None:
        reward.details = body.details

    await commit_or_conflict(db, DUPLICATE_REWARD)
    return serialize_reward(await _get_reward_or_404(db, reward_id), None)


@router.delete("/{reward_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_reward(reward_id: str, db: AsyncSession = Depends(get_db)):
    reward = await _get_reward_or_404(db, reward_id)
    await db.delete(reward)
    await db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
