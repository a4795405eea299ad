from fastapi import APIRouter, Depends, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from achievement_api.database import get_db
from achievement_api.enums import ProgressStatus
from achievement_api.model.achievements import Achievement
from achievement_api.model.categories import AchievementCategory
from achievement_api.model.progress import UserAchievementProgress
from achievement_api.model.rewards import Reward
from achievement_api.schema.stats_schema import StatsOut

router = APIRouter()


async def _count(db: AsyncSession, model, *criteria) -> int:
    query = select(func.count()).select_from(model)
    if criteria:
        query = query.where(*criteria)
    return (await db.execute(query)).scalar_one()


@router.get("/stats", response_model=StatsOut, status_code=status.HTTP_200_OK)
async def get_stats(db: AsyncSession = Depends(get_db)):
    """Totals for the admin dashboard."""
    rewards = await _count(db, Reward)
    return {
        "categories": await _count(db, AchievementCategory),
        "achievements": await _count(db, Achievement),
        "rewards": rewards,
        "progress": await _count(db, UserAchievementProgress),
        "progressStats": {
            "completed": await _count(db, UserAchievementProgress, UserAchievementProgress.status == ProgressStatus.FINISHED),
            "inProgress": await _count(db, UserAchievementProgress, UserAchievementProgress.status == ProgressStatus.INPROGRESS),
            "blocked": await _count(db, UserAchievementProgress, UserAchievementProgress.status == ProgressStatus.BLOCKED),
        },
        "achievementStats": {
            "hidden": await _count(db, Achievement, Achievement.hidden.is_(True)),
            "visible": await _count(db, Achievement, Achievement.hidden.is_(False)),
        },
        "rewardStats": {
            "applicable": await _count(db, Reward, Reward.is_applicable.is_(True)),
            "total": rewards,
        },
    }
