from typing import Any, Dict, List, Optional

from fastapi.encoders import jsonable_encoder
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from achievement_api.config import settings
from achievement_api.enums import ProgressStatus
from achievement_api.exceptions import ConflictException, NotFoundException, ValidationException
from achievement_api.live_clients import LiveClientRegistry
from achievement_api.log import get_logger
from achievement_api.model.achievements import Achievement
from achievement_api.model.progress import UserAchievementProgress
from achievement_api.progress_state import ProgressOutcome, ProgressTransitionError, resolve_progress
from achievement_api.router.api.logics.serializers import serialize_progress
from achievement_api.schema.progress_schema import ProgressCreate, ProgressUpdate

log = get_logger(__name__)

DUPLICATE_PROGRESS = "Progress record already exists for this user and achievement"
UNIQUE_PAIR_CONSTRAINT = "uq_progress_user_achievement"


def _progress_query():
    return select(UserAchievementProgress).options(
        selectinload(UserAchievementProgress.achievement).selectinload(Achievement.reward)
    )


async def _get_achievement(db: AsyncSession, achievement_id: str) -> Achievement:
    achievement = await db.get(Achievement, achievement_id)
    if not achievement:
        raise NotFoundException("Achievement not found")
    return achievement


async def _load_progress(db: AsyncSession, progress_id: str) -> Optional[UserAchievementProgress]:
    result = await db.execute(
        _progress_query()
        .where(UserAchievementProgress.id == progress_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


def _transition(
    target: Optional[int],
    requested_status: Optional[ProgressStatus],
    requested_step: Optional[int],
    existing_status: Optional[ProgressStatus] = None,
    existing_step: Optional[int] = None,
) -> ProgressOutcome:
    try:
        return resolve_progress(target, requested_status, requested_step, existing_status, existing_step)
    except ProgressTransitionError as e:
        raise ValidationException(str(e), extra={"currentStep": e.current_step, "target": e.target}) from e


def _violates_pair_constraint(error: IntegrityError) -> bool:
    # Postgres names the constraint, SQLite lists the columns
    message = str(error.orig)
    return UNIQUE_PAIR_CONSTRAINT in message or "UNIQUE constraint failed" in message


async def _commit(db: AsyncSession) -> None:
    """
    Commits a progress write. The (user_id, achievement_id) unique constraint
    settles concurrent creates: the loser gets a 409. A foreign key failure
    means the achievement disappeared after it was looked up.
    """
    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        if _violates_pair_constraint(e):
            log.warning(f"Progress write rejected by unique constraint: {e.orig}")
            raise ConflictException(DUPLICATE_PROGRESS) from e
        if "foreign key" in str(e.orig).lower():
            log.warning(f"Progress write rejected by foreign key: {e.orig}")
            raise NotFoundException("Achievement not found") from e
        raise


#############
### Reads ###
#############
async def list_progress_logic(db: AsyncSession, lang: Optional[str], user_id: Optional[str] = None) -> List[Dict[str, Any]]:
    query = _progress_query().order_by(UserAchievementProgress.created_at)
    if user_id is not None:
        query = query.where(UserAchievementProgress.user_id == user_id)
    result = await db.execute(query)
    return [serialize_progress(row, lang) for row in result.scalars().all()]


async def get_progress_logic(db: AsyncSession, progress_id: str, lang: Optional[str]) -> Dict[str, Any]:
    row = await _load_progress(db, progress_id)
    if not row:
        raise NotFoundException("Progress not found")
    return serialize_progress(row, lang)


async def get_user_achievement_progress_logic(
    db: AsyncSession,
    user_id: str,
    achievement_id: str,
    lang: Optional[str],
) -> Dict[str, Any]:
    """
    Looks up one user's progress on one achievement.

    A missing achievement is a 404, but a missing progress row is a normal
    answer: {"found": False, ...}.
    """
    await _get_achievement(db, achievement_id)

    result = await db.execute(
        _progress_query().where(
            UserAchievementProgress.user_id == user_id,
            UserAchievementProgress.achievement_id == achievement_id,
        )
    )
    row = result.scalar_one_or_none()
    if not row:
        return {
            "found": False,
            "message": "Progress not found",
            "userId": user_id,
            "achievementId": achievement_id,
        }
    return {"found": True, "progress": serialize_progress(row, lang)}


##############
### Writes ###
##############
async def create_progress_logic(db: AsyncSession, data: ProgressCreate) -> UserAchievementProgress:
    """
    Creates the progress record of a user on an achievement.

    Args:
        db (AsyncSession): Database session
        data (ProgressCreate): Validated request body

    Raises:
        NotFoundException: The achievement does not exist
        ConflictException: The user already has progress on this achievement
        ValidationException: FINISHED was requested before the target was reached

    Returns:
        UserAchievementProgress: The committed row, achievement and reward loaded
    """
    achievement = await _get_achievement(db, data.achievementId)

    result = await db.execute(
        select(UserAchievementProgress).where(
            UserAchievementProgress.user_id == data.userId,
            UserAchievementProgress.achievement_id == data.achievementId,
        )
    )
    existing = result.scalar_one_or_none()
    if existing:
        raise ConflictException(DUPLICATE_PROGRESS, extra={"existingProgress": serialize_progress(existing, None)})

    outcome = _transition(achievement.target, data.status, data.currentStep)

    row = UserAchievementProgress(
        user_id=data.userId,
        achievement_id=achievement.id,
        status=outcome.status,
        current_step=outcome.current_step,
    )
    db.add(row)
    await _commit(db)
    log.info(f"Progress {row.id} created for user {data.userId}: {outcome.status.value} at step {outcome.current_step}")

    return await _load_progress(db, row.id)


async def update_progress_logic(db: AsyncSession, progress_id: str, data: ProgressUpdate) -> UserAchievementProgress:
    """
    Applies a partial update; omitted fields keep their stored values.
    Switching achievements re-derives the status against the new target.
    """
    row = await _load_progress(db, progress_id)
    if not row:
        raise NotFoundException("Progress record not found")

    achievement = row.achievement
    if data.achievementId and data.achievementId != row.achievement_id:
        achievement = await _get_achievement(db, data.achievementId)

    outcome = _transition(
        achievement.target,
        data.status,
        data.currentStep,
        existing_status=row.status,
        existing_step=row.current_step,
    )

    if data.userId:
        row.user_id = data.userId
    row.achievement = achievement
    row.status = outcome.status
    row.current_step = outcome.current_step
    await _commit(db)
    log.info(f"Progress {progress_id} updated: {outcome.status.value} at step {outcome.current_step}")

    return await _load_progress(db, progress_id)


async def delete_progress_logic(db: AsyncSession, progress_id: str) -> None:
    row = await db.get(UserAchievementProgress, progress_id)
    if not row:
        raise NotFoundException("Progress record not found")
    await db.delete(row)
    await db.commit()


async def rederive_progress_for_achievement(db: AsyncSession, achievement: Achievement) -> List[UserAchievementProgress]:
    """
    Re-applies the state machine to every progress row of `achievement`
    after its target changed. Nothing is committed here.

    Returns:
        List[UserAchievementProgress]: The rows whose status or step changed
    """
    result = await db.execute(
        select(UserAchievementProgress).where(UserAchievementProgress.achievement_id == achievement.id)
    )
    changed = []
    for row in result.scalars().all():
        outcome = resolve_progress(
            achievement.target,
            existing_status=row.status,
            existing_step=row.current_step,
        )
        if outcome != (row.status, row.current_step):
            row.status = outcome.status
            row.current_step = outcome.current_step
            changed.append(row)
    if changed:
        log.info(f"Target of achievement {achievement.id} changed, {len(changed)} progress row(s) re-derived")
    return changed


async def reload_progress(db: AsyncSession, rows: List[UserAchievementProgress]) -> List[UserAchievementProgress]:
    """Reloads committed rows with their achievement and reward."""
    if not rows:
        return []
    result = await db.execute(
        _progress_query()
        .where(UserAchievementProgress.id.in_([row.id for row in rows]))
        .execution_options(populate_existing=True)
    )
    return list(result.scalars().all())


####################
### Notification ###
####################
def publish_progress(registry: LiveClientRegistry, user_id: str, record: Dict[str, Any]) -> bool:
    """
    Post-commit hook: pushes the committed record to the user's open event
    stream, if any. Delivery is best effort and never fails the request.
    """
    delivered = registry.send_to(user_id, "progress", jsonable_encoder(record))
    if delivered:
        log.info(f"Progress event sent to client {user_id}")
        if settings.SSE_SEND_WORK_PING:
            registry.send_to(user_id, "work", "work")
    return delivered
