from typing import Optional

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from achievement_api.database import get_db
from achievement_api.live_clients import LiveClientRegistry
from achievement_api.router.dependencies import get_lang, get_live_clients
from achievement_api.router.api.logics.progress_logic import (
    create_progress_logic,
    delete_progress_logic,
    get_progress_logic,
    get_user_achievement_progress_logic,
    list_progress_logic,
    publish_progress,
    update_progress_logic,
)
from achievement_api.router.api.logics.serializers import serialize_progress
from achievement_api.schema.progress_schema import ProgressCreate, ProgressUpdate

router = APIRouter()


@router.get("", response_model=list, status_code=status.HTTP_200_OK)
async def get_all_progress(lang: Optional[str] = Depends(get_lang), db: AsyncSession = Depends(get_db)):
    """Get every progress record with its achievement."""
    return await list_progress_logic(db, lang)


@router.get("/user/{user_id}", response_model=list, status_code=status.HTTP_200_OK)
async def get_user_progress(user_id: str, lang: Optional[str] = Depends(get_lang), db: AsyncSession = Depends(get_db)):
    """Get all progress records of one user."""
    return await list_progress_logic(db, lang, user_id=user_id)


@router.get("/user/{user_id}/{achievement_id}", response_model=dict, status_code=status.HTTP_200_OK)
async def get_user_achievement_progress(
    user_id: str,
    achievement_id: str,
    lang: Optional[str] = Depends(get_lang),
    db: AsyncSession = Depends(get_db),
):
    """Get a user's progress on one achievement.

    Responds 404 only when the achievement is unknown; a user without progress
    gets {"found": false, ...}.
    """
    return await get_user_achievement_progress_logic(db, user_id, achievement_id, lang)


@router.get("/{progress_id}", response_model=dict, status_code=status.HTTP_200_OK)
async def get_progress(progress_id: str, lang: Optional[str] = Depends(get_lang), db: AsyncSession = Depends(get_db)):
    return await get_progress_logic(db, progress_id, lang)


@router.post("", response_model=dict, status_code=status.HTTP_201_CREATED)
async def create_progress(
    body: ProgressCreate,
    lang: Optional[str] = Depends(get_lang),
    db: AsyncSession = Depends(get_db),
    live_clients: LiveClientRegistry = Depends(get_live_clients),
):
    """Create the progress record of a user on an achievement.

    The status is derived from the achievement target unless BLOCKED is
    requested. The committed record is pushed to the user's event stream.

    Args:
        body (ProgressCreate): userId, achievementId, optional status and currentStep
        lang (str, optional): single-language response mode
        db (AsyncSession): database session
        live_clients (LiveClientRegistry): open event streams

    Returns:
        dict: the localized progress record
    """
    row = await create_progress_logic(db, body)
    record = serialize_progress(row, lang)
    publish_progress(live_clients, row.user_id, record)
    return record


@router.patch("/{progress_id}", response_model=dict, status_code=status.HTTP_200_OK)
async def update_progress(
    progress_id: str,
    body: ProgressUpdate,
    lang: Optional[str] = Depends(get_lang),
    db: AsyncSession = Depends(get_db),
    live_clients: LiveClientRegistry = Depends(get_live_clients),
):
    """Update a progress record; omitted fields keep their values."""
    row = await update_progress_logic(db, progress_id, body)
    record = serialize_progress(row, lang)
    publish_progress(live_clients, row.user_id, record)
    return record


@router.delete("/{progress_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_progress(progress_id: str, db: AsyncSession = Depends(get_db)):
    await delete_progress_logic(db, progress_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
