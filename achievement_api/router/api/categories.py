from typing import Optional

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from achievement_api.database import get_db
from achievement_api.exceptions import ConflictException, NotFoundException
from achievement_api.model.achievements import Achievement
from achievement_api.model.categories import AchievementCategory
from achievement_api.router.dependencies import get_lang
from achievement_api.router.api.logics.catalog_logic import (
    clean_category_key,
    commit_or_conflict,
    get_category_or_404,
    required_translations,
)
from achievement_api.router.api.logics.serializers import serialize_category
from achievement_api.schema.catalog_schema import CategoryCreate, CategoryUpdate
from achievement_api.translations import resolve_translation_input

router = APIRouter()

DUPLICATE_KEY = "Category with this key already exists"


def _category_query():
    return select(AchievementCategory).options(
        selectinload(AchievementCategory.achievements).selectinload(Achievement.reward)
    )


@router.get("", response_model=list, status_code=status.HTTP_200_OK)
async def get_all_categories(lang: Optional[str] = Depends(get_lang), db: AsyncSession = Depends(get_db)):
    """Get all categories with their achievements and rewards."""
    result = await db.execute(_category_query().order_by(AchievementCategory.created_at))
    return [serialize_category(c, lang) for c in result.scalars().all()]


@router.get("/{category_id}", response_model=dict, status_code=status.HTTP_200_OK)
async def get_category(category_id: str, lang: Optional[str] = Depends(get_lang), db: AsyncSession = Depends(get_db)):
    result = await db.execute(_category_query().where(AchievementCategory.id == category_id))
    category = result.scalar_one_or_none()
    if not category:
        raise NotFoundException("Category not found")
    return serialize_category(category, lang)


@router.post("", response_model=dict, status_code=status.HTTP_201_CREATED)
async def create_category(body: CategoryCreate, db: AsyncSession = Depends(get_db)):
    """Create a category.

    Args:
        body (CategoryCreate): unique key (2-50 chars) and name translations

    Raises:
        ValidationException: bad key or no name translation
        ConflictException: the key is taken
    """
    key = clean_category_key(body.key)
    name = required_translations(body.name, "name")

    existing = await db.execute(select(AchievementCategory).where(AchievementCategory.key == key))
    if existing.scalar_one_or_none():
        raise ConflictException(DUPLICATE_KEY)

    category = AchievementCategory(key=key, name=name)
    db.add(category)
    await commit_or_conflict(db, DUPLICATE_KEY)
    return serialize_category(category, None)


@router.patch("/{category_id}", response_model=dict, status_code=status.HTTP_200_OK)
async def update_category(category_id: str, body: CategoryUpdate, db: AsyncSession = Depends(get_db)):
    category = await get_category_or_404(db, category_id)
    if body.key is not None:
        category.key = clean_category_key(body.key)
    if body.name is not None:
        category.name = resolve_translation_input(body.name)
    await commit_or_conflict(db, DUPLICATE_KEY)
    return serialize_category(category, None)


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(category_id: str, db: AsyncSession = Depends(get_db)):
    """Delete a category together with its achievements."""
    category = await get_category_or_404(db, category_id)
    await db.delete(category)
    await db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
