from typing import Dict, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from achievement_api.exceptions import ConflictException, NotFoundException, ValidationException
from achievement_api.input_util import is_valid_cuid, is_valid_icon, sanitize_string
from achievement_api.log import get_logger
from achievement_api.model.achievements import Achievement
from achievement_api.model.categories import AchievementCategory
from achievement_api.translations import TranslationInput, has_any_translation, resolve_translation_input

log = get_logger(__name__)


async def commit_or_conflict(db: AsyncSession, message: str) -> None:
    """Commits, turning a unique constraint violation into a 409."""
    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        log.warning(f"{message}: {e.orig}")
        raise ConflictException(message) from e


def required_translations(value: TranslationInput, field: str) -> Dict[str, str]:
    translations = resolve_translation_input(value)
    if not has_any_translation(translations):
        raise ValidationException(f"At least one {field} translation must be provided")
    return translations


def clean_category_key(key: str) -> str:
    cleaned = sanitize_string(key)
    if not 2 <= len(cleaned) <= 50:
        raise ValidationException("key must be between 2 and 50 characters")
    return cleaned


def clean_icon(icon: Optional[str]) -> Optional[str]:
    if not icon:
        return None
    if not is_valid_icon(icon):
        raise ValidationException("icon must be a valid URL or an emoji")
    return sanitize_string(icon)


def check_cuid(value: str, field: str) -> None:
    if not is_valid_cuid(value):
        raise ValidationException(f"Invalid {field} format")


async def get_category_or_404(db: AsyncSession, category_id: str) -> AchievementCategory:
    category = await db.get(AchievementCategory, category_id)
    if not category:
        raise NotFoundException("Category not found")
    return category


async def get_achievement_or_404(db: AsyncSession, achievement_id: str) -> Achievement:
    achievement = await db.get(Achievement, achievement_id)
    if not achievement:
        raise NotFoundException("Achievement not found")
    return achievement
