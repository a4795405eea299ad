from typing import Any, Dict, Optional

from sqlalchemy import inspect

from achievement_api.model.achievements import Achievement
from achievement_api.model.categories import AchievementCategory
from achievement_api.model.progress import UserAchievementProgress
from achievement_api.model.rewards import Reward
from achievement_api.translations import localize


def _loaded(obj, attr: str) -> bool:
    """True when the relationship was eagerly loaded; async sessions can't lazy load."""
    return attr not in inspect(obj).unloaded


def serialize_reward(reward: Reward, lang: Optional[str]) -> Dict[str, Any]:
    data = {
        "id": reward.id,
        "type": reward.type.value,
        "title": localize(reward.title, lang),
        "description": localize(reward.description, lang),
        "icon": reward.icon,
        "isApplicable": reward.is_applicable,
        "details": reward.details or {},
        "achievementId": reward.achievement_id,
        "createdAt": reward.created_at,
    }
    if _loaded(reward, "achievement") and reward.achievement is not None:
        data["achievement"] = serialize_achievement(reward.achievement, lang)
    return data


def serialize_category(category: AchievementCategory, lang: Optional[str]) -> Dict[str, Any]:
    data = {
        "id": category.id,
        "key": category.key,
        "name": localize(category.name, lang),
        "createdAt": category.created_at,
    }
    if _loaded(category, "achievements"):
        data["achievements"] = [serialize_achievement(a, lang) for a in category.achievements]
    return data


def serialize_achievement(achievement: Achievement, lang: Optional[str]) -> Dict[str, Any]:
    """
    Serializes an achievement with whichever of category, reward and progress
    were loaded alongside it.
    """
    data = {
        "id": achievement.id,
        "title": localize(achievement.title, lang),
        "description": localize(achievement.description, lang),
        "icon": achievement.icon,
        "hidden": achievement.hidden,
        "target": achievement.target,
        "categoryId": achievement.category_id,
        "createdAt": achievement.created_at,
    }
    if _loaded(achievement, "category") and achievement.category is not None:
        category = achievement.category
        data["category"] = {
            "id": category.id,
            "key": category.key,
            "name": localize(category.name, lang),
        }
    if _loaded(achievement, "reward"):
        data["reward"] = _serialize_nested_reward(achievement.reward, lang)
    if _loaded(achievement, "progress"):
        data["progress"] = [serialize_progress(p, lang, with_achievement=False) for p in achievement.progress]
    return data


def _serialize_nested_reward(reward: Optional[Reward], lang: Optional[str]) -> Optional[Dict[str, Any]]:
    if reward is None:
        return None
    return {
        "id": reward.id,
        "type": reward.type.value,
        "title": localize(reward.title, lang),
        "description": localize(reward.description, lang),
        "icon": reward.icon,
        "isApplicable": reward.is_applicable,
        "details": reward.details or {},
        "achievementId": reward.achievement_id,
    }


def serialize_progress(row: UserAchievementProgress, lang: Optional[str], with_achievement: bool = True) -> Dict[str, Any]:
    data = {
        "id": row.id,
        "userId": row.user_id,
        "achievementId": row.achievement_id,
        "status": row.status.value,
        "currentStep": row.current_step,
        "createdAt": row.created_at,
        "updatedAt": row.updated_at,
    }
    if with_achievement and _loaded(row, "achievement") and row.achievement is not None:
        data["achievement"] = serialize_achievement(row.achievement, lang)
    return data
