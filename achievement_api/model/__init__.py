from achievement_api.model.categories import AchievementCategory
from achievement_api.model.achievements import Achievement
from achievement_api.model.rewards import Reward
from achievement_api.model.progress import UserAchievementProgress

__all__ = [
    "AchievementCategory",
    "Achievement",
    "Reward",
    "UserAchievementProgress",
]
