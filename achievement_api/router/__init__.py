from achievement_api.router.api.categories import router as categories_router
from achievement_api.router.api.achievements import router as achievements_router
from achievement_api.router.api.rewards import router as rewards_router
from achievement_api.router.api.progress import router as progress_router
from achievement_api.router.api.events import router as events_router
from achievement_api.router.api.stats import router as stats_router
from achievement_api.router.api.health import router as health_router
__all__ = [
    "categories_router",
    "achievements_router",
    "rewards_router",
    "progress_router",
    "events_router",
    "stats_router",
    "health_router",
]
