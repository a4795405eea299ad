from typing import Optional

from fastapi import Query, Request

from achievement_api.live_clients import LiveClientRegistry
from achievement_api.translations import LANGS, normalize_lang


def get_lang(
    lang: Optional[str] = Query(
        None,
        description=f"Language code ({', '.join(LANGS)}). Without it, translated fields are returned as full maps.",
    ),
) -> Optional[str]:
    return normalize_lang(lang)


def get_live_clients(request: Request) -> LiveClientRegistry:
    """The registry is created by the app lifespan and lives on app.state."""
    return request.app.state.live_clients
