from achievement_api.database.db import get_db, get_async_db

__all__ = ["get_db", "get_async_db"]
