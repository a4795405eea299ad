from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings, read from the environment and an optional .env file.
    """

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    PROJECT_NAME: str = "Achievement API"
    API_VERSION: str = "1.0.0"
    ENV: str = "dev"

    SERVER_HOST: str = "0.0.0.0"
    SERVER_PORT: int = 3005

    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "postgres"
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_DB: str = "achievements"
    # overrides the POSTGRES_* settings when set, e.g. sqlite+aiosqlite:///./dev.db
    DATABASE_URL: Optional[str] = None

    CORS_ORIGINS: List[str] = [
        "http://localhost:3001",
        "http://127.0.0.1:3001",
        "https://achivment-front.vercel.app",
        "https://test.aquadaddy.app",
    ]

    SSE_HEARTBEAT_INTERVAL: int = 30
    SSE_QUEUE_SIZE: int = 100
    SSE_SEND_WORK_PING: bool = True

    LOG_LEVEL: str = "INFO"


settings = Settings()
