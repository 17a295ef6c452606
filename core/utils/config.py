from functools import lru_cache

from pydantic_settings import BaseSettings


class settings(BaseSettings):
    ML_API_URL: str = "http://localhost:8000"
    ML_API_KEY: str | None = None
    ML_API_TIMEOUT: float = 15.0
    FRONTEND_URL: str = "http://localhost:3000"
    SUPPORT_EMAIL: str = "support@vastuvision.com"

    class Config:
        env_file = ".env"
        extra = "allow"


@lru_cache
def get_setting():
    return settings()
