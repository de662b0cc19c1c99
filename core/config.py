from functools import lru_cache
from typing import List, Optional

from pydantic import EmailStr
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # 1️⃣ Database
    DATABASE_URL: str = "sqlite:///./portfolio.db"
    DATABASE_ECHO: bool = False

    # 2️⃣ Admin auth
    ADMIN_TOKEN: str
    ADMIN_USERNAME: str = "admin"
    ADMIN_PASSWORD: Optional[str] = None
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # 3️⃣ Messages
    DEFAULT_PAGE_SIZE: int = 10
    MAX_PAGE_SIZE: int = 100
    POLL_INTERVAL_SECONDS: float = 10

    # 4️⃣ Email config (owner notification on new messages)
    MAIL_ENABLED: bool = False
    MAIL_USERNAME: Optional[str] = None
    MAIL_PASSWORD: Optional[str] = None
    MAIL_FROM: Optional[EmailStr] = None
    MAIL_PORT: int = 587
    MAIL_SERVER: Optional[str] = None
    MAIL_FROM_NAME: str = "Portfolio"
    MAIL_STARTTLS: bool = True
    MAIL_SSL_TLS: bool = False
    USE_CREDENTIALS: bool = True
    OWNER_EMAIL: Optional[EmailStr] = None

    # 5️⃣ Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    # frontend origins
    FRONTEND_ORIGINS: List[str] = ["http://localhost:3000"]

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Cached settings instance. Call get_settings.cache_clear() to reload."""
    return Settings()


settings = get_settings()
