from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    PROJECT_NAME: str = "TeamHub"
    API_V1_STR: str = "/api/v1"

    MONGODB_URL: str
    DATABASE_NAME: str = "teamhub"
    # Multi-document transactions need a replica set; disable for a standalone server
    MONGODB_TRANSACTIONS: bool = True

    # Tokens are issued by the identity provider and signed with a shared secret
    SECRET_KEY: str
    ALGORITHM: str = "HS256"

    # Push delivery (optional). In-app notifications are always stored.
    PUSH_WEBHOOK_URL: Optional[str] = None
    PUSH_TIMEOUT_SECONDS: float = 5.0

    LOG_LEVEL: str = "INFO"
    DEFAULT_PAGE_LIMIT: int = 100

    # Invite links point at the web app, which calls back into this API
    FRONTEND_BASE_URL: str = "http://localhost:3000"
    INVITE_EXPIRE_HOURS: int = 24

    class Config:
        case_sensitive = True
        env_file = ".env"


settings = Settings()
