from pydantic_settings import BaseSettings
from pydantic import ConfigDict

class Settings(BaseSettings):
    model_config = ConfigDict(env_file=".env", extra="ignore")

    ENV: str = "development"

    DATABASE_URL: str = "sqlite:///./taskmanager.db"

    # Access token signing
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 15

    # Refresh token lifecycle
    REFRESH_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 30
    ROTATE_REFRESH_TOKENS: bool = True
    PRUNE_REVOKED_AFTER_DAYS: int = 90
    REVOKE_SESSIONS_ON_PASSWORD_CHANGE: bool = True

    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"
    CORS_ORIGINS: list[str] = ["http://localhost:3000"]


settings = Settings()
