from pydantic_settings import BaseSettings
from dotenv import load_dotenv

load_dotenv()

class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite+aiosqlite:///./task_tracker.db"

    # Security
    SECRET_KEY: str = "change-me"
    REFRESH_SECRET_KEY: str = "change-me-too"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 15
    REFRESH_TOKEN_EXPIRE_DAYS: int = 7

    # "development" exposes exception details in 500 responses
    ENVIRONMENT: str = "production"

    # Report another user's task as 404 instead of 403
    HIDE_FOREIGN_TASKS: bool = False

    CORS_ORIGINS: list[str] = ["*"]

    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT.lower() == "development"

    @property
    def default_secrets(self) -> list[str]:
        """Names of token secrets still set to their shipped placeholder."""
        fields = type(self).model_fields
        return [
            name for name in ("SECRET_KEY", "REFRESH_SECRET_KEY")
            if getattr(self, name) == fields[name].default
        ]

    class Config:
        env_file = ".env"
        extra = "ignore"

settings = Settings()
