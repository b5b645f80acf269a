from typing import Optional
from urllib.parse import quote_plus
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # --- Database (SQLAlchemy/SQLModel) ---
    # A full URL wins over the discrete parts below
    DB_URL: Optional[str] = None
    DB_DRIVER: str = "mysql+pymysql"
    DB_HOST: str = "localhost"
    DB_PORT: int = 3306
    DB_USER: str = "root"
    DB_PASSWORD: str = "root"
    DB_NAME: str = "test"
    DB_ECHO: bool = False
    DB_POOL_PRE_PING: bool = True

    @property
    def DATABASE_URL(self) -> str:
        if self.DB_URL:
            return self.DB_URL
        safe_password = quote_plus(self.DB_PASSWORD)
        return (
            f"{self.DB_DRIVER}://{self.DB_USER}:{safe_password}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}?charset=utf8mb4"
        )

    # --- Data sources ---
    # Raise NotFoundError when an update matches no row
    STRICT_UPDATE: bool = False

    # --- Logging ---
    LOG_LEVEL: str = "INFO"
    LOG_DIR: Optional[str] = None  # File sinks are only added when set

    # --- Pydantic ---
    # priority: env vars > .env > defaults
    model_config = SettingsConfigDict(
        env_prefix="DATAPIPE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_ignore_empty=True,
    )


# Singleton settings instance
settings = Settings()
