from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_PATH = Path(__file__).resolve().parent.parent / ".env.local"


class Settings(BaseSettings):
    # Environment settings
    environment: str = "development"
    debug: bool = False
    LOG_LEVEL: str = "INFO"

    # Supabase settings
    SUPABASE_DB_URL: str | None = None

    # OpenAI Assistants settings
    OPENAI_API_KEY: str | None = None
    OPENAI_ASSISTANT_ID: str | None = None
    OPENAI_TIMEOUT_SECONDS: float = 30.0

    # =================================================================
    # CLASSIFICATION PIPELINE
    # =================================================================
    CLASSIFICATION_POLL_INTERVAL_SECONDS: float = 0.5
    CLASSIFICATION_TIMEOUT_SECONDS: float = 60.0
    CLASSIFICATION_PROMPT_PREFIX: str = "The incoming query is: "
    DEFAULT_BUCKET_LABEL: str = "Miscellaneous"
    MESSAGE_TABLE_PREFIX: str = "messages_"

    # =================================================================
    # DATABASE POOL SETTINGS
    # =================================================================
    DB_POOL_MIN_SIZE: int = 2
    DB_POOL_MAX_SIZE: int = 10
    DB_POOL_TIMEOUT: float = 30.0
    DB_POOL_MAX_IDLE: float = 600.0  # 10 minutes
    DB_POOL_MAX_LIFETIME: float = 3600.0  # 1 hour

    # CORS (browser clients call the functions directly)
    CORS_ALLOW_ORIGIN: str = "*"
    CORS_ALLOW_HEADERS: str = "authorization, x-client-info, apikey, content-type"
    CORS_ALLOW_METHODS: str = "POST, GET, OPTIONS, PUT, DELETE"

    model_config = SettingsConfigDict(
        env_file=str(ENV_PATH),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    def get_db_pool_config(self) -> dict:
        """
        Get database pool configuration.
        Adjust environment-specific settings based on self.environment.
        """
        config = {
            "min_size": self.DB_POOL_MIN_SIZE,
            "max_size": self.DB_POOL_MAX_SIZE,
            "timeout": self.DB_POOL_TIMEOUT,
            "max_idle": self.DB_POOL_MAX_IDLE,
            "max_lifetime": self.DB_POOL_MAX_LIFETIME,
        }

        if self.environment == "development":
            config.update(
                {
                    "min_size": 1,
                    "max_size": 4,
                    "timeout": 15.0,
                }
            )

        return config

    def cors_headers(self) -> dict[str, str]:
        """Headers attached to every response, preflight included."""
        return {
            "Access-Control-Allow-Origin": self.CORS_ALLOW_ORIGIN,
            "Access-Control-Allow-Headers": self.CORS_ALLOW_HEADERS,
            "Access-Control-Allow-Methods": self.CORS_ALLOW_METHODS,
        }


settings = Settings()


def get_settings() -> Settings:
    """FastAPI dependency returning the process-wide settings."""
    return settings
