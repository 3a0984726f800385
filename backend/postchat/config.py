from pydantic import Field
from pydantic_settings import BaseSettings
from functools import lru_cache

from postchat.models.chat import DEFAULT_API_VERSION


DEFAULT_NO_ANSWER_MESSAGE = "לא הצלחתי למצוא מידע מתאים באתר, תרצה שאבדוק לך במקורות אחרים?"


class Settings(BaseSettings):
    # Database (read-only post store)
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_db: str = "blog"
    postgres_user: str = "blog"
    db_password: str = "changeme"
    # Full DSN, takes precedence over the discrete fields when set
    database_dsn: str | None = Field(None, validation_alias="DATABASE_URL")

    # Azure OpenAI. Checked per request, see core.orchestrator.provider_config
    azure_openai_api_key: str | None = None
    azure_openai_endpoint: str | None = None
    azure_openai_deployment: str | None = None
    azure_openai_api_version: str = DEFAULT_API_VERSION
    azure_openai_timeout_seconds: float = 30.0

    # App
    log_level: str = "INFO"
    allowed_origins: str = "http://localhost:5173,http://localhost:3000"
    no_answer_message: str = DEFAULT_NO_ANSWER_MESSAGE

    @property
    def database_url(self) -> str:
        if self.database_dsn:
            return self.database_dsn
        return (
            f"postgresql://{self.postgres_user}:{self.db_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    @property
    def allowed_origins_list(self) -> list[str]:
        return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]

    class Config:
        env_file = ".env"
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    return Settings()
