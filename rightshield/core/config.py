from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # App Config
    APP_TITLE: str = "RightShield: Contract Fairness Engine"
    LOG_LEVEL: str = "INFO"

    # LLM (OpenAI-compatible chat completions)
    OPENAI_API_KEY: str = ""
    OPENAI_BASE_URL: str = "https://api.openai.com/v1"
    OPENAI_MODEL: str = "gpt-4o-mini"
    LLM_TIMEOUT: float = 120.0

    # Managed database (REST + auth)
    SUPABASE_URL: str = ""
    SUPABASE_SERVICE_ROLE_KEY: str = ""

    # Limits
    CHAT_CONTEXT_CHARS: int = 2000
    MAX_UPLOAD_BYTES: int = 10 * 1024 * 1024

settings = Settings()


def get_settings() -> Settings:
    """FastAPI dependency; overridden in tests."""
    return settings
