from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    app_name: str = "appforge"
    log_level: str = "INFO"

    generated_root: str = "./generated"
    max_concurrent_builds: int = 4

    redis_url: str = "redis://localhost:6379/0"

    gemini_api_key: str | None = None
    gemini_model: str = "gemini-1.5-flash"
    gemini_api_url: str = "https://generativelanguage.googleapis.com/v1beta/models"

    openai_api_key: str | None = None
    openai_model: str = "gpt-4o-mini"

    planner_timeout_seconds: float = 60.0

settings = Settings()
