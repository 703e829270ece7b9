from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Configuration sourced from environment variables."""

    fact_check_api_key: str | None = None
    fact_check_api_url: str = "https://factchecktools.googleapis.com/v1alpha1/claims:search"
    fact_check_language: str = "en"
    fact_check_page_size: int = 5
    fact_check_timeout: float = 10.0
    fact_check_cache_ttl: float = 1800.0
    score_jitter: float = 5.0
    analysis_delay: float = 0.0
    history_limit: int = 10
    history_path: str | None = None
    data_dir: str | None = None
    cors_origins: str = "*"
    debug: bool = False

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "",
        "case_sensitive": False,
    }

    def get_cors_origins(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache(1)
def get_settings() -> Settings:
    return Settings()
