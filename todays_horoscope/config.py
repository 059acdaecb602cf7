"""
Application configuration using pydantic-settings.
Loads from environment variables / .env file.
"""

from functools import lru_cache
from typing import List, Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""
    
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )
    
    # Application
    app_name: str = "todays-horoscope"
    app_env: Literal["development", "staging", "production"] = "development"
    debug: bool = False
    log_level: Optional[str] = None
    
    # API Server
    host: str = "0.0.0.0"
    port: int = 8000
    
    # Redis (cache store). Unset means the cache runs disabled.
    redis_url: Optional[str] = None
    cache_namespace: str = "horoscope-prod"
    
    # OpenAI
    openai_api_key: Optional[str] = None
    openai_model: str = "gpt-4o-mini-2024-07-18"
    openai_max_tokens: int = 800
    openai_timeout_seconds: float = 30.0
    
    # Feature flags (env: FEATURE_FLAG_USE_REDIS_CACHE, ...)
    feature_flag_use_redis_cache: bool = True
    feature_flag_use_timezone_content: bool = False
    feature_flag_use_rate_limiting: bool = False
    feature_flag_use_lunar_zodiac_order: bool = False
    
    # Rate limiting (fixed window per client IP)
    rate_limit_seconds: int = 60
    rate_limit_max_requests: int = 60
    
    # Scheduled batch
    cron_secret: Optional[str] = None
    batch_schedule_hour_utc: int = 0
    
    # Admin / debug endpoints
    admin_api_key: Optional[str] = None
    
    # CORS
    cors_origins: List[str] = [
        "https://gettodayshoroscope.com",
        "https://www.gettodayshoroscope.com",
    ]
    
    @property
    def is_development(self) -> bool:
        return self.app_env == "development"
    
    @property
    def is_production(self) -> bool:
        return self.app_env == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
