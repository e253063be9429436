"""Configuration settings for User Graph."""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 4000
    api_debug: bool = False

    # Service
    service_name: str = "user-graph"
    service_version: str = "0.1.0"
    log_level: str = "INFO"

    # GraphQL
    graphiql: bool = True

    # REST backend
    backend_url: str = "http://localhost:3000"
    backend_timeout: float = 10.0

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
