"""
Application configuration settings
FILE: quizgen/core/config.py
"""
from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Completion API Configuration
    # The API key is NOT configured here: it is supplied with every generation request
    completion_api_url: str = "https://api.openai.com/v1/chat/completions"
    completion_model: str = "gpt-3.5-turbo"
    completion_timeout: float = 60.0  # transport timeout, seconds

    # Session Configuration
    max_sessions: int = 1000

    # Server Configuration
    cors_origins: List[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
    ]
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        case_sensitive = False  # This allows case-insensitive matching
        extra = "ignore"


settings = Settings()
