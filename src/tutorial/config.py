"""
Walkthrough configuration

Every field can be overridden with an ORMINTRO_-prefixed environment variable.
"""

from pydantic_settings import BaseSettings


class IntroConfig(BaseSettings):
    """Walkthrough configuration"""

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///:memory:"
    ECHO_SQL: bool = False

    # Logging
    DEBUG: bool = False
    LOG_TO_FILE: bool = False
    LOG_DIR: str = "logs"

    class Config:
        env_prefix = "ORMINTRO_"
        case_sensitive = False
