"""
Configuration management using environment variables.
Handles identity, token and logging settings with validation and defaults.
"""

from typing import Optional
from pydantic import Field, validator
from pydantic_settings import BaseSettings
from pathlib import Path


class BookshopConfig(BaseSettings):
    """
    Configuration class for the bookshop core.
    Uses pydantic BaseSettings for environment variable management.
    """

    # Token Configuration
    jwt_secret: str = Field(default="replace_this_with_a_strong_secret", env="JWT_SECRET")
    jwt_algorithm: str = Field(default="HS256", env="JWT_ALGORITHM")
    token_ttl_seconds: int = Field(default=7200, env="TOKEN_TTL_SECONDS")

    # Password Hashing
    bcrypt_rounds: int = Field(default=10, env="BCRYPT_ROUNDS")

    # Sample Data
    seed_sample_user: bool = Field(default=True, env="SEED_SAMPLE_USER")
    sample_username: str = Field(default="alice", env="SAMPLE_USERNAME")
    sample_password: str = Field(default="password123", env="SAMPLE_PASSWORD")

    # Logging Configuration
    log_level: str = Field(default="INFO", env="LOG_LEVEL")
    log_format: str = Field(default="json", env="LOG_FORMAT")
    log_file: Optional[str] = Field(default=None, env="LOG_FILE")

    # Development/Testing
    debug: bool = Field(default=False, env="DEBUG")

    @validator('jwt_secret')
    def validate_jwt_secret(cls, v):
        """Ensure a signing secret is present."""
        if not v or not v.strip():
            raise ValueError('jwt_secret must not be empty')
        return v

    @validator('jwt_algorithm')
    def validate_jwt_algorithm(cls, v):
        """Only HMAC algorithms are supported with a shared secret."""
        valid_algorithms = ['HS256', 'HS384', 'HS512']
        if v.upper() not in valid_algorithms:
            raise ValueError(f'jwt_algorithm must be one of: {valid_algorithms}')
        return v.upper()

    @validator('token_ttl_seconds')
    def validate_token_ttl(cls, v):
        """Ensure token lifetime is reasonable."""
        if v < 1 or v > 7 * 24 * 3600:
            raise ValueError('token_ttl_seconds must be between 1 and 604800')
        return v

    @validator('bcrypt_rounds')
    def validate_bcrypt_rounds(cls, v):
        """bcrypt accepts cost factors from 4 to 31."""
        if v < 4 or v > 31:
            raise ValueError('bcrypt_rounds must be between 4 and 31')
        return v

    @validator('log_level')
    def validate_log_level(cls, v):
        """Ensure log level is valid."""
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in valid_levels:
            raise ValueError(f'log_level must be one of: {valid_levels}')
        return v.upper()

    @validator('log_format')
    def validate_log_format(cls, v):
        """Ensure log format is valid."""
        valid_formats = ['json', 'console']
        if v.lower() not in valid_formats:
            raise ValueError(f'log_format must be one of: {valid_formats}')
        return v.lower()

    class Config:
        """Pydantic configuration."""
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"  # Ignore extra fields from .env

    def get_log_file_path(self) -> Optional[Path]:
        """Get log file path as Path object."""
        if self.log_file:
            return Path(self.log_file)
        return None


# Global configuration instance
config = BookshopConfig()
