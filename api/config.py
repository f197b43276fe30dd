"""
API configuration settings.
"""

from pydantic_settings import BaseSettings


class APIConfig(BaseSettings):
    """API configuration settings."""

    # API Settings
    api_title: str = "Bookshop Review API"
    api_version: str = "1.0.0"
    api_description: str = """
    Browse the catalog anonymously and manage your own book reviews.

    ## Authentication

    Register, log in, and send the returned token on review changes:

    ```
    Authorization: Bearer your_token_here
    ```

    Tokens expire after two hours by default. Each user holds at most one
    review per book and can only change or delete their own.
    """

    # Server Settings
    host: str = "0.0.0.0"
    port: int = 3000
    debug: bool = False

    # Client Settings
    client_base_url: str = "http://localhost:3000"
    client_timeout: float = 10.0

    # CORS Settings
    cors_origins: list = ["*"]  # Configure appropriately for production
    cors_allow_credentials: bool = True
    cors_allow_methods: list = ["*"]
    cors_allow_headers: list = ["*"]

    # Logging
    log_level: str = "INFO"

    model_config = {
        "env_file": ".env",
        "extra": "ignore"  # Ignore extra fields from .env
    }


# Global config instance
config = APIConfig()
