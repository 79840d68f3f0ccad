"""
Application Configuration
=========================
Uses pydantic-settings to load environment variables into a typed Settings object.
The calculation engine itself reads no settings; these only shape the HTTP service.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    The .env file is automatically read thanks to the model_config below.
    """

    # Application metadata
    APP_NAME: str = "NutriCalc Engine"
    APP_VERSION: str = "1.0.0"

    # Root log level, e.g. "DEBUG" to trace every calculation stage
    LOG_LEVEL: str = "INFO"

    # Origins allowed to call the API from a browser
    CORS_ORIGINS: list[str] = ["*"]

    model_config = {"env_file": ".env", "extra": "ignore"}


# Singleton instance, import this wherever settings are needed
settings = Settings()
