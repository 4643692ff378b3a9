# ============================================================================
# MODULE CONTEXT - APPLICATION CONFIGURATION
# ============================================================================
# STATUS: Core Infrastructure - Configuration Management
# PURPOSE: Application-wide settings (identity, environment, log verbosity)
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: AppConfig, get_app_config, validate_configuration
# DEPENDENCIES: pydantic-settings
# SOURCE: Environment variables, optional .env file
# PATTERNS: Singleton pattern for config
# ============================================================================

"""
Application Configuration Module

Settings that belong to the Function App as a whole rather than to the EDR
module (which reads its own EDR_* variables in edr_api/config.py).

Environment Variables:
    APP_NAME: Application name shown in health responses and startup banner
    APP_DESCRIPTION: One-line description
    ENVIRONMENT: Deployment environment (dev, test, prod)
    DEBUG_LOGGING: true lowers component log levels to DEBUG

Usage:
    from config import get_app_config

    config = get_app_config()
    print(config.app_name)
"""

import logging
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

# ============================================================================
# Application Configuration
# ============================================================================

class AppConfig(BaseSettings):
    """
    Application-wide configuration loaded from environment variables.

    Attributes:
        app_name: Application name
        app_description: Short description of the service
        environment: Deployment environment
        debug_logging: Enable DEBUG level component logging
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    app_name: str = Field(default="edrapi", description="Application name")
    app_description: str = Field(
        default="OGC API - Environmental Data Retrieval Service",
        description="Application description"
    )
    environment: str = Field(default="dev", description="Deployment environment")
    debug_logging: bool = Field(default=False, description="Enable DEBUG logging")

    @field_validator('environment')
    @classmethod
    def normalize_environment(cls, v: str) -> str:
        """Lower-case the environment name; reject blanks."""
        v = v.strip().lower()
        if not v:
            raise ValueError("ENVIRONMENT must not be empty")
        return v


@lru_cache(maxsize=1)
def get_app_config() -> AppConfig:
    """
    Get singleton application configuration instance.

    Returns:
        AppConfig: Validated configuration object

    Raises:
        ValidationError: If an environment variable has an invalid value
    """
    return AppConfig()


# ============================================================================
# Configuration Validation
# ============================================================================

def validate_configuration() -> bool:
    """
    Validate configuration on application startup.

    Returns:
        bool: True if configuration is valid

    Raises:
        Exception: If configuration validation fails
    """
    try:
        config = get_app_config()
        logger.info("Configuration validation:")
        logger.info(f"  App: {config.app_name}")
        logger.info(f"  Environment: {config.environment}")
        logger.info(f"  Debug logging: {config.debug_logging}")
        return True

    except Exception as e:
        logger.error(f"❌ Configuration validation failed: {e}")
        raise
