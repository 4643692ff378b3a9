# ============================================================================
# MODULE CONTEXT - EDR API CONFIGURATION
# ============================================================================
# STATUS: Standalone Configuration - EDR API
# PURPOSE: Environment-based configuration for the EDR API module
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: EDRAPIConfig, get_edr_config
# DEPENDENCIES: pydantic, os
# SOURCE: Environment variables
# ============================================================================

"""
EDR API Configuration

Environment Variables:
    Optional:
    - EDR_BASE_URL: Base URL for links (default: auto-detect from request)
    - EDR_TITLE: Landing page title (default: "Environmental Data Retrieval server")
    - EDR_DESCRIPTION: Landing page description
    - EDR_JSON_INDENT: Indentation of JSON responses, 0 for compact (default: 2)
    - EDR_DEFAULT_CRS: CRS advertised in query link variables (default: "EPSG:4326")
"""

import os
from typing import Optional
from pydantic import BaseModel, Field


class EDRAPIConfig(BaseModel):
    """EDR API module configuration - fully configurable via environment variables."""

    edr_base_url: Optional[str] = Field(
        default_factory=lambda: os.getenv("EDR_BASE_URL"),
        description="Base URL for EDR links (auto-detected if None)"
    )

    title: str = Field(
        default_factory=lambda: os.getenv("EDR_TITLE", "Environmental Data Retrieval server"),
        description="Landing page title"
    )

    description: str = Field(
        default_factory=lambda: os.getenv(
            "EDR_DESCRIPTION",
            "OGC API - Environmental Data Retrieval for regional pressure settings"
        ),
        description="Landing page description"
    )

    json_indent: int = Field(
        default_factory=lambda: int(os.getenv("EDR_JSON_INDENT", "2")),
        ge=0,
        le=8,
        description="Indentation of JSON responses (0 = compact)"
    )

    default_crs: str = Field(
        default_factory=lambda: os.getenv("EDR_DEFAULT_CRS", "EPSG:4326"),
        description="CRS advertised in query link variables"
    )

    def get_base_url(self, request_url: Optional[str] = None) -> str:
        """
        Get base URL for links.

        Args:
            request_url: Current request URL for auto-detection

        Returns:
            Base URL (configured or auto-detected), without trailing slash
        """
        if self.edr_base_url:
            return self.edr_base_url.rstrip("/")

        if request_url and "/api/edr" in request_url:
            return request_url.split("/api/edr")[0]

        return "http://localhost:7071"  # Local development fallback


# Singleton instance cache
_edr_config_cache: Optional[EDRAPIConfig] = None


def get_edr_config() -> EDRAPIConfig:
    """
    Get EDR API configuration (singleton pattern).

    Returns:
        Cached configuration instance
    """
    global _edr_config_cache

    if _edr_config_cache is None:
        _edr_config_cache = EDRAPIConfig()

    return _edr_config_cache
