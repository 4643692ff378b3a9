# ============================================================================
# MODULE CONTEXT - EDR API MODULE
# ============================================================================
# STATUS: Standalone Module - OGC API - EDR implementation
# PURPOSE: Self-contained EDR API for regional pressure settings
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: EDRService, EDRAPIConfig, get_edr_config, get_edr_triggers
# INTERFACES: Standalone - depends only on util_logger from the main application
# PYDANTIC_MODELS: EDRCollection, EDRLandingPage, GeoJSONFeatureCollection, CoverageJSON
# DEPENDENCIES: pydantic, azure-functions
# SCOPE: Standalone EDR API - portable to any Function App
# PATTERNS: Service Layer, Repository Pattern, Standalone Module
# ENTRY_POINTS: from edr_api import get_edr_triggers
# ============================================================================

"""
OGC API - EDR - Standalone Module

Serves a small catalogue of environmental collections through the EDR query
pattern, returning observations as CSV, GeoJSON or CoverageJSON.

Architecture:
    edr_api/
    ├── config.py      # Environment-based configuration
    ├── formats.py     # Output format registry (token <-> format)
    ├── records.py     # Observation records and per-entity grouping
    ├── encoders.py    # CSV / GeoJSON / CoverageJSON encoders
    ├── catalogue.py   # Collection descriptors and format resolution
    ├── errors.py      # Error taxonomy
    ├── models.py      # Pydantic models (EDR responses, payloads)
    ├── repository.py  # Observation data access (simulated dataset)
    ├── service.py     # Business logic layer
    └── triggers.py    # Azure Functions HTTP handlers

Integration:
    # In function_app.py
    from edr_api import get_edr_triggers
"""

from .config import EDRAPIConfig, get_edr_config
from .service import EDRService
from .triggers import get_edr_triggers

__version__ = "1.0.0"
__all__ = [
    "EDRAPIConfig",
    "EDRService",
    "get_edr_triggers",
    "get_edr_config"
]
