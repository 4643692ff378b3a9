# ============================================================================
# MODULE CONTEXT - AZURE FUNCTIONS ENTRY POINT
# ============================================================================
# STATUS: Core Infrastructure - Function App Entry Point
# PURPOSE: Main entry point for Azure Functions runtime with the EDR API
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: app (FunctionApp instance)
# DEPENDENCIES: azure-functions, edr_api, health
# ============================================================================

"""
Azure Functions Entry Point

Registers all HTTP triggers for the EDR API and the health checks.

Architecture:
    - EDR API: 4 endpoints serving observation collections
    - Health checks: 2 endpoints for monitoring and APIM integration
        - /api/health - Public (minimal response for external callers)
        - /api/health/detailed - Internal (full metrics for APIM probes)

Deployment:
    - Local: func start
    - Azure: func azure functionapp publish <app-name> --python --build remote
"""

import azure.functions as func
import json
import logging

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Initialize Azure Function App
app = func.FunctionApp()

# ============================================================================
# EDR API - 4 Endpoints
# ============================================================================

try:
    from edr_api import get_edr_triggers
    from edr_api.catalogue import get_catalogue

    # Descriptors are built once here, before any request is served
    _catalogue = get_catalogue()
    logger.info(f"EDR catalogue ready ({len(_catalogue)} collections)")

    logger.info("Registering EDR API endpoints...")

    # Function names must be unique, so each route gets its own wrapper
    edr_triggers = get_edr_triggers()

    # Landing page
    @app.route(route="edr", methods=["GET"], auth_level=func.AuthLevel.ANONYMOUS)
    def edr_landing_page(req: func.HttpRequest) -> func.HttpResponse:
        return edr_triggers[0]['handler'](req)

    # Collections list
    @app.route(route="edr/collections", methods=["GET"], auth_level=func.AuthLevel.ANONYMOUS)
    def edr_collections(req: func.HttpRequest) -> func.HttpResponse:
        return edr_triggers[1]['handler'](req)

    # Single collection
    @app.route(route="edr/collections/{collection_id}", methods=["GET"], auth_level=func.AuthLevel.ANONYMOUS)
    def edr_collection(req: func.HttpRequest) -> func.HttpResponse:
        return edr_triggers[2]['handler'](req)

    # Data query (area, position, locations, ...)
    @app.route(route="edr/collections/{collection_id}/{query_type}", methods=["GET"], auth_level=func.AuthLevel.ANONYMOUS)
    def edr_query(req: func.HttpRequest) -> func.HttpResponse:
        return edr_triggers[3]['handler'](req)

    logger.info("✅ EDR API registered successfully (4 endpoints)")

except ImportError as e:
    logger.warning(f"⚠️ EDR API module not available: {e}")
    logger.warning("EDR API will not be available")

# ============================================================================
# Health Check Endpoints - 2 Endpoints (Public + Detailed)
# ============================================================================

@app.route(route="health", methods=["GET"], auth_level=func.AuthLevel.ANONYMOUS)
def health_check(req: func.HttpRequest) -> func.HttpResponse:
    """
    Public health check endpoint - minimal response for external callers.

    Always returns 200 - status in body indicates health.

    Returns:
        JSON: {"status": "healthy|unhealthy", "timestamp": "..."}
    """
    from health import get_public_health

    result = get_public_health()

    return func.HttpResponse(
        json.dumps(result, default=str),
        mimetype="application/json",
        status_code=200,
        headers={"Cache-Control": "no-cache, no-store, must-revalidate"}
    )


@app.route(route="health/detailed", methods=["GET"], auth_level=func.AuthLevel.ANONYMOUS)
def health_detailed(req: func.HttpRequest) -> func.HttpResponse:
    """
    Detailed health check endpoint - for APIM probes and operations.

    Returns 503 if unhealthy, 200 otherwise.

    SECURITY: Block this endpoint from external access via APIM policy.
    """
    from health import get_detailed_health, HealthStatus

    result = get_detailed_health()

    status_code = 503 if result["status"] == HealthStatus.UNHEALTHY.value else 200

    return func.HttpResponse(
        json.dumps(result, default=str, indent=2),
        mimetype="application/json",
        status_code=status_code,
        headers={"Cache-Control": "no-cache, no-store, must-revalidate"}
    )

# ============================================================================
# Application Startup
# ============================================================================

from config import validate_configuration
from health import get_app_identity

validate_configuration()
_app_identity = get_app_identity()

logger.info("="*60)
logger.info(f"{_app_identity['name']} - {_app_identity['description']} ({_app_identity['environment']})")
logger.info("="*60)
logger.info("Function App initialized successfully")
logger.info("Available endpoints:")
logger.info("  - GET /api/health - Public health check (minimal)")
logger.info("  - GET /api/health/detailed - Detailed health (APIM only)")
logger.info("")
logger.info("EDR API (4 endpoints):")
logger.info("  - GET /api/edr - Landing page")
logger.info("  - GET /api/edr/collections - List collections")
logger.info("  - GET /api/edr/collections/{id} - Collection metadata")
logger.info("  - GET /api/edr/collections/{id}/{query_type}?f=csv|geojson|coveragejson - Query data")
logger.info("="*60)
