# ============================================================================
# MODULE CONTEXT - EDR API TRIGGERS
# ============================================================================
# STATUS: Standalone HTTP Triggers - EDR API endpoints
# PURPOSE: Azure Functions HTTP triggers for OGC API - EDR endpoints
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: get_edr_triggers (returns list of trigger configurations)
# INTERFACES: Azure Functions HttpRequest/HttpResponse
# DEPENDENCIES: azure.functions, typing, json, logging, uuid
# SOURCE: HTTP requests from clients (QGIS, browsers, curl)
# SCOPE: HTTP endpoint handlers for the EDR API
# VALIDATION: Route/query parameter presence; format resolution in the service
# PATTERNS: Trigger Pattern, Factory Pattern (get_edr_triggers)
# ENTRY_POINTS: Function App route registration via get_edr_triggers()
# ============================================================================

"""
EDR API HTTP Triggers - Azure Functions Handlers

Endpoints:
- GET /api/edr - Landing page
- GET /api/edr/collections - List collections
- GET /api/edr/collections/{collection_id} - Collection metadata
- GET /api/edr/collections/{collection_id}/{query_type}?f=csv|geojson|coveragejson

Each trigger:
1. Parses route and query parameters
2. Calls the service layer
3. Returns JSON / CSV responses with the payload's media type
4. Maps EDR errors onto HTTP status codes

Error bodies follow the OGC convention: {"code": ..., "description": ...}
"""

import azure.functions as func
import json
import logging
import uuid
from typing import Dict, Any, List, Optional

from .config import get_edr_config
from .errors import EDRError
from .service import EDRService

logger = logging.getLogger(__name__)


# ============================================================================
# TRIGGER REGISTRY FUNCTION
# ============================================================================

def get_edr_triggers() -> List[Dict[str, Any]]:
    """
    Get list of EDR API trigger configurations for function_app.py.

    Returns:
        List of dicts with keys:
        - route: URL route pattern
        - methods: List of HTTP methods
        - handler: Callable trigger handler
    """
    return [
        {
            'route': 'edr',
            'methods': ['GET'],
            'handler': EDRLandingPageTrigger().handle
        },
        {
            'route': 'edr/collections',
            'methods': ['GET'],
            'handler': EDRCollectionsTrigger().handle
        },
        {
            'route': 'edr/collections/{collection_id}',
            'methods': ['GET'],
            'handler': EDRCollectionTrigger().handle
        },
        {
            'route': 'edr/collections/{collection_id}/{query_type}',
            'methods': ['GET'],
            'handler': EDRQueryTrigger().handle
        }
    ]


# ============================================================================
# BASE TRIGGER CLASS
# ============================================================================

class BaseEDRTrigger:
    """
    Base class for EDR API triggers.

    Provides base URL extraction, JSON response formatting and error mapping.
    """

    def __init__(self, service: Optional[EDRService] = None):
        self.config = get_edr_config()
        self.service = service or EDRService(self.config)

    def _get_base_url(self, req: func.HttpRequest) -> str:
        """Base URL from configuration, else from the request URL."""
        return self.config.get_base_url(req.url)

    def _json_response(
        self,
        data: Any,
        status_code: int = 200,
        content_type: str = "application/json"
    ) -> func.HttpResponse:
        """
        Create JSON HTTP response.

        Args:
            data: Data to serialize (dict or Pydantic model)
            status_code: HTTP status code
            content_type: Response content type
        """
        if hasattr(data, 'model_dump'):
            data = data.model_dump(mode='json', exclude_none=True)

        return func.HttpResponse(
            body=json.dumps(data, indent=self.config.json_indent or None),
            status_code=status_code,
            mimetype=content_type
        )

    def _error_response(
        self,
        message: str,
        status_code: int = 400,
        error_type: str = "BadRequest"
    ) -> func.HttpResponse:
        """Create OGC-style error response."""
        error_body = {
            "code": error_type,
            "description": message
        }
        return func.HttpResponse(
            body=json.dumps(error_body, indent=self.config.json_indent or None),
            status_code=status_code,
            mimetype="application/json"
        )

    def _edr_error_response(self, error: EDRError) -> func.HttpResponse:
        """Map a recoverable EDR error onto an HTTP response."""
        return self._error_response(
            message=error.message,
            status_code=error.status_code,
            error_type=error.kind.value
        )

    def _internal_error(self, action: str, e: Exception) -> func.HttpResponse:
        logger.error(f"Error {action}: {e}", exc_info=True)
        return self._error_response(
            message=f"Internal server error: {str(e)}",
            status_code=500,
            error_type="InternalServerError"
        )


# ============================================================================
# ENDPOINT TRIGGERS
# ============================================================================

class EDRLandingPageTrigger(BaseEDRTrigger):
    """
    Landing page trigger.

    Endpoint: GET /api/edr
    """

    def handle(self, req: func.HttpRequest) -> func.HttpResponse:
        try:
            base_url = self._get_base_url(req)
            landing_page = self.service.get_landing_page(base_url)

            logger.info("Landing page requested")

            return self._json_response(landing_page)

        except Exception as e:
            return self._internal_error("generating landing page", e)


class EDRCollectionsTrigger(BaseEDRTrigger):
    """
    Collections list trigger.

    Endpoint: GET /api/edr/collections
    """

    def handle(self, req: func.HttpRequest) -> func.HttpResponse:
        try:
            base_url = self._get_base_url(req)
            collections = self.service.list_collections(base_url)

            logger.info(f"Collections list requested ({len(collections.collections)} collections)")

            return self._json_response(collections)

        except Exception as e:
            return self._internal_error("listing collections", e)


class EDRCollectionTrigger(BaseEDRTrigger):
    """
    Single collection metadata trigger.

    Endpoint: GET /api/edr/collections/{collection_id}
    """

    def handle(self, req: func.HttpRequest) -> func.HttpResponse:
        try:
            collection_id = req.route_params.get('collection_id')
            if not collection_id:
                return self._error_response(
                    message="Collection ID is required",
                    status_code=400
                )

            base_url = self._get_base_url(req)
            collection, error = self.service.get_collection(collection_id, base_url)
            if error:
                logger.warning(f"Collection not found: {error.message}")
                return self._edr_error_response(error)

            logger.info(f"Collection metadata requested for '{collection_id}'")

            return self._json_response(collection)

        except Exception as e:
            return self._internal_error("getting collection metadata", e)


class EDRQueryTrigger(BaseEDRTrigger):
    """
    EDR data query trigger (main endpoint).

    Endpoint: GET /api/edr/collections/{collection_id}/{query_type}

    Query Parameters:
    - f: Output format token (csv, geojson, coveragejson); case-insensitive.
         Omitted -> the query's default format.
    - coords: Query geometry (WKT); accepted, not used for filtering
    """

    def handle(self, req: func.HttpRequest) -> func.HttpResponse:
        try:
            collection_id = req.route_params.get('collection_id')
            query_type = req.route_params.get('query_type')
            if not collection_id or not query_type:
                return self._error_response(
                    message="Collection ID and query type are required",
                    status_code=400
                )

            request_id = req.headers.get('x-request-id') or str(uuid.uuid4())[:8]

            response = self.service.query(
                collection_id=collection_id,
                query_type=query_type,
                requested_format=req.params.get('f'),
                coords=req.params.get('coords'),
                request_id=request_id
            )

            if not response.success:
                return self._edr_error_response(response.error)

            logger.info(
                f"EDR query: collection='{collection_id}', query='{query_type}', "
                f"format={response.output_format}"
            )

            return func.HttpResponse(
                body=response.body,
                status_code=response.status_code,
                mimetype=response.content_type
            )

        except Exception as e:
            return self._internal_error("running EDR query", e)
