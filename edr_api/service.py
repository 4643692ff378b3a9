# ============================================================================
# MODULE CONTEXT - EDR API SERVICE
# ============================================================================
# STATUS: Standalone Service - EDR API business logic
# PURPOSE: Landing page, collection metadata and query orchestration
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: EDRService, EDRServiceResponse
# INTERFACES: None (standalone implementation)
# PYDANTIC_MODELS: EDRLandingPage, EDRCollection, EDRCollectionList, EDRLink
# DEPENDENCIES: dataclasses, typing, util_logger
# SOURCE: EDRCatalogue (descriptors) and EDRRepository (observations)
# SCOPE: Business logic for EDR API operations
# VALIDATION: Catalogue resolution, encoder availability check at start-up
# PATTERNS: Service Layer, Facade Pattern, Result objects
# ENTRY_POINTS: service = EDRService(); response = service.query(...)
# ============================================================================

"""
EDR Service - Business Logic Layer

Coordinates the catalogue (what may be served), the repository (what data
exists) and the encoders (how it is written):

    query request
      -> EDRCatalogue.resolve      (collection, query type, format token)
      -> EDRRepository.get_records
      -> encode_payload            (CSV / GeoJSON / CoverageJSON)
      -> EDRServiceResponse        (rendered body + media type, or error)

Recoverable failures come back as ``EDRServiceResponse`` with ``error`` set;
the trigger layer maps them onto HTTP status codes.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from util_logger import LoggerFactory, ComponentType, LogContext

from .catalogue import CollectionDescriptor, EDRCatalogue, QueryDescriptor, get_catalogue
from .config import EDRAPIConfig, get_edr_config
from .encoders import SERVABLE_FORMATS, encode_payload
from .errors import EDRError, EDRErrorKind, EncoderDispatchError, MalformedRecordError
from .formats import display_name, format_name, media_type
from .models import (
    EDRCollection,
    EDRCollectionList,
    EDRExtent,
    EDRLandingPage,
    EDRLink,
    EDRLinkProperty,
    EDRSpatialExtent,
    EDRVariables,
)
from .repository import EDRRepository

logger = LoggerFactory.create_logger(ComponentType.SERVICE, "EDRService")


@dataclass
class EDRServiceResponse:
    """Response from an EDR query."""
    success: bool
    status_code: int
    body: Optional[str] = None
    content_type: Optional[str] = None
    output_format: Optional[str] = None
    error: Optional[EDRError] = None

    @classmethod
    def failed(cls, error: EDRError) -> "EDRServiceResponse":
        return cls(success=False, status_code=error.status_code, error=error)


class EDRService:
    """
    Business logic service for the EDR API.

    Usage:
        service = EDRService()
        response = service.query("regional-pressure-settings", "locations", "csv")
        if response.success:
            body, content_type = response.body, response.content_type

    Raises:
        EncoderDispatchError: At construction, if the catalogue advertises a
            format that no encoder can produce
    """

    def __init__(
        self,
        config: Optional[EDRAPIConfig] = None,
        catalogue: Optional[EDRCatalogue] = None,
        repository: Optional[EDRRepository] = None
    ):
        self.config = config or get_edr_config()
        self.catalogue = catalogue or get_catalogue()
        self.repository = repository or EDRRepository()
        self._check_servable(self.catalogue)
        logger.info("EDRService initialized")

    @staticmethod
    def _check_servable(catalogue: EDRCatalogue) -> None:
        """Fail fast if any advertised format lacks an encoder."""
        for collection in catalogue:
            for query in collection.queries.values():
                missing = [f for f in query.allowed_formats if f not in SERVABLE_FORMATS]
                if missing:
                    raise EncoderDispatchError(
                        f"Collection '{collection.id}' advertises "
                        f"{[format_name(f) for f in missing]} for '{query.query_type.value}' "
                        f"but no encoder exists"
                    )

    # ========================================================================
    # LANDING PAGE
    # ========================================================================

    def get_landing_page(self, base_url: str) -> EDRLandingPage:
        """
        Generate the EDR landing page.

        Args:
            base_url: Base URL for the API (e.g., https://example.com)

        Returns:
            EDRLandingPage with links to API resources
        """
        return EDRLandingPage(
            title=self.config.title,
            description=self.config.description,
            links=[
                EDRLink(
                    href=f"{base_url}/api/edr",
                    rel="self",
                    type="application/json",
                    title="This document"
                ),
                EDRLink(
                    href=f"{base_url}/api/edr/collections",
                    rel="data",
                    type="application/json",
                    title="Collections"
                )
            ]
        )

    # ========================================================================
    # COLLECTIONS
    # ========================================================================

    def list_collections(self, base_url: str) -> EDRCollectionList:
        """
        List all catalogued collections.

        Args:
            base_url: Base URL for link generation

        Returns:
            EDRCollectionList with collection metadata and links
        """
        collections = [
            self._build_collection_model(descriptor, base_url)
            for descriptor in self.catalogue
        ]

        logger.info(f"Listed {len(collections)} collections")

        return EDRCollectionList(
            collections=collections,
            links=[
                EDRLink(
                    href=f"{base_url}/api/edr/collections",
                    rel="self",
                    type="application/json",
                    title="This document"
                ),
                EDRLink(
                    href=f"{base_url}/api/edr",
                    rel="parent",
                    type="application/json",
                    title="Landing page"
                )
            ]
        )

    def get_collection(
        self,
        collection_id: str,
        base_url: str
    ) -> Tuple[Optional[EDRCollection], Optional[EDRError]]:
        """
        Get metadata for a single collection.

        Returns:
            (EDRCollection, None) or (None, UnknownCollection error)
        """
        descriptor = self.catalogue.get(collection_id)
        if descriptor is None:
            return None, EDRError(
                EDRErrorKind.UNKNOWN_COLLECTION,
                f"Unrecognised collection: '{collection_id}'"
            )

        logger.info(f"Retrieved collection metadata for '{collection_id}'")

        return self._build_collection_model(descriptor, base_url), None

    # ========================================================================
    # QUERIES
    # ========================================================================

    def query(
        self,
        collection_id: str,
        query_type: str,
        requested_format: Optional[str] = None,
        coords: Optional[str] = None,
        request_id: Optional[str] = None
    ) -> EDRServiceResponse:
        """
        Run an EDR data query.

        Args:
            collection_id: Collection identifier
            query_type: EDR query type token (e.g. "locations")
            requested_format: Value of the ``f`` parameter (may be empty)
            coords: Query geometry; accepted but not used for filtering
            request_id: Correlation id for logging

        Returns:
            EDRServiceResponse with rendered body or error
        """
        context = LogContext(
            request_id=request_id,
            collection_id=collection_id,
            query_type=query_type,
            output_format=requested_format or None
        )

        fmt, error = self.catalogue.resolve(collection_id, query_type, requested_format)
        if error:
            logger.warning(
                f"Query rejected ({error.kind.value}): {error.message}",
                extra={'custom_dimensions': context.to_dict()}
            )
            return EDRServiceResponse.failed(error)

        context.output_format = format_name(fmt)

        if coords:
            logger.debug(
                f"coords supplied but not applied: {coords}",
                extra={'custom_dimensions': context.to_dict()}
            )

        try:
            records = self.repository.get_records(collection_id)
        except MalformedRecordError as e:
            logger.error(
                f"Malformed record in '{collection_id}': {e}",
                extra={'custom_dimensions': context.to_dict()}
            )
            return EDRServiceResponse.failed(
                EDRError(EDRErrorKind.MALFORMED_RECORD, str(e))
            )

        collection = self.catalogue.get(collection_id)
        payload = encode_payload(fmt, records, collection)

        logger.info(
            f"Query served: {len(records)} records as {format_name(fmt)}",
            extra={'custom_dimensions': context.to_dict()}
        )

        return EDRServiceResponse(
            success=True,
            status_code=200,
            body=payload.render(indent=self.config.json_indent),
            content_type=media_type(fmt),
            output_format=format_name(fmt)
        )

    # ========================================================================
    # HELPERS
    # ========================================================================

    def _build_collection_model(
        self,
        descriptor: CollectionDescriptor,
        base_url: str
    ) -> EDRCollection:
        """Render a collection descriptor as an EDRCollection."""
        collection_url = f"{base_url}/api/edr/collections/{descriptor.id}"

        data_queries = {
            query.query_type.value: EDRLinkProperty(
                link=self._build_query_link(descriptor, query, collection_url)
            )
            for query in descriptor.queries.values()
        }

        extent = None
        if descriptor.extent:
            extent = EDRExtent(
                spatial=EDRSpatialExtent(
                    bbox=list(descriptor.extent.bbox),
                    crs=descriptor.extent.crs
                )
            )

        parameter_names = None
        if descriptor.parameter:
            parameter_names = {
                descriptor.parameter.column: {
                    "type": "Parameter",
                    "description": descriptor.parameter.label,
                    "unit": {"symbol": descriptor.parameter.unit}
                }
            }

        return EDRCollection(
            id=descriptor.id,
            title=descriptor.title,
            description=descriptor.description,
            links=[
                EDRLink(
                    href=collection_url,
                    rel="self",
                    type="application/json",
                    title="This collection"
                )
            ],
            extent=extent,
            crs=[descriptor.crs] if descriptor.crs else [],
            data_queries=data_queries,
            parameter_names=parameter_names,
            output_formats=[display_name(f) for f in descriptor.output_formats]
        )

    def _build_query_link(
        self,
        descriptor: CollectionDescriptor,
        query: QueryDescriptor,
        collection_url: str
    ) -> EDRLink:
        """Build the data_queries link advertising one query."""
        crs_details: List[Dict[str, Any]] = [{"crs": descriptor.crs or self.config.default_crs}]

        return EDRLink(
            href=f"{collection_url}/{query.query_type.value}",
            rel="data",
            type=media_type(query.default_format),
            title=query.title,
            variables=EDRVariables(
                title=query.title,
                description=query.description,
                query_type=query.query_type.value,
                coords=query.coords,
                within_units=list(query.within_units) if query.within_units else None,
                width_units=list(query.width_units) if query.width_units else None,
                height_units=list(query.height_units) if query.height_units else None,
                output_formats=query.allowed_names,
                default_output_format=display_name(query.default_format),
                crs_details=crs_details
            )
        )
