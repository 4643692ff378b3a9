# ============================================================================
# MODULE CONTEXT - EDR COLLECTION CATALOGUE
# ============================================================================
# STATUS: Standalone Module - EDR API resource/link model
# PURPOSE: Static collection descriptors and request format resolution
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: QueryType, QueryDescriptor, CollectionDescriptor, ParameterDescriptor,
#          EDRCatalogue, build_default_catalogue, get_catalogue
# DEPENDENCIES: dataclasses, enum, types, util_logger
# SOURCE: Static descriptors built once per process
# VALIDATION: Descriptor invariants checked at construction
# PATTERNS: Immutable descriptors, Singleton via cached function
# ENTRY_POINTS: fmt, error = get_catalogue().resolve(collection_id, query_type, token)
# ============================================================================

"""
EDR Collection Catalogue

Describes which collections exist, which EDR query types each exposes, and which
output formats each query may return. The same descriptors drive both the
advertised ``data_queries`` links and request-time validation, so a client can
never be served a format that the collection metadata does not list.

Resolution algorithm (``EDRCatalogue.resolve``):
    1. Unknown collection id          -> UnknownCollection
    2. Query type not exposed         -> UnsupportedQuery
    3. No format requested            -> the query's default format
    4. Unparseable or not allowed     -> UnsupportedFormat
    5. Otherwise                      -> the parsed format

Descriptors are frozen after start-up and safe to share between concurrent
requests.
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Iterator, List, Mapping, Optional, Tuple, Union

from util_logger import LoggerFactory, ComponentType

from .errors import EDRError, EDRErrorKind
from .formats import OutputFormat, display_name, format_name, parse_format

logger = LoggerFactory.create_logger(ComponentType.CATALOGUE, "EDRCatalogue")


class QueryType(str, Enum):
    """EDR query types."""
    AREA = "area"
    CORRIDOR = "corridor"
    CUBE = "cube"
    ITEMS = "items"
    LOCATIONS = "locations"
    POSITION = "position"
    RADIUS = "radius"
    TRAJECTORY = "trajectory"

    @classmethod
    def parse(cls, value: Union["QueryType", str, None]) -> Optional["QueryType"]:
        """Parse a query type token (case-insensitive); None when unknown."""
        if isinstance(value, cls):
            return value
        if not value:
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


@dataclass(frozen=True)
class ParameterDescriptor:
    """Measured parameter served by a collection."""
    code: str                 # CoverageJSON parameter key (e.g. "QNH")
    column: str               # CSV value column (e.g. "qnh")
    property_name: str        # GeoJSON property holding the values
    label: str
    unit: str


@dataclass(frozen=True)
class QueryDescriptor:
    """
    One advertised EDR query of a collection.

    Raises:
        ValueError: If allowed_formats is empty or default_format is not one
            of them
    """
    query_type: QueryType
    allowed_formats: Tuple[OutputFormat, ...]
    default_format: OutputFormat
    title: Optional[str] = None
    description: Optional[str] = None
    coords: Optional[str] = None
    within_units: Optional[Tuple[str, ...]] = None
    width_units: Optional[Tuple[str, ...]] = None
    height_units: Optional[Tuple[str, ...]] = None

    def __post_init__(self):
        if not self.allowed_formats:
            raise ValueError(f"Query '{self.query_type.value}' must allow at least one format")
        if self.default_format not in self.allowed_formats:
            raise ValueError(
                f"Default format '{format_name(self.default_format)}' of query "
                f"'{self.query_type.value}' is not among its allowed formats"
            )

    def allows(self, fmt: OutputFormat) -> bool:
        return fmt in self.allowed_formats

    @property
    def allowed_names(self) -> List[str]:
        """Display names of the allowed formats, in advertised order."""
        return [display_name(fmt) for fmt in self.allowed_formats]


@dataclass(frozen=True)
class SpatialExtent:
    bbox: Tuple[float, float, float, float]
    crs: str = "EPSG:4326"


@dataclass(frozen=True)
class CollectionDescriptor:
    """Static description of one EDR collection."""
    id: str
    title: Optional[str] = None
    description: Optional[str] = None
    queries: Mapping[QueryType, QueryDescriptor] = field(
        default_factory=lambda: MappingProxyType({})
    )
    extent: Optional[SpatialExtent] = None
    crs: Optional[str] = None
    parameter: Optional[ParameterDescriptor] = None
    entity_label: str = "entity"

    def __post_init__(self):
        # Freeze whatever mapping the caller passed in
        if not isinstance(self.queries, MappingProxyType):
            object.__setattr__(self, "queries", MappingProxyType(dict(self.queries)))

    def get_query(self, query_type: QueryType) -> Optional[QueryDescriptor]:
        return self.queries.get(query_type)

    @property
    def output_formats(self) -> List[OutputFormat]:
        """Union of all query formats, first-advertised order."""
        formats: List[OutputFormat] = []
        for query in self.queries.values():
            for fmt in query.allowed_formats:
                if fmt not in formats:
                    formats.append(fmt)
        return formats


class EDRCatalogue:
    """
    Read-only registry of collection descriptors.

    Usage:
        catalogue = get_catalogue()
        fmt, error = catalogue.resolve("regional-pressure-settings", "locations", "csv")
        if error:
            ...  # map error.kind to an HTTP response
    """

    def __init__(self, collections: List[CollectionDescriptor]):
        by_id = {}
        for collection in collections:
            if collection.id in by_id:
                raise ValueError(f"Duplicate collection id '{collection.id}'")
            by_id[collection.id] = collection
        self._collections: Mapping[str, CollectionDescriptor] = MappingProxyType(by_id)

    def __iter__(self) -> Iterator[CollectionDescriptor]:
        return iter(self._collections.values())

    def __len__(self) -> int:
        return len(self._collections)

    def get(self, collection_id: str) -> Optional[CollectionDescriptor]:
        return self._collections.get(collection_id)

    def resolve(
        self,
        collection_id: str,
        query_type: Union[QueryType, str],
        requested_token: Optional[str] = None
    ) -> Tuple[Optional[OutputFormat], Optional[EDRError]]:
        """
        Resolve the output format for a query request.

        Args:
            collection_id: Requested collection id
            query_type: QueryType or its token (e.g. "locations")
            requested_token: Value of the ``f`` parameter, may be empty

        Returns:
            (OutputFormat, None) on success, (None, EDRError) otherwise
        """
        collection = self.get(collection_id)
        if collection is None:
            return None, EDRError(
                EDRErrorKind.UNKNOWN_COLLECTION,
                f"Unrecognised collection: '{collection_id}'"
            )

        parsed_query = QueryType.parse(query_type)
        query = collection.get_query(parsed_query) if parsed_query else None
        if query is None:
            query_name = parsed_query.value if parsed_query else query_type
            return None, EDRError(
                EDRErrorKind.UNSUPPORTED_QUERY,
                f"Collection '{collection_id}' does not support the '{query_name}' query"
            )

        if requested_token is None or not requested_token.strip():
            logger.debug(
                f"No format requested for {collection_id}/{query.query_type.value}, "
                f"using default '{format_name(query.default_format)}'"
            )
            return query.default_format, None

        fmt, found = parse_format(requested_token)
        if not found or not query.allows(fmt):
            allowed = ", ".join(format_name(f) for f in query.allowed_formats)
            return None, EDRError(
                EDRErrorKind.UNSUPPORTED_FORMAT,
                f"Unsupported format: '{requested_token}'. "
                f"The '{query.query_type.value}' query of '{collection_id}' serves: {allowed}"
            )

        return fmt, None


# ============================================================================
# DEFAULT CATALOGUE
# ============================================================================

QNH = ParameterDescriptor(
    code="QNH",
    column="qnh",
    property_name="pressure",
    label="Atmospheric pressure",
    unit="hPa"
)


def build_default_catalogue() -> EDRCatalogue:
    """Build the static catalogue served by this API."""
    regional_pressure = CollectionDescriptor(
        id="regional-pressure-settings",
        title="Regional Pressure Settings",
        description="Forecast regional QNH (lowest forecast sea-level pressure) per altimeter setting region",
        crs="EPSG:4326",
        extent=SpatialExtent(bbox=(-90, -180, 90, 180), crs="EPSG:4326"),
        parameter=QNH,
        entity_label="region",
        queries={
            QueryType.AREA: QueryDescriptor(
                query_type=QueryType.AREA,
                title="Area query",
                description="Data within a polygon",
                coords="Well Known Text POLYGON value i.e. POLYGON((x y,x1 y1,x2 y2,...,xn yn,x y))",
                allowed_formats=(OutputFormat.COVERAGEJSON,),
                default_format=OutputFormat.COVERAGEJSON
            ),
            QueryType.POSITION: QueryDescriptor(
                query_type=QueryType.POSITION,
                title="Position query",
                description="Data at a point",
                coords="Well Known Text POINT value i.e. POINT(x y)",
                allowed_formats=(OutputFormat.COVERAGEJSON,),
                default_format=OutputFormat.COVERAGEJSON
            ),
            QueryType.LOCATIONS: QueryDescriptor(
                query_type=QueryType.LOCATIONS,
                title="Locations query",
                description="Data for every altimeter setting region",
                allowed_formats=(
                    OutputFormat.GEOJSON,
                    OutputFormat.COVERAGEJSON,
                    OutputFormat.CSV
                ),
                default_format=OutputFormat.GEOJSON
            ),
        }
    )

    return EDRCatalogue([
        regional_pressure,
        CollectionDescriptor(id="open-runway", title="Open Runway"),
        CollectionDescriptor(id="de-icing", title="De-icing"),
    ])


# Singleton instance cache
_catalogue_cache: Optional[EDRCatalogue] = None


def get_catalogue() -> EDRCatalogue:
    """
    Get the process-wide catalogue, building it on first use.

    function_app.py calls this at start-up. The build is deterministic and
    the result immutable, so concurrent first calls at worst build equal
    catalogues and keep one of them.

    Returns:
        Cached EDRCatalogue instance
    """
    global _catalogue_cache

    if _catalogue_cache is None:
        _catalogue_cache = build_default_catalogue()
        logger.info(f"EDR catalogue loaded ({len(_catalogue_cache)} collections)")

    return _catalogue_cache
