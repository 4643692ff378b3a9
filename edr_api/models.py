# ============================================================================
# MODULE CONTEXT - EDR API MODELS
# ============================================================================
# STATUS: Standalone Models - EDR API Pydantic models
# PURPOSE: EDR response models, GeoJSON and CoverageJSON payload models
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: EDRLink, EDRVariables, EDRCollection, EDRCollectionList, EDRLandingPage,
#          GeoJSONFeatureCollection, CoverageJSON (and their parts)
# INTERFACES: Pydantic BaseModel
# PYDANTIC_MODELS: All classes in this file
# DEPENDENCIES: pydantic, typing, json
# SOURCE: OGC API - EDR 1.0, GeoJSON RFC 7946, CoverageJSON community standard
# VALIDATION: Pydantic v2 validation
# PATTERNS: Data Transfer Objects (DTOs), discriminated unions for geometry
# ENTRY_POINTS: from edr_api.models import EDRCollection
# ============================================================================

"""
OGC API - EDR Pydantic Models

Response models for the EDR API plus the two JSON payload encodings it serves.

References:
- OGC API - EDR 1.0: https://docs.ogc.org/is/19-086r6/19-086r6.html
- GeoJSON RFC 7946: https://tools.ietf.org/html/rfc7946
- CoverageJSON: https://docs.ogc.org/cs/21-069r2/21-069r2.html
"""

import json
from typing import Annotated, Any, ClassVar, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field


# ============================================================================
# LINKS
# ============================================================================

class EDRVariables(BaseModel):
    """
    Variables block of an EDR query link.

    Describes how the query is called and which output formats it serves.
    """
    title: Optional[str] = None
    description: Optional[str] = None
    query_type: Optional[str] = Field(
        default=None,
        description="EDR query type (area, position, locations, ...)"
    )
    coords: Optional[str] = Field(
        default=None,
        description="Coordinate input convention (e.g. WKT POINT)"
    )
    within_units: Optional[List[str]] = None
    width_units: Optional[List[str]] = None
    height_units: Optional[List[str]] = None
    output_formats: Optional[List[str]] = Field(
        default=None,
        description="Output formats served by the query"
    )
    default_output_format: Optional[str] = Field(
        default=None,
        description="Format used when the request does not name one"
    )
    crs_details: Optional[List[Dict[str, str]]] = None


class EDRLink(BaseModel):
    """
    OGC API Link object (RFC 8288 Web Linking).
    """
    href: str = Field(
        description="URL of the linked resource"
    )
    rel: str = Field(
        description="Link relation type (self, data, alternate, etc.)"
    )
    type: Optional[str] = Field(
        default=None,
        description="Media type of the linked resource"
    )
    title: Optional[str] = None
    hreflang: Optional[str] = None
    templated: Optional[bool] = Field(
        default=None,
        description="True when href is a URI template"
    )
    variables: Optional[EDRVariables] = None


class EDRLinkProperty(BaseModel):
    """Wrapper used by data_queries entries."""
    link: EDRLink


# ============================================================================
# LANDING PAGE & COLLECTIONS
# ============================================================================

class EDRLandingPage(BaseModel):
    """EDR API landing page."""
    title: str
    description: Optional[str] = None
    links: List[EDRLink]


class EDRSpatialExtent(BaseModel):
    """Spatial extent of a collection."""
    bbox: List[float] = Field(
        description="Bounding box (min, min, max, max) in CRS axis order"
    )
    crs: str = Field(
        default="EPSG:4326",
        description="Coordinate reference system of the bbox"
    )


class EDRTemporalExtent(BaseModel):
    """Temporal extent of a collection."""
    interval: List[List[Optional[str]]]
    trs: str = "http://www.opengis.net/def/uom/ISO-8601/0/Gregorian"


class EDRExtent(BaseModel):
    """Spatial and temporal extent of a collection."""
    spatial: Optional[EDRSpatialExtent] = None
    temporal: Optional[EDRTemporalExtent] = None


class EDRCollection(BaseModel):
    """
    EDR collection metadata.

    ``data_queries`` is keyed by query type and advertises the formats each
    query serves.
    """
    id: str
    title: Optional[str] = None
    description: Optional[str] = None
    links: List[EDRLink] = Field(default_factory=list)
    extent: Optional[EDRExtent] = None
    crs: List[str] = Field(default_factory=list)
    data_queries: Dict[str, EDRLinkProperty] = Field(default_factory=dict)
    parameter_names: Optional[Dict[str, Any]] = None
    output_formats: List[str] = Field(default_factory=list)


class EDRCollectionList(BaseModel):
    """Collections list response."""
    collections: List[EDRCollection]
    links: List[EDRLink]


# ============================================================================
# ENCODED PAYLOADS
# ============================================================================

class JSONPayload(BaseModel):
    """Base for payload models that render to a JSON document."""
    media_type: ClassVar[str] = "application/json"

    def render(self, indent: Optional[int] = 2) -> str:
        """Serialize to JSON text, omitting unset optional members."""
        return json.dumps(
            self.model_dump(mode="json", exclude_none=True),
            indent=indent or None
        )


# GeoJSON --------------------------------------------------------------------

class PointGeometry(BaseModel):
    """GeoJSON Point."""
    type: Literal["Point"] = "Point"
    coordinates: List[float]


class PolygonGeometry(BaseModel):
    """GeoJSON Polygon - a list of closed linear rings."""
    type: Literal["Polygon"] = "Polygon"
    coordinates: List[List[List[float]]]


Geometry = Annotated[
    Union[PointGeometry, PolygonGeometry],
    Field(discriminator="type")
]


class GeoJSONFeature(BaseModel):
    """GeoJSON Feature."""
    type: Literal["Feature"] = "Feature"
    geometry: Geometry
    properties: Dict[str, Any] = Field(default_factory=dict)


class GeoJSONFeatureCollection(JSONPayload):
    """GeoJSON FeatureCollection payload."""
    media_type: ClassVar[str] = "application/geo+json"

    type: Literal["FeatureCollection"] = "FeatureCollection"
    features: List[GeoJSONFeature] = Field(default_factory=list)


# CoverageJSON ---------------------------------------------------------------

class I18nString(BaseModel):
    """CoverageJSON i18n object (English only)."""
    en: str


class CoverageUnit(BaseModel):
    label: I18nString
    symbol: Optional[str] = None


class ObservedProperty(BaseModel):
    id: Optional[str] = None
    label: I18nString


class NumericAxis(BaseModel):
    """Spatial / vertical axis values."""
    values: List[float] = Field(default_factory=list)


class TemporalAxis(BaseModel):
    """Time axis values (timestamps as strings)."""
    values: List[str] = Field(default_factory=list)


class CoverageAxes(BaseModel):
    """Grid axes."""
    x: NumericAxis = Field(default_factory=NumericAxis)
    y: NumericAxis = Field(default_factory=NumericAxis)
    z: NumericAxis = Field(default_factory=NumericAxis)
    t: TemporalAxis = Field(default_factory=TemporalAxis)


class CoverageDomain(BaseModel):
    type: Literal["Domain"] = "Domain"
    domainType: str = "Grid"
    axes: CoverageAxes = Field(default_factory=CoverageAxes)
    referencing: List[Dict[str, Any]] = Field(default_factory=list)


class CoverageParameter(BaseModel):
    type: Literal["Parameter"] = "Parameter"
    description: Optional[I18nString] = None
    unit: CoverageUnit
    observedProperty: ObservedProperty


class NdArray(BaseModel):
    type: Literal["NdArray"] = "NdArray"
    dataType: str = "float"
    axisNames: List[str] = Field(default_factory=lambda: ["x", "y", "z", "t"])
    shape: List[int] = Field(default_factory=lambda: [0, 0, 0, 0])
    values: List[Optional[float]] = Field(default_factory=list)


class CoverageJSON(JSONPayload):
    """CoverageJSON coverage envelope payload."""
    media_type: ClassVar[str] = "application/prs.coverage+json"

    type: Literal["CoverageJSON"] = "CoverageJSON"
    domain: CoverageDomain = Field(default_factory=CoverageDomain)
    parameters: Dict[str, CoverageParameter] = Field(default_factory=dict)
    ranges: Dict[str, NdArray] = Field(default_factory=dict)
