# ============================================================================
# MODULE CONTEXT - EDR OUTPUT FORMAT REGISTRY
# ============================================================================
# STATUS: Standalone Module - EDR API output formats
# PURPOSE: Closed set of output formats and their case-insensitive tokens
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: OutputFormat, parse_format, format_name, display_name, media_type
# DEPENDENCIES: enum, types, typing
# PATTERNS: Immutable lookup tables built once at import
# ENTRY_POINTS: from edr_api.formats import parse_format
# ============================================================================

"""
EDR Output Format Registry

Bidirectional mapping between the output formats served by the EDR API and the
tokens clients pass in the ``f`` query parameter.

Tokens are matched case-insensitively:

    >>> parse_format("CoverageJSON")
    (<OutputFormat.COVERAGEJSON: 'coveragejson'>, True)
    >>> parse_format("xml")
    (None, False)

All lookup tables are read-only mapping proxies built at import time.
"""

from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional, Tuple


class OutputFormat(Enum):
    """
    Output encodings known to the API.

    CSV is the tabular encoding, GEOJSON the feature encoding, COVERAGEJSON the
    coverage encoding and NETCDF4 the 4D grid encoding.
    """
    CSV = "csv"
    COVERAGEJSON = "coveragejson"
    GEOJSON = "geojson"
    NETCDF4 = "netcdf4"


_FORMAT_TOKENS: Mapping[OutputFormat, str] = MappingProxyType({
    OutputFormat.CSV: "csv",
    OutputFormat.COVERAGEJSON: "coveragejson",
    OutputFormat.GEOJSON: "geojson",
    OutputFormat.NETCDF4: "netcdf4",
})

_TOKEN_FORMATS: Mapping[str, OutputFormat] = MappingProxyType(
    {token: fmt for fmt, token in _FORMAT_TOKENS.items()}
)

# Names as advertised in collection metadata (output_formats lists)
_DISPLAY_NAMES: Mapping[OutputFormat, str] = MappingProxyType({
    OutputFormat.CSV: "CSV",
    OutputFormat.COVERAGEJSON: "CoverageJSON",
    OutputFormat.GEOJSON: "GeoJSON",
    OutputFormat.NETCDF4: "NetCDF4",
})

_MEDIA_TYPES: Mapping[OutputFormat, str] = MappingProxyType({
    OutputFormat.CSV: "text/csv",
    OutputFormat.COVERAGEJSON: "application/prs.coverage+json",
    OutputFormat.GEOJSON: "application/geo+json",
    OutputFormat.NETCDF4: "application/x-netcdf",
})


def parse_format(token: Optional[str]) -> Tuple[Optional[OutputFormat], bool]:
    """
    Parse a requested format token.

    Args:
        token: Format token from the request (any case)

    Returns:
        Tuple of (OutputFormat, True) when recognised, (None, False) otherwise.
        Unknown tokens never raise - the caller decides the fallback.
    """
    if not token:
        return None, False

    fmt = _TOKEN_FORMATS.get(token.strip().lower())
    if fmt is None:
        return None, False
    return fmt, True


def format_name(fmt: OutputFormat) -> str:
    """Canonical lowercase token for a format."""
    return _FORMAT_TOKENS[fmt]


def display_name(fmt: OutputFormat) -> str:
    """Human-facing format name used in advertised link variables."""
    return _DISPLAY_NAMES[fmt]


def media_type(fmt: OutputFormat) -> str:
    """Content-Type for payloads encoded in the given format."""
    return _MEDIA_TYPES[fmt]
