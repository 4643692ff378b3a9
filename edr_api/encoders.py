# ============================================================================
# MODULE CONTEXT - EDR RESULT ENCODERS
# ============================================================================
# STATUS: Standalone Module - EDR API output encoders
# PURPOSE: Project observation records into CSV, GeoJSON and CoverageJSON payloads
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: TabularRows, encode_tabular, encode_features, encode_coverage,
#          encode_payload, SERVABLE_FORMATS
# DEPENDENCIES: csv, io, .models, .records, .catalogue
# PATTERNS: Strategy table keyed by OutputFormat
# ENTRY_POINTS: payload = encode_payload(fmt, records, collection)
# ============================================================================

"""
EDR Result Encoders

Three encoders share the same input (observation records) and produce
structurally different payloads:

- CSV: ungrouped rows under a fixed header
- GeoJSON: one feature per entity, carrying the entity's time series
- CoverageJSON: fixed single-parameter grid envelope

Every payload exposes ``media_type`` and ``render()`` so the trigger layer can
write it to the response without knowing which encoder produced it.

An encoder either returns a complete payload or raises before producing
anything; there is no partial output.
"""

import csv
import io
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Tuple, Union

from util_logger import LoggerFactory, ComponentType, log_exceptions

from .catalogue import CollectionDescriptor, ParameterDescriptor
from .errors import EncoderDispatchError
from .formats import OutputFormat, format_name
from .models import (
    CoverageJSON,
    CoverageParameter,
    CoverageUnit,
    GeoJSONFeature,
    GeoJSONFeatureCollection,
    I18nString,
    NdArray,
    ObservedProperty,
    PolygonGeometry,
)
from .records import GroupedSeries, ObservationRecord, group_records

logger = LoggerFactory.create_logger(ComponentType.ENCODER, "EDREncoders")


DEFAULT_HEADER: Tuple[str, str, str] = ("entity", "time", "value")

DEFAULT_PARAMETER = ParameterDescriptor(
    code="VALUE",
    column="value",
    property_name="value",
    label="Observed value",
    unit=""
)

# Per-entity geometry is not modelled yet; every feature gets the unit square
UNIT_SQUARE: List[List[List[float]]] = [
    [[0.0, 0.0], [1.0, 0.0], [1.0, 1.0], [0.0, 1.0], [0.0, 0.0]]
]


# ============================================================================
# CSV
# ============================================================================

@dataclass(frozen=True)
class TabularRows:
    """Header plus data rows, rendered as CSV text."""
    header: Tuple[str, ...]
    rows: Tuple[Tuple[str, ...], ...]

    media_type = "text/csv"

    @property
    def row_count(self) -> int:
        """Number of rows including the header."""
        return len(self.rows) + 1

    def render(self, indent: Optional[int] = None) -> str:
        """
        Serialize as CSV.

        Fields containing delimiters, quotes or newlines are quoted by the csv
        module. ``indent`` is accepted for interface parity and ignored.
        """
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerow(self.header)
        writer.writerows(self.rows)
        return buffer.getvalue()


def encode_tabular(
    records: Sequence[ObservationRecord],
    header: Sequence[str] = DEFAULT_HEADER
) -> TabularRows:
    """
    Encode records as tabular rows, one per record in input order.

    Args:
        records: Observation records (not grouped)
        header: Column names for entity, time and value

    Returns:
        TabularRows with len(records) + 1 rows
    """
    return TabularRows(
        header=tuple(header),
        rows=tuple(
            (record.entity_id, record.timestamp, record.value)
            for record in records
        )
    )


# ============================================================================
# GEOJSON
# ============================================================================

def encode_features(
    grouped: GroupedSeries,
    parameter: ParameterDescriptor = DEFAULT_PARAMETER,
    entity_label: str = "entity"
) -> GeoJSONFeatureCollection:
    """
    Encode grouped series as a GeoJSON FeatureCollection.

    Features are emitted in entity id order so output is reproducible.

    Args:
        grouped: Per-entity time series
        parameter: Parameter whose property name holds the values
        entity_label: Property name holding the entity id

    Returns:
        FeatureCollection with one feature per entity (possibly zero)
    """
    features = []
    for entity_id in sorted(grouped):
        series = grouped[entity_id]
        features.append(GeoJSONFeature(
            geometry=PolygonGeometry(coordinates=UNIT_SQUARE),
            properties={
                entity_label: entity_id,
                parameter.property_name: list(series.values),
                "time": list(series.timestamps),
            }
        ))

    return GeoJSONFeatureCollection(features=features)


# ============================================================================
# COVERAGEJSON
# ============================================================================

def encode_coverage(
    grouped: Optional[GroupedSeries] = None,
    parameter: ParameterDescriptor = DEFAULT_PARAMETER
) -> CoverageJSON:
    """
    Encode a CoverageJSON grid envelope.

    This is a placeholder envelope: axes and range values are always empty
    and the shape is all zeros. ``grouped`` is accepted so the call path
    matches the other grouped encoders; populating the t axis from distinct
    timestamps and x/y from entity locations is the extension point.

    Args:
        grouped: Per-entity time series (currently unused)
        parameter: Parameter described in ``parameters`` and ``ranges``

    Returns:
        CoverageJSON envelope with a single parameter
    """
    return CoverageJSON(
        parameters={
            parameter.code: CoverageParameter(
                description=I18nString(en=parameter.label),
                unit=CoverageUnit(
                    label=I18nString(en=parameter.unit),
                    symbol=parameter.unit or None
                ),
                observedProperty=ObservedProperty(
                    label=I18nString(en=parameter.label)
                )
            )
        },
        ranges={
            parameter.code: NdArray(
                dataType="float",
                axisNames=["x", "y", "z", "t"],
                shape=[0, 0, 0, 0],
                values=[]
            )
        }
    )


# ============================================================================
# DISPATCH
# ============================================================================

EncodedPayload = Union[TabularRows, GeoJSONFeatureCollection, CoverageJSON]

_Encoder = Callable[[Sequence[ObservationRecord], CollectionDescriptor], EncodedPayload]


def _csv_encoder(records, collection: CollectionDescriptor) -> TabularRows:
    parameter = collection.parameter or DEFAULT_PARAMETER
    return encode_tabular(records, header=(collection.entity_label, "time", parameter.column))


def _geojson_encoder(records, collection: CollectionDescriptor) -> GeoJSONFeatureCollection:
    grouped = group_records(records)
    return encode_features(
        grouped,
        parameter=collection.parameter or DEFAULT_PARAMETER,
        entity_label=collection.entity_label
    )


def _coveragejson_encoder(records, collection: CollectionDescriptor) -> CoverageJSON:
    grouped = group_records(records)
    return encode_coverage(grouped, parameter=collection.parameter or DEFAULT_PARAMETER)


_ENCODERS: Dict[OutputFormat, _Encoder] = {
    OutputFormat.CSV: _csv_encoder,
    OutputFormat.GEOJSON: _geojson_encoder,
    OutputFormat.COVERAGEJSON: _coveragejson_encoder,
}

SERVABLE_FORMATS = frozenset(_ENCODERS)


@log_exceptions(logger=logger)
def encode_payload(
    fmt: OutputFormat,
    records: Sequence[ObservationRecord],
    collection: CollectionDescriptor
) -> EncodedPayload:
    """
    Encode records in an already-resolved output format.

    Raises:
        EncoderDispatchError: If no encoder exists for ``fmt``. Resolution
            only yields advertised formats, so reaching this is a bug.
    """
    encoder = _ENCODERS.get(fmt)
    if encoder is None:
        raise EncoderDispatchError(f"No encoder registered for format '{format_name(fmt)}'")

    payload = encoder(records, collection)
    logger.debug(f"Encoded {len(records)} records as {format_name(fmt)}")
    return payload
