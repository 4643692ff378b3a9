# ============================================================================
# MODULE CONTEXT - EDR OBSERVATION RECORDS
# ============================================================================
# STATUS: Standalone Module - EDR API record model and grouping
# PURPOSE: Immutable observation records and per-entity time series grouping
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: ObservationRecord, SeriesValues, GroupedSeries, group_records
# DEPENDENCIES: dataclasses, typing
# PATTERNS: Value objects, single-pass grouping
# ENTRY_POINTS: from edr_api.records import group_records
# ============================================================================

"""
EDR Observation Records

An observation is a flat ``(entity_id, timestamp, value)`` triple. Values stay
as text: encoders pass them through verbatim and never parse them.

Grouping collects the records of each entity into parallel timestamp/value
sequences:

    records = [("A", "t1", "v1"), ("B", "t2", "v2"), ("A", "t3", "v3")]
    grouped = group_records(records)
    grouped["A"].values   # ["v1", "v3"]

The grouped mapping keeps entities in first-seen order. Consumers that need a
stable emission order (the GeoJSON encoder) sort entity ids themselves.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Sequence

from .errors import MalformedRecordError


@dataclass(frozen=True)
class ObservationRecord:
    """A single observation of one entity at one time."""
    entity_id: str
    timestamp: str
    value: str

    @classmethod
    def from_row(cls, row: Sequence[str]) -> "ObservationRecord":
        """
        Build a record from a raw ``[entity_id, timestamp, value]`` row.

        Raises:
            MalformedRecordError: If the row does not have exactly three
                fields or the entity id is empty
        """
        if len(row) != 3:
            raise MalformedRecordError(
                f"Expected 3 fields (entity, time, value), got {len(row)}: {list(row)!r}"
            )

        entity_id, timestamp, value = (str(part) for part in row)
        if not entity_id:
            raise MalformedRecordError(f"Record has an empty entity id: {list(row)!r}")

        return cls(entity_id=entity_id, timestamp=timestamp, value=value)

    def as_row(self) -> List[str]:
        """Record as a tabular row."""
        return [self.entity_id, self.timestamp, self.value]


@dataclass
class SeriesValues:
    """Parallel timestamp/value sequences for one entity."""
    timestamps: List[str] = field(default_factory=list)
    values: List[str] = field(default_factory=list)

    def append(self, timestamp: str, value: str) -> None:
        self.timestamps.append(timestamp)
        self.values.append(value)

    def __len__(self) -> int:
        return len(self.values)


GroupedSeries = Dict[str, SeriesValues]


def group_records(records: Iterable[ObservationRecord]) -> GroupedSeries:
    """
    Group records by entity id in a single pass.

    Args:
        records: Observation records in arrival order

    Returns:
        Mapping of entity id to its SeriesValues. Entities appear in the order
        they were first seen; each entity's sequences follow input order.
    """
    grouped: GroupedSeries = {}

    for record in records:
        series = grouped.get(record.entity_id)
        if series is None:
            series = SeriesValues()
            grouped[record.entity_id] = series
        series.append(record.timestamp, record.value)

    return grouped
