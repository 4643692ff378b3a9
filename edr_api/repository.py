# ============================================================================
# MODULE CONTEXT - EDR OBSERVATION REPOSITORY
# ============================================================================
# STATUS: Standalone Repository - simulated observation store
# PURPOSE: Supplies observation records per collection
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: EDRRepository, REGIONAL_PRESSURE_ROWS
# DEPENDENCIES: util_logger, .records
# SOURCE: Fixed in-memory dataset (no database)
# PATTERNS: Repository Pattern
# ENTRY_POINTS: records = EDRRepository().get_records("regional-pressure-settings")
# ============================================================================

"""
EDR Observation Repository

Serves observation records for a collection. Data is a fixed simulated dataset
of regional pressure settings: 10 altimeter setting regions observed at two
hourly timestamps. Each call returns freshly built records.

Rows are validated on the way out; a malformed row raises
``MalformedRecordError`` which the service reports as a MalformedRecord error.
"""

from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from util_logger import LoggerFactory, ComponentType

from .records import ObservationRecord

logger = LoggerFactory.create_logger(ComponentType.REPOSITORY, "EDRRepository")


_REGIONS = ("01", "02", "03", "04", "07", "08", "09", "10", "11", "12")
_QNH_BY_REGION = ("1000", "1005", "994", "1010", "1008", "1012", "1011", "1009", "1007", "1002")
_TIMESTAMPS = ("20250720T0000Z", "20250720T0100Z")

# region, time, qnh - one row per region per timestamp, timestamp-major
REGIONAL_PRESSURE_ROWS: Tuple[Tuple[str, str, str], ...] = tuple(
    (region, timestamp, qnh)
    for timestamp in _TIMESTAMPS
    for region, qnh in zip(_REGIONS, _QNH_BY_REGION)
)


class EDRRepository:
    """
    Read access to observation rows keyed by collection id.

    Args:
        datasets: Optional override of collection id -> raw rows (used by tests)
    """

    def __init__(self, datasets: Optional[Mapping[str, Sequence[Sequence[str]]]] = None):
        if datasets is None:
            datasets = {"regional-pressure-settings": REGIONAL_PRESSURE_ROWS}
        self._datasets: Dict[str, Sequence[Sequence[str]]] = dict(datasets)

    def get_records(self, collection_id: str) -> List[ObservationRecord]:
        """
        Get all observation records of a collection.

        Args:
            collection_id: Collection identifier

        Returns:
            Records in dataset order (empty list when the collection has no data)

        Raises:
            MalformedRecordError: If a stored row is malformed
        """
        rows = self._datasets.get(collection_id, ())
        records = [ObservationRecord.from_row(row) for row in rows]

        logger.debug(f"Loaded {len(records)} records for '{collection_id}'")

        return records
