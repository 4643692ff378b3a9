from __future__ import annotations

import pytest

from edr_api.errors import MalformedRecordError
from edr_api.records import ObservationRecord, group_records
from edr_api.repository import REGIONAL_PRESSURE_ROWS


def test_group_preserves_per_entity_order(sample_records):
    grouped = group_records(sample_records)

    assert grouped["A"].values == ["v1", "v3"]
    assert grouped["A"].timestamps == ["t1", "t3"]
    assert grouped["B"].values == ["v2"]


def test_group_keeps_first_seen_entity_order(sample_records):
    assert list(group_records(sample_records)) == ["A", "B"]


def test_group_is_complete_for_dataset():
    records = [ObservationRecord.from_row(row) for row in REGIONAL_PRESSURE_ROWS]

    grouped = group_records(records)

    assert sum(len(series) for series in grouped.values()) == len(records)
    for series in grouped.values():
        assert len(series.timestamps) == len(series.values)


def test_group_empty_input():
    assert group_records([]) == {}


def test_from_row_round_trips_as_row():
    record = ObservationRecord.from_row(["01", "20250720T0000Z", "1000"])

    assert record.entity_id == "01"
    assert record.as_row() == ["01", "20250720T0000Z", "1000"]


@pytest.mark.parametrize(
    "row",
    [
        ["01", "20250720T0000Z"],
        ["01", "20250720T0000Z", "1000", "extra"],
        ["", "20250720T0000Z", "1000"],
    ],
)
def test_from_row_rejects_malformed_rows(row):
    with pytest.raises(MalformedRecordError):
        ObservationRecord.from_row(row)


def test_records_are_immutable():
    record = ObservationRecord("01", "t", "1000")

    with pytest.raises(AttributeError):
        record.value = "999"
