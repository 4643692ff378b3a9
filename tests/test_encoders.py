from __future__ import annotations

import csv
import io
import json

import pytest
from pydantic import ValidationError

from edr_api.catalogue import CollectionDescriptor
from edr_api.encoders import (
    UNIT_SQUARE,
    encode_coverage,
    encode_features,
    encode_payload,
    encode_tabular,
)
from edr_api.errors import EncoderDispatchError
from edr_api.formats import OutputFormat
from edr_api.models import CoverageAxes, NumericAxis, TemporalAxis
from edr_api.records import ObservationRecord, group_records


def _parse_csv(text):
    return list(csv.reader(io.StringIO(text)))


def test_tabular_has_header_plus_one_row_per_record(sample_records):
    table = encode_tabular(sample_records)

    rows = _parse_csv(table.render())

    assert table.row_count == len(sample_records) + 1
    assert len(rows) == len(sample_records) + 1
    assert rows[0] == ["entity", "time", "value"]
    assert rows[1] == ["A", "t1", "v1"]


def test_tabular_empty_input_is_header_only():
    table = encode_tabular([], header=("region", "time", "qnh"))

    assert table.render() == "region,time,qnh\n"


def test_tabular_quotes_delimiters_and_quotes():
    records = [ObservationRecord('North, "East"', "t1", "1,000")]

    text = encode_tabular(records).render()

    assert text.splitlines()[1] == '"North, ""East""",t1,"1,000"'
    assert _parse_csv(text)[1] == ['North, "East"', "t1", "1,000"]


def test_features_one_per_entity(sample_records):
    collection = encode_features(group_records(sample_records))

    assert len(collection.features) == 2
    first = collection.features[0]
    assert first.properties == {"entity": "A", "value": ["v1", "v3"], "time": ["t1", "t3"]}
    assert first.geometry.type == "Polygon"
    assert first.geometry.coordinates == UNIT_SQUARE


def test_features_sorted_by_entity_id():
    records = [ObservationRecord(e, "t", "1") for e in ("c", "a", "b")]

    collection = encode_features(group_records(records))

    assert [f.properties["entity"] for f in collection.features] == ["a", "b", "c"]


def test_features_empty_input_is_empty_collection():
    document = json.loads(encode_features({}).render())

    assert document == {"type": "FeatureCollection", "features": []}


def test_unit_square_ring_is_closed():
    ring = UNIT_SQUARE[0]

    assert ring[0] == ring[-1]
    assert len(ring) == 5


def test_coverage_stub_shape(regional_pressure):
    document = json.loads(encode_coverage(parameter=regional_pressure.parameter).render())

    assert document["type"] == "CoverageJSON"
    assert document["domain"]["type"] == "Domain"
    assert document["domain"]["domainType"] == "Grid"
    assert document["domain"]["referencing"] == []
    for axis in ("x", "y", "z", "t"):
        assert document["domain"]["axes"][axis]["values"] == []

    assert list(document["parameters"]) == ["QNH"]
    assert document["parameters"]["QNH"]["unit"]["symbol"] == "hPa"

    qnh_range = document["ranges"]["QNH"]
    assert qnh_range["type"] == "NdArray"
    assert qnh_range["dataType"] == "float"
    assert qnh_range["axisNames"] == ["x", "y", "z", "t"]
    assert qnh_range["shape"] == [0, 0, 0, 0]
    assert qnh_range["values"] == []


def test_coverage_ignores_input_records(sample_records, regional_pressure):
    with_data = encode_coverage(group_records(sample_records), parameter=regional_pressure.parameter)
    without = encode_coverage(parameter=regional_pressure.parameter)

    assert with_data.render() == without.render()


def test_payload_dispatch_uses_collection_labels(sample_records, regional_pressure):
    table = encode_payload(OutputFormat.CSV, sample_records, regional_pressure)
    features = encode_payload(OutputFormat.GEOJSON, sample_records, regional_pressure)

    assert table.header == ("region", "time", "qnh")
    assert set(features.features[0].properties) == {"region", "pressure", "time"}


def test_payload_dispatch_without_encoder_fails_loud(sample_records):
    with pytest.raises(EncoderDispatchError):
        encode_payload(OutputFormat.NETCDF4, sample_records, CollectionDescriptor(id="x"))


def test_coverage_axes_are_typed():
    axes = CoverageAxes(
        x=NumericAxis(values=[1.5]),
        t=TemporalAxis(values=["20250720T0000Z"]),
    )

    assert axes.x.values == [1.5]
    assert axes.t.values == ["20250720T0000Z"]
    with pytest.raises(ValidationError):
        NumericAxis(values=["north"])
    with pytest.raises(ValidationError):
        TemporalAxis(values=[1.0])
