from __future__ import annotations

import csv
import io
import json

import pytest

from edr_api.catalogue import (
    CollectionDescriptor,
    EDRCatalogue,
    QueryDescriptor,
    QueryType,
)
from edr_api.errors import EDRErrorKind, EncoderDispatchError
from edr_api.formats import OutputFormat
from edr_api.repository import EDRRepository, REGIONAL_PRESSURE_ROWS
from edr_api.service import EDRService

BASE_URL = "https://edr.example.com"

COLLECTION = "regional-pressure-settings"


def test_locations_csv_end_to_end(service):
    response = service.query(COLLECTION, "locations", "csv")

    assert response.success
    assert response.content_type == "text/csv"
    rows = list(csv.reader(io.StringIO(response.body)))
    assert len(rows) == 21
    assert rows[0] == ["region", "time", "qnh"]
    assert rows[1] == ["01", "20250720T0000Z", "1000"]
    assert all(len(row) == 3 for row in rows)
    assert [tuple(row) for row in rows[1:]] == list(REGIONAL_PRESSURE_ROWS)


def test_locations_geojson_end_to_end(service):
    response = service.query(COLLECTION, "locations", "geojson")

    assert response.success
    assert response.content_type == "application/geo+json"
    document = json.loads(response.body)
    assert document["type"] == "FeatureCollection"
    assert len(document["features"]) == 10
    for feature in document["features"]:
        assert len(feature["properties"]["pressure"]) == 2
        assert len(feature["properties"]["time"]) == 2

    region_01 = document["features"][0]["properties"]
    assert region_01["region"] == "01"
    assert region_01["pressure"] == ["1000", "1000"]


def test_locations_default_format_is_geojson(service):
    response = service.query(COLLECTION, "locations")

    assert response.success
    assert response.output_format == "geojson"


def test_coveragejson_query(service):
    response = service.query(COLLECTION, "position", "CoverageJSON")

    assert response.success
    assert response.content_type == "application/prs.coverage+json"
    assert json.loads(response.body)["type"] == "CoverageJSON"


def test_coords_accepted_but_not_applied(service):
    response = service.query(COLLECTION, "locations", "csv", coords="POINT(0 51)")

    assert len(response.body.splitlines()) == 21


@pytest.mark.parametrize(
    "collection_id, query_type, token, kind, status",
    [
        ("missing", "locations", "csv", EDRErrorKind.UNKNOWN_COLLECTION, 404),
        (COLLECTION, "radius", "csv", EDRErrorKind.UNSUPPORTED_QUERY, 400),
        (COLLECTION, "locations", "netcdf4", EDRErrorKind.UNSUPPORTED_FORMAT, 400),
    ],
)
def test_query_errors_are_returned_as_values(service, collection_id, query_type, token, kind, status):
    response = service.query(collection_id, query_type, token)

    assert not response.success
    assert response.body is None
    assert response.error.kind is kind
    assert response.status_code == status


def test_malformed_row_reported_as_error(edr_config, catalogue):
    repository = EDRRepository({COLLECTION: [("01", "20250720T0000Z")]})
    service = EDRService(config=edr_config, catalogue=catalogue, repository=repository)

    response = service.query(COLLECTION, "locations", "csv")

    assert not response.success
    assert response.error.kind is EDRErrorKind.MALFORMED_RECORD
    assert response.status_code == 500


def test_service_refuses_catalogue_advertising_unservable_format(edr_config):
    catalogue = EDRCatalogue([
        CollectionDescriptor(
            id="grids",
            queries={
                QueryType.CUBE: QueryDescriptor(
                    query_type=QueryType.CUBE,
                    allowed_formats=(OutputFormat.NETCDF4,),
                    default_format=OutputFormat.NETCDF4,
                )
            },
        )
    ])

    with pytest.raises(EncoderDispatchError):
        EDRService(config=edr_config, catalogue=catalogue)


def test_landing_page_links(service):
    page = service.get_landing_page(BASE_URL)

    assert page.title == "Environmental Data Retrieval server"
    assert {link.rel: link.href for link in page.links} == {
        "self": f"{BASE_URL}/api/edr",
        "data": f"{BASE_URL}/api/edr/collections",
    }


def test_list_collections(service):
    listing = service.list_collections(BASE_URL)

    assert [c.id for c in listing.collections] == [
        "regional-pressure-settings",
        "open-runway",
        "de-icing",
    ]


def test_collection_data_queries(service):
    collection, error = service.get_collection(COLLECTION, BASE_URL)

    assert error is None
    assert set(collection.data_queries) == {"area", "position", "locations"}
    assert collection.output_formats == ["CoverageJSON", "GeoJSON", "CSV"]
    assert collection.extent.spatial.bbox == [-90, -180, 90, 180]
    assert collection.crs == ["EPSG:4326"]

    link = collection.data_queries["locations"].link
    assert link.href == f"{BASE_URL}/api/edr/collections/{COLLECTION}/locations"
    assert link.rel == "data"
    assert link.type == "application/geo+json"
    assert link.templated is None
    assert link.variables.query_type == "locations"
    assert link.variables.output_formats == ["GeoJSON", "CoverageJSON", "CSV"]
    assert link.variables.default_output_format == "GeoJSON"
    assert link.variables.crs_details == [{"crs": "EPSG:4326"}]


def test_collection_without_queries_has_no_data_queries(service):
    collection, error = service.get_collection("de-icing", BASE_URL)

    assert error is None
    assert collection.data_queries == {}
    assert collection.output_formats == []


def test_unknown_collection_metadata(service):
    collection, error = service.get_collection("missing", BASE_URL)

    assert collection is None
    assert error.kind is EDRErrorKind.UNKNOWN_COLLECTION
