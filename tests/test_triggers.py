from __future__ import annotations

import json

import pytest

from edr_api.triggers import (
    EDRCollectionTrigger,
    EDRCollectionsTrigger,
    EDRLandingPageTrigger,
    EDRQueryTrigger,
    get_edr_triggers,
)

COLLECTION = "regional-pressure-settings"
QUERY_ROUTE = "edr/collections/{collection_id}/{query_type}"


def _query(service, make_request, query_type="locations", collection_id=COLLECTION, **params):
    req = make_request(
        f"edr/collections/{collection_id}/{query_type}",
        route_params={"collection_id": collection_id, "query_type": query_type},
        params=params,
    )
    return EDRQueryTrigger(service=service).handle(req)


def test_trigger_registry_routes():
    routes = [trigger["route"] for trigger in get_edr_triggers()]

    assert routes == [
        "edr",
        "edr/collections",
        "edr/collections/{collection_id}",
        QUERY_ROUTE,
    ]


def test_landing_page(service, make_request):
    resp = EDRLandingPageTrigger(service=service).handle(make_request("edr"))

    assert resp.status_code == 200
    assert resp.mimetype == "application/json"
    body = json.loads(resp.get_body())
    assert body["title"] == "Environmental Data Retrieval server"
    assert body["links"][0]["href"] == "https://edr.example.com/api/edr"


def test_collections_list(service, make_request):
    resp = EDRCollectionsTrigger(service=service).handle(make_request("edr/collections"))

    body = json.loads(resp.get_body())
    assert resp.status_code == 200
    assert len(body["collections"]) == 3


def test_collection_metadata_omits_unset_fields(service, make_request):
    req = make_request(
        f"edr/collections/{COLLECTION}",
        route_params={"collection_id": COLLECTION},
    )

    resp = EDRCollectionTrigger(service=service).handle(req)

    body = json.loads(resp.get_body())
    assert resp.status_code == 200
    link = body["data_queries"]["locations"]["link"]
    assert link["variables"]["default_output_format"] == "GeoJSON"
    assert "hreflang" not in link
    assert "templated" not in link
    assert "within_units" not in link["variables"]


def test_collection_not_found(service, make_request):
    req = make_request("edr/collections/missing", route_params={"collection_id": "missing"})

    resp = EDRCollectionTrigger(service=service).handle(req)

    assert resp.status_code == 404
    assert json.loads(resp.get_body())["code"] == "UnknownCollection"


def test_query_csv(service, make_request):
    resp = _query(service, make_request, f="csv")

    assert resp.status_code == 200
    assert resp.mimetype == "text/csv"
    lines = resp.get_body().decode("utf-8").splitlines()
    assert lines[0] == "region,time,qnh"
    assert len(lines) == 21


def test_query_default_format(service, make_request):
    resp = _query(service, make_request)

    assert resp.status_code == 200
    assert resp.mimetype == "application/geo+json"
    assert len(json.loads(resp.get_body())["features"]) == 10


@pytest.mark.parametrize(
    "query_type, collection_id, fmt, status, code",
    [
        ("locations", COLLECTION, "netcdf4", 400, "UnsupportedFormat"),
        ("locations", COLLECTION, "xml", 400, "UnsupportedFormat"),
        ("trajectory", COLLECTION, "csv", 400, "UnsupportedQuery"),
        ("locations", "missing", "csv", 404, "UnknownCollection"),
    ],
)
def test_query_errors(service, make_request, query_type, collection_id, fmt, status, code):
    resp = _query(service, make_request, query_type=query_type, collection_id=collection_id, f=fmt)

    body = json.loads(resp.get_body())
    assert resp.status_code == status
    assert body["code"] == code
    assert body["description"]


def test_query_unexpected_exception_is_500(service, make_request, monkeypatch):
    def _boom(*args, **kwargs):
        raise RuntimeError("repository offline")

    monkeypatch.setattr(service.repository, "get_records", _boom)

    resp = _query(service, make_request, f="csv")

    body = json.loads(resp.get_body())
    assert resp.status_code == 500
    assert body["code"] == "InternalServerError"


@pytest.mark.parametrize("indent", [0, 4])
def test_error_body_uses_configured_indent(service, make_request, indent):
    trigger = EDRCollectionTrigger(service=service)
    trigger.config = trigger.config.model_copy(update={"json_indent": indent})
    req = make_request("edr/collections/missing", route_params={"collection_id": "missing"})

    body = trigger.handle(req).get_body().decode("utf-8")

    error = {"code": "UnknownCollection", "description": "Unrecognised collection: 'missing'"}
    assert body == json.dumps(error, indent=indent or None)
