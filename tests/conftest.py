from __future__ import annotations

import sys
from pathlib import Path
from typing import Dict, Optional

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import azure.functions as func  # noqa: E402

from edr_api.catalogue import get_catalogue  # noqa: E402
from edr_api.config import EDRAPIConfig  # noqa: E402
from edr_api.records import ObservationRecord  # noqa: E402
from edr_api.repository import EDRRepository  # noqa: E402
from edr_api.service import EDRService  # noqa: E402

BASE_URL = "https://edr.example.com"


@pytest.fixture()
def catalogue():
    return get_catalogue()


@pytest.fixture()
def regional_pressure(catalogue):
    return catalogue.get("regional-pressure-settings")


@pytest.fixture()
def edr_config() -> EDRAPIConfig:
    return EDRAPIConfig(
        edr_base_url=None,
        title="Environmental Data Retrieval server",
        description="Test server",
        json_indent=2,
        default_crs="EPSG:4326",
    )


@pytest.fixture()
def service(edr_config, catalogue) -> EDRService:
    return EDRService(config=edr_config, catalogue=catalogue, repository=EDRRepository())


@pytest.fixture()
def sample_records():
    return [
        ObservationRecord("A", "t1", "v1"),
        ObservationRecord("B", "t2", "v2"),
        ObservationRecord("A", "t3", "v3"),
    ]


@pytest.fixture()
def make_request():
    def _make(
        route: str,
        route_params: Optional[Dict[str, str]] = None,
        params: Optional[Dict[str, str]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> func.HttpRequest:
        return func.HttpRequest(
            method="GET",
            url=f"{BASE_URL}/api/{route}",
            headers=headers or {},
            params=params or {},
            route_params=route_params or {},
            body=b"",
        )

    return _make
