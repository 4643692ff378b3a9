from __future__ import annotations

import importlib
import sys

import edr_api.catalogue as catalogue_module


def _load_function_app():
    if "function_app" in sys.modules:
        return importlib.reload(sys.modules["function_app"])
    return importlib.import_module("function_app")


def test_catalogue_built_during_app_initialisation(monkeypatch):
    monkeypatch.setattr(catalogue_module, "_catalogue_cache", None)

    function_app = _load_function_app()

    assert catalogue_module._catalogue_cache is not None
    assert function_app._catalogue is catalogue_module.get_catalogue()
    assert len(function_app.edr_triggers) == 4


def test_get_catalogue_returns_the_same_instance():
    assert catalogue_module.get_catalogue() is catalogue_module.get_catalogue()
