# tests/conftest.py

import os
from pathlib import Path

import pytest

import revit_fakes


def pytest_ignore_collect(collection_path: Path, config):
    """
    Prevent collection of Dynamo/Revit integration scripts unless explicitly enabled.

    Enable by setting:
        INFONODE_RUN_DYNAMO_TESTS=1
    """
    run_dynamo = os.environ.get("INFONODE_RUN_DYNAMO_TESTS", "").strip() == "1"
    if run_dynamo:
        return False

    p = str(collection_path).replace("\\", "/")
    return "/tests/dynamo/" in p


@pytest.fixture
def fake_revit(monkeypatch):
    """Swap the fake Revit API into infonode.revit.api for one test."""
    revit_fakes.install(monkeypatch)
    return revit_fakes
