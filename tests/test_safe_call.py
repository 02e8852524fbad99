# tests/test_safe_call.py

import pytest

from infonode.core.diagnostics import Diagnostics
from infonode.revit.safe_api import safe_call


def test_safe_call_default_records_and_returns_default():
    diag = Diagnostics(max_events=10)

    def boom():
        raise ValueError("x")

    result = safe_call(
        diag,
        phase="unit",
        callsite="safe_call_default",
        fn=boom,
        default=42,
        context={"elem_id": 7, "link": "ARK.rvt"},
    )

    assert result == 42
    d = diag.to_dict()
    assert d["num_events"] == 1
    ev = d["events"][0]
    assert ev["exc_type"] == "ValueError"
    assert ev["elem_id"] == 7
    assert ev["link"] == "ARK.rvt"


def test_safe_call_raise_records_and_raises():
    diag = Diagnostics(max_events=10)

    def boom():
        raise RuntimeError("y")

    with pytest.raises(RuntimeError):
        safe_call(
            diag,
            phase="unit",
            callsite="safe_call_raise",
            fn=boom,
            default=None,
            policy="raise",
        )

    d = diag.to_dict()
    assert d["num_events"] == 1
    assert d["events"][0]["exc_type"] == "RuntimeError"


def test_safe_call_without_diagnostics():
    def boom():
        raise KeyError("z")

    assert safe_call(None, phase="unit", callsite="no_diag", fn=boom, default="d") == "d"
    assert safe_call(None, phase="unit", callsite="ok", fn=lambda: 5, default=None) == 5


def test_failing_diagnostics_do_not_mask_default():
    class _BrokenDiag(object):
        def error(self, *args, **kwargs):
            raise RuntimeError("recorder down")

    def boom():
        raise ValueError("x")

    assert safe_call(_BrokenDiag(), phase="unit", callsite="broken_diag", fn=boom, default=-1) == -1
    with pytest.raises(ValueError):
        safe_call(_BrokenDiag(), phase="unit", callsite="broken_diag", fn=boom, default=-1, policy="raise")
