# tests/test_config.py

import pytest

from infonode.config import Config


def test_defaults():
    cfg = Config()
    assert cfg.family_name == "InfoNode"
    assert cfg.position_tolerance_ft == 0.01
    assert cfg.missing_value == "Ingen data"
    assert cfg.marker_param_names == [
        "InfoNode_hostID",
        "InfoNode_hostname",
        "InfoNode_hostdata",
        "InfoNode_hostdata2",
        "InfoNode_hosttag",
        "InfoNode_modname",
        "InfoNode_subs",
    ]


def test_from_dict_overrides_and_roundtrips():
    cfg = Config.from_dict({"position_tolerance_ft": 0.5, "family_name": "Node"})
    assert cfg.position_tolerance_ft == 0.5
    assert Config.from_dict(cfg.to_dict()).family_name == "Node"
    assert Config.from_dict(None).family_name == "InfoNode"


def test_from_dict_rejects_unknown_keys():
    with pytest.raises(ValueError, match="tolerance"):
        Config.from_dict({"tolerance": 1.0})


@pytest.mark.parametrize(
    "kwargs",
    [
        {"position_tolerance_ft": 0},
        {"position_tolerance_ft": -1},
        {"family_name": ""},
        {"field_host_model_name": "  "},
        {"max_retries": 0},
    ],
)
def test_invalid_values_raise(kwargs):
    with pytest.raises(ValueError):
        Config(**kwargs)
