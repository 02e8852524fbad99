# tests/test_query.py

import pytest

from infonode.config import Config
from infonode.drofus.query import Comparison, FilterItem, Query, format_literal
from infonode.sync import build_sub_occurrence_query


@pytest.mark.parametrize(
    "value, expected",
    [
        (True, "true"),
        (False, "false"),
        (None, "null"),
        (12, "12"),
        (1.5, "1.5"),
        ("ARK", "'ARK'"),
        ("O'Brien", "'O''Brien'"),
    ],
)
def test_format_literal(value, expected):
    assert format_literal(value) == expected


def test_filter_rendering():
    assert FilterItem("a", Comparison.EQ, True).render() == "a eq true"
    assert FilterItem("a", Comparison.GE, 3).render() == "a ge 3"
    assert FilterItem("a", Comparison.IN, ["x", "y"]).render() == "a in ('x','y')"
    assert FilterItem("a", Comparison.CONTAINS, "x").render() == "contains(a,'x')"


def test_in_filter_requires_a_list():
    with pytest.raises(TypeError):
        FilterItem("a", Comparison.IN, "xy")


def test_query_params_join_filters_with_and_and_dedupe_select():
    q = (
        Query.list()
        .select("id", "name", "id")
        .filter(FilterItem("is_sub_occurrence", Comparison.EQ, True))
        .filter(FilterItem("model", Comparison.IN, ["A"]))
    )
    assert q.to_params() == {
        "$select": "id,name",
        "$filter": "is_sub_occurrence eq true and model in ('A')",
    }
    assert not q.is_empty()


def test_empty_in_filter_marks_query_empty():
    q = Query.list().filter(FilterItem("model", Comparison.IN, []))
    assert q.is_empty()


def test_sub_occurrence_query_uses_configured_model_field():
    cfg = Config(field_host_model_name="model_field")
    params = build_sub_occurrence_query(cfg, ["ARK-01", "RIB-02"]).to_params()

    assert params["$filter"] == "is_sub_occurrence eq true and model_field in ('ARK-01','RIB-02')"
    selected = params["$select"].split(",")
    assert selected[0] == "id"
    assert "model_field" in selected
    assert cfg.field_host_item_data1 in selected
    assert "parent_occurrence_id_classification_number" in selected
