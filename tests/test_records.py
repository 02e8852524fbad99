# tests/test_records.py

from infonode.config import Config
from infonode.core.records import (
    LinkedInstance,
    SubOccurrence,
    group_hosts,
    resolve_hosts,
    sub_occurrence_from_row,
)


def _row(sub_id, host_id, name="Desk", model="ARK-01", data1="12", data2="x", tag="T1", sub_name="Lamp"):
    cfg = Config()
    return {
        "id": sub_id,
        "article_id_number": "A-{0}".format(sub_id),
        "article_id_name": sub_name,
        "parent_occurrence_id_id": host_id,
        cfg.field_host_model_name: model,
        "parent_occurrence_id_article_id_name": name,
        cfg.field_host_item_data1: data1,
        cfg.field_host_item_data2: data2,
        "parent_occurrence_id_classification_number": tag,
    }


def test_row_mapping_reads_configured_fields():
    cfg = Config()
    sub = sub_occurrence_from_row(_row(7, 100), cfg)

    assert sub.sub_occ_id == 7
    assert sub.host_occ_id == 100
    assert sub.sub_id_number == "A-7"
    assert sub.sub_item_name == "Lamp"
    assert sub.host_modname == "ARK-01"
    assert sub.host_item_name == "Desk"
    assert sub.host_item_data1 == "12"
    assert sub.host_tag == "T1"


def test_row_mapping_parses_string_host_id_and_defaults_bad_ids_to_zero():
    cfg = Config()
    assert sub_occurrence_from_row({"id": 1, "parent_occurrence_id_id": "42"}, cfg).host_occ_id == 42
    assert sub_occurrence_from_row({"id": 1, "parent_occurrence_id_id": "abc"}, cfg).host_occ_id == 0
    assert sub_occurrence_from_row({"id": 1}, cfg).host_occ_id == 0
    assert sub_occurrence_from_row({}, cfg).sub_occ_id == 0


def test_row_mapping_stringifies_numbers_and_keeps_none():
    cfg = Config()
    row = {"id": 1, "parent_occurrence_id_id": 2, cfg.field_host_item_data1: 0, cfg.field_host_item_data2: None}
    sub = sub_occurrence_from_row(row, cfg)
    assert sub.host_item_data1 == "0"
    assert sub.host_item_data2 is None


def test_row_mapping_renders_integral_floats_without_fraction():
    cfg = Config()
    row = {"id": 1, "parent_occurrence_id_id": 2, cfg.field_host_item_data1: 1.0, cfg.field_host_item_data2: 2.5}
    sub = sub_occurrence_from_row(row, cfg)
    assert sub.host_item_data1 == "1"
    assert sub.host_item_data2 == "2.5"


def test_group_hosts_keeps_first_seen_order_and_first_sub_fields():
    subs = [
        SubOccurrence(1, 200, host_item_name="Table"),
        SubOccurrence(2, 100, host_item_name="Desk"),
        SubOccurrence(3, 200, host_item_name="Other name"),
    ]
    hosts = group_hosts(subs)

    assert [h.host_occ_id for h in hosts] == [200, 100]
    assert hosts[0].item_name == "Table"
    assert [s.sub_occ_id for s in hosts[0].sub_items] == [1, 3]
    assert [s.sub_occ_id for s in hosts[1].sub_items] == [2]


def test_resolve_hosts_drops_unmatched_and_keeps_duplicate_placements():
    hosts = group_hosts([SubOccurrence(1, 100, host_item_name="Desk")])
    instances = [
        LinkedInstance(100, (0, 0, 0), "A"),
        LinkedInstance(999, (1, 1, 1), "A"),
        LinkedInstance(100, (5, 0, 0), "B"),
    ]

    resolved = resolve_hosts(instances, hosts)

    assert [r.occurrence_id for r in resolved] == [100, 100]
    assert resolved[0].position == (0.0, 0.0, 0.0)
    assert resolved[1].position == (5.0, 0.0, 0.0)
    assert resolved[1].source_label == "B"
    assert resolved[0].item_name == "Desk"
    assert resolved[0].status is None
    assert resolved[0].key == "100"
