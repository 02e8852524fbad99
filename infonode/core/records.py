"""
Record types flowing through the InfoNode sync.

Pure Python (no Revit imports) so grouping and matching run under pytest.

Flow:
    dRofus rows -> SubOccurrence -> HostRecord (grouped by host occurrence)
    linked instances + HostRecord -> ResolvedHost (one per placed host)
    host document markers -> Marker
"""

import math
from enum import Enum

from ..config import (
    FIELD_SUB_OCC_ID,
    FIELD_SUB_ITEM_NUMBER,
    FIELD_SUB_ITEM_NAME,
    FIELD_HOST_OCC_ID,
    FIELD_HOST_ITEM_NAME,
    FIELD_HOST_OCC_TAG,
)


class HostStatus(Enum):
    """Outcome for one resolved host after the plan is built."""

    CREATED = 1
    MOVED = 2
    UPDATED = 3


def distance(a, b):
    """Euclidean distance between two (x, y, z) tuples."""
    return math.sqrt((a[0] - b[0]) ** 2 + (a[1] - b[1]) ** 2 + (a[2] - b[2]) ** 2)


def as_point(p):
    """Normalize an XYZ-like or sequence into an (x, y, z) float tuple (None passes through)."""
    if p is None:
        return None
    if hasattr(p, "X"):
        return (float(p.X), float(p.Y), float(p.Z))
    x, y, z = p
    return (float(x), float(y), float(z))


def _to_int(value):
    """Parse an id from an int / float / numeric string; 0 when unparseable."""
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else 0
    try:
        return int(str(value).strip())
    except ValueError:
        return 0


def _to_str(value):
    if value is None:
        return None
    if isinstance(value, bool):
        return "True" if value else "False"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class SubOccurrence:
    """One dRofus sub-occurrence plus the fields of its parent (host) occurrence."""

    __slots__ = (
        "sub_occ_id",
        "sub_id_number",
        "sub_item_name",
        "host_occ_id",
        "host_modname",
        "host_item_name",
        "host_item_data1",
        "host_item_data2",
        "host_tag",
    )

    def __init__(
        self,
        sub_occ_id,
        host_occ_id,
        sub_id_number=None,
        sub_item_name=None,
        host_modname=None,
        host_item_name=None,
        host_item_data1=None,
        host_item_data2=None,
        host_tag=None,
    ):
        self.sub_occ_id = sub_occ_id
        self.sub_id_number = sub_id_number
        self.sub_item_name = sub_item_name
        self.host_occ_id = host_occ_id
        self.host_modname = host_modname
        self.host_item_name = host_item_name
        self.host_item_data1 = host_item_data1
        self.host_item_data2 = host_item_data2
        self.host_tag = host_tag

    def __repr__(self):
        return "SubOccurrence(sub={0}, host={1})".format(self.sub_occ_id, self.host_occ_id)


def sub_occurrence_from_row(row, cfg):
    """Map one dRofus JSON object to a SubOccurrence.

    Args:
        row: dict as returned by the occurrences endpoint
        cfg: Config (supplies the database-specific field names)

    Returns:
        SubOccurrence (ids default to 0 when missing or unparseable)
    """
    get = row.get
    return SubOccurrence(
        sub_occ_id=_to_int(get(FIELD_SUB_OCC_ID)),
        host_occ_id=_to_int(get(FIELD_HOST_OCC_ID)),
        sub_id_number=_to_str(get(FIELD_SUB_ITEM_NUMBER)),
        sub_item_name=_to_str(get(FIELD_SUB_ITEM_NAME)),
        host_modname=_to_str(get(cfg.field_host_model_name)),
        host_item_name=_to_str(get(FIELD_HOST_ITEM_NAME)),
        host_item_data1=_to_str(get(cfg.field_host_item_data1)),
        host_item_data2=_to_str(get(cfg.field_host_item_data2)),
        host_tag=_to_str(get(FIELD_HOST_OCC_TAG)),
    )


class HostRecord:
    """A host occurrence with its sub-items (the unit of reconciliation)."""

    __slots__ = ("host_occ_id", "item_name", "item_data1", "item_data2", "tag", "modname", "sub_items")

    def __init__(self, host_occ_id, item_name=None, item_data1=None, item_data2=None,
                 tag=None, modname=None, sub_items=None):
        self.host_occ_id = host_occ_id
        self.item_name = item_name
        self.item_data1 = item_data1
        self.item_data2 = item_data2
        self.tag = tag
        self.modname = modname
        self.sub_items = list(sub_items or [])

    def __repr__(self):
        return "HostRecord(id={0}, subs={1})".format(self.host_occ_id, len(self.sub_items))


def group_hosts(subs):
    """Group sub-occurrences by host occurrence id, in first-seen order.

    Descriptive host fields are taken from the first sub-item of each group.
    """
    by_id = {}
    order = []
    for sub in subs:
        group = by_id.get(sub.host_occ_id)
        if group is None:
            group = by_id[sub.host_occ_id] = []
            order.append(sub.host_occ_id)
        group.append(sub)

    hosts = []
    for host_id in order:
        group = by_id[host_id]
        first = group[0]
        hosts.append(
            HostRecord(
                host_occ_id=host_id,
                item_name=first.host_item_name,
                item_data1=first.host_item_data1,
                item_data2=first.host_item_data2,
                tag=first.host_tag,
                modname=first.host_modname,
                sub_items=group,
            )
        )
    return hosts


class LinkedInstance:
    """A family instance in a linked model carrying a dRofus occurrence id."""

    __slots__ = ("occurrence_id", "position", "source_label")

    def __init__(self, occurrence_id, position, source_label=None):
        self.occurrence_id = int(occurrence_id)
        self.position = as_point(position)
        self.source_label = source_label

    def __repr__(self):
        return "LinkedInstance(id={0}, src={1!r})".format(self.occurrence_id, self.source_label)


class Marker:
    """An InfoNode instance already present in the host document.

    host_id is the raw string parameter value (may be None or blank).
    position is None when the element has no point location.
    """

    __slots__ = ("element_id", "host_id", "position", "modname")

    def __init__(self, element_id, host_id, position=None, modname=None):
        self.element_id = element_id
        self.host_id = host_id
        self.position = as_point(position)
        self.modname = modname

    def __repr__(self):
        return "Marker(elem={0}, host_id={1!r})".format(self.element_id, self.host_id)


class ResolvedHost:
    """A host record pinned to the position of one matching linked instance."""

    __slots__ = (
        "occurrence_id",
        "position",
        "item_name",
        "item_data1",
        "item_data2",
        "tag",
        "modname",
        "sub_items",
        "source_label",
        "status",
    )

    def __init__(self, occurrence_id, position, item_name=None, item_data1=None, item_data2=None,
                 tag=None, modname=None, sub_items=None, source_label=None):
        self.occurrence_id = int(occurrence_id)
        self.position = as_point(position)
        self.item_name = item_name
        self.item_data1 = item_data1
        self.item_data2 = item_data2
        self.tag = tag
        self.modname = modname
        self.sub_items = list(sub_items or [])
        self.source_label = source_label
        self.status = None

    @property
    def key(self):
        """Value stored in the marker's host-id parameter."""
        return str(self.occurrence_id)

    def __repr__(self):
        status = self.status.name if self.status is not None else None
        return "ResolvedHost(id={0}, status={1})".format(self.occurrence_id, status)


def resolve_hosts(instances, hosts):
    """Pair each linked instance with the host record of the same occurrence id.

    Instances without a record are dropped. An id placed more than once in the
    links yields one ResolvedHost per placement (see find_duplicate_ids).
    """
    by_id = {}
    for h in hosts:
        # First record wins, matching first-seen grouping order
        by_id.setdefault(h.host_occ_id, h)

    resolved = []
    for inst in instances:
        host = by_id.get(inst.occurrence_id)
        if host is None:
            continue
        resolved.append(
            ResolvedHost(
                occurrence_id=inst.occurrence_id,
                position=inst.position,
                item_name=host.item_name,
                item_data1=host.item_data1,
                item_data2=host.item_data2,
                tag=host.tag,
                modname=host.modname,
                sub_items=host.sub_items,
                source_label=inst.source_label,
            )
        )
    return resolved
