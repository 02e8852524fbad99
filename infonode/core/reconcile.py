"""
Marker reconciliation (create / move / update / delete).

Pure planning: nothing here touches Revit. revit.markers applies the plan.

Semantics:
    - Hosts are visited in order; each looks up the FIRST marker carrying its id.
    - Markers created earlier in the same pass are visible to later hosts, so an
      id placed twice in the links creates once and then moves (the duplicate
      report explains the move on every run).
    - Move vs update is decided by position tolerance; parameters are rewritten
      either way.
    - Purge removes markers with a blank id or an id no resolved host carries.
"""

from .records import HostStatus, distance

ACTION_CREATE = "create"
ACTION_MOVE = "move"
ACTION_UPDATE = "update"


def _is_blank(s):
    return s is None or not str(s).strip()


def format_sub_items(sub_items):
    """Render sub-items as "id,name | id,name" (empty string when none)."""
    return " | ".join(
        "{0},{1}".format(s.sub_occ_id, s.sub_item_name if s.sub_item_name is not None else "")
        for s in sub_items
    )


def marker_values(host, cfg):
    """Return [(param_name, value), ...] to write on the marker for host."""
    missing = cfg.missing_value

    def _or_missing(v):
        return v if v is not None else missing

    data1 = host.item_data1
    if _is_blank(data1) or data1 == "0":
        data1 = missing

    return [
        (cfg.param_host_id, host.key),
        (cfg.param_host_name, _or_missing(host.item_name)),
        (cfg.param_host_data, data1),
        (cfg.param_host_data2, _or_missing(host.item_data2)),
        (cfg.param_host_tag, _or_missing(host.tag)),
        (cfg.param_modname, _or_missing(host.modname)),
        (cfg.param_subs, format_sub_items(host.sub_items)),
    ]


class MarkerAction:
    """One planned change to a marker.

    element_id: existing marker id (None when the target is created in this plan)
    create_ref: index in SyncPlan.actions of the create action that makes the
                target, for actions on markers that do not exist yet
    delta: (dx, dy, dz) for moves
    """

    __slots__ = ("kind", "host", "element_id", "create_ref", "position", "delta", "values")

    def __init__(self, kind, host, values, element_id=None, create_ref=None, position=None, delta=None):
        self.kind = kind
        self.host = host
        self.values = values
        self.element_id = element_id
        self.create_ref = create_ref
        self.position = position
        self.delta = delta

    def __repr__(self):
        return "MarkerAction({0}, host={1}, elem={2}, ref={3})".format(
            self.kind, self.host.occurrence_id, self.element_id, self.create_ref
        )


class SyncPlan:
    """Ordered marker actions for one run."""

    def __init__(self):
        self.actions = []

    def add(self, action):
        self.actions.append(action)
        return len(self.actions) - 1

    def of_kind(self, kind):
        return [a for a in self.actions if a.kind == kind]

    @property
    def creates(self):
        return self.of_kind(ACTION_CREATE)

    @property
    def moves(self):
        return self.of_kind(ACTION_MOVE)

    @property
    def updates(self):
        return self.of_kind(ACTION_UPDATE)

    def __len__(self):
        return len(self.actions)


class _Slot:
    """Working view of a marker during planning (existing or planned)."""

    __slots__ = ("host_id", "position", "element_id", "create_ref")

    def __init__(self, host_id, position, element_id=None, create_ref=None):
        self.host_id = host_id
        self.position = position
        self.element_id = element_id
        self.create_ref = create_ref


def plan_sync(hosts, markers, cfg):
    """Build the create / move / update plan and set each host's status.

    Args:
        hosts: list of ResolvedHost (order matters)
        markers: list of Marker currently in the host document
        cfg: Config (tolerance and parameter names)

    Returns:
        SyncPlan
    """
    tol = cfg.position_tolerance_ft
    plan = SyncPlan()

    slots = [_Slot(m.host_id, m.position, element_id=m.element_id) for m in markers]
    first_by_id = {}
    for slot in slots:
        if slot.host_id is not None:
            first_by_id.setdefault(slot.host_id, slot)

    for host in hosts:
        values = marker_values(host, cfg)
        slot = first_by_id.get(host.key)

        if slot is not None and slot.position is not None:
            if distance(slot.position, host.position) < tol:
                plan.add(MarkerAction(
                    ACTION_UPDATE, host, values,
                    element_id=slot.element_id, create_ref=slot.create_ref,
                    position=slot.position,
                ))
                host.status = HostStatus.UPDATED
            else:
                delta = tuple(h - s for h, s in zip(host.position, slot.position))
                plan.add(MarkerAction(
                    ACTION_MOVE, host, values,
                    element_id=slot.element_id, create_ref=slot.create_ref,
                    position=host.position, delta=delta,
                ))
                slot.position = host.position
                host.status = HostStatus.MOVED
            continue

        idx = plan.add(MarkerAction(ACTION_CREATE, host, values, position=host.position))
        created = _Slot(host.key, host.position, create_ref=idx)
        slots.append(created)
        # A positionless match keeps its place; the new marker is found only
        # when no earlier marker carries the id.
        first_by_id.setdefault(host.key, created)
        host.status = HostStatus.CREATED

    return plan


def plan_purge(hosts, markers):
    """Return element ids of markers with no resolved host (or a blank id)."""
    valid = set(h.key for h in hosts)
    doomed = []
    for m in markers:
        if _is_blank(m.host_id) or m.host_id not in valid:
            doomed.append(m.element_id)
    return doomed


def find_duplicate_ids(hosts):
    """Occurrence ids placed more than once in the links, in first-repeat order."""
    seen = set()
    dupes = []
    for h in hosts:
        oid = h.occurrence_id
        if oid in seen:
            if oid not in dupes:
                dupes.append(oid)
        else:
            seen.add(oid)
    return dupes
