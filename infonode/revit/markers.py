"""
InfoNode markers in the host document.

- collect_markers: read existing markers as core.records.Marker
- apply_plan: create / move / rewrite markers in ONE transaction
- apply_purge: delete stale markers in a second transaction

Transactions roll back on any exception (including cancellation), so a
failed run leaves the document untouched.
"""

from . import api
from .safe_api import safe_call
from ..core.records import Marker, as_point
from ..core.reconcile import ACTION_CREATE, ACTION_MOVE
from ..errors import RequirementError, SyncCancelled

TX_PLACE = "Place or update InfoNodes"
TX_PURGE = "Purge stale InfoNodes"


def _log(level, msg):
    print("[{0}] infonode.markers: {1}".format(level, msg))


def is_marker(instance, cfg):
    """True for instances of the marker family (matched by family or type name)."""
    if api.family_name_of(instance) == cfg.family_name:
        return True
    symbol = getattr(instance, "Symbol", None)
    return symbol is not None and getattr(symbol, "Name", None) == cfg.family_name


def _read_string(element, name):
    p = element.LookupParameter(name)
    return p.AsString() if p is not None else None


def collect_markers(doc, cfg, diag=None):
    """Return (markers, elements_by_id) for every marker in the host document.

    Marker.element_id is the integer id; elements_by_id maps it back to the element.
    """
    markers = []
    elements = {}
    for inst in api.collect(doc, api.FamilyInstance, category=cfg.marker_category, instances_only=True):
        if not is_marker(inst, cfg):
            continue
        elem_id = api.id_value(inst.Id)
        host_id = safe_call(
            diag, phase="markers", callsite="read_host_id",
            fn=lambda: _read_string(inst, cfg.param_host_id), default=None,
            context={"elem_id": elem_id},
        )
        modname = safe_call(
            diag, phase="markers", callsite="read_modname",
            fn=lambda: _read_string(inst, cfg.param_modname), default=None,
            context={"elem_id": elem_id},
        )
        markers.append(Marker(elem_id, host_id, position=as_point(api.point_of(inst)), modname=modname))
        elements[elem_id] = inst
    return markers, elements


def find_marker_symbol(doc, cfg):
    """The marker FamilySymbol (type named like the family, else any type of the family)."""
    symbols = api.collect(doc, api.FamilySymbol, category=cfg.marker_category)
    for s in symbols:
        if getattr(s, "Name", None) == cfg.family_name:
            return s
    for s in symbols:
        family = getattr(s, "Family", None)
        if family is not None and getattr(family, "Name", None) == cfg.family_name:
            return s
    return None


def set_string_param(element, name, value, diag=None):
    """Write a string parameter if it exists, is writable and stores text.

    Returns True when written.
    """
    p = element.LookupParameter(name)
    if p is None or p.IsReadOnly or api.storage_type_name(p) != "String":
        if diag is not None:
            diag.warn("markers", "set_string_param", "Parameter missing or not writable",
                      elem_id=api.id_value(getattr(element, "Id", None)), extra={"param": name})
        return False
    p.Set(value)
    return True


def _check_cancel(cancel):
    if cancel is not None and cancel():
        raise SyncCancelled("InfoNode sync cancelled")


def _activate(doc, symbol):
    if not symbol.IsActive:
        symbol.Activate()
        doc.Regenerate()


def apply_plan(doc, plan, elements_by_id, cfg, cancel=None, diag=None):
    """Apply a SyncPlan inside one transaction.

    Args:
        doc: host Document
        plan: SyncPlan from core.reconcile.plan_sync
        elements_by_id: map from collect_markers
        cfg: Config
        cancel: optional callable returning True to abort (rolls back)

    Returns:
        dict {action index -> element} for the markers the plan touched

    Raises:
        RequirementError when creates are pending and the marker type is missing
        SyncCancelled when cancel() returns True
    """
    if not plan.actions:
        return {}

    symbol = None
    if plan.creates:
        symbol = find_marker_symbol(doc, cfg)
        if symbol is None:
            raise RequirementError("{0} family symbol not found".format(cfg.family_name))

    touched = {}
    tx = api.Transaction(doc, TX_PLACE)
    tx.Start()
    try:
        for idx, action in enumerate(plan.actions):
            _check_cancel(cancel)

            if action.kind == ACTION_CREATE:
                _activate(doc, symbol)
                element = doc.Create.NewFamilyInstance(
                    api.to_xyz(action.position), symbol, api.StructuralType.NonStructural
                )
            else:
                if action.create_ref is not None:
                    element = touched[action.create_ref]
                else:
                    element = elements_by_id[action.element_id]
                if action.kind == ACTION_MOVE:
                    api.ElementTransformUtils.MoveElement(doc, element.Id, api.to_xyz(action.delta))

            for name, value in action.values:
                set_string_param(element, name, value, diag)
            touched[idx] = element

        tx.Commit()
    except Exception:
        if api.transaction_started(tx):
            tx.RollBack()
        raise

    _log("INFO", "Applied {0} actions ({1} create, {2} move, {3} update)".format(
        len(plan), len(plan.creates), len(plan.moves), len(plan.updates)))
    return touched


def apply_purge(doc, element_ids, elements_by_id, diag=None):
    """Delete stale markers in one transaction.

    Per-element failures are recorded, not raised.

    Returns:
        (deleted_count, failed_count)
    """
    if not element_ids:
        return 0, 0

    deleted = 0
    failed = 0
    tx = api.Transaction(doc, TX_PURGE)
    tx.Start()
    try:
        for elem_id in element_ids:
            element = elements_by_id.get(elem_id)
            if element is None:
                failed += 1
                continue

            def _delete():
                doc.Delete(element.Id)
                return True

            ok = safe_call(
                diag, phase="purge", callsite="Document.Delete",
                fn=_delete, default=False,
                context={"elem_id": elem_id},
            )
            if ok:
                deleted += 1
            else:
                failed += 1
        tx.Commit()
    except Exception:
        if api.transaction_started(tx):
            tx.RollBack()
        raise

    if failed:
        _log("WARN", "Failed to delete {0} InfoNodes marked for deletion".format(failed))
    return deleted, failed
