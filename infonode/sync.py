"""
InfoNode sync - main processing logic.

One run:
1. Requirements (family, parameters, loaded links)
2. dRofus sub-occurrences for hosts placed in the loaded links
3. Group into host records, pin each to its linked instance position(s)
4. Plan + apply create / move / update (one transaction)
5. Purge markers with no host (second transaction)
6. Report counts and duplicate ids
"""

import time
import uuid
from datetime import datetime

from .config import Config, FIELD_IS_SUB_OCCURRENCE
from .csv_export import append_sync_log
from .core.diagnostics import Diagnostics
from .core.records import group_hosts, resolve_hosts, sub_occurrence_from_row
from .core.reconcile import find_duplicate_ids, plan_purge, plan_sync
from .core.report import SyncReport
from .drofus.client import create_client
from .drofus.query import Comparison, FilterItem, Query
from .errors import DrofusError, RequirementError, SyncCancelled
from .revit.links import collect_linked_instances, get_link_model_names
from .revit.markers import apply_plan, apply_purge, collect_markers
from .revit.requirements import ensure_requirements


def _log(level, msg):
    print("[{0}] infonode.sync: {1}".format(level, msg))


def build_sub_occurrence_query(cfg, link_model_names):
    """Sub-occurrences whose host sits in one of the loaded links."""
    return (
        Query.list()
        .select(*cfg.occurrence_fields)
        .filter(FilterItem(FIELD_IS_SUB_OCCURRENCE, Comparison.EQ, True))
        .filter(FilterItem(cfg.field_host_model_name, Comparison.IN, list(link_model_names)))
    )


def fetch_hosts(client, cfg, link_model_names):
    """Query dRofus and group the result into HostRecords."""
    rows = client.get_occurrences(build_sub_occurrence_query(cfg, link_model_names))
    subs = [sub_occurrence_from_row(r, cfg) for r in rows]
    hosts = group_hosts(subs)
    _log("INFO", "{0} sub-occurrences -> {1} host records".format(len(subs), len(hosts)))
    return hosts


def reconcile_markers(doc, resolved, cfg, cancel=None, diag=None):
    """Plan and apply marker changes, then purge. Returns (deleted, delete_failures)."""
    markers, elements = collect_markers(doc, cfg, diag)
    plan = plan_sync(resolved, markers, cfg)
    apply_plan(doc, plan, elements, cfg, cancel=cancel, diag=diag)

    # Re-read so markers created above are known to the purge
    markers, elements = collect_markers(doc, cfg, diag)
    doomed = plan_purge(resolved, markers)
    return apply_purge(doc, doomed, elements, diag=diag)


def run_infonode_sync(doc, cfg=None, client=None, cancel=None, diag=None):
    """Synchronize InfoNode markers in doc with dRofus.

    Args:
        doc: host Revit Document (None -> failed report)
        cfg: Config (default: Config())
        client: DrofusClient-like object with get_occurrences(query);
                built from connection settings when None
        cancel: optional callable returning True to abort
        diag: optional Diagnostics

    Returns:
        (SyncReport, run_info dict)

    Commentary:
        ✔ Requirement and dRofus failures become a failed report
        ✔ Cancellation rolls back the open transaction and becomes a failed report
        ✔ Revit failures roll back the open transaction and propagate
        ⚠ Duplicate ids in the links move the same marker every run
    """
    cfg = cfg or Config()
    diag = diag if diag is not None else Diagnostics()
    t0 = time.perf_counter()
    run_info = {
        "date": datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
        "run_id": uuid.uuid4().hex[:12],
        "doc_title": getattr(doc, "Title", None),
    }

    def _finish(report):
        run_info["elapsed_sec"] = round(time.perf_counter() - t0, 3)
        run_info["diagnostics"] = diag.to_dict()
        _log("INFO", repr(report))
        if cfg.csv_log_path:
            append_sync_log(cfg.csv_log_path, report, run_info)
        return report, run_info

    if doc is None:
        return _finish(SyncReport.failed("Revit has no active model open"))

    try:
        ensure_requirements(doc, cfg, diag)
    except RequirementError as e:
        return _finish(SyncReport.failed(str(e)))

    link_names = get_link_model_names(doc, cfg, diag)
    _log("INFO", "Loaded links with dRofus model names: {0}".format(link_names))

    owns_client = client is None
    try:
        if owns_client:
            client = create_client(cfg)
        try:
            hosts = fetch_hosts(client, cfg, link_names)
        finally:
            if owns_client:
                client.close()
    except DrofusError as e:
        diag.error("drofus", "fetch_hosts", "dRofus request failed", exc=e)
        return _finish(SyncReport.failed("Could not read occurrences from dRofus:\n{0}".format(e)))

    instances = collect_linked_instances(doc, cfg, diag)
    resolved = resolve_hosts(instances, hosts)
    _log("INFO", "{0} linked instances, {1} matched hosts".format(len(instances), len(resolved)))

    try:
        deleted, failures = reconcile_markers(doc, resolved, cfg, cancel=cancel, diag=diag)
    except RequirementError as e:
        return _finish(SyncReport.failed(str(e)))
    except SyncCancelled as e:
        diag.warn("sync", "reconcile_markers", "Sync cancelled; marker changes rolled back")
        return _finish(SyncReport.failed(str(e)))

    report = SyncReport.from_hosts(
        resolved,
        deleted_count=deleted,
        duplicate_ids=find_duplicate_ids(resolved),
        delete_failures=failures,
    )
    return _finish(report)
