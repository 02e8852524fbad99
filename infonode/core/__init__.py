"""
Core records and algorithms for the InfoNode sync (no Revit imports).

Modules:
- records: SubOccurrence, HostRecord, LinkedInstance, Marker, ResolvedHost
- reconcile: plan_sync / plan_purge / find_duplicate_ids
- report: SyncReport
- diagnostics: Diagnostics recorder
"""

from .records import (
    HostStatus,
    SubOccurrence,
    HostRecord,
    LinkedInstance,
    Marker,
    ResolvedHost,
    sub_occurrence_from_row,
    group_hosts,
    resolve_hosts,
)
from .reconcile import SyncPlan, MarkerAction, plan_sync, plan_purge, find_duplicate_ids, marker_values
from .report import SyncReport
from .diagnostics import Diagnostics

__all__ = [
    "HostStatus",
    "SubOccurrence",
    "HostRecord",
    "LinkedInstance",
    "Marker",
    "ResolvedHost",
    "sub_occurrence_from_row",
    "group_hosts",
    "resolve_hosts",
    "SyncPlan",
    "MarkerAction",
    "plan_sync",
    "plan_purge",
    "find_duplicate_ids",
    "marker_values",
    "SyncReport",
    "Diagnostics",
]
