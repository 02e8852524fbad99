"""
Revit-specific integrations for the InfoNode sync.

Modules:
- api: optional Revit API bindings and collector helpers
- links: linked model names and occurrence instances
- markers: marker collection and plan application
- requirements: family / parameter / loaded-link checks
- safe_api: safe_call wrapper
"""

from .links import get_link_model_names, collect_linked_instances
from .markers import collect_markers, apply_plan, apply_purge
from .requirements import ensure_requirements

__all__ = [
    "get_link_model_names",
    "collect_linked_instances",
    "collect_markers",
    "apply_plan",
    "apply_purge",
    "ensure_requirements",
]
