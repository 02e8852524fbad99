# infonode/revit/safe_api.py

from typing import Any, Callable, Dict, Optional, TypeVar

T = TypeVar("T")


def safe_call(
    diag: Any,
    *,
    phase: str,
    callsite: str,
    fn: Callable[[], T],
    default: T,
    context: Optional[Dict[str, Any]] = None,
    policy: str = "default",  # "default" | "raise"
) -> T:
    """
    Run fn() against the Revit API, recording any failure to diagnostics.

    Used at read seams (parameter lookups, link documents, locations) where one
    bad element must not abort the sync.

    policy:
      - "default": record error, return default
      - "raise":   record error, then re-raise
    """
    try:
        return fn()
    except Exception as e:
        ctx = context or {}
        if diag is not None:
            try:
                diag.error(
                    phase,
                    callsite,
                    "Revit API call failed",
                    exc=e,
                    elem_id=ctx.get("elem_id"),
                    host_id=ctx.get("host_id"),
                    link=ctx.get("link"),
                    extra=ctx,
                )
            except Exception:
                # Diagnostics must never crash the sync
                pass
        if policy == "raise":
            raise
        return default
