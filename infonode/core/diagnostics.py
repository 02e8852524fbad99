# infonode/core/diagnostics.py

def _exc_to_str(e):
    try:
        return str(e)
    except Exception:
        return "<unstringifiable exception>"


class Diagnostics(object):
    """
    Structured diagnostics recorder for one sync run.

    - Bounded event storage (counts keep growing after the cap)
    - Aggregated counts keyed by level|phase|callsite|exc_type
    - JSON-safe output (Revit objects never stored, only ids / labels)
    """

    def __init__(self, max_events=200):
        self.max_events = int(max_events)
        self.events = []
        self.counts = {}
        self.dropped_events = 0

    def _record(self, level, phase, callsite, message, exc=None,
                elem_id=None, host_id=None, link=None, extra=None):
        exc_type = type(exc).__name__ if exc is not None else None
        key = "{}|{}|{}|{}".format(level, phase, callsite, exc_type or "")
        self.counts[key] = self.counts.get(key, 0) + 1

        if len(self.events) >= self.max_events:
            self.dropped_events += 1
            return

        self.events.append({
            "level": level,
            "phase": phase,
            "callsite": callsite,
            "message": message,
            "exc_type": exc_type,
            "exc_message": _exc_to_str(exc) if exc is not None else None,
            "elem_id": elem_id,
            "host_id": host_id,
            "link": link,
            "extra": extra or {},
        })

    def info(self, phase, callsite, message, elem_id=None, host_id=None, link=None, extra=None):
        self._record("INFO", phase, callsite, message,
                     elem_id=elem_id, host_id=host_id, link=link, extra=extra)

    def warn(self, phase, callsite, message, elem_id=None, host_id=None, link=None, extra=None):
        self._record("WARN", phase, callsite, message,
                     elem_id=elem_id, host_id=host_id, link=link, extra=extra)

    def error(self, phase, callsite, message, exc=None, elem_id=None, host_id=None, link=None, extra=None):
        self._record("ERROR", phase, callsite, message, exc=exc,
                     elem_id=elem_id, host_id=host_id, link=link, extra=extra)

    def count(self, level):
        """Total recorded events of one level (including dropped ones)."""
        prefix = level + "|"
        return sum(n for k, n in self.counts.items() if k.startswith(prefix))

    def to_dict(self):
        return {
            "max_events": self.max_events,
            "num_events": len(self.events),
            "dropped_events": self.dropped_events,
            "counts": dict(self.counts),
            "events": list(self.events),
        }
