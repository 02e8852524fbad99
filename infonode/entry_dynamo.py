"""
Dynamo / pyRevit entry point for the InfoNode sync.

Usage in a Dynamo CPython3 node:
    import sys
    sys.path.append(r'C:\\path\\to\\infonode-sync')

    from infonode.entry_dynamo import run_from_dynamo

    # IN[0]: optional dict of Config overrides, e.g.
    #   {"field_host_model_name": "parent_occurrence_id_occurrence_data_17_11_11_10"}
    OUT = run_from_dynamo(IN[0] if len(IN) > 0 else None)

Usage in a pyRevit pushbutton script:
    from infonode.entry_dynamo import run_from_dynamo
    result = run_from_dynamo()
    print(result["summary"])
"""

import json

from .config import Config
from .core.diagnostics import Diagnostics
from .sync import run_infonode_sync


def get_current_document():
    """Get the active Revit document (Dynamo CPython3 or pyRevit / IronPython).

    Returns:
        Revit Document, or None when no model is open

    Raises:
        RuntimeError: If not running in a Revit host
    """
    # Dynamo
    try:
        from RevitServices.Persistence import DocumentManager
        return DocumentManager.Instance.CurrentDBDocument
    except ImportError:
        pass

    # pyRevit
    try:
        from pyrevit import revit
        return revit.doc
    except ImportError:
        pass

    raise RuntimeError(
        "Not running in Revit/Dynamo context. "
        "Pass the Document directly to run_infonode_sync()."
    )


def run_from_dynamo(config_input=None, doc=None, client=None, cancel=None):
    """Run one sync and return a JSON-safe result dict.

    Args:
        config_input: None, a Config, or a dict of Config overrides
        doc: Document (default: get_current_document())
        client: optional DrofusClient-like object
        cancel: optional callable returning True to abort

    Returns:
        {"status", "summary", "report", "run_info"}
    """
    if isinstance(config_input, Config):
        cfg = config_input
    else:
        cfg = Config.from_dict(config_input)

    if doc is None:
        doc = get_current_document()

    report, run_info = run_infonode_sync(doc, cfg, client=client, cancel=cancel, diag=Diagnostics())

    return {
        "status": report.status,
        "summary": report.summary_text(),
        "report": report.to_dict(),
        "run_info": run_info,
    }


def result_to_json(result, indent=2):
    """Serialize a run_from_dynamo result (non-JSON values rendered with str)."""
    return json.dumps(result, indent=indent, default=str)
