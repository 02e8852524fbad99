"""
InfoNode sync - Thin Runner for Dynamo

Paste into a Dynamo Python node. Reloads the package on every run so code
edits are picked up without restarting Revit.

Inputs:
    IN[0] = optional dict of Config overrides
    IN[1] = optional CSV log path

Output:
    Summary string followed by the report as JSON
"""

import sys

# Add project to path
PROJECT_PATH = r'C:\Tools\infonode-sync'
if PROJECT_PATH not in sys.path:
    sys.path.insert(0, PROJECT_PATH)

RELOAD_MODULES = True

if RELOAD_MODULES:
    for mod in [key for key in sys.modules.keys() if key.startswith('infonode')]:
        del sys.modules[mod]

from infonode.entry_dynamo import run_from_dynamo, result_to_json

overrides = dict(IN[0]) if len(IN) > 0 and IN[0] else {}
if len(IN) > 1 and IN[1]:
    overrides["csv_log_path"] = IN[1]

result = run_from_dynamo(overrides)
OUT = result["summary"] + "\n\n" + result_to_json(result["report"])
