"""
InfoNode synchronization for Revit.

Keeps InfoNode marker instances in the host document in step with dRofus
host occurrences placed in linked models:

1. dRofus is the ONLY source of marker content
2. Linked model instances are the ONLY source of marker position
3. Markers without a matching linked host are purged

Modules:
- config: Field names, parameter names, tolerance and optional paths
- core.records: Occurrence / host / marker records and grouping
- core.reconcile: Create / move / update / delete planning
- core.report: Run summary and status
- drofus: Query builder, connection resolution and REST client
- revit: Link collection, marker application and project requirements
- sync: End-to-end run (run_infonode_sync)
- entry_dynamo: Dynamo / pyRevit entry point
"""

__version__ = "1.0.0"

from .config import Config

__all__ = ["Config"]
