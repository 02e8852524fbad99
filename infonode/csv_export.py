"""CSV sync log for the InfoNode sync.

One row per run, appended to a shared file so marker churn (e.g. duplicates
moving markers every run) can be tracked over time.
"""

import csv
import os


def _log(level, msg):
    print("[{0}] infonode.csv_export: {1}".format(level, msg))


def get_sync_log_header():
    """Get header for the sync log CSV."""
    return [
        "Date", "RunId", "Document", "Status", "Created", "Moved", "Updated",
        "Deleted", "DeleteFailures", "Duplicates", "DuplicateIds", "ElapsedSec", "Reason",
    ]


def build_sync_log_row(report, run_info):
    """Build one CSV row from a SyncReport and the run_info dict of run_infonode_sync."""
    run_info = run_info or {}
    return [
        run_info.get("date", ""),
        run_info.get("run_id", ""),
        run_info.get("doc_title") or "",
        report.status,
        report.created_count,
        report.moved_count,
        report.updated_count,
        report.deleted_count,
        report.delete_failures,
        len(report.duplicate_ids),
        " ".join(str(i) for i in report.duplicate_ids),
        run_info.get("elapsed_sec", ""),
        (report.reason or "").replace("\n", " "),
    ]


def append_sync_log(path, report, run_info):
    """Append one row to path (header written when the file is new or empty).

    Write failures are logged and swallowed: the sync already committed.

    Returns:
        True when the row was written
    """
    write_header = not os.path.exists(path) or os.path.getsize(path) == 0
    try:
        folder = os.path.dirname(path)
        if folder and not os.path.isdir(folder):
            os.makedirs(folder)
        with open(path, "a", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            if write_header:
                writer.writerow(get_sync_log_header())
            writer.writerow(build_sync_log_row(report, run_info))
    except OSError as ex:
        _log("WARN", "failed to append to CSV '{0}': {1}".format(path, ex))
        return False
    _log("INFO", "appended 1 row to '{0}'".format(path))
    return True
