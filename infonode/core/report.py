"""Run summary for the InfoNode sync."""

from .records import HostStatus

STATUS_SUCCEEDED = "succeeded"
STATUS_PARTIAL = "partially_succeeded"
STATUS_FAILED = "failed"


def _ids(ids):
    return ", ".join(str(i) for i in ids)


class SyncReport:
    """Counts and ids for one run.

    moved_ids is de-duplicated (a duplicated host can move the same marker
    several times in one run); created_ids keeps one entry per create.
    """

    def __init__(self, created_ids=None, moved_ids=None, updated_count=0, deleted_count=0,
                 delete_failures=0, duplicate_ids=None, status=None, reason=None):
        self.created_ids = list(created_ids or [])
        self.moved_ids = list(moved_ids or [])
        self.updated_count = int(updated_count)
        self.deleted_count = int(deleted_count)
        self.delete_failures = int(delete_failures)
        self.duplicate_ids = list(duplicate_ids or [])
        self.reason = reason
        if status is None:
            status = STATUS_PARTIAL if self.duplicate_ids else STATUS_SUCCEEDED
        self.status = status

    @classmethod
    def failed(cls, reason):
        return cls(status=STATUS_FAILED, reason=reason)

    @classmethod
    def from_hosts(cls, hosts, deleted_count, duplicate_ids, delete_failures=0):
        """Build the report from hosts whose status was set by plan_sync."""
        created = []
        moved = []
        updated = 0
        for h in hosts:
            if h.status is HostStatus.CREATED:
                created.append(h.occurrence_id)
            elif h.status is HostStatus.MOVED:
                if h.occurrence_id not in moved:
                    moved.append(h.occurrence_id)
            elif h.status is HostStatus.UPDATED:
                updated += 1
        return cls(
            created_ids=created,
            moved_ids=moved,
            updated_count=updated,
            deleted_count=deleted_count,
            delete_failures=delete_failures,
            duplicate_ids=duplicate_ids,
        )

    @property
    def created_count(self):
        return len(self.created_ids)

    @property
    def moved_count(self):
        return len(self.moved_ids)

    @property
    def ok(self):
        return self.status != STATUS_FAILED

    def summary_text(self):
        if self.status == STATUS_FAILED:
            return self.reason or "InfoNode sync failed"

        lines = []
        if self.duplicate_ids:
            lines.append("Duplicates detected!")
            lines.append(
                "These duplicates exist in one of the linked models and confuse the script, "
                "triggering move ops for each run"
            )
            lines.append("Here are the suspects: ({0})".format(_ids(self.duplicate_ids)))
            lines.append("")
            sep = []
        else:
            lines.append("Success!")
            lines.append("")
            sep = [""]

        lines.append("Created {0} Infonodes for these hosts: ({1})".format(self.created_count, _ids(self.created_ids)))
        lines.extend(sep)
        lines.append("Moved {0} Infonodes for these hosts: ({1})".format(self.moved_count, _ids(self.moved_ids)))
        lines.extend(sep)
        lines.append("Updated {0} Infonodes".format(self.updated_count))
        lines.extend(sep)
        lines.append("Deleted {0} Infonodes".format(self.deleted_count))
        if self.delete_failures:
            lines.append("Failed to delete {0} Infonodes marked for deletion".format(self.delete_failures))
        return "\n".join(lines)

    def to_dict(self):
        return {
            "status": self.status,
            "reason": self.reason,
            "created_count": self.created_count,
            "created_ids": list(self.created_ids),
            "moved_count": self.moved_count,
            "moved_ids": list(self.moved_ids),
            "updated_count": self.updated_count,
            "deleted_count": self.deleted_count,
            "delete_failures": self.delete_failures,
            "duplicate_ids": list(self.duplicate_ids),
        }

    def __repr__(self):
        return "SyncReport(status={0}, created={1}, moved={2}, updated={3}, deleted={4})".format(
            self.status, self.created_count, self.moved_count, self.updated_count, self.deleted_count
        )
