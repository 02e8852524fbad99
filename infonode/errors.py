"""Exception types raised across the InfoNode sync."""


class InfoNodeError(Exception):
    """Base class for all InfoNode sync errors."""


class RequirementError(InfoNodeError):
    """The host document is missing the family, parameters or links the sync needs."""


class DrofusError(InfoNodeError):
    """Base class for dRofus data service errors."""


class ConnectionConfigError(DrofusError):
    """Server / database / project could not be resolved."""

    def __init__(self, missing):
        self.missing = list(missing)
        super().__init__(
            "dRofus connection not configured; missing: {0}".format(", ".join(self.missing))
        )


class CredentialError(DrofusError):
    """No stored credentials for the dRofus server."""


class DrofusApiError(DrofusError):
    """The data service returned an error or an unexpected payload."""

    def __init__(self, message, status_code=None):
        self.status_code = status_code
        super().__init__(message)


class SyncCancelled(InfoNodeError):
    """The caller cancelled the run; the open transaction was rolled back."""
