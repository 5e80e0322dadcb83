"""Exception hierarchy for recordsync"""


class RecordSyncError(Exception):
    """Base class for all recordsync errors"""
    pass


class RecordNotFoundError(RecordSyncError):
    """Raised when a record or record type id does not exist"""

    def __init__(self, kind: str, record_id: str):
        super().__init__(f"{kind} not found: {record_id}")
        self.kind = kind
        self.record_id = record_id


class RecordValidationError(RecordSyncError):
    """Raised when a create/update payload is rejected"""
    pass


class SeedFileError(RecordSyncError):
    """Raised when a seed file is missing or invalid"""
    pass
