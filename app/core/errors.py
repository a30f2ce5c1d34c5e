"""Domain errors raised by the services and mapped to HTTP responses in main."""


class ProgressTrackerError(Exception):
    """Base class for all domain errors."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ProgressTrackerError):
    """Empty required field or a non-numeric required number. Nothing was written."""

    status_code = 422


class NotFoundError(ProgressTrackerError):
    """A referenced row no longer exists; the caller should refresh its view."""

    status_code = 404

    def __init__(self, entity: str, entity_id):
        super().__init__(f"{entity} not found: {entity_id}")
        self.entity = entity
        self.entity_id = entity_id


class StorageError(ProgressTrackerError):
    """The remote store failed. Carries the underlying cause message; never retried."""

    status_code = 503


class IntegrityError(ProgressTrackerError):
    """A dependent row blocked a write. Indicates a missed cascade, i.e. a bug."""

    status_code = 500
