"""
Domain exceptions for catalog and relationship mutations.
"""


class ValidationFailure(Exception):
    """Raised when a mutation cannot be applied as requested."""

    error_code = 'VALIDATION_ERROR'
    status_code = 400

    def __init__(self, message: str):
        self.message = message
        super().__init__(f"{self.error_code}: {message}")


class EntityNotFound(ValidationFailure):
    """Raised when an update, delete or link targets a row that does not exist."""

    error_code = 'NOT_FOUND'
    status_code = 404

    def __init__(self, kind: str, entity_id):
        self.kind = kind
        self.entity_id = entity_id
        super().__init__(f"{kind} {entity_id} does not exist")


class CascadeDeleteError(Exception):
    """Raised when a cascading delete aborted; nothing was deleted."""

    error_code = 'CASCADE_FAILED'
    status_code = 409

    def __init__(self, kind: str, entity_id, reason: str):
        self.kind = kind
        self.entity_id = entity_id
        self.message = f"Deleting {kind} {entity_id} was aborted: {reason}"
        super().__init__(f"{self.error_code}: {self.message}")
