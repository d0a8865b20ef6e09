"""Domain errors raised by the service layer and mapped to HTTP responses by the API."""


class MarineOpsError(Exception):
    """Base class for expected business errors."""

    status_code = 400

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class NotFoundError(MarineOpsError):
    """A referenced record does not exist."""

    status_code = 404

    @classmethod
    def for_entity(cls, entity: str, entity_id) -> "NotFoundError":
        return cls(f"{entity} {entity_id} not found")


class ConflictError(MarineOpsError):
    """The operation clashes with the current state of a record."""

    status_code = 409


class DomainValidationError(MarineOpsError):
    """Input is well-formed but violates a business rule."""

    status_code = 422
