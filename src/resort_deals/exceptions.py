"""Domain exceptions raised by services and repositories.

Services raise these to signal business-rule violations; repositories raise
RepositoryUnavailableError when the database cannot serve a query.
Exception handlers in main.py translate them into the standard
error envelope: {"error": {"code": "...", "message": "..."}}.

A window or resort with no eligible deal is not an error. It shows up as
``None`` in service results and ``null`` in responses.
"""


class DomainError(Exception):
    """Base class for all domain exceptions."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InvalidParameterError(DomainError):
    """Raised when request parameters are missing or semantically invalid.

    Always raised before any repository call, so a rejected request never
    touches the database.
    """


class NotFoundError(DomainError):
    """Raised when a requested entity does not exist."""

    def __init__(self, entity: str, identifier: object) -> None:
        self.entity = entity
        self.identifier = identifier
        super().__init__(f"{entity} with id {identifier} not found")


class ConflictError(DomainError):
    """Raised when an operation conflicts with existing state (e.g. stale version)."""


class RepositoryUnavailableError(DomainError):
    """Raised when the deal repository or calendar cache cannot be reached."""

    def __init__(self, operation: str, cause: Exception | None = None) -> None:
        self.operation = operation
        self.cause = cause
        super().__init__(f"Repository unavailable during {operation}")
