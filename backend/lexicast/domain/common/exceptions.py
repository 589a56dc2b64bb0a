"""
Domain layer exceptions.

These represent broken business rules and invariants. The HTTP layer
translates each kind into a status code; nothing here knows about HTTP.
"""


class DomainError(Exception):
    """
    Base exception for all domain errors.

    All domain exceptions inherit from this class so they can be caught and
    handled uniformly.
    """

    def __init__(self, message: str, details: dict[str, object] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - {self.details}"
        return self.message


class ValidationError(DomainError):
    """
    Raised when domain validation fails.

    Example: Empty email, negative episode number.
    """

    def __init__(self, message: str, field: str | None = None, value: object = None) -> None:
        details: dict[str, object] = {}
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = value
        super().__init__(message, details)
        self.field = field
        self.value = value


class EntityNotFoundError(DomainError):
    """
    Raised when an entity cannot be found.

    Example: Uploading audio for an episode id that doesn't exist.
    """

    def __init__(self, entity_type: str, entity_id: object) -> None:
        message = f"{entity_type} with id {entity_id} not found"
        super().__init__(message, {"entity_type": entity_type, "entity_id": entity_id})
        self.entity_type = entity_type
        self.entity_id = entity_id


class ConflictError(DomainError):
    """
    Raised when well-formed input collides with existing state.

    Example: Registering an email that is already taken.
    """


class BusinessRuleViolationError(DomainError):
    """
    Raised when a business rule is violated.

    Example: Moving an episode from Uploaded straight to Completed.
    """

    def __init__(self, rule: str, message: str | None = None) -> None:
        msg = message or f"Business rule violated: {rule}"
        super().__init__(msg, {"rule": rule})
        self.rule = rule


class AuthenticationError(DomainError):
    """
    Raised when the caller's identity cannot be established.

    Messages stay generic so responses never reveal which part was wrong.
    """


class AuthorizationError(DomainError):
    """
    Raised when an operation is not authorized.

    Example: A non-admin calling a podcast management operation.
    """

    def __init__(self, message: str = "Not authorized to perform this action") -> None:
        super().__init__(message)
