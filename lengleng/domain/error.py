"""Domain layer errors."""


class DomainError(Exception):
    """Base domain error."""

    pass


class ValidationError(DomainError):
    """Domain validation error."""

    pass


class BusinessRuleViolationError(DomainError):
    """Business rule violation error."""

    pass


class InvalidContactError(ValidationError):
    """Raised when the invite recipient cannot be contacted.

    Never retried automatically; the caller has to fix the input.
    """

    def __init__(self, phone_number: str, reason: str):
        self.phone_number = phone_number
        self.reason = reason
        super().__init__(f"Invalid contact {phone_number!r}: {reason}")


class NoInvitesRemainingError(BusinessRuleViolationError):
    """Raised when the sender has no invite quota left."""

    def __init__(self, user_id: str):
        self.user_id = user_id
        super().__init__(f"User {user_id} has no invites remaining")


class SendFailedError(DomainError):
    """Raised when delivery or persistence fails after validation.

    Any reserved quota has already been credited back when this is raised.
    """

    def __init__(self, user_id: str, reason: str):
        self.user_id = user_id
        self.reason = reason
        super().__init__(f"Sending invite for user {user_id} failed: {reason}")


class ConcurrentModificationError(DomainError):
    """Raised when a compare-and-swap keeps losing against concurrent writers."""

    def __init__(self, resource: str, identifier: str, attempts: int):
        self.resource = resource
        self.identifier = identifier
        self.attempts = attempts
        super().__init__(
            f"{resource} {identifier} modified concurrently ({attempts} attempts)"
        )


class NotFoundError(DomainError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")
