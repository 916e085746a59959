from abc import ABC


class UserError(ABC, Exception):
    """Base class for user-related errors.

    All errors that inherit from UserError will have their messages
    displayed to the user. These errors should not contain any
    sensitive information.
    """


class NotFoundError(UserError):
    """Raised when a requested resource is not found."""

    def __init__(self, message: str = "Document not found") -> None:
        super().__init__(message)


class AuthenticationError(UserError):
    """Raised when authentication fails."""

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message)


class AccessDeniedError(UserError):
    """Raised when a user tries to access a resource they do not have permission for."""


class ValidationError(UserError):
    """Raised when user input fails validation."""


class CounterError(Exception):
    """Base class for registration counter failures.

    These are not user errors: their messages may mention cache keys and
    are logged, while clients only get a generic retry message.
    """


class TransientCacheFault(CounterError):
    """Raised when an increment fails or returns a non-positive value; recovered by reinitializing."""


class CounterInitializationError(CounterError):
    """Raised when a counter value could not be written and read back from the cache."""


class RegistrationNumberExhaustedError(CounterError):
    """Raised when no unique registration number was found within the attempt budget."""

    def __init__(self, counter_type: str, attempts: int) -> None:
        super().__init__(f"Failed to generate unique {counter_type} registration number after {attempts} attempts")
        self.counter_type = counter_type
        self.attempts = attempts
