"""Base exception classes for the lodge_admin domain layer."""


class LodgeAdminError(Exception):
    """Base exception for all domain errors.

    All domain-specific exceptions MUST inherit from this class.
    This enables consistent error handling across the application, where
    every LodgeAdminError is converted into a failed Result.
    """

    def __init__(self, message: str = "") -> None:
        """Initialize the exception with an optional message.

        Args:
            message: Human-readable error description.
        """
        super().__init__(message)
