"""
Installer error hierarchy with categorization and user guidance.

Configuration problems are collected as ValidationError values and reported
together through ConfigurationError. Structural misuse of the patching API
is reported through PreconditionError.
"""

from collections.abc import Sequence


class InstallerError(Exception):
    """
    Base error class for all installer-related exceptions.

    Provides categorization and user guidance for resolution.
    """

    def __init__(
        self,
        message: str,
        category: str,
        user_action: str | None = None,
    ):
        """
        Initialize installer error.

        Args:
            message: Human-readable error description
            category: Error category (validation, configuration, precondition)
            user_action: What user should do to resolve the issue
        """
        super().__init__(message)
        self.category = category
        self.user_action = user_action

    def __str__(self) -> str:
        """Enhanced string representation with user guidance."""
        base_msg = super().__str__()
        if self.user_action:
            return f"{base_msg}\nAction required: {self.user_action}"
        return base_msg


class ValidationError(InstallerError):
    """A single violated configuration rule."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message=message, category="validation")
        self.field = field

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ValidationError):
            return NotImplemented
        return (self.message, self.field) == (other.message, other.field)

    def __hash__(self) -> int:
        return hash((self.message, self.field))

    def __repr__(self) -> str:
        return f"ValidationError({self.message!r}, field={self.field!r})"

    @property
    def message(self) -> str:
        return self.args[0]


class ConfigurationError(InstallerError):
    """Raised when option validation produced one or more errors."""

    def __init__(
        self, errors: Sequence[ValidationError], user_action: str | None = None
    ):
        self.errors = list(errors)
        lines = "\n".join(f"  - {error.message}" for error in self.errors)
        super().__init__(
            message=f"{len(self.errors)} configuration error(s):\n{lines}",
            category="configuration",
            user_action=user_action
            or "Correct the azure.* flags and environment, then retry",
        )


class PreconditionError(InstallerError):
    """Caller passed a structurally unusable object."""

    def __init__(self, message: str, user_action: str | None = None):
        super().__init__(
            message=message,
            category="precondition",
            user_action=user_action
            or "Provide a deployment whose pod template defines a container",
        )
