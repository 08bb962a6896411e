"""Custom exception hierarchy for ScriptDesk with helpful error messages."""

from __future__ import annotations

from typing import Any


class ScriptDeskError(Exception):
    """Base exception with helpful formatting for all ScriptDesk errors.

    Provides structured error messages with hints and details to help users
    understand and fix problems.
    """

    def __init__(
        self,
        message: str,
        hint: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize exception with structured error information.

        Args:
            message: Primary error message describing what went wrong
            hint: Optional hint suggesting how to fix the problem
            details: Optional dictionary with additional debugging information
        """
        self.message = message
        self.hint = hint
        self.details = details
        super().__init__(self.format_error())

    def format_error(self) -> str:
        """Format the error message with hint and details.

        Returns:
            Formatted error string with all available information
        """
        output = f"Error: {self.message}"
        if self.hint:
            output += f"\nHint: {self.hint}"
        if self.details:
            details_str = "\n".join(
                f"  {key}: {value}" for key, value in self.details.items()
            )
            output += f"\nDetails:\n{details_str}"
        return output


class ConfigurationError(ScriptDeskError):
    """Configuration errors including invalid settings and missing config files."""

    pass


class PersistenceError(ScriptDeskError):
    """Raised by persistence adapters when a document could not be stored."""

    def __init__(
        self,
        message: str,
        element_count: int | None = None,
        original_error: Exception | None = None,
    ) -> None:
        """Initialize persistence error.

        Args:
            message: Error message
            element_count: Number of elements in the rejected document
            original_error: The storage exception that caused this error
        """
        self.element_count = element_count
        self.original_error = original_error

        details: dict[str, Any] = {}
        if element_count is not None:
            details["element_count"] = element_count
        if original_error:
            details["original_error"] = (
                f"{type(original_error).__name__}: {original_error}"
            )

        super().__init__(
            message=message,
            hint="The in-memory document is unchanged; retry the save later",
            details=details or None,
        )


class SuggestionIndexError(ScriptDeskError):
    """SmartType index errors such as corrupt imported data."""

    pass


class ScriptDeskFileNotFoundError(ScriptDeskError):
    """File not found errors with helpful path information."""

    pass


def check_config_keys(config: dict[str, Any]) -> None:
    """Check for common configuration mistakes.

    Args:
        config: Configuration dictionary to validate

    Raises:
        ConfigurationError: With hints about correct configuration keys
    """
    wrong_keys = {
        "debounce_ms": "suggestion_debounce_ms",
        "autosave_ms": "persistence_debounce_ms",
        "limit": "suggestion_limit",
    }

    for wrong, correct in wrong_keys.items():
        if wrong in config:
            raise ConfigurationError(
                message=f"Invalid configuration key '{wrong}'",
                hint=f"Use '{correct}' instead of '{wrong}'",
                details={
                    "found_keys": list(config.keys()),
                    "invalid_key": wrong,
                    "correct_key": correct,
                },
            )
