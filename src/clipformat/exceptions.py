"""Clipformat exception hierarchy.

Provides structured exceptions for error handling throughout the codebase.
All exceptions inherit from ClipformatError for easy catching.

Construction errors are raised while a pipeline is being assembled so that
a misconfigured recognizer never reaches dispatch. Recognition failures at
dispatch time are never raised to the caller; the registry logs them and
treats the recognizer as not matching.
"""

from __future__ import annotations


class ClipformatError(Exception):
    """Base exception for all Clipformat errors.

    Attributes:
        message: Human-readable error description.
        code: Machine-readable error code.
    """

    code: str = "clipformat_error"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def to_dict(self) -> dict[str, object]:
        """Convert exception to a serializable dictionary."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
            }
        }


class ConfigurationError(ClipformatError):
    """Configuration error.

    Raised when required configuration is missing or invalid.
    """

    code: str = "configuration_error"


class ConstructionError(ClipformatError):
    """A recognizer or pipeline could not be assembled.

    Subclasses identify the specific assembly problem.
    """

    code: str = "construction_error"


class InvalidRecognizerSpecError(ConstructionError):
    """A recognizer specification is malformed.

    Attributes:
        recognizer_id: Id of the offending spec, if it had one.
    """

    code: str = "invalid_recognizer_spec"

    def __init__(self, recognizer_id: str | None, message: str) -> None:
        self.recognizer_id = recognizer_id
        label = recognizer_id or "<unnamed>"
        super().__init__(f"{label}: {message}")

    def to_dict(self) -> dict[str, object]:
        """Convert exception to a serializable dictionary."""
        return {
            "error": {
                "code": self.code,
                "recognizer_id": self.recognizer_id,
                "message": self.message,
            }
        }


class MissingDependencyError(ConstructionError):
    """A recognizer declared capabilities that were not supplied.

    Attributes:
        recognizer_id: Id of the recognizer being constructed.
        missing: Names of the absent capabilities.
    """

    code: str = "missing_dependency"

    def __init__(self, recognizer_id: str, missing: list[str]) -> None:
        self.recognizer_id = recognizer_id
        self.missing = list(missing)
        names = ", ".join(self.missing)
        super().__init__(f"{recognizer_id}: missing required dependency: {names}")

    def to_dict(self) -> dict[str, object]:
        """Convert exception to a serializable dictionary."""
        return {
            "error": {
                "code": self.code,
                "recognizer_id": self.recognizer_id,
                "missing": self.missing,
                "message": self.message,
            }
        }


class DuplicateRecognizerError(ConstructionError):
    """A recognizer with the same id is already registered."""

    code: str = "duplicate_recognizer"

    def __init__(self, recognizer_id: str) -> None:
        self.recognizer_id = recognizer_id
        super().__init__(f"Recognizer already registered: {recognizer_id}")


class RegistryFinalizedError(ConstructionError):
    """The registry was finalized and no longer accepts recognizers."""

    code: str = "registry_finalized"
