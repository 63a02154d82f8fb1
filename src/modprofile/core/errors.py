"""
Error taxonomy for the mod-profile core.

Every operation in the core either completes or raises one of these
exceptions before touching any state.
"""

from typing import Optional


class ModProfileError(Exception):
    """Base class for all errors raised by the core."""


class SchemaError(ModProfileError):
    """
    A persisted record could not be understood.

    Raised for unknown or malformed version tags and for documents whose
    structure does not match the version they claim. The record must not be
    used; the caller decides between starting fresh and restoring a backup.
    """

    def __init__(self, message: str, version: Optional[object] = None):
        super().__init__(message)
        self.version = version


class DuplicateName(ModProfileError):
    """A folder, profile or mod name is already taken."""

    def __init__(self, kind: str, name: str):
        super().__init__(f"A {kind} named '{name}' already exists")
        self.kind = kind
        self.name = name


class NotFound(ModProfileError):
    """A referenced folder, profile or mod does not exist."""

    def __init__(self, kind: str, name: str):
        super().__init__(f"No {kind} named '{name}'")
        self.kind = kind
        self.name = name


class InvalidName(ModProfileError, ValueError):
    """A proposed folder or profile name is empty."""


class LastProfileError(ModProfileError):
    """Attempted to remove the only remaining profile."""


class InvariantError(ModProfileError):
    """The model violates one or more structural invariants."""

    def __init__(self, violations: list[str]):
        super().__init__("; ".join(violations))
        self.violations = violations
