"""Error types raised while setting up ABL initial conditions.

Every error here is fatal: initialization runs once before time stepping, so
nothing is retried and no partially built initializer is handed back.

Example:
    try:
        init = ABLFieldInit(config)
    except TimetableUnavailableError as e:
        print(f"Cannot read velocity timetable {e.path}")
"""

from __future__ import annotations


class ABLInitError(Exception):
    """Base class for all ABL field initialization errors."""

    pass


class ConfigValidationError(ABLInitError):
    """Raised when the configuration snapshot is invalid or inconsistent.

    Attributes:
        parameters: Names of the offending configuration keys.
        reason: Why the configuration is invalid.
    """

    def __init__(self, parameters: str | tuple[str, ...], reason: str):
        if isinstance(parameters, str):
            parameters = (parameters,)
        self.parameters = tuple(parameters)
        self.reason = reason
        keys = ", ".join(f"'{p}'" for p in self.parameters)
        super().__init__(f"Invalid configuration for {keys}: {reason}")


class TimetableUnavailableError(ABLInitError):
    """Raised when the velocity timetable file is missing or unreadable.

    Attributes:
        path: The timetable path that was requested.
        reason: What went wrong (optional).
    """

    def __init__(self, path: str, reason: str | None = None):
        self.path = str(path)
        self.reason = reason
        message = f"Cannot find input file: {self.path}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)
