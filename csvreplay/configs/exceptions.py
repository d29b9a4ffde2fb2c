"""
Custom exceptions for the CSV replay library.

Hierarchy:
    ReplayError
    ├── SourceOpenError     The CSV path cannot be opened for reading.
    ├── SourceReadError     A line cannot be decoded in the configured encoding.
    ├── EmptySourceError    The file holds no header line (only comments/blanks).
    └── ConfigError         A configuration value is not recognised.

Everything else (short rows, non-numeric text, end of data) is treated as
data, not as an error.
"""


class ReplayError(Exception):
    """
    Base class for all replay errors.

    Args:
        message: Human-readable description of the failure.
        source_path: Path of the file being replayed when the error occurred.
    """

    def __init__(self, message: str, source_path: str | None = None) -> None:
        super().__init__(message)
        self.source_path = source_path

    def __str__(self) -> str:
        base = super().__str__()
        if self.source_path:
            return f"{base} | source={self.source_path}"
        return base


class SourceOpenError(ReplayError):
    """Raised at construction when the CSV path cannot be opened."""


class SourceReadError(ReplayError):
    """Raised when a line of the file cannot be decoded."""


class EmptySourceError(ReplayError):
    """
    Raised at construction when no header line exists.

    A file made only of comment lines and blank lines counts as empty.
    """


class ConfigError(ReplayError):
    """
    Raised when a configuration value is invalid.

    Args:
        message: Human-readable description.
        option: Name of the offending option.
        value: The rejected value.
    """

    def __init__(
        self,
        message: str,
        option: str | None = None,
        value: object = None,
    ) -> None:
        super().__init__(message)
        self.option = option
        self.value = value

    def __str__(self) -> str:
        base = super().__str__()
        if self.option:
            return f"{base} | option={self.option} value={self.value!r}"
        return base
