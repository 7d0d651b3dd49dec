from typing import Optional


class BigFixStatsError(Exception):
    """Base exception for BigFix statistics errors."""
    pass


class ReportIOError(BigFixStatsError):
    """Raised when a report or target file cannot be opened."""

    def __init__(self, filename: str):
        self.filename = filename
        super().__init__(f"could not open file `{filename}`")


class ParseError(BigFixStatsError):
    """Raised when a count or target field is not an unsigned integer."""

    def __init__(
        self,
        message: str,
        source: Optional[str] = None,
        line_number: Optional[int] = None,
        value: Optional[str] = None,
    ):
        self.source = source
        self.line_number = line_number
        self.value = value
        location = ""
        if source is not None:
            location = f"{source}:{line_number}: " if line_number else f"{source}: "
        super().__init__(f"{location}{message}")


class UsageError(BigFixStatsError):
    """Raised when command-line flags are missing or conflicting."""

    def __init__(self, message: str, flag: Optional[str] = None):
        self.flag = flag
        super().__init__(message)


class NoInputDataError(BigFixStatsError):
    """Raised when no report data could be loaded at all."""
    pass
