import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, List, Optional, Union

from ..exceptions import ParseError, ReportIOError

logger = logging.getLogger(__name__)


def parse_count(text: str, source: Optional[str] = None, line_number: Optional[int] = None) -> int:
    """
    Parse an unsigned integer count.

    Args:
        text: Raw field text, surrounding whitespace is ignored
        source: File name used in the error message
        line_number: 1-based line number used in the error message

    Returns:
        The parsed count

    Raises:
        ParseError: If the field is empty or contains anything but ASCII digits
    """
    value = text.strip()
    if not value or not (value.isascii() and value.isdigit()):
        raise ParseError(
            f"'{value}' is not a valid count",
            source=source,
            line_number=line_number,
            value=value,
        )
    return int(value)


class BaseFileAdapter(ABC):
    """Abstract base class for adapters reading BigFix export files."""

    def __init__(self):
        self.errors: List[ParseError] = []

    def read_lines(self, filename: Union[str, Path]) -> List[str]:
        """
        Read a whole file into a list of lines without line terminators.

        Raises:
            ReportIOError: If the file cannot be opened or read
        """
        try:
            with open(filename, "r", encoding="utf-8", errors="replace") as fh:
                lines = fh.read().splitlines()
        except OSError as e:
            logger.debug(f"Failed to read {filename}: {e}")
            raise ReportIOError(str(filename)) from e
        logger.debug(f"Read {len(lines)} lines from {filename}")
        return lines

    def record_error(self, error: ParseError) -> None:
        """Log a recoverable parse problem and keep it for the caller."""
        logger.warning(str(error))
        self.errors.append(error)

    @abstractmethod
    def load_file(self, filename: Union[str, Path]) -> List[Any]:
        """Load and parse an entire file."""
        pass
