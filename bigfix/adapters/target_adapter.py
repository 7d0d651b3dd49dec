import logging
from pathlib import Path
from typing import Iterable, List, Optional, Union

from ..exceptions import ParseError
from ..models.computer_group import ComputerGroup
from .base_file_adapter import BaseFileAdapter, parse_count

logger = logging.getLogger(__name__)


class TargetLoader(BaseFileAdapter):
    """
    Loads computer group targets from a delimiter-separated file.

    Each line is ``<name><delimiter><target>``. The line is split on the first
    delimiter only, so everything after it must be the target count.
    """

    def __init__(self, delimiter: str = ","):
        super().__init__()
        self.delimiter = delimiter

    def parse_line(
        self, line: str, source: Optional[str] = None, line_number: Optional[int] = None
    ) -> ComputerGroup:
        """
        Parse one target line into a ComputerGroup with ``current`` set to 0.

        Raises:
            ParseError: If the delimiter is missing or the target is not numeric
        """
        name, sep, target = line.partition(self.delimiter)
        if not sep:
            raise ParseError(
                f"missing '{self.delimiter}' between group name and target",
                source=source,
                line_number=line_number,
                value=line,
            )
        name = name.strip()
        if not name:
            raise ParseError(
                "empty computer group name",
                source=source,
                line_number=line_number,
                value=line,
            )
        return ComputerGroup(name, target=parse_count(target, source, line_number))

    def load_lines(self, lines: Iterable[str], source: Optional[str] = None) -> List[ComputerGroup]:
        """Parse target lines, skipping blank lines and logging malformed ones."""
        groups = []
        for line_number, line in enumerate(lines, start=1):
            if not line.strip():
                continue
            try:
                groups.append(self.parse_line(line, source=source, line_number=line_number))
            except ParseError as e:
                self.record_error(e)
        return groups

    def load_file(self, filename: Union[str, Path]) -> List[ComputerGroup]:
        """
        Load every target from a file.

        Raises:
            ReportIOError: If the file cannot be opened
        """
        groups = self.load_lines(self.read_lines(filename), source=str(filename))
        logger.info(f"Loaded {len(groups)} computer group targets from {filename}")
        return groups
