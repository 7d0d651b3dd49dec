"""
BigFix Report Adapter

Scans BigFix HTML deployment reports for computer group counts.

The scanner does not parse HTML. It looks for lines beginning with a record
marker (``<tr>`` by default) and pulls alternating group name / count values
out of the cell delimiters (``<td>`` and ``</td>``) on that line:

    <tr><td>OS</td><td>40</td></tr><tr><td>App1</td><td>20</td></tr>

yields ``[("OS", 40), ("App1", 20)]``.
"""

import logging
from pathlib import Path
from typing import Iterable, List, Optional, Tuple, Union

from ..exceptions import ParseError
from .base_file_adapter import BaseFileAdapter, parse_count

logger = logging.getLogger(__name__)

Record = Tuple[str, int]


def extract_report_date(filename: Union[str, Path], width: int = 8) -> str:
    """
    Extract the date tag from the end of a report file name.

    Reports are saved as ``<anything><date>.<ext>``, e.g.
    ``deploy_20141015.html`` gives ``20141015``.

    Args:
        filename: Report file name or path
        width: Number of trailing stem characters holding the date

    Returns:
        The trailing ``width`` characters of the file stem, or the whole stem
        when it is shorter
    """
    stem = Path(filename).stem
    return stem[-width:]


class RecordScanner(BaseFileAdapter):
    """
    Extracts ordered (group name, count) pairs from report lines.

    Pairs are scanned left to right without overlap. A start marker without a
    matching end marker ends extraction for that line silently. A count that is
    not an unsigned integer is logged and only that pair is skipped.
    """

    def __init__(
        self,
        record_marker: str = "<tr>",
        start_marker: str = "<td>",
        end_marker: str = "</td>",
    ):
        super().__init__()
        self.record_marker = record_marker
        self.start_marker = start_marker
        self.end_marker = end_marker

    def _next_cell(self, line: str, position: int) -> Optional[Tuple[str, int]]:
        """Return the next delimited cell text and the index just past it."""
        start = line.find(self.start_marker, position)
        if start == -1:
            return None
        start += len(self.start_marker)
        end = line.find(self.end_marker, start)
        if end == -1:
            return None
        return line[start:end], end + len(self.end_marker)

    def scan_line(
        self, line: str, source: Optional[str] = None, line_number: Optional[int] = None
    ) -> List[Record]:
        """
        Extract the (name, count) pairs from a single line.

        Lines that do not begin with the record marker yield nothing.
        """
        if not line.startswith(self.record_marker):
            return []

        records = []
        position = 0
        while True:
            name_cell = self._next_cell(line, position)
            if name_cell is None:
                break
            name, position = name_cell
            count_cell = self._next_cell(line, position)
            if count_cell is None:
                break
            raw_count, position = count_cell
            try:
                count = parse_count(raw_count, source=source, line_number=line_number)
            except ParseError as e:
                self.record_error(e)
                continue
            records.append((name.strip(), count))
        return records

    def scan(self, lines: Iterable[str], source: Optional[str] = None) -> List[Record]:
        """Extract every (name, count) pair from a sequence of lines, in order."""
        records = []
        for line_number, line in enumerate(lines, start=1):
            records.extend(self.scan_line(line, source=source, line_number=line_number))
        return records

    def load_file(self, filename: Union[str, Path]) -> List[Record]:
        """
        Scan a whole report file.

        Raises:
            ReportIOError: If the report cannot be opened
        """
        records = self.scan(self.read_lines(filename), source=str(filename))
        logger.info(
            f"Scanned {len(records)} records marked '{self.record_marker}' from {filename}"
        )
        return records
