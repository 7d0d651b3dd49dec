"""
Confluence Table Renderer

Renders finalized computer groups as Atlassian Confluence wiki markup rows:

    || Nodes     || OS*  || App1 || TOTAL ||
    | *Current*  | 50    | 20    | 70     |
    | *Target*   | 100   | 50    | 150    |
    | *% Comp*   | *50*  | *40*  | *47*   |

Two styles are supported:
- aligned: every cell is padded to its column's widest cell and data cells get
  one extra space so the pipes of all rows line up (default)
- minimal: cells are separated by single spaces with no padding
"""

from typing import Dict, List, Sequence

from ..models.computer_group import ComputerGroup, format_number

HEADER_LABEL = "Nodes"
ROW_LABELS = {
    "current": "*Current*",
    "target": "*Target*",
    "percent": "*% Comp*",
}
DATE_LABEL = "Date"


def column_widths(rows: Sequence[Sequence[str]]) -> List[int]:
    """Width of the widest cell in each column."""
    if not rows:
        return []
    return [max(len(row[index]) for row in rows) for index in range(len(rows[0]))]


def pad_rows(rows: Sequence[Sequence[str]], widths: Sequence[int]) -> List[List[str]]:
    """Left-justify every cell to its column width."""
    return [[cell.ljust(width) for cell, width in zip(row, widths)] for row in rows]


class TableRenderer:
    """Formats computer groups and raw totals as Confluence table text."""

    def __init__(self, style: str = "aligned"):
        self.style = style

    def build_rows(self, groups: Sequence[ComputerGroup]) -> List[List[str]]:
        """Unpadded cell grid: header row, then current, target and percent rows."""
        cells = [group.cells() for group in groups]
        rows = [[HEADER_LABEL] + [cell["name"] for cell in cells]]
        for key, label in ROW_LABELS.items():
            rows.append([label] + [cell[key] for cell in cells])
        return rows

    def _join_header(self, cells: Sequence[str]) -> str:
        if self.style == "minimal":
            return "|| " + " || ".join(cells) + " ||"
        return "||" + "||".join(f" {cell} " for cell in cells) + "||"

    def _join_data(self, cells: Sequence[str]) -> str:
        if self.style == "minimal":
            return "| " + " | ".join(cells) + " |"
        return "|" + "|".join(f" {cell}  " for cell in cells) + "|"

    def render_rows(self, rows: Sequence[Sequence[str]]) -> List[str]:
        """Render a cell grid whose first row is the header."""
        if not rows:
            return []
        if self.style == "aligned":
            rows = pad_rows(rows, column_widths(rows))
        return [self._join_header(rows[0])] + [self._join_data(row) for row in rows[1:]]

    def render(self, groups: Sequence[ComputerGroup]) -> List[str]:
        """
        Render the finalized groups as four table lines.

        Args:
            groups: Finalized groups, normally ending with the TOTAL group

        Returns:
            Header, current, target and percent lines
        """
        return self.render_rows(self.build_rows(groups))

    def render_raw(self, date: str, counts: Dict[str, int]) -> List[str]:
        """
        Render the unmerged raw totals as a two-line block keyed by report date.

        Returns:
            Header line of group names and a data line of counts
        """
        rows = [
            [DATE_LABEL] + list(counts),
            [date] + [format_number(count) for count in counts.values()],
        ]
        return self.render_rows(rows)
