from dataclasses import dataclass
from typing import Any, Dict, Optional


def percent_complete(current: int, target: int) -> int:
    """
    Percentage of the target reached, or 0 when no target is known.

    Halves round up (1 of 8 is 13%), using integer arithmetic so exact
    halves are never lost to float error.
    """
    if target != 0:
        return (200 * current + target) // (2 * target)
    return 0


def format_number(number: int) -> str:
    """Format a count with a comma every three digits (12345 -> '12,345')."""
    return f"{number:,}"


@dataclass
class ComputerGroup:
    """
    Deployment counts for a single BigFix computer group.

    Attributes:
        name: Group name as it appears in the report and target file
        current: Number of endpoints currently reporting in the group
        target: Expected number of endpoints (0 means no target is known)
        display_name: Name shown in the table header when it differs from
                      ``name`` (e.g. ``OS*`` for a root that absorbs aliases)
    """
    name: str
    current: int = 0
    target: int = 0
    display_name: Optional[str] = None

    @property
    def label(self) -> str:
        return self.display_name if self.display_name else self.name

    @property
    def percent(self) -> int:
        return percent_complete(self.current, self.target)

    def cells(self) -> Dict[str, str]:
        """
        Text for each of the four table rows, before any padding.

        Returns:
            Dictionary with 'name', 'current', 'target' and 'percent' keys.
            The percent cell is wrapped in Confluence bold markup.
        """
        return {
            "name": self.label,
            "current": format_number(self.current),
            "target": format_number(self.target),
            "percent": f"*{format_number(self.percent)}*",
        }

    def widest(self) -> int:
        """Natural width of this group's column."""
        return max(len(cell) for cell in self.cells().values())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "Group": self.label,
            "Current": self.current,
            "Target": self.target,
            "Percent": self.percent,
        }
