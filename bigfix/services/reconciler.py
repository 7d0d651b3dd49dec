"""
Group Reconciliation Service

Merges target counts with the counts scanned from a BigFix report into one
finalized, ordered set of computer groups.

Rules applied, in order:
- Target file groups keep their file order; groups only seen in the report
  are appended in scan order with a target of 0
- Each group's current count is set (never accumulated) from the last scanned
  value for its name, or 0 when the report does not mention it
- Alias satellites are folded into their root: root.current is set to the
  root's own scanned count plus every satellite's scanned count, and the
  satellites are dropped from the finalized set. A satellite target, if
  any, is added to the root target
- A synthesized TOTAL group summing the finalized current and target counts
  is always appended last
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Set, Tuple

import pandas as pd

from ..models.computer_group import ComputerGroup

logger = logging.getLogger(__name__)

Record = Tuple[str, int]


@dataclass
class ReconciliationResult:
    """Finalized groups (TOTAL last) plus the optional unmerged raw totals."""
    groups: List[ComputerGroup]
    raw_counts: Dict[str, int] = field(default_factory=dict)
    raw_date: Optional[str] = None

    @property
    def total(self) -> ComputerGroup:
        return self.groups[-1]

    @property
    def has_raw_totals(self) -> bool:
        return self.raw_date is not None

    def to_dataframe(self) -> pd.DataFrame:
        """Finalized table as a DataFrame with Group, Current, Target and Percent columns."""
        return pd.DataFrame(
            [group.to_dict() for group in self.groups],
            columns=["Group", "Current", "Target", "Percent"],
        )


class GroupReconciler:
    """
    Reconciles scanned report counts against computer group targets.

    Args:
        aliases: Mapping of satellite group name to the root group that absorbs it
        root_marker: Suffix appended to a root group's display name
        raw_exclude: Group names left out of the raw totals row
        ordering: 'insertion' (first appearance) or 'sorted' (by name)
        total_label: Name of the synthesized totals group
    """

    def __init__(
        self,
        aliases: Optional[Dict[str, str]] = None,
        root_marker: str = "*",
        raw_exclude: Optional[Iterable[str]] = None,
        ordering: str = "insertion",
        total_label: str = "TOTAL",
    ):
        self.aliases = dict(aliases or {})
        self.root_marker = root_marker
        self.raw_exclude: Set[str] = set(raw_exclude or ())
        self.ordering = ordering
        self.total_label = total_label

    @staticmethod
    def latest_counts(records: Iterable[Record]) -> Dict[str, int]:
        """Collapse scanned records by name; later records overwrite earlier ones."""
        counts: Dict[str, int] = {}
        for name, count in records:
            counts[name] = count
        return counts

    def merge_aliases(self, groups: Dict[str, ComputerGroup], counts: Dict[str, int]) -> None:
        """
        Fold satellite counts into their root groups and drop the satellites.

        Root counts are recomputed from ``counts`` each time, so applying the
        merge again to the same data leaves every count unchanged. A satellite
        target moves to its root once, when the satellite is removed.
        """
        roots: Dict[str, List[str]] = {}
        for satellite, root in self.aliases.items():
            roots.setdefault(root, []).append(satellite)

        for root, satellites in roots.items():
            present = [name for name in satellites if name in groups or name in counts]
            if root not in groups:
                if not present:
                    continue
                groups[root] = ComputerGroup(root)
            group = groups[root]
            group.current = counts.get(root, 0) + sum(counts.get(name, 0) for name in satellites)
            group.display_name = f"{root}{self.root_marker}" if self.root_marker else None
            for name in present:
                if name in groups:
                    satellite = groups.pop(name)
                    logger.debug(f"Folded {name} ({counts.get(name, 0)}) into {root}")
                    if satellite.target:
                        logger.warning(
                            f"Target {satellite.target} for alias group {name} "
                            f"added to {root}"
                        )
                        group.target += satellite.target

    def _place_roots(self, order: List[str]) -> List[str]:
        """Put each new root where its first satellite appeared in ``order``."""
        placed = list(order)
        for satellite, root in self.aliases.items():
            if satellite in placed and root not in placed:
                placed[placed.index(satellite)] = root
        return placed

    def reconcile(
        self, targets: Iterable[ComputerGroup], records: Iterable[Record]
    ) -> ReconciliationResult:
        """
        Merge targets with scanned records into the finalized group list.

        Args:
            targets: Groups loaded from the target file (current is ignored)
            records: (name, count) pairs in scan order

        Returns:
            ReconciliationResult whose groups end with the TOTAL group
        """
        records = list(records)
        counts = self.latest_counts(records)

        groups: Dict[str, ComputerGroup] = {}
        order: List[str] = []

        def add(name: str, target: Optional[int] = None) -> None:
            if name == self.total_label:
                logger.warning(
                    f"Ignoring computer group named '{name}', it clashes with the totals column"
                )
                return
            if name not in groups:
                groups[name] = ComputerGroup(name)
                order.append(name)
            if target is not None:
                groups[name].target = target

        for group in targets:
            add(group.name, group.target)
        for name, _ in records:
            add(name)

        for name, group in groups.items():
            group.current = counts.get(name, 0)

        order = self._place_roots(order)
        self.merge_aliases(groups, counts)

        finalized = [groups[name] for name in order if name in groups]
        if self.ordering == "sorted":
            finalized.sort(key=lambda group: group.name)

        finalized.append(self.build_total(finalized))
        logger.info(
            f"Reconciled {len(finalized) - 1} computer groups from "
            f"{len(records)} scanned records"
        )
        return ReconciliationResult(groups=finalized)

    def build_total(self, groups: Iterable[ComputerGroup]) -> ComputerGroup:
        """Synthesize the totals group from the finalized groups."""
        groups = list(groups)
        return ComputerGroup(
            self.total_label,
            current=sum(group.current for group in groups),
            target=sum(group.target for group in groups),
        )

    def raw_totals(self, records: Iterable[Record]) -> Dict[str, int]:
        """
        Unmerged per-group counts in scan order, minus the excluded names.

        Alias rules are not applied here.
        """
        return {
            name: count
            for name, count in self.latest_counts(records).items()
            if name not in self.raw_exclude
        }
