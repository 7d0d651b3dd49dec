import logging
from pathlib import Path
from typing import List, Optional, Union

from ..adapters.report_adapter import Record, RecordScanner, extract_report_date
from ..adapters.target_adapter import TargetLoader
from ..config import StatsConfig
from ..exceptions import NoInputDataError, ParseError, ReportIOError
from ..models.computer_group import ComputerGroup
from ..services.reconciler import GroupReconciler, ReconciliationResult
from ..services.table_renderer import TableRenderer

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class BigFixStatsFacade:
    """
    Single entry point for turning BigFix reports into Confluence tables.

    Wires the record scanners, target loader, reconciler and renderer together
    from one StatsConfig.
    """

    def __init__(self, config: Optional[StatsConfig] = None):
        self.config = (config or StatsConfig()).validate()
        self.scanner = RecordScanner(
            self.config.record_marker, self.config.start_marker, self.config.end_marker
        )
        self.target_scanner = RecordScanner(
            self.config.target_marker, self.config.start_marker, self.config.end_marker
        )
        self.target_loader = TargetLoader(self.config.delimiter)
        self.reconciler = GroupReconciler(
            aliases=self.config.aliases,
            root_marker=self.config.root_marker,
            raw_exclude=self.config.raw_exclude,
            ordering=self.config.ordering,
            total_label=self.config.total_label,
        )
        self.renderer = TableRenderer(self.config.render_style)

    @property
    def errors(self) -> List[ParseError]:
        """Every recoverable parse problem seen so far."""
        return self.target_loader.errors + self.scanner.errors + self.target_scanner.errors

    def load_targets(self, filename: Optional[PathLike]) -> List[ComputerGroup]:
        """
        Load targets, falling back to an empty set when the file is unreadable.
        """
        if not filename:
            return []
        try:
            return self.target_loader.load_file(filename)
        except ReportIOError as e:
            logger.error(f"{e}, continuing without targets")
            return []

    def _check_input(self, filename: PathLike, records: List[Record], targets: List[ComputerGroup]) -> None:
        if not records and not targets:
            raise NoInputDataError(f"no computer group data found in `{filename}`")

    def run_two_file(
        self, current_file: PathLike, target_file: Optional[PathLike] = None
    ) -> ReconciliationResult:
        """
        Reconcile a current-counts report against a separate target file.

        Raises:
            ReportIOError: If the report cannot be opened
            NoInputDataError: If neither file yielded any computer group
        """
        targets = self.load_targets(target_file)
        records = self.scanner.load_file(current_file)
        self._check_input(current_file, records, targets)
        return self.reconciler.reconcile(targets, records)

    def run_single_file(self, report_file: PathLike) -> ReconciliationResult:
        """
        Reconcile a report that carries both current counts and targets.

        Target rows start with the configured target marker. When raw totals
        are enabled the result also carries the unmerged counts, tagged with
        the date taken from the report's file name.

        Raises:
            ReportIOError: If the report cannot be opened
            NoInputDataError: If the report yielded no computer group
        """
        lines = self.scanner.read_lines(report_file)
        records = self.scanner.scan(lines, source=str(report_file))
        targets = [
            ComputerGroup(name, target=count)
            for name, count in self.target_scanner.scan(lines, source=str(report_file))
        ]
        logger.info(
            f"Scanned {len(records)} records and {len(targets)} targets from {report_file}"
        )
        self._check_input(report_file, records, targets)

        result = self.reconciler.reconcile(targets, records)
        if self.config.raw_totals:
            result.raw_counts = self.reconciler.raw_totals(records)
            result.raw_date = extract_report_date(report_file, self.config.date_width)
        return result

    def render(self, result: ReconciliationResult) -> List[str]:
        """Table lines for a result, followed by the raw totals block if present."""
        lines = self.renderer.render(result.groups)
        if result.has_raw_totals:
            lines.append("")
            lines.extend(self.renderer.render_raw(result.raw_date, result.raw_counts))
        return lines

    def export_csv(self, result: ReconciliationResult, filename: PathLike) -> None:
        """Write the finalized table, TOTAL included, to a CSV file."""
        result.to_dataframe().to_csv(filename, index=False)
        logger.info(f"Wrote {len(result.groups)} rows to {filename}")
