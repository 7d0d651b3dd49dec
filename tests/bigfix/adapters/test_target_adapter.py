"""
Unit tests for TargetLoader.
"""

import pytest

from bigfix.adapters.target_adapter import TargetLoader
from bigfix.exceptions import ParseError, ReportIOError
from bigfix.models.computer_group import ComputerGroup


class TestTargetLoader:
    """Tests for loading computer group targets."""

    def test_parse_line(self):
        """Test parsing a single target line."""
        group = TargetLoader().parse_line("OS,100")
        assert group == ComputerGroup("OS", current=0, target=100)

    def test_splits_on_first_delimiter_only(self):
        """Test everything after the first delimiter must be the target."""
        with pytest.raises(ParseError):
            TargetLoader().parse_line("Labs,North,12")

    def test_custom_delimiter(self):
        """Test loading with a configured delimiter."""
        group = TargetLoader(delimiter=";").parse_line("Labs, North;12")
        assert group.name == "Labs, North"
        assert group.target == 12

    def test_missing_delimiter(self):
        """Test a line without a delimiter is a ParseError with its location."""
        with pytest.raises(ParseError) as excinfo:
            TargetLoader().parse_line("OS 100", source="targets.csv", line_number=3)
        assert "targets.csv:3" in str(excinfo.value)

    def test_empty_name(self):
        """Test a line with no group name is rejected."""
        with pytest.raises(ParseError):
            TargetLoader().parse_line(",100")

    def test_load_lines_skips_bad_lines_and_continues(self):
        """Test malformed lines are recorded and the rest still load."""
        loader = TargetLoader()
        groups = loader.load_lines(["OS,100", "Broken,lots", "", "App1,50"], source="targets.csv")
        assert [(group.name, group.target) for group in groups] == [("OS", 100), ("App1", 50)]
        assert len(loader.errors) == 1
        assert loader.errors[0].line_number == 2
        assert loader.errors[0].value == "lots"

    def test_load_file_handles_crlf(self, tmp_path):
        """Test Windows line endings are handled."""
        targets = tmp_path / "targets.csv"
        targets.write_bytes(b"OS,100\r\nApp1,50\r\n")
        groups = TargetLoader().load_file(targets)
        assert [(group.name, group.target) for group in groups] == [("OS", 100), ("App1", 50)]

    def test_load_missing_file_raises(self, tmp_path):
        """Test a missing target file raises ReportIOError."""
        with pytest.raises(ReportIOError):
            TargetLoader().load_file(tmp_path / "nope.csv")
