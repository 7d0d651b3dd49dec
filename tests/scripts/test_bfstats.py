"""
Tests for the bfstats command-line script.
"""

import pytest

from scripts.reporting import bfstats


@pytest.fixture
def report_file(tmp_path):
    path = tmp_path / "current.html"
    path.write_text(
        "<tr><td>OS</td><td>40</td></tr><tr><td>MBDA</td><td>10</td></tr><tr><td>App1</td><td>20</td></tr>\n"
    )
    return path


@pytest.fixture
def target_file(tmp_path):
    path = tmp_path / "targets.csv"
    path.write_text("OS,100\nApp1,50\n")
    return path


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    # Keep a developer's .env or BFSTATS_* settings out of the tests
    monkeypatch.chdir(tmp_path)
    for variable in ("BFSTATS_ORDERING", "BFSTATS_RENDER_STYLE", "BFSTATS_ALIASES", "BFSTATS_RAW_TOTALS"):
        monkeypatch.delenv(variable, raising=False)


class TestUsage:
    """Tests for help and usage handling."""

    def test_no_arguments_prints_usage(self, capsys):
        """Test running without arguments prints usage."""
        assert bfstats.main([]) == 0
        out = capsys.readouterr().out
        assert out.startswith("bfstats, version 1.0\n")
        assert "usage: bfstats" in out

    def test_help_wins_over_other_flags(self, capsys):
        """Test -h prints usage even with malformed flags."""
        assert bfstats.main(["-c", "-h", "-t"]) == 0
        assert "usage: bfstats" in capsys.readouterr().out

    @pytest.mark.parametrize("argv,flag", [(["-c"], "-c"), (["-c", "r.html", "-t"], "-t"), (["-i"], "-i")])
    def test_missing_flag_value(self, capsys, argv, flag):
        """Test a flag without its value is a usage error."""
        assert bfstats.main(argv) == 1
        captured = capsys.readouterr()
        assert f"bfstats: option {flag} requires an argument" in captured.err
        assert "usage: bfstats" in captured.out

    def test_unknown_flags_only_prints_usage(self, capsys):
        """Test only unknown flags prints usage."""
        assert bfstats.main(["--bogus"]) == 0
        assert "usage: bfstats" in capsys.readouterr().out

    def test_single_and_two_file_modes_conflict(self, capsys, report_file, target_file):
        """Test -i cannot be combined with -c."""
        assert bfstats.main(["-i", str(report_file), "-c", str(report_file)]) == 1
        assert "option -i cannot be combined" in capsys.readouterr().err

    def test_target_without_report(self, capsys, target_file):
        """Test -t needs -c."""
        assert bfstats.main(["-t", str(target_file)]) == 1
        assert "option -t requires a report" in capsys.readouterr().err


class TestSplitKnownFlags:
    """Tests for separating recognized flags from the rest."""

    def test_only_exact_flags_are_known(self):
        """Test joined or unknown flags and their values are set aside."""
        known, unknown = bfstats.split_known_flags(["-ix", "foo", "-c", "r.html", "--log", "--sorted"])
        assert known == ["-c", "r.html", "--log", "--sorted"]
        assert unknown == ["-ix", "foo"]

    def test_log_takes_following_filename(self):
        """Test --log keeps a filename that follows it."""
        known, unknown = bfstats.split_known_flags(["--log", "run.log", "-c", "r.html"])
        assert known == ["--log", "run.log", "-c", "r.html"]
        assert unknown == []


class TestRun:
    """Tests for running the full pipeline from the command line."""

    def test_two_file_mode(self, capsys, report_file, target_file):
        """Test the two-file run prints the table."""
        assert bfstats.main(["-c", str(report_file), "-t", str(target_file)]) == 0
        assert capsys.readouterr().out.splitlines() == [
            "|| Nodes     || OS*  || App1 || TOTAL ||",
            "| *Current*  | 50    | 20    | 70     |",
            "| *Target*   | 100   | 50    | 150    |",
            "| *% Comp*   | *50*  | *40*  | *47*   |",
        ]

    def test_unknown_flags_are_ignored(self, capsys, report_file, target_file):
        """Test unknown flags are ignored."""
        argv = ["--bogus", "-c", str(report_file), "-x", "-t", str(target_file)]
        assert bfstats.main(argv) == 0
        assert len(capsys.readouterr().out.splitlines()) == 4

    def test_joined_flag_is_not_split(self, capsys, report_file, target_file):
        """Test -ix is ignored rather than read as -i with value x."""
        assert bfstats.main(["-ix", "-c", str(report_file), "-t", str(target_file)]) == 0
        lines = capsys.readouterr().out.splitlines()
        assert len(lines) == 4
        assert lines[0] == "|| Nodes     || OS*  || App1 || TOTAL ||"

    def test_missing_target_file_still_succeeds(self, capsys, report_file, tmp_path):
        """Test a missing target file still prints a table."""
        missing = tmp_path / "missing.csv"
        assert bfstats.main(["-c", str(report_file), "-t", str(missing)]) == 0
        captured = capsys.readouterr()
        assert f"could not open file `{missing}`" in captured.err
        assert "| *% Comp*   | *0*  | *0*   | *0*    |" in captured.out.splitlines()

    def test_missing_report_file_fails(self, capsys, tmp_path, target_file):
        """Test a missing report fails."""
        missing = tmp_path / "missing.html"
        assert bfstats.main(["-c", str(missing), "-t", str(target_file)]) == 1
        captured = capsys.readouterr()
        assert f"could not open file `{missing}`" in captured.err
        assert captured.out == ""

    def test_single_file_mode(self, capsys, tmp_path):
        """Test the single-file run prints the table and raw totals."""
        report = tmp_path / "deploy_20141015.html"
        report.write_text(
            '<tr class="target"><td>OS</td><td>100</td></tr>\n'
            "<tr><td>OS</td><td>40</td></tr><tr><td>MBDA</td><td>10</td></tr>\n"
        )
        assert bfstats.main(["-i", str(report)]) == 0
        lines = capsys.readouterr().out.splitlines()
        assert lines[0] == "|| Nodes     || OS*  || TOTAL ||"
        assert lines[-2] == "|| Date     || OS || MBDA ||"
        assert lines[-1] == "| 20141015  | 40  | 10    |"

    def test_minimal_and_sorted_flags(self, capsys, report_file, target_file):
        """Test --minimal and --sorted."""
        argv = ["-c", str(report_file), "-t", str(target_file), "--minimal", "--sorted"]
        assert bfstats.main(argv) == 0
        assert capsys.readouterr().out.splitlines()[0] == "|| Nodes || App1 || OS* || TOTAL ||"

    def test_csv_export(self, capsys, report_file, target_file, tmp_path):
        """Test --csv writes the table."""
        out = tmp_path / "table.csv"
        argv = ["-c", str(report_file), "-t", str(target_file), "--csv", str(out)]
        assert bfstats.main(argv) == 0
        assert out.read_text().splitlines()[0] == "Group,Current,Target,Percent"

    def test_invalid_configuration(self, capsys, monkeypatch, report_file):
        """Test an invalid environment setting fails."""
        monkeypatch.setenv("BFSTATS_ORDERING", "random")
        assert bfstats.main(["-c", str(report_file)]) == 1
        assert "Invalid configuration" in capsys.readouterr().err

    def test_log_file(self, capsys, report_file, target_file, tmp_path):
        """Test --log writes a log file."""
        log_file = tmp_path / "logs" / "bfstats.log"
        argv = ["-c", str(report_file), "-t", str(target_file), "--log", str(log_file)]
        assert bfstats.main(argv) == 0
        assert "Reconciled 2 computer groups" in log_file.read_text()
