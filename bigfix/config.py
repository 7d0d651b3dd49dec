import os
from dataclasses import dataclass, field, replace
from typing import Dict, Optional, Set

from dotenv import load_dotenv

ORDERING_POLICIES = ("insertion", "sorted")
RENDER_STYLES = ("aligned", "minimal")


def _default_aliases() -> Dict[str, str]:
    return {"MBDA": "OS"}


def _default_raw_exclude() -> Set[str]:
    return {"CBS", "HCHB"}


def parse_aliases(value: str) -> Dict[str, str]:
    """
    Parse an alias specification of the form ``"SATELLITE:ROOT,SATELLITE:ROOT"``.

    Args:
        value: Comma-separated satellite/root pairs

    Returns:
        Mapping of satellite group name to root group name

    Raises:
        ValueError: If an entry is not a ``satellite:root`` pair
    """
    aliases = {}
    for entry in value.split(","):
        entry = entry.strip()
        if not entry:
            continue
        satellite, sep, root = entry.partition(":")
        satellite, root = satellite.strip(), root.strip()
        if not sep or not satellite or not root:
            raise ValueError(f"Invalid alias entry '{entry}', expected SATELLITE:ROOT")
        aliases[satellite] = root
    return aliases


def parse_name_set(value: str) -> Set[str]:
    return {name.strip() for name in value.split(",") if name.strip()}


def parse_bool(value: str) -> bool:
    normalized = value.strip().lower()
    if normalized in ("1", "true", "yes", "on"):
        return True
    if normalized in ("0", "false", "no", "off"):
        return False
    raise ValueError(f"Invalid boolean value '{value}'")


@dataclass
class StatsConfig:
    """Centralized configuration for scanning, reconciling and rendering."""

    record_marker: str = "<tr>"
    target_marker: str = '<tr class="target">'
    start_marker: str = "<td>"
    end_marker: str = "</td>"
    delimiter: str = ","
    aliases: Dict[str, str] = field(default_factory=_default_aliases)
    root_marker: str = "*"
    raw_exclude: Set[str] = field(default_factory=_default_raw_exclude)
    ordering: str = "insertion"
    render_style: str = "aligned"
    raw_totals: bool = True
    date_width: int = 8
    total_label: str = "TOTAL"

    def validate(self) -> "StatsConfig":
        """
        Check the configuration for values the rest of the package cannot handle.

        Returns:
            The same configuration, so calls can be chained

        Raises:
            ValueError: If any setting is out of range
        """
        if self.ordering not in ORDERING_POLICIES:
            raise ValueError(
                f"Unknown ordering '{self.ordering}', expected one of {ORDERING_POLICIES}"
            )
        if self.render_style not in RENDER_STYLES:
            raise ValueError(
                f"Unknown render style '{self.render_style}', expected one of {RENDER_STYLES}"
            )
        for name, value in (
            ("record_marker", self.record_marker),
            ("start_marker", self.start_marker),
            ("end_marker", self.end_marker),
            ("delimiter", self.delimiter),
        ):
            if not value:
                raise ValueError(f"{name} must not be empty")
        if self.date_width < 1:
            raise ValueError("date_width must be at least 1")
        for satellite, root in self.aliases.items():
            if satellite == root:
                raise ValueError(f"Alias '{satellite}' cannot fold into itself")
            if root in self.aliases:
                raise ValueError(
                    f"Alias root '{root}' is itself folded into '{self.aliases[root]}'"
                )
        return self

    def with_overrides(self, **overrides) -> "StatsConfig":
        """Return a copy with the given non-None settings replaced."""
        changes = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **changes).validate()

    @staticmethod
    def from_env(env: Optional[Dict[str, str]] = None) -> "StatsConfig":
        """
        Build configuration from BFSTATS_* environment variables.

        A ``.env`` file in the working directory is loaded first, the same way
        the other Data Hub tools pick up their settings.

        Args:
            env: Mapping to read instead of ``os.environ`` (mainly for tests)

        Returns:
            A validated StatsConfig
        """
        if env is None:
            load_dotenv()
            env = os.environ

        config = StatsConfig()
        settings = {}

        string_settings = {
            "BFSTATS_RECORD_MARKER": "record_marker",
            "BFSTATS_TARGET_MARKER": "target_marker",
            "BFSTATS_START_MARKER": "start_marker",
            "BFSTATS_END_MARKER": "end_marker",
            "BFSTATS_DELIMITER": "delimiter",
            "BFSTATS_ROOT_MARKER": "root_marker",
            "BFSTATS_TOTAL_LABEL": "total_label",
        }
        for variable, attribute in string_settings.items():
            if variable in env:
                settings[attribute] = env[variable]

        if "BFSTATS_ORDERING" in env:
            settings["ordering"] = env["BFSTATS_ORDERING"].strip().lower()
        if "BFSTATS_RENDER_STYLE" in env:
            settings["render_style"] = env["BFSTATS_RENDER_STYLE"].strip().lower()
        if "BFSTATS_ALIASES" in env:
            settings["aliases"] = parse_aliases(env["BFSTATS_ALIASES"])
        if "BFSTATS_RAW_EXCLUDE" in env:
            settings["raw_exclude"] = parse_name_set(env["BFSTATS_RAW_EXCLUDE"])
        if "BFSTATS_RAW_TOTALS" in env:
            settings["raw_totals"] = parse_bool(env["BFSTATS_RAW_TOTALS"])
        if "BFSTATS_DATE_WIDTH" in env:
            try:
                settings["date_width"] = int(env["BFSTATS_DATE_WIDTH"])
            except ValueError:
                raise ValueError(
                    f"Invalid BFSTATS_DATE_WIDTH '{env['BFSTATS_DATE_WIDTH']}'"
                ) from None

        return replace(config, **settings).validate()
