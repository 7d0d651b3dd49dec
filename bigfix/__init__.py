"""
BigFix Stats
============

Converts BigFix deployment reports into Atlassian Confluence wiki tables.

This package provides adapters, services, and a facade for:
- Scanning BigFix HTML reports for per computer group counts
- Loading comma-separated computer group targets
- Reconciling current and target counts (including alias groups)
- Rendering the result as Confluence table rows
"""

from .config import StatsConfig
from .facade.bigfix_facade import BigFixStatsFacade
from .models.computer_group import ComputerGroup

PROGRAM_NAME = "bfstats"
__version__ = "1.0"

__all__ = ["BigFixStatsFacade", "ComputerGroup", "StatsConfig", "PROGRAM_NAME"]
