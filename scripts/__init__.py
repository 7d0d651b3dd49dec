"""
Scripts package for BigFix Stats.

This package contains command-line scripts organized by functionality.

Subpackages:
- reporting: Scripts for turning BigFix reports into Confluence tables
"""

__version__ = "1.0"
