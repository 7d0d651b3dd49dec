"""Reporting scripts for BigFix deployment statistics."""
