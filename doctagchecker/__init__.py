"""Checks that documentation tags stay in sync with the files they describe."""

__version__ = "0.1.0"
