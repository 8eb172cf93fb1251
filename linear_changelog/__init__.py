"""Draft a monthly changelog from issues completed in Linear."""

__version__ = "0.1.0"
