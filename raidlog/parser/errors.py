"""
Exceptions raised by the combat log parser.

Line-level problems (malformed lines, unmatched messages) are absorbed by the
tokenizer and extractors; only conditions that make a whole run meaningless
are raised to the caller.
"""

from typing import Optional


class RaidLogError(Exception):
    """Base class for all parser errors."""


class EmptyLogError(RaidLogError):
    """The input holds too few lines to contain an encounter."""

    def __init__(self, line_count: int):
        self.line_count = line_count
        super().__init__(f"Not enough lines in log file ({line_count})")


class NoRosterFoundError(RaidLogError):
    """No party members were declared in the roster scan window."""

    def __init__(self, scanned_lines: int):
        self.scanned_lines = scanned_lines
        super().__init__(f"No party members detected in the first {scanned_lines} lines")


class NoEncounterLinesError(RaidLogError):
    """The time window of an encounter contains no log lines."""

    def __init__(self, start: Optional[str] = None, end: Optional[str] = None):
        self.start = start
        self.end = end
        super().__init__(f"No log data found for encounter timeframe {start} - {end}")
