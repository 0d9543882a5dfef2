"""
Line tokenizer for pipe-delimited raid combat logs.
"""

import re
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Dict

logger = logging.getLogger(__name__)

# Opcodes (field 0)
OPCODE_CHAT = "00"
OPCODE_ZONE = "01"
OPCODE_ADD_COMBATANT = "03"
OPCODE_NETWORK_START_CAST = "15"
OPCODE_NETWORK_CANCEL_ABILITY = "16"
OPCODE_ABILITY = "21"
OPCODE_AOE_ABILITY = "22"
OPCODE_STATUS_ADD = "26"
OPCODE_UPDATE_HP = "38"
OPCODE_HP_TICK = "39"

ABILITY_OPCODES = frozenset({OPCODE_ABILITY, OPCODE_AOE_ABILITY})
ACTION_OPCODES = frozenset(
    {
        OPCODE_ABILITY,
        OPCODE_AOE_ABILITY,
        OPCODE_NETWORK_START_CAST,
        OPCODE_NETWORK_CANCEL_ABILITY,
        OPCODE_UPDATE_HP,
        OPCODE_STATUS_ADD,
    }
)
HP_OPCODES = frozenset({OPCODE_UPDATE_HP, OPCODE_HP_TICK})

# Fields consumed by the engine
FIELD_OPCODE = 0
FIELD_TIMESTAMP = 1
FIELD_ACTOR_ID = 2
FIELD_ACTOR_NAME = 3
FIELD_MESSAGE = 4
FIELD_SKILL_NAME = 5
FIELD_CURRENT_HP = 5
FIELD_MAX_HP = 6
FIELD_TARGET_NAME = 7

MIN_FIELDS = 2

_FRACTION_RE = re.compile(r"\.(\d+)")
_MESSAGE_PREFIX_RE = re.compile(r"^[^\w]*\s*")

# Non-ISO formats seen in exported logs
_FALLBACK_FORMATS = (
    "%m/%d/%Y %H:%M:%S.%f",
    "%m/%d/%Y %H:%M:%S",
    "%Y/%m/%d %H:%M:%S",
)


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """
    Parse a log timestamp into an aware UTC-comparable datetime.

    Accepts ISO-8601 with any number of fractional digits (the client writes
    seven) and an optional offset or ``Z`` suffix. Naive values are taken as UTC.

    Returns:
        datetime or None if the value cannot be parsed
    """
    if not value:
        return None

    text = value.strip()
    if not text:
        return None
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"

    # fromisoformat only takes 3 or 6 fractional digits on older interpreters
    normalized = _FRACTION_RE.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text, count=1)

    timestamp = None
    try:
        timestamp = datetime.fromisoformat(normalized)
    except ValueError:
        for fmt in _FALLBACK_FORMATS:
            try:
                timestamp = datetime.strptime(text, fmt)
                break
            except ValueError:
                continue

    if timestamp is None:
        return None
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)
    return timestamp


def to_millis(timestamp: datetime) -> int:
    """Epoch milliseconds for an aware datetime."""
    return int(round(timestamp.timestamp() * 1000))


def clean_message(text: str) -> str:
    """Strip whitespace and any leading non-word prefix from chat text."""
    return _MESSAGE_PREFIX_RE.sub("", text.strip())


@dataclass
class LogLine:
    """One tokenized log line."""

    index: int
    fields: List[str]
    raw_line: str
    timestamp: Optional[datetime] = None

    @property
    def opcode(self) -> str:
        return self.fields[FIELD_OPCODE]

    @property
    def timestamp_ms(self) -> Optional[int]:
        if self.timestamp is None:
            return None
        return to_millis(self.timestamp)

    @property
    def timestamp_str(self) -> str:
        return self.fields[FIELD_TIMESTAMP]

    def field(self, position: int, default: str = "") -> str:
        """Field at ``position`` or ``default`` when the line is shorter."""
        if position < len(self.fields):
            return self.fields[position]
        return default

    def message(self) -> str:
        """
        Chat/system message text.

        Taken from the first non-empty of fields 4, 3 and 2, with any leading
        non-word prefix removed.
        """
        for position in (FIELD_MESSAGE, FIELD_ACTOR_NAME, FIELD_ACTOR_ID):
            value = self.field(position)
            if value and value.strip():
                return clean_message(value)
        return ""

    def text_fields(self) -> List[str]:
        """Cleaned non-empty message candidates (fields 3 and 4)."""
        candidates = []
        for position in (FIELD_ACTOR_NAME, FIELD_MESSAGE):
            value = self.field(position)
            if value and value.strip():
                candidates.append(clean_message(value))
        return candidates


class LineTokenizer:
    """
    Tokenizes individual lines from pipe-delimited combat logs.

    Lines with fewer than two fields are not actionable and are dropped. A line
    whose timestamp does not parse is still returned (with ``timestamp=None``)
    so roster and text scans can use it.
    """

    DELIMITER = "|"

    def __init__(self):
        self.line_count = 0
        self.error_count = 0
        self.timestamp_errors = 0

    def parse_line(self, line: str, index: Optional[int] = None) -> Optional[LogLine]:
        """
        Parse a single raw line.

        Args:
            line: Raw line from the log
            index: Position of the line in its source; defaults to the running count

        Returns:
            LogLine or None if the line has fewer than two fields
        """
        if index is None:
            index = self.line_count
        self.line_count += 1

        line = line.rstrip("\r\n")
        if not line:
            return None

        fields = line.split(self.DELIMITER)
        if len(fields) < MIN_FIELDS:
            self.error_count += 1
            return None

        timestamp = parse_timestamp(fields[FIELD_TIMESTAMP])
        if timestamp is None:
            self.timestamp_errors += 1
            logger.debug(f"Unparsable timestamp on line {index}: {fields[FIELD_TIMESTAMP][:40]!r}")

        return LogLine(index=index, fields=fields, raw_line=line, timestamp=timestamp)

    def parse_lines(self, lines: Iterable[str]) -> List[LogLine]:
        """Tokenize every line, keeping source positions as indexes."""
        parsed = []
        for index, line in enumerate(lines):
            log_line = self.parse_line(line, index)
            if log_line is not None:
                parsed.append(log_line)
        return parsed

    def get_stats(self) -> Dict[str, float]:
        """
        Get tokenizing statistics.

        Returns:
            Dictionary with line, error and timestamp-error counts
        """
        return {
            "lines_processed": self.line_count,
            "errors": self.error_count,
            "timestamp_errors": self.timestamp_errors,
            "success_rate": (self.line_count - self.error_count) / max(self.line_count, 1),
        }
