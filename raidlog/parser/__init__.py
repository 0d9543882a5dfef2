"""
Combat log parser module for tokenizing and reading raid combat logs.
"""

from .tokenizer import LineTokenizer, LogLine, parse_timestamp
from .roster import PartyRosterExtractor, canonical_name, strip_server
from .instances import InstanceMatch, InstanceMatcher
from .damage import DamageEventExtractor, DamageExtraction
from .parser import CombatLogParser, extract_encounter_lines
from .errors import EmptyLogError, NoEncounterLinesError, NoRosterFoundError, RaidLogError

__all__ = [
    "LineTokenizer",
    "LogLine",
    "parse_timestamp",
    "PartyRosterExtractor",
    "strip_server",
    "canonical_name",
    "InstanceMatch",
    "InstanceMatcher",
    "DamageEventExtractor",
    "DamageExtraction",
    "CombatLogParser",
    "extract_encounter_lines",
    "EmptyLogError",
    "NoEncounterLinesError",
    "NoRosterFoundError",
    "RaidLogError",
]
