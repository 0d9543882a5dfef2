"""
Duty and boss identification from the head of a log.
"""

import re
import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from .roster import strip_server
from .tokenizer import OPCODE_CHAT, LogLine, clean_message
from ..config.game_data import UNKNOWN_BOSS, UNKNOWN_DUTY
from ..config.library import InstanceEntry, default_instance_library

logger = logging.getLogger(__name__)

_DEFEATED_RE = re.compile(r"^(.+?) is defeated\.?$", re.IGNORECASE)
_HITS_RE = re.compile(r"hits\s+(.+?)\s+for\s+[\d,]+\s+damage", re.IGNORECASE)

SOURCE_LIBRARY = "library"
SOURCE_PATTERN = "pattern"
SOURCE_DEFAULT = "default"


@dataclass
class InstanceMatch:
    """Resolved duty and boss for a log."""

    instance: str = UNKNOWN_DUTY
    boss: str = UNKNOWN_BOSS
    boss_names: List[str] = field(default_factory=list)
    source: str = SOURCE_DEFAULT

    @property
    def is_unknown(self) -> bool:
        return self.source == SOURCE_DEFAULT


class InstanceMatcher:
    """
    Resolves the duty and boss from a static keyword library.

    The first library entry whose duty keyword, alias or boss name appears
    (case-insensitively) in the scan window wins; an entry matching both a
    duty keyword and a specific boss is preferred over one matching only
    either. Without a library hit, boss names are guessed from
    ``"<X> is defeated"`` and ``"hits <X> for <N> damage"`` messages.
    """

    def __init__(self, library: Optional[Sequence[InstanceEntry]] = None, scan_lines: int = 200):
        self.library: Tuple[InstanceEntry, ...] = tuple(
            library if library is not None else default_instance_library()
        )
        self.scan_lines = scan_lines

    def match(
        self,
        lines: Sequence[Union[LogLine, str]],
        roster: Optional[Iterable[str]] = None,
    ) -> InstanceMatch:
        """
        Resolve instance and boss names.

        Args:
            lines: Log lines (tokenized or raw)
            roster: Party member names, excluded from pattern-based guesses

        Returns:
            InstanceMatch; ``boss_names`` lists every library boss seen anywhere
            in ``lines`` with the chosen boss first
        """
        raw_lines = [line.raw_line if isinstance(line, LogLine) else line for line in lines]
        window = [line.lower() for line in raw_lines[: self.scan_lines]]

        result = self._match_library(window)
        if result is not None:
            instance, boss = result
            boss_names = self._seen_bosses([line.lower() for line in raw_lines], first=boss)
            logger.info(f"Matched duty {instance!r} / boss {boss!r} from library")
            return InstanceMatch(instance, boss, boss_names, SOURCE_LIBRARY)

        boss = self._guess_boss(raw_lines[: self.scan_lines], roster or [])
        if boss:
            logger.info(f"Guessed boss {boss!r} from message patterns")
            return InstanceMatch(UNKNOWN_DUTY, boss, [boss], SOURCE_PATTERN)

        logger.warning("No duty or boss could be identified")
        return InstanceMatch()

    def _match_library(self, window: List[str]) -> Optional[Tuple[str, str]]:
        def seen(term: str) -> bool:
            needle = term.lower()
            return any(needle in line for line in window)

        def seen_word(term: str) -> bool:
            # Short aliases ("TOP", "DSR") must not match inside other words
            pattern = re.compile(rf"\b{re.escape(term.lower())}\b")
            return any(pattern.search(line) for line in window)

        fallback: Optional[Tuple[str, str]] = None
        for entry in self.library:
            keyword_hit = any(seen(k) for k in entry.duty_keywords) or any(
                seen_word(a) for a in entry.aliases
            )

            boss_hit = next((b for b in entry.bosses if seen(b)), None)
            if boss_hit is None and any(seen(k) for k in entry.boss_keywords):
                boss_hit = entry.primary_boss

            if keyword_hit and boss_hit:
                return entry.instance, boss_hit
            if fallback is None and (keyword_hit or boss_hit):
                fallback = (entry.instance, boss_hit or entry.primary_boss or UNKNOWN_BOSS)
        return fallback

    def _seen_bosses(self, lowered_lines: List[str], first: str) -> List[str]:
        names = [first] if first and first != UNKNOWN_BOSS else []
        for entry in self.library:
            for boss in entry.bosses:
                if boss in names:
                    continue
                needle = boss.lower()
                if any(needle in line for line in lowered_lines):
                    names.append(boss)
        return names

    @staticmethod
    def _guess_boss(raw_lines: List[str], roster: Iterable[str]) -> Optional[str]:
        party = {name.lower() for name in roster}
        defeated: List[str] = []
        hit_targets: Counter = Counter()

        for raw in raw_lines:
            fields = raw.split("|")
            if fields[0] != OPCODE_CHAT:
                continue
            for text in (clean_message(f) for f in fields[2:5] if f and f.strip()):
                m = _DEFEATED_RE.match(text)
                if m:
                    name = m.group(1).strip()
                    if strip_server(name).lower() not in party and name.lower() != "you":
                        defeated.append(name)
                for target in _HITS_RE.findall(text):
                    name = target.strip()
                    if name.lower() not in party:
                        hit_targets[name] += 1

        if defeated:
            return defeated[0]
        if hit_targets:
            return hit_targets.most_common(1)[0][0]
        return None
