"""
Common interface for encounter segmentation strategies.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from ..config.game_data import UNKNOWN_BOSS, UNKNOWN_DUTY
from ..config.settings import SegmentationSettings
from ..models.encounter import Encounter
from ..parser.tokenizer import LogLine

logger = logging.getLogger(__name__)


@dataclass
class SegmentationContext:
    """What is known about a log before segmentation starts."""

    roster: List[str] = field(default_factory=list)
    boss: str = UNKNOWN_BOSS
    instance: str = UNKNOWN_DUTY
    boss_names: List[str] = field(default_factory=list)

    @property
    def local_player(self) -> Optional[str]:
        """The first roster name; first-person messages refer to it."""
        return self.roster[0] if self.roster else None

    @property
    def kill_targets(self) -> List[str]:
        names = list(self.boss_names)
        if self.boss and self.boss != UNKNOWN_BOSS and self.boss not in names:
            names.insert(0, self.boss)
        return names


class SegmentationStrategy(ABC):
    """
    Splits a tokenized log into encounters.

    Implementations keep all working state local to one ``segment`` call, so a
    single instance can serve concurrent callers.
    """

    name: str = "base"

    def __init__(self, settings: Optional[SegmentationSettings] = None):
        self.settings = settings or SegmentationSettings()

    @abstractmethod
    def segment(
        self,
        lines: Sequence[LogLine],
        context: Optional[SegmentationContext] = None,
        debug_log: Optional[List[str]] = None,
    ) -> List[Encounter]:
        """
        Segment lines into encounters.

        Args:
            lines: Tokenized lines in log order
            context: Roster and boss/instance guesses for the log
            debug_log: Optional list that receives one trace line per decision

        Returns:
            Encounters in log order
        """

    @staticmethod
    def _trace(debug_log: Optional[List[str]], message: str):
        logger.debug(message)
        if debug_log is not None:
            debug_log.append(f"[DEBUG] {message}")
