"""
Stage 1 pipeline: roster, duty and encounter boundaries for a whole log.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, List, Optional, Sequence, Tuple, Union

from ..config.library import InstanceEntry
from ..config.loader import LoadedConfig
from ..config.settings import ParserSettings
from ..models.encounter import Encounter
from ..parser.errors import EmptyLogError, NoRosterFoundError
from ..parser.instances import InstanceMatcher
from ..parser.roster import PartyRosterExtractor
from ..parser.tokenizer import LineTokenizer, LogLine
from ..segmentation import IdleGapSegmenter, PullSegmenter, SegmentationContext

logger = logging.getLogger(__name__)

STRATEGY_PULL = PullSegmenter.name
STRATEGY_IDLE = IdleGapSegmenter.name
STRATEGIES = (STRATEGY_PULL, STRATEGY_IDLE)


@dataclass
class IndexResult:
    """Everything stage 1 learns about a log."""

    roster: List[str]
    instance: str
    boss: str
    boss_names: List[str]
    encounters: List[Encounter]
    line_count: int
    strategy: str
    debug_log: List[str] = field(default_factory=list)

    @property
    def kills(self) -> List[Encounter]:
        return [e for e in self.encounters if e.is_kill]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "roster": list(self.roster),
            "instance": self.instance,
            "boss": self.boss,
            "bossNames": list(self.boss_names),
            "strategy": self.strategy,
            "lineCount": self.line_count,
            "encounters": [e.to_dict() for e in self.encounters],
        }


class LogIndexer:
    """
    Finds encounter boundaries in a complete log.

    The pull strategy is the canonical one and needs a party roster; the
    idle strategy is the cheap pre-scan. The caller picks one explicitly;
    a pull-strategy failure is never retried with the idle strategy.
    """

    def __init__(
        self,
        settings: Optional[ParserSettings] = None,
        instance_library: Optional[Sequence[InstanceEntry]] = None,
        pet_names: Optional[FrozenSet[str]] = None,
    ):
        self.settings = settings or ParserSettings()
        self.roster_extractor = PartyRosterExtractor(
            scan_lines=self.settings.roster_scan_lines,
            max_party_size=self.settings.max_party_size,
            pet_names=pet_names,
        )
        self.instance_matcher = InstanceMatcher(
            library=instance_library, scan_lines=self.settings.instance_scan_lines
        )

    @classmethod
    def from_config(cls, config: LoadedConfig) -> "LogIndexer":
        return cls(
            settings=config.settings,
            instance_library=config.instance_library,
            pet_names=config.pet_names,
        )

    def index(
        self,
        lines: Sequence[Union[str, LogLine]],
        strategy: str = STRATEGY_PULL,
        idle_gap_ms: Optional[int] = None,
    ) -> IndexResult:
        """
        Index a log.

        Args:
            lines: Raw or tokenized log lines, in order
            strategy: ``"pull"`` or ``"idle"``
            idle_gap_ms: Idle threshold override for the idle strategy

        Returns:
            IndexResult with encounters in log order

        Raises:
            EmptyLogError: fewer than two non-empty lines
            NoRosterFoundError: no party members found (pull strategy)
            ValueError: unknown strategy name
        """
        if strategy not in STRATEGIES:
            raise ValueError(f"Unknown strategy {strategy!r}; expected one of {', '.join(STRATEGIES)}")

        log_lines, line_count = self._prepare(lines)
        debug_log: List[str] = []

        roster = self.roster_extractor.extract(log_lines)
        if strategy == STRATEGY_PULL and not roster:
            raise NoRosterFoundError(min(line_count, self.roster_extractor.scan_lines))
        debug_log.append(f"[DEBUG] Roster: {', '.join(roster) if roster else '(none)'}")

        match = self.instance_matcher.match(log_lines, roster)
        debug_log.append(f"[DEBUG] Instance: {match.instance}, boss: {match.boss} ({match.source})")

        context = SegmentationContext(
            roster=roster,
            boss=match.boss,
            instance=match.instance,
            boss_names=list(match.boss_names),
        )

        if strategy == STRATEGY_PULL:
            segmenter = PullSegmenter(self.settings.segmentation)
        else:
            segmenter = IdleGapSegmenter(self.settings.segmentation, idle_gap_ms=idle_gap_ms)
        encounters = segmenter.segment(log_lines, context, debug_log)

        logger.info(
            f"Indexed {line_count} lines with {strategy} strategy: "
            f"{len(encounters)} encounters ({sum(e.is_kill for e in encounters)} kills)"
        )
        return IndexResult(
            roster=roster,
            instance=match.instance,
            boss=match.boss,
            boss_names=list(match.boss_names),
            encounters=encounters,
            line_count=line_count,
            strategy=strategy,
            debug_log=debug_log,
        )

    def prescan(self, lines: Sequence[Union[str, LogLine]]) -> IndexResult:
        """Boundaries only, using the idle strategy with the wide pre-scan gap."""
        return self.index(
            lines,
            strategy=STRATEGY_IDLE,
            idle_gap_ms=self.settings.segmentation.prescan_idle_gap_ms,
        )

    @staticmethod
    def _prepare(lines: Sequence[Union[str, LogLine]]) -> Tuple[List[LogLine], int]:
        if lines and isinstance(lines[0], LogLine):
            if len(lines) < 2:
                raise EmptyLogError(len(lines))
            return list(lines), len(lines)

        raw_lines = [line for line in lines if line and line.strip()]
        if len(raw_lines) < 2:
            raise EmptyLogError(len(raw_lines))
        return LineTokenizer().parse_lines(raw_lines), len(raw_lines)
