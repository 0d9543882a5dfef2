"""
Idle-gap segmentation: cheap boundary detection for bulk pre-scans.
"""

import logging
from typing import List, Optional, Sequence, Tuple

from .base import SegmentationContext, SegmentationStrategy
from .boss_hp import BossHpTracker
from ..config.settings import SegmentationSettings
from ..models.encounter import Encounter, EncounterType
from ..parser.patterns import DEFAULT_DAMAGE_PATTERNS, compile_kill_patterns, is_active_line, match_kill
from ..parser.tokenizer import LogLine

logger = logging.getLogger(__name__)


class IdleGapSegmenter(SegmentationStrategy):
    """
    Splits a log into runs of activity separated by idle gaps.

    Active lines are ability uses and chat damage messages. Whenever two
    consecutive active lines are more than ``idle_gap_ms`` apart a new
    encounter starts. A log with no active lines becomes one encounter
    spanning every timestamped line.
    """

    name = "idle"

    def __init__(
        self,
        settings: Optional[SegmentationSettings] = None,
        idle_gap_ms: Optional[int] = None,
        patterns=DEFAULT_DAMAGE_PATTERNS,
    ):
        super().__init__(settings)
        self.idle_gap_ms = idle_gap_ms if idle_gap_ms is not None else self.settings.idle_gap_ms
        self.patterns = patterns

    def segment(
        self,
        lines: Sequence[LogLine],
        context: Optional[SegmentationContext] = None,
        debug_log: Optional[List[str]] = None,
    ) -> List[Encounter]:
        context = context or SegmentationContext()
        timed = [(pos, line) for pos, line in enumerate(lines) if line.timestamp is not None]
        if not timed:
            logger.warning("No timestamped lines; nothing to segment")
            return []

        active = [(pos, line) for pos, line in timed if is_active_line(line, self.patterns)]
        if not active:
            logger.warning("No active combat lines; treating the whole log as one encounter")
            self._trace(debug_log, f"No active lines, single encounter over {len(lines)} lines")
            encounter = self._build(lines, (0, timed[0][1]), (len(lines) - 1, timed[-1][1]), context)
            encounter.start_line = lines[0].index
            encounter.end_line = lines[-1].index
            return [encounter]

        runs: List[Tuple[Tuple[int, LogLine], Tuple[int, LogLine]]] = []
        run_start = active[0]
        previous = active[0]
        for current in active[1:]:
            gap = current[1].timestamp_ms - previous[1].timestamp_ms
            if gap > self.idle_gap_ms:
                self._trace(
                    debug_log,
                    f"Idle gap of {gap}ms after line {previous[1].index}, closing run "
                    f"started at line {run_start[1].index}",
                )
                runs.append((run_start, previous))
                run_start = current
            previous = current
        runs.append((run_start, previous))

        encounters = [self._build(lines, first, last, context) for first, last in runs]
        logger.info(f"Idle-gap segmentation found {len(encounters)} encounters")
        return encounters

    def _build(
        self,
        lines: Sequence[LogLine],
        first: Tuple[int, LogLine],
        last: Tuple[int, LogLine],
        context: SegmentationContext,
    ) -> Encounter:
        first_pos, first_line = first
        last_pos, last_line = last
        span = lines[first_pos : last_pos + 1]

        boss = context.boss
        encounter_type = EncounterType.WIPE
        kill_patterns = compile_kill_patterns(context.kill_targets)
        if kill_patterns:
            for line in span:
                killed = match_kill(line, kill_patterns)
                if killed:
                    boss = killed
                    encounter_type = EncounterType.KILL
                    break

        encounter = Encounter(
            start_line=first_line.index,
            end_line=last_line.index,
            start_time=first_line.timestamp,
            end_time=last_line.timestamp,
            boss=boss,
            instance=context.instance,
            encounter_type=encounter_type,
        )
        return BossHpTracker(boss).feed_all(span).apply(encounter)
