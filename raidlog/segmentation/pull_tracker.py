"""
Pull-aware segmentation driven by party life state, boss kills and zone changes.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from .base import SegmentationContext, SegmentationStrategy
from .boss_hp import BossHpTracker
from ..config.settings import SegmentationSettings
from ..models.encounter import Encounter, EncounterType
from ..parser.errors import NoRosterFoundError
from ..parser.patterns import (
    YOU,
    compile_kill_patterns,
    is_zone_transition,
    match_death,
    match_kill,
    match_resurrection,
)
from ..parser.roster import strip_server
from ..parser.tokenizer import ACTION_OPCODES, FIELD_ACTOR_NAME, LogLine

logger = logging.getLogger(__name__)

Position = Tuple[int, LogLine]


@dataclass
class PullState:
    """Working state for one segmentation call."""

    roster: Tuple[str, ...]
    alive: Dict[str, bool] = field(default_factory=dict)
    in_encounter: bool = False
    start: Optional[Position] = None
    pending_wipe: Optional[Position] = None
    last_end_ms: Optional[int] = None
    deaths: List[Tuple[str, int]] = field(default_factory=list)
    revives: List[Tuple[str, int]] = field(default_factory=list)

    @classmethod
    def initial(cls, roster: Sequence[str]) -> "PullState":
        state = cls(roster=tuple(roster))
        state.reset_pull()
        return state

    def reset_pull(self):
        """Back to the everyone-alive, out-of-combat state."""
        self.alive = {name: True for name in self.roster}
        self.in_encounter = False
        self.start = None
        self.pending_wipe = None
        self.deaths = []
        self.revives = []

    def open(self, pos: int, line: LogLine):
        self.reset_pull()
        self.in_encounter = True
        self.start = (pos, line)

    @property
    def all_dead(self) -> bool:
        return bool(self.alive) and not any(self.alive.values())

    def in_debounce(self, ts_ms: int, debounce_ms: int) -> bool:
        return self.last_end_ms is not None and ts_ms - self.last_end_ms < debounce_ms


class PullSegmenter(SegmentationStrategy):
    """
    Detects pulls with a party life-state machine.

    A pull opens on the first action line by a party member (outside the
    post-pull debounce window). It closes on:

    - a boss kill line (``defeats <boss>`` / ``<boss> is defeated``), at once;
    - a wipe: every party member dead at the same time, confirmed once the
      grace period passes without a resurrection;
    - a zone change, duty reset or shutdown message;
    - the end of the log.

    Wipes, zone-closed and trailing pulls shorter than the configured minimum
    line count or duration are dropped.
    """

    name = "pull"

    def __init__(self, settings: Optional[SegmentationSettings] = None):
        super().__init__(settings)

    def segment(
        self,
        lines: Sequence[LogLine],
        context: Optional[SegmentationContext] = None,
        debug_log: Optional[List[str]] = None,
    ) -> List[Encounter]:
        context = context or SegmentationContext()
        if not context.roster:
            raise NoRosterFoundError(len(lines))

        party = {name.lower(): name for name in context.roster}
        kill_patterns = compile_kill_patterns(context.kill_targets)
        state = PullState.initial(context.roster)
        encounters: List[Encounter] = []
        last_timed: Optional[Position] = None

        for pos, line in enumerate(lines):
            ts_ms = line.timestamp_ms
            if ts_ms is None:
                continue
            last_timed = (pos, line)

            if state.pending_wipe is not None:
                wipe_line = state.pending_wipe[1]
                if ts_ms - wipe_line.timestamp_ms >= self.settings.wipe_grace_ms:
                    self._close_wipe(state, lines, context, encounters, debug_log)

            if not state.in_encounter:
                actor = self._pull_actor(line, party)
                if actor is None:
                    continue
                if state.in_debounce(ts_ms, self.settings.pull_debounce_ms):
                    self._trace(debug_log, f"Pull by {actor} at line {line.index} ignored (debounce)")
                    continue
                state.open(pos, line)
                self._trace(
                    debug_log,
                    f"Encounter start: {context.instance} / {context.boss} by {actor} "
                    f"at {line.timestamp_str} (line {line.index})",
                )
                continue

            if is_zone_transition(line):
                if state.pending_wipe is not None:
                    self._close_wipe(state, lines, context, encounters, debug_log)
                else:
                    self._trace(debug_log, f"Zone transition at line {line.index}")
                    self._close(
                        state, lines, (pos, line), None, context.boss, True, context, encounters, debug_log
                    )
                continue

            killed = match_kill(line, kill_patterns) if kill_patterns else None
            if killed:
                self._trace(debug_log, f"Boss {killed} defeated at {line.timestamp_str} (line {line.index})")
                state.last_end_ms = ts_ms
                self._close(
                    state, lines, (pos, line), EncounterType.KILL, killed, False, context, encounters, debug_log
                )
                continue

            dead = self._party_death(line, party, context.local_player)
            if dead:
                state.alive[dead] = False
                state.deaths.append((dead, ts_ms))
                self._trace(debug_log, f"Death: {dead} at {line.timestamp_str} (line {line.index})")

            revived = self._party_revive(line, party)
            if revived:
                state.alive[revived] = True
                state.revives.append((revived, ts_ms))
                self._trace(debug_log, f"Revive: {revived} at {line.timestamp_str} (line {line.index})")
                if state.pending_wipe is not None:
                    self._trace(debug_log, "Pending wipe cancelled by resurrection")
                    state.pending_wipe = None

            if state.pending_wipe is None and state.all_dead:
                state.pending_wipe = (pos, line)
                self._trace(debug_log, f"All party members dead at line {line.index}, wipe pending")

        if state.pending_wipe is not None:
            self._close_wipe(state, lines, context, encounters, debug_log)
        elif state.in_encounter and last_timed is not None:
            self._trace(debug_log, "Log ended inside an encounter")
            self._close(state, lines, last_timed, None, context.boss, True, context, encounters, debug_log)

        logger.info(f"Pull segmentation found {len(encounters)} encounters")
        return encounters

    @staticmethod
    def _pull_actor(line: LogLine, party: Dict[str, str]) -> Optional[str]:
        if line.opcode not in ACTION_OPCODES:
            return None
        name = strip_server(line.field(FIELD_ACTOR_NAME))
        return party.get(name.lower())

    @staticmethod
    def _party_death(line: LogLine, party: Dict[str, str], local_player: Optional[str]) -> Optional[str]:
        name = match_death(line)
        if name is None:
            return None
        if name.lower() == YOU:
            return local_player
        return party.get(strip_server(name).lower())

    @staticmethod
    def _party_revive(line: LogLine, party: Dict[str, str]) -> Optional[str]:
        use = match_resurrection(line)
        if use is None or not use.target:
            return None
        return party.get(strip_server(use.target).lower())

    def _close_wipe(self, state, lines, context, encounters, debug_log):
        wipe_pos, wipe_line = state.pending_wipe
        state.last_end_ms = wipe_line.timestamp_ms
        self._trace(debug_log, f"Encounter end (wipe) at {wipe_line.timestamp_str} (line {wipe_line.index})")
        self._close(
            state, lines, (wipe_pos, wipe_line), EncounterType.WIPE, context.boss, True, context, encounters, debug_log
        )

    def _close(
        self,
        state: PullState,
        lines: Sequence[LogLine],
        end: Position,
        encounter_type: Optional[EncounterType],
        boss: str,
        apply_filter: bool,
        context: SegmentationContext,
        encounters: List[Encounter],
        debug_log: Optional[List[str]],
    ) -> Optional[Encounter]:
        start_pos, start_line = state.start
        end_pos, end_line = end
        deaths, revives = state.deaths, state.revives
        state.reset_pull()

        line_count = end_line.index - start_line.index + 1
        duration_ms = end_line.timestamp_ms - start_line.timestamp_ms
        if apply_filter and (
            line_count < self.settings.min_encounter_lines
            or duration_ms < self.settings.min_encounter_duration_ms
        ):
            self._trace(
                debug_log,
                f"Discarding short encounter at line {start_line.index} "
                f"({line_count} lines, {duration_ms}ms)",
            )
            return None

        tracker = BossHpTracker(boss).feed_all(lines[start_pos : end_pos + 1])
        if encounter_type is None:
            encounter_type = EncounterType.KILL if tracker.lowest_hp_pct == 0 else EncounterType.WIPE

        encounter = Encounter(
            start_line=start_line.index,
            end_line=end_line.index,
            start_time=start_line.timestamp,
            end_time=end_line.timestamp,
            boss=boss,
            instance=context.instance,
            encounter_type=encounter_type,
            party_deaths=deaths,
            party_revives=revives,
        )
        tracker.apply(encounter)
        encounters.append(encounter)

        pct = encounter.lowest_boss_hp_pct
        self._trace(
            debug_log,
            f"Encounter {len(encounters)} closed ({encounter_type.value}), lowest boss HP: "
            f"{encounter.lowest_boss_hp} ({'no hp data' if pct is None else f'{pct}%'})",
        )
        return encounter
