"""
Stage 2 pipeline: full detail for one previously indexed encounter.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Union

from ..analyzer.classifier import ActorClassifier
from ..analyzer.metrics import ActorMetrics, MetricsCalculator
from ..config.jobs import JobTable
from ..config.loader import LoadedConfig
from ..config.settings import ParserSettings
from ..models.actor import ActorInfo, ClassificationResult, DamageEvent
from ..models.encounter import Encounter
from ..parser.damage import DamageEventExtractor
from ..parser.errors import NoEncounterLinesError
from ..parser.parser import extract_encounter_lines
from ..parser.tokenizer import LineTokenizer, LogLine

logger = logging.getLogger(__name__)


@dataclass
class EncounterDetail:
    """Actors, events, classification and metrics of one encounter."""

    encounter: Encounter
    actors: Dict[str, ActorInfo]
    events: List[DamageEvent]
    classification: ClassificationResult
    metrics: Dict[str, ActorMetrics] = field(default_factory=dict)
    duration_seconds: int = 1
    window_line_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "encounter": self.encounter.to_dict(),
            "durationSeconds": self.duration_seconds,
            "events": [event.to_dict() for event in self.events],
            "metrics": [m.to_dict() for m in self.metrics.values()],
        }


class EncounterProcessor:
    """
    Re-scans only the lines around one encounter and extracts everything.

    The window is the encounter's time range widened by the detail buffer.
    """

    def __init__(
        self,
        settings: Optional[ParserSettings] = None,
        job_table: Optional[JobTable] = None,
    ):
        self.settings = settings or ParserSettings()
        self.classifier = ActorClassifier(job_table)

    @classmethod
    def from_config(cls, config: LoadedConfig) -> "EncounterProcessor":
        return cls(settings=config.settings, job_table=config.job_table)

    def process(
        self,
        lines: Sequence[Union[str, LogLine]],
        encounter: Encounter,
        local_player: Optional[str] = None,
    ) -> EncounterDetail:
        """
        Extract detail for one encounter.

        Args:
            lines: The whole log, raw or tokenized
            encounter: Encounter boundaries from stage 1
            local_player: Name that first-person messages refer to

        Returns:
            EncounterDetail; the encounter's classification is set in place

        Raises:
            NoEncounterLinesError: no lines fall inside the encounter window
        """
        log_lines = self._tokenize(lines)
        window = extract_encounter_lines(
            log_lines, encounter.start_time, encounter.end_time, self.settings.detail_buffer_ms
        )
        if not window:
            raise NoEncounterLinesError(encounter.start_time.isoformat(), encounter.end_time.isoformat())
        logger.info(f"Processing {len(window)} lines for encounter at line {encounter.start_line}")

        extraction = DamageEventExtractor(local_player=local_player).extract(window)
        classification = self.classifier.classify_actors(extraction.actors)
        encounter.classification = classification

        duration = MetricsCalculator.encounter_duration_seconds(encounter)
        metrics = MetricsCalculator.calculate_actor_metrics(extraction.events, duration)

        logger.info(
            f"Encounter detail: {len(extraction.events)} events, {len(extraction.actors)} actors, "
            f"boss={classification.boss.name if classification.boss else None}"
        )
        return EncounterDetail(
            encounter=encounter,
            actors=extraction.actors,
            events=extraction.events,
            classification=classification,
            metrics=metrics,
            duration_seconds=duration,
            window_line_count=len(window),
        )

    @staticmethod
    def _tokenize(lines: Sequence[Union[str, LogLine]]) -> List[LogLine]:
        if lines and isinstance(lines[0], LogLine):
            return list(lines)
        return LineTokenizer().parse_lines([line for line in lines if line and line.strip()])
