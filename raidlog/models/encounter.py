"""
Encounter model shared by every segmentation strategy.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from .actor import ClassificationResult


class EncounterType(Enum):
    """How a pull ended."""

    KILL = "kill"
    WIPE = "wipe"


@dataclass(frozen=True)
class BossHpSample:
    """One boss HP reading from an HP telemetry line."""

    hp: int
    max_hp: int
    timestamp: Optional[datetime] = None


def _iso(timestamp: datetime) -> str:
    return timestamp.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


@dataclass
class Encounter:
    """
    One boss pull, bounded by a line subrange of the source log.

    ``start_line``/``end_line`` are source line indexes (inclusive).
    ``party_deaths``/``party_revives`` hold (member, epoch ms) pairs in log
    order, as seen by the pull tracker.
    """

    start_line: int
    end_line: int
    start_time: datetime
    end_time: datetime
    boss: str
    instance: str
    encounter_type: EncounterType
    lowest_boss_hp: Optional[int] = None
    max_hp: Optional[int] = None
    lowest_boss_hp_pct: Optional[float] = None
    boss_hp_samples: List[BossHpSample] = field(default_factory=list)
    party_deaths: List[Tuple[str, int]] = field(default_factory=list)
    party_revives: List[Tuple[str, int]] = field(default_factory=list)
    classification: Optional[ClassificationResult] = None

    @property
    def duration_ms(self) -> int:
        return int(round((self.end_time - self.start_time).total_seconds() * 1000))

    @property
    def duration(self) -> float:
        """Duration in seconds."""
        return (self.end_time - self.start_time).total_seconds()

    @property
    def line_count(self) -> int:
        return self.end_line - self.start_line + 1

    @property
    def is_kill(self) -> bool:
        return self.encounter_type is EncounterType.KILL

    def get_duration_str(self) -> str:
        """Get human-readable duration string."""
        minutes = int(self.duration // 60)
        seconds = int(self.duration % 60)
        return f"{minutes}:{seconds:02d}"

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "start": _iso(self.start_time),
            "end": _iso(self.end_time),
            "startLine": self.start_line,
            "endLine": self.end_line,
            "boss": self.boss,
            "instance": self.instance,
            "type": self.encounter_type.value,
            "lowestBossHp": self.lowest_boss_hp,
            "maxHp": self.max_hp,
            "lowestBossHpPct": self.lowest_boss_hp_pct,
        }
        if self.classification is not None:
            data["classification"] = self.classification.to_dict()
        return data
