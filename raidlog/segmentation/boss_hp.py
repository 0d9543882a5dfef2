"""
Boss HP telemetry from HP-update lines.
"""

from typing import Iterable, List, Optional

from ..models.encounter import BossHpSample, Encounter
from ..parser.tokenizer import (
    FIELD_ACTOR_NAME,
    FIELD_CURRENT_HP,
    FIELD_MAX_HP,
    HP_OPCODES,
    LogLine,
)


class BossHpTracker:
    """Collects current/max HP readings for one boss."""

    def __init__(self, boss_name: str):
        self.boss_name = boss_name.lower() if boss_name else ""
        self.samples: List[BossHpSample] = []

    def feed(self, line: LogLine):
        if not self.boss_name or line.opcode not in HP_OPCODES or len(line.fields) <= FIELD_MAX_HP:
            return
        if self.boss_name not in line.fields[FIELD_ACTOR_NAME].lower():
            return
        try:
            hp = int(float(line.fields[FIELD_CURRENT_HP]))
            max_hp = int(float(line.fields[FIELD_MAX_HP]))
        except ValueError:
            return
        self.samples.append(BossHpSample(hp=hp, max_hp=max_hp, timestamp=line.timestamp))

    def feed_all(self, lines: Iterable[LogLine]) -> "BossHpTracker":
        for line in lines:
            self.feed(line)
        return self

    @property
    def lowest_hp(self) -> Optional[int]:
        if not self.samples:
            return None
        return min(sample.hp for sample in self.samples)

    @property
    def max_hp(self) -> Optional[int]:
        return self.samples[0].max_hp if self.samples else None

    @property
    def lowest_hp_pct(self) -> Optional[float]:
        """Lowest HP as a percentage of max, one decimal; 0 means a clean kill."""
        lowest = self.lowest_hp
        if lowest is None:
            return None
        if lowest == 0:
            return 0.0
        max_hp = self.max_hp
        if not max_hp:
            return None
        return round(lowest / max_hp * 100, 1)

    def apply(self, encounter: Encounter) -> Encounter:
        encounter.boss_hp_samples = list(self.samples)
        encounter.lowest_boss_hp = self.lowest_hp
        encounter.max_hp = self.max_hp
        encounter.lowest_boss_hp_pct = self.lowest_hp_pct
        return encounter
