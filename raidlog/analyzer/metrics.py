"""
Per-actor metrics for a closed encounter.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Iterable, List, Tuple

from ..models.actor import DamageEvent
from ..models.encounter import Encounter

DAMAGE_EVENT = "dmg"


@dataclass
class ActorMetrics:
    """
    Metric row for one actor.

    Only DPS is computed. HPS, deaths and uptime are placeholders kept for
    the storage shape and always hold their defaults.
    """

    actor_name: str
    total_damage: int
    dps: float
    hps: float = 0.0
    deaths: int = 0
    uptime: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "actorName": self.actor_name,
            "totalDamage": self.total_damage,
            "dps": self.dps,
            "hps": self.hps,
            "deaths": self.deaths,
            "uptime": self.uptime,
        }


class MetricsCalculator:
    """Calculates encounter-normalized damage metrics."""

    @staticmethod
    def encounter_duration_seconds(encounter: Encounter) -> int:
        """Whole seconds, rounded half up, never below 1."""
        seconds = Decimal(encounter.duration_ms) / Decimal(1000)
        return max(1, int(seconds.quantize(Decimal(1), rounding=ROUND_HALF_UP)))

    @staticmethod
    def calculate_actor_metrics(events: Iterable[DamageEvent], duration_seconds: int) -> Dict[str, ActorMetrics]:
        """Sum each attacker's damage events and divide by the duration."""
        totals: Dict[str, int] = {}
        for event in events:
            if event.event_type != DAMAGE_EVENT:
                continue
            totals[event.attacker] = totals.get(event.attacker, 0) + event.amount

        duration = max(1, duration_seconds)
        return {
            name: ActorMetrics(actor_name=name, total_damage=total, dps=total / duration)
            for name, total in totals.items()
        }

    @staticmethod
    def get_dps_rankings(metrics: Dict[str, ActorMetrics]) -> List[Tuple[str, float, ActorMetrics]]:
        """Get DPS rankings for actors."""
        rankings = [(m.actor_name, m.dps, m) for m in metrics.values() if m.total_damage > 0]
        return sorted(rankings, key=lambda x: x[1], reverse=True)
