"""
Actor and damage event models.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Set

UNKNOWN_ACTOR = "Unknown"


class ActorClass(Enum):
    """Role category assigned to an actor at classification time."""

    BOSS = "boss"
    ADD = "add"
    PLAYER = "player"


@dataclass
class ActorInfo:
    """
    Accumulated statistics for one actor within one encounter.

    Created the first time the actor shows up as attacker or target; counters
    only ever grow until classification.
    """

    name: str
    id: Optional[str] = None
    job: Optional[str] = None
    role: Optional[str] = None
    classification: Optional[ActorClass] = None
    total_damage_dealt: int = 0
    total_damage_taken: int = 0
    hit_count: int = 0
    skills_used: Set[str] = field(default_factory=set)

    @property
    def is_player(self) -> bool:
        return self.classification is ActorClass.PLAYER

    def record_damage_dealt(self, amount: int):
        self.total_damage_dealt += amount

    def record_damage_taken(self, amount: int):
        self.total_damage_taken += amount
        self.hit_count += 1

    def to_summary(self) -> Dict[str, Any]:
        """Minimal storage record: name, id, job and role."""
        return {
            "name": self.name,
            "id": self.id,
            "job": self.job,
            "role": self.role,
        }


@dataclass(frozen=True)
class DamageEvent:
    """A single damage line scoped to one encounter."""

    timestamp: datetime
    attacker: str
    target: str
    skill: str
    amount: int
    crit: bool = False
    direct_hit: bool = False
    event_type: str = "dmg"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ts": self.timestamp.isoformat(),
            "actorName": self.attacker,
            "target": self.target,
            "type": self.event_type,
            "skill": self.skill,
            "amount": self.amount,
            "crit": self.crit,
            "direct_hit": self.direct_hit,
        }


@dataclass
class ClassificationResult:
    """Outcome of classifying one encounter's actors."""

    boss: Optional[ActorInfo] = None
    adds: List[ActorInfo] = field(default_factory=list)
    party_members: List[ActorInfo] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "boss": self.boss.to_summary() if self.boss else None,
            "adds": [add.to_summary() for add in self.adds],
            "partyMembers": [member.to_summary() for member in self.party_members],
        }
