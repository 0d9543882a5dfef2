"""
Data models for raid combat log analysis.
"""

from .actor import ActorClass, ActorInfo, ClassificationResult, DamageEvent, UNKNOWN_ACTOR
from .encounter import BossHpSample, Encounter, EncounterType

__all__ = [
    "ActorClass",
    "ActorInfo",
    "ClassificationResult",
    "DamageEvent",
    "UNKNOWN_ACTOR",
    "BossHpSample",
    "Encounter",
    "EncounterType",
]
