"""
Damage event extraction from chat-style combat messages.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from .patterns import (
    DEFAULT_DAMAGE_PATTERNS,
    YOU,
    DamagePattern,
    match_damage,
    match_skill_use,
)
from .roster import canonical_name
from .tokenizer import OPCODE_CHAT, LogLine
from ..models.actor import ActorInfo, DamageEvent

logger = logging.getLogger(__name__)

DEFAULT_SKILL_LABEL = "chat"


@dataclass
class DamageExtraction:
    """Actors and events gathered from one encounter's lines."""

    actors: Dict[str, ActorInfo] = field(default_factory=dict)
    events: List[DamageEvent] = field(default_factory=list)
    skipped_lines: int = 0

    def get_actor(self, name: str) -> ActorInfo:
        actor = self.actors.get(name)
        if actor is None:
            actor = ActorInfo(name=name)
            self.actors[name] = actor
        return actor


class DamageEventExtractor:
    """
    Turns chat damage lines into DamageEvents and per-actor totals.

    Skill-use lines (ability opcodes and ``"<actor> uses <skill>"`` chat)
    are recorded into the actor's skill set, and the most recent skill is
    used to label that actor's next hit.
    """

    def __init__(
        self,
        patterns: Sequence[DamagePattern] = DEFAULT_DAMAGE_PATTERNS,
        local_player: Optional[str] = None,
        track_skills: bool = True,
    ):
        self.patterns = tuple(patterns)
        self.local_player = local_player
        self.track_skills = track_skills

    def _resolve(self, name: str) -> str:
        if self.local_player and name.lower() == YOU:
            return self.local_player
        return canonical_name(name)

    def extract(self, lines: Sequence[LogLine]) -> DamageExtraction:
        """
        Extract damage events from one encounter's lines.

        Args:
            lines: Tokenized lines belonging to a single encounter

        Returns:
            DamageExtraction with lazily created actors and ordered events
        """
        result = DamageExtraction()
        last_skill: Dict[str, str] = {}

        for line in lines:
            if self.track_skills:
                use = match_skill_use(line)
                if use is not None:
                    actor_name = self._resolve(use.actor)
                    result.get_actor(actor_name).skills_used.add(use.skill)
                    last_skill[actor_name] = use.skill
                    continue

            if line.opcode != OPCODE_CHAT:
                continue

            match = match_damage(line.message(), self.patterns)
            if match is None:
                continue

            attacker = self._resolve(match.attacker)
            target = self._resolve(match.target)
            if not attacker or not target or match.amount <= 0:
                result.skipped_lines += 1
                continue
            if line.timestamp is None:
                result.skipped_lines += 1
                logger.debug(f"Skipping damage line {line.index} without timestamp")
                continue

            result.get_actor(attacker).record_damage_dealt(match.amount)
            result.get_actor(target).record_damage_taken(match.amount)

            result.events.append(
                DamageEvent(
                    timestamp=line.timestamp,
                    attacker=attacker,
                    target=target,
                    skill=last_skill.get(attacker, DEFAULT_SKILL_LABEL),
                    amount=match.amount,
                    crit=match.crit,
                    direct_hit=match.direct_hit,
                )
            )

        logger.debug(
            f"Extracted {len(result.events)} damage events for {len(result.actors)} actors "
            f"({result.skipped_lines} skipped)"
        )
        return result
