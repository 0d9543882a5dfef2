"""
Actor classification: party member, boss or add.
"""

import logging
from collections import Counter
from typing import Iterable, List, Mapping, Optional

from ..config.jobs import JobDefinition, JobTable, default_job_table
from ..models.actor import ActorClass, ActorInfo, ClassificationResult

logger = logging.getLogger(__name__)


class ActorClassifier:
    """
    Classifies the actors of one encounter.

    Actors using any skill from the job table are players. The remaining
    actors are compared against their own group's mean damage taken and hit
    count; exactly one of them ends up as the boss.
    """

    BOSS_DAMAGE_RATIO = 2.0
    BOSS_HIT_RATIO = 1.5
    BOSS_MIN_DAMAGE_TAKEN = 10000
    HEAVY_DAMAGE_TAKEN = 50000
    HEAVY_HIT_RATIO = 1.2

    def __init__(self, job_table: Optional[JobTable] = None):
        self.job_table = job_table if job_table is not None else default_job_table()

    def match_job(self, skills: Iterable[str]) -> Optional[JobDefinition]:
        """
        Job with the most exact skill-name matches.

        Ties go to the job listed first in the table.
        """
        hits: Counter = Counter()
        for skill in skills:
            for job in self.job_table.jobs_for_skill(skill):
                hits[job.abbreviation] += 1
        if not hits:
            return None

        best = max(hits.values())
        for job in self.job_table.jobs:
            if hits.get(job.abbreviation) == best:
                return job
        return None

    def classify_actors(self, actors: Mapping[str, ActorInfo]) -> ClassificationResult:
        """
        Classify every actor in place and group the results.

        Args:
            actors: Actor name to accumulated statistics for one encounter

        Returns:
            ClassificationResult with one boss (if any NPC exists), the
            remaining NPCs as adds and the players as party members, each
            list in input order
        """
        party: List[ActorInfo] = []
        npcs: List[ActorInfo] = []

        for actor in actors.values():
            job = self.match_job(actor.skills_used)
            if job is not None:
                actor.job = job.abbreviation
                actor.role = job.role
                actor.classification = ActorClass.PLAYER
                party.append(actor)
            else:
                actor.job = None
                actor.role = None
                npcs.append(actor)

        boss: Optional[ActorInfo] = None
        if npcs:
            mean_taken = sum(a.total_damage_taken for a in npcs) / len(npcs)
            mean_hits = sum(a.hit_count for a in npcs) / len(npcs)

            for actor in npcs:
                actor.classification = self._classify_npc(actor, mean_taken, mean_hits)
                if actor.classification is not ActorClass.BOSS:
                    continue
                if boss is None or actor.total_damage_taken > boss.total_damage_taken:
                    if boss is not None:
                        boss.classification = ActorClass.ADD
                    boss = actor
                else:
                    actor.classification = ActorClass.ADD

            if boss is None:
                boss = max(npcs, key=lambda a: a.total_damage_taken)
                boss.classification = ActorClass.BOSS
                logger.debug(f"No actor met boss thresholds; promoted {boss.name}")

        adds = [actor for actor in npcs if actor is not boss]
        logger.debug(
            f"Classified {len(party)} party members, {len(adds)} adds, "
            f"boss={boss.name if boss else None}"
        )
        return ClassificationResult(boss=boss, adds=adds, party_members=party)

    def _classify_npc(self, actor: ActorInfo, mean_taken: float, mean_hits: float) -> ActorClass:
        damage_ratio = actor.total_damage_taken / mean_taken if mean_taken > 0 else 0
        hit_ratio = actor.hit_count / mean_hits if mean_hits > 0 else 0

        if (
            damage_ratio >= self.BOSS_DAMAGE_RATIO
            and hit_ratio >= self.BOSS_HIT_RATIO
            and actor.total_damage_taken > self.BOSS_MIN_DAMAGE_TAKEN
        ):
            return ActorClass.BOSS
        if actor.total_damage_taken > self.HEAVY_DAMAGE_TAKEN and hit_ratio >= self.HEAVY_HIT_RATIO:
            return ActorClass.BOSS
        return ActorClass.ADD
