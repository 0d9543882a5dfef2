"""
Immutable job/skill lookup table.

The table is built once from the static definitions in ``game_data`` (plus any
configured extras) and then passed by reference to whatever needs it. Nothing
here mutates after construction, so one table can be shared freely.
"""

import logging
from dataclasses import dataclass
from functools import lru_cache
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from . import game_data

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class JobSkill:
    """A named job action."""

    id: int
    name: str
    potency: int = 0
    type: str = "damage"


@dataclass(frozen=True)
class JobDefinition:
    """A job with its role and recognizable skills."""

    id: int
    abbreviation: str
    name: str
    role: str
    skills: Tuple[JobSkill, ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "JobDefinition":
        """Build a definition from a raw mapping (static table or YAML)."""
        role = str(data["role"]).lower()
        if role not in game_data.ROLES:
            raise ValueError(f"Invalid role {role!r} for job {data.get('abbreviation')}")

        skills = tuple(
            JobSkill(
                id=int(skill.get("id", 0)),
                name=str(skill["name"]),
                potency=int(skill.get("potency", 0)),
                type=str(skill.get("type", "damage")),
            )
            for skill in data.get("skills", [])
        )
        return cls(
            id=int(data.get("id", 0)),
            abbreviation=str(data["abbreviation"]).upper(),
            name=str(data.get("name", data["abbreviation"])),
            role=role,
            skills=skills,
        )


class JobTable:
    """
    Read-only lookup over job definitions.

    Skill names are matched case-insensitively and exactly. A skill name shared
    by several jobs maps to all of them, in table order.
    """

    def __init__(self, jobs: Iterable[JobDefinition]):
        ordered: Dict[str, JobDefinition] = {}
        for job in jobs:
            # Later definitions replace earlier ones with the same abbreviation
            ordered[job.abbreviation] = job

        self._jobs: Tuple[JobDefinition, ...] = tuple(ordered.values())
        self._by_abbreviation = MappingProxyType({j.abbreviation: j for j in self._jobs})

        by_skill: Dict[str, List[JobDefinition]] = {}
        skill_index: Dict[str, Tuple[JobDefinition, JobSkill]] = {}
        for job in self._jobs:
            for skill in job.skills:
                key = skill.name.lower()
                jobs_for_skill = by_skill.setdefault(key, [])
                if job not in jobs_for_skill:
                    jobs_for_skill.append(job)
                skill_index.setdefault(key, (job, skill))

        self._jobs_by_skill = MappingProxyType({k: tuple(v) for k, v in by_skill.items()})
        self._skill_index = MappingProxyType(skill_index)

    @classmethod
    def from_definitions(cls, definitions: Iterable[Mapping[str, Any]]) -> "JobTable":
        return cls(JobDefinition.from_dict(d) for d in definitions)

    @property
    def jobs(self) -> Tuple[JobDefinition, ...]:
        return self._jobs

    def __len__(self) -> int:
        return len(self._jobs)

    def get_job(self, abbreviation: str) -> Optional[JobDefinition]:
        """Look up a job by abbreviation, e.g. ``"PLD"``."""
        return self._by_abbreviation.get(abbreviation.upper())

    def get_job_by_id(self, job_id: int) -> Optional[JobDefinition]:
        for job in self._jobs:
            if job.id == job_id:
                return job
        return None

    def jobs_for_skill(self, skill_name: str) -> Tuple[JobDefinition, ...]:
        """All jobs owning a skill with this exact (case-insensitive) name."""
        return self._jobs_by_skill.get(skill_name.strip().lower(), ())

    def find_skill(self, skill_name: str) -> Optional[Tuple[JobDefinition, JobSkill]]:
        """First job/skill pair whose skill name matches exactly."""
        return self._skill_index.get(skill_name.strip().lower())

    def find_skills_by_partial_name(self, partial: str) -> List[Tuple[JobDefinition, JobSkill]]:
        needle = partial.lower()
        return [
            (job, skill)
            for job in self._jobs
            for skill in job.skills
            if needle in skill.name.lower()
        ]

    def jobs_by_role(self, role: str) -> List[JobDefinition]:
        return [job for job in self._jobs if job.role == role.lower()]

    def stats(self) -> Dict[str, Any]:
        """Job and skill counts, broken down by role."""
        jobs_by_role: Dict[str, int] = {}
        for job in self._jobs:
            jobs_by_role[job.role] = jobs_by_role.get(job.role, 0) + 1
        return {
            "total_jobs": len(self._jobs),
            "total_skills": sum(len(job.skills) for job in self._jobs),
            "jobs_by_role": jobs_by_role,
        }


def build_job_table(extra_definitions: Optional[Iterable[Mapping[str, Any]]] = None) -> JobTable:
    """
    Build a job table from the static definitions plus optional extras.

    Invalid extra entries are logged and skipped.
    """
    jobs = [JobDefinition.from_dict(d) for d in game_data.JOB_DEFINITIONS]
    for raw in extra_definitions or []:
        try:
            jobs.append(JobDefinition.from_dict(raw))
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Skipping invalid job definition {raw!r}: {e}")

    table = JobTable(jobs)
    logger.debug(f"Built job table with {len(table)} jobs")
    return table


@lru_cache(maxsize=1)
def default_job_table() -> JobTable:
    """Process-wide table built from the static definitions only."""
    return build_job_table()
