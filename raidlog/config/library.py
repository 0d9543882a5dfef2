"""
Immutable instance/boss keyword library.
"""

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Iterable, Mapping, Optional, Tuple

from . import game_data

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InstanceEntry:
    """One duty with its bosses and the keywords that identify it."""

    instance: str
    bosses: Tuple[str, ...] = ()
    duty_keywords: Tuple[str, ...] = ()
    aliases: Tuple[str, ...] = ()
    boss_keywords: Tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "InstanceEntry":
        def _strings(key: str) -> Tuple[str, ...]:
            return tuple(str(v) for v in data.get(key) or [] if str(v).strip())

        return cls(
            instance=str(data["instance"]),
            bosses=_strings("bosses"),
            duty_keywords=_strings("duty_keywords"),
            aliases=_strings("aliases"),
            boss_keywords=_strings("boss_keywords"),
        )

    @property
    def primary_boss(self) -> Optional[str]:
        return self.bosses[0] if self.bosses else None


def build_instance_library(
    extra_entries: Optional[Iterable[Mapping[str, Any]]] = None,
) -> Tuple[InstanceEntry, ...]:
    """
    Build the library from the static table plus optional extras.

    Extras are appended after the static entries; invalid ones are skipped.
    """
    entries = [InstanceEntry.from_dict(d) for d in game_data.INSTANCE_LIBRARY]
    for raw in extra_entries or []:
        try:
            entries.append(InstanceEntry.from_dict(raw))
        except (KeyError, TypeError) as e:
            logger.warning(f"Skipping invalid instance entry {raw!r}: {e}")
    return tuple(entries)


@lru_cache(maxsize=1)
def default_instance_library() -> Tuple[InstanceEntry, ...]:
    return build_instance_library()
