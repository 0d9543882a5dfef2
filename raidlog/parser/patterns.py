"""
Free-text matchers for chat/system messages.

Damage extraction goes through the small ``DamagePattern`` interface so new
message shapes can be added without touching the segmenters. The remaining
helpers recognize deaths, resurrections, boss kills, zone transitions and
skill use.
"""

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Tuple

from .tokenizer import (
    ABILITY_OPCODES,
    FIELD_ACTOR_NAME,
    FIELD_SKILL_NAME,
    FIELD_TARGET_NAME,
    OPCODE_CHAT,
    OPCODE_ZONE,
    LogLine,
)
from ..config.game_data import RESURRECTION_ACTIONS
from ..models.actor import UNKNOWN_ACTOR

_CRIT_RE = re.compile(r"critical", re.IGNORECASE)
_DIRECT_HIT_RE = re.compile(r"direct hit", re.IGNORECASE)


@dataclass(frozen=True)
class DamageMatch:
    """Attacker/target/amount extracted from one message."""

    attacker: str
    target: str
    amount: int
    crit: bool = False
    direct_hit: bool = False


def _parse_amount(text: str) -> Optional[int]:
    try:
        return int(text.replace(",", ""))
    except ValueError:
        return None


class DamagePattern(ABC):
    """Extracts a damage tuple from a cleaned message, or nothing."""

    name: str = "pattern"

    @abstractmethod
    def match(self, message: str) -> Optional[DamageMatch]:
        """Return a match for ``message`` or None."""

    @staticmethod
    def flags(message: str) -> Tuple[bool, bool]:
        """Crit and direct-hit flags, tested anywhere in the message."""
        return bool(_CRIT_RE.search(message)), bool(_DIRECT_HIT_RE.search(message))


class HitPattern(DamagePattern):
    """``<attacker> hits <target> for <amount> damage.``"""

    name = "hit"
    REGEX = re.compile(r"^(.*?)\s+hits\s+(.+?)\s+for\s+([\d,]+)\s+damage\.?$", re.IGNORECASE)

    def match(self, message: str) -> Optional[DamageMatch]:
        m = self.REGEX.match(message)
        if not m:
            return None
        amount = _parse_amount(m.group(3))
        if amount is None:
            return None
        crit, direct_hit = self.flags(message)
        return DamageMatch(m.group(1).strip(), m.group(2).strip(), amount, crit, direct_hit)


class TakesPattern(DamagePattern):
    """``[Critical!] [Direct hit!] <target> takes <amount> damage.``"""

    name = "takes"
    REGEX = re.compile(
        r"^(?:(?:critical|direct hit)!\s*)*(.+?)\s+takes\s+([\d,]+)\s+damage\.?$", re.IGNORECASE
    )

    def match(self, message: str) -> Optional[DamageMatch]:
        m = self.REGEX.match(message)
        if not m:
            return None
        amount = _parse_amount(m.group(2))
        if amount is None:
            return None
        crit, direct_hit = self.flags(message)
        return DamageMatch(UNKNOWN_ACTOR, m.group(1).strip(), amount, crit, direct_hit)


DEFAULT_DAMAGE_PATTERNS: Tuple[DamagePattern, ...] = (HitPattern(), TakesPattern())


def match_damage(
    message: str, patterns: Sequence[DamagePattern] = DEFAULT_DAMAGE_PATTERNS
) -> Optional[DamageMatch]:
    """First pattern match for a message, in pattern order."""
    if not message:
        return None
    for pattern in patterns:
        result = pattern.match(message)
        if result is not None:
            return result
    return None


def is_active_line(line: LogLine, patterns: Sequence[DamagePattern] = DEFAULT_DAMAGE_PATTERNS) -> bool:
    """Ability use, or a chat line carrying a damage message."""
    if line.opcode in ABILITY_OPCODES:
        return True
    if line.opcode == OPCODE_CHAT:
        return match_damage(line.message(), patterns) is not None
    return False


# --- Deaths -----------------------------------------------------------------

_DEATH_RE = re.compile(r"^(.+?) is defeated\b", re.IGNORECASE)
_YOU_DEFEATED_RE = re.compile(r"^you are defeated\b", re.IGNORECASE)

YOU = "you"


def match_death(line: LogLine) -> Optional[str]:
    """
    Name of the actor a chat line reports as defeated.

    ``"You are defeated."`` is returned as ``"you"`` for the caller to map to
    the local player.
    """
    if line.opcode != OPCODE_CHAT:
        return None
    for text in line.text_fields():
        if _YOU_DEFEATED_RE.match(text):
            return YOU
        m = _DEATH_RE.match(text)
        if m:
            return m.group(1).strip()
    return None


# --- Boss kills -------------------------------------------------------------


def compile_kill_patterns(boss_names: Iterable[str]) -> Tuple[Tuple[str, "re.Pattern", "re.Pattern"], ...]:
    """Precompiled ``defeats <boss>`` / ``<boss> is defeated`` pairs."""
    compiled = []
    for boss in boss_names:
        if not boss:
            continue
        escaped = re.escape(boss)
        compiled.append(
            (
                boss,
                re.compile(rf"defeats?\s+(?:the\s+)?{escaped}", re.IGNORECASE),
                re.compile(rf"^{escaped}\s+is defeated\b", re.IGNORECASE),
            )
        )
    return tuple(compiled)


def match_kill(line: LogLine, kill_patterns) -> Optional[str]:
    """Boss name whose kill this chat line reports, or None."""
    if line.opcode != OPCODE_CHAT:
        return None
    texts = line.text_fields()
    for boss, defeats_re, defeated_re in kill_patterns:
        if defeats_re.search(line.raw_line):
            return boss
        if any(defeated_re.match(text) for text in texts):
            return boss
    return None


# --- Zone transitions -------------------------------------------------------

_ZONE_RE = re.compile(
    r"\b(?:changed? zones?|zone change|(?:duty|encounter) has ended|(?:has been|will be|is being) reset|"
    r"shut(?:ting)? down|shutdown|no longer sealed|left the duty)\b",
    re.IGNORECASE,
)


def is_zone_transition(line: LogLine) -> bool:
    """Zone change line, or a system message about the duty ending or resetting."""
    if line.opcode == OPCODE_ZONE:
        return True
    if line.opcode == OPCODE_CHAT:
        return bool(_ZONE_RE.search(line.message()))
    return False


# --- Skill use / resurrection -----------------------------------------------

_USE_RE = re.compile(
    r"^(.+?)\s+(?:uses?|casts?)\s+(.+?)(?:\s+on\s+(.+?))?[.!]?$", re.IGNORECASE
)


@dataclass(frozen=True)
class SkillUse:
    """An actor using a named skill, optionally on a target."""

    actor: str
    skill: str
    target: Optional[str] = None


def match_skill_use(line: LogLine) -> Optional[SkillUse]:
    """Skill use from an ability line or a ``"<actor> uses <skill>"`` chat line."""
    if line.opcode in ABILITY_OPCODES:
        actor = line.field(FIELD_ACTOR_NAME).strip()
        skill = line.field(FIELD_SKILL_NAME).strip()
        if not actor or not skill:
            return None
        target = line.field(FIELD_TARGET_NAME).strip() or None
        return SkillUse(actor, skill, target)

    if line.opcode == OPCODE_CHAT:
        m = _USE_RE.match(line.message())
        if m:
            return SkillUse(m.group(1).strip(), m.group(2).strip(), (m.group(3) or "").strip() or None)
    return None


def is_resurrection(skill: str, allowed: Iterable[str] = RESURRECTION_ACTIONS) -> bool:
    return skill.strip().lower() in allowed


def match_resurrection(line: LogLine, allowed: Iterable[str] = RESURRECTION_ACTIONS) -> Optional[SkillUse]:
    """
    An explicit resurrection action with its caster and target.

    Only the allow-listed actions count; ``"gains the effect of Raise"`` and
    similar buff text never match.
    """
    use = match_skill_use(line)
    if use is None or not is_resurrection(use.skill, allowed):
        return None
    return use
