"""
Party roster extraction from combatant declaration lines.
"""

import re
import logging
from typing import Iterable, List, Optional, Sequence

from .tokenizer import FIELD_ACTOR_NAME, OPCODE_ADD_COMBATANT, LogLine
from ..config.game_data import PET_NAMES

logger = logging.getLogger(__name__)

# Letters plus space, apostrophe and hyphen
_NAME_RE = re.compile(r"^(?:[^\W\d_]|[ '\-])+$")

MIN_NAME_LENGTH = 3


def strip_server(name: str) -> str:
    """
    Remove a concatenated home-world suffix from a display name.

    The client writes ``"First LastServer"``; the name is cut at the third
    uppercase letter.

    Examples:
        >>> strip_server("Alice SmithGilgamesh")
        'Alice Smith'
        >>> strip_server("Bob Jones")
        'Bob Jones'
    """
    cap_count = 0
    for i, char in enumerate(name):
        if "A" <= char <= "Z":
            cap_count += 1
            if cap_count == 3:
                return name[:i].strip()
    return name.strip()


def canonical_name(name: str) -> str:
    """
    Strip a home-world suffix only where it is glued onto the last word.

    NPC names made of capitalized words are left whole.

    Examples:
        >>> canonical_name("Alice SmithGilgamesh")
        'Alice Smith'
        >>> canonical_name("The Ultima Weapon")
        'The Ultima Weapon'
    """
    name = name.strip()
    stripped = strip_server(name)
    if stripped != name and stripped[-1:].islower() and name[len(stripped)].isupper():
        return stripped
    return name


class PartyRosterExtractor:
    """
    Collects party member names from the head of a log.

    Only roster-declaration lines (opcode ``03``) inside the scan window are
    considered. The first name collected is the local player.
    """

    def __init__(
        self,
        scan_lines: int = 200,
        max_party_size: int = 8,
        pet_names: Optional[Iterable[str]] = None,
    ):
        self.scan_lines = scan_lines
        self.max_party_size = max_party_size
        self.pet_names = frozenset(n.lower() for n in (pet_names if pet_names is not None else PET_NAMES))

    def is_valid_name(self, name: str) -> bool:
        if len(name) < MIN_NAME_LENGTH:
            return False
        if not _NAME_RE.match(name):
            return False
        return not self.is_pet(name)

    def is_pet(self, name: str) -> bool:
        lowered = name.lower()
        if lowered in self.pet_names:
            return True
        # "Ruby Carbuncle", "Emerald Carbuncle"...
        return any(word in self.pet_names for word in lowered.split())

    def extract(self, lines: Sequence[LogLine]) -> List[str]:
        """
        Extract canonical party member names.

        Args:
            lines: Tokenized log lines

        Returns:
            Unique names in first-seen order, at most ``max_party_size``
        """
        party: List[str] = []
        for line in lines[: self.scan_lines]:
            if line.opcode != OPCODE_ADD_COMBATANT or len(line.fields) <= FIELD_ACTOR_NAME:
                continue

            name = strip_server(line.fields[FIELD_ACTOR_NAME])
            if not self.is_valid_name(name):
                continue

            if name not in party:
                party.append(name)
                logger.debug(f"Roster member {len(party)}: {name}")
                if len(party) >= self.max_party_size:
                    break

        logger.info(f"Detected {len(party)} party members")
        return party
