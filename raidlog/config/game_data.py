"""
Static game data used by the parser.

This module contains the job/skill definitions used to recognize players,
the instance/boss keyword library used to name duties, and a few small
constant sets (pet aliases, resurrection actions). The raw definitions here
are plain data; lookups go through the immutable tables built in
``jobs.py`` and ``instances.py``.
"""

from typing import Any, Dict, FrozenSet, List

UNKNOWN_DUTY = "Unknown Duty"
UNKNOWN_BOSS = "Unknown Boss"

ROLE_TANK = "tank"
ROLE_HEALER = "healer"
ROLE_DPS = "dps"
ROLES = (ROLE_TANK, ROLE_HEALER, ROLE_DPS)

SKILL_TYPES = ("damage", "heal", "shield", "buff", "debuff", "other")

# Summoned pets that show up as declared combatants
PET_NAMES: FrozenSet[str] = frozenset({"carbuncle", "eos", "selene"})

# Explicit resurrection actions; buff-gain text never counts as a revive
RESURRECTION_ACTIONS: FrozenSet[str] = frozenset(
    {"raise", "resurrection", "ascend", "arise", "undead rising"}
)


def _skill(skill_id: int, name: str, potency: int, skill_type: str = "damage") -> Dict[str, Any]:
    return {"id": skill_id, "name": name, "potency": potency, "type": skill_type}


JOB_DEFINITIONS: List[Dict[str, Any]] = [
    # Tanks
    {
        "id": 19,
        "abbreviation": "PLD",
        "name": "Paladin",
        "role": ROLE_TANK,
        "skills": [
            _skill(9, "Fast Blade", 220),
            _skill(15, "Riot Blade", 330),
            _skill(3539, "Royal Authority", 440),
            _skill(24, "Shield Lob", 100),
            _skill(7384, "Holy Spirit", 400),
            _skill(28, "Iron Will", 0, "buff"),
        ],
    },
    {
        "id": 21,
        "abbreviation": "WAR",
        "name": "Warrior",
        "role": ROLE_TANK,
        "skills": [
            _skill(31, "Heavy Swing", 220),
            _skill(37, "Maim", 340),
            _skill(42, "Storm's Path", 480),
            _skill(45, "Storm's Eye", 480),
            _skill(46, "Tomahawk", 150),
            _skill(3549, "Fell Cleave", 580),
        ],
    },
    {
        "id": 32,
        "abbreviation": "DRK",
        "name": "Dark Knight",
        "role": ROLE_TANK,
        "skills": [
            _skill(3617, "Hard Slash", 300),
            _skill(3623, "Syphon Strike", 380),
            _skill(3632, "Souleater", 480),
            _skill(3624, "Unmend", 150),
            _skill(7392, "Bloodspiller", 580),
            _skill(16470, "Edge of Shadow", 460),
        ],
    },
    {
        "id": 37,
        "abbreviation": "GNB",
        "name": "Gunbreaker",
        "role": ROLE_TANK,
        "skills": [
            _skill(16137, "Keen Edge", 300),
            _skill(16139, "Brutal Shell", 380),
            _skill(16145, "Solid Barrel", 460),
            _skill(16143, "Lightning Shot", 150),
            _skill(16146, "Gnashing Fang", 500),
            _skill(16162, "Burst Strike", 460),
        ],
    },
    # Healers
    {
        "id": 24,
        "abbreviation": "WHM",
        "name": "White Mage",
        "role": ROLE_HEALER,
        "skills": [
            _skill(119, "Stone", 140),
            _skill(16533, "Glare III", 310),
            _skill(120, "Cure", 500, "heal"),
            _skill(135, "Cure II", 800, "heal"),
            _skill(124, "Medica", 400, "heal"),
            _skill(125, "Raise", 0, "other"),
        ],
    },
    {
        "id": 28,
        "abbreviation": "SCH",
        "name": "Scholar",
        "role": ROLE_HEALER,
        "skills": [
            _skill(163, "Ruin", 180),
            _skill(25865, "Broil IV", 310),
            _skill(190, "Physick", 450, "heal"),
            _skill(185, "Adloquium", 300, "shield"),
            _skill(186, "Succor", 200, "shield"),
            _skill(173, "Resurrection", 0, "other"),
        ],
    },
    {
        "id": 33,
        "abbreviation": "AST",
        "name": "Astrologian",
        "role": ROLE_HEALER,
        "skills": [
            _skill(3596, "Malefic", 150),
            _skill(25871, "Fall Malefic", 270),
            _skill(3594, "Benefic", 500, "heal"),
            _skill(3610, "Benefic II", 800, "heal"),
            _skill(3600, "Helios", 400, "heal"),
            _skill(3603, "Ascend", 0, "other"),
        ],
    },
    {
        "id": 40,
        "abbreviation": "SGE",
        "name": "Sage",
        "role": ROLE_HEALER,
        "skills": [
            _skill(24283, "Dosis", 300),
            _skill(24312, "Dosis III", 360),
            _skill(24284, "Diagnosis", 450, "heal"),
            _skill(24286, "Prognosis", 300, "heal"),
            _skill(37009, "Phlegma III", 600),
            _skill(24287, "Egeiro", 0, "other"),
        ],
    },
    # Melee
    {
        "id": 20,
        "abbreviation": "MNK",
        "name": "Monk",
        "role": ROLE_DPS,
        "skills": [
            _skill(53, "Bootshine", 220),
            _skill(54, "True Strike", 300),
            _skill(56, "Snap Punch", 310),
            _skill(74, "Dragon Kick", 320),
            _skill(66, "Demolish", 340),
            _skill(61, "Twin Snakes", 380),
        ],
    },
    {
        "id": 22,
        "abbreviation": "DRG",
        "name": "Dragoon",
        "role": ROLE_DPS,
        "skills": [
            _skill(75, "True Thrust", 230),
            _skill(78, "Vorpal Thrust", 280),
            _skill(84, "Full Thrust", 400),
            _skill(90, "Piercing Talon", 150),
            _skill(88, "Chaos Thrust", 260),
            _skill(92, "Jump", 320),
        ],
    },
    {
        "id": 30,
        "abbreviation": "NIN",
        "name": "Ninja",
        "role": ROLE_DPS,
        "skills": [
            _skill(2240, "Spinning Edge", 300),
            _skill(2242, "Gust Slash", 400),
            _skill(2255, "Aeolian Edge", 440),
            _skill(2247, "Throwing Dagger", 200),
            _skill(2267, "Raiton", 740),
            _skill(7402, "Bhavacakra", 380),
        ],
    },
    {
        "id": 34,
        "abbreviation": "SAM",
        "name": "Samurai",
        "role": ROLE_DPS,
        "skills": [
            _skill(7477, "Hakaze", 230),
            _skill(7478, "Jinpu", 320),
            _skill(7481, "Gekko", 420),
            _skill(7479, "Shifu", 320),
            _skill(7482, "Kasha", 420),
            _skill(7487, "Midare Setsugekka", 640),
        ],
    },
    {
        "id": 39,
        "abbreviation": "RPR",
        "name": "Reaper",
        "role": ROLE_DPS,
        "skills": [
            _skill(24373, "Slice", 320),
            _skill(24374, "Waxing Slice", 400),
            _skill(24375, "Infernal Slice", 500),
            _skill(24386, "Harpe", 300),
            _skill(24382, "Gibbet", 460),
            _skill(24383, "Gallows", 460),
        ],
    },
    {
        "id": 41,
        "abbreviation": "VPR",
        "name": "Viper",
        "role": ROLE_DPS,
        "skills": [
            _skill(34606, "Steel Fangs", 200),
            _skill(34607, "Dread Fangs", 140),
            _skill(34608, "Hunter's Sting", 300),
            _skill(34609, "Swiftskin's Sting", 300),
            _skill(34632, "Writhing Snap", 200),
            _skill(34626, "Reawaken", 750),
        ],
    },
    # Ranged physical
    {
        "id": 23,
        "abbreviation": "BRD",
        "name": "Bard",
        "role": ROLE_DPS,
        "skills": [
            _skill(97, "Heavy Shot", 160),
            _skill(16495, "Burst Shot", 220),
            _skill(98, "Straight Shot", 200),
            _skill(100, "Venomous Bite", 100),
            _skill(113, "Windbite", 60),
            _skill(7409, "Refulgent Arrow", 280),
        ],
    },
    {
        "id": 31,
        "abbreviation": "MCH",
        "name": "Machinist",
        "role": ROLE_DPS,
        "skills": [
            _skill(2866, "Split Shot", 140),
            _skill(2868, "Slug Shot", 200),
            _skill(2873, "Clean Shot", 270),
            _skill(7411, "Heated Split Shot", 220),
            _skill(16498, "Drill", 600),
            _skill(2878, "Wildfire", 0, "debuff"),
        ],
    },
    {
        "id": 38,
        "abbreviation": "DNC",
        "name": "Dancer",
        "role": ROLE_DPS,
        "skills": [
            _skill(15989, "Cascade", 220),
            _skill(15990, "Fountain", 280),
            _skill(15991, "Reverse Cascade", 280),
            _skill(15992, "Fountainfall", 340),
            _skill(15997, "Standard Step", 0, "buff"),
            _skill(16005, "Saber Dance", 520),
        ],
    },
    # Casters
    {
        "id": 25,
        "abbreviation": "BLM",
        "name": "Black Mage",
        "role": ROLE_DPS,
        "skills": [
            _skill(141, "Fire", 180),
            _skill(142, "Blizzard", 180),
            _skill(144, "Thunder", 100),
            _skill(3577, "Fire IV", 320),
            _skill(25795, "Blizzard II", 50),
            _skill(16507, "Xenoglossy", 880),
        ],
    },
    {
        "id": 27,
        "abbreviation": "SMN",
        "name": "Summoner",
        "role": ROLE_DPS,
        "skills": [
            _skill(3579, "Ruin III", 360),
            _skill(25820, "Astral Impulse", 440),
            _skill(16514, "Fountain of Fire", 540),
            _skill(181, "Fester", 340),
            _skill(16508, "Energy Drain", 200),
            _skill(7427, "Summon Bahamut", 0, "other"),
        ],
    },
    {
        "id": 35,
        "abbreviation": "RDM",
        "name": "Red Mage",
        "role": ROLE_DPS,
        "skills": [
            _skill(7503, "Jolt", 170),
            _skill(7505, "Verthunder", 360),
            _skill(7507, "Veraero", 360),
            _skill(7504, "Riposte", 130),
            _skill(7525, "Verflare", 600),
            _skill(7523, "Verraise", 0, "other"),
        ],
    },
    {
        "id": 42,
        "abbreviation": "PCT",
        "name": "Pictomancer",
        "role": ROLE_DPS,
        "skills": [
            _skill(34650, "Fire in Red", 440),
            _skill(34651, "Aero in Green", 480),
            _skill(34652, "Water in Blue", 520),
            _skill(34662, "Holy in White", 520),
            _skill(34678, "Hammer Stamp", 560),
            _skill(34681, "Star Prism", 1100),
        ],
    },
    {
        "id": 36,
        "abbreviation": "BLU",
        "name": "Blue Mage",
        "role": ROLE_DPS,
        "skills": [
            _skill(11385, "Water Cannon", 200),
            _skill(11413, "Sonic Boom", 210),
            _skill(11386, "Song of Torment", 50),
            _skill(11423, "Flying Sardine", 10),
            _skill(18317, "Angel Whisper", 0, "other"),
        ],
    },
]


# Duty keyword library. Keywords and aliases name the instance; boss names
# (and boss keywords) name the fight.
INSTANCE_LIBRARY: List[Dict[str, Any]] = [
    {
        "instance": "The Unending Coil of Bahamut (Ultimate)",
        "bosses": ["Twintania", "Nael deus Darnus", "Bahamut Prime"],
        "duty_keywords": ["Unending Coil of Bahamut"],
        "aliases": ["UCoB"],
        "boss_keywords": [],
    },
    {
        "instance": "The Weapon's Refrain (Ultimate)",
        "bosses": ["The Ultima Weapon", "Garuda", "Ifrit", "Titan"],
        "duty_keywords": ["Weapon's Refrain"],
        "aliases": ["UWU"],
        "boss_keywords": ["Ultima Weapon"],
    },
    {
        "instance": "Dragonsong's Reprise (Ultimate)",
        "bosses": ["King Thordan", "Nidhogg", "Dragon-king Thordan"],
        "duty_keywords": ["Dragonsong's Reprise"],
        "aliases": ["DSR"],
        "boss_keywords": ["Knights of the Round"],
    },
    {
        "instance": "The Omega Protocol (Ultimate)",
        "bosses": ["Omega", "Omega-M", "Omega-F", "Alpha Omega"],
        "duty_keywords": ["Omega Protocol"],
        "aliases": ["TOP"],
        "boss_keywords": [],
    },
    {
        "instance": "Anabaseios: The Twelfth Circle (Savage)",
        "bosses": ["Pallas Athena", "Athena"],
        "duty_keywords": ["Anabaseios: The Twelfth Circle"],
        "aliases": ["P12S"],
        "boss_keywords": [],
    },
    {
        "instance": "AAC Light-heavyweight M1 (Savage)",
        "bosses": ["Black Cat"],
        "duty_keywords": ["Light-heavyweight M1"],
        "aliases": ["M1S"],
        "boss_keywords": [],
    },
    {
        "instance": "AAC Light-heavyweight M2 (Savage)",
        "bosses": ["Honey B. Lovely"],
        "duty_keywords": ["Light-heavyweight M2"],
        "aliases": ["M2S"],
        "boss_keywords": [],
    },
    {
        "instance": "AAC Light-heavyweight M3 (Savage)",
        "bosses": ["Brute Bomber"],
        "duty_keywords": ["Light-heavyweight M3"],
        "aliases": ["M3S"],
        "boss_keywords": ["Lit Fuse"],
    },
    {
        "instance": "AAC Light-heavyweight M4 (Savage)",
        "bosses": ["Wicked Thunder"],
        "duty_keywords": ["Light-heavyweight M4"],
        "aliases": ["M4S"],
        "boss_keywords": [],
    },
    {
        "instance": "The Minstrel's Ballad: Thordan's Reign",
        "bosses": ["King Thordan"],
        "duty_keywords": ["Thordan's Reign"],
        "aliases": [],
        "boss_keywords": [],
    },
    {
        "instance": "Sastasha",
        "bosses": ["Chopper", "Captain Madison", "Denn the Orcatoothed"],
        "duty_keywords": ["Sastasha"],
        "aliases": [],
        "boss_keywords": [],
    },
    {
        "instance": "Striking Dummy",
        "bosses": ["Striking Dummy"],
        "duty_keywords": ["Summerford Farms"],
        "aliases": [],
        "boss_keywords": [],
    },
]
