"""
Unit tests for encounter and actor models.
"""

from datetime import datetime, timedelta, timezone

from raidlog.models.actor import ActorClass, ActorInfo, ClassificationResult
from raidlog.models.encounter import Encounter, EncounterType

START = datetime(2024, 5, 1, 20, 0, 0, tzinfo=timezone.utc)


def make_encounter(**kwargs):
    values = dict(
        start_line=5,
        end_line=104,
        start_time=START,
        end_time=START + timedelta(seconds=95, milliseconds=250),
        boss="The Ultima Weapon",
        instance="The Weapon's Refrain (Ultimate)",
        encounter_type=EncounterType.KILL,
    )
    values.update(kwargs)
    return Encounter(**values)


class TestEncounter:
    """Test Encounter properties and serialization."""

    def test_properties(self):
        encounter = make_encounter()

        assert encounter.duration_ms == 95250
        assert encounter.duration == 95.25
        assert encounter.line_count == 100
        assert encounter.is_kill
        assert encounter.get_duration_str() == "1:35"

    def test_to_dict(self):
        encounter = make_encounter(
            encounter_type=EncounterType.WIPE,
            lowest_boss_hp=1234,
            max_hp=100000,
            lowest_boss_hp_pct=1.2,
        )

        assert encounter.to_dict() == {
            "start": "2024-05-01T20:00:00Z",
            "end": "2024-05-01T20:01:35.250000Z",
            "startLine": 5,
            "endLine": 104,
            "boss": "The Ultima Weapon",
            "instance": "The Weapon's Refrain (Ultimate)",
            "type": "wipe",
            "lowestBossHp": 1234,
            "maxHp": 100000,
            "lowestBossHpPct": 1.2,
        }

    def test_offset_times_serialized_as_utc(self):
        offset = timezone(timedelta(hours=2))
        encounter = make_encounter(start_time=START.astimezone(offset))

        assert encounter.to_dict()["start"] == "2024-05-01T20:00:00Z"

    def test_classification_included(self):
        boss = ActorInfo(name="The Ultima Weapon", classification=ActorClass.BOSS)
        encounter = make_encounter(classification=ClassificationResult(boss=boss))
        data = encounter.to_dict()

        assert data["boss"] == "The Ultima Weapon"
        assert data["classification"]["boss"]["name"] == "The Ultima Weapon"
        assert data["classification"]["adds"] == []
        assert data["classification"]["partyMembers"] == []


class TestActorInfo:
    """Test ActorInfo counters."""

    def test_counters(self):
        actor = ActorInfo(name="Golem")
        actor.record_damage_taken(100)
        actor.record_damage_taken(50)
        actor.record_damage_dealt(10)

        assert actor.total_damage_taken == 150
        assert actor.hit_count == 2
        assert actor.total_damage_dealt == 10
        assert not actor.is_player
