"""
Unit tests for actor classification.
"""

from raidlog.analyzer.classifier import ActorClassifier
from raidlog.config.jobs import build_job_table
from raidlog.models.actor import ActorClass, ActorInfo


def npc(name, taken, hits):
    return ActorInfo(name=name, total_damage_taken=taken, hit_count=hits)


def player(name, *skills):
    return ActorInfo(name=name, skills_used=set(skills))


def as_map(*actors):
    return {actor.name: actor for actor in actors}


class TestJobMatching:
    """Test skill to job resolution."""

    def test_fast_blade_is_paladin(self):
        actor = player("Alice Smith", "Fast Blade")
        result = ActorClassifier().classify_actors(as_map(actor))

        assert actor.classification is ActorClass.PLAYER
        assert actor.job == "PLD"
        assert actor.role == "tank"
        assert result.party_members == [actor]

    def test_case_insensitive_exact_match(self):
        classifier = ActorClassifier()

        assert classifier.match_job(["fast blade"]).abbreviation == "PLD"
        assert classifier.match_job(["Fast Blad"]) is None
        assert classifier.match_job([]) is None

    def test_most_matches_wins(self):
        classifier = ActorClassifier()
        job = classifier.match_job(["Raise", "Stone", "Glare III", "Ruin"])

        assert job.abbreviation == "WHM"

    def test_custom_job_table(self):
        table = build_job_table(
            [{"id": 99, "abbreviation": "TST", "name": "Tester", "role": "dps", "skills": [{"id": 1, "name": "Poke"}]}]
        )
        actor = player("Tess", "Poke")
        ActorClassifier(table).classify_actors(as_map(actor))

        assert actor.job == "TST"


class TestBossSelection:
    """Test the NPC boss/add decision."""

    def test_heavy_damage_rule(self):
        """60000 taken with 1.3x the mean hit count is a boss."""
        boss = npc("Golem", 60000, 13)
        others = [npc(f"Add {i}", 60000, 9) for i in range(3)]
        # hit mean = (13 + 27) / 4 = 10 -> ratio 1.3; damage ratio 1.0
        result = ActorClassifier().classify_actors(as_map(boss, *others))

        assert result.boss is boss
        assert boss.classification is ActorClass.BOSS
        assert all(a.classification is ActorClass.ADD for a in others)

    def test_ratio_rule(self):
        boss = npc("Golem", 40000, 30)
        adds = [npc(f"Add {i}", 1000, 2) for i in range(4)]
        result = ActorClassifier().classify_actors(as_map(*adds, boss))

        assert result.boss is boss
        assert result.adds == adds

    def test_ratio_rule_needs_minimum_damage(self):
        weak = npc("Weak", 9000, 30)
        adds = [npc(f"Add {i}", 100, 1) for i in range(4)]
        result = ActorClassifier().classify_actors(as_map(weak, *adds))

        # promoted by the fallback, not by the ratio rule
        assert result.boss is weak

    def test_single_boss_keeps_highest_damage_taken(self):
        first = npc("First", 70000, 20)
        second = npc("Second", 90000, 20)
        small = [npc(f"Add {i}", 100, 1) for i in range(6)]
        result = ActorClassifier().classify_actors(as_map(first, second, *small))

        assert result.boss is second
        assert first in result.adds
        assert first.classification is ActorClass.ADD

    def test_fallback_promotes_strongest_add(self):
        adds = [npc("A", 500, 2), npc("B", 900, 2), npc("C", 700, 2)]
        result = ActorClassifier().classify_actors(as_map(*adds))

        assert result.boss.name == "B"
        assert result.boss.classification is ActorClass.BOSS
        assert [a.name for a in result.adds] == ["A", "C"]

    def test_players_excluded_from_npc_means(self):
        tank = player("Alice Smith", "Fast Blade")
        tank.total_damage_taken = 10_000_000
        tank.hit_count = 1000
        boss = npc("Golem", 60000, 13)
        adds = [npc(f"Add {i}", 60000, 9) for i in range(3)]
        result = ActorClassifier().classify_actors(as_map(tank, boss, *adds))

        assert result.boss is boss
        assert result.party_members == [tank]

    def test_no_actors(self):
        result = ActorClassifier().classify_actors({})

        assert result.boss is None
        assert result.adds == []
        assert result.party_members == []


class TestClassificationOutput:
    """Test idempotence and serialization."""

    def test_idempotent(self):
        actors = as_map(
            player("Alice Smith", "Fast Blade"),
            npc("First", 70000, 20),
            npc("Second", 90000, 20),
            npc("Tiny", 10, 1),
        )
        classifier = ActorClassifier()
        first = classifier.classify_actors(actors).to_dict()
        states = {name: (a.classification, a.job, a.role) for name, a in actors.items()}
        second = classifier.classify_actors(actors).to_dict()

        assert first == second
        assert states == {name: (a.classification, a.job, a.role) for name, a in actors.items()}

    def test_to_dict(self):
        actors = as_map(player("Alice Smith", "Fast Blade"), npc("Golem", 60000, 10))
        actors["Golem"].id = "40000001"
        data = ActorClassifier().classify_actors(actors).to_dict()

        assert data == {
            "boss": {"name": "Golem", "id": "40000001", "job": None, "role": None},
            "adds": [],
            "partyMembers": [{"name": "Alice Smith", "id": None, "job": "PLD", "role": "tank"}],
        }
