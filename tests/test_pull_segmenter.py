"""
Unit tests for the pull/wipe/kill segmentation state machine.
"""

import pytest

from raidlog.models.encounter import EncounterType
from raidlog.parser.errors import NoRosterFoundError
from raidlog.parser.tokenizer import to_millis
from raidlog.segmentation import PullSegmenter, SegmentationContext

PARTY = ["Alice Smith", "Bob Jones"]


def pull_context(roster=PARTY, boss="The Ultima Weapon", boss_names=None):
    return SegmentationContext(
        roster=list(roster),
        boss=boss,
        instance="The Weapon's Refrain (Ultimate)",
        boss_names=boss_names if boss_names is not None else [boss],
    )


def add_hits(builder, start_ms, end_ms, step_ms=1000, attacker="Alice Smith"):
    for ms in range(start_ms, end_ms + 1, step_ms):
        builder.chat(ms, f"{attacker} hits The Ultima Weapon for 5,000 damage.")


class TestPullSegmenterKills:
    """Test kill detection."""

    def test_kill_closes_encounter(self, kill_log):
        encounters = PullSegmenter().segment(kill_log.tokenized(), pull_context())

        assert len(encounters) == 1
        encounter = encounters[0]
        assert encounter.encounter_type is EncounterType.KILL
        assert encounter.start_time == kill_log.time(1000)
        assert encounter.end_time == kill_log.time(20000)
        assert encounter.boss == "The Ultima Weapon"

    def test_boss_hp_reaches_zero(self, kill_log):
        encounter = PullSegmenter().segment(kill_log.tokenized(), pull_context())[0]

        assert encounter.lowest_boss_hp == 0
        assert encounter.max_hp == 100000
        assert encounter.lowest_boss_hp_pct == 0
        assert len(encounter.boss_hp_samples) == 10

    def test_kill_names_matching_boss(self, log_builder):
        log_builder.ability(1000, "Alice Smith", "Fast Blade", "Nael deus Darnus")
        log_builder.chat(2000, "Nael deus Darnus is defeated.")
        context = pull_context(boss="Twintania", boss_names=["Twintania", "Nael deus Darnus"])
        encounters = PullSegmenter().segment(log_builder.tokenized(), context)

        assert len(encounters) == 1
        assert encounters[0].boss == "Nael deus Darnus"
        assert encounters[0].is_kill

    def test_short_kill_is_kept(self, log_builder):
        log_builder.ability(1000, "Alice Smith", "Fast Blade")
        log_builder.chat(1500, "You defeat the Ultima Weapon.")

        assert len(PullSegmenter().segment(log_builder.tokenized(), pull_context())) == 1

    def test_debounce_after_kill(self, kill_log):
        kill_log.ability(25000, "Alice Smith", "Fast Blade")
        kill_log.ability(31000, "Bob Jones", "Stone")
        kill_log.chat(32000, "The Ultima Weapon is defeated.")
        trace = []
        encounters = PullSegmenter().segment(kill_log.tokenized(), pull_context(), trace)

        assert len(encounters) == 2
        assert encounters[1].start_time == kill_log.time(31000)
        assert any("ignored (debounce)" in entry for entry in trace)


class TestPullSegmenterWipes:
    """Test wipe detection through party life state."""

    def test_wipe_after_grace(self, wipe_log):
        encounters = PullSegmenter().segment(wipe_log.tokenized(), pull_context())

        assert len(encounters) == 1
        assert encounters[0].encounter_type is EncounterType.WIPE
        assert encounters[0].end_time == wipe_log.time(12500)

    def test_revive_between_deaths(self, log_builder):
        """Members never all dead at once: no wipe."""
        log_builder.ability(1000, "Alice Smith", "Fast Blade")
        add_hits(log_builder, 2000, 11000)
        log_builder.chat(12000, "Alice Smith is defeated.")
        log_builder.chat(12200, "Bob Jones casts Raise on Alice Smith.")
        log_builder.chat(12500, "Bob Jones is defeated.")
        add_hits(log_builder, 13000, 20000)
        trace = []
        encounters = PullSegmenter().segment(log_builder.tokenized(), pull_context(), trace)

        assert len(encounters) == 1
        assert encounters[0].end_time == log_builder.time(20000)
        assert not any("wipe pending" in entry for entry in trace)

    def test_revive_cancels_pending_wipe(self, log_builder):
        log_builder.ability(1000, "Alice Smith", "Fast Blade")
        add_hits(log_builder, 2000, 11000)
        log_builder.chat(12000, "Alice Smith is defeated.")
        log_builder.chat(12500, "Bob Jones is defeated.")
        log_builder.chat(13000, "Carol King casts Raise on Bob Jones.")
        add_hits(log_builder, 14000, 20000, attacker="Bob Jones")
        trace = []
        encounters = PullSegmenter().segment(log_builder.tokenized(), pull_context(), trace)

        assert len(encounters) == 1
        assert encounters[0].end_time == log_builder.time(20000)
        assert any("Pending wipe cancelled" in entry for entry in trace)

    def test_deaths_and_revives_recorded(self, log_builder):
        log_builder.ability(1000, "Alice Smith", "Fast Blade")
        add_hits(log_builder, 2000, 11000)
        log_builder.chat(12000, "Alice Smith is defeated.")
        log_builder.chat(12500, "Bob Jones is defeated.")
        log_builder.chat(13000, "Carol King casts Raise on Bob Jones.")
        add_hits(log_builder, 14000, 20000, attacker="Bob Jones")
        encounter = PullSegmenter().segment(log_builder.tokenized(), pull_context())[0]

        assert encounter.party_deaths == [
            ("Alice Smith", to_millis(log_builder.time(12000))),
            ("Bob Jones", to_millis(log_builder.time(12500))),
        ]
        assert encounter.party_revives == [("Bob Jones", to_millis(log_builder.time(13000)))]

    def test_first_person_death(self, log_builder):
        log_builder.ability(1000, "Alice Smith", "Fast Blade")
        add_hits(log_builder, 2000, 10000)
        log_builder.chat(11000, "You are defeated.")
        log_builder.chat(11500, "Bob Jones is defeated.")
        encounters = PullSegmenter().segment(log_builder.tokenized(), pull_context())

        assert len(encounters) == 1
        assert encounters[0].encounter_type is EncounterType.WIPE
        assert encounters[0].end_time == log_builder.time(11500)

    def test_short_wipe_discarded_but_debounced(self, log_builder):
        log_builder.ability(1000, "Alice Smith", "Fast Blade")
        log_builder.chat(2000, "Alice Smith is defeated.")
        log_builder.chat(2500, "Bob Jones is defeated.")
        log_builder.ability(10000, "Alice Smith", "Fast Blade")
        log_builder.ability(13000, "Alice Smith", "Fast Blade")
        trace = []
        encounters = PullSegmenter().segment(log_builder.tokenized(), pull_context(), trace)

        assert encounters == []
        assert any("Discarding short encounter" in entry for entry in trace)
        assert any("ignored (debounce)" in entry for entry in trace)
        assert any("line 4" in entry and "Encounter start" in entry for entry in trace)

    def test_non_party_deaths_ignored(self, log_builder):
        log_builder.ability(1000, "Alice Smith", "Fast Blade")
        add_hits(log_builder, 2000, 10000)
        log_builder.chat(11000, "Alice Smith is defeated.")
        log_builder.chat(11500, "Ruby Carbuncle is defeated.")
        log_builder.chat(15000, "Alice Smith hits The Ultima Weapon for 1 damage.")
        encounters = PullSegmenter().segment(log_builder.tokenized(), pull_context())

        assert len(encounters) == 1
        assert encounters[0].end_time == log_builder.time(15000)


class TestPullSegmenterBoundaries:
    """Test zone transitions, trailing encounters and roster handling."""

    def test_no_roster(self, kill_log):
        with pytest.raises(NoRosterFoundError):
            PullSegmenter().segment(kill_log.tokenized(), pull_context(roster=[]))

    def test_server_suffix_on_pull_actor(self, log_builder):
        log_builder.ability(1000, "Alice SmithGilgamesh", "Fast Blade")
        log_builder.chat(1500, "You defeat the Ultima Weapon.")

        assert len(PullSegmenter().segment(log_builder.tokenized(), pull_context())) == 1

    def test_outsider_does_not_pull(self, log_builder):
        log_builder.ability(1000, "Dave Stranger", "Fast Blade")
        log_builder.chat(1500, "You defeat the Ultima Weapon.")

        assert PullSegmenter().segment(log_builder.tokenized(), pull_context()) == []

    def test_zone_transition_ends_encounter(self, log_builder):
        log_builder.ability(1000, "Alice Smith", "Fast Blade")
        add_hits(log_builder, 2000, 11000)
        log_builder.zone(12000, "Mor Dhona")
        encounters = PullSegmenter().segment(log_builder.tokenized(), pull_context())

        assert len(encounters) == 1
        assert encounters[0].end_time == log_builder.time(12000)
        assert encounters[0].encounter_type is EncounterType.WIPE

    def test_arena_sealing_notice_keeps_pull_open(self, log_builder):
        log_builder.ability(1000, "Alice Smith", "Fast Blade")
        log_builder.chat(2000, "The Navel will be sealed off in 15 seconds!")
        add_hits(log_builder, 3000, 22000)
        log_builder.chat(30000, "The Ultima Weapon is defeated.")
        trace = []
        encounters = PullSegmenter().segment(log_builder.tokenized(), pull_context(), trace)

        assert len(encounters) == 1
        assert encounters[0].is_kill
        assert encounters[0].start_time == log_builder.time(1000)
        assert encounters[0].end_time == log_builder.time(30000)
        assert not any("Zone transition" in entry for entry in trace)

    def test_effect_expiry_keeps_pull_open(self, log_builder):
        log_builder.ability(1000, "Alice Smith", "Fast Blade")
        log_builder.chat(5500, "Alice Smith's Hallowed Ground has ended.")
        add_hits(log_builder, 6000, 22000)
        log_builder.chat(30000, "The Ultima Weapon is defeated.")
        encounters = PullSegmenter().segment(log_builder.tokenized(), pull_context())

        assert len(encounters) == 1
        assert encounters[0].is_kill
        assert encounters[0].start_time == log_builder.time(1000)

    def test_zone_transition_after_boss_hp_zero_is_kill(self, log_builder):
        log_builder.ability(1000, "Alice Smith", "Fast Blade")
        for i, ms in enumerate(range(2000, 12000, 1000)):
            log_builder.hp(ms, "The Ultima Weapon", 90000 - i * 10000, 100000)
        log_builder.chat(12500, "The duty has ended.")
        encounters = PullSegmenter().segment(log_builder.tokenized(), pull_context())

        assert len(encounters) == 1
        assert encounters[0].is_kill
        assert encounters[0].lowest_boss_hp_pct == 0

    def test_zone_transition_closes_pending_wipe(self, log_builder):
        log_builder.ability(1000, "Alice Smith", "Fast Blade")
        add_hits(log_builder, 2000, 11000)
        log_builder.chat(11500, "Alice Smith is defeated.")
        log_builder.chat(12000, "Bob Jones is defeated.")
        log_builder.zone(12500, "Mor Dhona")
        encounters = PullSegmenter().segment(log_builder.tokenized(), pull_context())

        assert len(encounters) == 1
        assert encounters[0].encounter_type is EncounterType.WIPE
        assert encounters[0].end_time == log_builder.time(12000)

    def test_trailing_encounter(self, log_builder):
        log_builder.ability(1000, "Alice Smith", "Fast Blade")
        add_hits(log_builder, 2000, 11000)
        encounters = PullSegmenter().segment(log_builder.tokenized(), pull_context())

        assert len(encounters) == 1
        assert encounters[0].end_time == log_builder.time(11000)
        assert encounters[0].lowest_boss_hp_pct is None

    def test_short_trailing_encounter_dropped(self, log_builder):
        log_builder.ability(1000, "Alice Smith", "Fast Blade")
        add_hits(log_builder, 2000, 4000)

        assert PullSegmenter().segment(log_builder.tokenized(), pull_context()) == []

    def test_pending_wipe_at_log_end(self, wipe_log):
        wipe_log.lines.pop()
        encounters = PullSegmenter().segment(wipe_log.tokenized(), pull_context())

        assert len(encounters) == 1
        assert encounters[0].end_time == wipe_log.time(12500)

    def test_thresholds_are_configurable(self, log_builder, seg_settings):
        log_builder.ability(1000, "Alice Smith", "Fast Blade")
        add_hits(log_builder, 2000, 4000)
        seg_settings.min_encounter_lines = 2
        seg_settings.min_encounter_duration_ms = 1000

        assert len(PullSegmenter(seg_settings).segment(log_builder.tokenized(), pull_context())) == 1

    def test_calls_share_no_state(self, wipe_log):
        segmenter = PullSegmenter()
        lines = wipe_log.tokenized()
        first = [e.to_dict() for e in segmenter.segment(lines, pull_context())]
        second = [e.to_dict() for e in segmenter.segment(lines, pull_context())]

        assert first == second
