"""
Pytest configuration and shared fixtures for the test suite.

Provides a small builder for pipe-delimited log lines so each test can lay
out its own timeline in milliseconds from a fixed start time.
"""

import pytest
from datetime import datetime, timedelta, timezone
from pathlib import Path

import sys

sys.path.insert(0, str(Path(__file__).parent.parent))

from raidlog.config.settings import ParserSettings, SegmentationSettings
from raidlog.parser.tokenizer import LineTokenizer


BASE_TIME = datetime(2024, 5, 1, 20, 0, 0, tzinfo=timezone.utc)


class LogBuilder:
    """Accumulates raw log lines; times are milliseconds after BASE_TIME."""

    def __init__(self):
        self.lines = []

    @staticmethod
    def time(ms):
        return BASE_TIME + timedelta(milliseconds=ms)

    @classmethod
    def stamp(cls, ms):
        return cls.time(ms).isoformat(timespec="milliseconds").replace("+00:00", "Z")

    def add(self, opcode, ms, *fields):
        self.lines.append("|".join([opcode, self.stamp(ms), *fields]))
        return self

    def raw(self, line):
        self.lines.append(line)
        return self

    def combatant(self, ms, name, actor_id="10000001"):
        return self.add("03", ms, actor_id, name, "", "")

    def ability(self, ms, actor, skill, target="", actor_id="10000001"):
        return self.add("21", ms, actor_id, actor, "1F", skill, "40000001", target, "750003")

    def chat(self, ms, message):
        return self.add("00", ms, "0039", "", message, "")

    def hp(self, ms, name, hp, max_hp, actor_id="40000001"):
        return self.add("38", ms, actor_id, name, "", str(hp), str(max_hp), "")

    def zone(self, ms, zone_name):
        return self.add("01", ms, "0001", zone_name)

    def party(self, ms, *names):
        for i, name in enumerate(names):
            self.combatant(ms, name, actor_id=f"1000000{i + 1}")
        return self

    def tokenized(self):
        return LineTokenizer().parse_lines(self.lines)


@pytest.fixture
def log_builder():
    """Fresh log builder."""
    return LogBuilder()


@pytest.fixture
def seg_settings():
    """Default segmentation thresholds."""
    return SegmentationSettings()


@pytest.fixture
def parser_settings():
    """Default parser settings, independent of the environment."""
    return ParserSettings()


@pytest.fixture
def kill_log(log_builder):
    """
    Two-player party killing The Ultima Weapon.

    Pull at 1s, hits every second with HP telemetry down to 0, kill line at 20s.
    """
    b = log_builder
    b.zone(0, "The Weapon's Refrain (Ultimate)")
    b.party(0, "Alice SmithGilgamesh", "Bob Jones")
    b.ability(1000, "Alice Smith", "Fast Blade", "The Ultima Weapon")
    for i in range(1, 11):
        ms = 1000 + i * 1500
        b.ability(ms, "Bob Jones", "Stone", "The Ultima Weapon", actor_id="10000002")
        b.chat(ms, f"Alice Smith hits The Ultima Weapon for {10000 + i:,} damage.")
        b.hp(ms, "The Ultima Weapon", max(0, 100000 - i * 10000), 100000)
    b.chat(20000, "You defeat the Ultima Weapon.")
    return b


@pytest.fixture
def wipe_log(log_builder):
    """Two-player party pulling, then both dying within a second."""
    b = log_builder
    b.party(0, "Alice Smith", "Bob Jones")
    b.ability(1000, "Alice Smith", "Fast Blade", "The Ultima Weapon")
    for i in range(1, 11):
        b.chat(1000 + i * 1000, f"Alice Smith hits The Ultima Weapon for 5,000 damage.")
    b.chat(12000, "Alice Smith is defeated.")
    b.chat(12500, "Bob Jones is defeated.")
    b.chat(20000, "The Ultima Weapon readies Ultimate Annihilation.")
    return b


@pytest.fixture
def sample_log_file(tmp_path, kill_log):
    """The kill scenario written to disk."""
    path = tmp_path / "Network_kill.log"
    path.write_text("\n".join(kill_log.lines) + "\n", encoding="utf-8")
    return path


# Pytest configuration
def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "integration: mark test as an integration test")
