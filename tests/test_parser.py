"""
Unit tests for the log-text source and encounter windows.
"""

import pytest

from raidlog.parser.parser import CombatLogParser, extract_encounter_lines


class TestCombatLogParser:
    """Test CombatLogParser functionality."""

    def test_split_text(self):
        text = "00|a|x\r\n\n21|b|y\n"
        assert CombatLogParser.split_text(text) == ["00|a|x", "21|b|y"]

    def test_read_lines_with_progress(self, tmp_path):
        path = tmp_path / "small.log"
        path.write_text("00|2024-05-01T20:00:00Z|a\n00|2024-05-01T20:00:01Z|b\n", encoding="utf-8")
        progress = []

        parser = CombatLogParser(buffer_size=8)
        lines = parser.read_lines(str(path), progress_callback=lambda p, done, size: progress.append(p))

        assert lines == ["00|2024-05-01T20:00:00Z|a", "00|2024-05-01T20:00:01Z|b"]
        assert progress[-1] == pytest.approx(1.0)
        assert parser.get_stats()["file"] == str(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            CombatLogParser().read_lines(str(tmp_path / "nope.log"))

    def test_tokenize_and_reset(self):
        parser = CombatLogParser()
        lines = parser.tokenize(["00|2024-05-01T20:00:00Z|a", "junk"])

        assert len(lines) == 1
        assert parser.get_stats()["tokenizer_stats"]["errors"] == 1

        parser.reset()
        assert parser.get_stats()["tokenizer_stats"]["lines_processed"] == 0
        assert parser.get_stats()["file"] is None


class TestExtractEncounterLines:
    """Test the encounter time window."""

    def test_window_with_buffer(self, log_builder):
        for ms in (0, 4000, 5000, 10000, 20000, 25000, 25001):
            log_builder.chat(ms, f"line at {ms}")
        log_builder.raw("00|garbled|0039||no time|")
        lines = log_builder.tokenized()

        window = extract_encounter_lines(lines, log_builder.time(10000), log_builder.time(20000))

        assert [line.message() for line in window] == ["line at 5000", "line at 10000", "line at 20000", "line at 25000"]

    def test_custom_buffer(self, log_builder):
        for ms in (0, 10000, 20000):
            log_builder.chat(ms, f"line at {ms}")
        window = extract_encounter_lines(
            log_builder.tokenized(), log_builder.time(10000), log_builder.time(10000), buffer_ms=0
        )

        assert len(window) == 1
