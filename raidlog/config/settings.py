"""
Configuration settings for the raid combat log parser.

Every threshold the segmenters and extractors use is a tunable value here.
Settings load from environment variables and can be overridden from YAML
(see ``loader.py``).
"""

import os
import logging
from dataclasses import dataclass, field


def _env_int(name: str, default: int) -> int:
    return int(os.getenv(name, str(default)))


@dataclass
class SegmentationSettings:
    """Encounter boundary thresholds (all in milliseconds unless noted)."""

    # Idle-gap strategy
    idle_gap_ms: int = 8000
    prescan_idle_gap_ms: int = 30000

    # Pull/wipe/kill strategy
    pull_debounce_ms: int = 10000
    wipe_grace_ms: int = 3000
    min_encounter_lines: int = 8  # line count, not ms
    min_encounter_duration_ms: int = 8000

    @classmethod
    def from_env(cls) -> "SegmentationSettings":
        """Load segmentation settings from environment variables."""
        return cls(
            idle_gap_ms=_env_int("RAIDLOG_IDLE_GAP_MS", 8000),
            prescan_idle_gap_ms=_env_int("RAIDLOG_PRESCAN_IDLE_GAP_MS", 30000),
            pull_debounce_ms=_env_int("RAIDLOG_PULL_DEBOUNCE_MS", 10000),
            wipe_grace_ms=_env_int("RAIDLOG_WIPE_GRACE_MS", 3000),
            min_encounter_lines=_env_int("RAIDLOG_MIN_ENCOUNTER_LINES", 8),
            min_encounter_duration_ms=_env_int("RAIDLOG_MIN_ENCOUNTER_DURATION_MS", 8000),
        )


@dataclass
class ParserSettings:
    """Main settings container."""

    segmentation: SegmentationSettings = field(default_factory=SegmentationSettings)

    roster_scan_lines: int = 200
    max_party_size: int = 8
    instance_scan_lines: int = 200
    detail_buffer_ms: int = 5000
    log_level: str = "info"

    @classmethod
    def from_env(cls) -> "ParserSettings":
        """Load all settings from environment variables."""
        return cls(
            segmentation=SegmentationSettings.from_env(),
            roster_scan_lines=_env_int("RAIDLOG_ROSTER_SCAN_LINES", 200),
            max_party_size=_env_int("RAIDLOG_MAX_PARTY_SIZE", 8),
            instance_scan_lines=_env_int("RAIDLOG_INSTANCE_SCAN_LINES", 200),
            detail_buffer_ms=_env_int("RAIDLOG_DETAIL_BUFFER_MS", 5000),
            log_level=os.getenv("LOG_LEVEL", "info").lower(),
        )

    def setup_logging(self, handlers=None):
        """
        Configure logging based on settings.

        Args:
            handlers: Optional handlers (e.g. a RichHandler) that format their own
                      records; only the message is passed to them
        """
        level = getattr(logging, self.log_level.upper(), logging.INFO)

        if handlers:
            logging.basicConfig(level=level, format="%(message)s", handlers=handlers)
            return

        logging.basicConfig(
            level=level,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    def validate(self):
        """Validate configuration settings."""
        errors = []

        seg = self.segmentation
        for name in (
            "idle_gap_ms",
            "prescan_idle_gap_ms",
            "pull_debounce_ms",
            "wipe_grace_ms",
            "min_encounter_lines",
            "min_encounter_duration_ms",
        ):
            if getattr(seg, name) < 0:
                errors.append(f"segmentation.{name} must not be negative")

        if self.max_party_size < 1:
            errors.append(f"Invalid max party size: {self.max_party_size}")
        if self.roster_scan_lines < 1:
            errors.append(f"Invalid roster scan window: {self.roster_scan_lines}")
        if self.instance_scan_lines < 1:
            errors.append(f"Invalid instance scan window: {self.instance_scan_lines}")
        if self.detail_buffer_ms < 0:
            errors.append("detail_buffer_ms must not be negative")

        if errors:
            raise ValueError(f"Configuration validation failed: {'; '.join(errors)}")

    def log_configuration(self):
        """Log current configuration."""
        logger = logging.getLogger(__name__)

        logger.info("=== Parser Configuration ===")
        logger.info(f"Roster scan: {self.roster_scan_lines} lines, max party {self.max_party_size}")
        logger.info(f"Instance scan: {self.instance_scan_lines} lines")
        logger.info(
            f"Idle gap: {self.segmentation.idle_gap_ms}ms "
            f"(pre-scan {self.segmentation.prescan_idle_gap_ms}ms)"
        )
        logger.info(
            f"Pull debounce: {self.segmentation.pull_debounce_ms}ms, "
            f"wipe grace: {self.segmentation.wipe_grace_ms}ms"
        )
        logger.info(
            f"Minimum encounter: {self.segmentation.min_encounter_lines} lines / "
            f"{self.segmentation.min_encounter_duration_ms}ms"
        )
        logger.info(f"Detail buffer: {self.detail_buffer_ms}ms")
        logger.info("=== End Configuration ===")


def get_settings() -> ParserSettings:
    """Fresh settings from the current environment."""
    return ParserSettings.from_env()
