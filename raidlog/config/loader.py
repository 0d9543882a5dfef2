"""
Configuration loader for custom parser settings and game data.

Allows users to provide threshold overrides and extra jobs/instances via YAML
configuration files. Loading never mutates module-level tables: it returns new
settings and freshly built lookup tables.
"""

import dataclasses
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, FrozenSet, Optional, Tuple

import yaml

from . import game_data
from .jobs import JobTable, build_job_table, default_job_table
from .library import InstanceEntry, build_instance_library, default_instance_library
from .settings import ParserSettings, SegmentationSettings, get_settings

logger = logging.getLogger(__name__)


@dataclass
class LoadedConfig:
    """Settings and lookup tables resolved from defaults plus a config file."""

    settings: ParserSettings = field(default_factory=ParserSettings.from_env)
    job_table: JobTable = field(default_factory=default_job_table)
    instance_library: Tuple[InstanceEntry, ...] = field(default_factory=default_instance_library)
    pet_names: FrozenSet[str] = game_data.PET_NAMES


class ConfigLoader:
    """Loads and applies custom configuration from YAML files."""

    SEGMENTATION_FIELDS = {f.name for f in dataclasses.fields(SegmentationSettings)}
    PARSER_FIELDS = {
        f.name for f in dataclasses.fields(ParserSettings) if f.name != "segmentation"
    }

    @staticmethod
    def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to custom config file. If None, looks for:
                        1. raidlog.yaml in current directory
                        2. config/raidlog.yaml
                        3. ~/.raidlog/raidlog.yaml

        Returns:
            Configuration dictionary
        """
        search_paths = [
            Path("raidlog.yaml"),
            Path("config/raidlog.yaml"),
            Path.home() / ".raidlog" / "raidlog.yaml",
        ]

        if config_path:
            search_paths.insert(0, Path(config_path))

        for path in search_paths:
            if path.exists():
                try:
                    with open(path, "r") as f:
                        config = yaml.safe_load(f) or {}
                except (OSError, yaml.YAMLError) as e:
                    logger.error(f"Failed to load config from {path}: {e}")
                    continue

                if not isinstance(config, dict):
                    logger.error(f"Ignoring config {path}: top level must be a mapping")
                    continue
                logger.info(f"Loaded configuration from {path}")
                return config

        logger.debug("No custom configuration file found, using defaults")
        return {}

    @classmethod
    def apply_config(
        cls, config: Dict[str, Any], settings: Optional[ParserSettings] = None
    ) -> LoadedConfig:
        """
        Resolve a configuration dictionary into settings and lookup tables.

        Args:
            config: Configuration dictionary from YAML
            settings: Base settings; defaults to the environment

        Returns:
            LoadedConfig with overrides applied
        """
        settings = settings or get_settings()

        segmentation = settings.segmentation
        seg_overrides = cls._int_overrides(
            config.get("segmentation") or {}, cls.SEGMENTATION_FIELDS, "segmentation"
        )
        if seg_overrides:
            segmentation = dataclasses.replace(segmentation, **seg_overrides)

        parser_overrides: Dict[str, Any] = {}
        for key, value in (config.get("parser") or {}).items():
            if key not in cls.PARSER_FIELDS:
                logger.warning(f"Unknown parser setting: {key}")
            elif key == "log_level":
                parser_overrides[key] = str(value).lower()
            else:
                try:
                    parser_overrides[key] = int(value)
                except (ValueError, TypeError) as e:
                    logger.warning(f"Invalid value for parser.{key}: {e}")

        settings = dataclasses.replace(settings, segmentation=segmentation, **parser_overrides)

        extra_jobs = config.get("jobs") or []
        job_table = build_job_table(extra_jobs) if extra_jobs else default_job_table()

        extra_instances = config.get("instances") or []
        instance_library = (
            build_instance_library(extra_instances) if extra_instances else default_instance_library()
        )

        pet_names = game_data.PET_NAMES
        if config.get("pet_names"):
            pet_names = pet_names | {str(name).lower() for name in config["pet_names"]}

        logger.info("Custom configuration applied successfully")
        return LoadedConfig(
            settings=settings,
            job_table=job_table,
            instance_library=instance_library,
            pet_names=pet_names,
        )

    @staticmethod
    def _int_overrides(values: Dict[str, Any], allowed, section: str) -> Dict[str, int]:
        overrides = {}
        for key, value in values.items():
            if key not in allowed:
                logger.warning(f"Unknown {section} setting: {key}")
                continue
            try:
                overrides[key] = int(value)
            except (ValueError, TypeError) as e:
                logger.warning(f"Invalid value for {section}.{key}: {e}")
        return overrides


def load_and_apply_config(config_path: Optional[str] = None) -> LoadedConfig:
    """
    Load and apply configuration in one step.

    Args:
        config_path: Optional path to custom config file

    Raises:
        ValueError: the resulting settings are invalid
    """
    loader = ConfigLoader()
    config = loader.load_config(config_path)
    loaded = loader.apply_config(config)
    loaded.settings.validate()
    return loaded
