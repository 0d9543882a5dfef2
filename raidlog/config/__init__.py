"""
Configuration module for the raid combat log parser.

Provides tunable thresholds, the static job/instance tables and the YAML
override loader.
"""

from .settings import ParserSettings, SegmentationSettings, get_settings
from .jobs import JobDefinition, JobSkill, JobTable, build_job_table, default_job_table
from .library import InstanceEntry, build_instance_library, default_instance_library
from .loader import ConfigLoader, LoadedConfig, load_and_apply_config

__all__ = [
    "ParserSettings",
    "SegmentationSettings",
    "get_settings",
    "JobDefinition",
    "JobSkill",
    "JobTable",
    "build_job_table",
    "default_job_table",
    "InstanceEntry",
    "build_instance_library",
    "default_instance_library",
    "ConfigLoader",
    "LoadedConfig",
    "load_and_apply_config",
]
