"""
Two-stage processing: index a whole log, then detail one encounter at a time.
"""

from .log_indexer import STRATEGIES, IndexResult, LogIndexer
from .encounter_processor import EncounterDetail, EncounterProcessor

__all__ = ["STRATEGIES", "IndexResult", "LogIndexer", "EncounterDetail", "EncounterProcessor"]
