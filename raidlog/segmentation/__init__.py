"""
Segmentation module for identifying boss pulls in combat logs.
"""

from .base import SegmentationContext, SegmentationStrategy
from .boss_hp import BossHpTracker
from .idle_gap import IdleGapSegmenter
from .pull_tracker import PullSegmenter, PullState

__all__ = [
    "SegmentationContext",
    "SegmentationStrategy",
    "BossHpTracker",
    "IdleGapSegmenter",
    "PullSegmenter",
    "PullState",
]
