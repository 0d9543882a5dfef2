"""
Analysis of parsed encounters: actor classification and metrics.
"""

from .classifier import ActorClassifier
from .metrics import ActorMetrics, MetricsCalculator

__all__ = ["ActorClassifier", "ActorMetrics", "MetricsCalculator"]
