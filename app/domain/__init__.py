"""Call analysis: audio metrics, dictionary matching and scoring"""

from app.domain.audio_metrics import compute_metrics
from app.domain.grouping import group_by
from app.domain.keywords import match_dictionaries
from app.domain.scoring import CategoryScore, ItemScore, ScoringError, calculate_settings_metrics

__all__ = [
    "compute_metrics",
    "group_by",
    "match_dictionaries",
    "CategoryScore",
    "ItemScore",
    "ScoringError",
    "calculate_settings_metrics",
]
