"""
Settings-based scoring engine.

Scores a processed call against the weighted rubric of its project. Each
category (quality or script) is normalized so that a fully matched
category totals 100.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Sequence

import structlog

from app.domain.audio_metrics import round_half_up
from app.domain.grouping import group_by
from app.models.metrics import CallMetrics
from app.models.settings import Settings, SettingsDictItem, SettingsItem, SettingsItemKind, SettingsKind
from app.models.task import TaskToDict

logger = structlog.get_logger()

# Acceptable employee/client speech ratio, in percents
SPEECH_RATE_RATIO_RANGE = (80.0, 120.0)

DICTIONARY_ITEM_KINDS = frozenset({
    SettingsItemKind.LACKING_INFO_DICT,
    SettingsItemKind.FILLER_WORDS_DICT,
    SettingsItemKind.SLURRED_SPEECH_DICT,
    SettingsItemKind.PROFANITY_SPEECH_DICT,
    SettingsItemKind.DICTIONARY,
})


class ScoringError(Exception):
    """Rubric of a project cannot be applied"""


@dataclass
class ItemScore:
    settings_item: SettingsItem
    score: int


@dataclass
class CategoryScore:
    settings: Settings
    total_score: int
    items: List[ItemScore] = field(default_factory=list)


def dictionary_item_matches(
    dict_items: Sequence[SettingsDictItem],
    observed: Dict[int, bool],
) -> bool:
    """
    Match a dictionary-bound item against observed containment.

    With any absence binding (contains=False) every binding has to agree and
    an unobserved dictionary counts as agreeing. Otherwise one agreeing
    binding is enough and an unobserved dictionary does not agree.
    """
    if not dict_items:
        return False

    if any(not dict_item.contains for dict_item in dict_items):
        return all(
            observed.get(dict_item.dictionary_id, dict_item.contains) == dict_item.contains
            for dict_item in dict_items
        )

    return any(
        observed.get(dict_item.dictionary_id) == dict_item.contains
        for dict_item in dict_items
    )


def item_matches(
    item: SettingsItem,
    metrics: CallMetrics,
    dict_items: Sequence[SettingsDictItem],
    observed: Dict[int, bool],
) -> bool:
    kind = SettingsItemKind(item.type)

    if kind == SettingsItemKind.CALL_HOLDS:
        return metrics.call_holds_count == 0
    if kind == SettingsItemKind.SILENCE_PAUSES:
        return metrics.silence_pause_count == 0
    if kind == SettingsItemKind.INTERRUPTIONS:
        return metrics.client_interruptions_count == 0
    if kind == SettingsItemKind.SPEECH_RATE_RATIO:
        low, high = SPEECH_RATE_RATIO_RANGE
        return low <= metrics.employee_client_speech_ratio <= high
    if kind in DICTIONARY_ITEM_KINDS:
        return dictionary_item_matches(dict_items, observed)

    raise ScoringError(f"Unsupported settings item type: {item.type}")


def validate_settings(
    settings: Sequence[Settings],
    items_by_settings: Dict[object, List[SettingsItem]],
) -> None:
    if not settings:
        raise ScoringError("Project has no scoring settings")

    seen = set()
    for category in settings:
        kind = SettingsKind(category.type)
        if kind in seen:
            raise ScoringError(f"Duplicate {kind.value} settings")
        seen.add(kind)

        items = items_by_settings.get(category.id, [])
        if not items:
            raise ScoringError(f"Settings {category.id} have no items")
        if sum(item.score_weight for item in items) <= 0:
            raise ScoringError(f"Settings {category.id} have non-positive total weight")


def calculate_settings_metrics(
    task_to_dicts: Sequence[TaskToDict],
    metrics: CallMetrics,
    settings: Sequence[Settings],
    settings_items: Sequence[SettingsItem],
    settings_dict_items: Sequence[SettingsDictItem],
) -> List[CategoryScore]:
    """
    Score every category and write the totals into metrics.

    A total is written only while the metrics field is still 0, so scoring
    the same row twice leaves the first result in place.
    """
    items_by_settings = group_by(settings_items, lambda item: item.settings_id)
    dict_items_by_item = group_by(settings_dict_items, lambda dict_item: dict_item.settings_item_id)
    observed = {task_to_dict.dictionary_id: task_to_dict.contains for task_to_dict in task_to_dicts}

    validate_settings(settings, items_by_settings)

    results = []
    for category in settings:
        items = items_by_settings[category.id]
        factor = 100.0 / sum(item.score_weight for item in items)

        item_scores = []
        for item in items:
            matched = item_matches(item, metrics, dict_items_by_item.get(item.id, []), observed)
            score = int(round_half_up(item.score_weight * factor)) if matched else 0
            item_scores.append(ItemScore(settings_item=item, score=score))

        total = sum(item_score.score for item_score in item_scores)
        _store_total(metrics, SettingsKind(category.type), total)
        results.append(CategoryScore(settings=category, total_score=total, items=item_scores))

    logger.debug(
        "Calculated settings metrics",
        script_score=metrics.script_score,
        employee_quality_score=metrics.employee_quality_score,
    )
    return results


def _store_total(metrics: CallMetrics, kind: SettingsKind, total: int) -> None:
    attribute = "script_score" if kind == SettingsKind.SCRIPT else "employee_quality_score"
    if not getattr(metrics, attribute):
        setattr(metrics, attribute, total)
