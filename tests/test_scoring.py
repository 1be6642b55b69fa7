"""Tests for the settings-based scoring engine"""

from uuid import uuid4

import pytest

from app.domain.audio_metrics import compute_metrics
from app.domain.scoring import ScoringError, calculate_settings_metrics
from app.models.settings import Settings, SettingsDictItem, SettingsItem, SettingsItemKind, SettingsKind
from app.models.task import NIL_PROJECT_ID, TaskToDict
from app.schemas.recognition import RecognitionData


def make_settings(kind: SettingsKind) -> Settings:
    return Settings(id=uuid4(), project_id=NIL_PROJECT_ID, type=kind)


def make_item(settings: Settings, kind: SettingsItemKind, weight: int) -> SettingsItem:
    return SettingsItem(
        id=uuid4(),
        settings_id=settings.id,
        settings_immutable=False,
        type=kind,
        name=kind.value,
        score_weight=weight,
    )


def bind(item: SettingsItem, dictionary_id: int, contains: bool) -> SettingsDictItem:
    return SettingsDictItem(id=uuid4(), settings_item_id=item.id, dictionary_id=dictionary_id, contains=contains)


def observed(**results) -> list:
    """observed(d1=True) -> TaskToDict for dictionary 1"""
    task_id = uuid4()
    return [
        TaskToDict(task_id=task_id, dictionary_id=int(name[1:]), contains=contains)
        for name, contains in results.items()
    ]


@pytest.fixture
def metrics():
    """Metrics of a quiet call: no holds, pauses or interruptions"""
    return compute_metrics(RecognitionData())


def score_script_item(metrics, dict_items_for, task_to_dicts):
    script = make_settings(SettingsKind.SCRIPT)
    item = make_item(script, SettingsItemKind.DICTIONARY, 1)
    results = calculate_settings_metrics(task_to_dicts, metrics, [script], [item], dict_items_for(item))
    return results[0].total_score


def test_single_dictionary_script(metrics):
    """Test a matched single-dictionary script scores 100"""
    total = score_script_item(metrics, lambda item: [bind(item, 1, True)], observed(d1=True))

    assert total == 100
    assert metrics.script_score == 100
    assert metrics.employee_quality_score == 0


def test_presence_binding_not_found(metrics):
    """Test a presence binding fails when the dictionary did not match"""
    assert score_script_item(metrics, lambda item: [bind(item, 1, True)], observed(d1=False)) == 0


def test_presence_binding_without_observation(metrics):
    """Test a presence binding fails when the dictionary was not checked"""
    assert score_script_item(metrics, lambda item: [bind(item, 1, True)], []) == 0


def test_presence_bindings_any_agrees(metrics):
    """Test one agreeing presence binding is enough"""
    total = score_script_item(
        metrics,
        lambda item: [bind(item, 1, True), bind(item, 2, True)],
        observed(d1=False, d2=True),
    )

    assert total == 100


@pytest.mark.parametrize("task_to_dicts,expected", [
    (observed(d1=False), 100),
    ([], 100),
    (observed(d1=True), 0),
])
def test_absence_binding(metrics, task_to_dicts, expected):
    """Test an absence binding matches unless the dictionary was found"""
    assert score_script_item(metrics, lambda item: [bind(item, 1, False)], task_to_dicts) == expected


def test_mixed_bindings_all_must_agree(metrics):
    """Test any absence binding makes every binding mandatory"""
    def dict_items(item):
        return [bind(item, 1, True), bind(item, 2, False)]

    assert score_script_item(metrics, dict_items, observed(d1=True, d2=False)) == 100
    assert score_script_item(metrics, dict_items, observed(d1=False, d2=False)) == 0
    assert score_script_item(metrics, dict_items, observed(d1=True, d2=True)) == 0
    # Unchecked dictionaries agree with their binding
    assert score_script_item(metrics, dict_items, observed(d1=True)) == 100


def test_dictionary_item_without_bindings(metrics):
    """Test a dictionary item with no bindings never matches"""
    assert score_script_item(metrics, lambda item: [], observed(d1=True)) == 0


def test_metric_items():
    """Test threshold items against computed metrics"""
    metrics = compute_metrics(RecognitionData())
    metrics.call_holds_count = 2
    metrics.employee_client_speech_ratio = 100.0

    quality = make_settings(SettingsKind.QUALITY)
    holds = make_item(quality, SettingsItemKind.CALL_HOLDS, 15)
    pauses = make_item(quality, SettingsItemKind.SILENCE_PAUSES, 10)
    interruptions = make_item(quality, SettingsItemKind.INTERRUPTIONS, 15)
    rate = make_item(quality, SettingsItemKind.SPEECH_RATE_RATIO, 10)

    results = calculate_settings_metrics([], metrics, [quality], [holds, pauses, interruptions, rate], [])

    scores = {item_score.settings_item.type: item_score.score for item_score in results[0].items}
    assert scores == {
        SettingsItemKind.CALL_HOLDS: 0,
        SettingsItemKind.SILENCE_PAUSES: 20,
        SettingsItemKind.INTERRUPTIONS: 30,
        SettingsItemKind.SPEECH_RATE_RATIO: 20,
    }
    assert results[0].total_score == 70
    assert metrics.employee_quality_score == 70


@pytest.mark.parametrize("ratio,matched", [
    (80.0, True),
    (120.0, True),
    (100.0, True),
    (79.9, False),
    (120.1, False),
    (0.0, False),
])
def test_speech_rate_ratio_range(ratio, matched):
    metrics = compute_metrics(RecognitionData())
    metrics.employee_client_speech_ratio = ratio

    quality = make_settings(SettingsKind.QUALITY)
    item = make_item(quality, SettingsItemKind.SPEECH_RATE_RATIO, 5)

    results = calculate_settings_metrics([], metrics, [quality], [item], [])

    assert results[0].total_score == (100 if matched else 0)


def test_weights_are_normalized_per_category(metrics):
    """Test item scores are rounded shares of 100"""
    quality = make_settings(SettingsKind.QUALITY)
    items = [
        make_item(quality, SettingsItemKind.CALL_HOLDS, 1),
        make_item(quality, SettingsItemKind.SILENCE_PAUSES, 2),
    ]

    results = calculate_settings_metrics([], metrics, [quality], items, [])

    assert [item_score.score for item_score in results[0].items] == [33, 67]
    assert results[0].total_score == 100


def test_equal_weights_round_each_item(metrics):
    """Test rounding happens per item, not per category"""
    quality = make_settings(SettingsKind.QUALITY)
    items = [
        make_item(quality, SettingsItemKind.CALL_HOLDS, 1),
        make_item(quality, SettingsItemKind.SILENCE_PAUSES, 1),
        make_item(quality, SettingsItemKind.INTERRUPTIONS, 1),
    ]

    results = calculate_settings_metrics([], metrics, [quality], items, [])

    assert results[0].total_score == 99


def test_scores_are_written_once(metrics):
    """Test a second scoring pass leaves earlier totals in place"""
    script = make_settings(SettingsKind.SCRIPT)
    item = make_item(script, SettingsItemKind.DICTIONARY, 1)
    dict_items = [bind(item, 1, True)]

    calculate_settings_metrics(observed(d1=True), metrics, [script], [item], dict_items)
    results = calculate_settings_metrics(observed(d1=False), metrics, [script], [item], dict_items)

    assert results[0].total_score == 0
    assert metrics.script_score == 100


def test_existing_score_is_kept(metrics):
    metrics.employee_quality_score = 55
    quality = make_settings(SettingsKind.QUALITY)
    item = make_item(quality, SettingsItemKind.CALL_HOLDS, 1)

    calculate_settings_metrics([], metrics, [quality], [item], [])

    assert metrics.employee_quality_score == 55


def test_both_categories(metrics):
    """Test quality and script totals land in their own fields"""
    quality = make_settings(SettingsKind.QUALITY)
    script = make_settings(SettingsKind.SCRIPT)
    holds = make_item(quality, SettingsItemKind.CALL_HOLDS, 15)
    filler = make_item(quality, SettingsItemKind.FILLER_WORDS_DICT, 10)
    welcome = make_item(script, SettingsItemKind.DICTIONARY, 25)
    farewell = make_item(script, SettingsItemKind.DICTIONARY, 25)

    results = calculate_settings_metrics(
        observed(d5=True, d6=True, d9=False),
        metrics,
        [quality, script],
        [holds, filler, welcome, farewell],
        [bind(filler, 5, False), bind(welcome, 6, True), bind(farewell, 9, True)],
    )

    assert [result.total_score for result in results] == [60, 50]
    assert metrics.employee_quality_score == 60
    assert metrics.script_score == 50


def test_no_settings(metrics):
    with pytest.raises(ScoringError):
        calculate_settings_metrics([], metrics, [], [], [])


def test_duplicate_category(metrics):
    first = make_settings(SettingsKind.QUALITY)
    second = make_settings(SettingsKind.QUALITY)
    items = [make_item(first, SettingsItemKind.CALL_HOLDS, 1), make_item(second, SettingsItemKind.CALL_HOLDS, 1)]

    with pytest.raises(ScoringError, match="Duplicate"):
        calculate_settings_metrics([], metrics, [first, second], items, [])


def test_category_without_items(metrics):
    quality = make_settings(SettingsKind.QUALITY)
    script = make_settings(SettingsKind.SCRIPT)

    with pytest.raises(ScoringError, match="no items"):
        calculate_settings_metrics([], metrics, [quality, script], [make_item(quality, SettingsItemKind.CALL_HOLDS, 1)], [])

    # Validation runs before any total is written
    assert metrics.employee_quality_score == 0


def test_category_with_zero_weight(metrics):
    quality = make_settings(SettingsKind.QUALITY)

    with pytest.raises(ScoringError, match="non-positive"):
        calculate_settings_metrics([], metrics, [quality], [make_item(quality, SettingsItemKind.CALL_HOLDS, 0)], [])
