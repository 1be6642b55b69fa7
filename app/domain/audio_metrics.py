"""
Audio metrics engine.

Derives behavioral call metrics from recognition data. All functions are
pure; times are in seconds and intervals are half-open [start, end).
"""

import math
from collections import Counter
from typing import List, Optional, Sequence, Tuple

from app.models.metrics import CallMetrics
from app.schemas.recognition import (
    CallHolds,
    EmotionKind,
    Interval,
    ParticipantKind,
    RecognitionData,
    SpeechRecognition,
)

# Minimal overlap for an employee phrase to count as interrupting the client
OVERLAP_DURATION_EPS = 1.0
# Minimal employee-to-employee gap counted as a pause, also the hold margin
PAUSE_DURATION = 5.0


def round_half_up(value: float) -> float:
    """Round to the nearest integer, halves away from zero"""
    return math.copysign(math.floor(abs(value) + 0.5), value)


def intervals_overlap(first: Interval, second: Interval) -> bool:
    return first.start < second.end and second.start < first.end


def is_interruption(employee_interval: Interval, client_interval: Interval) -> bool:
    """Employee starts talking inside a client phrase and overlaps it for at least a second"""
    overlap_start = max(employee_interval.start, client_interval.start)
    overlap_end = min(employee_interval.end, client_interval.end)

    return (
        client_interval.start < employee_interval.start < client_interval.end
        and overlap_end - overlap_start >= OVERLAP_DURATION_EPS
    )


def find_interruptions(
    employee_intervals: Sequence[Interval],
    client_intervals: Sequence[Interval],
) -> Tuple[float, int]:
    """Return (total interrupting speech duration, interruptions count)"""
    count = 0
    total_time = 0.0

    for employee_interval in employee_intervals:
        if any(is_interruption(employee_interval, client_interval) for client_interval in client_intervals):
            count += 1
            total_time += employee_interval.duration

    return total_time, count


def time_to_answer(employee_intervals: Sequence[Interval]) -> Optional[float]:
    if not employee_intervals:
        return None
    return employee_intervals[0].start


def total_speech_duration(intervals: Sequence[Interval]) -> float:
    return sum((interval.duration for interval in intervals), 0.0)


def speech_percentage(total_speech: float, total_call_duration: float) -> float:
    if total_call_duration == 0.0:
        return 0.0
    return total_speech / total_call_duration * 100.0


def count_pauses(
    employee_intervals: Sequence[Interval],
    client_intervals: Sequence[Interval],
    holds: CallHolds,
) -> Tuple[int, float]:
    """
    Count employee silences between two consecutive employee phrases.

    The previous-end tracker resets whenever the client speaks, so only
    employee-to-employee gaps of at least PAUSE_DURATION are counted. A gap
    touched by a call hold (widened by PAUSE_DURATION on both sides) is not
    a pause.

    Returns (pause count, total pause duration).
    """
    if not employee_intervals or not client_intervals:
        return 0, 0.0

    hold_intervals = sorted(
        (
            Interval(start=hold.start - PAUSE_DURATION, end=hold.end + PAUSE_DURATION)
            for hold in [*holds.music, *holds.silent]
        ),
        key=lambda hold: hold.start,
    )

    # Stable sort keeps employee phrases ahead of client phrases starting at the same time
    intervals = sorted(
        [(ParticipantKind.EMPLOYEE, interval) for interval in employee_intervals]
        + [(ParticipantKind.CLIENT, interval) for interval in client_intervals],
        key=lambda pair: pair[1].start,
    )

    previous_end: Optional[float] = None
    pause_count = 0
    pause_sum = 0.0
    for speaker, interval in intervals:
        if speaker == ParticipantKind.EMPLOYEE and previous_end is not None:
            gap = interval.start - previous_end
            if gap >= PAUSE_DURATION:
                silence = Interval(start=previous_end, end=interval.start)
                if not any(intervals_overlap(hold, silence) for hold in hold_intervals):
                    pause_count += 1
                    pause_sum += gap

        previous_end = interval.end if speaker == ParticipantKind.EMPLOYEE else None

    return pause_count, pause_sum


def calculate_words_per_minute(
    transcriptions: Sequence[SpeechRecognition],
    speech_time: float,
    speaker: ParticipantKind,
) -> float:
    total_words = sum(
        len(transcription.text.split())
        for transcription in transcriptions
        if transcription.speaker == speaker
    )

    if speech_time <= 0.0:
        return 0.0

    return total_words / (speech_time / 60.0)


def call_emotional_mode(emotions: Sequence[EmotionKind]) -> Optional[EmotionKind]:
    """Most frequent emotion; on a tie, the one that appears first"""
    if not emotions:
        return None

    # Counter keeps first-seen order and max() returns the first maximal key
    occurrences = Counter(emotions)
    return max(occurrences, key=occurrences.__getitem__)


def compute_metrics(recognition: RecognitionData) -> CallMetrics:
    """
    Compute call metrics from recognition data.
    The task id is left unset and rubric scores start at zero.
    """
    employee_intervals: List[Interval] = recognition.phrase_timestamps.employee
    client_intervals: List[Interval] = recognition.phrase_timestamps.client
    holds = recognition.call_holds
    emotions = recognition.emotion_recognition_result

    silence_pause_count, total_employee_silence = count_pauses(employee_intervals, client_intervals, holds)
    total_interruptions_duration, interruptions_count = find_interruptions(employee_intervals, client_intervals)

    total_employee_speech = total_speech_duration(employee_intervals)
    total_client_speech = total_speech_duration(client_intervals)

    call_duration = max(
        (interval.end for interval in [*client_intervals, *employee_intervals]),
        default=0.0,
    )

    employee_wpm = calculate_words_per_minute(
        recognition.speech_recognition_result, total_employee_speech, ParticipantKind.EMPLOYEE
    )
    client_wpm = calculate_words_per_minute(
        recognition.speech_recognition_result, total_client_speech, ParticipantKind.CLIENT
    )

    return CallMetrics(
        call_duration=call_duration,
        time_to_answer=time_to_answer(employee_intervals) or 0.0,
        total_employee_speech=total_employee_speech,
        total_client_speech=total_client_speech,
        employee_client_speech_ratio=speech_percentage(total_employee_speech, total_client_speech),
        employee_speech_ratio=speech_percentage(total_employee_speech, call_duration),
        client_speech_ratio=speech_percentage(total_client_speech, call_duration),
        call_holds_count=len(holds.music) + len(holds.silent),
        silence_pause_count=silence_pause_count,
        total_employee_silence=total_employee_silence,
        client_interruptions_count=interruptions_count,
        total_client_interruptions_duration=total_interruptions_duration,
        avg_employee_words_per_min=round_half_up(employee_wpm),
        avg_client_words_per_min=round_half_up(client_wpm),
        script_score=0,
        employee_quality_score=0,
        emotion_mode=call_emotional_mode(emotions),
        emotion_start_mode=emotions[0] if emotions else None,
        emotion_end_mode=emotions[-1] if emotions else None,
    )
