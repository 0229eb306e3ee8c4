"""Health and recovery scoring.

Raw daily samples (sleep, HRV, resting heart rate, calories) are combined
with the day's logged workouts into HealthMetrics records, which are cached
per date.
"""

import datetime
import logging
from typing import List, Optional, Protocol, Sequence

from typedefs import (
    DailyHealthSummary,
    HealthMetrics,
    RawHealthSample,
    WeeklyAverages,
    WorkoutSession,
)
from units import round_half_up

logger = logging.getLogger(__name__)

# Typical physiological ranges used for normalisation
HRV_MIN, HRV_MAX = 20.0, 200.0  # ms
RHR_MIN, RHR_MAX = 40.0, 100.0  # bpm

TARGET_SLEEP_HOURS = 8.0

# Used when the device reports nothing for the day
DEFAULT_HRV = 50.0
DEFAULT_RESTING_HEART_RATE = 65.0

REFERENCE_VOLUME = 10000.0  # kg
REFERENCE_DURATION_MINUTES = 120.0

# Days this far behind today no longer receive new samples
SETTLED_AFTER_DAYS = 2

SUMMARY_WINDOW_DAYS = 7


class MetricsCache(Protocol):
    def get_metrics(self, day: datetime.date) -> Optional[HealthMetrics]: ...

    def put_metrics(self, day: datetime.date, metrics: HealthMetrics) -> None: ...


class RawHealthSource(Protocol):
    def fetch_raw_sample(self, day: datetime.date) -> RawHealthSample: ...


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def calculate_stress_score(hrv: float, rhr: float) -> int:
    """Stress score from 0 to 100, lower is better.

    HRV is normalised inversely over 20-200 ms (higher HRV, less stress) and
    resting heart rate over 40-100 bpm. HRV carries 70% of the weight.
    """
    hrv_range = HRV_MAX - HRV_MIN
    rhr_range = RHR_MAX - RHR_MIN
    hrv_normalized = _clamp(100 - (hrv - HRV_MIN) / hrv_range * 100, 0, 100)
    rhr_normalized = _clamp((rhr - RHR_MIN) / rhr_range * 100, 0, 100)

    return int(round_half_up(hrv_normalized * 0.7 + rhr_normalized * 0.3))


def calculate_recovery_score(sleep_hours: float, hrv: float, rhr: float) -> int:
    """Recovery score from 0 to 100, higher is better.

    Sleep contributes up to 33 points, HRV up to 44 and resting heart rate up
    to 23. Each component is capped on its own before summing.
    """
    sleep_score = min(33, sleep_hours / TARGET_SLEEP_HOURS * 33)
    hrv_score = min(44, (hrv - HRV_MIN) / (HRV_MAX - HRV_MIN) * 44)
    rhr_score = min(23, (1 - (rhr - RHR_MIN) / (RHR_MAX - RHR_MIN)) * 23)

    total = sleep_score + hrv_score + rhr_score
    return int(round_half_up(_clamp(total, 0, 100)))


def calculate_exertion_score(workout_volume: float, duration_minutes: float) -> float:
    """Exertion from 0 to 10: up to 7 points for volume, 3 for duration."""
    volume_score = min(7, workout_volume / REFERENCE_VOLUME * 7)
    duration_score = min(3, duration_minutes / REFERENCE_DURATION_MINUTES * 3)

    return round_half_up(volume_score + duration_score, 1)


def sessions_on_day(
    sessions: Sequence[WorkoutSession], day: datetime.date
) -> List[WorkoutSession]:
    return [s for s in sessions if s.start_time.date() == day]


def build_health_metrics(
    day: datetime.date,
    sample: RawHealthSample,
    sessions: Sequence[WorkoutSession],
    now: datetime.datetime,
) -> HealthMetrics:
    """Derive a day's HealthMetrics from its raw sample and workouts."""
    day_sessions = sessions_on_day(sessions, day)
    total_volume = sum(s.total_volume for s in day_sessions)
    total_duration = sum(s.duration for s in day_sessions)

    # Zero readings are as good as missing
    sleep_hours = sample.sleep_hours or 0
    hrv = sample.hrv or DEFAULT_HRV
    rhr = sample.resting_heart_rate or DEFAULT_RESTING_HEART_RATE
    calories_burned = sample.calories_burned or 0
    calories_consumed = sample.calories_consumed or 0

    exertion = 0.0
    if total_volume > 0:
        exertion = calculate_exertion_score(total_volume, total_duration / 60)

    return HealthMetrics(
        date=day,
        calories_burned=calories_burned,
        calories_consumed=calories_consumed,
        sleep_hours=sleep_hours,
        sleep_percentage=int(round_half_up(sleep_hours / TARGET_SLEEP_HOURS * 100)),
        hrv=hrv,
        resting_heart_rate=rhr,
        stress_score=calculate_stress_score(hrv, rhr),
        recovery_score=calculate_recovery_score(sleep_hours, hrv, rhr),
        exertion_score=exertion,
        energy_balance=calories_consumed - calories_burned,
        last_calculated=now,
    )


# ========== Cache freshness policy ==========
#
# Unlike a TTL cache, trust grows with age: once a day is far enough behind
# today its samples can no longer change, so its cached record is final.


def is_settled_day(day: datetime.date, now: datetime.datetime) -> bool:
    """Whether a day is old enough that its data can no longer change."""
    return (now.date() - day).days >= SETTLED_AFTER_DAYS


def should_recalculate_metrics(
    cached: Optional[HealthMetrics], now: datetime.datetime
) -> bool:
    """Whether a cached record should be rebuilt based on when it was computed.

    Records computed within the last two days may be missing samples that
    arrived later, so they are rebuilt; older computations are kept.
    """
    if cached is None:
        return True

    # The store may hand back naive timestamps
    last_calculated = cached.last_calculated.replace(tzinfo=None)
    days_since = (now.replace(tzinfo=None) - last_calculated).days
    return days_since < SETTLED_AFTER_DAYS


def can_use_cached_metrics(
    cached: Optional[HealthMetrics],
    day: datetime.date,
    now: datetime.datetime,
    force: bool = False,
) -> bool:
    if cached is None or force:
        return False
    return is_settled_day(day, now) or not should_recalculate_metrics(cached, now)


def get_health_metrics_for_day(
    day: datetime.date,
    cache: MetricsCache,
    source: RawHealthSource,
    sessions: Sequence[WorkoutSession],
    force: bool = False,
    now: Optional[datetime.datetime] = None,
) -> HealthMetrics:
    """Get a day's metrics from the cache, recomputing them when needed.

    Args:
        day: Calendar date to compute metrics for
        cache: Per-date metrics cache
        source: Raw health sample source (missing values fall back to defaults)
        sessions: Workout session log, used for the day's volume and duration
        force: Recompute even if the cached record could be reused
        now: Current time (default: now)

    Returns:
        HealthMetrics for the day, stored back into the cache if recomputed
    """
    if now is None:
        now = datetime.datetime.now()

    cached = cache.get_metrics(day)
    if can_use_cached_metrics(cached, day, now, force):
        logger.debug("Using cached health metrics for %s", day)
        return cached

    logger.info("Calculating health metrics for %s", day)
    sample = source.fetch_raw_sample(day)
    metrics = build_health_metrics(day, sample, sessions, now)
    cache.put_metrics(day, metrics)
    return metrics


def get_daily_health_summary(
    day: datetime.date,
    cache: MetricsCache,
    source: RawHealthSource,
    sessions: Sequence[WorkoutSession],
    now: Optional[datetime.datetime] = None,
) -> DailyHealthSummary:
    """Metrics for a day together with the rolling 7 day window ending on it."""
    if now is None:
        now = datetime.datetime.now()

    metrics = get_health_metrics_for_day(day, cache, source, sessions, now=now)

    start = day - datetime.timedelta(days=SUMMARY_WINDOW_DAYS - 1)
    last_7_days = [
        get_health_metrics_for_day(
            start + datetime.timedelta(days=offset), cache, source, sessions, now=now
        )
        for offset in range(SUMMARY_WINDOW_DAYS)
    ]

    weekly_averages = WeeklyAverages(
        avg_sleep_hours=sum(m.sleep_hours for m in last_7_days) / SUMMARY_WINDOW_DAYS,
        avg_calories_burned=(
            sum(m.calories_burned for m in last_7_days) / SUMMARY_WINDOW_DAYS
        ),
        avg_stress=sum(m.stress_score for m in last_7_days) / SUMMARY_WINDOW_DAYS,
        avg_recovery=sum(m.recovery_score for m in last_7_days) / SUMMARY_WINDOW_DAYS,
    )

    workout_volume = sum(s.total_volume for s in sessions_on_day(sessions, day))

    return DailyHealthSummary(
        metrics=metrics,
        weekly_averages=weekly_averages,
        last_7_days=last_7_days,
        workout_volume=workout_volume if workout_volume > 0 else None,
    )
