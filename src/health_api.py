"""REST API endpoints for daily health metrics."""

import datetime
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from database import get_db
from health import get_daily_health_summary, get_health_metrics_for_day
from storage import HealthMetricsCache, SessionLog, StoredHealthSampleSource
from typedefs import DailyHealthSummary, HealthMetrics, RawHealthSample

router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.put("/samples/{day}", response_model=RawHealthSample)
def put_raw_sample(
    day: datetime.date, sample: RawHealthSample, db: Session = Depends(get_db)
) -> RawHealthSample:
    """Store the raw readings (sleep, HRV, heart rate, calories) for a day.

    Uploading a sample replaces any earlier one for the same day. Metrics
    for the day are recomputed on the next read unless the day is settled.
    """
    StoredHealthSampleSource(db).put_raw_sample(day, sample)
    return sample


@router.get("/metrics", response_model=List[HealthMetrics])
def list_metrics(
    start: datetime.date, end: datetime.date, db: Session = Depends(get_db)
) -> List[HealthMetrics]:
    """Cached metrics between two dates (inclusive), without recomputing."""
    if start > end:
        raise HTTPException(status_code=400, detail="start must not be after end")
    return HealthMetricsCache(db).get_range(start, end)


@router.get("/metrics/{day}", response_model=HealthMetrics)
def get_metrics(
    day: datetime.date, force: bool = False, db: Session = Depends(get_db)
) -> HealthMetrics:
    """Health metrics for a day, computed on demand and cached.

    Args:
        day: Calendar date (YYYY-MM-DD)
        force: Recompute even if a cached record could be reused
        db: Database session
    """
    return get_health_metrics_for_day(
        day,
        cache=HealthMetricsCache(db),
        source=StoredHealthSampleSource(db),
        sessions=SessionLog(db).load_all_sessions(),
        force=force,
    )


@router.get("/summary/{day}", response_model=DailyHealthSummary)
def get_summary(
    day: datetime.date, db: Session = Depends(get_db)
) -> DailyHealthSummary:
    """A day's metrics with averages and charts over the 7 days ending on it."""
    return get_daily_health_summary(
        day,
        cache=HealthMetricsCache(db),
        source=StoredHealthSampleSource(db),
        sessions=SessionLog(db).load_all_sessions(),
    )
