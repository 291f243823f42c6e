"""Display-ready cycle insights derived from a tracking record.

Everything here is a pure function of the record and a reference instant.
Nothing is cached: insights are recomputed on every call from the latest
snapshot.

The fertile window is a fixed day range, independent of cycle length.  It is
a heuristic, not an ovulation prediction.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timezone

from herizon.models.tracking import CyclePhase, SleepQuality, TrackingRecord
from herizon.tracking.config_loader import AnalyticsConfig, get_tracker_config
from herizon.tracking.errors import InvalidRecord

logger = logging.getLogger("herizon.tracking.analytics")


@dataclass(frozen=True)
class Insights:
    """Derived indicators for the dashboard.

    Attributes:
        cycle_day:               Day within the current cycle, 1-indexed.
        cycle_duration_days:     Cycle length the day was computed against.
        days_until_next_period:  cycle_duration_days - cycle_day.
        fertile_window:          True while cycle_day is inside the fixed window.
        pms_likely:              Luteal phase and late in the cycle.
        well_rested:             Good sleep quality and enough hours.
        cycle_progress_pct:      cycle_day as a share of the cycle, 0–100.
        phase:                   Phase reported by the service, if any.
    """

    cycle_day: int
    cycle_duration_days: int
    days_until_next_period: int
    fertile_window: bool
    pms_likely: bool
    well_rested: bool
    cycle_progress_pct: float
    phase: CyclePhase | None = None


def _as_utc(now: datetime) -> datetime:
    if now.tzinfo is None:
        return now.replace(tzinfo=timezone.utc)
    return now.astimezone(timezone.utc)


def cycle_day_for(last_period_start: date, cycle_duration_days: int, now: datetime) -> int:
    """Return the 1-indexed day of the cycle that ``now`` falls on.

    Whole days are floored, so a start date in the future still maps into
    ``[1, cycle_duration_days]``.

    Raises:
        InvalidRecord: If the cycle length is not positive.
    """
    if cycle_duration_days <= 0:
        raise InvalidRecord(f"cycle duration must be > 0 days, got {cycle_duration_days}")
    start = datetime.combine(last_period_start, time.min, tzinfo=timezone.utc)
    elapsed_days = (_as_utc(now) - start).days
    return elapsed_days % cycle_duration_days + 1


def derive_insights(
    record: TrackingRecord,
    now: datetime,
    config: AnalyticsConfig | None = None,
) -> Insights:
    """Derive the dashboard indicators from a record.

    Args:
        record: Current tracking snapshot.
        now:    Reference instant; naive values are treated as UTC.
        config: Thresholds; defaults to the loaded tracker config.

    Returns:
        Insights for ``now``.

    Raises:
        InvalidRecord: If the record's cycle length is not positive.  This is
            an upstream data problem and is never defaulted away.
    """
    cfg = config or get_tracker_config().analytics
    duration = record.cycle_duration_days

    try:
        cycle_day = cycle_day_for(record.last_period_start_date, duration, now)
    except InvalidRecord:
        logger.error("Cannot derive insights: invalid cycle duration %r", duration)
        raise

    sleep_hours = record.sleep_duration_hours
    well_rested = (
        record.sleep_quality is SleepQuality.good
        and sleep_hours is not None
        and sleep_hours >= cfg.well_rested_min_hours
    )

    return Insights(
        cycle_day=cycle_day,
        cycle_duration_days=duration,
        days_until_next_period=duration - cycle_day,
        fertile_window=cfg.fertile_window_start <= cycle_day <= cfg.fertile_window_end,
        pms_likely=(
            record.current_phase is CyclePhase.luteal
            and cycle_day > cfg.pms_after_cycle_day
        ),
        well_rested=well_rested,
        cycle_progress_pct=round(cycle_day / duration * 100, 1),
        phase=record.current_phase,
    )
