from __future__ import annotations

import logging
import math
from datetime import date, datetime
from typing import Any, Optional

from growcycle.combinators import seed_cost_for_grams
from growcycle.models import CropType, PlantingDate, RecurringSchedule, WeeklyTimeline
from scheduling.dates import (
    add_days,
    day_name,
    next_weekday_on_or_after,
    parse_calendar_date,
    parse_positive_number,
    plant_weekday,
    shift_weekday,
)

logger = logging.getLogger(__name__)

UPCOMING_PLANTINGS = 4
DEFAULT_REVENUE_PER_100G = 6.00


def trays_needed(grams: float, crop: CropType) -> int:
    """Trays to sow for ``grams``; yield-per-tray is floored at 1 g."""
    return math.ceil(grams / max(crop.estimated_yield_per_tray or 0, 1))


def _parse_weekday(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    try:
        weekday = int(value)
    except (TypeError, ValueError, OverflowError):
        return None
    return weekday if 0 <= weekday <= 6 else None


def plan_recurring(
    crop: Optional[CropType],
    weekly_target_grams: Any,
    harvest_weekday: Any,
    today: Optional[date] = None,
    default_revenue_per_100g: float = DEFAULT_REVENUE_PER_100G,
) -> Optional[RecurringSchedule]:
    """Size a weekly routine that harvests ``weekly_target_grams`` every ``harvest_weekday``.

    Returns None for a missing crop, a non-positive or unparseable target,
    or a weekday outside 0 (Sunday) .. 6 (Saturday).
    """
    if crop is None:
        return None

    target = parse_positive_number(weekly_target_grams)
    if target is None:
        return None

    harvest_wd = _parse_weekday(harvest_weekday)
    if harvest_wd is None:
        return None

    today = parse_calendar_date(today) or datetime.now().date()

    trays = trays_needed(target, crop)
    total_days = crop.total_growing_days

    plant_wd = plant_weekday(harvest_wd, total_days)
    blackout_wd = shift_weekday(plant_wd, crop.germination_days % 7)
    light_wd = shift_weekday(blackout_wd, crop.blackout_days % 7)

    seed_grams = trays * (crop.seeding_rate or 0)
    seed_cost = seed_cost_for_grams(crop, seed_grams)
    revenue = (target / 100) * (crop.revenue_per_100g or default_revenue_per_100g)

    # Trays under lights at once when the routine runs indefinitely
    light_batches = math.ceil(crop.light_days / 7)
    shelf_space = light_batches * trays

    upcoming = []
    try:
        first = next_weekday_on_or_after(today, plant_wd)
        for i in range(UPCOMING_PLANTINGS):
            planting = add_days(first, 7 * i)
            upcoming.append(PlantingDate(plant_date=planting, harvest_date=add_days(planting, total_days)))
    except OverflowError:
        logger.warning(f"Recurring planner: plantings of {crop.id} from {today} run out of range")
        return None

    return RecurringSchedule(
        crop_id=crop.id,
        weekly_target_grams=target,
        trays_needed=trays,
        yield_per_tray=max(crop.estimated_yield_per_tray or 0, 1),
        total_growing_days=total_days,
        plant_weekday=plant_wd,
        harvest_weekday=harvest_wd,
        plant_day_name=day_name(plant_wd),
        harvest_day_name=day_name(harvest_wd),
        timeline=WeeklyTimeline(
            plant=plant_wd,
            blackout=blackout_wd,
            light=light_wd,
            harvest=harvest_wd,
            plant_name=day_name(plant_wd),
            blackout_name=day_name(blackout_wd),
            light_name=day_name(light_wd),
            harvest_name=day_name(harvest_wd),
        ),
        weekly_seed_grams=seed_grams,
        weekly_seed_cost=seed_cost,
        weekly_revenue=revenue,
        weekly_profit=revenue - seed_cost,
        light_batches=light_batches,
        shelf_space=shelf_space,
        upcoming=upcoming,
    )
