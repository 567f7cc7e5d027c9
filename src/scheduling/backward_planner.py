from __future__ import annotations

import logging
from typing import Any, Optional

from growcycle.models import CropType, EventPlan
from scheduling.dates import add_days, parse_calendar_date

logger = logging.getLogger(__name__)


def plan_event(crop: Optional[CropType], target_harvest_date: Any) -> Optional[EventPlan]:
    """Work back from a desired harvest date to the day the tray must be planted.

    Whole calendar days only; soak is left out because it is hour-granular
    and usually finishes the same day. Independent of anything growing.
    Returns None when the crop is missing or the date does not parse.
    """
    if crop is None or target_harvest_date is None:
        return None

    harvest = parse_calendar_date(target_harvest_date)
    if harvest is None:
        logger.warning(f"Event planner: unparseable target date {target_harvest_date!r}")
        return None

    total_days = crop.total_growing_days
    try:
        plant = add_days(harvest, -total_days)
    except OverflowError:
        logger.warning(f"Event planner: {harvest} minus {total_days} days is out of range")
        return None
    germination_end = add_days(plant, crop.germination_days)
    blackout_end = add_days(germination_end, crop.blackout_days)

    return EventPlan(
        crop_id=crop.id,
        plant_date=plant,
        germination_end_date=germination_end,
        blackout_end_date=blackout_end,
        harvest_date=harvest,
        total_growing_days=total_days,
    )
