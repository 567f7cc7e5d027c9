"""
Time projection for live trays.

Everything is measured from ``Tray.start_date``, the moment the *current*
stage began. Correcting that timestamp re-bases both the countdown and the
harvest projection from the corrected point.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Iterable, List, Optional

from growcycle.combinators import resolve_crops, tray_display_name
from growcycle.models import CropType, Stage, StageCountdown, Tray, UpcomingTransition
from scheduling.dates import parse_timestamp
from scheduling.stages import TERMINAL_STAGES, stage_duration_hours, stages_until_harvest

logger = logging.getLogger(__name__)

_ACTION_TEMPLATES = {
    Stage.SOAK: "Move {name} to Germination",
    Stage.GERMINATION: "Blackout {name}",
    Stage.BLACKOUT: "Uncover {name}",
    Stage.LIGHT: "Harvest {name}",
}


def _format_remaining(seconds: float) -> str:
    total_minutes = int(seconds // 60)
    days, rest = divmod(total_minutes, 24 * 60)
    hours, minutes = divmod(rest, 60)

    if days > 0:
        return f"{days}d {hours}h"
    if hours > 0:
        return f"{hours}h {minutes}m"
    if minutes > 0:
        return f"{minutes}m"
    return "now"


def time_to_next_stage(tray: Tray, crop: CropType, now: Optional[datetime] = None) -> StageCountdown:
    """Countdown until ``tray`` is due to leave its current stage.

    Never raises on bad data: an unparseable start yields ``is_valid=False``.
    A zero-length stage is overdue the moment ``now`` passes its start.
    """
    start = parse_timestamp(tray.start_date)
    if start is None:
        return StageCountdown(text="Invalid date", is_valid=False)

    if tray.stage == Stage.HARVEST_READY:
        return StageCountdown(text="Harvest now", hours_remaining=0.0)
    if tray.stage in TERMINAL_STAGES:
        return StageCountdown(text="Complete", hours_remaining=0.0)

    now = parse_timestamp(now) or datetime.now()
    try:
        target = start + timedelta(hours=stage_duration_hours(tray.stage, crop))
    except (OverflowError, ValueError):
        logger.warning(f"Tray {tray.id}: stage end for {crop.id} is out of range")
        return StageCountdown(text="Invalid date", is_valid=False)
    diff = (target - now).total_seconds()
    hours_remaining = diff / 3600

    if diff < 0:
        overdue_hours = int(-diff // 3600)
        text = f"Overdue by {overdue_hours}h" if overdue_hours >= 1 else "Overdue"
        return StageCountdown(text=text, is_overdue=True, hours_remaining=hours_remaining)

    return StageCountdown(text=_format_remaining(diff), hours_remaining=hours_remaining)


def target_harvest_date(tray: Tray, crop: CropType, now: Optional[datetime] = None) -> datetime:
    """Projected Harvest Ready moment for ``tray``.

    Once a tray is finished the date is pinned to its last update. Otherwise
    it is the current stage's start plus the rest of the growing flow. Falls
    back to the last update, then to ``now``, when timestamps are unusable.
    """
    now = parse_timestamp(now) or datetime.now()
    updated = parse_timestamp(tray.updated_at)

    if tray.stage in (Stage.HARVEST_READY, Stage.HARVESTED, Stage.COMPOST):
        return updated or now

    start = parse_timestamp(tray.start_date)
    if start is None:
        return updated or now

    hours = sum(stage_duration_hours(stage, crop) for stage in stages_until_harvest(tray.stage))
    try:
        return start + timedelta(hours=hours)
    except (OverflowError, ValueError):
        logger.warning(f"Tray {tray.id}: harvest projection for {crop.id} is out of range")
        return updated or now


def upcoming_transitions(
    trays: Iterable[Tray],
    crops: Iterable[CropType],
    now: Optional[datetime] = None,
    horizon_hours: float = 24,
) -> List[UpcomingTransition]:
    """Active trays whose next stage change falls within ``horizon_hours``, soonest first."""
    now = parse_timestamp(now) or datetime.now()
    crops_by_id = {c.id: c for c in crops}
    upcoming: List[UpcomingTransition] = []

    for tray in trays:
        template = _ACTION_TEMPLATES.get(tray.stage)
        if template is None:
            continue
        crop, crop2 = resolve_crops(tray, crops_by_id)
        if crop is None:
            continue

        countdown = time_to_next_stage(tray, crop, now)
        if not countdown.is_valid or countdown.is_overdue:
            continue
        if not 0 < countdown.hours_remaining <= horizon_hours:
            continue

        upcoming.append(
            UpcomingTransition(
                tray_id=tray.id,
                stage=tray.stage,
                action=template.format(name=tray_display_name(crop, crop2)),
                countdown=countdown,
            )
        )

    upcoming.sort(key=lambda u: u.countdown.hours_remaining)
    return upcoming
