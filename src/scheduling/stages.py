from __future__ import annotations

from typing import Optional

from growcycle.models import CropType, Stage

# Fixed growing order. Compost sits outside it and is reachable from any
# active stage.
STAGE_FLOW = (
    Stage.SEED,
    Stage.SOAK,
    Stage.GERMINATION,
    Stage.BLACKOUT,
    Stage.LIGHT,
    Stage.HARVEST_READY,
    Stage.HARVESTED,
)

TERMINAL_STAGES = frozenset({Stage.HARVESTED, Stage.COMPOST})
FINISHED_STAGES = frozenset({Stage.HARVEST_READY, Stage.HARVESTED})


def stage_duration_hours(stage: Stage, crop: CropType) -> float:
    """How long ``stage`` lasts for ``crop``, in hours.

    Seed is an instant hand-off and the finished stages have no next
    duration, so all three report 0.
    """
    if not isinstance(stage, Stage):
        raise ValueError(f"Unknown stage: {stage!r}")

    if stage == Stage.SOAK:
        return float(crop.soak_hours)
    if stage == Stage.GERMINATION:
        return crop.germination_days * 24.0
    if stage == Stage.BLACKOUT:
        return crop.blackout_days * 24.0
    if stage == Stage.LIGHT:
        return crop.light_days * 24.0
    return 0.0


def stage_duration_days(stage: Stage, crop: CropType) -> int:
    """Whole-day duration of the day-granular stages; 0 for the rest."""
    if stage == Stage.GERMINATION:
        return crop.germination_days
    if stage == Stage.BLACKOUT:
        return crop.blackout_days
    if stage == Stage.LIGHT:
        return crop.light_days
    return 0


def next_stage(stage: Stage) -> Optional[Stage]:
    if stage in TERMINAL_STAGES:
        return None
    idx = STAGE_FLOW.index(stage)
    return STAGE_FLOW[idx + 1]


def stages_until_harvest(stage: Stage) -> tuple[Stage, ...]:
    """``stage`` and every stage after it, stopping before Harvest Ready."""
    if stage not in STAGE_FLOW or stage in FINISHED_STAGES:
        return ()
    idx = STAGE_FLOW.index(stage)
    end = STAGE_FLOW.index(Stage.HARVEST_READY)
    return STAGE_FLOW[idx:end]
