"""
Tray stage state machine.

A tray only remembers when its *current* stage began. Every transition
overwrites ``start_date`` with the transition time; earlier stage timestamps
are not kept. ``planted_at`` is set once and never touched here.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from growcycle.models import Stage, Tray
from scheduling.stages import TERMINAL_STAGES, next_stage

logger = logging.getLogger(__name__)


class StageTransitionError(ValueError):
    """Raised when a tray is asked to move somewhere the stage flow forbids."""


def can_transition(current: Stage, target: Stage) -> bool:
    if current in TERMINAL_STAGES:
        return False
    if target == Stage.COMPOST:
        return True
    return next_stage(current) == target


def transition_tray(tray: Tray, target: Stage, now: Optional[datetime] = None) -> Tray:
    """Return a copy of ``tray`` moved to ``target`` and re-anchored at ``now``."""
    if not can_transition(tray.stage, target):
        raise StageTransitionError(
            f"Tray {tray.id} cannot move from {tray.stage.value} to {target.value}"
        )

    now = now or datetime.now()
    logger.info(f"Tray {tray.id}: {tray.stage.value} -> {target.value}")
    return tray.model_copy(
        update={
            "stage": target,
            "start_date": now.isoformat(),
            "updated_at": now.isoformat(),
        }
    )


def advance_tray(tray: Tray, now: Optional[datetime] = None) -> Tray:
    target = next_stage(tray.stage)
    if target is None:
        raise StageTransitionError(f"Tray {tray.id} is already {tray.stage.value}")
    return transition_tray(tray, target, now)


def compost_tray(tray: Tray, now: Optional[datetime] = None) -> Tray:
    return transition_tray(tray, Stage.COMPOST, now)


def harvest_tray(tray: Tray, yield_grams: Optional[float] = None, now: Optional[datetime] = None) -> Tray:
    """Mark a Harvest Ready tray as harvested, recording the weighed yield if given."""
    if tray.stage != Stage.HARVEST_READY:
        raise StageTransitionError(
            f"Tray {tray.id} is {tray.stage.value}, only Harvest Ready trays can be harvested"
        )
    harvested = transition_tray(tray, Stage.HARVESTED, now)
    if yield_grams is not None and yield_grams > 0:
        harvested = harvested.model_copy(update={"yield_grams": float(yield_grams)})
    return harvested
