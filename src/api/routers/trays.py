import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException

from api.dependencies import get_preferences_store
from api.metrics import REQUESTS_TOTAL
from api.schemas import TrayActionIn, TraysIn
from growcycle.combinators import production_value, resolve_crops, tray_expected_yield, tray_seed_cost
from scheduling.lifecycle import StageTransitionError, advance_tray, compost_tray, harvest_tray
from scheduling.projection import target_harvest_date, time_to_next_stage, upcoming_transitions
from storage.preferences_store import PreferencesStore

router = APIRouter(prefix="/trays")
logger = logging.getLogger(__name__)


@router.post("/projection")
async def projection(payload: TraysIn) -> dict:
    """Countdown, projected harvest, yield and seed cost per tray. Trays with an unknown crop are skipped."""
    now = payload.now or datetime.now()
    crops_by_id = {c.id: c for c in payload.crops}

    out = []
    for tray in payload.trays:
        crop, crop2 = resolve_crops(tray, crops_by_id)
        if crop is None:
            logger.warning(f"Tray {tray.id} references unknown crop {tray.crop_type_id}")
            continue
        out.append(
            {
                "tray_id": tray.id,
                "stage": tray.stage.value,
                "countdown": time_to_next_stage(tray, crop, now).model_dump(),
                "target_harvest_date": target_harvest_date(tray, crop, now).isoformat(),
                "expected_yield_grams": tray_expected_yield(crop, crop2),
                "seed_cost": tray_seed_cost(crop, crop2),
            }
        )

    REQUESTS_TOTAL.labels(endpoint="/trays/projection", status="ok").inc()
    return {"trays": out}


@router.post("/upcoming")
async def upcoming(payload: TraysIn) -> dict:
    items = upcoming_transitions(payload.trays, payload.crops, payload.now, payload.horizon_hours)
    REQUESTS_TOTAL.labels(endpoint="/trays/upcoming", status="ok").inc()
    return {"upcoming": [u.model_dump(mode="json") for u in items]}


@router.post("/value")
async def value(
    payload: TraysIn,
    prefs_store: PreferencesStore = Depends(get_preferences_store),
) -> dict:
    prefs = prefs_store.load()
    result = production_value(payload.trays, payload.crops, prefs.market_price_per_100g)
    REQUESTS_TOTAL.labels(endpoint="/trays/value", status="ok").inc()
    return result.model_dump()


def _apply(endpoint: str, action, *args) -> dict:
    try:
        tray = action(*args)
    except StageTransitionError as e:
        REQUESTS_TOTAL.labels(endpoint=endpoint, status="rejected").inc()
        raise HTTPException(status_code=409, detail=str(e))
    REQUESTS_TOTAL.labels(endpoint=endpoint, status="ok").inc()
    return {"tray": tray.model_dump(mode="json")}


@router.post("/advance")
async def advance(payload: TrayActionIn) -> dict:
    return _apply("/trays/advance", advance_tray, payload.tray, payload.now)


@router.post("/compost")
async def compost(payload: TrayActionIn) -> dict:
    return _apply("/trays/compost", compost_tray, payload.tray, payload.now)


@router.post("/harvest")
async def harvest(payload: TrayActionIn) -> dict:
    return _apply("/trays/harvest", harvest_tray, payload.tray, payload.yield_grams, payload.now)
