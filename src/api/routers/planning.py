import logging
import time

from fastapi import APIRouter, Depends

from api.dependencies import get_preferences_store
from api.metrics import PLANS_TOTAL, REQUESTS_TOTAL, REQUEST_LATENCY_SECONDS
from api.schemas import EventPlanIn, RecurringPlanIn
from scheduling.backward_planner import plan_event
from scheduling.recurring_planner import plan_recurring
from storage.preferences_store import PreferencesStore

router = APIRouter(prefix="/plan")
logger = logging.getLogger(__name__)


@router.post("/event")
async def event_plan(payload: EventPlanIn) -> dict:
    """Planting schedule that lands a harvest on ``target_date``."""
    start = time.time()

    plan = plan_event(payload.crop, payload.target_date)
    outcome = "planned" if plan is not None else "empty"
    logger.info(f"Event plan for {payload.crop.name} on {payload.target_date!r}: {outcome}")

    PLANS_TOTAL.labels(planner="event", outcome=outcome).inc()
    REQUESTS_TOTAL.labels(endpoint="/plan/event", status=outcome).inc()
    REQUEST_LATENCY_SECONDS.labels(endpoint="/plan/event").observe(time.time() - start)

    return {"plan": plan.model_dump(mode="json") if plan else None}


@router.post("/recurring")
async def recurring_plan(
    payload: RecurringPlanIn,
    prefs_store: PreferencesStore = Depends(get_preferences_store),
) -> dict:
    """Weekly routine for a standing yield target."""
    start = time.time()
    prefs = prefs_store.load()

    harvest_weekday = payload.harvest_weekday
    if harvest_weekday is None:
        harvest_weekday = prefs.default_harvest_weekday

    schedule = plan_recurring(
        payload.crop,
        payload.weekly_target_grams,
        harvest_weekday,
        today=payload.today,
        default_revenue_per_100g=prefs.default_revenue_per_100g,
    )
    outcome = "planned" if schedule is not None else "empty"

    PLANS_TOTAL.labels(planner="recurring", outcome=outcome).inc()
    REQUESTS_TOTAL.labels(endpoint="/plan/recurring", status=outcome).inc()
    REQUEST_LATENCY_SECONDS.labels(endpoint="/plan/recurring").observe(time.time() - start)

    return {"schedule": schedule.model_dump(mode="json") if schedule else None}
