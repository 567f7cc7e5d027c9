import logging
import time
from typing import Optional

from fastapi import APIRouter, Depends

from alerts.providers.base import AlertProvider
from alerts.providers.static_provider import StaticAlertProvider
from api.dependencies import get_alert_provider, get_order_store, get_preferences_store
from api.metrics import CALENDAR_TASKS_TOTAL, REQUESTS_TOTAL, REQUEST_LATENCY_SECONDS
from api.schemas import CalendarIn
from scheduling.calendar_aggregator import CalendarAggregator
from storage.order_store import OrderStore
from storage.preferences_store import PreferencesStore

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/calendar")
async def calendar(
    payload: CalendarIn,
    order_store: OrderStore = Depends(get_order_store),
    prefs_store: PreferencesStore = Depends(get_preferences_store),
    alert_provider: Optional[AlertProvider] = Depends(get_alert_provider),
) -> dict:
    """
    Rolling task calendar. The caller supplies the current records; stored
    recurring orders and the configured alert provider fill in whatever the
    body leaves out.
    """
    start = time.time()

    orders = payload.recurring_orders
    if orders is None:
        orders = order_store.load()

    if payload.alerts is not None:
        alert_provider = StaticAlertProvider(payload.alerts)

    window_days = payload.window_days
    if window_days is None:
        window_days = prefs_store.load().calendar_window_days

    aggregator = CalendarAggregator(alert_provider)
    days = aggregator.build(
        payload.trays,
        payload.crops,
        orders,
        payload.customers,
        now=payload.now,
        window_days=window_days,
    )

    task_count = 0
    for day in days:
        for task in day.tasks:
            CALENDAR_TASKS_TOTAL.labels(kind=task.kind.value).inc()
            task_count += 1
    logger.info(f"Calendar built: {len(days)} days, {task_count} tasks")

    REQUESTS_TOTAL.labels(endpoint="/calendar", status="ok").inc()
    REQUEST_LATENCY_SECONDS.labels(endpoint="/calendar").observe(time.time() - start)

    return {
        "window_days": len(days),
        "days": [d.model_dump(mode="json") for d in days],
    }
