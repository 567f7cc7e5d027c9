"""
Rolling multi-day task calendar.

Merges, per day and in this order:
  1. today's alerts from the alert provider (day 0 only),
  2. stage transitions projected from each active tray,
  3. recurring-order deliveries due that weekday,
  4. plantings reverse-engineered from recurring orders.

``now`` is captured once per pass so every tray is judged against the same
instant. Bad records are skipped. A failing tray or order is logged and
left out, and a failing day is left partial rather than aborting the whole
calendar. Day-0 transitions are only held back in favour of alerts when a
provider actually answered.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Optional, Set

from alerts.providers.base import AlertProvider, AlertProviderError
from growcycle.combinators import resolve_crops, tray_display_name, tray_expected_yield
from growcycle.models import (
    Alert,
    CalendarTask,
    CropType,
    Customer,
    DaySchedule,
    FarmSnapshot,
    RecurringOrder,
    Stage,
    TaskKind,
    TransitionAction,
    Tray,
)
from scheduling.dates import add_days, day_name, parse_timestamp, plant_weekday, weekday_index
from scheduling.projection import time_to_next_stage
from scheduling.recurring_planner import trays_needed
from scheduling.stages import stage_duration_days

logger = logging.getLogger(__name__)

DEFAULT_WINDOW_DAYS = 7

# Soak is absent on purpose: its timing is sub-day and only surfaces through
# today's alerts.
_TRANSITIONS = {
    Stage.GERMINATION: TransitionAction.BLACKOUT,
    Stage.BLACKOUT: TransitionAction.UNCOVER,
    Stage.LIGHT: TransitionAction.HARVEST,
}

# Days past the stage end after which the alert service reports the tray as
# overdue; such transitions are not repeated as a task on day 0.
ALERT_GRACE_DAYS = {
    Stage.GERMINATION: 0.5,
    Stage.BLACKOUT: 0.5,
    Stage.LIGHT: 2.0,
}

# Alert types the provider uses for due or overdue trays
OVERDUE_ALERT_TYPES = ("urgent", "warning")


class CalendarAggregator:
    def __init__(self, alert_provider: Optional[AlertProvider] = None):
        self.alert_provider = alert_provider

    def build(
        self,
        trays: Iterable[Tray],
        crops: Iterable[CropType],
        recurring_orders: Iterable[RecurringOrder],
        customers: Iterable[Customer],
        now: Optional[datetime] = None,
        window_days: int = DEFAULT_WINDOW_DAYS,
    ) -> List[DaySchedule]:
        try:
            window_days = int(window_days)
        except (TypeError, ValueError):
            logger.warning(f"Invalid calendar window: {window_days!r}")
            return []
        if window_days <= 0:
            return []

        now = parse_timestamp(now) or datetime.now()
        trays = list(trays)
        crops = list(crops)
        orders = list(recurring_orders)
        customers = list(customers)

        crops_by_id = {c.id: c for c in crops}
        customers_by_id = {c.id: c for c in customers}
        active_trays = [t for t in trays if t.is_active]

        alerts = self._fetch_alerts(crops, trays, customers, orders)
        # No provider, or a failed one: nothing was surfaced, so nothing is suppressed
        alerted_tray_ids: Optional[Set[str]] = None
        if alerts is not None:
            alerted_tray_ids = {
                a.tray_id for a in alerts if a.tray_id and a.type in OVERDUE_ALERT_TYPES
            }
        alerts = alerts or []

        days: List[DaySchedule] = []
        for offset in range(window_days):
            day = add_days(now.date(), offset)
            weekday = weekday_index(day)
            tasks: List[CalendarTask] = []
            try:
                if offset == 0:
                    tasks.extend(self._alert_tasks(alerts))
                tasks.extend(
                    self._transition_tasks(
                        active_trays, crops_by_id, day, offset, now, alerted_tray_ids
                    )
                )
                tasks.extend(self._delivery_tasks(orders, crops_by_id, customers_by_id, weekday))
                tasks.extend(self._planting_tasks(orders, crops_by_id, customers_by_id, weekday))
            except Exception:
                logger.exception(f"Calendar day {day.isoformat()} failed, leaving it partial")
            days.append(DaySchedule(day=day, weekday=weekday, day_name=day_name(weekday), tasks=tasks))

        return days

    def _fetch_alerts(
        self,
        crops: List[CropType],
        trays: List[Tray],
        customers: List[Customer],
        orders: List[RecurringOrder],
    ) -> Optional[List[Alert]]:
        """Today's alerts, or None when there is no provider or it failed."""
        if self.alert_provider is None:
            return None
        try:
            snapshot = FarmSnapshot(
                crops=crops, trays=trays, customers=customers, recurring_orders=orders
            )
            return list(self.alert_provider.get_alerts(snapshot))
        except AlertProviderError as e:
            logger.warning(f"No alerts for today: {e}")
            return None
        except Exception:
            logger.exception("Alert provider failed, rendering calendar without alerts")
            return None

    def _alert_tasks(self, alerts: List[Alert]) -> List[CalendarTask]:
        return [
            CalendarTask(
                kind=TaskKind.ALERT,
                title=alert.title,
                subtitle=alert.message,
                severity=alert.type,
                tray_id=alert.tray_id,
            )
            for alert in alerts
        ]

    def _transition_tasks(
        self,
        trays: List[Tray],
        crops_by_id: Dict[str, CropType],
        day: date,
        offset: int,
        now: datetime,
        alerted_tray_ids: Optional[Set[str]],
    ) -> List[CalendarTask]:
        tasks: List[CalendarTask] = []
        for tray in trays:
            try:
                task = self._transition_task(tray, crops_by_id, day, offset, now, alerted_tray_ids)
            except Exception:
                logger.exception(f"Skipping tray {tray.id} on {day.isoformat()}")
                continue
            if task is not None:
                tasks.append(task)
        return tasks

    def _transition_task(
        self,
        tray: Tray,
        crops_by_id: Dict[str, CropType],
        day: date,
        offset: int,
        now: datetime,
        alerted_tray_ids: Optional[Set[str]],
    ) -> Optional[CalendarTask]:
        action = _TRANSITIONS.get(tray.stage)
        if action is None:
            return None

        crop, crop2 = resolve_crops(tray, crops_by_id)
        if crop is None:
            return None

        start = parse_timestamp(tray.start_date)
        if start is None:
            return None

        duration_days = stage_duration_days(tray.stage, crop)
        if (start + timedelta(days=duration_days)).date() != day:
            return None

        if offset == 0 and self._already_alerted(tray, start, duration_days, now, alerted_tray_ids):
            return None

        name = tray_display_name(crop, crop2)
        common = dict(
            kind=TaskKind.STAGE_TRANSITION,
            action=action,
            tray_id=tray.id,
            crop_id=crop.id,
            countdown=time_to_next_stage(tray, crop, now),
        )

        if action == TransitionAction.HARVEST:
            return CalendarTask(
                title=f"Harvest {name}",
                subtitle=tray.location,
                expected_yield_grams=tray_expected_yield(crop, crop2),
                **common,
            )

        verb = "Blackout" if action == TransitionAction.BLACKOUT else "Uncover"
        title = f"{verb} {name} ({tray.location})" if tray.location else f"{verb} {name}"
        return CalendarTask(title=title, **common)

    @staticmethod
    def _already_alerted(
        tray: Tray,
        start: datetime,
        duration_days: int,
        now: datetime,
        alerted_tray_ids: Optional[Set[str]],
    ) -> bool:
        if alerted_tray_ids is None:
            return False
        if tray.id in alerted_tray_ids:
            return True
        elapsed_days = (now - start).total_seconds() / 86400
        return elapsed_days > duration_days + ALERT_GRACE_DAYS[tray.stage]

    def _order_tasks(self, orders: List[RecurringOrder], build_task) -> List[CalendarTask]:
        tasks: List[CalendarTask] = []
        for order in orders:
            try:
                task = build_task(order)
            except Exception:
                logger.exception(f"Skipping recurring order {order.id}")
                continue
            if task is not None:
                tasks.append(task)
        return tasks

    def _delivery_tasks(
        self,
        orders: List[RecurringOrder],
        crops_by_id: Dict[str, CropType],
        customers_by_id: Dict[str, Customer],
        weekday: int,
    ) -> List[CalendarTask]:
        def delivery(order: RecurringOrder) -> Optional[CalendarTask]:
            if order.due_day_of_week != weekday:
                return None
            crop = crops_by_id.get(order.crop_id)
            if crop is None:
                return None
            customer = customers_by_id.get(order.customer_id)
            customer_name = customer.name if customer else "Unknown"
            return CalendarTask(
                kind=TaskKind.ORDER_DELIVERY,
                title=f"Deliver {crop.name}",
                subtitle=f"{customer_name} ({order.amount:g}g)",
                crop_id=crop.id,
                customer_id=order.customer_id,
                order_id=order.id,
            )

        return self._order_tasks(orders, delivery)

    def _planting_tasks(
        self,
        orders: List[RecurringOrder],
        crops_by_id: Dict[str, CropType],
        customers_by_id: Dict[str, Customer],
        weekday: int,
    ) -> List[CalendarTask]:
        def planting(order: RecurringOrder) -> Optional[CalendarTask]:
            crop = crops_by_id.get(order.crop_id)
            if crop is None:
                return None
            if plant_weekday(order.due_day_of_week, crop.total_growing_days) != weekday:
                return None
            count = trays_needed(order.amount, crop)
            customer = customers_by_id.get(order.customer_id)
            return CalendarTask(
                kind=TaskKind.REVERSE_PLANT,
                title=f"Plant {count}x {crop.name}",
                subtitle=f"For {customer.name if customer else 'Order'}",
                crop_id=crop.id,
                customer_id=order.customer_id,
                order_id=order.id,
                trays_to_plant=count,
            )

        return self._order_tasks(orders, planting)


def build_calendar(
    active_trays: Iterable[Tray],
    crops: Iterable[CropType],
    recurring_orders: Iterable[RecurringOrder],
    customers: Iterable[Customer],
    now: Optional[datetime] = None,
    window_days: int = DEFAULT_WINDOW_DAYS,
    alert_provider: Optional[AlertProvider] = None,
) -> List[DaySchedule]:
    """Per-day task lists for ``window_days`` days starting today."""
    return CalendarAggregator(alert_provider).build(
        active_trays, crops, recurring_orders, customers, now=now, window_days=window_days
    )
