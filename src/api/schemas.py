from __future__ import annotations
from datetime import date, datetime
from typing import Any, List, Optional

from pydantic import BaseModel, Field

from growcycle.models import Alert, CropType, Customer, RecurringOrder, Tray


class EventPlanIn(BaseModel):
    crop: CropType
    # raw on purpose: an unparseable date answers {"plan": null}, not 422
    target_date: Any = None


class RecurringPlanIn(BaseModel):
    crop: CropType
    weekly_target_grams: Any = None
    harvest_weekday: Optional[int] = None
    today: Optional[date] = None


class CalendarIn(BaseModel):
    crops: List[CropType] = Field(default_factory=list)
    trays: List[Tray] = Field(default_factory=list)
    customers: List[Customer] = Field(default_factory=list)
    # None -> use the stored recurring orders
    recurring_orders: Optional[List[RecurringOrder]] = None
    # None -> ask the configured alert provider
    alerts: Optional[List[Alert]] = None
    window_days: Optional[int] = None
    now: Optional[datetime] = None


class TraysIn(BaseModel):
    crops: List[CropType] = Field(default_factory=list)
    trays: List[Tray] = Field(default_factory=list)
    now: Optional[datetime] = None
    horizon_hours: float = Field(24, gt=0)


class TrayActionIn(BaseModel):
    tray: Tray
    now: Optional[datetime] = None
    yield_grams: Optional[float] = Field(None, gt=0)


class OrderIn(BaseModel):
    customer_id: str
    crop_id: str
    amount: float = Field(..., gt=0)
    due_day_of_week: int = Field(..., ge=0, le=6)
