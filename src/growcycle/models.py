from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Literal, Optional, List, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Stage(str, Enum):
    SEED = "Seed"
    SOAK = "Soak"
    GERMINATION = "Germination"
    BLACKOUT = "Blackout"
    LIGHT = "Light"
    HARVEST_READY = "Harvest Ready"
    HARVESTED = "Harvested"
    COMPOST = "Compost"


# Raw timestamp as handed over by the record store. Kept unparsed so a bad
# value degrades inside the engine instead of failing model construction.
Timestamp = Union[datetime, str]


class CropType(BaseModel):
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)

    soak_hours: float = Field(0, ge=0)
    germination_days: int = Field(0, ge=0)
    blackout_days: int = Field(0, ge=0)
    light_days: int = Field(0, ge=0)

    estimated_yield_per_tray: float = Field(0, ge=0)

    seeding_rate: Optional[float] = Field(None, ge=0)
    price_small_pack: Optional[float] = Field(None, ge=0)
    price_large_pack: Optional[float] = Field(None, ge=0)
    pkg_weight_small: float = Field(500, gt=0)
    pkg_weight_large: float = Field(1000, gt=0)
    revenue_per_100g: Optional[float] = Field(None, ge=0)
    price_per_tray: Optional[float] = Field(None, ge=0)

    @property
    def total_growing_days(self) -> int:
        """Germination + blackout + light. Soak is hour-granular and left out."""
        return self.germination_days + self.blackout_days + self.light_days


class Tray(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    id: str = Field(..., min_length=1)
    crop_type_id: str
    # half-half tray: second variety sharing the same physical tray
    crop_type_id_2: Optional[str] = None

    stage: Stage = Stage.SEED
    start_date: Optional[Timestamp] = None
    updated_at: Optional[Timestamp] = None
    planted_at: Optional[Timestamp] = None

    location: str = ""
    notes: str = ""
    yield_grams: Optional[float] = Field(None, ge=0)

    @property
    def is_active(self) -> bool:
        return self.stage not in (Stage.HARVESTED, Stage.COMPOST)


class Customer(BaseModel):
    id: str
    name: str = Field(..., min_length=1)
    type: Literal["Restaurant", "Wholesaler", "Individual"] = "Individual"
    contact: str = ""
    email: str = ""
    notes: str = ""


class RecurringOrder(BaseModel):
    id: str
    customer_id: str
    crop_id: str
    amount: float = Field(..., gt=0, allow_inf_nan=False)
    # 0 = Sunday ... 6 = Saturday
    due_day_of_week: int = Field(..., ge=0, le=6)


AlertType = Literal["urgent", "warning", "info", "routine"]


class Alert(BaseModel):
    id: Optional[str] = None
    type: AlertType = "info"
    title: str
    message: str = ""
    tray_id: Optional[str] = None


class FarmSnapshot(BaseModel):
    """Read-only view of the record store handed to an alert provider."""

    crops: List[CropType] = Field(default_factory=list)
    trays: List[Tray] = Field(default_factory=list)
    customers: List[Customer] = Field(default_factory=list)
    recurring_orders: List[RecurringOrder] = Field(default_factory=list)


class PlannerPreferences(BaseModel):
    calendar_window_days: int = Field(7, ge=1, le=60)
    default_harvest_weekday: int = Field(5, ge=0, le=6)

    # dashboard valuation of standing trays
    market_price_per_100g: float = Field(7.00, ge=0)
    # weekly planner revenue when a crop has none configured
    default_revenue_per_100g: float = Field(6.00, ge=0)


# ---------------------------------------------------------------------------
# Engine outputs
# ---------------------------------------------------------------------------


class StageCountdown(BaseModel):
    text: str
    is_overdue: bool = False
    hours_remaining: Optional[float] = None
    is_valid: bool = True


class EventPlan(BaseModel):
    crop_id: str
    plant_date: date
    germination_end_date: date
    blackout_end_date: date
    harvest_date: date
    total_growing_days: int


class WeeklyTimeline(BaseModel):
    plant: int
    blackout: int
    light: int
    harvest: int

    plant_name: str
    blackout_name: str
    light_name: str
    harvest_name: str


class PlantingDate(BaseModel):
    plant_date: date
    harvest_date: date


class RecurringSchedule(BaseModel):
    crop_id: str
    weekly_target_grams: float
    trays_needed: int
    yield_per_tray: float
    total_growing_days: int

    plant_weekday: int
    harvest_weekday: int
    plant_day_name: str
    harvest_day_name: str
    timeline: WeeklyTimeline

    weekly_seed_grams: float
    weekly_seed_cost: float
    weekly_revenue: float
    weekly_profit: float

    light_batches: int
    shelf_space: int

    upcoming: List[PlantingDate] = Field(default_factory=list)


class TaskKind(str, Enum):
    ALERT = "alert"
    STAGE_TRANSITION = "stage_transition"
    ORDER_DELIVERY = "order_delivery"
    REVERSE_PLANT = "reverse_plant"


class TransitionAction(str, Enum):
    BLACKOUT = "blackout"
    UNCOVER = "uncover"
    HARVEST = "harvest"


class CalendarTask(BaseModel):
    kind: TaskKind
    title: str
    subtitle: str = ""

    tray_id: Optional[str] = None
    crop_id: Optional[str] = None
    customer_id: Optional[str] = None
    order_id: Optional[str] = None

    # alerts only
    severity: Optional[AlertType] = None
    # stage transitions only
    action: Optional[TransitionAction] = None
    countdown: Optional[StageCountdown] = None
    # harvest transitions only
    expected_yield_grams: Optional[float] = None
    # reverse plantings only
    trays_to_plant: Optional[int] = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        v2 = v.strip()
        if not v2:
            raise ValueError("title must not be blank")
        return v2


class DaySchedule(BaseModel):
    day: date
    weekday: int
    day_name: str
    tasks: List[CalendarTask] = Field(default_factory=list)


class UpcomingTransition(BaseModel):
    tray_id: str
    stage: Stage
    action: str
    countdown: StageCountdown


class ProductionValue(BaseModel):
    ready_value: float = 0.0
    maturing_value: float = 0.0
    total_value: float = 0.0
    ready_trays: int = 0
    maturing_trays: int = 0
