from datetime import datetime

import pytest

from growcycle.models import CropType, Customer, RecurringOrder, Stage, Tray

# Wednesday
NOW = datetime(2026, 1, 7, 9, 0)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def pea():
    return CropType(
        id="pea",
        name="Pea Shoots",
        soak_hours=8,
        germination_days=3,
        blackout_days=3,
        light_days=7,
        estimated_yield_per_tray=250,
        seeding_rate=200,
        price_large_pack=10.0,
        revenue_per_100g=5.0,
    )


@pytest.fixture
def radish():
    return CropType(
        id="radish",
        name="Radish",
        germination_days=2,
        blackout_days=2,
        light_days=5,
        estimated_yield_per_tray=150,
        seeding_rate=30,
        price_small_pack=6.0,
    )


@pytest.fixture
def crops(pea, radish):
    return [pea, radish]


@pytest.fixture
def customers():
    return [Customer(id="c1", name="Cafe Verde", type="Restaurant")]


@pytest.fixture
def orders():
    return [
        RecurringOrder(id="o1", customer_id="c1", crop_id="pea", amount=1000, due_day_of_week=5),
        RecurringOrder(id="o2", customer_id="gone", crop_id="radish", amount=300, due_day_of_week=1),
        RecurringOrder(id="o3", customer_id="c1", crop_id="missing", amount=500, due_day_of_week=3),
    ]


@pytest.fixture
def make_tray():
    def _make(stage: Stage, start, crop_id: str = "pea", **kwargs):
        kwargs.setdefault("id", f"t-{stage.value.lower().replace(' ', '-')}")
        kwargs.setdefault("location", "Shelf A")
        kwargs.setdefault("updated_at", start)
        return Tray(crop_type_id=crop_id, stage=stage, start_date=start, **kwargs)
    return _make
