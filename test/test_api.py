import pytest
from fastapi.testclient import TestClient

from api import dependencies
from api.main import app
from storage.order_store import OrderStore
from storage.preferences_store import PreferencesStore

PEA = {
    "id": "pea",
    "name": "Pea Shoots",
    "germination_days": 3,
    "blackout_days": 3,
    "light_days": 7,
    "estimated_yield_per_tray": 250,
    "seeding_rate": 200,
    "price_large_pack": 10.0,
}


@pytest.fixture
def client(tmp_path):
    orders = OrderStore(str(tmp_path / "orders.json"))
    prefs = PreferencesStore(str(tmp_path / "prefs.json"))
    app.dependency_overrides[dependencies.get_order_store] = lambda: orders
    app.dependency_overrides[dependencies.get_preferences_store] = lambda: prefs
    app.dependency_overrides[dependencies.get_alert_provider] = lambda: None
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "healthy"
    assert body["recurring_orders"] == 0


def test_event_plan(client):
    r = client.post("/plan/event", json={"crop": PEA, "target_date": "2026-01-09"})
    assert r.status_code == 200
    plan = r.json()["plan"]
    assert plan["plant_date"] == "2025-12-27"
    assert plan["germination_end_date"] == "2025-12-30"
    assert plan["blackout_end_date"] == "2026-01-02"


def test_event_plan_bad_date_is_null(client):
    r = client.post("/plan/event", json={"crop": PEA, "target_date": "not-a-date"})
    assert r.status_code == 200
    assert r.json()["plan"] is None


def test_recurring_plan_uses_default_weekday(client):
    client.put("/preferences", json={"default_harvest_weekday": 5})
    r = client.post(
        "/plan/recurring",
        json={"crop": PEA, "weekly_target_grams": 1000, "today": "2026-01-07"},
    )
    schedule = r.json()["schedule"]
    assert schedule["trays_needed"] == 4
    assert schedule["harvest_weekday"] == 5
    assert schedule["plant_day_name"] == "Saturday"
    assert schedule["upcoming"][0]["plant_date"] == "2026-01-10"


def test_recurring_plan_zero_target_is_null(client):
    r = client.post("/plan/recurring", json={"crop": PEA, "weekly_target_grams": 0, "harvest_weekday": 5})
    assert r.json()["schedule"] is None


def test_orders_crud_feeds_calendar(client):
    r = client.post(
        "/orders",
        json={"customer_id": "c1", "crop_id": "pea", "amount": 500, "due_day_of_week": 3},
    )
    assert r.status_code == 200
    order_id = r.json()["order"]["id"]
    assert client.get("/orders").json()["total"] == 1

    cal = client.post(
        "/calendar",
        json={
            "crops": [PEA],
            "customers": [{"id": "c1", "name": "Cafe Verde"}],
            "now": "2026-01-07T09:00:00",
            "window_days": 2,
        },
    ).json()
    assert cal["window_days"] == 2
    today = cal["days"][0]
    assert today["day"] == "2026-01-07"
    assert today["day_name"] == "Wednesday"
    assert [t["title"] for t in today["tasks"]] == ["Deliver Pea Shoots"]
    assert today["tasks"][0]["subtitle"] == "Cafe Verde (500g)"

    assert client.delete(f"/orders/{order_id}").status_code == 200
    assert client.delete(f"/orders/{order_id}").status_code == 404


def test_order_validation(client):
    r = client.post(
        "/orders",
        json={"customer_id": "c1", "crop_id": "pea", "amount": 0, "due_day_of_week": 3},
    )
    assert r.status_code == 422


def test_calendar_window_from_preferences(client):
    client.put("/preferences", json={"calendar_window_days": 3})
    cal = client.post("/calendar", json={"now": "2026-01-07T09:00:00"}).json()
    assert cal["window_days"] == 3


def test_calendar_posted_alerts_lead_day_zero(client):
    cal = client.post(
        "/calendar",
        json={
            "now": "2026-01-07T09:00:00",
            "window_days": 1,
            "recurring_orders": [],
            "alerts": [{"type": "urgent", "title": "Harvest Overdue", "tray_id": "t1"}],
        },
    ).json()
    tasks = cal["days"][0]["tasks"]
    assert tasks[0]["kind"] == "alert"
    assert tasks[0]["severity"] == "urgent"


def test_tray_projection_and_value(client):
    trays = [
        {"id": "t1", "crop_type_id": "pea", "stage": "Blackout", "start_date": "2026-01-06T12:00:00"},
        {
            "id": "t2",
            "crop_type_id": "pea",
            "stage": "Harvest Ready",
            "start_date": "2026-01-07T08:00:00",
            "updated_at": "2026-01-07T08:00:00",
        },
        {"id": "t3", "crop_type_id": "ghost", "stage": "Light"},
    ]
    body = {"crops": [PEA], "trays": trays, "now": "2026-01-07T09:00:00"}

    proj = client.post("/trays/projection", json=body).json()["trays"]
    assert [p["tray_id"] for p in proj] == ["t1", "t2"]
    assert proj[0]["countdown"]["text"] == "2d 3h"
    assert proj[0]["target_harvest_date"] == "2026-01-16T12:00:00"
    assert proj[1]["countdown"]["text"] == "Harvest now"
    # 200 g of seed from the 10.00 per kg pack
    assert proj[0]["seed_cost"] == pytest.approx(2.0)

    value = client.post("/trays/value", json=body).json()
    assert value["ready_trays"] == 1
    assert value["maturing_trays"] == 1
    assert value["total_value"] == pytest.approx(35.0)


def test_tray_actions(client):
    tray = {"id": "t1", "crop_type_id": "pea", "stage": "Light", "start_date": "2026-01-01T09:00:00"}
    r = client.post("/trays/advance", json={"tray": tray, "now": "2026-01-07T09:00:00"})
    assert r.status_code == 200
    ready = r.json()["tray"]
    assert ready["stage"] == "Harvest Ready"
    assert ready["start_date"] == "2026-01-07T09:00:00"

    r = client.post("/trays/harvest", json={"tray": ready, "yield_grams": 240})
    assert r.json()["tray"]["stage"] == "Harvested"
    assert r.json()["tray"]["yield_grams"] == 240

    r = client.post("/trays/harvest", json={"tray": tray})
    assert r.status_code == 409

    r = client.post("/trays/compost", json={"tray": tray})
    assert r.json()["tray"]["stage"] == "Compost"


def test_half_half_projection_costs_both_seeds(client):
    radish = {
        "id": "radish",
        "name": "Radish",
        "germination_days": 2,
        "blackout_days": 2,
        "light_days": 5,
        "estimated_yield_per_tray": 150,
        "seeding_rate": 30,
        "price_small_pack": 6.0,
    }
    tray = {
        "id": "mix",
        "crop_type_id": "pea",
        "crop_type_id_2": "radish",
        "stage": "Light",
        "start_date": "2026-01-06T09:00:00",
    }
    body = {"crops": [PEA, radish], "trays": [tray], "now": "2026-01-07T09:00:00"}

    proj = client.post("/trays/projection", json=body).json()["trays"][0]
    assert proj["expected_yield_grams"] == 200
    # half rate of each: 100 g pea (1.00) + 15 g radish (0.18)
    assert proj["seed_cost"] == pytest.approx(1.18)
