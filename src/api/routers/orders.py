import logging

from fastapi import APIRouter, Depends, HTTPException

from api.dependencies import get_order_store, get_preferences_store
from api.schemas import OrderIn
from growcycle.models import PlannerPreferences, RecurringOrder
from storage.order_store import OrderStore
from storage.preferences_store import PreferencesStore

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/orders")
async def list_orders(store: OrderStore = Depends(get_order_store)) -> dict:
    orders = store.load()
    return {"orders": [o.model_dump() for o in orders], "total": len(orders)}


@router.post("/orders")
async def create_order(payload: OrderIn, store: OrderStore = Depends(get_order_store)) -> dict:
    order = store.add(RecurringOrder(id="", **payload.model_dump()))
    logger.info(f"Recurring order {order.id} created ({order.amount:g}g of {order.crop_id})")
    return {"status": "created", "order": order.model_dump()}


@router.delete("/orders/{order_id}")
async def delete_order(order_id: str, store: OrderStore = Depends(get_order_store)) -> dict:
    if not store.delete(order_id):
        raise HTTPException(status_code=404, detail=f"Order {order_id} not found")
    logger.info(f"Recurring order {order_id} deleted")
    return {"status": "deleted"}


@router.get("/preferences")
async def get_preferences(store: PreferencesStore = Depends(get_preferences_store)) -> dict:
    return store.load().model_dump()


@router.put("/preferences")
async def put_preferences(
    payload: PlannerPreferences,
    store: PreferencesStore = Depends(get_preferences_store),
) -> dict:
    store.save(payload)
    return payload.model_dump()
