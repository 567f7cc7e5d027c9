import os
import logging

from fastapi import APIRouter, Depends, Response
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST

from api.dependencies import ALERT_PROVIDER_URL, get_order_store
from storage.order_store import OrderStore

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/health")
async def health_check(store: OrderStore = Depends(get_order_store)) -> dict:
    """Health check endpoint for container orchestration."""
    health = {
        "status": "healthy",
        "profile": os.getenv("DEPLOYMENT_PROFILE", "unknown"),
        "alert_provider": "http" if ALERT_PROVIDER_URL else "none",
    }
    try:
        health["recurring_orders"] = len(store.load())
    except Exception as e:
        logger.error(f"Order store health check failed: {e}")
        health["status"] = "degraded"
        health["recurring_orders"] = 0
    return health


@router.get("/metrics")
async def metrics() -> Response:
    """
    Prometheus scrape endpoint.
    """
    data = generate_latest()
    return Response(content=data, media_type=CONTENT_TYPE_LATEST)
