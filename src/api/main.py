import logging

from fastapi import FastAPI

from api.routers import calendar, ops, orders, planning, trays

# Logging configuration
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s"
)
logger = logging.getLogger(__name__)

app = FastAPI(title="growcycle-planner")

app.include_router(planning.router)
app.include_router(calendar.router)
app.include_router(trays.router)
app.include_router(orders.router)
app.include_router(ops.router)


@app.on_event("startup")
async def startup() -> None:
    logger.info("Growing-cycle planner API started")
