from __future__ import annotations

import json
import logging
import uuid
from pathlib import Path
from typing import List

from pydantic import ValidationError

from growcycle.models import RecurringOrder

logger = logging.getLogger(__name__)


class OrderStore:
    """JSON-file repository for the operator's standing weekly orders."""

    def __init__(self, path: str = "data/orders.json"):
        self.path = Path(path)

    def load(self) -> List[RecurringOrder]:
        """
        Load recurring orders from disk. A missing or corrupt file yields an
        empty list; individual invalid entries are skipped.
        """
        try:
            if not self.path.exists():
                return []
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Could not read orders from {self.path}: {e}")
            return []

        if not isinstance(data, list):
            logger.warning(f"Ignoring {self.path}: expected a list of orders")
            return []

        orders: List[RecurringOrder] = []
        for raw in data:
            try:
                orders.append(RecurringOrder(**raw))
            except (TypeError, ValidationError) as e:
                logger.warning(f"Skipping invalid order {raw!r}: {e}")
        return orders

    def save(self, orders: List[RecurringOrder]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(
            json.dumps([o.model_dump() for o in orders], ensure_ascii=False, indent=2),
            encoding="utf-8",
        )

    def add(self, order: RecurringOrder) -> RecurringOrder:
        if not order.id:
            order = order.model_copy(update={"id": uuid.uuid4().hex[:9]})
        orders = [o for o in self.load() if o.id != order.id]
        orders.append(order)
        self.save(orders)
        return order

    def delete(self, order_id: str) -> bool:
        orders = self.load()
        remaining = [o for o in orders if o.id != order_id]
        if len(remaining) == len(orders):
            return False
        self.save(remaining)
        return True
