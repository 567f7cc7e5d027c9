from __future__ import annotations
from typing import Iterable, List, Optional

from alerts.providers.base import AlertProvider
from growcycle.models import Alert, FarmSnapshot


class StaticAlertProvider(AlertProvider):
    """Serves a precomputed alert list, e.g. one posted by the caller."""

    def __init__(self, alerts: Optional[Iterable[Alert]] = None):
        self._alerts = list(alerts or [])

    def get_alerts(self, snapshot: FarmSnapshot) -> List[Alert]:
        return list(self._alerts)
