from __future__ import annotations
import logging
from typing import List

import requests
from pydantic import TypeAdapter, ValidationError

from alerts.providers.base import AlertProvider, AlertProviderError
from growcycle.models import Alert, FarmSnapshot

logger = logging.getLogger(__name__)

_ALERT_LIST = TypeAdapter(List[Alert])


class HttpAlertProvider(AlertProvider):
    """Asks an external alert service to classify the current farm state.

    Expected response: a JSON list of alerts, or {"alerts": [...]}.
    Any failure is logged and raised as AlertProviderError; the calendar then
    renders without alerts.
    """

    def __init__(self, url: str, timeout_s: float = 2.0):
        self.url = url
        self.timeout_s = timeout_s

    def get_alerts(self, snapshot: FarmSnapshot) -> List[Alert]:
        try:
            resp = requests.post(
                self.url,
                json=snapshot.model_dump(mode="json"),
                timeout=self.timeout_s,
            )
            resp.raise_for_status()
            payload = resp.json()
            if isinstance(payload, dict):
                payload = payload.get("alerts", [])
            return _ALERT_LIST.validate_python(payload)
        except (requests.RequestException, ValueError, ValidationError) as e:
            logger.warning("Alert provider unavailable: %s", e)
            raise AlertProviderError(f"Alert service at {self.url} failed: {e}") from e
