import os
from typing import Optional

from alerts.providers.base import AlertProvider
from alerts.providers.http_provider import HttpAlertProvider
from storage.order_store import OrderStore
from storage.preferences_store import PreferencesStore

# Configuration
ORDERS_PATH = os.getenv("ORDERS_PATH", "data/orders.json")
PREFERENCES_PATH = os.getenv("PREFERENCES_PATH", "data/preferences.json")
ALERT_PROVIDER_URL = os.getenv("ALERT_PROVIDER_URL", "").strip()
ALERT_PROVIDER_TIMEOUT_S = float(os.getenv("ALERT_PROVIDER_TIMEOUT_S", "2.0"))

order_store = OrderStore(ORDERS_PATH)
preferences_store = PreferencesStore(PREFERENCES_PATH)


def get_order_store() -> OrderStore:
    return order_store


def get_preferences_store() -> PreferencesStore:
    return preferences_store


def get_alert_provider() -> Optional[AlertProvider]:
    if not ALERT_PROVIDER_URL:
        return None
    return HttpAlertProvider(ALERT_PROVIDER_URL, timeout_s=ALERT_PROVIDER_TIMEOUT_S)
