from __future__ import annotations
from abc import ABC, abstractmethod
from typing import List

from growcycle.models import Alert, FarmSnapshot


class AlertProviderError(RuntimeError):
    """The provider could not produce today's alerts."""


class AlertProvider(ABC):
    @abstractmethod
    def get_alerts(self, snapshot: FarmSnapshot) -> List[Alert]:
        """
        Return today's already-classified alerts (urgent/warning/info/routine).
        The calendar trusts these as-is and never re-derives them.
        Raise AlertProviderError when the alerts cannot be obtained; an empty
        list means "nothing to report".
        """
        raise NotImplementedError
