"""Health aggregation module."""

from .cache import StatusCache
from .models import HealthSnapshot, ServerObservation, ServerStatus
from .probes import ProbeExecutor
from .service import StatusAggregator

__all__ = [
    "HealthSnapshot",
    "ServerObservation",
    "ServerStatus",
    "ProbeExecutor",
    "StatusAggregator",
    "StatusCache",
]
