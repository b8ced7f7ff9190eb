"""API route modules."""

from .clients import router as clients_router
from .entries import router as entries_router
from .health import router as health_router
from .visits import router as visits_router
from .workload import router as workload_router

__all__ = [
    "clients_router",
    "entries_router",
    "health_router",
    "visits_router",
    "workload_router",
]
