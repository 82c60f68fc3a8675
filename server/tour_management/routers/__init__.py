"""FastAPI routers package."""

from .metrics import router as metrics_router
from .tours import router as tours_router

__all__ = [
    "metrics_router",
    "tours_router",
]
