"""API routes."""

from .imports import router as imports_router
from .nyx import router as nyx_router
from .sync import router as sync_router

__all__ = [
    "imports_router",
    "nyx_router",
    "sync_router",
]
