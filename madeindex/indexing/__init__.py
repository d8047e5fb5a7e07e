"""Index building, persistence and reload."""

from .manager import IndexManager
from .store import IndexStore

__all__ = ["IndexManager", "IndexStore"]
