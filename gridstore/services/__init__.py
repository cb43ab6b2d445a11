"""Business logic services."""

from gridstore.services.grid_service import GridStore
from gridstore.services.orphan_sweeper import OrphanSweeper

__all__ = ["GridStore", "OrphanSweeper"]
