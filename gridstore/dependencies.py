"""FastAPI dependencies shared by the routers."""

from functools import lru_cache

from gridstore.services.grid_service import GridStore


@lru_cache(maxsize=1)
def get_grid_store() -> GridStore:
    """
    Process-wide GridStore over the configured database.
    """
    return GridStore.open()
