"""Storage and configuration shared by the classroom board server."""

from common.catalog import CatalogStore, StorageMode
from common.database import DBController

__all__ = [
    "CatalogStore",
    "DBController",
    "StorageMode",
]
