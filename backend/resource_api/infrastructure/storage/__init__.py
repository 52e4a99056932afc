from .memory_store import InMemoryEntityStore
from .json_file_persistence import JsonFilePersistence, open_json_file_store
from .database_persistence import DatabasePersistence
from .factory import STORE_SPECS, StoreRegistry, StoreSpec, build_store, build_stores

__all__ = [
    "InMemoryEntityStore",
    "JsonFilePersistence",
    "open_json_file_store",
    "DatabasePersistence",
    "STORE_SPECS",
    "StoreRegistry",
    "StoreSpec",
    "build_store",
    "build_stores",
]
