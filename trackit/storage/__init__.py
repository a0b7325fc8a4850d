"""Persistence of the application state."""

from .backends import KeyValueStore, MemoryStore, FileStore
from .gateway import PersistenceGateway, LoadResult, STORAGE_KEY, LEGACY_KEYS

__all__ = [
    'KeyValueStore',
    'MemoryStore',
    'FileStore',
    'PersistenceGateway',
    'LoadResult',
    'STORAGE_KEY',
    'LEGACY_KEYS',
]
