from .query import MemoryQuery
from .store import InMemoryEntitySet, InMemoryStore, InMemoryStoreSession

__all__ = [
    "InMemoryEntitySet",
    "InMemoryStore",
    "InMemoryStoreSession",
    "MemoryQuery",
]
