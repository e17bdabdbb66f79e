from .query import IQuery
from .repository import IRepository
from .store import IEntitySet, IStore, IStoreSession

__all__ = [
    "IEntitySet",
    "IQuery",
    "IRepository",
    "IStore",
    "IStoreSession",
]
