"""Cart package: models, snapshot storage, and the cart store."""
from .models import CartLine, CartSnapshot, CartTotals
from .service import CartStore
from .storage import (
    FileSnapshotStore,
    MemorySnapshotStore,
    RedisSnapshotStore,
    SnapshotStore,
    create_snapshot_store,
)

__all__ = [
    "CartLine",
    "CartSnapshot",
    "CartTotals",
    "CartStore",
    "SnapshotStore",
    "RedisSnapshotStore",
    "FileSnapshotStore",
    "MemorySnapshotStore",
    "create_snapshot_store",
]
