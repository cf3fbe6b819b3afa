"""
Cart snapshot storage.

A snapshot store holds one named record with the serialized cart lines.
Backends raise PersistenceFailed; the cart store decides what to do
with it.
"""
import os
from pathlib import Path
from typing import Optional, Protocol, Union

from storefront.config import Settings, get_settings
from storefront.errors import PersistenceFailed
from storefront.logging import get_logger

logger = get_logger(__name__)


class SnapshotStore(Protocol):
    """Durable single-record storage for the cart snapshot."""

    key: str

    def read(self) -> Optional[str]: ...

    def write(self, raw: str) -> None: ...


class RedisSnapshotStore:
    """Snapshot kept in Upstash Redis under cart:{name}."""

    def __init__(self, redis, name: str):
        from storefront.db import RedisKeys

        self.redis = redis
        self.key = RedisKeys.cart_key(name)

    def read(self) -> Optional[str]:
        try:
            return self.redis.get(self.key)
        except Exception as e:
            raise PersistenceFailed(self.key, str(e)) from e

    def write(self, raw: str) -> None:
        try:
            self.redis.set(self.key, raw)
        except Exception as e:
            raise PersistenceFailed(self.key, str(e)) from e


class FileSnapshotStore:
    """Snapshot kept in a local JSON file, replaced atomically on write."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self.key = str(self.path)

    def read(self) -> Optional[str]:
        try:
            return self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            raise PersistenceFailed(self.key, str(e)) from e

    def write(self, raw: str) -> None:
        tmp = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(raw, encoding="utf-8")
            os.replace(tmp, self.path)
        except OSError as e:
            raise PersistenceFailed(self.key, str(e)) from e


class MemorySnapshotStore:
    """Session-only snapshot."""

    def __init__(self, raw: Optional[str] = None, key: str = "memory"):
        self.raw = raw
        self.key = key

    def read(self) -> Optional[str]:
        return self.raw

    def write(self, raw: str) -> None:
        self.raw = raw


def create_snapshot_store(settings: Optional[Settings] = None) -> SnapshotStore:
    """
    Pick the snapshot backend from settings.

    Priority:
    1. Upstash Redis (UPSTASH_REDIS_REST_URL + UPSTASH_REDIS_REST_TOKEN)
    2. JSON file (STOREFRONT_CART_FILE)
    3. In-memory (cart does not survive a restart)
    """
    settings = settings or get_settings()
    if settings.redis_enabled:
        from storefront.db import get_redis_sync

        return RedisSnapshotStore(get_redis_sync(settings), settings.cart_key)
    if settings.cart_file:
        return FileSnapshotStore(settings.cart_file)
    logger.warning("No cart storage configured, cart will not survive a restart")
    return MemorySnapshotStore(key=settings.cart_key)
