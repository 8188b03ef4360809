"""Remote store adapters: protocol, memory/SQL/REST implementations and the change feed."""

from logistx.store.errors import RecordNotFoundError, StoreError, StoreUnavailableError
from logistx.store.feed import ChangeEvent, ChangeFeed, ChangeHandler, Subscription
from logistx.store.memory import MemoryStore
from logistx.store.protocol import RemoteStore
from logistx.store.schema import Embed
from logistx.utils.logger import get_logger

logger = get_logger("logistx.store")

BACKENDS = ("memory", "sql", "rest")


def create_store(backend: str | None = None, *, seed: bool = False) -> RemoteStore:
    """Build the store selected by STORE_BACKEND (or the given backend name)."""
    from logistx.config import (
        DATABASE_URL,
        REMOTE_STORE_API_KEY,
        REMOTE_STORE_TIMEOUT_SECONDS,
        REMOTE_STORE_URL,
        STORE_BACKEND,
    )

    name = (backend or STORE_BACKEND).lower()
    logger.info("store.create", backend=name)
    if name == "memory":
        return MemoryStore.with_demo_data() if seed else MemoryStore()
    if name == "sql":
        from logistx.store.sql import SqlStore

        return SqlStore(DATABASE_URL, seed=seed)
    if name == "rest":
        from logistx.store.rest import RestStore

        return RestStore(REMOTE_STORE_URL, REMOTE_STORE_API_KEY, timeout=REMOTE_STORE_TIMEOUT_SECONDS)
    raise ValueError(f"Unknown store backend: {name!r}. Use one of {', '.join(BACKENDS)}")


__all__ = [
    "BACKENDS",
    "ChangeEvent",
    "ChangeFeed",
    "ChangeHandler",
    "Embed",
    "MemoryStore",
    "RecordNotFoundError",
    "RemoteStore",
    "StoreError",
    "StoreUnavailableError",
    "Subscription",
    "create_store",
]
