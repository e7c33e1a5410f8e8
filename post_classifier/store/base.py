"""
Key-value store abstraction.

The reactor, embedding cache and post-group jobs only depend on this
interface; RedisStore is the production implementation.
"""

from abc import ABC, abstractmethod
from typing import AsyncIterator, Optional


class KeyValueStore(ABC):
    """Abstract base class for the string key-value store."""

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """Return the value for key, or None when absent."""
        pass

    @abstractmethod
    async def set(
        self,
        key: str,
        value: str,
        nx: bool = False,
        px: Optional[int] = None,
        ex: Optional[int] = None,
    ) -> bool:
        """
        Store a value.

        Args:
            key: Key to write
            value: Text value
            nx: Only write if the key is absent
            px: Expire after this many milliseconds
            ex: Expire after this many seconds

        Returns:
            True if written, False if nx prevented the write
        """
        pass

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove a key (no-op if absent)."""
        pass

    @abstractmethod
    async def delete_if_equals(self, key: str, value: str) -> bool:
        """
        Atomically delete key only while it still holds value.

        Returns:
            True if the key was deleted
        """
        pass

    @abstractmethod
    async def expire_if_equals(self, key: str, value: str, px: int) -> bool:
        """
        Atomically reset the TTL of key to px milliseconds only while it holds value.

        Returns:
            True if the key still held value
        """
        pass

    @abstractmethod
    async def ensure_keyspace_notifications(self, flags: str = "KEA") -> str:
        """Make sure change notifications are enabled; return the effective flags."""
        pass

    @abstractmethod
    def watch(self, key: str) -> AsyncIterator[str]:
        """Yield an event name (e.g. "set") each time `key` changes."""
        pass

    async def close(self) -> None:
        """Release connections. Default is a no-op."""
        return None
