"""
Notification-driven duplicate removal for the posts collection.

The reactor watches the collection key. On every "set" notification it
tries to take a short-lived lock scoped to the collection (set-if-absent with
a TTL); if the lock is already held the notification is dropped. While
holding the lock it runs one pass:

1. Load the collection (malformed payload -> abort, nothing written)
2. Treat the last element as the newly added post and embed it
3. Compare it with every other post in collection order
4. On the first similarity above the threshold, drop the newest post and
   persist the shortened collection

The lock value is a random owner token. Its TTL is renewed after every
comparison, and ownership is checked again right before the collection is
rewritten; a pass that lost the lock aborts without writing. Release deletes
the key only while it still holds the token. The TTL only matters when a
pass dies mid-way: the key then expires and a later notification can proceed.
"""

import asyncio
import logging
import uuid
from dataclasses import dataclass
from typing import Any, Optional, Set, Tuple

from ..errors import LockLostError, MalformedCollectionError
from ..store.base import KeyValueStore
from ..store.posts import load_collection, save_collection
from .cache import EmbeddingCache
from .embedder import Embedder
from .similarity import DEFAULT_DUPLICATE_THRESHOLD, cosine_similarity

logger = logging.getLogger(__name__)

DEFAULT_LOCK_TTL_MS = 10_000


@dataclass
class DedupOutcome:
    """Result of one reactor pass."""

    new_post_id: Optional[str] = None
    duplicate_of: Optional[str] = None
    similarity: Optional[float] = None
    removed: bool = False
    compared: int = 0


class DedupReactor:
    """
    Removes the newest post of a collection when it duplicates an older one.

    Usage:
        reactor = DedupReactor(store, embedder, EmbeddingCache(store))
        await reactor.run()  # runs until cancelled
    """

    def __init__(
        self,
        store: KeyValueStore,
        embedder: Embedder,
        cache: EmbeddingCache,
        collection_key: str = "posts",
        threshold: float = DEFAULT_DUPLICATE_THRESHOLD,
        lock_ttl_ms: int = DEFAULT_LOCK_TTL_MS,
    ):
        self.store = store
        self.embedder = embedder
        self.cache = cache
        self.collection_key = collection_key
        self.threshold = threshold
        self.lock_ttl_ms = lock_ttl_ms
        self._tasks: Set[asyncio.Task] = set()

    @property
    def lock_key(self) -> str:
        return f"dedupe:lock:{self.collection_key}"

    @classmethod
    def from_settings(cls, settings, store: KeyValueStore, embedder: Embedder) -> "DedupReactor":
        cache = EmbeddingCache(store, ttl_seconds=settings.embedding_cache_ttl_seconds)
        return cls(
            store,
            embedder,
            cache,
            collection_key=settings.posts_key,
            threshold=settings.dedup_threshold,
            lock_ttl_ms=settings.dedup_lock_ttl_ms,
        )

    async def _acquire_lock(self) -> Optional[str]:
        token = uuid.uuid4().hex
        acquired = await self.store.set(self.lock_key, token, nx=True, px=self.lock_ttl_ms)
        return token if acquired else None

    async def _renew_lock(self, token: Optional[str]) -> None:
        """Extend the lock TTL; raise LockLostError if another owner holds it."""
        if token is None:
            return
        if not await self.store.expire_if_equals(self.lock_key, token, self.lock_ttl_ms):
            logger.warning(
                f"[DedupReactor] Lost lock {self.lock_key} mid-pass (ttl={self.lock_ttl_ms}ms), aborting"
            )
            raise LockLostError(self.lock_key)

    async def _release_lock(self, token: str) -> None:
        try:
            if not await self.store.delete_if_equals(self.lock_key, token):
                logger.warning(
                    f"[DedupReactor] Lock {self.lock_key} expired before release "
                    f"(ttl={self.lock_ttl_ms}ms)"
                )
        except Exception as e:
            logger.error(f"[DedupReactor] Failed to release lock {self.lock_key}: {e}")

    async def trigger(self) -> Optional[DedupOutcome]:
        """
        Run one pass under the collection lock.

        Returns:
            The pass outcome, or None when the lock is held elsewhere
        """
        token = await self._acquire_lock()
        if token is None:
            logger.info(f"[DedupReactor] Lock busy for '{self.collection_key}', skipping")
            return None

        try:
            return await self.run_pass(token)
        finally:
            await self._release_lock(token)

    async def on_notification(self, event: str) -> Optional[DedupOutcome]:
        """Handle one keyspace event for the collection key."""
        if event != "set":
            logger.debug(f"[DedupReactor] Ignoring '{event}' event")
            return None
        return await self.trigger()

    def _identity(self, entry: Any, index: int) -> Tuple[str, str]:
        if not isinstance(entry, dict) or not entry.get("id"):
            raise MalformedCollectionError(self.collection_key, f"entry {index} has no id")
        return str(entry["id"]), entry.get("content") or ""

    async def run_pass(self, token: Optional[str] = None) -> DedupOutcome:
        """
        Check the newest post against the rest of the collection.

        Caller must hold the lock (see trigger()). With the owner token, the
        lock TTL is renewed after every comparison and ownership is confirmed
        right before the collection is rewritten.

        Raises:
            MalformedCollectionError: Collection payload is unusable
            LockLostError: The lock expired and was taken by another owner
        """
        posts = await load_collection(self.store, self.collection_key)
        if not posts:
            logger.debug(f"[DedupReactor] '{self.collection_key}' is empty")
            return DedupOutcome()

        new_id, new_text = self._identity(posts[-1], len(posts) - 1)
        new_vector = await self.cache.get_or_compute(new_id, new_text, self.embedder)

        outcome = DedupOutcome(new_post_id=new_id)
        for index, entry in enumerate(posts[:-1]):
            other_id, other_text = self._identity(entry, index)
            other_vector = await self.cache.get_or_compute(other_id, other_text, self.embedder)

            score = cosine_similarity(new_vector, other_vector)
            outcome.compared += 1
            if outcome.similarity is None or score > outcome.similarity:
                outcome.similarity = score
            logger.debug(f"[DedupReactor] {new_id} vs {other_id}: {score:.4f}")
            # Also the ownership check guarding the rewrite below
            await self._renew_lock(token)

            if score > self.threshold:
                await save_collection(self.store, self.collection_key, posts[:-1])
                outcome.duplicate_of = other_id
                outcome.similarity = score
                outcome.removed = True
                logger.info(
                    f"[DedupReactor] Removed {new_id}: duplicate of {other_id} "
                    f"(similarity={score:.4f}, threshold={self.threshold})"
                )
                return outcome

        logger.info(
            f"[DedupReactor] {new_id} is unique ({outcome.compared} compared, "
            f"max similarity={outcome.similarity if outcome.similarity is not None else 0.0:.4f})"
        )
        return outcome

    async def _dispatch(self, event: str) -> None:
        try:
            await self.on_notification(event)
        except Exception as e:
            logger.error(f"[DedupReactor] Pass failed: {e}", exc_info=True)

    async def run(self) -> None:
        """Watch the collection and process notifications until cancelled."""
        flags = await self.store.ensure_keyspace_notifications()
        logger.info(f"[DedupReactor] Keyspace notifications: {flags}")
        logger.info(f"[DedupReactor] Listening for changes on '{self.collection_key}'")

        try:
            async for event in self.store.watch(self.collection_key):
                task = asyncio.create_task(self._dispatch(event))
                self._tasks.add(task)
                task.add_done_callback(self._tasks.discard)
        finally:
            for task in list(self._tasks):
                task.cancel()
