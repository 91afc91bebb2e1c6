"""
Optimistic mutations against a QueryCache.

Every mutating call runs the same sequence:

1. snapshot the primary key
2. apply the change to the cached value right away
3. make the network call (bounded by a timeout; expiry is a failure)
4. success: mark secondary keys stale, leave the primary value alone
5. failure: put the snapshot back exactly and notify
6. always: discard fetches started mid-call and mark the primary key stale
   for the next natural refetch

fetch() on the primary key does not load while the mutation is pending.

A caller can declare NotFound a success (deleting something already gone).
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Iterable, Optional, Tuple

from placenet.client.cache import QueryCache
from placenet.core.errors import NotFound, TransportError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0

# notify(title, description, variant); variant is "default" or "destructive"
Notifier = Callable[[str, str, str], None]


def log_notifier(title: str, description: str, variant: str = "default") -> None:
    if variant == "destructive":
        logger.warning("%s: %s", title, description)
    else:
        logger.info("%s: %s", title, description)


class OptimisticMutation:
    """
    One optimistic write.

    Args:
        cache: the shared QueryCache
        primary_key: the collection the change is applied to
        apply: value -> new value, the optimistic transform
        call: zero-arg coroutine function doing the request
        secondary_keys: derived collections to invalidate on success
        timeout: seconds before the call counts as failed
        notify: toast-style sink for success/failure messages
        success_message / failure_message: (title, description) pairs
        not_found_is_success: treat NotFound from call as success
    """

    def __init__(
        self,
        cache: QueryCache,
        primary_key: str,
        apply: Callable[[Any], Any],
        call: Callable[[], Awaitable[Any]],
        secondary_keys: Iterable[str] = (),
        timeout: float = DEFAULT_TIMEOUT,
        notify: Notifier = log_notifier,
        success_message: Optional[Tuple[str, str]] = None,
        failure_message: Tuple[str, str] = ("Error", "The change could not be saved."),
        not_found_is_success: bool = False,
    ):
        self.cache = cache
        self.primary_key = primary_key
        self.apply = apply
        self.call = call
        self.secondary_keys = tuple(secondary_keys)
        self.timeout = timeout
        self.notify = notify
        self.success_message = success_message
        self.failure_message = failure_message
        self.not_found_is_success = not_found_is_success

    async def run(self) -> Any:
        """Run the mutation. Returns the call's result; re-raises its error after rollback."""
        self.cache.begin_mutation(self.primary_key)
        try:
            return await self._run()
        finally:
            # Drop fetches that started mid-call, then mark stale for the next natural refetch
            self.cache.cancel(self.primary_key)
            self.cache.invalidate(self.primary_key)
            self.cache.end_mutation(self.primary_key)

    async def _run(self) -> Any:
        # Steps 1-2; cancel first so an older in-flight refetch cannot land on top
        self.cache.cancel(self.primary_key)
        snapshot = self.cache.snapshot(self.primary_key)
        if snapshot.present:
            self.cache.update(self.primary_key, self.apply)

        try:
            try:
                result = await asyncio.wait_for(self.call(), timeout=self.timeout)
            except asyncio.TimeoutError:
                raise TransportError(f"Request timed out after {self.timeout:g}s")
            except NotFound:
                if not self.not_found_is_success:
                    raise
                result = None
        except Exception as e:
            self.cache.restore(snapshot)
            title, description = self.failure_message
            self.notify(title, description, "destructive")
            logger.debug("Rolled back %s after %s", self.primary_key, e)
            raise

        for key in self.secondary_keys:
            self.cache.invalidate(key)
        if self.success_message:
            self.notify(*self.success_message, "default")
        return result
