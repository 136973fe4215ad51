"""Live subscription handle shared by every change stream the services open."""

import logging
from collections.abc import Callable
from typing import Any, TypeVar

from scenario_manager.application.interfaces import Unsubscribe

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Subscription:
    """Owns one store listener and gates delivery to its callback.

    ``close()`` releases the listener exactly once; repeated calls are
    no-ops. Once closed, no callback runs again, including snapshots the
    store had already queued. A subscription whose listener could not be
    opened stays silent until closed.

    Usage:
        with await collection.subscribe(render):
            ...
    """

    def __init__(self, description: str):
        self.description = description
        self._unsubscribe: Unsubscribe | None = None
        self._closed = False

    def attach(self, unsubscribe: Unsubscribe) -> None:
        """Bind the store's release function; releases it at once if already closed."""
        if self._closed:
            unsubscribe()
            return
        self._unsubscribe = unsubscribe

    def gate(self, callback: Callable[[T], Any]) -> Callable[[T], None]:
        """Wrap a callback so it is dropped after close()."""

        def _deliver(payload: T) -> None:
            if self._closed:
                logger.debug("Dropped late snapshot for closed subscription %s", self.description)
                return
            callback(payload)

        return _deliver

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        unsubscribe, self._unsubscribe = self._unsubscribe, None
        if unsubscribe is not None:
            unsubscribe()
            logger.debug("Closed subscription %s", self.description)

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def is_live(self) -> bool:
        """True while a store listener is attached and not yet released."""
        return self._unsubscribe is not None and not self._closed

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
