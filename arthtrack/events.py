import logging
from collections.abc import Callable

logger = logging.getLogger(__name__)

Listener = Callable[[], None]


class UpdateBus:
    """Synchronous "something changed" signal shared by the ledgers and their consumers.

    One bus is created by the composition root and handed to every ledger that
    writes and every consumer that needs to refresh.
    """

    def __init__(self) -> None:
        self._listeners: list[Listener] = []

    def subscribe(self, callback: Listener) -> Callable[[], None]:
        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def emit(self) -> None:
        for listener in list(self._listeners):
            try:
                listener()
            except Exception:
                logger.error("Update listener failed", exc_info=True, extra={"operation": "emit"})

    def __len__(self) -> int:
        return len(self._listeners)
