import queue
import threading
from collections.abc import Callable

from .lib.log import log

__all__ = ["Effect", "EffectQueue"]

Effect = Callable[[], None]

_STOP = object()


class EffectQueue:
    """Runs side effects in submission order on one background thread.

    Submitting never blocks. An effect that raises is logged and the worker
    moves on; there are no retries and no timeouts.
    """

    def __init__(self, name: str = "effects"):
        self._queue: queue.Queue[object] = queue.Queue()
        self._closed = threading.Event()
        self._worker = threading.Thread(target=self._run, daemon=True, name=name)
        self._worker.start()

    def _run(self) -> None:
        while True:
            item = self._queue.get()
            try:
                if item is _STOP:
                    return
                label = getattr(item, "__name__", "effect")
                try:
                    item()  # type: ignore[operator]
                except Exception as e:
                    log(f"[effects] {label} failed: {type(e).__name__}: {e}")
            finally:
                self._queue.task_done()

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def submit(self, effect: Effect) -> None:
        if self._closed.is_set():
            log(f"[effects] dropped {getattr(effect, '__name__', 'effect')}: queue closed")
            return
        self._queue.put(effect)

    def join(self) -> None:
        """Block until every submitted effect has run."""
        self._queue.join()

    def close(self, timeout: float = 5) -> None:
        if self._closed.is_set():
            return
        self._closed.set()
        self._queue.put(_STOP)
        self._worker.join(timeout=timeout)
