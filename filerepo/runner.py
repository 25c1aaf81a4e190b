import asyncio
import concurrent.futures
import logging
import threading
from typing import Any, Awaitable, Optional

logger = logging.getLogger(__name__)


class LoopRunner:
    """Runs one asyncio event loop in a daemon thread for synchronous callers.

    Collection locks are bound to the loop that uses them, so every request
    handled by the Flask app submits its coroutine here instead of starting a
    loop of its own.
    """

    def __init__(self, timeout: Optional[float] = None):
        self.timeout = timeout
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._thread: Optional[threading.Thread] = None
        self._lock = threading.Lock()

    def init_app(self, app):
        self.timeout = app.config.get("REQUEST_TIMEOUT", self.timeout)
        self.start()
        app.extensions["filerepo_runner"] = self

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self):
        with self._lock:
            if self.running:
                return
            loop = asyncio.new_event_loop()
            ready = threading.Event()

            def _serve():
                asyncio.set_event_loop(loop)
                loop.call_soon(ready.set)
                loop.run_forever()
                loop.close()
                logger.info("Event loop thread stopped")

            self._loop = loop
            self._thread = threading.Thread(target=_serve, daemon=True, name="filerepo-loop")
            self._thread.start()
            ready.wait()
            logger.info("Event loop thread started")

    def stop(self):
        with self._lock:
            if not self.running:
                return
            self._loop.call_soon_threadsafe(self._loop.stop)
            self._thread.join(timeout=5.0)
            if self._thread.is_alive():
                logger.warning("Event loop thread did not stop cleanly")
            self._thread = None
            self._loop = None

    def run(self, coro: Awaitable[Any], timeout: Optional[float] = None) -> Any:
        """Run ``coro`` on the background loop and block until it finishes."""
        if not self.running:
            self.start()
        future = asyncio.run_coroutine_threadsafe(coro, self._loop)
        try:
            return future.result(self.timeout if timeout is None else timeout)
        except concurrent.futures.TimeoutError:
            future.cancel()
            raise
