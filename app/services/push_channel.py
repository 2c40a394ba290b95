# app/services/push_channel.py

"""
Best-effort forwarding of notification events to the real-time push service.

Publishing never blocks the request that produced the event: events are handed
to a small thread pool, and any delivery failure is logged and dropped.
"""

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import wait as wait_futures
from dataclasses import asdict, dataclass
from typing import Optional, Protocol, Set

import requests

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PushEvent:
    recipient_id: int
    type: str
    message: str
    reference_id: Optional[int] = None


class PushChannel(Protocol):
    def publish(self, event: PushEvent) -> None:
        ...


class LoggingPushChannel:
    """Used when no push endpoint is configured"""

    def publish(self, event: PushEvent) -> None:
        logger.info(f"Push event for user {event.recipient_id}: {event.type} - {event.message}")


class HttpPushChannel:
    """POSTs each event as JSON to the push service's webhook"""

    def __init__(self, url: str, timeout: float = 2.0, session: Optional[requests.Session] = None):
        self.url = url
        self.timeout = timeout
        self.session = session or requests.Session()

    def publish(self, event: PushEvent) -> None:
        response = self.session.post(self.url, json=asdict(event), timeout=self.timeout)
        response.raise_for_status()


class PushDispatcher:
    def __init__(self, channel: PushChannel, max_workers: int = 2):
        self.channel = channel
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="push")
        self._in_flight: Set[Future] = set()
        self._lock = threading.Lock()

    def publish(self, event: PushEvent) -> None:
        try:
            future = self._executor.submit(self._deliver, event)
        except RuntimeError as e:
            # Executor already shut down
            logger.warning(f"Push dispatcher unavailable, dropping event for user {event.recipient_id}: {str(e)}")
            return

        with self._lock:
            self._in_flight.add(future)
        future.add_done_callback(self._forget)

    def _deliver(self, event: PushEvent) -> None:
        try:
            self.channel.publish(event)
        except Exception as e:
            logger.error(f"Push delivery failed for user {event.recipient_id} ({event.type}): {str(e)}")

    def _forget(self, future: Future) -> None:
        with self._lock:
            self._in_flight.discard(future)

    def wait(self, timeout: Optional[float] = None) -> None:
        """Block until every event submitted so far has been handled"""
        with self._lock:
            pending = list(self._in_flight)
        wait_futures(pending, timeout=timeout)

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)
