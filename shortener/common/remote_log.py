"""Fire-and-forget forwarding of log events to a remote collector."""

import logging
import queue
import threading
from typing import Optional

import httpx

VALID_STACKS = {"backend", "frontend"}
VALID_LEVELS = {"debug", "info", "warn", "error", "fatal"}

_STOP = object()


class RemoteLogger:
    """Ship ``(stack, level, package, message)`` events to an HTTP collector.

    ``log`` only enqueues; a daemon thread does the POSTs. Delivery failures
    and a full queue are noted on the local logger and otherwise dropped.
    """

    def __init__(
        self,
        endpoint_url: Optional[str] = None,
        timeout_seconds: float = 5.0,
        queue_size: int = 1000,
        logger: Optional[logging.Logger] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """Initialize remote logger.

        Args:
            endpoint_url: Collector URL (None disables forwarding)
            timeout_seconds: Per-request timeout
            queue_size: Maximum number of pending events
            logger: Optional local logger for delivery notes
            transport: Optional httpx transport (used by tests)
        """
        self.endpoint_url = endpoint_url
        self.logger = logger or logging.getLogger(__name__)
        self.enabled = endpoint_url is not None
        self.sent = 0
        self.failed = 0
        self.dropped = 0

        self._queue: "queue.Queue" = queue.Queue(maxsize=queue_size)
        self._client: Optional[httpx.Client] = None
        self._worker: Optional[threading.Thread] = None

        if self.enabled:
            self._client = httpx.Client(timeout=timeout_seconds, transport=transport)
            self._worker = threading.Thread(
                target=self._run, name="remote-log-sender", daemon=True
            )
            self._worker.start()
            self.logger.info(f"Remote logging enabled -> {endpoint_url}")

    def log(self, stack: str, level: str, package: str, message: str) -> bool:
        """Queue an event for delivery. Never blocks, never raises.

        Returns:
            True if the event was queued
        """
        if not self.enabled:
            return False

        event = {
            "stack": str(stack).lower(),
            "level": str(level).lower(),
            "package": str(package).lower(),
            "message": str(message),
        }

        if event["stack"] not in VALID_STACKS or event["level"] not in VALID_LEVELS:
            self.logger.warning(
                f"[RemoteLog] Rejected event with stack={event['stack']} level={event['level']}"
            )
            return False

        try:
            self._queue.put_nowait(event)
        except queue.Full:
            self.dropped += 1
            self.logger.warning("[RemoteLog] Queue full, event dropped")
            return False

        return True

    def close(self, timeout: float = 5.0) -> None:
        """Stop accepting events and let the sender thread drain the queue.

        The sender closes its own HTTP client once it reaches the stop
        marker, so a join that times out leaves it draining in the
        background.
        """
        self.enabled = False
        if self._worker is None:
            return

        while True:
            try:
                self._queue.put_nowait(_STOP)
                break
            except queue.Full:
                try:
                    self._queue.get_nowait()
                    self.dropped += 1
                except queue.Empty:
                    pass

        self._worker.join(timeout)
        if self._worker.is_alive():
            self.logger.warning(
                f"[RemoteLog] Sender still draining after {timeout}s, leaving it to finish"
            )
        self._worker = None

        self.logger.info(
            f"Remote logging stopped (sent={self.sent}, failed={self.failed}, "
            f"dropped={self.dropped})"
        )

    def _run(self) -> None:
        client = self._client
        while True:
            event = self._queue.get()
            if event is _STOP:
                client.close()
                return
            self._send(client, event)

    def _send(self, client: httpx.Client, event: dict) -> None:
        try:
            response = client.post(self.endpoint_url, json=event)
            response.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            self.failed += 1
            self.logger.warning(f"[RemoteLog] Failed: {e}")
            return

        self.sent += 1
        try:
            body = response.json()
            self.logger.debug(
                f"[RemoteLog] Success: {body.get('message')} ID: {body.get('logID')}"
            )
        except (ValueError, AttributeError):
            self.logger.debug("[RemoteLog] Unexpected response format")
