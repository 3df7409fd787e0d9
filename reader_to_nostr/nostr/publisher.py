"""
Fan-out publishing of a signed event to Nostr relays over WebSockets.

Each relay gets its own connection driven through an explicit state machine:

    CONNECTING -> OPEN -> SENDING -> LINGERING -> CLOSED        (success)
    CONNECTING -> TIMED_OUT                                      (failure)
    any state before CLOSED -> CONNECTION_ERROR                  (failure)

All relays run concurrently as asyncio tasks and the report is built only
after every one of them has reached a terminal state. One relay failing
never cancels or delays the others.
"""

from __future__ import annotations

import asyncio
from enum import Enum
import json
import logging
import time
from typing import Any, Awaitable, Callable, Iterable

import websockets

from ..core.errors import NoRelays
from ..core.types import PublishOutcome, PublishReport, PublishState, SignedEvent
from ..logging_utils import log_event


CONNECTION_TIMEOUT = "Connection timeout"
CONNECTION_FAILED = "Connection failed"

# 1000 normal closure, 1001 going away
NORMAL_CLOSE_CODES = {1000, 1001}

Connector = Callable[[str], Awaitable[Any]]


class RelayState(str, Enum):
    CONNECTING = "connecting"
    OPEN = "open"
    SENDING = "sending"
    LINGERING = "lingering"
    CLOSED = "closed"
    TIMED_OUT = "timed_out"
    CONNECTION_ERROR = "connection_error"


TERMINAL_STATES = {RelayState.CLOSED, RelayState.TIMED_OUT, RelayState.CONNECTION_ERROR}


async def open_websocket(endpoint: str) -> Any:
    """Open a client WebSocket; the handshake deadline is enforced by the caller."""
    return await websockets.connect(endpoint, open_timeout=None, close_timeout=1)


def event_message(event: SignedEvent) -> str:
    """Wire message for publishing: ["EVENT", <event object>]."""
    return json.dumps(["EVENT", event.to_dict()], separators=(",", ":"), ensure_ascii=False)


def _describe(exc: BaseException) -> str:
    return str(exc).strip() or CONNECTION_FAILED


class RelayConnection:
    """Delivers one message to one relay and records the outcome.

    Attributes:
        endpoint: Relay URL
        state: Current RelayState
        history: Every state entered, in order
    """

    def __init__(
        self,
        endpoint: str,
        message: str,
        connect: Connector,
        connect_timeout: float,
        linger: float,
        logger: logging.Logger,
    ):
        self.endpoint = endpoint
        self._message = message
        self._connect = connect
        self._connect_timeout = connect_timeout
        self._linger = linger
        self._logger = logger
        self.state = RelayState.CONNECTING
        self.history: list[RelayState] = []

    def _enter(self, state: RelayState) -> None:
        self.state = state
        self.history.append(state)
        self._logger.debug("%s -> %s", self.endpoint, state.value)

    def _fail(self, state: RelayState, detail: str) -> PublishOutcome:
        self._enter(state)
        self._logger.warning("Relay %s failed: %s", self.endpoint, detail)
        return PublishOutcome(endpoint=self.endpoint, state=PublishState.FAILURE, detail=detail)

    async def run(self) -> PublishOutcome:
        """Drive the connection to a terminal state.

        Only cancellation propagates; every other error becomes a failure
        outcome.
        """
        self._enter(RelayState.CONNECTING)
        try:
            connection = await asyncio.wait_for(self._connect(self.endpoint), timeout=self._connect_timeout)
        except asyncio.TimeoutError:
            return self._fail(RelayState.TIMED_OUT, CONNECTION_TIMEOUT)
        except Exception as exc:  # noqa: BLE001
            return self._fail(RelayState.CONNECTION_ERROR, _describe(exc))

        self._enter(RelayState.OPEN)
        try:
            self._enter(RelayState.SENDING)
            await connection.send(self._message)
            self._enter(RelayState.LINGERING)
            error = await self._hold_open(connection)
        except asyncio.CancelledError:
            await self._close(connection)
            raise
        except Exception as exc:  # noqa: BLE001
            await self._close(connection)
            return self._fail(RelayState.CONNECTION_ERROR, _describe(exc))

        await self._close(connection)
        if error is not None:
            return self._fail(RelayState.CONNECTION_ERROR, error)
        self._enter(RelayState.CLOSED)
        return PublishOutcome(endpoint=self.endpoint, state=PublishState.SUCCESS)

    async def _hold_open(self, connection: Any) -> str | None:
        """Keep the connection open for the linger period.

        Returns an error detail if the relay dropped the connection
        abnormally in the meantime, otherwise None. Acknowledgement frames
        are left unread.
        """
        closed = asyncio.ensure_future(connection.wait_closed())
        try:
            done, _ = await asyncio.wait({closed}, timeout=self._linger)
        finally:
            if not closed.done():
                closed.cancel()
        if not done:
            return None
        code = getattr(connection, "close_code", None)
        if code in NORMAL_CLOSE_CODES:
            return None
        reason = getattr(connection, "close_reason", None) or ""
        if code is None:
            return CONNECTION_FAILED
        return f"Connection closed with code {code}" + (f": {reason}" if reason else "")

    async def _close(self, connection: Any) -> None:
        try:
            await connection.close()
        except Exception as exc:  # noqa: BLE001
            self._logger.debug("Error while closing %s: %s", self.endpoint, exc)


class RelayPublisher:
    """Publishes signed events to many relays concurrently.

    Args:
        connect: Coroutine function opening a connection to a relay URL;
            the returned object needs send(), close() and wait_closed()
        logger: Logger for per-relay and summary events
    """

    def __init__(self, connect: Connector | None = None, logger: logging.Logger | None = None):
        self._connect = connect or open_websocket
        self._logger = logger or logging.getLogger("reader_to_nostr.publish")

    async def publish(
        self,
        event: SignedEvent,
        endpoints: Iterable[str],
        connect_timeout_ms: int = 5000,
        linger_ms: int = 1000,
    ) -> PublishReport:
        """Send the event to every endpoint and wait for all of them to settle.

        Raises:
            NoRelays: If endpoints is empty; no connection is opened
        """
        endpoints = list(endpoints)
        if not endpoints:
            raise NoRelays()

        message = event_message(event)
        connections = [
            RelayConnection(
                endpoint,
                message,
                self._connect,
                connect_timeout=connect_timeout_ms / 1000,
                linger=linger_ms / 1000,
                logger=self._logger,
            )
            for endpoint in endpoints
        ]
        started = time.monotonic()
        log_event(self._logger, "Publish start", event="publish_start", event_id=event.id, relays=len(endpoints))

        tasks = [asyncio.create_task(connection.run()) for connection in connections]
        try:
            results = await asyncio.gather(*tasks, return_exceptions=True)
        except asyncio.CancelledError:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        outcomes: list[PublishOutcome] = []
        for connection, result in zip(connections, results):
            if isinstance(result, PublishOutcome):
                outcomes.append(result)
            else:
                outcomes.append(
                    PublishOutcome(endpoint=connection.endpoint, state=PublishState.FAILURE, detail=_describe(result))
                )

        report = PublishReport(outcomes=outcomes)
        log_event(
            self._logger,
            f"Posted to {report.success_count}/{report.total} relays",
            event="publish_done",
            event_id=event.id,
            success=report.success_count,
            failed=report.failure_count,
            elapsed_ms=int((time.monotonic() - started) * 1000),
        )
        return report
