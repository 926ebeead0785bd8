"""Live event subscriptions over the consensus node's websocket endpoint.

An ``EventSubscription`` owns one connection task at a time. It subscribes
with a fixed filter, pings the server on an interval while connected, turns
pushed messages into ``ParsedEvent`` objects for the callback and reconnects
after a fixed delay whenever the connection drops. Only ``close()`` ends it.

Example:
    async def on_event(event):
        print(event.to_dict())

    subscription = EventSubscription.for_category(
        "wss://rpc.example.com/websocket",
        EventCategory.TRANSFER_RECEIVED,
        on_event,
        address="cosmos1...",
    )
    subscription.start()
    ...
    await subscription.close()
"""

import asyncio
import contextlib
import inspect
import json
import logging
import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, Union

import websockets
from websockets.exceptions import ConnectionClosed

from .config import Credentials
from .exceptions import ConfigurationError
from .queries import EventCategory, build_query, validate_query
from .types import ParsedEvent

logger = logging.getLogger(__name__)

DEFAULT_HEARTBEAT_INTERVAL = 30.0
DEFAULT_RECONNECT_DELAY = 5.0

EventCallback = Callable[[ParsedEvent], Union[None, Awaitable[None]]]


class SubscriptionState(str, Enum):
    IDLE = "idle"
    CONNECTING = "connecting"
    SUBSCRIBED = "subscribed"
    RECONNECTING = "reconnecting"
    CLOSING = "closing"
    CLOSED = "closed"
    EXHAUSTED = "exhausted"


def parse_events(events: Mapping[str, Any]) -> Dict[str, Any]:
    """Flatten ``{"key": [value]}`` to ``{"key": value}``.

    Keys with several values keep their list; keys with none are dropped.
    """
    parsed: Dict[str, Any] = {}
    for key, values in events.items():
        if not isinstance(values, list):
            parsed[key] = values
        elif len(values) == 1:
            parsed[key] = values[0]
        elif len(values) > 1:
            parsed[key] = list(values)
    return parsed


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class EventSubscription:
    """Self-healing subscription to one event filter.

    ``max_reconnects`` caps consecutive failed attempts; a successful
    subscribe starts the count again. ``reconnect_count`` is the lifetime total.
    """

    def __init__(
        self,
        endpoint: str,
        query: str,
        on_event: EventCallback,
        event_kind: str = EventCategory.CUSTOM.value,
        include_raw: bool = False,
        heartbeat_interval: float = DEFAULT_HEARTBEAT_INTERVAL,
        reconnect_delay: float = DEFAULT_RECONNECT_DELAY,
        max_reconnects: Optional[int] = None,
        connect: Optional[Callable[..., Awaitable[Any]]] = None,
    ):
        if not endpoint:
            raise ConfigurationError("A websocket endpoint is required for subscriptions")
        self.endpoint = endpoint
        self.query = validate_query(query)
        self.on_event = on_event
        self.event_kind = event_kind
        self.include_raw = include_raw
        self.heartbeat_interval = heartbeat_interval
        self.reconnect_delay = reconnect_delay
        self.max_reconnects = max_reconnects
        self._connect = connect or websockets.connect

        self.state = SubscriptionState.IDLE
        self.subscription_id: Optional[str] = None
        self.reconnect_count = 0
        self._consecutive_failures = 0
        self.events_received = 0

        self._closing = False
        self._ws: Any = None
        self._task: Optional[asyncio.Task] = None
        self._heartbeat: Optional[asyncio.Task] = None
        self._reconnect_handle: Optional[asyncio.TimerHandle] = None

    @classmethod
    def for_category(
        cls,
        endpoint: str,
        category: Union[EventCategory, str],
        on_event: EventCallback,
        address: Optional[str] = None,
        validator: Optional[str] = None,
        proposal_id: Optional[int] = None,
        custom_query: Optional[str] = None,
        **kwargs: Any,
    ) -> "EventSubscription":
        """Subscription whose filter is built from an event category."""
        query = build_query(
            category,
            address=address,
            validator=validator,
            proposal_id=proposal_id,
            custom_query=custom_query,
        )
        return cls(endpoint, query, on_event, event_kind=EventCategory(category).value, **kwargs)

    @classmethod
    def from_credentials(
        cls,
        credentials: Credentials,
        category: Union[EventCategory, str],
        on_event: EventCallback,
        **kwargs: Any,
    ) -> "EventSubscription":
        return cls.for_category(credentials.profile.ws_endpoint, category, on_event, **kwargs)

    @property
    def pending_timers(self) -> int:
        """Number of live heartbeat and reconnect timers."""
        count = 0
        if self._heartbeat is not None and not self._heartbeat.done():
            count += 1
        if self._reconnect_handle is not None and not self._reconnect_handle.cancelled():
            count += 1
        return count

    def start(self) -> None:
        """Open the first connection. Must be called from a running event loop."""
        if self.state is not SubscriptionState.IDLE:
            return
        self._spawn_connection()

    def _spawn_connection(self) -> None:
        self._reconnect_handle = None
        if self._closing:
            return
        self.state = SubscriptionState.CONNECTING
        self._task = asyncio.get_running_loop().create_task(self._run_connection())

    async def _run_connection(self) -> None:
        try:
            logger.debug(f"Connecting to {self.endpoint}")
            ws = await self._connect(self.endpoint, ping_interval=None)
            self._ws = ws
            if self._closing:
                await ws.close()
                return

            self.subscription_id = str(uuid.uuid4())
            await ws.send(
                json.dumps(
                    {
                        "jsonrpc": "2.0",
                        "method": "subscribe",
                        "id": self.subscription_id,
                        "params": {"query": self.query},
                    }
                )
            )
            self.state = SubscriptionState.SUBSCRIBED
            self._consecutive_failures = 0
            self._heartbeat = asyncio.get_running_loop().create_task(self._heartbeat_loop(ws))
            logger.info(f"Subscribed to {self.query!r} on {self.endpoint}")

            async for message in ws:
                await self._handle_message(message)
            logger.warning(f"Event stream {self.endpoint} closed by server")
        except ConnectionClosed as e:
            logger.warning(f"Event stream {self.endpoint} dropped: {e}")
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error(f"Event stream {self.endpoint} failed: {type(e).__name__}: {e}")
        finally:
            heartbeat = self._cancel_heartbeat()
            self._ws = None

        if heartbeat is not None:
            with contextlib.suppress(asyncio.CancelledError, Exception):
                await heartbeat
        self._schedule_reconnect()

    async def _heartbeat_loop(self, ws: Any) -> None:
        while True:
            await asyncio.sleep(self.heartbeat_interval)
            try:
                await ws.ping()
            except ConnectionClosed:
                return
            except Exception as e:
                logger.warning(f"Heartbeat to {self.endpoint} failed: {type(e).__name__}: {e}")
                return

    def _cancel_heartbeat(self) -> Optional[asyncio.Task]:
        heartbeat, self._heartbeat = self._heartbeat, None
        if heartbeat is not None and not heartbeat.done():
            heartbeat.cancel()
        return heartbeat

    def _schedule_reconnect(self) -> None:
        if self._closing:
            return
        if self.max_reconnects is not None and self._consecutive_failures >= self.max_reconnects:
            self.state = SubscriptionState.EXHAUSTED
            logger.error(
                f"Giving up on {self.endpoint} after {self._consecutive_failures} failed reconnects"
            )
            return
        if self._reconnect_handle is not None:
            self._reconnect_handle.cancel()
        self.reconnect_count += 1
        self._consecutive_failures += 1
        self.state = SubscriptionState.RECONNECTING
        logger.info(f"Reconnecting to {self.endpoint} in {self.reconnect_delay:g}s")
        self._reconnect_handle = asyncio.get_running_loop().call_later(
            self.reconnect_delay, self._spawn_connection
        )

    async def _handle_message(self, message: Union[str, bytes]) -> None:
        try:
            payload = json.loads(message)
        except (TypeError, ValueError) as e:
            logger.warning(f"Dropping malformed event message: {e}")
            return
        if not isinstance(payload, dict):
            logger.warning(f"Dropping unexpected event message: {payload!r}")
            return

        if payload.get("error"):
            logger.error(f"Subscription error from {self.endpoint}: {payload['error']}")
            return

        result = payload.get("result")
        if not result or not isinstance(result, dict):
            # Subscription acknowledgement
            return
        data = result.get("data")
        if not isinstance(data, dict):
            return

        events = result.get("events")
        event = ParsedEvent(
            event_kind=self.event_kind,
            timestamp=_utc_timestamp(),
            type=data.get("type", ""),
            data=data.get("value"),
            parsed_events=parse_events(events) if isinstance(events, dict) else None,
            raw=payload if self.include_raw else None,
        )
        self.events_received += 1
        await self._emit(event)

    async def _emit(self, event: ParsedEvent) -> None:
        try:
            outcome = self.on_event(event)
            if inspect.isawaitable(outcome):
                await outcome
        except Exception:
            logger.exception(f"Event callback failed for {event.type}")

    async def close(self) -> None:
        """Tear down the subscription. Safe to call more than once."""
        if self._closing:
            return
        self._closing = True
        self.state = SubscriptionState.CLOSING

        if self._reconnect_handle is not None:
            self._reconnect_handle.cancel()
            self._reconnect_handle = None

        heartbeat = self._cancel_heartbeat()
        if heartbeat is not None:
            with contextlib.suppress(asyncio.CancelledError, Exception):
                await heartbeat

        ws, self._ws = self._ws, None
        if ws is not None:
            try:
                await ws.close()
            except (ConnectionClosed, OSError) as e:
                logger.debug(f"Ignoring error while closing {self.endpoint}: {e}")

        task, self._task = self._task, None
        if task is not None and task is not asyncio.current_task() and not task.done():
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task

        self.state = SubscriptionState.CLOSED
        logger.info(f"Subscription to {self.endpoint} closed")

    async def __aenter__(self):
        self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
