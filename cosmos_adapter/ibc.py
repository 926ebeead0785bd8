"""IBC transfer helpers."""

import re
import time
from typing import Dict, List, Optional

from .constants import IBC_CHANNELS
from .exceptions import InvalidChannel, UnknownDestination
from .types import IbcChannelRoute

DEFAULT_PORT = "transfer"
DEFAULT_TIMEOUT_MINUTES = 10

_CHANNEL_RE = re.compile(r"^channel-[0-9]+$")


def get_route(destination: str) -> IbcChannelRoute:
    """Route for ``destination`` (case-insensitive)."""
    route = IBC_CHANNELS.get(destination.strip().lower())
    if route is None:
        raise UnknownDestination(destination)
    return route


def available_destinations() -> List[Dict[str, str]]:
    """Destination keys with their display names."""
    return [{"name": route.chain, "value": key} for key, route in IBC_CHANNELS.items()]


def calculate_timeout(minutes: float = DEFAULT_TIMEOUT_MINUTES, now: Optional[float] = None) -> int:
    """Timeout timestamp ``minutes`` from now, in nanoseconds since the epoch."""
    if now is None:
        now = time.time()
    millis = int(now * 1000) + int(minutes * 60 * 1000)
    return millis * 1_000_000


def format_channel_id(channel: str) -> str:
    """Canonicalize a channel id; a bare number becomes ``channel-<n>``."""
    channel = str(channel).strip()
    if re.match(r"^[0-9]+$", channel):
        channel = f"channel-{int(channel)}"
    if not _CHANNEL_RE.match(channel):
        raise InvalidChannel(f"Invalid channel id: {channel!r}")
    return channel


def format_port_id(port: Optional[str]) -> str:
    return port or DEFAULT_PORT


def is_ibc_denom(denom: str) -> bool:
    return denom.startswith("ibc/")


def parse_ibc_denom(denom: str) -> Optional[Dict[str, str]]:
    """Split an ``ibc/<hash>`` denom into its hash, or None for other denoms."""
    if not is_ibc_denom(denom):
        return None
    return {"hash": denom[4:], "baseDenom": denom}
