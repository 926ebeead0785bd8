"""Cosmos adapter SDK - query, signing and event subscription client for Cosmos SDK chains."""

from .client import SigningClient
from .config import Credentials, NetworkProfile, get_network_profile
from .dispatcher import Dispatcher, OperationRequest, Resource
from .events import EventSubscription, SubscriptionState, parse_events
from .exceptions import (
    BroadcastTimeout,
    ConfigurationError,
    CosmosError,
    InvalidAddress,
    InvalidAmount,
    InvalidQuery,
    ProtocolError,
    RemoteQueryError,
    RemoteRpcError,
    UnknownDestination,
    UnknownOperation,
)
from .lcd import LcdClient
from .queries import EventCategory, build_query, validate_query
from .rpc import TendermintClient
from .types import Coin, IbcChannelRoute, ParsedEvent, StdFee, TxResult, VoteOption
from .wallet import Wallet

__version__ = "1.0.0"
__all__ = [
    "SigningClient",
    "Credentials",
    "NetworkProfile",
    "get_network_profile",
    "Dispatcher",
    "OperationRequest",
    "Resource",
    "EventSubscription",
    "SubscriptionState",
    "parse_events",
    "EventCategory",
    "build_query",
    "validate_query",
    "LcdClient",
    "TendermintClient",
    "Wallet",
    "Coin",
    "IbcChannelRoute",
    "ParsedEvent",
    "StdFee",
    "TxResult",
    "VoteOption",
    "CosmosError",
    "BroadcastTimeout",
    "ConfigurationError",
    "InvalidAddress",
    "InvalidAmount",
    "InvalidQuery",
    "ProtocolError",
    "RemoteQueryError",
    "RemoteRpcError",
    "UnknownDestination",
    "UnknownOperation",
]
