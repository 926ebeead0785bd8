"""Type definitions for the Cosmos adapter SDK."""

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class Coin:
    """Coin representation. Amount is an integer in base units, kept as a string."""
    denom: str
    amount: str

    def to_dict(self) -> Dict[str, str]:
        return {"denom": self.denom, "amount": self.amount}


@dataclass
class StdFee:
    """Explicit transaction fee."""
    amount: List[Coin]
    gas: int
    payer: str = ""
    granter: str = ""


class VoteOption(IntEnum):
    """Vote options for governance."""
    UNSPECIFIED = 0
    YES = 1
    ABSTAIN = 2
    NO = 3
    NO_WITH_VETO = 4


class BroadcastMode(str, Enum):
    """Broadcast modes accepted by the REST tx service."""
    SYNC = "BROADCAST_MODE_SYNC"
    ASYNC = "BROADCAST_MODE_ASYNC"
    BLOCK = "BROADCAST_MODE_BLOCK"


@dataclass
class TxResult:
    """Transaction result.

    A non-zero ``code`` is an on-chain failure reported as data; ``raw_log``
    carries the diagnostic text.
    """
    transaction_hash: str
    height: int
    code: int
    raw_log: str = ""
    gas_used: int = 0
    gas_wanted: int = 0
    events: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.code == 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "transactionHash": self.transaction_hash,
            "height": self.height,
            "gasUsed": self.gas_used,
            "gasWanted": self.gas_wanted,
            "code": self.code,
            "rawLog": self.raw_log,
            "events": self.events,
        }


@dataclass(frozen=True)
class IbcChannelRoute:
    """Static descriptor of a cross-chain transfer path."""
    chain: str
    chain_id: str
    channel: str
    port: str
    counterparty_channel: str
    counterparty_port: str
    prefix: str
    denom: str

    def to_dict(self) -> Dict[str, str]:
        return {
            "chain": self.chain,
            "chainId": self.chain_id,
            "channel": self.channel,
            "port": self.port,
            "counterpartyChannel": self.counterparty_channel,
            "counterpartyPort": self.counterparty_port,
            "prefix": self.prefix,
            "denom": self.denom,
        }


@dataclass(frozen=True)
class DenomInfo:
    """Denomination metadata."""
    denom: str
    symbol: str
    decimals: int
    name: str
    type: str = "native"


@dataclass
class ParsedEvent:
    """Normalized chain event delivered to a subscription consumer.

    ``timestamp`` is the local receipt time, not chain time.
    """
    event_kind: str
    timestamp: str
    type: str
    data: Any
    parsed_events: Optional[Dict[str, Any]] = None
    raw: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        output: Dict[str, Any] = {
            "eventType": self.event_kind,
            "timestamp": self.timestamp,
            "type": self.type,
            "data": self.data,
        }
        if self.parsed_events is not None:
            output["parsedEvents"] = self.parsed_events
        if self.raw is not None:
            output["raw"] = self.raw
        return output
