"""Network profiles and caller credentials."""

import os
import re
from dataclasses import dataclass, field, replace
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Mapping, Optional, Union
from urllib.parse import urlparse

from dotenv import load_dotenv
from mnemonic import Mnemonic

from .constants import DEFAULT_HD_PATH
from .exceptions import ConfigurationError

_HD_PATH_RE = re.compile(r"^m(/[0-9]+'?)+$")
_PREFIX_RE = re.compile(r"^[a-z][a-z0-9]{0,82}$")

DEFAULT_GAS_PRICE = Decimal("0.025")
DEFAULT_GAS_ADJUSTMENT = 1.3


def _check_endpoint(name: str, value: str, schemes) -> None:
    if not value:
        return
    parsed = urlparse(value)
    if parsed.scheme not in schemes or not parsed.netloc:
        raise ConfigurationError(
            f"{name} must be an absolute {'/'.join(schemes)} URI, got {value!r}"
        )


def _to_decimal(name: str, value: Union[str, int, float, Decimal]) -> Decimal:
    try:
        number = Decimal(str(value))
    except InvalidOperation:
        raise ConfigurationError(f"{name} must be numeric, got {value!r}") from None
    if not number.is_finite():
        raise ConfigurationError(f"{name} must be finite, got {value!r}")
    return number


@dataclass(frozen=True)
class NetworkProfile:
    """Connection defaults for one chain."""
    name: str
    chain_id: str
    lcd_endpoint: str
    rpc_endpoint: str
    ws_endpoint: str
    prefix: str = "cosmos"
    denom: str = "ATOM"
    min_denom: str = "uatom"
    decimals: int = 6
    gas_price: Decimal = DEFAULT_GAS_PRICE
    explorer: str = ""

    def __post_init__(self):
        if self.decimals < 0:
            raise ConfigurationError(f"decimals must be >= 0, got {self.decimals}")
        _check_endpoint("lcd_endpoint", self.lcd_endpoint, ("http", "https"))
        _check_endpoint("rpc_endpoint", self.rpc_endpoint, ("http", "https"))
        _check_endpoint("ws_endpoint", self.ws_endpoint, ("ws", "wss"))

    @property
    def validator_prefix(self) -> str:
        return f"{self.prefix}valoper"

    @property
    def consensus_prefix(self) -> str:
        return f"{self.prefix}valcons"


NETWORKS: Dict[str, NetworkProfile] = {
    "mainnet": NetworkProfile(
        name="mainnet",
        chain_id="cosmoshub-4",
        lcd_endpoint="https://rest.cosmos.directory/cosmoshub",
        rpc_endpoint="https://rpc.cosmos.directory/cosmoshub",
        ws_endpoint="wss://rpc.cosmos.directory/cosmoshub/websocket",
        explorer="https://www.mintscan.io/cosmos",
    ),
    "testnet": NetworkProfile(
        name="testnet",
        chain_id="theta-testnet-001",
        lcd_endpoint="https://rest.state-sync-01.theta-testnet.polypore.xyz",
        rpc_endpoint="https://rpc.state-sync-01.theta-testnet.polypore.xyz",
        ws_endpoint="wss://rpc.state-sync-01.theta-testnet.polypore.xyz/websocket",
        explorer="https://explorer.theta-testnet.polypore.xyz",
    ),
}


def get_network_profile(network: str, **overrides: Any) -> NetworkProfile:
    """Resolve a network profile by name.

    ``"custom"`` builds a profile from ``overrides``; unknown names fall back
    to mainnet.
    """
    if network == "custom":
        gas_price = overrides.get("gas_price")
        if gas_price is None:
            gas_price = DEFAULT_GAS_PRICE
        return NetworkProfile(
            name="custom",
            chain_id=overrides.get("chain_id") or "custom-chain",
            lcd_endpoint=overrides.get("lcd_endpoint") or "",
            rpc_endpoint=overrides.get("rpc_endpoint") or "",
            ws_endpoint=overrides.get("ws_endpoint") or "",
            prefix=overrides.get("prefix") or "cosmos",
            denom=overrides.get("denom") or "ATOM",
            min_denom=overrides.get("min_denom") or "uatom",
            decimals=overrides.get("decimals", 6),
            gas_price=_to_decimal("gas_price", gas_price),
            explorer=overrides.get("explorer") or "",
        )
    return NETWORKS.get(network, NETWORKS["mainnet"])


@dataclass(frozen=True)
class Credentials:
    """Connection and signing parameters supplied by the host.

    Build instances through ``Credentials.create`` (or ``from_mapping`` /
    ``from_env``) so that malformed values are rejected up front.
    """
    network: str = "mainnet"
    mnemonic: str = field(default="", repr=False)
    hd_path: str = DEFAULT_HD_PATH
    lcd_endpoint: Optional[str] = None
    rpc_endpoint: Optional[str] = None
    ws_endpoint: Optional[str] = None
    gas_price: Optional[Decimal] = None
    gas_adjustment: float = DEFAULT_GAS_ADJUSTMENT
    prefix: Optional[str] = None

    @classmethod
    def create(
        cls,
        network: str = "mainnet",
        mnemonic: str = "",
        hd_path: Optional[str] = None,
        lcd_endpoint: Optional[str] = None,
        rpc_endpoint: Optional[str] = None,
        ws_endpoint: Optional[str] = None,
        gas_price: Optional[Union[str, int, float, Decimal]] = None,
        gas_adjustment: Optional[float] = None,
        prefix: Optional[str] = None,
    ) -> "Credentials":
        """Validate and build credentials."""
        mnemonic = " ".join((mnemonic or "").split())
        if mnemonic and not Mnemonic("english").check(mnemonic):
            raise ConfigurationError("Invalid mnemonic phrase")

        hd_path = hd_path or DEFAULT_HD_PATH
        if not _HD_PATH_RE.match(hd_path):
            raise ConfigurationError(f"Malformed derivation path: {hd_path!r}")

        if prefix and not _PREFIX_RE.match(prefix):
            raise ConfigurationError(f"Invalid address prefix: {prefix!r}")

        price = None
        if gas_price is not None and gas_price != "":
            price = _to_decimal("gas_price", gas_price)
            if price < 0:
                raise ConfigurationError("gas_price must be >= 0")

        if gas_adjustment is None or gas_adjustment == "":
            adjustment = DEFAULT_GAS_ADJUSTMENT
        else:
            adjustment = float(_to_decimal("gas_adjustment", gas_adjustment))
        if adjustment <= 0:
            raise ConfigurationError("gas_adjustment must be > 0")

        credentials = cls(
            network=network or "mainnet",
            mnemonic=mnemonic,
            hd_path=hd_path,
            lcd_endpoint=lcd_endpoint or None,
            rpc_endpoint=rpc_endpoint or None,
            ws_endpoint=ws_endpoint or None,
            gas_price=price,
            gas_adjustment=adjustment,
            prefix=prefix or None,
        )
        # Resolve once so bad endpoints fail here rather than at first use
        _ = credentials.profile
        return credentials

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Credentials":
        """Build from the host's camelCase credential record."""
        return cls.create(
            network=data.get("network", "mainnet"),
            mnemonic=data.get("mnemonic", ""),
            hd_path=data.get("hdPath"),
            lcd_endpoint=data.get("lcdEndpoint"),
            rpc_endpoint=data.get("rpcEndpoint"),
            ws_endpoint=data.get("wsEndpoint"),
            gas_price=data.get("gasPrice"),
            gas_adjustment=data.get("gasAdjustment"),
            prefix=data.get("prefix"),
        )

    @classmethod
    def from_env(cls, env_prefix: str = "COSMOS_") -> "Credentials":
        """Build from environment variables (``COSMOS_NETWORK``, ``COSMOS_MNEMONIC``, ...)."""
        load_dotenv()

        def env(name: str) -> Optional[str]:
            return os.getenv(f"{env_prefix}{name}")

        return cls.create(
            network=env("NETWORK") or "mainnet",
            mnemonic=env("MNEMONIC") or "",
            hd_path=env("HD_PATH"),
            lcd_endpoint=env("LCD_ENDPOINT"),
            rpc_endpoint=env("RPC_ENDPOINT"),
            ws_endpoint=env("WS_ENDPOINT"),
            gas_price=env("GAS_PRICE"),
            gas_adjustment=env("GAS_ADJUSTMENT"),
            prefix=env("PREFIX"),
        )

    @property
    def profile(self) -> NetworkProfile:
        """Network profile with this caller's overrides applied."""
        if self.network == "custom":
            return get_network_profile(
                "custom",
                lcd_endpoint=self.lcd_endpoint,
                rpc_endpoint=self.rpc_endpoint,
                ws_endpoint=self.ws_endpoint,
                prefix=self.prefix,
                gas_price=self.gas_price,
            )
        base = get_network_profile(self.network)
        overrides: Dict[str, Any] = {}
        if self.lcd_endpoint:
            overrides["lcd_endpoint"] = self.lcd_endpoint
        if self.rpc_endpoint:
            overrides["rpc_endpoint"] = self.rpc_endpoint
        if self.ws_endpoint:
            overrides["ws_endpoint"] = self.ws_endpoint
        if self.prefix:
            overrides["prefix"] = self.prefix
        if self.gas_price is not None:
            overrides["gas_price"] = self.gas_price
        return replace(base, **overrides) if overrides else base
