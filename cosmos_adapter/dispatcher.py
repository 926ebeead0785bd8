"""Routes (resource, operation) requests from the host onto resource modules."""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Type, Union

import httpx

from .client import SigningClient
from .config import Credentials
from .exceptions import UnknownOperation
from .lcd import LcdClient
from .modules import (
    AccountModule,
    AuthModule,
    BankModule,
    BlockModule,
    DistributionModule,
    GovernanceModule,
    IbcTransferModule,
    MintModule,
    ResourceModule,
    SlashingModule,
    StakingModule,
    TendermintModule,
    TransactionModule,
)
from .rpc import TendermintClient

logger = logging.getLogger(__name__)


class Resource(str, Enum):
    ACCOUNT = "account"
    STAKING = "staking"
    DISTRIBUTION = "distribution"
    GOVERNANCE = "governance"
    IBC_TRANSFER = "ibcTransfer"
    BANK = "bank"
    AUTH = "auth"
    SLASHING = "slashing"
    MINT = "mint"
    TRANSACTION = "transaction"
    BLOCK = "block"
    TENDERMINT = "tendermint"


MODULES: Dict[Resource, Type[ResourceModule]] = {
    Resource.ACCOUNT: AccountModule,
    Resource.STAKING: StakingModule,
    Resource.DISTRIBUTION: DistributionModule,
    Resource.GOVERNANCE: GovernanceModule,
    Resource.IBC_TRANSFER: IbcTransferModule,
    Resource.BANK: BankModule,
    Resource.AUTH: AuthModule,
    Resource.SLASHING: SlashingModule,
    Resource.MINT: MintModule,
    Resource.TRANSACTION: TransactionModule,
    Resource.BLOCK: BlockModule,
    Resource.TENDERMINT: TendermintModule,
}

_unrouted = [r.value for r in Resource if r not in MODULES]
if _unrouted:
    raise TypeError(f"Resources without a module: {_unrouted}")


def operations_for(resource: Union[Resource, str]) -> List[str]:
    """Operation names accepted for ``resource``."""
    return list(MODULES[_resource(resource)].OPERATIONS)


def _resource(value: Union[Resource, str]) -> Resource:
    try:
        return Resource(value)
    except ValueError:
        raise UnknownOperation(str(value)) from None


@dataclass(frozen=True)
class OperationRequest:
    """One validated (resource, operation) call with its parameters."""
    resource: Resource
    operation: str
    params: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def create(
        cls,
        resource: Union[Resource, str],
        operation: str,
        params: Optional[Mapping[str, Any]] = None,
    ) -> "OperationRequest":
        resolved = _resource(resource)
        if operation not in MODULES[resolved].OPERATIONS:
            raise UnknownOperation(resolved.value, operation)
        return cls(resolved, operation, dict(params or {}))


class Dispatcher:
    """Executes host requests against one set of credentials.

    Query and RPC gateways are opened on first use and shared by every
    request; each signing operation gets its own ``SigningClient``.
    """

    def __init__(
        self,
        credentials: Credentials,
        lcd: Optional[LcdClient] = None,
        rpc: Optional[TendermintClient] = None,
        signer_factory: Optional[Callable[[], SigningClient]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.credentials = credentials
        self.profile = credentials.profile
        self._transport = transport
        self._lcd = lcd
        self._rpc = rpc
        self._owns_lcd = lcd is None
        self._owns_rpc = rpc is None
        self._signer_factory = signer_factory
        self._modules = {resource: module(self) for resource, module in MODULES.items()}

    @property
    def lcd(self) -> LcdClient:
        if self._lcd is None:
            self._lcd = LcdClient.from_profile(self.profile, transport=self._transport)
        return self._lcd

    @property
    def rpc(self) -> TendermintClient:
        if self._rpc is None:
            self._rpc = TendermintClient.from_profile(self.profile, transport=self._transport)
        return self._rpc

    def signer(self) -> SigningClient:
        """New signing client; use it with ``async with``."""
        if self._signer_factory is not None:
            return self._signer_factory()
        return SigningClient(self.credentials, transport=self._transport)

    async def dispatch(self, request: OperationRequest) -> Any:
        logger.debug(f"Dispatching {request.resource.value}.{request.operation}")
        return await self._modules[request.resource].run(request.operation, request.params)

    async def execute(
        self,
        resource: Union[Resource, str],
        operation: str,
        items: Sequence[Mapping[str, Any]],
        continue_on_fail: bool = False,
    ) -> List[Any]:
        """Run one operation for every parameter mapping in ``items``.

        With ``continue_on_fail`` a failing item produces
        ``{"error": message, "pairedItem": index}`` and the batch goes on;
        otherwise the first error propagates.
        """
        name = f"{OperationRequest.create(resource, operation).resource.value}.{operation}"

        results: List[Any] = []
        for index, params in enumerate(items):
            try:
                request = OperationRequest.create(resource, operation, params)
                results.append(await self.dispatch(request))
            except Exception as e:
                if not continue_on_fail:
                    raise
                logger.warning(f"{name} failed for item {index}: {e}")
                results.append({"error": str(e), "pairedItem": index})
        return results

    async def close(self) -> None:
        """Close gateways this dispatcher opened."""
        if self._owns_lcd and self._lcd is not None:
            await self._lcd.close()
            self._lcd = None
        if self._owns_rpc and self._rpc is not None:
            await self._rpc.close()
            self._rpc = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
