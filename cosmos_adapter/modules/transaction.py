"""Transaction lookup, search and raw broadcast."""

from typing import Any

from ..types import BroadcastMode
from .base import Params, ResourceModule, optional, require, require_int


class TransactionModule(ResourceModule):
    """Transaction resource."""

    resource = "transaction"
    OPERATIONS = {
        "getTx": "get_tx",
        "getTxsByEvents": "get_txs_by_events",
        "searchTx": "search_tx",
        "getTxsByHeight": "get_txs_by_height",
        "simulate": "simulate",
        "broadcastTx": "broadcast_tx",
    }

    async def get_tx(self, params: Params) -> Any:
        return await self.client.lcd.get_tx(require(params, "hash"))

    async def get_txs_by_events(self, params: Params) -> Any:
        return await self.client.lcd.get_txs_by_events(require(params, "events"))

    async def search_tx(self, params: Params) -> Any:
        """Search transactions through the consensus node's tx index."""
        return await self.client.rpc.search_tx(
            require(params, "query"),
            page=int(optional(params, "page", 1)),
            per_page=int(optional(params, "perPage", 100)),
            order_by=optional(params, "orderBy", "asc"),
        )

    async def get_txs_by_height(self, params: Params) -> Any:
        return await self.client.lcd.get_txs_by_height(require_int(params, "height"))

    async def simulate(self, params: Params) -> Any:
        """Simulate base64 encoded, already signed transaction bytes."""
        return await self.client.lcd.simulate(require(params, "txBytes"))

    async def broadcast_tx(self, params: Params) -> Any:
        """Broadcast base64 encoded transaction bytes as given."""
        mode = BroadcastMode(optional(params, "mode", BroadcastMode.SYNC.value))
        return await self.client.lcd.broadcast_tx(require(params, "txBytes"), mode.value)
