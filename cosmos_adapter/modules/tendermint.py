"""Consensus node status, network and mempool queries."""

from typing import Any

from .base import Params, ResourceModule, optional


class TendermintModule(ResourceModule):
    resource = "tendermint"
    OPERATIONS = {
        "getNodeInfo": "get_node_info",
        "getSyncStatus": "get_sync_status",
        "getNetInfo": "get_net_info",
        "getHealth": "get_health",
        "getStatus": "get_status",
        "getGenesis": "get_genesis",
        "getConsensusState": "get_consensus_state",
        "getConsensusParams": "get_consensus_params",
        "getUnconfirmedTxs": "get_unconfirmed_txs",
        "abciInfo": "abci_info",
    }

    async def get_node_info(self, params: Params) -> Any:
        return await self.client.lcd.get_node_info()

    async def get_sync_status(self, params: Params) -> Any:
        return await self.client.lcd.get_sync_status()

    async def get_net_info(self, params: Params) -> Any:
        return await self.client.rpc.get_net_info()

    async def get_health(self, params: Params) -> Any:
        return await self.client.rpc.get_health()

    async def get_status(self, params: Params) -> Any:
        return await self.client.rpc.get_status()

    async def get_genesis(self, params: Params) -> Any:
        return await self.client.rpc.get_genesis()

    async def get_consensus_state(self, params: Params) -> Any:
        return await self.client.rpc.get_consensus_state()

    async def get_consensus_params(self, params: Params) -> Any:
        height = optional(params, "height")
        return await self.client.rpc.get_consensus_params(int(height) if height else None)

    async def get_unconfirmed_txs(self, params: Params) -> Any:
        return await self.client.rpc.get_unconfirmed_txs(int(optional(params, "limit", 30)))

    async def abci_info(self, params: Params) -> Any:
        return await self.client.rpc.abci_info()
