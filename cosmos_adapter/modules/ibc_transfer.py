"""IBC transfers and channel queries."""

from typing import Any, Dict

from .. import ibc
from .base import Params, ResourceModule, optional, require


class IbcTransferModule(ResourceModule):
    """ibcTransfer resource."""

    resource = "ibcTransfer"
    OPERATIONS = {
        "ibcTransfer": "ibc_transfer",
        "ibcTransferDirect": "ibc_transfer_direct",
        "getChannels": "get_channels",
        "getChannel": "get_channel",
        "getConnections": "get_connections",
        "getConnection": "get_connection",
        "getClients": "get_clients",
        "getDenomTrace": "get_denom_trace",
        "getDenomTraces": "get_denom_traces",
        "getAvailableDestinations": "get_available_destinations",
        "getChannelInfo": "get_channel_info",
    }

    async def ibc_transfer(self, params: Params) -> Dict[str, Any]:
        """Transfer to a destination chain from the route table."""
        async with self.client.signer() as signer:
            result = await signer.ibc_transfer(
                require(params, "destinationChain"),
                require(params, "receiver"),
                require(params, "amount"),
                denom=optional(params, "denom"),
                memo=optional(params, "memo", ""),
                timeout_minutes=float(optional(params, "timeoutMinutes", ibc.DEFAULT_TIMEOUT_MINUTES)),
            )
        return result.to_dict()

    async def ibc_transfer_direct(self, params: Params) -> Dict[str, Any]:
        """Transfer over an explicit source channel."""
        async with self.client.signer() as signer:
            result = await signer.ibc_transfer_direct(
                require(params, "sourceChannel"),
                optional(params, "sourcePort", ibc.DEFAULT_PORT),
                require(params, "receiver"),
                require(params, "amount"),
                denom=optional(params, "denom"),
                memo=optional(params, "memo", ""),
                timeout_minutes=float(optional(params, "timeoutMinutes", ibc.DEFAULT_TIMEOUT_MINUTES)),
            )
        return result.to_dict()

    async def get_channels(self, params: Params) -> Any:
        return await self.client.lcd.get_ibc_channels()

    async def get_channel(self, params: Params) -> Any:
        return await self.client.lcd.get_ibc_channel(
            ibc.format_channel_id(require(params, "channelId")),
            ibc.format_port_id(optional(params, "portId")),
        )

    async def get_connections(self, params: Params) -> Any:
        return await self.client.lcd.get_ibc_connections()

    async def get_connection(self, params: Params) -> Any:
        return await self.client.lcd.get_ibc_connection(require(params, "connectionId"))

    async def get_clients(self, params: Params) -> Any:
        return await self.client.lcd.get_ibc_clients()

    async def get_denom_trace(self, params: Params) -> Any:
        denom = require(params, "hash")
        parsed = ibc.parse_ibc_denom(denom)
        return await self.client.lcd.get_denom_trace(parsed["hash"] if parsed else denom)

    async def get_denom_traces(self, params: Params) -> Any:
        return await self.client.lcd.get_denom_traces()

    async def get_available_destinations(self, params: Params) -> Dict[str, Any]:
        destinations = []
        for entry in ibc.available_destinations():
            route = ibc.get_route(entry["value"])
            destinations.append({
                **entry,
                "channel": route.channel,
                "chainId": route.chain_id,
                "prefix": route.prefix,
            })
        return {"destinations": destinations, "count": len(destinations)}

    async def get_channel_info(self, params: Params) -> Dict[str, str]:
        return ibc.get_route(require(params, "destination")).to_dict()
