"""Block and validator-set queries."""

from typing import Any

from .base import Params, ResourceModule, require_int


class BlockModule(ResourceModule):
    resource = "block"
    OPERATIONS = {
        "getLatestBlock": "get_latest_block",
        "getBlockByHeight": "get_block_by_height",
        "getBlockResults": "get_block_results",
        "getValidatorSet": "get_validator_set",
        "getLatestValidatorSet": "get_latest_validator_set",
        "getBlockchain": "get_blockchain",
    }

    async def get_latest_block(self, params: Params) -> Any:
        return await self.client.lcd.get_latest_block()

    async def get_block_by_height(self, params: Params) -> Any:
        return await self.client.lcd.get_block_by_height(require_int(params, "height"))

    async def get_block_results(self, params: Params) -> Any:
        return await self.client.rpc.get_block_results(require_int(params, "height"))

    async def get_validator_set(self, params: Params) -> Any:
        return await self.client.lcd.get_validator_set_by_height(require_int(params, "height"))

    async def get_latest_validator_set(self, params: Params) -> Any:
        return await self.client.lcd.get_latest_validator_set()

    async def get_blockchain(self, params: Params) -> Any:
        """Block metas between two heights, inclusive."""
        min_height = require_int(params, "minHeight")
        max_height = require_int(params, "maxHeight")
        if min_height > max_height:
            raise ValueError(f"minHeight {min_height} is above maxHeight {max_height}")
        return await self.client.rpc.get_blockchain_info(min_height, max_height)
