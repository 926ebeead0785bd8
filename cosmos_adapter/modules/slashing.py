"""Slashing module queries."""

from typing import Any

from .. import address
from ..exceptions import InvalidAddress
from .base import Params, ResourceModule, require


class SlashingModule(ResourceModule):
    resource = "slashing"
    OPERATIONS = {
        "getSigningInfos": "get_signing_infos",
        "getSigningInfo": "get_signing_info",
        "getSlashingParams": "get_slashing_params",
    }

    async def get_signing_infos(self, params: Params) -> Any:
        return await self.client.lcd.get_signing_infos()

    async def get_signing_info(self, params: Params) -> Any:
        """Signing info for a validator consensus address (``cosmosvalcons1...``)."""
        cons_address = require(params, "consAddress")
        if not address.validate(cons_address, self.profile.consensus_prefix):
            raise InvalidAddress(f"Invalid consensus address: {cons_address}")
        return await self.client.lcd.get_signing_info(cons_address)

    async def get_slashing_params(self, params: Params) -> Any:
        return await self.client.lcd.get_slashing_params()
