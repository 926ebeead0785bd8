"""Mint module queries."""

from typing import Any

from .base import Params, ResourceModule


class MintModule(ResourceModule):
    resource = "mint"
    OPERATIONS = {
        "getInflation": "get_inflation",
        "getAnnualProvisions": "get_annual_provisions",
        "getMintParams": "get_mint_params",
    }

    async def get_inflation(self, params: Params) -> Any:
        return await self.client.lcd.get_inflation()

    async def get_annual_provisions(self, params: Params) -> Any:
        return await self.client.lcd.get_annual_provisions()

    async def get_mint_params(self, params: Params) -> Any:
        return await self.client.lcd.get_mint_params()
