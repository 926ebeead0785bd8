"""Bank module for supply and denomination queries."""

from typing import Any

from .base import Params, ResourceModule, require


class BankModule(ResourceModule):
    """Bank resource."""

    resource = "bank"
    OPERATIONS = {
        "getTotalSupply": "get_total_supply",
        "getSupplyOf": "get_supply_of",
        "getDenomMetadata": "get_denom_metadata",
        "getAllDenomMetadata": "get_all_denom_metadata",
        "getSpendableBalances": "get_spendable_balances",
        "getSendEnabled": "get_send_enabled",
    }

    async def get_total_supply(self, params: Params) -> Any:
        """Get total supply of all denoms."""
        return await self.client.lcd.get_total_supply()

    async def get_supply_of(self, params: Params) -> Any:
        return await self.client.lcd.get_supply_of(require(params, "denom"))

    async def get_denom_metadata(self, params: Params) -> Any:
        return await self.client.lcd.get_denom_metadata(require(params, "denom"))

    async def get_all_denom_metadata(self, params: Params) -> Any:
        return await self.client.lcd.get_all_denom_metadata()

    async def get_spendable_balances(self, params: Params) -> Any:
        return await self.client.lcd.get_spendable_balances(require(params, "address"))

    async def get_send_enabled(self, params: Params) -> Any:
        return await self.client.lcd.get_send_enabled()
