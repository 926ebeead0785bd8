"""Auth module queries."""

from typing import Any

from .base import Params, ResourceModule, require


class AuthModule(ResourceModule):
    resource = "auth"
    OPERATIONS = {
        "getAccount": "get_account",
        "getAccounts": "get_accounts",
        "getModuleAccounts": "get_module_accounts",
        "getModuleAccount": "get_module_account",
        "getParams": "get_params",
    }

    async def get_account(self, params: Params) -> Any:
        return await self.client.lcd.get_account(require(params, "address"))

    async def get_accounts(self, params: Params) -> Any:
        return await self.client.lcd.get_accounts()

    async def get_module_accounts(self, params: Params) -> Any:
        return await self.client.lcd.get_module_accounts()

    async def get_module_account(self, params: Params) -> Any:
        return await self.client.lcd.get_module_account(require(params, "moduleName"))

    async def get_params(self, params: Params) -> Any:
        return await self.client.lcd.get_auth_params()
