"""Account operations: balances, transfers and per-account staking views."""

from typing import Any, Dict

from .. import address
from .base import (
    Params,
    ResourceModule,
    coin_with_display,
    display_amount,
    format_balance,
    optional,
    require,
)


class AccountModule(ResourceModule):
    """Account resource."""

    resource = "account"
    OPERATIONS = {
        "getAccountInfo": "get_account_info",
        "getBalance": "get_balance",
        "getAllBalances": "get_all_balances",
        "transfer": "transfer",
        "transferToken": "transfer_token",
        "validateAddress": "validate_address",
        "getDelegations": "get_delegations",
        "getUnbonding": "get_unbonding",
        "getRedelegations": "get_redelegations",
        "getRewards": "get_rewards",
    }

    async def get_account_info(self, params: Params) -> Any:
        return await self.client.lcd.get_account(require(params, "address"))

    async def get_balance(self, params: Params) -> Dict[str, Any]:
        """Get balance for a specific denom (the native denom by default)."""
        denom = optional(params, "denom", self.profile.min_denom)
        data = await self.client.lcd.get_balance(require(params, "address"), denom)
        balance = data.get("balance") or {"denom": denom, "amount": "0"}
        output = coin_with_display(balance, self.profile)
        output["formatted"] = format_balance(balance["amount"], balance["denom"], self.profile)
        return output

    async def get_all_balances(self, params: Params) -> Dict[str, Any]:
        """Get all balances for an address."""
        data = await self.client.lcd.get_all_balances(require(params, "address"))
        return {
            "balances": [coin_with_display(b, self.profile) for b in data.get("balances", [])]
        }

    async def transfer(self, params: Params) -> Dict[str, Any]:
        """Send native tokens; ``amount`` is in display units."""
        async with self.client.signer() as signer:
            result = await signer.send_tokens(
                require(params, "toAddress"),
                require(params, "amount"),
                memo=optional(params, "memo", ""),
            )
        return result.to_dict()

    async def transfer_token(self, params: Params) -> Dict[str, Any]:
        """Send any denom; non-native amounts are in base units."""
        async with self.client.signer() as signer:
            result = await signer.send_tokens(
                require(params, "toAddress"),
                require(params, "amount"),
                denom=require(params, "denom"),
                memo=optional(params, "memo", ""),
            )
        return result.to_dict()

    async def validate_address(self, params: Params) -> Dict[str, Any]:
        addr = address.normalize_address(str(require(params, "address")))
        prefix = optional(params, "prefix", self.profile.prefix)
        return {"address": addr, "isValid": address.validate(addr, prefix), "prefix": prefix}

    async def get_delegations(self, params: Params) -> Dict[str, Any]:
        data = await self.client.lcd.get_delegations(require(params, "address"))
        delegations = []
        for entry in data.get("delegation_responses", []):
            delegations.append({
                "validatorAddress": entry["delegation"]["validator_address"],
                "shares": entry["delegation"]["shares"],
                "balance": coin_with_display(entry["balance"], self.profile),
            })
        return {"delegations": delegations}

    async def get_unbonding(self, params: Params) -> Any:
        return await self.client.lcd.get_unbonding_delegations(require(params, "address"))

    async def get_redelegations(self, params: Params) -> Any:
        return await self.client.lcd.get_redelegations(require(params, "address"))

    async def get_rewards(self, params: Params) -> Dict[str, Any]:
        data = await self.client.lcd.get_all_rewards(require(params, "address"))
        return {
            "rewards": data.get("rewards", []),
            "total": [
                {
                    "denom": t["denom"],
                    "amount": t["amount"],
                    "displayAmount": display_amount(t["amount"], t["denom"], self.profile),
                }
                for t in data.get("total", [])
            ],
        }
