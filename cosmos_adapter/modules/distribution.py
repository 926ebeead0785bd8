"""Distribution module for rewards and commission."""

from typing import Any, Dict, List, Mapping

from .base import Params, ResourceModule, display_amount, require


class DistributionModule(ResourceModule):
    """Distribution resource."""

    resource = "distribution"
    OPERATIONS = {
        "withdrawRewards": "withdraw_rewards",
        "getRewards": "get_rewards",
        "getValidatorRewards": "get_validator_rewards",
        "getWithdrawAddress": "get_withdraw_address",
        "getCommunityPool": "get_community_pool",
        "getValidatorCommission": "get_validator_commission",
    }

    def _dec_coins(self, coins: List[Mapping[str, Any]]) -> List[Dict[str, Any]]:
        return [
            {
                "denom": c["denom"],
                "amount": c["amount"],
                "displayAmount": display_amount(c["amount"], c["denom"], self.profile),
            }
            for c in coins
        ]

    async def withdraw_rewards(self, params: Params) -> Dict[str, Any]:
        """Withdraw delegation rewards from a validator."""
        async with self.client.signer() as signer:
            result = await signer.withdraw_rewards(
                require(params, "validatorAddress"),
                memo=params.get("memo") or "",
            )
        return result.to_dict()

    async def get_rewards(self, params: Params) -> Dict[str, Any]:
        """Get rewards for a delegator across all validators."""
        data = await self.client.lcd.get_all_rewards(require(params, "delegatorAddress"))
        return {
            "rewards": [
                {
                    "validatorAddress": r.get("validator_address"),
                    "reward": self._dec_coins(r.get("reward") or []),
                }
                for r in data.get("rewards") or []
            ],
            "total": self._dec_coins(data.get("total") or []),
        }

    async def get_validator_rewards(self, params: Params) -> Dict[str, Any]:
        data = await self.client.lcd.get_delegation_rewards(
            require(params, "delegatorAddress"), require(params, "validatorAddress")
        )
        return {"rewards": self._dec_coins(data.get("rewards") or [])}

    async def get_withdraw_address(self, params: Params) -> Any:
        return await self.client.lcd.get_withdraw_address(require(params, "delegatorAddress"))

    async def get_community_pool(self, params: Params) -> Dict[str, Any]:
        data = await self.client.lcd.get_community_pool()
        return {"pool": self._dec_coins(data.get("pool") or [])}

    async def get_validator_commission(self, params: Params) -> Dict[str, Any]:
        data = await self.client.lcd.get_validator_commission(require(params, "validatorAddress"))
        commission = (data.get("commission") or {}).get("commission") or []
        return {"commission": self._dec_coins(commission)}
