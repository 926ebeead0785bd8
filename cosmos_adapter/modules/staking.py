"""Staking module for validator queries and delegation operations."""

from typing import Any, Dict, Mapping

from ..constants import MODULE_PATHS, VALIDATOR_STATUS
from .base import Params, ResourceModule, coin_with_display, display_amount, optional, require


class StakingModule(ResourceModule):
    """Staking resource."""

    resource = "staking"
    OPERATIONS = {
        "getValidators": "get_validators",
        "getValidator": "get_validator",
        "delegate": "delegate",
        "undelegate": "undelegate",
        "redelegate": "redelegate",
        "getDelegation": "get_delegation",
        "getUnbondingDelegation": "get_unbonding_delegation",
        "getStakingPool": "get_staking_pool",
        "getStakingParams": "get_staking_params",
        "getValidatorDelegations": "get_validator_delegations",
    }

    def _parse_validator(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        """Parse validator data."""
        tokens = data.get("tokens", "0")
        return {
            "operatorAddress": data.get("operator_address", ""),
            "consensusPubkey": data.get("consensus_pubkey"),
            "jailed": data.get("jailed", False),
            "status": data.get("status"),
            "tokens": tokens,
            "tokensDisplay": display_amount(tokens, self.profile.min_denom, self.profile),
            "delegatorShares": data.get("delegator_shares", "0"),
            "description": data.get("description", {}),
            "commission": data.get("commission", {}),
        }

    async def get_validators(self, params: Params) -> Dict[str, Any]:
        """Get validators, bonded ones by default."""
        status = optional(params, "status", "BOND_STATUS_BONDED")
        if status not in VALIDATOR_STATUS:
            raise ValueError(f"Unknown validator status: {status}")
        validators = await self.client.lcd.get_all_pages(
            f"{MODULE_PATHS['staking']}/validators", "validators", {"status": status}
        )
        return {"validators": [self._parse_validator(v) for v in validators]}

    async def get_validator(self, params: Params) -> Dict[str, Any]:
        data = await self.client.lcd.get_validator(require(params, "validatorAddress"))
        validator = data["validator"]
        output = self._parse_validator(validator)
        output.update({
            "unbondingHeight": validator.get("unbonding_height"),
            "unbondingTime": validator.get("unbonding_time"),
            "minSelfDelegation": validator.get("min_self_delegation"),
        })
        return output

    async def delegate(self, params: Params) -> Dict[str, Any]:
        """Delegate tokens to a validator."""
        async with self.client.signer() as signer:
            result = await signer.delegate(
                require(params, "validatorAddress"),
                require(params, "amount"),
                memo=optional(params, "memo", ""),
            )
        return result.to_dict()

    async def undelegate(self, params: Params) -> Dict[str, Any]:
        """Undelegate tokens from a validator."""
        async with self.client.signer() as signer:
            result = await signer.undelegate(
                require(params, "validatorAddress"),
                require(params, "amount"),
                memo=optional(params, "memo", ""),
            )
        return result.to_dict()

    async def redelegate(self, params: Params) -> Dict[str, Any]:
        """Redelegate tokens from one validator to another."""
        async with self.client.signer() as signer:
            result = await signer.redelegate(
                require(params, "srcValidatorAddress"),
                require(params, "dstValidatorAddress"),
                require(params, "amount"),
                memo=optional(params, "memo", ""),
            )
        return result.to_dict()

    async def get_delegation(self, params: Params) -> Dict[str, Any]:
        data = await self.client.lcd.get_delegation(
            require(params, "delegatorAddress"), require(params, "validatorAddress")
        )
        response = data["delegation_response"]
        return {
            "delegatorAddress": response["delegation"]["delegator_address"],
            "validatorAddress": response["delegation"]["validator_address"],
            "shares": response["delegation"]["shares"],
            "balance": coin_with_display(response["balance"], self.profile),
        }

    async def get_unbonding_delegation(self, params: Params) -> Any:
        return await self.client.lcd.get_unbonding_delegations(require(params, "delegatorAddress"))

    async def get_staking_pool(self, params: Params) -> Dict[str, Any]:
        data = await self.client.lcd.get_staking_pool()
        pool = data["pool"]
        denom = self.profile.min_denom
        return {
            "notBondedTokens": pool["not_bonded_tokens"],
            "notBondedTokensDisplay": display_amount(pool["not_bonded_tokens"], denom, self.profile),
            "bondedTokens": pool["bonded_tokens"],
            "bondedTokensDisplay": display_amount(pool["bonded_tokens"], denom, self.profile),
        }

    async def get_staking_params(self, params: Params) -> Any:
        return await self.client.lcd.get_staking_params()

    async def get_validator_delegations(self, params: Params) -> Any:
        return await self.client.lcd.get_validator_delegations(require(params, "validatorAddress"))
