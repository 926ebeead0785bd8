"""REST (LCD) query gateway."""

import logging
from typing import Any, Dict, List, Optional

import httpx

from .config import Credentials, NetworkProfile
from .constants import MODULE_PATHS
from .exceptions import ProtocolError, RemoteQueryError, RequestTimeout

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0
DEFAULT_PAGE_LIMIT = 100

BANK = MODULE_PATHS["bank"]
AUTH = MODULE_PATHS["auth"]
STAKING = MODULE_PATHS["staking"]
DISTRIBUTION = MODULE_PATHS["distribution"]
GOV = MODULE_PATHS["gov"]
SLASHING = MODULE_PATHS["slashing"]
MINT = MODULE_PATHS["mint"]
TX = MODULE_PATHS["tx"]
TENDERMINT = MODULE_PATHS["tendermint"]


class LcdClient:
    """Client for the chain's REST query interface."""

    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the client against ``base_url``."""
        self.base_url = base_url.rstrip("/")
        self._http_client = httpx.AsyncClient(
            base_url=self.base_url,
            headers={"Content-Type": "application/json"},
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_credentials(cls, credentials: Credentials, **kwargs: Any) -> "LcdClient":
        return cls.from_profile(credentials.profile, **kwargs)

    @classmethod
    def from_profile(cls, profile: NetworkProfile, **kwargs: Any) -> "LcdClient":
        return cls(profile.lcd_endpoint, **kwargs)

    async def request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        data: Any = None,
    ) -> Any:
        """Issue one request and return the decoded JSON body."""
        logger.debug(f"LCD {method} {path} params={params}")
        try:
            response = await self._http_client.request(method, path, params=params, json=data)
        except httpx.TimeoutException as e:
            raise RequestTimeout(f"Query {path} timed out") from e
        except httpx.TransportError as e:
            raise RemoteQueryError(str(e) or type(e).__name__, path=path) from e

        if response.is_error:
            raise RemoteQueryError(_error_message(response), status=response.status_code, path=path)
        try:
            return response.json()
        except ValueError as e:
            raise ProtocolError(f"Query {path} returned a non-JSON body") from e

    async def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """Make GET request to REST API."""
        return await self.request("GET", path, params=params)

    async def post(self, path: str, data: Any = None) -> Any:
        """Make POST request to REST API."""
        return await self.request("POST", path, data=data)

    async def get_all_pages(
        self,
        path: str,
        result_key: str,
        params: Optional[Dict[str, Any]] = None,
        limit: int = DEFAULT_PAGE_LIMIT,
    ) -> List[Any]:
        """Follow ``pagination.next_key`` until exhausted, concatenating ``result_key`` arrays.

        A server that hands back a cursor it already returned is treated as a
        protocol violation rather than followed forever.
        """
        results: List[Any] = []
        seen_keys = set()
        next_key: Optional[str] = None

        while True:
            query = dict(params or {})
            query["pagination.limit"] = str(limit)
            if next_key:
                query["pagination.key"] = next_key

            page = await self.get(path, query)
            results.extend(page.get(result_key) or [])

            next_key = (page.get("pagination") or {}).get("next_key")
            if not next_key:
                return results
            if next_key in seen_keys:
                raise ProtocolError(
                    f"Pagination for {path} repeated cursor {next_key!r}"
                )
            seen_keys.add(next_key)
            logger.debug(f"LCD {path}: {len(results)} results, following next_key")

    # Bank module
    async def get_balance(self, address: str, denom: str) -> Any:
        return await self.get(f"{BANK}/balances/{address}/by_denom", {"denom": denom})

    async def get_all_balances(self, address: str) -> Any:
        return await self.get(f"{BANK}/balances/{address}")

    async def get_total_supply(self) -> Any:
        return await self.get(f"{BANK}/supply")

    async def get_supply_of(self, denom: str) -> Any:
        return await self.get(f"{BANK}/supply/by_denom", {"denom": denom})

    async def get_denom_metadata(self, denom: str) -> Any:
        return await self.get(f"{BANK}/denoms_metadata/{denom}")

    async def get_all_denom_metadata(self) -> Any:
        return await self.get(f"{BANK}/denoms_metadata")

    async def get_spendable_balances(self, address: str) -> Any:
        return await self.get(f"{BANK}/spendable_balances/{address}")

    async def get_send_enabled(self) -> Any:
        return await self.get(f"{BANK}/send_enabled")

    # Auth module
    async def get_account(self, address: str) -> Any:
        return await self.get(f"{AUTH}/accounts/{address}")

    async def get_accounts(self) -> Any:
        return await self.get(f"{AUTH}/accounts")

    async def get_module_accounts(self) -> Any:
        return await self.get(f"{AUTH}/module_accounts")

    async def get_module_account(self, name: str) -> Any:
        return await self.get(f"{AUTH}/module_accounts/{name}")

    async def get_auth_params(self) -> Any:
        return await self.get(f"{AUTH}/params")

    # Staking module
    async def get_validators(self, status: Optional[str] = None) -> Any:
        params = {"status": status} if status else None
        return await self.get(f"{STAKING}/validators", params)

    async def get_validator(self, validator_addr: str) -> Any:
        return await self.get(f"{STAKING}/validators/{validator_addr}")

    async def get_validator_delegations(self, validator_addr: str) -> Any:
        return await self.get(f"{STAKING}/validators/{validator_addr}/delegations")

    async def get_delegations(self, delegator_addr: str) -> Any:
        return await self.get(f"{STAKING}/delegations/{delegator_addr}")

    async def get_delegation(self, delegator_addr: str, validator_addr: str) -> Any:
        return await self.get(
            f"{STAKING}/validators/{validator_addr}/delegations/{delegator_addr}"
        )

    async def get_unbonding_delegations(self, delegator_addr: str) -> Any:
        return await self.get(f"{STAKING}/delegators/{delegator_addr}/unbonding_delegations")

    async def get_redelegations(self, delegator_addr: str) -> Any:
        return await self.get(f"{STAKING}/delegators/{delegator_addr}/redelegations")

    async def get_staking_pool(self) -> Any:
        return await self.get(f"{STAKING}/pool")

    async def get_staking_params(self) -> Any:
        return await self.get(f"{STAKING}/params")

    # Distribution module
    async def get_delegation_rewards(self, delegator_addr: str, validator_addr: str) -> Any:
        return await self.get(
            f"{DISTRIBUTION}/delegators/{delegator_addr}/rewards/{validator_addr}"
        )

    async def get_all_rewards(self, delegator_addr: str) -> Any:
        return await self.get(f"{DISTRIBUTION}/delegators/{delegator_addr}/rewards")

    async def get_withdraw_address(self, delegator_addr: str) -> Any:
        return await self.get(f"{DISTRIBUTION}/delegators/{delegator_addr}/withdraw_address")

    async def get_community_pool(self) -> Any:
        return await self.get(f"{DISTRIBUTION}/community_pool")

    async def get_validator_commission(self, validator_addr: str) -> Any:
        return await self.get(f"{DISTRIBUTION}/validators/{validator_addr}/commission")

    # Governance module
    async def get_proposals(self, status: Optional[str] = None) -> Any:
        params = {"proposal_status": status} if status else None
        return await self.get(f"{GOV}/proposals", params)

    async def get_proposal(self, proposal_id: int) -> Any:
        return await self.get(f"{GOV}/proposals/{proposal_id}")

    async def get_proposal_deposits(self, proposal_id: int) -> Any:
        return await self.get(f"{GOV}/proposals/{proposal_id}/deposits")

    async def get_proposal_votes(self, proposal_id: int) -> Any:
        return await self.get(f"{GOV}/proposals/{proposal_id}/votes")

    async def get_proposal_tally(self, proposal_id: int) -> Any:
        return await self.get(f"{GOV}/proposals/{proposal_id}/tally")

    async def get_vote(self, proposal_id: int, voter: str) -> Any:
        return await self.get(f"{GOV}/proposals/{proposal_id}/votes/{voter}")

    async def get_gov_params(self, params_type: str = "voting") -> Any:
        return await self.get(f"{GOV}/params/{params_type}")

    # IBC module
    async def get_ibc_channels(self) -> Any:
        return await self.get("/ibc/core/channel/v1/channels")

    async def get_ibc_channel(self, channel_id: str, port_id: str = "transfer") -> Any:
        return await self.get(f"/ibc/core/channel/v1/channels/{channel_id}/ports/{port_id}")

    async def get_ibc_connections(self) -> Any:
        return await self.get("/ibc/core/connection/v1/connections")

    async def get_ibc_connection(self, connection_id: str) -> Any:
        return await self.get(f"/ibc/core/connection/v1/connections/{connection_id}")

    async def get_ibc_clients(self) -> Any:
        return await self.get("/ibc/core/client/v1/client_states")

    async def get_denom_trace(self, hash_: str) -> Any:
        return await self.get(f"/ibc/apps/transfer/v1/denom_traces/{hash_}")

    async def get_denom_traces(self) -> Any:
        return await self.get("/ibc/apps/transfer/v1/denom_traces")

    # Slashing module
    async def get_signing_infos(self) -> Any:
        return await self.get(f"{SLASHING}/signing_infos")

    async def get_signing_info(self, cons_address: str) -> Any:
        return await self.get(f"{SLASHING}/signing_infos/{cons_address}")

    async def get_slashing_params(self) -> Any:
        return await self.get(f"{SLASHING}/params")

    # Mint module
    async def get_inflation(self) -> Any:
        return await self.get(f"{MINT}/inflation")

    async def get_annual_provisions(self) -> Any:
        return await self.get(f"{MINT}/annual_provisions")

    async def get_mint_params(self) -> Any:
        return await self.get(f"{MINT}/params")

    # Transactions
    async def get_tx(self, tx_hash: str) -> Any:
        return await self.get(f"{TX}/txs/{tx_hash}")

    async def get_txs_by_events(self, events: str) -> Any:
        return await self.get(f"{TX}/txs", {"events": events})

    async def get_txs_by_height(self, height: int) -> Any:
        return await self.get(f"{TX}/txs/block/{height}")

    async def simulate(self, tx_bytes: str) -> Any:
        """Simulate base64 encoded transaction bytes."""
        return await self.post(f"{TX}/simulate", {"tx_bytes": tx_bytes})

    async def broadcast_tx(self, tx_bytes: str, mode: str = "BROADCAST_MODE_SYNC") -> Any:
        return await self.post(f"{TX}/txs", {"tx_bytes": tx_bytes, "mode": mode})

    # Tendermint service
    async def get_node_info(self) -> Any:
        return await self.get(f"{TENDERMINT}/node_info")

    async def get_sync_status(self) -> Any:
        return await self.get(f"{TENDERMINT}/syncing")

    async def get_latest_block(self) -> Any:
        return await self.get(f"{TENDERMINT}/blocks/latest")

    async def get_block_by_height(self, height: int) -> Any:
        return await self.get(f"{TENDERMINT}/blocks/{height}")

    async def get_latest_validator_set(self) -> Any:
        return await self.get(f"{TENDERMINT}/validatorsets/latest")

    async def get_validator_set_by_height(self, height: int) -> Any:
        return await self.get(f"{TENDERMINT}/validatorsets/{height}")

    async def get_height(self) -> int:
        """Get current block height."""
        data = await self.get_latest_block()
        block = data.get("sdk_block") or data.get("block") or {}
        return int(block["header"]["height"])

    async def get_chain_id(self) -> str:
        """Get chain ID."""
        data = await self.get_node_info()
        return data["default_node_info"]["network"]

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._http_client.aclose()

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict):
        return str(body.get("message") or body.get("error") or body)
    return str(body)
