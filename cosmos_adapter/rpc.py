"""JSON-RPC client for the consensus node (Tendermint/CometBFT)."""

import itertools
import logging
import time
from typing import Any, Dict, Optional

import httpx

from .config import Credentials, NetworkProfile
from .exceptions import ProtocolError, RemoteRpcError, RequestTimeout

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


def _height_params(height: Optional[int]) -> Dict[str, str]:
    return {"height": str(height)} if height else {}


class TendermintClient:
    """Client for the consensus node's JSON-RPC endpoint."""

    def __init__(
        self,
        endpoint: str,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.endpoint = endpoint.rstrip("/")
        self._http_client = httpx.AsyncClient(
            headers={"Content-Type": "application/json"},
            timeout=timeout,
            transport=transport,
        )
        self._ids = itertools.count(int(time.time() * 1000))

    @classmethod
    def from_credentials(cls, credentials: Credentials, **kwargs: Any) -> "TendermintClient":
        return cls.from_profile(credentials.profile, **kwargs)

    @classmethod
    def from_profile(cls, profile: NetworkProfile, **kwargs: Any) -> "TendermintClient":
        return cls(profile.rpc_endpoint, **kwargs)

    async def call(self, method: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """Make a JSON-RPC 2.0 call and return its ``result``."""
        request_id = next(self._ids)
        payload = {
            "jsonrpc": "2.0",
            "id": request_id,
            "method": method,
            "params": params or {},
        }
        logger.debug(f"RPC {method} id={request_id}")

        try:
            response = await self._http_client.post(self.endpoint, json=payload)
        except httpx.TimeoutException as e:
            raise RequestTimeout(f"RPC {method} timed out") from e
        except httpx.TransportError as e:
            raise RemoteRpcError(str(e) or type(e).__name__, method=method) from e

        try:
            body = response.json()
        except ValueError:
            if response.is_error:
                raise RemoteRpcError(
                    f"HTTP {response.status_code}: {response.text}", code=response.status_code, method=method
                ) from None
            raise ProtocolError(f"RPC {method} returned a non-JSON body") from None

        if not isinstance(body, dict):
            raise ProtocolError(f"RPC {method} returned {type(body).__name__}, expected an object")

        error = body.get("error")
        if error:
            if isinstance(error, dict):
                message = error.get("message") or "JSON-RPC error"
                if error.get("data"):
                    message = f"{message}: {error['data']}"
                raise RemoteRpcError(message, code=error.get("code"), data=error.get("data"), method=method)
            raise RemoteRpcError(str(error), method=method)

        if response.is_error:
            raise RemoteRpcError(f"HTTP {response.status_code}", code=response.status_code, method=method)

        if "id" in body and body["id"] != request_id and str(body["id"]) != str(request_id):
            raise ProtocolError(
                f"RPC {method} response id {body['id']!r} does not match request id {request_id}"
            )
        if "result" not in body:
            raise ProtocolError(f"RPC {method} response has neither result nor error")
        return body["result"]

    async def get_status(self) -> Any:
        return await self.call("status")

    async def get_net_info(self) -> Any:
        return await self.call("net_info")

    async def get_health(self) -> Any:
        return await self.call("health")

    async def get_genesis(self) -> Any:
        return await self.call("genesis")

    async def get_genesis_chunked(self, chunk: int) -> Any:
        return await self.call("genesis_chunked", {"chunk": str(chunk)})

    async def get_block(self, height: Optional[int] = None) -> Any:
        return await self.call("block", _height_params(height))

    async def get_block_results(self, height: Optional[int] = None) -> Any:
        return await self.call("block_results", _height_params(height))

    async def get_block_by_hash(self, block_hash: str) -> Any:
        return await self.call("block_by_hash", {"hash": block_hash})

    async def get_blockchain_info(self, min_height: int, max_height: int) -> Any:
        return await self.call(
            "blockchain",
            {"minHeight": str(min_height), "maxHeight": str(max_height)},
        )

    async def get_commit(self, height: Optional[int] = None) -> Any:
        return await self.call("commit", _height_params(height))

    async def get_validators(
        self, height: Optional[int] = None, page: int = 1, per_page: int = 100
    ) -> Any:
        params = {"page": str(page), "per_page": str(per_page)}
        params.update(_height_params(height))
        return await self.call("validators", params)

    async def get_tx(self, tx_hash: str, prove: bool = False) -> Any:
        """Look up a transaction; ``tx_hash`` is base64 as the JSON-RPC interface expects."""
        return await self.call("tx", {"hash": tx_hash, "prove": prove})

    async def search_tx(
        self,
        query: str,
        page: int = 1,
        per_page: int = 100,
        order_by: str = "asc",
    ) -> Any:
        return await self.call(
            "tx_search",
            {
                "query": query,
                "page": str(page),
                "per_page": str(per_page),
                "order_by": order_by,
            },
        )

    async def get_consensus_state(self) -> Any:
        return await self.call("consensus_state")

    async def get_consensus_params(self, height: Optional[int] = None) -> Any:
        return await self.call("consensus_params", _height_params(height))

    async def get_unconfirmed_txs(self, limit: int = 30) -> Any:
        return await self.call("unconfirmed_txs", {"limit": str(limit)})

    async def get_num_unconfirmed_txs(self) -> Any:
        return await self.call("num_unconfirmed_txs")

    async def broadcast_tx_sync(self, tx: str) -> Any:
        return await self.call("broadcast_tx_sync", {"tx": tx})

    async def broadcast_tx_async(self, tx: str) -> Any:
        return await self.call("broadcast_tx_async", {"tx": tx})

    async def broadcast_tx_commit(self, tx: str) -> Any:
        return await self.call("broadcast_tx_commit", {"tx": tx})

    async def check_tx(self, tx: str) -> Any:
        return await self.call("check_tx", {"tx": tx})

    async def abci_query(
        self,
        path: str,
        data: Optional[str] = None,
        height: Optional[int] = None,
        prove: bool = False,
    ) -> Any:
        params: Dict[str, Any] = {"path": path, "prove": prove}
        if data:
            params["data"] = data
        params.update(_height_params(height))
        return await self.call("abci_query", params)

    async def abci_info(self) -> Any:
        return await self.call("abci_info")

    async def close(self) -> None:
        await self._http_client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
