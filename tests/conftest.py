"""Shared fixtures."""

import hashlib
import json

import bech32
import httpx
import pytest

from cosmos_adapter.config import Credentials

MNEMONIC = (
    "abandon abandon abandon abandon abandon abandon "
    "abandon abandon abandon abandon abandon about"
)

requires_ripemd160 = pytest.mark.skipif(
    "ripemd160" not in hashlib.algorithms_available,
    reason="hashlib build lacks ripemd160",
)


def make_address(prefix: str, payload: bytes = bytes(range(20))) -> str:
    return bech32.bech32_encode(prefix, bech32.convertbits(payload, 8, 5))


@pytest.fixture
def mnemonic():
    return MNEMONIC


@pytest.fixture
def cosmos_address():
    return make_address("cosmos")


@pytest.fixture
def validator_address():
    return make_address("cosmosvaloper", bytes(range(100, 120)))


@pytest.fixture
def credentials():
    return Credentials.create(
        network="custom",
        mnemonic=MNEMONIC,
        lcd_endpoint="http://lcd.test",
        rpc_endpoint="http://rpc.test",
        ws_endpoint="ws://rpc.test/websocket",
    )


@pytest.fixture
def read_only_credentials():
    return Credentials.create(
        network="custom",
        lcd_endpoint="http://lcd.test",
        rpc_endpoint="http://rpc.test",
        ws_endpoint="ws://rpc.test/websocket",
    )


class FakeChain:
    """In-memory REST and JSON-RPC node behind one ``httpx.MockTransport``.

    Requests to ``rpc.test`` are JSON-RPC calls; anything else is served as
    REST from ``lcd_routes`` plus the account and simulate endpoints.
    """

    tx_hash = "ABCDEF0123"

    def __init__(
        self,
        check_code=0,
        tx_code=0,
        pending_polls=0,
        gas_used="100000",
        chain_id="test-chain",
        lcd_routes=None,
        rpc_results=None,
    ):
        self.check_code = check_code
        self.tx_code = tx_code
        self.pending_polls = pending_polls
        self.gas_used = gas_used
        self.chain_id = chain_id
        self.lcd_routes = dict(lcd_routes or {})
        self.rpc_results = dict(rpc_results or {})
        self.requests = []
        self.broadcasts = []
        self.simulations = []
        self.polls = 0

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.host == "rpc.test":
            return self._rpc(request)
        return self._lcd(request)

    def _lcd(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if path in self.lcd_routes:
            route = self.lcd_routes[path]
            return httpx.Response(200, json=route(request) if callable(route) else route)
        if path.startswith("/cosmos/auth/v1beta1/accounts/"):
            return httpx.Response(
                200,
                json={
                    "account": {
                        "@type": "/cosmos.auth.v1beta1.BaseAccount",
                        "address": path.rsplit("/", 1)[1],
                        "account_number": "7",
                        "sequence": "3",
                    }
                },
            )
        if path == "/cosmos/tx/v1beta1/simulate":
            self.simulations.append(json.loads(request.content)["tx_bytes"])
            return httpx.Response(200, json={"gas_info": {"gas_wanted": "0", "gas_used": self.gas_used}})
        return httpx.Response(404, json={"code": 5, "message": f"no route {path}"})

    def _rpc(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        method = body["method"]
        reply = {"jsonrpc": "2.0", "id": body["id"]}

        if method == "status":
            reply["result"] = {
                "node_info": {"network": self.chain_id},
                "sync_info": {"latest_block_height": "41", "catching_up": False},
            }
        elif method == "broadcast_tx_sync":
            self.broadcasts.append(body["params"]["tx"])
            reply["result"] = {
                "code": self.check_code,
                "log": "insufficient fees" if self.check_code else "[]",
                "hash": self.tx_hash,
            }
        elif method == "tx":
            self.polls += 1
            if self.polls <= self.pending_polls:
                reply["error"] = {
                    "code": -32603,
                    "message": "Internal error",
                    "data": f"tx ({self.tx_hash}) not found",
                }
            else:
                reply["result"] = {
                    "hash": self.tx_hash,
                    "height": "42",
                    "tx_result": {
                        "code": self.tx_code,
                        "log": "out of gas" if self.tx_code else "",
                        "gas_used": "90000",
                        "gas_wanted": "130000",
                        "events": [{"type": "transfer", "attributes": []}],
                    },
                }
        elif method in self.rpc_results:
            reply["result"] = self.rpc_results[method]
        else:
            reply["error"] = {"code": -32601, "message": "Method not found"}
        return httpx.Response(200, json=reply)

    def rpc_methods(self):
        return [
            json.loads(r.content)["method"] for r in self.requests if r.url.host == "rpc.test"
        ]
