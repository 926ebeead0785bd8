"""Tests for transaction building and broadcasting."""

import base64
from decimal import Decimal

import pytest
from cosmospy_protobuf.cosmos.bank.v1beta1 import tx_pb2 as bank_tx
from cosmospy_protobuf.cosmos.staking.v1beta1 import tx_pb2 as staking_tx
from cosmospy_protobuf.cosmos.tx.v1beta1 import tx_pb2

from cosmos_adapter.config import get_network_profile
from cosmos_adapter.exceptions import BroadcastTimeout, ProtocolError, RemoteRpcError
from cosmos_adapter.lcd import LcdClient
from cosmos_adapter.rpc import TendermintClient
from cosmos_adapter.tx import (
    TxBuilder,
    msg_delegate,
    msg_send,
    msg_transfer,
    unwrap_account,
)
from cosmos_adapter.types import Coin, StdFee

from conftest import FakeChain, make_address


class FakeWallet:
    address = make_address("cosmos")
    public_key = b"\x02" + b"\x01" * 32

    def __init__(self):
        self.signed = []

    def sign(self, message: bytes) -> bytes:
        self.signed.append(message)
        return b"\x00" * 64


def make_builder(chain: FakeChain, **kwargs) -> TxBuilder:
    profile = get_network_profile(
        "custom", lcd_endpoint="http://lcd.test", rpc_endpoint="http://rpc.test"
    )
    kwargs.setdefault("poll_interval", 0)
    return TxBuilder(
        LcdClient(profile.lcd_endpoint, transport=chain.transport),
        TendermintClient(profile.rpc_endpoint, transport=chain.transport),
        FakeWallet(),
        profile,
        **kwargs,
    )


def decode_broadcast(chain: FakeChain, index: int = 0) -> tx_pb2.TxRaw:
    return tx_pb2.TxRaw.FromString(base64.b64decode(chain.broadcasts[index]))


def test_msg_send_packs_any():
    sender, recipient = make_address("cosmos"), make_address("cosmos", bytes(20))
    packed = msg_send(sender, recipient, [Coin("uatom", "1500000")])

    assert packed.type_url == "/cosmos.bank.v1beta1.MsgSend"
    msg = bank_tx.MsgSend.FromString(packed.value)
    assert msg.from_address == sender
    assert msg.to_address == recipient
    assert msg.amount[0].denom == "uatom"
    assert msg.amount[0].amount == "1500000"


def test_msg_delegate():
    packed = msg_delegate("cosmos1d", "cosmosvaloper1v", Coin("uatom", "10"))
    msg = staking_tx.MsgDelegate.FromString(packed.value)
    assert packed.type_url == "/cosmos.staking.v1beta1.MsgDelegate"
    assert msg.validator_address == "cosmosvaloper1v"
    assert msg.amount.amount == "10"


def test_msg_transfer_uses_timestamp_timeout():
    packed = msg_transfer(
        "transfer", "channel-141", Coin("uatom", "5"), "cosmos1s", "osmo1r", 1_700_000_000_000_000_000
    )
    assert packed.type_url == "/ibc.applications.transfer.v1.MsgTransfer"


def test_unwrap_account_looks_through_vesting():
    vesting = {
        "@type": "/cosmos.vesting.v1beta1.ContinuousVestingAccount",
        "base_vesting_account": {
            "base_account": {"account_number": "9", "sequence": "2"},
        },
    }
    assert unwrap_account(vesting) == {"account_number": "9", "sequence": "2"}
    assert unwrap_account({"account_number": "1"}) == {"account_number": "1"}


def test_calculate_fee_rounds_up():
    builder = make_builder(FakeChain())
    fee = builder.calculate_fee(130001)

    assert fee.gas == 130001
    assert fee.amount == [Coin("uatom", "3251")]
    assert builder.profile.gas_price == Decimal("0.025")


@pytest.mark.asyncio
async def test_estimate_gas_applies_adjustment():
    chain = FakeChain(gas_used="100001")
    builder = make_builder(chain, gas_adjustment=1.3)

    assert await builder.estimate_gas([msg_send("a", "b", [])]) == 130002
    assert len(chain.simulations) == 1
    simulated = tx_pb2.Tx.FromString(base64.b64decode(chain.simulations[0]))
    assert list(simulated.signatures) == [b""]


@pytest.mark.asyncio
async def test_simulate_without_gas_info_is_protocol_error():
    chain = FakeChain(lcd_routes={"/cosmos/tx/v1beta1/simulate": {"result": {}}})
    builder = make_builder(chain)

    with pytest.raises(ProtocolError):
        await builder.simulate([msg_send("a", "b", [])])


@pytest.mark.asyncio
async def test_chain_id_comes_from_node_and_is_cached():
    chain = FakeChain(chain_id="cosmoshub-4")
    builder = make_builder(chain)

    assert await builder.get_chain_id() == "cosmoshub-4"
    assert await builder.get_chain_id() == "cosmoshub-4"
    assert chain.rpc_methods() == ["status"]


@pytest.mark.asyncio
async def test_sign_and_broadcast_auto_fee():
    """Included transaction comes back with its height and events."""
    chain = FakeChain()
    builder = make_builder(chain)

    result = await builder.sign_and_broadcast(
        [msg_send(FakeWallet.address, make_address("cosmos", bytes(20)), [Coin("uatom", "1")])],
        memo="hello",
    )

    assert result.success
    assert result.transaction_hash == FakeChain.tx_hash
    assert result.height == 42
    assert result.gas_used == 90000
    assert result.events == [{"type": "transfer", "attributes": []}]

    raw = decode_broadcast(chain)
    assert list(raw.signatures) == [b"\x00" * 64]
    body = tx_pb2.TxBody.FromString(raw.body_bytes)
    assert body.memo == "hello"
    auth_info = tx_pb2.AuthInfo.FromString(raw.auth_info_bytes)
    assert auth_info.fee.gas_limit == 130000
    assert auth_info.fee.amount[0].amount == "3250"
    assert auth_info.signer_infos[0].sequence == 3

    sign_doc = tx_pb2.SignDoc.FromString(builder.wallet.signed[0])
    assert sign_doc.chain_id == "test-chain"
    assert sign_doc.account_number == 7
    assert sign_doc.body_bytes == raw.body_bytes


@pytest.mark.asyncio
async def test_explicit_fee_skips_simulation():
    chain = FakeChain()
    builder = make_builder(chain)
    fee = StdFee(amount=[Coin("uatom", "5000")], gas=200000)

    await builder.sign_and_broadcast([msg_send("a", "b", [])], fee=fee)

    assert chain.simulations == []
    auth_info = tx_pb2.AuthInfo.FromString(decode_broadcast(chain).auth_info_bytes)
    assert auth_info.fee.gas_limit == 200000


@pytest.mark.asyncio
async def test_unsupported_fee_mode():
    builder = make_builder(FakeChain())
    with pytest.raises(ValueError):
        await builder.sign_and_broadcast([msg_send("a", "b", [])], fee="cheap")


@pytest.mark.asyncio
async def test_check_tx_failure_is_returned_not_raised():
    """A non-zero CheckTx code comes back as data without polling for inclusion."""
    chain = FakeChain(check_code=13)
    builder = make_builder(chain)

    result = await builder.sign_and_broadcast([msg_send("a", "b", [])])

    assert not result.success
    assert result.code == 13
    assert result.height == 0
    assert result.raw_log == "insufficient fees"
    assert "tx" not in chain.rpc_methods()


@pytest.mark.asyncio
async def test_deliver_tx_failure_is_returned():
    chain = FakeChain(tx_code=11)
    result = await make_builder(chain).sign_and_broadcast([msg_send("a", "b", [])])

    assert result.code == 11
    assert result.height == 42
    assert result.raw_log == "out of gas"


@pytest.mark.asyncio
async def test_wait_for_tx_polls_until_found():
    chain = FakeChain(pending_polls=2)
    result = await make_builder(chain).wait_for_tx(FakeChain.tx_hash)

    assert result.height == 42
    assert chain.polls == 3
    assert chain.rpc_methods() == ["tx", "tx", "tx"]


@pytest.mark.asyncio
async def test_wait_for_tx_times_out():
    chain = FakeChain(pending_polls=100)
    builder = make_builder(chain, poll_timeout=0)

    with pytest.raises(BroadcastTimeout) as exc_info:
        await builder.wait_for_tx(FakeChain.tx_hash)
    assert exc_info.value.tx_hash == FakeChain.tx_hash


@pytest.mark.asyncio
async def test_wait_for_tx_propagates_other_errors():
    builder = make_builder(FakeChain())

    async def broken(_hash):
        raise RemoteRpcError("Internal error", code=-32603, method="tx")

    builder.rpc.get_tx = broken
    with pytest.raises(RemoteRpcError):
        await builder.wait_for_tx(FakeChain.tx_hash)
