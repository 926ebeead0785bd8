"""Tests for operation dispatch."""

import pytest

from cosmos_adapter.dispatcher import (
    MODULES,
    Dispatcher,
    OperationRequest,
    Resource,
    operations_for,
)
from cosmos_adapter.exceptions import MissingParameter, UnknownOperation
from cosmos_adapter.lcd import LcdClient
from cosmos_adapter.types import TxResult

from conftest import FakeChain

EXPECTED_OPERATIONS = {
    "account": [
        "getAccountInfo", "getBalance", "getAllBalances", "transfer", "transferToken",
        "validateAddress", "getDelegations", "getUnbonding", "getRedelegations", "getRewards",
    ],
    "staking": [
        "getValidators", "getValidator", "delegate", "undelegate", "redelegate",
        "getDelegation", "getUnbondingDelegation", "getStakingPool", "getStakingParams",
        "getValidatorDelegations",
    ],
    "distribution": [
        "withdrawRewards", "getRewards", "getValidatorRewards", "getWithdrawAddress",
        "getCommunityPool", "getValidatorCommission",
    ],
    "governance": [
        "getProposals", "getProposal", "getProposalDeposits", "getProposalVotes",
        "getProposalTally", "vote", "getVote", "getGovParams",
    ],
    "ibcTransfer": [
        "ibcTransfer", "ibcTransferDirect", "getChannels", "getChannel", "getConnections",
        "getConnection", "getClients", "getDenomTrace", "getDenomTraces",
        "getAvailableDestinations", "getChannelInfo",
    ],
    "bank": [
        "getTotalSupply", "getSupplyOf", "getDenomMetadata", "getAllDenomMetadata",
        "getSpendableBalances", "getSendEnabled",
    ],
    "auth": ["getAccount", "getAccounts", "getModuleAccounts", "getModuleAccount", "getParams"],
    "slashing": ["getSigningInfos", "getSigningInfo", "getSlashingParams"],
    "mint": ["getInflation", "getAnnualProvisions", "getMintParams"],
    "transaction": [
        "getTx", "getTxsByEvents", "searchTx", "getTxsByHeight", "simulate", "broadcastTx",
    ],
    "block": [
        "getLatestBlock", "getBlockByHeight", "getBlockResults", "getValidatorSet",
        "getLatestValidatorSet", "getBlockchain",
    ],
    "tendermint": [
        "getNodeInfo", "getSyncStatus", "getNetInfo", "getHealth", "getStatus", "getGenesis",
        "getConsensusState", "getConsensusParams", "getUnconfirmedTxs", "abciInfo",
    ],
}


class FakeSigner:
    """Stands in for ``SigningClient`` and records what it was asked to do."""

    def __init__(self, log):
        self.log = log

    async def __aenter__(self):
        self.log.append("enter")
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        self.log.append("exit")

    async def delegate(self, validator, amount, memo=""):
        self.log.append(("delegate", validator, amount, memo))
        return TxResult(transaction_hash="AB12", height=10, code=0, gas_used=5, gas_wanted=6)

    async def vote(self, proposal_id, option, memo=""):
        self.log.append(("vote", proposal_id, option))
        raise RuntimeError("node unavailable")


def make_dispatcher(credentials, chain, **kwargs):
    return Dispatcher(credentials, transport=chain.transport, **kwargs)


def test_every_resource_has_a_module():
    assert set(MODULES) == set(Resource)


def test_operation_catalog():
    for resource, operations in EXPECTED_OPERATIONS.items():
        assert operations_for(resource) == operations


def test_operation_request_validates():
    request = OperationRequest.create("account", "getBalance", {"address": "x"})
    assert request.resource is Resource.ACCOUNT
    assert request.params == {"address": "x"}

    with pytest.raises(UnknownOperation):
        OperationRequest.create("wallet", "getBalance")
    with pytest.raises(UnknownOperation) as exc_info:
        OperationRequest.create(Resource.STAKING, "getBalance")
    assert exc_info.value.operation == "getBalance"


@pytest.mark.asyncio
async def test_execute_runs_each_item(credentials, cosmos_address):
    chain = FakeChain(
        lcd_routes={
            f"/cosmos/bank/v1beta1/balances/{cosmos_address}/by_denom": {
                "balance": {"denom": "uatom", "amount": "2500000"}
            }
        }
    )
    async with make_dispatcher(credentials, chain) as dispatcher:
        results = await dispatcher.execute("account", "getBalance", [{"address": cosmos_address}])

    assert results == [
        {
            "denom": "uatom",
            "amount": "2500000",
            "displayAmount": "2.500000",
            "formatted": "2.500000 ATOM",
        }
    ]


@pytest.mark.asyncio
async def test_continue_on_fail_pairs_errors(credentials, cosmos_address):
    """Failed items become error records in place; the batch keeps going."""
    chain = FakeChain(
        lcd_routes={
            f"/cosmos/staking/v1beta1/delegations/{cosmos_address}": {"delegation_responses": []}
        }
    )
    items = [{"address": cosmos_address}, {}, {"address": "cosmos1missing"}]

    async with make_dispatcher(credentials, chain) as dispatcher:
        results = await dispatcher.execute(
            "account", "getDelegations", items, continue_on_fail=True
        )

    assert results[0] == {"delegations": []}
    assert results[1] == {"error": "Missing required parameter: address", "pairedItem": 1}
    assert results[2]["pairedItem"] == 2
    assert "HTTP 404" in results[2]["error"]


@pytest.mark.asyncio
async def test_errors_propagate_without_continue_on_fail(credentials):
    async with make_dispatcher(credentials, FakeChain()) as dispatcher:
        with pytest.raises(MissingParameter):
            await dispatcher.execute("auth", "getAccount", [{}])


@pytest.mark.asyncio
async def test_unknown_operation_rejected_before_any_request(credentials):
    chain = FakeChain()
    async with make_dispatcher(credentials, chain) as dispatcher:
        with pytest.raises(UnknownOperation):
            await dispatcher.execute("account", "mintTokens", [{}], continue_on_fail=True)
        with pytest.raises(UnknownOperation):
            await dispatcher.execute("wallet", "getBalance", [{}], continue_on_fail=True)

    assert chain.requests == []


@pytest.mark.asyncio
async def test_get_validators_follows_pagination(credentials):
    def validators(request):
        key = request.url.params.get("pagination.key")
        if key is None:
            return {
                "validators": [{"operator_address": "a", "tokens": "1000000"}],
                "pagination": {"next_key": "next"},
            }
        return {"validators": [{"operator_address": "b", "tokens": "5"}], "pagination": {}}

    chain = FakeChain(lcd_routes={"/cosmos/staking/v1beta1/validators": validators})
    async with make_dispatcher(credentials, chain) as dispatcher:
        [result] = await dispatcher.execute("staking", "getValidators", [{}])

    assert [v["operatorAddress"] for v in result["validators"]] == ["a", "b"]
    assert result["validators"][0]["tokensDisplay"] == "1.000000"


@pytest.mark.asyncio
async def test_rpc_backed_operation(credentials):
    chain = FakeChain(chain_id="cosmoshub-4")
    async with make_dispatcher(credentials, chain) as dispatcher:
        [status] = await dispatcher.execute(Resource.TENDERMINT, "getStatus", [{}])

    assert status["node_info"]["network"] == "cosmoshub-4"


@pytest.mark.asyncio
async def test_signing_operation_uses_scoped_signer(credentials, validator_address):
    log = []
    dispatcher = Dispatcher(credentials, signer_factory=lambda: FakeSigner(log))

    [result] = await dispatcher.execute(
        "staking", "delegate", [{"validatorAddress": validator_address, "amount": "1.5"}]
    )

    assert result["transactionHash"] == "AB12"
    assert result["height"] == 10
    assert log == ["enter", ("delegate", validator_address, "1.5", ""), "exit"]
    await dispatcher.close()


@pytest.mark.asyncio
async def test_signer_released_when_operation_fails(credentials):
    log = []
    dispatcher = Dispatcher(credentials, signer_factory=lambda: FakeSigner(log))

    results = await dispatcher.execute(
        "governance",
        "vote",
        [{"proposalId": "7", "voteOption": "yes"}],
        continue_on_fail=True,
    )

    assert results == [{"error": "node unavailable", "pairedItem": 0}]
    assert log[0] == "enter"
    assert log[-1] == "exit"
    await dispatcher.close()


@pytest.mark.asyncio
async def test_close_leaves_injected_clients_open(credentials):
    chain = FakeChain()
    lcd = LcdClient("http://lcd.test", transport=chain.transport)
    dispatcher = Dispatcher(credentials, lcd=lcd, transport=chain.transport)
    _ = dispatcher.rpc

    await dispatcher.close()

    assert dispatcher.lcd is lcd
    assert not lcd._http_client.is_closed
    assert dispatcher._rpc is None
    await lcd.close()
