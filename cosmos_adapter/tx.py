"""Transaction building, signing and broadcasting."""

import asyncio
import base64
import logging
from decimal import ROUND_CEILING, Decimal
from typing import Any, Dict, Optional, Sequence, Tuple, Union

from google.protobuf import any_pb2
from cosmospy_protobuf.cosmos.bank.v1beta1 import tx_pb2 as bank_tx
from cosmospy_protobuf.cosmos.base.v1beta1 import coin_pb2
from cosmospy_protobuf.cosmos.crypto.secp256k1 import keys_pb2
from cosmospy_protobuf.cosmos.distribution.v1beta1 import tx_pb2 as distribution_tx
from cosmospy_protobuf.cosmos.gov.v1beta1 import tx_pb2 as gov_tx
from cosmospy_protobuf.cosmos.staking.v1beta1 import tx_pb2 as staking_tx
from cosmospy_protobuf.cosmos.tx.signing.v1beta1 import signing_pb2
from cosmospy_protobuf.cosmos.tx.v1beta1 import tx_pb2
from cosmospy_protobuf.ibc.applications.transfer.v1 import tx_pb2 as transfer_tx
from cosmospy_protobuf.ibc.core.client.v1 import client_pb2

from .config import NetworkProfile
from .exceptions import BroadcastTimeout, ProtocolError, RemoteRpcError
from .lcd import LcdClient
from .rpc import TendermintClient
from .types import Coin, StdFee, TxResult
from .wallet import Wallet

logger = logging.getLogger(__name__)

AUTO_FEE = "auto"
PUBKEY_TYPE_URL = "/cosmos.crypto.secp256k1.PubKey"

Fee = Union[str, StdFee]


def pack_any(type_url: str, message: Any) -> any_pb2.Any:
    """Wrap a protobuf message in ``Any`` under a Cosmos style type URL."""
    return any_pb2.Any(type_url=type_url, value=message.SerializeToString())


def _coin(coin: Coin) -> coin_pb2.Coin:
    return coin_pb2.Coin(denom=coin.denom, amount=coin.amount)


def msg_send(from_address: str, to_address: str, amount: Sequence[Coin]) -> any_pb2.Any:
    msg = bank_tx.MsgSend(
        from_address=from_address,
        to_address=to_address,
        amount=[_coin(c) for c in amount],
    )
    return pack_any("/cosmos.bank.v1beta1.MsgSend", msg)


def msg_delegate(delegator: str, validator: str, amount: Coin) -> any_pb2.Any:
    msg = staking_tx.MsgDelegate(
        delegator_address=delegator,
        validator_address=validator,
        amount=_coin(amount),
    )
    return pack_any("/cosmos.staking.v1beta1.MsgDelegate", msg)


def msg_undelegate(delegator: str, validator: str, amount: Coin) -> any_pb2.Any:
    msg = staking_tx.MsgUndelegate(
        delegator_address=delegator,
        validator_address=validator,
        amount=_coin(amount),
    )
    return pack_any("/cosmos.staking.v1beta1.MsgUndelegate", msg)


def msg_begin_redelegate(
    delegator: str, src_validator: str, dst_validator: str, amount: Coin
) -> any_pb2.Any:
    msg = staking_tx.MsgBeginRedelegate(
        delegator_address=delegator,
        validator_src_address=src_validator,
        validator_dst_address=dst_validator,
        amount=_coin(amount),
    )
    return pack_any("/cosmos.staking.v1beta1.MsgBeginRedelegate", msg)


def msg_withdraw_reward(delegator: str, validator: str) -> any_pb2.Any:
    msg = distribution_tx.MsgWithdrawDelegatorReward(
        delegator_address=delegator,
        validator_address=validator,
    )
    return pack_any("/cosmos.distribution.v1beta1.MsgWithdrawDelegatorReward", msg)


def msg_vote(proposal_id: int, voter: str, option: int) -> any_pb2.Any:
    msg = gov_tx.MsgVote(proposal_id=int(proposal_id), voter=voter, option=int(option))
    return pack_any("/cosmos.gov.v1beta1.MsgVote", msg)


def msg_transfer(
    source_port: str,
    source_channel: str,
    token: Coin,
    sender: str,
    receiver: str,
    timeout_timestamp: int,
    memo: str = "",
) -> any_pb2.Any:
    """ICS-20 transfer with a timestamp timeout and no height timeout."""
    fields: Dict[str, Any] = {
        "source_port": source_port,
        "source_channel": source_channel,
        "token": _coin(token),
        "sender": sender,
        "receiver": receiver,
        "timeout_height": client_pb2.Height(revision_number=0, revision_height=0),
        "timeout_timestamp": int(timeout_timestamp),
    }
    if memo:
        fields["memo"] = memo
    return pack_any("/ibc.applications.transfer.v1.MsgTransfer", transfer_tx.MsgTransfer(**fields))


def unwrap_account(account: Dict[str, Any]) -> Dict[str, Any]:
    """Return the base account record, looking through vesting wrappers."""
    if "base_vesting_account" in account:
        account = account["base_vesting_account"]
    if "base_account" in account:
        account = account["base_account"]
    return account


def _tx_hash_param(tx_hash: str) -> str:
    return base64.b64encode(bytes.fromhex(tx_hash)).decode()


class TxBuilder:
    """Builds SIGN_MODE_DIRECT transactions for one wallet and broadcasts them."""

    def __init__(
        self,
        lcd: LcdClient,
        rpc: TendermintClient,
        wallet: Wallet,
        profile: NetworkProfile,
        gas_adjustment: float = 1.3,
        poll_interval: float = 3.0,
        poll_timeout: float = 60.0,
    ):
        """Initialize transaction builder."""
        self.lcd = lcd
        self.rpc = rpc
        self.wallet = wallet
        self.profile = profile
        self.gas_adjustment = gas_adjustment
        self.poll_interval = poll_interval
        self.poll_timeout = poll_timeout
        self._chain_id: Optional[str] = None

    async def get_chain_id(self) -> str:
        """Chain id reported by the consensus node, cached after the first call."""
        if self._chain_id is None:
            status = await self.rpc.get_status()
            try:
                self._chain_id = status["node_info"]["network"]
            except (KeyError, TypeError):
                raise ProtocolError("RPC status response has no node_info.network") from None
        return self._chain_id

    async def get_account_info(self, address: str) -> Tuple[int, int]:
        """Account number and sequence for ``address``."""
        data = await self.lcd.get_account(address)
        account = unwrap_account(data.get("account") or {})
        return int(account.get("account_number", 0)), int(account.get("sequence", 0))

    def build_tx_body(self, messages: Sequence[any_pb2.Any], memo: str = "") -> tx_pb2.TxBody:
        return tx_pb2.TxBody(messages=list(messages), memo=memo)

    def build_auth_info(self, sequence: int, fee: StdFee) -> tx_pb2.AuthInfo:
        public_key = pack_any(PUBKEY_TYPE_URL, keys_pb2.PubKey(key=self.wallet.public_key))
        signer_info = tx_pb2.SignerInfo(
            public_key=public_key,
            mode_info=tx_pb2.ModeInfo(
                single=tx_pb2.ModeInfo.Single(mode=signing_pb2.SIGN_MODE_DIRECT)
            ),
            sequence=sequence,
        )
        tx_fee = tx_pb2.Fee(
            amount=[_coin(c) for c in fee.amount],
            gas_limit=fee.gas,
            payer=fee.payer,
            granter=fee.granter,
        )
        return tx_pb2.AuthInfo(signer_infos=[signer_info], fee=tx_fee)

    def sign(
        self,
        body: tx_pb2.TxBody,
        auth_info: tx_pb2.AuthInfo,
        chain_id: str,
        account_number: int,
    ) -> tx_pb2.TxRaw:
        """Sign the SignDoc and return the raw transaction."""
        body_bytes = body.SerializeToString()
        auth_info_bytes = auth_info.SerializeToString()
        sign_doc = tx_pb2.SignDoc(
            body_bytes=body_bytes,
            auth_info_bytes=auth_info_bytes,
            chain_id=chain_id,
            account_number=account_number,
        )
        signature = self.wallet.sign(sign_doc.SerializeToString())
        return tx_pb2.TxRaw(
            body_bytes=body_bytes,
            auth_info_bytes=auth_info_bytes,
            signatures=[signature],
        )

    async def simulate(self, messages: Sequence[any_pb2.Any], memo: str = "") -> int:
        """Gas used by ``messages`` according to the node's simulation."""
        _, sequence = await self.get_account_info(self.wallet.address)
        body = self.build_tx_body(messages, memo)
        auth_info = self.build_auth_info(sequence, StdFee(amount=[], gas=0))
        tx = tx_pb2.Tx(body=body, auth_info=auth_info, signatures=[b""])
        data = await self.lcd.simulate(base64.b64encode(tx.SerializeToString()).decode())
        try:
            return int(data["gas_info"]["gas_used"])
        except (KeyError, TypeError, ValueError):
            raise ProtocolError("Simulation response has no gas_info.gas_used") from None

    async def estimate_gas(self, messages: Sequence[any_pb2.Any], memo: str = "") -> int:
        """Simulated gas scaled by the gas adjustment, rounded up."""
        gas_used = await self.simulate(messages, memo)
        adjusted = Decimal(gas_used) * Decimal(str(self.gas_adjustment))
        return int(adjusted.to_integral_value(rounding=ROUND_CEILING))

    def calculate_fee(self, gas: int) -> StdFee:
        """Fee for ``gas`` at the profile's gas price, rounded up."""
        amount = (Decimal(gas) * self.profile.gas_price).to_integral_value(rounding=ROUND_CEILING)
        return StdFee(amount=[Coin(denom=self.profile.min_denom, amount=str(int(amount)))], gas=gas)

    async def sign_and_broadcast(
        self,
        messages: Sequence[any_pb2.Any],
        fee: Fee = AUTO_FEE,
        memo: str = "",
    ) -> TxResult:
        """Sign and broadcast a transaction."""
        if isinstance(fee, str):
            if fee != AUTO_FEE:
                raise ValueError(f"Unsupported fee mode: {fee!r}")
            gas = await self.estimate_gas(messages, memo)
            fee = self.calculate_fee(gas)
            logger.debug(f"Estimated gas {gas}, fee {fee.amount[0].amount}{fee.amount[0].denom}")

        account_number, sequence = await self.get_account_info(self.wallet.address)
        chain_id = await self.get_chain_id()

        body = self.build_tx_body(messages, memo)
        auth_info = self.build_auth_info(sequence, fee)
        tx_raw = self.sign(body, auth_info, chain_id, account_number)

        return await self.broadcast(tx_raw.SerializeToString())

    async def broadcast(self, tx_bytes: bytes) -> TxResult:
        """Broadcast signed bytes and wait for block inclusion.

        A transaction rejected by CheckTx is returned immediately with its
        non-zero code.
        """
        result = await self.rpc.broadcast_tx_sync(base64.b64encode(tx_bytes).decode())
        tx_hash = str(result.get("hash", "")).upper()
        code = int(result.get("code", 0))
        logger.info(f"Broadcast transaction {tx_hash} (check code {code})")

        if code != 0:
            return TxResult(
                transaction_hash=tx_hash,
                height=0,
                code=code,
                raw_log=result.get("log") or "",
            )
        return await self.wait_for_tx(tx_hash)

    async def wait_for_tx(self, tx_hash: str) -> TxResult:
        """Poll the consensus node until ``tx_hash`` is in a block."""
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self.poll_timeout

        while True:
            try:
                data = await self.rpc.get_tx(_tx_hash_param(tx_hash))
                return self._to_result(tx_hash, data)
            except RemoteRpcError as e:
                if "not found" not in str(e).lower():
                    raise
            if loop.time() >= deadline:
                raise BroadcastTimeout(tx_hash, self.poll_timeout)
            logger.debug(f"Transaction {tx_hash} not yet included, retrying")
            await asyncio.sleep(self.poll_interval)

    @staticmethod
    def _to_result(tx_hash: str, data: Dict[str, Any]) -> TxResult:
        tx_result = data.get("tx_result") or {}
        return TxResult(
            transaction_hash=str(data.get("hash") or tx_hash).upper(),
            height=int(data.get("height", 0)),
            code=int(tx_result.get("code", 0)),
            raw_log=tx_result.get("log") or "",
            gas_used=int(tx_result.get("gas_used", 0)),
            gas_wanted=int(tx_result.get("gas_wanted", 0)),
            events=list(tx_result.get("events") or []),
        )
