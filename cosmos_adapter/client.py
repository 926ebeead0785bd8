"""Signing client for state-changing operations."""

import logging
from typing import Optional, Sequence, Union

import httpx
from google.protobuf import any_pb2

from . import address as addr
from . import ibc
from .config import Credentials, NetworkProfile
from .constants import MAX_MEMO_LENGTH
from .exceptions import ConfigurationError, InvalidAddress
from .lazy import AsyncLazy
from .lcd import LcdClient
from .rpc import TendermintClient
from .tx import (
    AUTO_FEE,
    Fee,
    TxBuilder,
    msg_begin_redelegate,
    msg_delegate,
    msg_send,
    msg_transfer,
    msg_undelegate,
    msg_vote,
    msg_withdraw_reward,
)
from .types import Coin, TxResult, VoteOption
from .units import Amount, to_base_units
from .wallet import Wallet

logger = logging.getLogger(__name__)


class SigningClient:
    """Signs and broadcasts transactions for one set of credentials.

    The wallet and the connected session are created on first use and
    released by ``disconnect()``. Use it as an async context manager so the
    session is released on every exit path::

        async with SigningClient(credentials) as client:
            result = await client.send_tokens("cosmos1...", "1.5")
    """

    def __init__(
        self,
        credentials: Credentials,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        poll_interval: float = 3.0,
        poll_timeout: float = 60.0,
    ):
        self.credentials = credentials
        self.profile: NetworkProfile = credentials.profile
        self._transport = transport
        self._poll_interval = poll_interval
        self._poll_timeout = poll_timeout
        self._identity: AsyncLazy[Wallet] = AsyncLazy(self._derive_wallet)
        self._session: AsyncLazy[TxBuilder] = AsyncLazy(self._open_session)

    async def _derive_wallet(self) -> Wallet:
        if not self.credentials.mnemonic:
            raise ConfigurationError("A mnemonic is required for signing operations")
        return Wallet.from_mnemonic(
            self.credentials.mnemonic,
            hd_path=self.credentials.hd_path,
            prefix=self.profile.prefix,
        )

    async def _open_session(self) -> TxBuilder:
        wallet = await self._identity.get()
        logger.debug(f"Opening signing session for {wallet.address} on {self.profile.name}")
        return TxBuilder(
            LcdClient.from_profile(self.profile, transport=self._transport),
            TendermintClient.from_profile(self.profile, transport=self._transport),
            wallet,
            self.profile,
            gas_adjustment=self.credentials.gas_adjustment,
            poll_interval=self._poll_interval,
            poll_timeout=self._poll_timeout,
        )

    async def get_address(self) -> str:
        """Address of the signing account."""
        wallet = await self._identity.get()
        return wallet.address

    def _native_coin(self, amount: Amount) -> Coin:
        return Coin(
            denom=self.profile.min_denom,
            amount=to_base_units(amount, self.profile.decimals),
        )

    def _coin(self, amount: Amount, denom: Optional[str]) -> Coin:
        """Native amounts are display units; any other denom is taken in base units."""
        if not denom or denom == self.profile.min_denom:
            return self._native_coin(amount)
        return Coin(denom=denom, amount=to_base_units(amount, 0))

    def _check_account(self, address: str, prefix: Optional[str] = None) -> None:
        if not addr.validate(address, prefix or self.profile.prefix):
            raise InvalidAddress(f"Invalid {prefix or self.profile.prefix} address: {address}")

    def _check_validator(self, address: str) -> None:
        if not addr.validate(address, self.profile.validator_prefix):
            raise InvalidAddress(f"Invalid validator address: {address}")

    @staticmethod
    def _check_memo(memo: str) -> None:
        if not addr.validate_memo(memo):
            raise ValueError(f"Memo exceeds {MAX_MEMO_LENGTH} bytes")

    async def _submit(self, messages: Sequence[any_pb2.Any], fee: Fee, memo: str) -> TxResult:
        self._check_memo(memo)
        builder = await self._session.get()
        result = await builder.sign_and_broadcast(messages, fee=fee, memo=memo)
        if result.success:
            logger.info(f"Transaction {result.transaction_hash} included at height {result.height}")
        else:
            logger.warning(
                f"Transaction {result.transaction_hash} failed with code {result.code}: {result.raw_log}"
            )
        return result

    async def send_tokens(
        self,
        recipient: str,
        amount: Amount,
        denom: Optional[str] = None,
        memo: str = "",
        fee: Fee = AUTO_FEE,
    ) -> TxResult:
        """Send tokens to ``recipient``."""
        self._check_account(recipient)
        coin = self._coin(amount, denom)
        sender = await self.get_address()
        return await self._submit([msg_send(sender, recipient, [coin])], fee, memo)

    async def delegate(
        self, validator: str, amount: Amount, memo: str = "", fee: Fee = AUTO_FEE
    ) -> TxResult:
        """Delegate native tokens to a validator."""
        self._check_validator(validator)
        delegator = await self.get_address()
        msg = msg_delegate(delegator, validator, self._native_coin(amount))
        return await self._submit([msg], fee, memo)

    async def undelegate(
        self, validator: str, amount: Amount, memo: str = "", fee: Fee = AUTO_FEE
    ) -> TxResult:
        """Undelegate native tokens from a validator."""
        self._check_validator(validator)
        delegator = await self.get_address()
        msg = msg_undelegate(delegator, validator, self._native_coin(amount))
        return await self._submit([msg], fee, memo)

    async def redelegate(
        self,
        src_validator: str,
        dst_validator: str,
        amount: Amount,
        memo: str = "",
        fee: Fee = AUTO_FEE,
    ) -> TxResult:
        """Move a delegation between validators."""
        self._check_validator(src_validator)
        self._check_validator(dst_validator)
        delegator = await self.get_address()
        msg = msg_begin_redelegate(delegator, src_validator, dst_validator, self._native_coin(amount))
        return await self._submit([msg], fee, memo)

    async def withdraw_rewards(
        self, validator: str, memo: str = "", fee: Fee = AUTO_FEE
    ) -> TxResult:
        """Withdraw delegation rewards from a validator."""
        self._check_validator(validator)
        delegator = await self.get_address()
        return await self._submit([msg_withdraw_reward(delegator, validator)], fee, memo)

    async def vote(
        self,
        proposal_id: int,
        option: Union[VoteOption, int],
        memo: str = "",
        fee: Fee = AUTO_FEE,
    ) -> TxResult:
        """Vote on a governance proposal."""
        option = VoteOption(int(option))
        voter = await self.get_address()
        return await self._submit([msg_vote(proposal_id, voter, option)], fee, memo)

    async def ibc_transfer(
        self,
        destination: str,
        receiver: str,
        amount: Amount,
        denom: Optional[str] = None,
        memo: str = "",
        timeout_minutes: float = ibc.DEFAULT_TIMEOUT_MINUTES,
        fee: Fee = AUTO_FEE,
    ) -> TxResult:
        """Transfer to a known destination chain using its route."""
        route = ibc.get_route(destination)
        self._check_account(receiver, route.prefix)
        return await self.ibc_transfer_direct(
            route.channel,
            route.port,
            receiver,
            amount,
            denom=denom,
            memo=memo,
            timeout_minutes=timeout_minutes,
            fee=fee,
        )

    async def ibc_transfer_direct(
        self,
        source_channel: str,
        source_port: Optional[str],
        receiver: str,
        amount: Amount,
        denom: Optional[str] = None,
        memo: str = "",
        timeout_minutes: float = ibc.DEFAULT_TIMEOUT_MINUTES,
        fee: Fee = AUTO_FEE,
    ) -> TxResult:
        """Transfer over an explicit channel and port."""
        if not addr.validate(receiver):
            raise InvalidAddress(f"Invalid receiver address: {receiver}")
        channel = ibc.format_channel_id(source_channel)
        port = ibc.format_port_id(source_port)
        coin = self._coin(amount, denom)
        sender = await self.get_address()
        msg = msg_transfer(
            port,
            channel,
            coin,
            sender,
            receiver,
            timeout_timestamp=ibc.calculate_timeout(timeout_minutes),
            memo=memo,
        )
        return await self._submit([msg], fee, memo)

    async def simulate(self, messages: Sequence[any_pb2.Any], memo: str = "") -> int:
        """Adjusted gas estimate for ``messages``."""
        builder = await self._session.get()
        return await builder.estimate_gas(messages, memo)

    async def disconnect(self) -> None:
        """Release the session and forget the cached wallet. Safe to call repeatedly."""
        builder = await self._session.reset()
        await self._identity.reset()
        if builder is not None:
            logger.debug("Closing signing session")
            await builder.lcd.close()
            await builder.rpc.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.disconnect()
