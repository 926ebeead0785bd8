"""Resource modules served by the dispatcher."""

from .account import AccountModule
from .auth import AuthModule
from .bank import BankModule
from .base import ResourceModule
from .block import BlockModule
from .distribution import DistributionModule
from .governance import GovernanceModule
from .ibc_transfer import IbcTransferModule
from .mint import MintModule
from .slashing import SlashingModule
from .staking import StakingModule
from .tendermint import TendermintModule
from .transaction import TransactionModule

__all__ = [
    "AccountModule",
    "AuthModule",
    "BankModule",
    "BlockModule",
    "DistributionModule",
    "GovernanceModule",
    "IbcTransferModule",
    "MintModule",
    "ResourceModule",
    "SlashingModule",
    "StakingModule",
    "TendermintModule",
    "TransactionModule",
]
