"""Static chain catalogs: denominations, IBC routes and module enums."""

from typing import Dict, Optional

from .types import DenomInfo, IbcChannelRoute

DEFAULT_HD_PATH = "m/44'/118'/0'/0/0"
MAX_MEMO_LENGTH = 256

NATIVE_DENOMS: Dict[str, DenomInfo] = {
    "uatom": DenomInfo(denom="uatom", symbol="ATOM", decimals=6, name="Cosmos Hub"),
}

IBC_DENOMS: Dict[str, DenomInfo] = {
    "ibc/27394FB092D2ECCD56123C74F36E4C1F926001CEADA9CA97EA622B25F41E5EB2": DenomInfo(
        denom="ibc/27394FB092D2ECCD56123C74F36E4C1F926001CEADA9CA97EA622B25F41E5EB2",
        symbol="ATOM",
        decimals=6,
        name="Cosmos Hub ATOM (via Osmosis)",
        type="ibc",
    ),
    "ibc/14F9BC3E44B8A9C1BE1FB08980FAB87034C9905EF17CF2F5008FC085218811CC": DenomInfo(
        denom="ibc/14F9BC3E44B8A9C1BE1FB08980FAB87034C9905EF17CF2F5008FC085218811CC",
        symbol="OSMO",
        decimals=6,
        name="Osmosis",
        type="ibc",
    ),
    "ibc/46B44899322F3CD854D2D46DEEF881958467CDD4B3B10086DA49296BBED94BED": DenomInfo(
        denom="ibc/46B44899322F3CD854D2D46DEEF881958467CDD4B3B10086DA49296BBED94BED",
        symbol="JUNO",
        decimals=6,
        name="Juno",
        type="ibc",
    ),
}


def get_denom_info(denom: str) -> Optional[DenomInfo]:
    return NATIVE_DENOMS.get(denom) or IBC_DENOMS.get(denom)


def get_decimals(denom: str) -> int:
    info = get_denom_info(denom)
    return info.decimals if info else 6


def format_denom(denom: str) -> str:
    info = get_denom_info(denom)
    return info.symbol if info else denom


def _route(chain, chain_id, channel, counterparty_channel, prefix, denom) -> IbcChannelRoute:
    return IbcChannelRoute(
        chain=chain,
        chain_id=chain_id,
        channel=channel,
        port="transfer",
        counterparty_channel=counterparty_channel,
        counterparty_port="transfer",
        prefix=prefix,
        denom=denom,
    )


# Routes out of the Cosmos Hub, keyed by lowercase destination name.
IBC_CHANNELS: Dict[str, IbcChannelRoute] = {
    "osmosis": _route("Osmosis", "osmosis-1", "channel-141", "channel-0", "osmo", "uosmo"),
    "juno": _route("Juno", "juno-1", "channel-207", "channel-1", "juno", "ujuno"),
    "secret": _route("Secret Network", "secret-4", "channel-235", "channel-0", "secret", "uscrt"),
    "stargaze": _route("Stargaze", "stargaze-1", "channel-730", "channel-239", "stars", "ustars"),
    "noble": _route("Noble", "noble-1", "channel-536", "channel-4", "noble", "uusdc"),
    "akash": _route("Akash", "akashnet-2", "channel-184", "channel-17", "akash", "uakt"),
    "kava": _route("Kava", "kava_2222-10", "channel-277", "channel-0", "kava", "ukava"),
    "injective": _route("Injective", "injective-1", "channel-220", "channel-1", "inj", "inj"),
    "stride": _route("Stride", "stride-1", "channel-391", "channel-0", "stride", "ustrd"),
    "celestia": _route("Celestia", "celestia", "channel-617", "channel-1", "celestia", "utia"),
    "dydx": _route("dYdX", "dydx-mainnet-1", "channel-750", "channel-0", "dydx", "adydx"),
    "neutron": _route("Neutron", "neutron-1", "channel-569", "channel-1", "neutron", "untrn"),
}


VOTE_OPTIONS: Dict[str, int] = {
    "VOTE_OPTION_YES": 1,
    "VOTE_OPTION_ABSTAIN": 2,
    "VOTE_OPTION_NO": 3,
    "VOTE_OPTION_NO_WITH_VETO": 4,
}

PROPOSAL_STATUS: Dict[str, int] = {
    "PROPOSAL_STATUS_UNSPECIFIED": 0,
    "PROPOSAL_STATUS_DEPOSIT_PERIOD": 1,
    "PROPOSAL_STATUS_VOTING_PERIOD": 2,
    "PROPOSAL_STATUS_PASSED": 3,
    "PROPOSAL_STATUS_REJECTED": 4,
    "PROPOSAL_STATUS_FAILED": 5,
}

VALIDATOR_STATUS: Dict[str, int] = {
    "BOND_STATUS_UNSPECIFIED": 0,
    "BOND_STATUS_UNBONDED": 1,
    "BOND_STATUS_UNBONDING": 2,
    "BOND_STATUS_BONDED": 3,
}

MODULE_PATHS: Dict[str, str] = {
    "bank": "/cosmos/bank/v1beta1",
    "staking": "/cosmos/staking/v1beta1",
    "distribution": "/cosmos/distribution/v1beta1",
    "gov": "/cosmos/gov/v1beta1",
    "auth": "/cosmos/auth/v1beta1",
    "slashing": "/cosmos/slashing/v1beta1",
    "mint": "/cosmos/mint/v1beta1",
    "tx": "/cosmos/tx/v1beta1",
    "tendermint": "/cosmos/base/tendermint/v1beta1",
}
