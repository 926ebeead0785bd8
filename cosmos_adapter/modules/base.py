"""Shared plumbing for resource modules."""

from typing import Any, Dict, Mapping, Optional

from ..config import NetworkProfile
from ..constants import format_denom, get_decimals, get_denom_info
from ..exceptions import MissingParameter, UnknownOperation
from ..units import format_display, to_decimal_units

Params = Mapping[str, Any]


def require(params: Params, name: str) -> Any:
    """Fetch a required parameter."""
    value = params.get(name)
    if value is None or value == "":
        raise MissingParameter(name)
    return value


def optional(params: Params, name: str, default: Any = None) -> Any:
    value = params.get(name)
    return default if value is None or value == "" else value


def require_int(params: Params, name: str) -> int:
    value = require(params, name)
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValueError(f"Parameter {name} must be an integer, got {value!r}") from None


def coin_decimals(denom: str, profile: NetworkProfile) -> Optional[int]:
    """Decimals for the native denom and catalogued IBC denoms, else None."""
    if denom == profile.min_denom:
        return profile.decimals
    if get_denom_info(denom) is not None:
        return get_decimals(denom)
    return None


def display_amount(amount: str, denom: str, profile: NetworkProfile) -> str:
    """Display amount for known denoms; unknown denoms are returned as given.

    Decimal coin amounts (rewards, commission) are truncated to whole base units.
    """
    decimals = coin_decimals(denom, profile)
    if decimals is None:
        return amount
    return to_decimal_units(str(amount).split(".")[0] or "0", decimals)


def format_balance(amount: str, denom: str, profile: NetworkProfile) -> str:
    if denom == profile.min_denom:
        return format_display(amount, denom, profile.decimals)
    decimals = coin_decimals(denom, profile)
    if decimals is None:
        return format_display(amount, denom, 0)
    return f"{to_decimal_units(amount, decimals)} {format_denom(denom)}"


def coin_with_display(coin: Mapping[str, Any], profile: NetworkProfile) -> Dict[str, Any]:
    return {
        "denom": coin["denom"],
        "amount": coin["amount"],
        "displayAmount": display_amount(coin["amount"], coin["denom"], profile),
    }


class ResourceModule:
    """Base class mapping operation names onto coroutine methods.

    Subclasses declare ``OPERATIONS``; every entry must name a method of the
    subclass, which is checked when the class is defined.
    """

    resource = ""
    OPERATIONS: Dict[str, str] = {}

    def __init_subclass__(cls, **kwargs: Any):
        super().__init_subclass__(**kwargs)
        missing = [m for m in cls.OPERATIONS.values() if not callable(getattr(cls, m, None))]
        if missing:
            raise TypeError(f"{cls.__name__} declares operations without handlers: {missing}")

    def __init__(self, client):
        """Initialize module against the owning dispatcher."""
        self.client = client

    @property
    def profile(self) -> NetworkProfile:
        return self.client.profile

    async def run(self, operation: str, params: Params) -> Any:
        method_name = self.OPERATIONS.get(operation)
        if method_name is None:
            raise UnknownOperation(self.resource, operation)
        return await getattr(self, method_name)(params)
