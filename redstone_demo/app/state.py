"""
Application state for the price feed page.

``AppState`` is an immutable snapshot; every user action is expressed as an
action object and applied with the pure ``reduce`` function, so transitions
can be exercised without a wallet, network or UI.
"""

from dataclasses import dataclass, field, replace
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Dict, Mapping, Union

SYMBOL_FIELDS: Dict[str, str] = {
    "ETH": "eth",
    "BTC": "btc",
    "RBTC": "rbtc",
    "RIF": "rif",
}

_CENTS = Decimal("0.01")


def format_price(value: Union[Decimal, float, int, str]) -> str:
    """
    Two decimal places, rounding the exact value half-up: 3123.456 -> "3123.46".

    Floats are rounded on their binary value, so 1.005 -> "1.00" as a browser's
    ``toFixed(2)`` would show it.
    """
    exact = Decimal(value) if isinstance(value, float) else Decimal(str(value))
    return str(exact.quantize(_CENTS, rounding=ROUND_HALF_UP))


def display_price(formatted: str) -> str:
    """Grouped for display, trailing zeros dropped: "65000.10" -> "65,000.1" """
    text = f"{Decimal(formatted):,.2f}"
    return text.rstrip("0").rstrip(".") if "." in text else text


class Connection(Enum):
    DISCONNECTED = "disconnected"
    CONNECTED = "connected"


@dataclass(frozen=True)
class PriceBoard:
    """The four display tiles, already formatted"""
    eth: str = "0"
    btc: str = "0"
    rbtc: str = "0"
    rif: str = "0"

    def as_dict(self) -> Dict[str, str]:
        return {symbol: getattr(self, attr) for symbol, attr in SYMBOL_FIELDS.items()}


@dataclass(frozen=True)
class AppState:
    connection: Connection = Connection.DISCONNECTED
    account: str = ""
    chain_id: str = ""
    contract_address: str = ""
    prices: PriceBoard = field(default_factory=PriceBoard)
    loading: bool = False
    error: str = ""
    # id of the most recent fetch; results tagged with an older id are stale
    generation: int = 0

    @property
    def is_connected(self) -> bool:
        return self.connection is Connection.CONNECTED

    def to_dict(self) -> Dict[str, object]:
        return {
            "connection": self.connection.value,
            "account": self.account,
            "chain_id": self.chain_id,
            "contract_address": self.contract_address,
            "prices": self.prices.as_dict(),
            "loading": self.loading,
            "error": self.error,
            "generation": self.generation,
        }


# Actions

@dataclass(frozen=True)
class ConnectSucceeded:
    account: str
    chain_id: str


@dataclass(frozen=True)
class ConnectFailed:
    message: str


@dataclass(frozen=True)
class ContractAddressChanged:
    address: str


@dataclass(frozen=True)
class FetchStarted:
    generation: int


@dataclass(frozen=True)
class FetchSucceeded:
    generation: int
    prices: Mapping[str, str]


@dataclass(frozen=True)
class FetchFailed:
    generation: int
    message: str


@dataclass(frozen=True)
class FetchFinished:
    generation: int


@dataclass(frozen=True)
class ErrorDismissed:
    pass


Action = Union[
    ConnectSucceeded, ConnectFailed, ContractAddressChanged,
    FetchStarted, FetchSucceeded, FetchFailed, FetchFinished, ErrorDismissed,
]


def reduce(state: AppState, action: Action) -> AppState:
    if isinstance(action, ConnectSucceeded):
        return replace(state, connection=Connection.CONNECTED, account=action.account,
                       chain_id=action.chain_id, error="")
    if isinstance(action, ConnectFailed):
        # No way back to DISCONNECTED once connected
        return replace(state, error=action.message)
    if isinstance(action, ContractAddressChanged):
        return replace(state, contract_address=action.address)
    if isinstance(action, FetchStarted):
        return replace(state, loading=True, error="", generation=action.generation)
    if isinstance(action, FetchSucceeded):
        if action.generation != state.generation:
            return state
        missing = set(SYMBOL_FIELDS) - set(action.prices)
        if missing:
            raise ValueError(f"FetchSucceeded without prices for {sorted(missing)}")
        board = PriceBoard(**{SYMBOL_FIELDS[s]: action.prices[s] for s in SYMBOL_FIELDS})
        return replace(state, prices=board)
    if isinstance(action, FetchFailed):
        if action.generation != state.generation:
            return state
        return replace(state, error=action.message)
    if isinstance(action, FetchFinished):
        if action.generation != state.generation:
            return state
        return replace(state, loading=False)
    if isinstance(action, ErrorDismissed):
        return replace(state, error="")
    raise TypeError(f"Unknown action {action!r}")
