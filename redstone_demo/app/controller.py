from dataclasses import dataclass
from typing import Callable, Optional

from loguru import logger

from redstone_demo.app.state import (
    AppState,
    SYMBOL_FIELDS,
    Action,
    ConnectFailed,
    ConnectSucceeded,
    ContractAddressChanged,
    ErrorDismissed,
    FetchFailed,
    FetchFinished,
    FetchStarted,
    FetchSucceeded,
    format_price,
    reduce,
)
from redstone_demo.data.models import ContractAddress, NetworkDescriptor, RSK_TESTNET, WalletSession
from redstone_demo.data.onchain.web3_client import PriceFeedContract
from redstone_demo.data.pipelines.price_feed import fetch_prices
from redstone_demo.data.sources.redstone import RedStoneApi
from redstone_demo.errors import PriceDataError, WalletError
from redstone_demo.wallet.provider import WalletProvider

INSTALL_WALLET = "Please install MetaMask"


@dataclass(frozen=True)
class Notification:
    title: str
    description: str
    status: str  # "success" | "error"
    duration: int = 5


def _log_notification(n: Notification) -> None:
    if n.status == "error":
        logger.error(f"{n.title}: {n.description}")
    else:
        logger.info(f"{n.title}: {n.description}")


def _same_chain(a: str, b: str) -> bool:
    try:
        return int(str(a), 16) == int(str(b), 16)
    except ValueError:
        return str(a).lower() == str(b).lower()


class PriceFeedApp:
    """
    Price feed page controller.

    Owns the current ``AppState`` and turns wallet/HTTP results into actions.
    Every handler catches its own failures and leaves the app usable.
    """

    def __init__(self, wallet: Optional[WalletProvider], price_api: Optional[RedStoneApi] = None,
                 network: NetworkDescriptor = RSK_TESTNET, contract_address: str = "",
                 notify: Optional[Callable[[Notification], None]] = None):
        self.wallet = wallet
        self.price_api = price_api or RedStoneApi()
        self.network = network
        self.notify = notify or _log_notification
        self.state = AppState(contract_address=contract_address)
        self.session: Optional[WalletSession] = None
        self.contract: Optional[PriceFeedContract] = None
        self._generation = 0

    def dispatch(self, action: Action) -> AppState:
        self.state = reduce(self.state, action)
        return self.state

    async def connect_wallet(self) -> AppState:
        try:
            if self.wallet is None:
                raise WalletError(INSTALL_WALLET)

            accounts = await self.wallet.request("eth_requestAccounts")
            if not accounts:
                raise WalletError("Wallet returned no accounts")

            chain_id = await self.wallet.request("eth_chainId")
            if not _same_chain(chain_id, self.network.chain_id):
                logger.info(f"Wallet on chain {chain_id}, requesting {self.network.chain_name}")
                await self.wallet.request("wallet_addEthereumChain", [self.network.to_wallet_params()])
                chain_id = self.network.chain_id

            self.session = WalletSession(account=accounts[0], chain_id=chain_id)
            self.dispatch(ConnectSucceeded(account=self.session.account, chain_id=self.session.chain_id))
            self.notify(Notification(
                "Wallet Connected", f"Successfully connected to {self.network.chain_name}", "success",
            ))
        except Exception as e:
            message = str(e) or e.__class__.__name__
            logger.error(f"Wallet connection failed: {message}")
            self.dispatch(ConnectFailed(message))
            self.notify(Notification("Error", message, "error"))
        return self.state

    def set_contract_address(self, address: str) -> AppState:
        return self.dispatch(ContractAddressChanged(address))

    def dismiss_error(self) -> AppState:
        return self.dispatch(ErrorDismissed())

    def _bind(self, address: ContractAddress) -> Optional[PriceFeedContract]:
        w3 = getattr(self.wallet, "w3", None)
        return PriceFeedContract(w3, address) if w3 is not None else None

    async def _load_prices(self):
        try:
            quotes = await fetch_prices(self.price_api, list(SYMBOL_FIELDS))
        except PriceDataError as e:
            logger.error(f"Price fetching error: {e.message} {e.context}")
            raise PriceDataError("Failed to fetch prices: Failed to fetch prices from RedStone",
                                 symbol=e.symbol) from e
        except Exception as e:
            logger.error(f"Price fetching error: {e!r}")
            raise PriceDataError(f"Failed to fetch prices: {str(e) or e.__class__.__name__}") from e
        # back to the JSON number the API sent, so rounding sees the same double
        return {symbol: format_price(float(q.value)) for symbol, q in quotes.items()}

    async def fetch_prices(self) -> AppState:
        self._generation += 1
        generation = self._generation
        self.dispatch(FetchStarted(generation))
        try:
            address = ContractAddress.parse(self.state.contract_address)
            if self.wallet is None:
                raise WalletError(INSTALL_WALLET)
            self.contract = self._bind(address)

            formatted = await self._load_prices()
            logger.info(f"Formatted prices: {formatted}")
            before = self.state
            self.dispatch(FetchSucceeded(generation, formatted))
            if self.state is before:
                logger.debug(f"Discarded stale fetch #{generation}")
            else:
                self.notify(Notification("Prices Updated", "Successfully fetched latest prices", "success", 3))
        except Exception as e:
            message = getattr(e, "message", None) or str(e) or e.__class__.__name__
            logger.error(f"Main error: {message}")
            before = self.state
            self.dispatch(FetchFailed(generation, message))
            if self.state is not before:
                self.notify(Notification("Error", message, "error"))
        finally:
            self.dispatch(FetchFinished(generation))
        return self.state
