"""
Wallet provider seam.

The application talks to wallets through the EIP-1193 ``request`` shape only,
so a browser-injected wallet, a local key or a test double are interchangeable.
"""

import asyncio
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional

from eth_account.signers.local import LocalAccount
from loguru import logger
from web3 import Web3

from redstone_demo.data.models import NetworkDescriptor
from redstone_demo.data.onchain.web3_client import get_w3
from redstone_demo.errors import WalletError

# EIP-1193 / EIP-3085 error codes
USER_REJECTED = 4001
UNSUPPORTED_METHOD = 4200
UNRECOGNIZED_CHAIN = 4902
INVALID_PARAMS = -32602


class ProviderRpcError(WalletError):
    def __init__(self, code: int, message: str):
        super().__init__(message, context={"code": code})
        self.code = code


class WalletProvider(ABC):
    """EIP-1193 provider surface"""

    def __init__(self):
        self._listeners: Dict[str, List[Callable[[Any], None]]] = {}

    @abstractmethod
    async def request(self, method: str, params: Optional[List[Any]] = None) -> Any:
        ...

    def on(self, event: str, callback: Callable[[Any], None]) -> None:
        self._listeners.setdefault(event, []).append(callback)

    def remove_listener(self, event: str, callback: Callable[[Any], None]) -> None:
        if callback in self._listeners.get(event, []):
            self._listeners[event].remove(callback)

    def _emit(self, event: str, payload: Any) -> None:
        for cb in list(self._listeners.get(event, [])):
            cb(payload)


Approver = Callable[[str, Optional[List[Any]]], bool]


class Web3WalletProvider(WalletProvider):
    """
    Local-key wallet backed by a JSON-RPC node.

    ``approve`` stands in for the wallet's confirmation dialog; returning
    False rejects the request with code 4001.
    """

    def __init__(self, account: LocalAccount, rpc_url: str,
                 approve: Optional[Approver] = None,
                 w3_factory: Callable[[str], Web3] = get_w3):
        super().__init__()
        self.account = account
        self.rpc_url = rpc_url
        self.approve = approve or (lambda method, params: True)
        self._w3_factory = w3_factory
        self._networks: Dict[str, NetworkDescriptor] = {}

    @property
    def w3(self) -> Web3:
        return self._w3_factory(self.rpc_url)

    def _confirm(self, method: str, params: Optional[List[Any]]) -> None:
        if not self.approve(method, params):
            raise ProviderRpcError(USER_REJECTED, "User rejected the request.")

    async def _chain_id(self) -> str:
        chain_id = await asyncio.to_thread(lambda: self.w3.eth.chain_id)
        return hex(chain_id)

    async def request(self, method: str, params: Optional[List[Any]] = None) -> Any:
        logger.debug(f"wallet request {method}")
        if method == "eth_requestAccounts":
            self._confirm(method, params)
            return [self.account.address]
        if method == "eth_accounts":
            return [self.account.address]
        if method == "eth_chainId":
            return await self._chain_id()
        if method == "wallet_addEthereumChain":
            return await self._add_chain(params)
        if method == "wallet_switchEthereumChain":
            return await self._switch_chain(params)
        raise ProviderRpcError(UNSUPPORTED_METHOD, f"Method {method} is not supported")

    async def _add_chain(self, params: Optional[List[Any]]) -> None:
        if not params:
            raise ProviderRpcError(INVALID_PARAMS, "wallet_addEthereumChain expects a network descriptor")
        network = NetworkDescriptor.model_validate(params[0])
        if not network.rpc_urls:
            raise ProviderRpcError(INVALID_PARAMS, f"{network.chain_name} has no RPC URL")
        self._confirm("wallet_addEthereumChain", params)
        self._networks[network.chain_id.lower()] = network
        await self._activate(network)

    async def _switch_chain(self, params: Optional[List[Any]]) -> None:
        chain_id = (params or [{}])[0].get("chainId", "").lower()
        network = self._networks.get(chain_id)
        if network is None:
            raise ProviderRpcError(UNRECOGNIZED_CHAIN, f"Unrecognized chain ID {chain_id}")
        self._confirm("wallet_switchEthereumChain", params)
        await self._activate(network)

    async def _activate(self, network: NetworkDescriptor) -> None:
        previous = self.rpc_url
        self.rpc_url = network.rpc_urls[0]
        reported = await self._chain_id()
        if int(reported, 16) != network.chain_id_int:
            self.rpc_url = previous
            raise ProviderRpcError(
                INVALID_PARAMS,
                f"RPC {network.rpc_urls[0]} reports chain {reported}, expected {network.chain_id}",
            )
        logger.info(f"Wallet switched to {network.chain_name} ({network.chain_id})")
        self._emit("chainChanged", network.chain_id)
