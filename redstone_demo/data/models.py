import re
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List, Dict, Any
from datetime import datetime
from decimal import Decimal

from web3 import Web3

from redstone_demo.errors import InvalidContractAddress

_HEX_ADDRESS = re.compile(r"^0x[0-9a-fA-F]{40}$")


class PriceQuote(BaseModel):
    symbol: str
    value: Decimal
    provider: str = "redstone"
    ts: Optional[datetime] = None


class NativeCurrency(BaseModel):
    name: str
    symbol: str
    decimals: int = 18


class NetworkDescriptor(BaseModel):
    """Parameters a wallet needs to add/select a chain (wallet_addEthereumChain shape)"""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    chain_id: str = Field(alias="chainId")  # hex, e.g. "0x1f"
    chain_name: str = Field(alias="chainName")
    native_currency: NativeCurrency = Field(alias="nativeCurrency")
    rpc_urls: List[str] = Field(alias="rpcUrls")
    block_explorer_urls: List[str] = Field(default_factory=list, alias="blockExplorerUrls")

    @property
    def chain_id_int(self) -> int:
        return int(self.chain_id, 16)

    def to_wallet_params(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


RSK_TESTNET = NetworkDescriptor(
    chainId="0x1f",
    chainName="RSK Testnet",
    nativeCurrency=NativeCurrency(name="tRBTC", symbol="tRBTC", decimals=18),
    rpcUrls=["https://public-node.testnet.rsk.co"],
    blockExplorerUrls=["https://explorer.testnet.rsk.co"],
)


class WalletSession(BaseModel):
    model_config = ConfigDict(frozen=True)

    account: str
    chain_id: str
    connected_at: datetime = Field(default_factory=datetime.utcnow)


class ContractAddress(BaseModel):
    """Chain address that has passed format and checksum validation"""
    model_config = ConfigDict(frozen=True)

    value: str

    @classmethod
    def parse(cls, text: Optional[str]) -> "ContractAddress":
        raw = (text or "").strip()
        if not raw:
            raise InvalidContractAddress("Please enter a contract address", raw=raw)
        if not _HEX_ADDRESS.match(raw):
            raise InvalidContractAddress(
                f"Invalid contract address: {raw!r} (expected 0x followed by 40 hex characters)",
                raw=raw,
            )
        body = raw[2:]
        # All-lower / all-upper carries no checksum; mixed case must be EIP-55
        if body != body.lower() and body != body.upper() and not Web3.is_checksum_address(raw):
            raise InvalidContractAddress(f"Invalid contract address checksum: {raw}", raw=raw)
        return cls(value=Web3.to_checksum_address(raw))

    def __str__(self) -> str:
        return self.value
