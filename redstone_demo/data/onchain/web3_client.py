from web3 import Web3
from web3.exceptions import ContractLogicError
from eth_abi import decode
from functools import lru_cache
from loguru import logger

from redstone_demo.contracts import (
    ACCESSORS,
    CalldataMustHaveValidPayload,
    append_payload,
    selector,
)
from redstone_demo.data.models import ContractAddress

@lru_cache(maxsize=16)
def get_w3(rpc_url: str) -> Web3:
    if not rpc_url:
        raise RuntimeError("No RPC URL configured")
    w3 = Web3(Web3.HTTPProvider(rpc_url, request_kwargs={"timeout": 15}))
    return w3


def _is_missing_payload(exc: ContractLogicError) -> bool:
    data = getattr(exc, "data", None)
    if isinstance(data, (bytes, bytearray)):
        data = "0x" + bytes(data).hex()
    if isinstance(data, str) and data.lower().startswith("0x" + CalldataMustHaveValidPayload.SELECTOR.hex()):
        return True
    # Nodes that decode custom errors (hardhat) put the name in the message
    return "CalldataMustHaveValidPayload" in str(exc)


class PriceFeedContract:
    """
    Client-side binding for a deployed PriceFeed.

    Each accessor is a zero-arg view call; the RedStone payload is appended
    raw after the selector, so calldata is built by hand instead of through
    ``w3.eth.contract``.
    """

    def __init__(self, w3: Web3, address: ContractAddress):
        self.w3 = w3
        self.address = address

    def get_price(self, accessor: str, payload: bytes = b"") -> int:
        if accessor not in ACCESSORS:
            raise AttributeError(f"PriceFeed has no accessor {accessor}")
        calldata = append_payload(selector(accessor), payload)
        try:
            raw = self.w3.eth.call({"to": self.address.value, "data": "0x" + calldata.hex()})
        except ContractLogicError as e:
            if _is_missing_payload(e):
                logger.debug(f"{accessor} reverted: missing RedStone payload")
                raise CalldataMustHaveValidPayload(str(e)) from e
            raise
        (value,) = decode(["uint256"], bytes(raw))
        return value

    def get_eth_price(self, payload: bytes = b"") -> int:
        return self.get_price("getEthPrice", payload)

    def get_btc_price(self, payload: bytes = b"") -> int:
        return self.get_price("getBtcPrice", payload)

    def get_rbtc_price(self, payload: bytes = b"") -> int:
        return self.get_price("getRbtcPrice", payload)

    def get_rif_price(self, payload: bytes = b"") -> int:
        return self.get_price("getRifPrice", payload)
