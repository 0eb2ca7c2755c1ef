from typing import Dict, Any, List, Optional

from loguru import logger
from web3 import Web3

from .oracle_payload import PayloadVerifier, MarkerPayloadVerifier, data_feed_id

# accessor -> RedStone data feed symbol
ACCESSORS: Dict[str, str] = {
    "getEthPrice": "ETH",
    "getBtcPrice": "BTC",
    "getRbtcPrice": "RBTC",
    "getRifPrice": "RIF",
}

PRICE_FEED_ABI: List[Dict[str, Any]] = [
    {
        "inputs": [],
        "name": name,
        "outputs": [{"internalType": "uint256", "name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function",
    }
    for name in ACCESSORS
] + [
    {"inputs": [], "name": "CalldataMustHaveValidPayload", "type": "error"},
]


def selector(name: str) -> bytes:
    return bytes(Web3.keccak(text=f"{name}()")[:4])


class UnknownSelector(Exception):
    pass


class PriceFeed:
    """
    In-process PriceFeed facade.

    Mirrors contracts/PriceFeed.sol: four view accessors, no storage, every
    value comes from the payload verifier reading the call data.
    """

    def __init__(self, verifier: Optional[PayloadVerifier] = None):
        self.verifier = verifier or MarkerPayloadVerifier()
        self._dispatch = {selector(name): name for name in ACCESSORS}

    def _price(self, accessor: str, calldata: bytes) -> int:
        symbol = ACCESSORS[accessor]
        return self.verifier.extract_numeric_value(data_feed_id(symbol), calldata)

    def getEthPrice(self, calldata: bytes = b"") -> int:
        return self._price("getEthPrice", calldata or selector("getEthPrice"))

    def getBtcPrice(self, calldata: bytes = b"") -> int:
        return self._price("getBtcPrice", calldata or selector("getBtcPrice"))

    def getRbtcPrice(self, calldata: bytes = b"") -> int:
        return self._price("getRbtcPrice", calldata or selector("getRbtcPrice"))

    def getRifPrice(self, calldata: bytes = b"") -> int:
        return self._price("getRifPrice", calldata or selector("getRifPrice"))

    def call(self, calldata: bytes) -> int:
        """Dispatch raw call data by its 4-byte selector"""
        calldata = bytes(calldata)
        name = self._dispatch.get(calldata[:4])
        if name is None:
            raise UnknownSelector(f"no accessor for selector 0x{calldata[:4].hex()}")
        logger.debug(f"PriceFeed.{name} called with {len(calldata) - 4} payload bytes")
        return getattr(self, name)(calldata)
