"""
RedStone oracle payload handling at the facade boundary.

A RedStone payload is opaque trailing calldata ending with a fixed 9-byte
marker. This module only decides whether a call carries such a payload; the
signature, signer and staleness checks belong to the external verification
library and are plugged in through ``PayloadVerifier``.
"""

from abc import ABC, abstractmethod
from typing import Callable, Optional

from web3 import Web3

REDSTONE_MARKER = bytes.fromhex("000002ed57011e0000")

# (data_feed_id, payload) -> attested numeric value
PayloadDecoder = Callable[[bytes, bytes], int]


class CalldataMustHaveValidPayload(Exception):
    """Call data does not end with a RedStone payload."""

    SIGNATURE = "CalldataMustHaveValidPayload()"
    SELECTOR = bytes(Web3.keccak(text=SIGNATURE)[:4])

    def __init__(self, message: str = "CalldataMustHaveValidPayload"):
        if "CalldataMustHaveValidPayload" not in message:
            message = f"CalldataMustHaveValidPayload: {message}"
        super().__init__(message)


class PayloadVerificationUnavailable(Exception):
    """A payload is present but no verifier capable of decoding it is configured."""


def data_feed_id(symbol: str) -> bytes:
    """Solidity ``bytes32("ETH")``: UTF-8, right-padded with zero bytes."""
    raw = symbol.encode("utf-8")
    if len(raw) > 32:
        raise ValueError(f"data feed id longer than 32 bytes: {symbol!r}")
    return raw.ljust(32, b"\x00")


def append_payload(calldata: bytes, payload: bytes) -> bytes:
    return bytes(calldata) + bytes(payload)


def has_redstone_marker(calldata: bytes) -> bool:
    return len(calldata) > len(REDSTONE_MARKER) and calldata.endswith(REDSTONE_MARKER)


class PayloadVerifier(ABC):
    """
    Contract every payload verification backend fulfils.

    ``extract_numeric_value`` receives the bytes32 feed id and the complete
    call data (selector, arguments and trailing payload). It returns the
    attested value or raises; it must never fall back to a default value.
    """

    @abstractmethod
    def extract_numeric_value(self, feed_id: bytes, calldata: bytes) -> int:
        ...


class MarkerPayloadVerifier(PayloadVerifier):
    """Rejects calls without a RedStone marker, hands the rest to ``decoder``."""

    def __init__(self, decoder: Optional[PayloadDecoder] = None, args_length: int = 4):
        self.decoder = decoder
        # Bytes before the payload: 4-byte selector for the zero-arg accessors
        self.args_length = args_length

    def extract_numeric_value(self, feed_id: bytes, calldata: bytes) -> int:
        calldata = bytes(calldata)
        if len(calldata) <= self.args_length or not has_redstone_marker(calldata[self.args_length:]):
            raise CalldataMustHaveValidPayload()
        if self.decoder is None:
            raise PayloadVerificationUnavailable(
                "RedStone payload present but no payload decoder is configured"
            )
        return int(self.decoder(feed_id, calldata[self.args_length:]))
