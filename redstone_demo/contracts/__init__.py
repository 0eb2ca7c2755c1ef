"""
PriceFeed contract facade: ABI, accessor table and oracle payload checks.
"""

from .oracle_payload import (
    REDSTONE_MARKER,
    CalldataMustHaveValidPayload,
    PayloadVerificationUnavailable,
    PayloadVerifier,
    MarkerPayloadVerifier,
    append_payload,
    data_feed_id,
)
from .price_feed import PRICE_FEED_ABI, ACCESSORS, PriceFeed, UnknownSelector, selector

__all__ = [
    "REDSTONE_MARKER",
    "CalldataMustHaveValidPayload",
    "PayloadVerificationUnavailable",
    "PayloadVerifier",
    "MarkerPayloadVerifier",
    "append_payload",
    "data_feed_id",
    "PRICE_FEED_ABI",
    "ACCESSORS",
    "PriceFeed",
    "UnknownSelector",
    "selector",
]
