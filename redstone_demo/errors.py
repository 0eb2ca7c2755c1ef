"""
Error hierarchy shared by the data, wallet, app and deployment layers.

Every user-facing action catches these at the top of its handler and turns
them into a single display string. Oracle payload errors live next to the
contract facade in ``redstone_demo.contracts.oracle_payload``.
"""

from typing import Optional, Dict, Any


class PriceFeedDemoError(Exception):
    """Base class for all application errors."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}


class ConfigError(PriceFeedDemoError):
    """Missing or unusable configuration value."""


class InvalidContractAddress(PriceFeedDemoError, ValueError):
    """User supplied contract address is not a valid chain address."""

    def __init__(self, message: str, raw: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.raw = raw


class PriceDataError(PriceFeedDemoError):
    """Price endpoint returned a body without a usable value."""

    def __init__(self, message: str, symbol: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.symbol = symbol


class WalletError(PriceFeedDemoError):
    """Wallet provider missing or refused a request."""


class ArtifactError(PriceFeedDemoError):
    """Compiled contract artifact could not be read."""


class DeploymentError(PriceFeedDemoError):
    """Creation transaction did not produce a contract."""

    def __init__(self, message: str, tx_hash: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.tx_hash = tx_hash
