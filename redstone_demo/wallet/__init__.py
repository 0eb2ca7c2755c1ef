from .provider import (
    WalletProvider,
    Web3WalletProvider,
    ProviderRpcError,
    USER_REJECTED,
    UNSUPPORTED_METHOD,
    UNRECOGNIZED_CHAIN,
)

__all__ = [
    "WalletProvider",
    "Web3WalletProvider",
    "ProviderRpcError",
    "USER_REJECTED",
    "UNSUPPORTED_METHOD",
    "UNRECOGNIZED_CHAIN",
]
