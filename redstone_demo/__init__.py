"""
RedStone Price Feed Demo - RSK testnet price feed facade, deployment and dashboard
"""

__version__ = "0.1.0"
