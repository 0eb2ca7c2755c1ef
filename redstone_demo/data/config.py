import os
import json
import logging
from typing import Dict, Any, Optional, List
from pathlib import Path

from dotenv import load_dotenv

from redstone_demo.errors import ConfigError

logger = logging.getLogger(__name__)

# Environment variables that override config.json (dot-notation key)
ENV_OVERRIDES = {
    "RSK_RPC_URL": "network.rpc_url",
    "CONTRACT_ADDRESS": "contract.address",
    "REDSTONE_API_URL": "price_api.base_url",
    "PRICE_FEED_ARTIFACT": "deployment.artifact_path",
}

DEFAULTS: Dict[str, Any] = {
    "price_api": {
        "base_url": "https://api.redstone.finance",
        "provider": "redstone",
        "symbols": ["ETH", "BTC", "RBTC", "RIF"],
        "timeout_seconds": 15,
    },
    "network": {
        "rpc_url": "https://public-node.testnet.rsk.co",
    },
    "contract": {
        "address": "",
    },
    "deployment": {
        "artifact_path": "artifacts/contracts/PriceFeed.sol/PriceFeed.json",
        "receipt_timeout_seconds": 120,
    },
}


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _merge(out[k], v)
        else:
            out[k] = v
    return out


class ConfigManager:
    """
    Centralized configuration manager.
    Singleton pattern to load and access config settings.
    """
    _instance = None
    _config: Dict[str, Any] = {}

    def __new__(cls, config_path: Optional[str] = None):
        if cls._instance is None:
            cls._instance = super(ConfigManager, cls).__new__(cls)
            cls._instance._load_config(config_path)
        return cls._instance

    @classmethod
    def reset(cls):
        """Drop the cached instance so the next call reloads from disk/env"""
        cls._instance = None

    def _load_config(self, config_path: Optional[str] = None):
        """Load configuration from JSON file and env vars"""
        load_dotenv()
        file_config: Dict[str, Any] = {}
        try:
            # Default path: project_root/config/config.json
            if config_path:
                path = Path(config_path)
            else:
                path = Path(__file__).parent.parent.parent / "config" / "config.json"

            if path.exists():
                with open(path, "r") as f:
                    file_config = json.load(f)
                logger.info(f"Loaded config from {path}")
            else:
                logger.warning(f"Config file not found at {path}. Using defaults.")

        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Error loading config: {e}")
            file_config = {}

        self._config = _merge(DEFAULTS, file_config)
        self._apply_env_overrides()

    def _apply_env_overrides(self):
        for env_var, key in ENV_OVERRIDES.items():
            value = os.getenv(env_var)
            if not value:
                continue
            section, name = key.split(".")
            self._config.setdefault(section, {})[name] = value
            logger.debug(f"{key} overridden by ${env_var}")

    def get(self, key: str, default: Any = None) -> Any:
        """Get config value by key (dot notation supported)"""
        keys = key.split(".")
        value = self._config

        try:
            for k in keys:
                value = value.get(k)
                if value is None:
                    return default
            return value
        except AttributeError:
            return default

    # Type-safe getters for specific sections

    @property
    def rpc_url(self) -> str:
        return self.get("network.rpc_url", "")

    @property
    def contract_address(self) -> str:
        return self.get("contract.address", "")

    @property
    def price_api_timeout(self) -> float:
        return float(self.get("price_api.timeout_seconds", 15))

    @property
    def artifact_path(self) -> Path:
        return Path(self.get("deployment.artifact_path"))

    def get_symbols(self) -> List[str]:
        return list(self.get("price_api.symbols", []))

    def get_private_key(self) -> str:
        # Never stored in config.json
        key = os.getenv("PRIVATE_KEY", "").strip()
        if not key:
            raise ConfigError("PRIVATE_KEY is not set")
        return key


