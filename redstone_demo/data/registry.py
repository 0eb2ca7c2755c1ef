from typing import Optional

from .config import ConfigManager
from .sources.redstone import RedStoneApi

class DataRegistry:
    def __init__(self, config: Optional[ConfigManager] = None):
        config = config or ConfigManager()
        self.redstone = RedStoneApi(
            base_url=config.get("price_api.base_url"),
            provider=config.get("price_api.provider", "redstone"),
            timeout_seconds=config.price_api_timeout,
        )
