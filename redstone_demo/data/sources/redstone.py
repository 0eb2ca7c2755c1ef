from typing import Dict, Any, Optional
from datetime import datetime, timezone
from decimal import Decimal

import aiohttp
from loguru import logger

from .base import DataSource
from ..http_client import get_json
from ..models import PriceQuote
from redstone_demo.errors import PriceDataError


def parse_latest_price(symbol: str, data: Any, provider: str = "redstone") -> PriceQuote:
    """Turn a /prices response body into a quote; element 0 must carry a numeric value."""
    first = data[0] if isinstance(data, list) and data else None
    raw = first.get("value") if isinstance(first, dict) else None
    # bool is an int subclass; zero is treated as missing like the upstream check
    if isinstance(raw, bool) or not isinstance(raw, (int, float)) or not raw:
        raise PriceDataError(f"No price value for {symbol}", symbol=symbol, context={"body": data})

    ts = None
    if isinstance(first.get("timestamp"), (int, float)):
        ts = datetime.fromtimestamp(first["timestamp"] / 1000, tz=timezone.utc)
    return PriceQuote(symbol=symbol, value=Decimal(str(raw)), provider=provider, ts=ts)


class RedStoneApi(DataSource):
    name = "redstone"
    BASE = "https://api.redstone.finance"

    def __init__(self, base_url: Optional[str] = None, provider: str = "redstone",
                 timeout_seconds: Optional[float] = None):
        self.base_url = (base_url or self.BASE).rstrip("/")
        self.provider = provider
        self.timeout = aiohttp.ClientTimeout(total=timeout_seconds) if timeout_seconds else None

    async def health(self) -> Dict[str, Any]:
        try:
            await self.latest_price("ETH")
            return {"ok": True}
        except Exception as e:
            return {"ok": False, "error": str(e)}

    async def latest_price(self, symbol: str, session: Optional[aiohttp.ClientSession] = None) -> PriceQuote:
        data = await get_json(
            f"{self.base_url}/prices",
            params={"symbol": symbol, "provider": self.provider, "limit": 1},
            session=session,
            timeout=self.timeout,
        )
        logger.debug(f"RedStone {symbol}: {data}")
        return parse_latest_price(symbol, data, self.provider)
