import asyncio
from typing import Dict, List, Optional

from loguru import logger

from ..models import PriceQuote
from ..sources.redstone import RedStoneApi

DEFAULT_SYMBOLS = ["ETH", "BTC", "RBTC", "RIF"]

async def fetch_prices(api: RedStoneApi, symbols: Optional[List[str]] = None) -> Dict[str, PriceQuote]:
    """
    Fetch the latest quote for every symbol concurrently.
    All-or-nothing: the first failing request propagates, sibling requests
    are left to finish on their own sessions and their results are dropped.
    """
    symbols = list(symbols or DEFAULT_SYMBOLS)
    logger.info(f"Fetching prices from RedStone for {', '.join(symbols)}")
    quotes = await asyncio.gather(*(api.latest_price(sym) for sym in symbols))
    return dict(zip(symbols, quotes))
