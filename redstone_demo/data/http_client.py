import aiohttp
from loguru import logger
from typing import Optional, Dict, Any
from contextlib import asynccontextmanager

DEFAULT_TIMEOUT = aiohttp.ClientTimeout(total=15)

@asynccontextmanager
async def http_session(timeout: Optional[aiohttp.ClientTimeout] = None):
    async with aiohttp.ClientSession(timeout=timeout or DEFAULT_TIMEOUT) as s:
        yield s

async def get_json(url: str, params: Optional[Dict[str, Any]]=None, headers: Optional[Dict[str,str]]=None,
                   session: Optional[aiohttp.ClientSession]=None, timeout: Optional[aiohttp.ClientTimeout]=None):
    if session is not None:
        return await _get(session, url, params, headers)
    async with http_session(timeout) as s:
        return await _get(s, url, params, headers)

async def _get(s: aiohttp.ClientSession, url: str, params, headers):
    logger.debug(f"GET {url} params={params}")
    async with s.get(url, params=params, headers=headers) as r:
        r.raise_for_status()
        # RedStone serves JSON with a text/plain content type on some edges
        return await r.json(content_type=None)
