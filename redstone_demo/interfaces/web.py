"""
Web Interface - FastAPI dashboard for the price feed page
"""

from dataclasses import asdict
from datetime import datetime
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Depends, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates
from pydantic import BaseModel
from loguru import logger

from redstone_demo import __version__
from redstone_demo.app.controller import PriceFeedApp
from redstone_demo.app.state import display_price
from redstone_demo.data.config import ConfigManager
from redstone_demo.data.registry import DataRegistry
from redstone_demo.wallet.provider import WalletProvider

templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))
templates.env.filters["price"] = display_price


class ContractAddressRequest(BaseModel):
    address: str


class StateResponse(BaseModel):
    connection: str
    account: str
    chain_id: str
    contract_address: str
    prices: dict
    loading: bool
    error: str
    generation: int
    notifications: list = []


def create_app(config: Optional[ConfigManager] = None, wallet: Optional[WalletProvider] = None,
               price_feed: Optional[PriceFeedApp] = None) -> FastAPI:
    app = FastAPI(
        title="RedStone Price Feed Demo",
        description="RSK testnet price feed dashboard",
        version=__version__,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    notifications: list = []

    if price_feed is None:
        config = config or ConfigManager()
        price_feed = PriceFeedApp(
            wallet,
            price_api=DataRegistry(config).redstone,
            contract_address=config.contract_address,
        )
    price_feed.notify = notifications.append
    app.state.price_feed = price_feed
    app.state.notifications = notifications

    def get_price_feed(request: Request) -> PriceFeedApp:
        return request.app.state.price_feed

    def snapshot(controller: PriceFeedApp) -> StateResponse:
        # Notifications are delivered once
        pending = [asdict(n) for n in notifications]
        notifications.clear()
        return StateResponse(**controller.state.to_dict(), notifications=pending)

    @app.get("/api/health")
    async def health_check():
        """Health check endpoint"""
        return {"status": "healthy", "timestamp": datetime.now().isoformat()}

    @app.get("/api/state", response_model=StateResponse)
    async def get_state(controller: PriceFeedApp = Depends(get_price_feed)):
        return snapshot(controller)

    @app.post("/api/connect", response_model=StateResponse)
    async def connect(controller: PriceFeedApp = Depends(get_price_feed)):
        await controller.connect_wallet()
        return snapshot(controller)

    @app.put("/api/contract-address", response_model=StateResponse)
    async def set_contract_address(body: ContractAddressRequest,
                                   controller: PriceFeedApp = Depends(get_price_feed)):
        controller.set_contract_address(body.address)
        return snapshot(controller)

    @app.post("/api/prices/fetch", response_model=StateResponse)
    async def fetch(controller: PriceFeedApp = Depends(get_price_feed)):
        state = await controller.fetch_prices()
        if state.error:
            logger.warning(f"Fetch finished with error: {state.error}")
        return snapshot(controller)

    @app.delete("/api/error", response_model=StateResponse)
    async def dismiss_error(controller: PriceFeedApp = Depends(get_price_feed)):
        controller.dismiss_error()
        return snapshot(controller)

    @app.get("/", response_class=HTMLResponse)
    async def dashboard(request: Request, controller: PriceFeedApp = Depends(get_price_feed)):
        """Main dashboard page"""
        state = controller.state
        return templates.TemplateResponse(request, "dashboard.html", {
            "connected": state.is_connected,
            "account": state.account,
            "contract_address": state.contract_address,
            "prices": state.prices.as_dict(),
            "loading": state.loading,
            "error": state.error,
        })

    return app

