from .controller import PriceFeedApp, Notification
from .state import AppState, Connection, PriceBoard, display_price, format_price, reduce

__all__ = ["PriceFeedApp", "Notification", "AppState", "Connection", "PriceBoard", "display_price", "format_price", "reduce"]
