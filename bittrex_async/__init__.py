"""
Async client for the Bittrex v1.1 REST API with an order simulation mode.

Core components:
- BittrexClient: Signed requests, envelope decoding and typed results (live exchange)
- OrderSimulation: Drop-in replacement that fills limit orders against live quotes
- create_trading_api: Picks the variant from configuration
"""

__version__ = "0.1.0"

from bittrex_async.config.config import Config, load_config
from bittrex_async.data.bittrex_client import BittrexClient
from bittrex_async.domain.protocols import TradingApi
from bittrex_async.factory import create_trading_api
from bittrex_async.paper.order_simulation import OrderSimulation

__all__ = [
    "__version__",
    "BittrexClient",
    "Config",
    "OrderSimulation",
    "TradingApi",
    "create_trading_api",
    "load_config",
]
