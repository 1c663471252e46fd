"""
Trading API selection.

``config.mode`` picks the variant: ``live`` sends orders to the exchange,
``simulation`` keeps them in a local ledger on top of live market data.
"""
from typing import Optional

from bittrex_async.config.config import Config
from bittrex_async.data.bittrex_client import BittrexClient
from bittrex_async.domain.protocols import TradingApi
from bittrex_async.monitoring.logger import get_logger
from bittrex_async.paper.order_simulation import OrderSimulation

logger = get_logger(__name__)


def create_trading_api(config: Config, client: Optional[BittrexClient] = None) -> TradingApi:
    """
    Build the trading API for the configured mode.

    Args:
        config: Loaded configuration
        client: Live client to use instead of one built from ``config``

    Returns:
        BittrexClient in live mode, OrderSimulation wrapping it otherwise
    """
    client = client or BittrexClient.from_config(config)

    if config.mode == "live":
        if not client.has_valid_credentials():
            logger.warning("Live mode without API credentials: only public endpoints will work")
        return client

    return OrderSimulation(client)
