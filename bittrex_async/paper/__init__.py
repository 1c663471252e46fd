"""
Order simulation (paper trading) on top of live market data.
"""
from bittrex_async.paper.ledger import SimulationLedger
from bittrex_async.paper.order_simulation import OrderSimulation

__all__ = [
    "SimulationLedger",
    "OrderSimulation",
]
