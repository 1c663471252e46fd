"""
Domain types: result models and the trading API protocol.
"""
