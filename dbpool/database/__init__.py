"""
Database module - Connection pooling MySQL.
"""

from .connection_pool import DatabasePool, initialize, get_pool, close_pool

__all__ = ['DatabasePool', 'initialize', 'get_pool', 'close_pool']
