# dbpool exports

# Configuracao
from dbpool.config import ConnectionPoolConfig, load_config

# Excecoes
from dbpool.exceptions import (
    DatabaseError,
    ConfigurationError,
    ConnectionFailure,
    PoolNotInitializedError,
    PoolClosedError,
)

# Pool
from dbpool.database import (
    DatabasePool,
    initialize,
    get_pool,
    close_pool,
)

__version__ = "1.0.0"

__all__ = [
    # Configuracao
    'ConnectionPoolConfig',
    'load_config',
    # Excecoes
    'DatabaseError',
    'ConfigurationError',
    'ConnectionFailure',
    'PoolNotInitializedError',
    'PoolClosedError',
    # Pool
    'DatabasePool',
    'initialize',
    'get_pool',
    'close_pool',
]
