"""
Pytest configuration and fixtures for dbpool tests.
"""

import os
import sys
import time
import logging
import pytest

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from mysql.connector import pooling

from dbpool import config as config_module
from dbpool.database import connection_pool
from dbpool.logging_config import ColoredFormatter, JSONFormatter


DB_VARIABLES = (
    "DB_HOST", "DB_USER", "DB_PASS", "DB_NAME",
    "DB_PORT", "DB_POOL_NAME", "DB_POOL_SIZE", "DB_CONNECT_TIMEOUT",
)


class FakeConnection:
    """Conexao falsa; close() a devolve para a fila do pool, como no driver."""

    def __init__(self, pool):
        self.pool = pool
        self.returned = False
        self.disconnected = False

    def close(self):
        self.returned = True
        self.pool.returned += 1
        self.pool.idle.append(self)

    def disconnect(self):
        self.disconnected = True


class FakeDriverPool:
    """Substituto de MySQLConnectionPool que nao abre sockets."""

    created = []
    construct_delay = 0.0

    def __init__(self, **kwargs):
        if self.construct_delay:
            time.sleep(self.construct_delay)
        self.kwargs = kwargs
        self.pool_name = kwargs["pool_name"]
        self.pool_size = kwargs["pool_size"]
        self.borrowed = 0
        self.returned = 0
        self.removed = False
        self.idle = []
        self.get_error = None
        FakeDriverPool.created.append(self)

    def get_connection(self):
        if self.get_error is not None:
            raise self.get_error
        self.borrowed += 1
        return FakeConnection(self)

    def _remove_connections(self):
        self.removed = True
        count = len(self.idle)
        for conn in self.idle:
            conn.disconnect()
        self.idle = []
        return count


@pytest.fixture(autouse=True)
def no_dotenv(monkeypatch):
    """Impede que um .env local interfira nos testes."""
    monkeypatch.setattr(config_module, "load_dotenv", lambda *args, **kwargs: False)


@pytest.fixture(autouse=True)
def reset_global_pool(monkeypatch):
    """Garante um provedor sem pool antes e depois de cada teste."""
    monkeypatch.setattr(connection_pool, "_global_pool", None)
    yield
    connection_pool.close_pool()


@pytest.fixture
def clean_env(monkeypatch):
    """Remove todas as variaveis DB_* do ambiente (restauradas no teardown)."""
    for name in DB_VARIABLES:
        # setenv antes de delenv para o monkeypatch desfazer o que um .env criar
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    return monkeypatch


@pytest.fixture
def db_env(clean_env):
    """Ambiente completo e valido."""
    clean_env.setenv("DB_HOST", "localhost")
    clean_env.setenv("DB_USER", "root")
    clean_env.setenv("DB_PASS", "secret")
    clean_env.setenv("DB_NAME", "app")
    return clean_env


@pytest.fixture
def fake_driver(monkeypatch):
    """Substitui o MySQLConnectionPool do driver pelo FakeDriverPool."""
    monkeypatch.setattr(FakeDriverPool, "created", [])
    monkeypatch.setattr(FakeDriverPool, "construct_delay", 0.0)
    monkeypatch.setattr(pooling, "MySQLConnectionPool", FakeDriverPool)
    return FakeDriverPool


@pytest.fixture
def restore_root_logger():
    """Restaura handlers e nivel do root logger apos setup_logging()."""
    root = logging.getLogger()
    level = root.level
    mysql_level = logging.getLogger("mysql.connector").level
    yield root
    for handler in root.handlers[:]:
        if isinstance(handler.formatter, (JSONFormatter, ColoredFormatter)):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)
    logging.getLogger("mysql.connector").setLevel(mysql_level)
