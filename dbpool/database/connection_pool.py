"""
Connection Pool MySQL compartilhado pela aplicacao.

Features:
- Pool de conexoes reutilizaveis (mysql.connector.pooling)
- Configuracao via variaveis de ambiente / .env
- Falha rapida quando falta configuracao obrigatoria
- Singleton global com inicializacao explicita e thread-safe
"""

import threading
import logging
from typing import Optional
from contextlib import contextmanager

import mysql.connector
from mysql.connector import pooling

from dbpool.config import ConnectionPoolConfig, load_config
from dbpool.exceptions import ConnectionFailure, PoolClosedError, PoolNotInitializedError
from dbpool.logging_config import pool_context

logger = logging.getLogger(__name__)


class DatabasePool:
    """
    Pool de conexoes thread-safe para MySQL.

    Uso:
        pool = DatabasePool(config)

        with pool.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT * FROM users")
            results = cursor.fetchall()
    """

    def __init__(self, config: ConnectionPoolConfig):
        self.config = config
        self._closed = False

        try:
            self._pool = pooling.MySQLConnectionPool(**config.to_driver_kwargs())
        except mysql.connector.Error as e:
            logger.error(f"Falha ao criar pool: {e}", extra=pool_context(config))
            raise ConnectionFailure(
                f"Nao foi possivel conectar em {config.host}:{config.port}/{config.database}: {e}"
            ) from e

        logger.info("DatabasePool inicializado", extra=pool_context(config))

    @contextmanager
    def get_connection(self):
        """
        Context manager para obter conexao do pool.

        A conexao volta para o pool ao sair do bloco, mesmo com excecao.

        Yields:
            PooledMySQLConnection: Conexao do banco

        Raises:
            ConnectionFailure: Se o driver falhar ou o pool estiver esgotado
            PoolClosedError: Se o pool estiver fechado
        """
        if self._closed:
            raise PoolClosedError("Pool esta fechado")

        try:
            conn = self._pool.get_connection()
        except mysql.connector.Error as e:
            logger.error(f"Erro obtendo conexao do pool: {e}", extra=pool_context(self.config))
            raise ConnectionFailure(f"Erro obtendo conexao do pool: {e}") from e

        try:
            yield conn
        finally:
            # close() em conexao do pool apenas a devolve para a fila
            conn.close()
            if self._closed:
                # Pool fechado durante o emprestimo: encerra a conexao devolvida
                self._remove_connections()

    def close(self):
        """Fecha o pool e as conexoes ociosas."""
        if self._closed:
            return

        self._closed = True
        removed = self._remove_connections()
        logger.info("DatabasePool fechado", extra=pool_context(self.config, removed=removed))

    def _remove_connections(self) -> int:
        # MySQLConnectionPool nao tem close() publico; _remove_connections()
        # existe nas versoes 8.x e 9.x (faixa fixada no pyproject.toml)
        return self._pool._remove_connections()

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def stats(self) -> dict:
        """Retorna estatisticas do pool."""
        return {
            "name": self._pool.pool_name,
            "size": self._pool.pool_size,
            "host": self.config.host,
            "database": self.config.database,
            "closed": self._closed,
        }


# Singleton global do pool
_global_pool: Optional[DatabasePool] = None
_pool_lock = threading.Lock()


def initialize(config: Optional[ConnectionPoolConfig] = None) -> DatabasePool:
    """
    Cria o pool global de conexoes (uma unica vez por processo).

    Chamadas seguintes devolvem a mesma instancia. Se a criacao falhar o
    provedor continua sem pool e initialize() pode ser chamado de novo.

    Args:
        config: Configuracao do pool (padrao: lida do ambiente)

    Returns:
        DatabasePool: Pool de conexoes

    Raises:
        ConfigurationError: Variavel obrigatoria ausente ou invalida
        ConnectionFailure: Driver nao conseguiu conectar
    """
    global _global_pool

    with _pool_lock:
        if _global_pool is None:
            if config is None:
                config = load_config()
            _global_pool = DatabasePool(config)
        else:
            logger.debug("initialize() ignorado: pool global ja existe")

        return _global_pool


def get_pool() -> DatabasePool:
    """
    Obtem o pool global de conexoes.

    Raises:
        PoolNotInitializedError: Se initialize() ainda nao foi chamado
    """
    with _pool_lock:
        if _global_pool is None:
            raise PoolNotInitializedError("Pool nao inicializado; chame initialize() na inicializacao")
        return _global_pool


def close_pool():
    """Fecha o pool global."""
    global _global_pool

    with _pool_lock:
        if _global_pool:
            _global_pool.close()
            _global_pool = None
