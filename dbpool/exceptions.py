"""
Excecoes do provedor de pool de conexoes MySQL.
"""

from typing import Optional


class DatabaseError(Exception):
    """Erro base do modulo de banco de dados."""


class ConfigurationError(DatabaseError):
    """Variavel de configuracao ausente, vazia ou invalida."""

    def __init__(self, variable: str, message: Optional[str] = None):
        self.variable = variable
        super().__init__(message or f"Variavel de ambiente obrigatoria ausente: {variable}")


class ConnectionFailure(DatabaseError):
    """Driver nao conseguiu conectar/autenticar ou o pool esgotou."""


class PoolNotInitializedError(DatabaseError):
    """get_pool() chamado antes de initialize()."""


class PoolClosedError(DatabaseError):
    """Tentativa de usar um pool ja fechado."""
