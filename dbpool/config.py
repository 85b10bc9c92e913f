"""
Configuracao do banco de dados a partir de variaveis de ambiente.

Configuracao via .env:
    DB_HOST=localhost            # Obrigatorio
    DB_USER=root                 # Obrigatorio
    DB_PASS=secret               # Obrigatorio
    DB_NAME=app                  # Obrigatorio
    DB_PORT=3306                 # Opcional
    DB_POOL_NAME=dbpool          # Opcional
    DB_POOL_SIZE=5               # Opcional (1..32)
    DB_CONNECT_TIMEOUT=10        # Opcional, em segundos

Uso:
    from dbpool.config import load_config

    config = load_config()
"""

import os
import re
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from dotenv import find_dotenv, load_dotenv

from dbpool.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

# Ordem importa: o primeiro ausente e o reportado
REQUIRED_VARIABLES = (
    ("host", "DB_HOST"),
    ("user", "DB_USER"),
    ("password", "DB_PASS"),
    ("database", "DB_NAME"),
)

DEFAULT_PORT = 3306
DEFAULT_POOL_NAME = "dbpool"
DEFAULT_POOL_SIZE = 5
DEFAULT_CONNECT_TIMEOUT = 10

# Limites impostos pelo mysql.connector.pooling
MAX_POOL_SIZE = 32
MAX_POOL_NAME_SIZE = 64
POOL_NAME_ILLEGAL = re.compile(r"[^a-zA-Z0-9._:\-*$#]")


@dataclass(frozen=True)
class ConnectionPoolConfig:
    """Configuracao do pool de conexoes MySQL."""
    host: str
    user: str
    password: str = field(repr=False)
    database: str
    port: int = DEFAULT_PORT
    pool_name: str = DEFAULT_POOL_NAME
    pool_size: int = DEFAULT_POOL_SIZE
    connect_timeout: int = DEFAULT_CONNECT_TIMEOUT

    def __post_init__(self):
        self.validate()

    def validate(self):
        """Verifica campos obrigatorios e limites do pool."""
        for attr, variable in REQUIRED_VARIABLES:
            if not getattr(self, attr):
                raise ConfigurationError(variable)

        if not 1 <= self.pool_size <= MAX_POOL_SIZE:
            raise ConfigurationError(
                "DB_POOL_SIZE",
                f"DB_POOL_SIZE deve estar entre 1 e {MAX_POOL_SIZE} (recebido: {self.pool_size})"
            )

        if not 1 <= self.port <= 65535:
            raise ConfigurationError(
                "DB_PORT",
                f"DB_PORT deve estar entre 1 e 65535 (recebido: {self.port})"
            )

        if self.connect_timeout < 1:
            raise ConfigurationError(
                "DB_CONNECT_TIMEOUT",
                f"DB_CONNECT_TIMEOUT deve ser pelo menos 1 segundo (recebido: {self.connect_timeout})"
            )

        # Mesmas regras de nome do mysql.connector.pooling
        if len(self.pool_name) > MAX_POOL_NAME_SIZE or POOL_NAME_ILLEGAL.search(self.pool_name):
            raise ConfigurationError(
                "DB_POOL_NAME",
                f"DB_POOL_NAME invalido: {self.pool_name!r} (ate {MAX_POOL_NAME_SIZE} caracteres, "
                f"apenas letras, digitos e ._:-*$#)"
            )

    def to_driver_kwargs(self) -> Dict[str, Any]:
        """Argumentos repassados ao MySQLConnectionPool."""
        return {
            "pool_name": self.pool_name,
            "pool_size": self.pool_size,
            "host": self.host,
            "port": self.port,
            "user": self.user,
            "password": self.password,
            "database": self.database,
            "connection_timeout": self.connect_timeout,
            "charset": "utf8mb4",
            "use_unicode": True,
        }


def _read_int(environ: Mapping[str, str], variable: str, default: int) -> int:
    raw = environ.get(variable)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(
            variable,
            f"{variable} deve ser um numero inteiro (recebido: {raw!r})"
        ) from None


def load_config(environ: Optional[Mapping[str, str]] = None, dotenv: bool = True) -> ConnectionPoolConfig:
    """
    Le a configuracao do pool do ambiente do processo.

    Args:
        environ: Mapeamento de variaveis (padrao: os.environ)
        dotenv: Se True e environ nao for informado, carrega o .env do
            diretorio de trabalho antes de ler as variaveis

    Returns:
        ConnectionPoolConfig: Configuracao validada

    Raises:
        ConfigurationError: Variavel obrigatoria ausente/vazia ou valor invalido
    """
    if environ is None:
        if dotenv:
            # .env da aplicacao (cwd), sem sobrescrever o ambiente do processo
            load_dotenv(find_dotenv(usecwd=True))
        environ = os.environ

    values = {}
    for attr, variable in REQUIRED_VARIABLES:
        value = environ.get(variable)
        if not value:
            logger.error(f"Configuracao do banco incompleta: {variable} ausente")
            raise ConfigurationError(variable)
        values[attr] = value

    config = ConnectionPoolConfig(
        port=_read_int(environ, "DB_PORT", DEFAULT_PORT),
        pool_name=environ.get("DB_POOL_NAME") or DEFAULT_POOL_NAME,
        pool_size=_read_int(environ, "DB_POOL_SIZE", DEFAULT_POOL_SIZE),
        connect_timeout=_read_int(environ, "DB_CONNECT_TIMEOUT", DEFAULT_CONNECT_TIMEOUT),
        **values,
    )

    logger.debug(f"Configuracao carregada: {config}")
    return config
