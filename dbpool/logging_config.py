"""
Logging do dbpool.

Eventos do pool (criacao, falha, fechamento) carregam o contexto do pool em
``extra_data``; os formatters deste modulo exibem esse contexto ao lado da
mensagem. A senha nunca entra no contexto.

Configuracao via .env:
    ENVIRONMENT=production     # production/staging -> JSON
    LOG_LEVEL=INFO
    LOG_FILE=logs/dbpool.log   # Opcional, sempre JSON
"""

import logging
import logging.handlers
import sys
import os
import json
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional
from pathlib import Path

# Campos do ConnectionPoolConfig que podem aparecer em log
POOL_LOG_FIELDS = ("pool_name", "pool_size", "host", "port", "database")

DRIVER_LOGGER = "mysql.connector"


def pool_context(config, **fields) -> Dict[str, Any]:
    """
    Monta o ``extra`` de um evento do pool.

    Uso:
        logger.info("Pool criado", extra=pool_context(config))
    """
    data = {name: getattr(config, name) for name in POOL_LOG_FIELDS}
    data.update(fields)
    return {"extra_data": data}


class JSONFormatter(logging.Formatter):
    """Uma linha JSON por evento, com o contexto do pool em ``pool``."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        context = getattr(record, "extra_data", None)
        if context:
            log_data["pool"] = context

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class ColoredFormatter(logging.Formatter):
    """Saida colorida para terminal: ``[HH:MM:SS] LEVEL logger - msg [k=v ...]``."""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, "")
        reset = self.RESET if color else ""
        timestamp = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")

        formatted = f"{color}[{timestamp}] {record.levelname:8}{reset} {record.name} - {record.getMessage()}"

        context = getattr(record, "extra_data", None)
        if context:
            formatted += " [" + " ".join(f"{k}={v}" for k, v in context.items()) + "]"

        if record.exc_info:
            formatted += f"\n{self.formatException(record.exc_info)}"

        return formatted


def setup_logging(
    level: str = "INFO",
    json_format: bool = False,
    log_file: Optional[str] = None,
    driver_level: str = "WARNING",
    max_bytes: int = 10 * 1024 * 1024,  # 10MB
    backup_count: int = 5,
):
    """
    Configura o root logger para a aplicacao.

    Args:
        level: Nivel de log (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: Se True, console em JSON
        log_file: Arquivo com rotacao (opcional, sempre JSON)
        driver_level: Nivel do logger do mysql.connector
        max_bytes: Tamanho maximo do arquivo antes de rotacionar
        backup_count: Numero de arquivos de backup a manter
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(JSONFormatter() if json_format else ColoredFormatter())
    root_logger.addHandler(console_handler)

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(JSONFormatter())
        root_logger.addHandler(file_handler)

    logging.getLogger(DRIVER_LOGGER).setLevel(getattr(logging, driver_level.upper(), logging.WARNING))


def configure_from_env(environ: Optional[Mapping[str, str]] = None):
    """Configura logging a partir de ENVIRONMENT, LOG_LEVEL e LOG_FILE."""
    if environ is None:
        environ = os.environ

    setup_logging(
        level=environ.get("LOG_LEVEL") or "INFO",
        json_format=environ.get("ENVIRONMENT", "development") in ("production", "staging"),
        log_file=environ.get("LOG_FILE") or None,
    )
