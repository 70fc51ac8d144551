"""
===============================================================================
CRC CARD — infrastructure/dynamodb/client.py
===============================================================================

Componente:
  DynamoDBConfig + build_dynamodb_client()

Responsabilidades:
  - Construir el cliente boto3 de DynamoDB una sola vez por proceso.
  - Fijar timeouts de conexión/lectura: un put colgado se trata como falla.
  - Desactivar los reintentos automáticos del SDK (un solo intento por evento).

Colaboradores:
  - container.get_dynamodb_client (cachea el handle, thread-safe)
  - boto3/botocore (SDK, oculto por los adapters)
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ...domain.errors import StoreConfigurationError


@dataclass(frozen=True)
class DynamoDBConfig:
    """
    Configuración del cliente DynamoDB.

    Nota:
      - endpoint_url permite DynamoDB Local.
      - region puede omitirse (cadena por defecto del SDK / AWS_DEFAULT_REGION).
    """

    table_name: str
    region: Optional[str] = None
    endpoint_url: Optional[str] = None
    connect_timeout_seconds: float = 2.0
    read_timeout_seconds: float = 5.0


def build_dynamodb_client(config: DynamoDBConfig):
    """
    Crea el cliente de bajo nivel.

    Diseño:
      - total_max_attempts=1: la ingesta no reintenta (at-most-once).
      - Lazy import de boto3 para mejorar cold start del resto del paquete.
    """
    if not (config.table_name or "").strip():
        raise StoreConfigurationError("DynamoDB table name is required.")

    try:
        import boto3
        from botocore.config import Config
    except ImportError as exc:
        raise StoreConfigurationError("boto3 is not installed.") from exc

    botocore_config = Config(
        connect_timeout=config.connect_timeout_seconds,
        read_timeout=config.read_timeout_seconds,
        retries={"total_max_attempts": 1, "mode": "standard"},
    )

    return boto3.client(
        "dynamodb",
        region_name=config.region or None,
        endpoint_url=config.endpoint_url or None,
        config=botocore_config,
    )
