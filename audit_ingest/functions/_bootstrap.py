"""
===============================================================================
TARJETA CRC — functions/_bootstrap.py (Cold start de las funciones)
===============================================================================

Responsabilidades:
  - Ejecutar el contrato de tabla UNA vez por contenedor Lambda.
  - Propagar ProvisioningError: la invocación falla sin ser atendida y el
    siguiente cold start (o la siguiente invocación) vuelve a intentar.

Colaboradores:
  - container.get_table_provisioner
  - functions.http_handler / functions.queue_handler
===============================================================================
"""

from __future__ import annotations

from functools import lru_cache

from ..container import get_table_provisioner
from ..crosscutting.config import get_settings
from ..crosscutting.logger import logger
from ..domain.repositories import ProvisioningOutcome


@lru_cache(maxsize=1)
def ensure_ready() -> ProvisioningOutcome:
    """lru_cache no guarda excepciones: un fallo se reintenta en la próxima llamada."""
    settings = get_settings()
    outcome = get_table_provisioner().ensure_table()
    logger.info(
        "Function cold start completed",
        extra={
            "environment": settings.environment,
            "table": settings.dynamodb_table,
            "provisioning": outcome.value,
        },
    )
    return outcome


def reset() -> None:
    ensure_ready.cache_clear()
