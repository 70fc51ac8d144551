"""
===============================================================================
TARJETA CRC — audit_ingest/context.py (Contexto de correlación)
===============================================================================

Responsabilidades:
  - Guardar request_id / method / path de la request HTTP o invocación Lambda
    en curso, aislado por tarea async (ContextVar).
  - Exponerlo a logs y respuestas sin pasarlo por parámetro.

Colaboradores:
  - crosscutting.middleware (FastAPI) y functions.* (Lambda): lo setean y limpian.
  - crosscutting.logger: lo lee en cada línea de log.
===============================================================================
"""

from __future__ import annotations

from contextvars import ContextVar
from typing import Final

_FIELDS: Final[tuple[str, ...]] = ("request_id", "method", "path")

# Pares (campo, valor) inmutables: set() nunca muta el valor de otra tarea.
_correlation: ContextVar[tuple[tuple[str, str], ...]] = ContextVar(
    "audit_ingest_correlation", default=()
)


def set_request_context(
    *, request_id: str = "", method: str = "", path: str = ""
) -> None:
    """Reemplaza el contexto actual. Valores vacíos se omiten."""
    values = (request_id, method, path)
    _correlation.set(
        tuple((name, value) for name, value in zip(_FIELDS, values) if value)
    )


def get_context_dict() -> dict[str, str]:
    """Contexto actual como dict (solo claves con valor)."""
    return dict(_correlation.get())


def clear_context() -> None:
    """Contenedores Lambda calientes y workers reutilizan el hilo: limpiar al salir."""
    _correlation.set(())
