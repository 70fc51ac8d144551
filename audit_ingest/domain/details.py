"""
===============================================================================
TARJETA CRC — domain/details.py (Árbol de valores de `details`)
===============================================================================

Responsabilidades:
  - Modelar `details` como árbol JSON tipado (no como blob opaco).
  - Validar que solo haya valores JSON (str/int/float/bool/None/list/dict).
  - Rechazar números no finitos y números que el store no representa
    (DynamoDB: 38 dígitos significativos, magnitud 1e-130 .. 1e125).
  - Rechazar árboles demasiado profundos (DynamoDB: 32 niveles).

Colaboradores:
  - application.usecases.ingestion.parse_payload
  - infrastructure.dynamodb.audit_event_store (convierte float -> Decimal)
===============================================================================
"""

from __future__ import annotations

import math
from decimal import (
    Clamped,
    Context,
    DecimalException,
    Inexact,
    Overflow,
    Rounded,
    Underflow,
)
from typing import Any, Final, Union

DetailValue = Union[
    str, int, float, bool, None, list["DetailValue"], dict[str, "DetailValue"]
]

MAX_DETAILS_DEPTH: Final[int] = 32

# Límites del tipo Number de DynamoDB. Mismos parámetros y traps que
# boto3.dynamodb.types.DYNAMODB_CONTEXT, sin importar boto3 en el dominio.
NUMBER_CONTEXT: Final[Context] = Context(
    Emin=-128,
    Emax=126,
    prec=38,
    traps=[Clamped, Overflow, Inexact, Rounded, Underflow],
)


class InvalidDetailsError(ValueError):
    """`details` contiene algo que no es un valor JSON válido."""


def normalize_details(value: Any) -> dict[str, DetailValue]:
    """
    Devuelve una copia validada de `details`.

    Reglas:
      - None -> {}
      - dict -> copia recursiva (orden de claves preservado)
      - otro tipo -> InvalidDetailsError
    """
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise InvalidDetailsError("details must be a JSON object")
    return _normalize_mapping(value, depth=1)


def _normalize_mapping(value: dict, *, depth: int) -> dict[str, DetailValue]:
    if depth > MAX_DETAILS_DEPTH:
        raise InvalidDetailsError(
            f"details must not be nested deeper than {MAX_DETAILS_DEPTH} levels"
        )
    out: dict[str, DetailValue] = {}
    for key, item in value.items():
        if not isinstance(key, str):
            raise InvalidDetailsError("details keys must be strings")
        out[key] = _normalize_value(item, depth=depth)
    return out


def _normalize_value(value: Any, *, depth: int) -> DetailValue:
    # bool antes que int: bool es subclase de int.
    if value is None or isinstance(value, (str, bool)):
        return value
    if isinstance(value, int):
        _check_number(str(value))
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            raise InvalidDetailsError("details must not contain NaN or Infinity")
        # repr(): misma representación que usa el adapter al escribir.
        _check_number(repr(value))
        return value
    if isinstance(value, dict):
        return _normalize_mapping(value, depth=depth + 1)
    if isinstance(value, list):
        if depth + 1 > MAX_DETAILS_DEPTH:
            raise InvalidDetailsError(
                f"details must not be nested deeper than {MAX_DETAILS_DEPTH} levels"
            )
        return [_normalize_value(v, depth=depth + 1) for v in value]
    raise InvalidDetailsError(
        f"details contains an unsupported value of type {type(value).__name__}"
    )


def _check_number(literal: str) -> None:
    try:
        NUMBER_CONTEXT.create_decimal(literal)
    except DecimalException as exc:
        raise InvalidDetailsError(
            "details contains a number outside the storable range "
            "(38 significant digits, magnitude 1e-130 to 1e125)"
        ) from exc
