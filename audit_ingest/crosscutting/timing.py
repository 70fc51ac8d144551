"""
===============================================================================
MÓDULO: Cronómetro para latencias (put al store, requests, batches SQS)
===============================================================================
"""

from __future__ import annotations

from time import perf_counter


class Timer:
    """
    Cronómetro monotónico.

    Uso manual (`Timer().start()` ... `.stop()`) o como context manager.
    Mientras no se llame a stop(), `elapsed_*` mide hasta "ahora".
    """

    __slots__ = ("_started", "_stopped")

    def __init__(self) -> None:
        self._started: float | None = None
        self._stopped: float | None = None

    def start(self) -> Timer:
        self._started, self._stopped = perf_counter(), None
        return self

    def stop(self) -> Timer:
        if self._started is None:
            raise RuntimeError("Timer no iniciado: llamar start() antes de stop()")
        self._stopped = perf_counter()
        return self

    @property
    def elapsed_seconds(self) -> float:
        if self._started is None:
            return 0.0
        return (self._stopped or perf_counter()) - self._started

    @property
    def elapsed_ms(self) -> float:
        return round(self.elapsed_seconds * 1000, 2)

    def __enter__(self) -> Timer:
        return self.start()

    def __exit__(self, *exc_info: object) -> None:
        self.stop()
