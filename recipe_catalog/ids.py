"""
Generador de IDs de 64 bits ordenados por tiempo (estilo snowflake).

Estructura del ID (de más a menos significativo):
- 41 bits: milisegundos desde EPOCH
- 10 bits: ID del generador (0..1023)
- 12 bits: secuencia dentro del mismo milisegundo

Dos IDs creados por el mismo generador siempre crecen; entre generadores
distintos el orden es aproximado (por milisegundo).
"""

from __future__ import annotations

import threading
import time
from datetime import datetime, timezone
from typing import Callable

EPOCH = datetime(2024, 1, 1, tzinfo=timezone.utc)

TIMESTAMP_BITS = 41
GENERATOR_BITS = 10
SEQUENCE_BITS = 12

MAX_GENERATOR_ID = (1 << GENERATOR_BITS) - 1
MAX_SEQUENCE = (1 << SEQUENCE_BITS) - 1
MAX_TIMESTAMP = (1 << TIMESTAMP_BITS) - 1


class IdGenerator:
    """
    Generador thread-safe. El lock solo arbitra reloj y secuencia locales.
    """

    def __init__(
        self,
        generator_id: int = 0,
        epoch: datetime = EPOCH,
        time_source: Callable[[], float] = time.time,
    ) -> None:
        if not 0 <= generator_id <= MAX_GENERATOR_ID:
            raise ValueError(f"generator_id debe estar entre 0 y {MAX_GENERATOR_ID}")

        self.generator_id = generator_id
        self._epoch_ms = int(epoch.timestamp() * 1000)
        self._time_source = time_source
        self._lock = threading.Lock()
        self._last_tick = -1
        self._sequence = 0

    def _tick(self) -> int:
        return int(self._time_source() * 1000) - self._epoch_ms

    def next_id(self) -> int:
        """
        Devuelve un nuevo ID.

        Raises
        ------
        RuntimeError
            Si el reloj retrocedió o se agotó el rango de timestamps.
        """
        with self._lock:
            tick = self._tick()

            if tick < self._last_tick:
                raise RuntimeError(
                    f"El reloj retrocedió {self._last_tick - tick} ms; no se pueden generar IDs"
                )

            if tick == self._last_tick:
                self._sequence = (self._sequence + 1) & MAX_SEQUENCE
                if self._sequence == 0:
                    # Secuencia agotada en este milisegundo: esperar al siguiente
                    while tick <= self._last_tick:
                        tick = self._tick()
            else:
                self._sequence = 0

            if tick > MAX_TIMESTAMP:
                raise RuntimeError("Rango de timestamps agotado para este EPOCH")

            self._last_tick = tick

            return (
                (tick << (GENERATOR_BITS + SEQUENCE_BITS))
                | (self.generator_id << SEQUENCE_BITS)
                | self._sequence
            )
