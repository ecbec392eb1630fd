"""Вычисление последовательности Фибоначчи."""
from __future__ import annotations

from typing import List

from fibserver.core.logger import get_logger

log = get_logger("service.fibonacci")


def fibonacci_sequence(count: int) -> List[int]:
    """Возвращает первые ``count`` чисел Фибоначчи.

    ``int`` в Python неограниченной точности, поэтому переполнения нет
    даже для тысяч членов. Список выделяется сразу целиком, каждый
    следующий элемент считается на месте из двух предыдущих.
    При ``count <= 0`` возвращается пустой список.
    """

    if count <= 0:
        log.warning("fibonacci_sequence вызван с неположительным count=%s", count)
        return []

    sequence = [0] * count
    if count > 1:
        sequence[1] = 1

    # первые два числа всегда 0 и 1
    for i in range(2, count):
        sequence[i] = sequence[i - 1] + sequence[i - 2]

    return sequence
