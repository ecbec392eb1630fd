import math
import re
import sys
from typing import List, Optional

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from fibserver.core.logger import get_logger
from fibserver.models.dto import OutputFormat, Settings
from fibserver.service.fibonacci_service import fibonacci_sequence

log = get_logger("routes.fibonacci")

MISSING_N_MESSAGE = "Error: n url parameter is missing, pass it with ?n=<positive integer>"

# как strconv.Atoi: необязательный знак и только цифры
_INT_RE = re.compile(r"[+-]?[0-9]+")


def max_term_digits(limit: int) -> int:
    """Сколько десятичных цифр (с запасом) у последнего из ``limit`` чисел Фибоначчи."""
    return int(limit * math.log10((1 + math.sqrt(5)) / 2)) + 2


def ensure_int_str_digits(limit: int) -> None:
    """
    Поднимает лимит длины int->str (Python 3.11+, по умолчанию 4300 цифр),
    чтобы отрендерить любую последовательность до ``limit`` включительно.
    """
    if not hasattr(sys, "get_int_max_str_digits"):
        return
    current = sys.get_int_max_str_digits()
    needed = max_term_digits(limit)
    if current == 0 or current >= needed:
        return
    log.info("Поднимаем лимит int->str с %s до %s цифр", current, needed)
    sys.set_int_max_str_digits(needed)


def parse_count(raw: str, limit: int) -> Optional[int]:
    """Разбирает n; ``None`` если это не целое число или оно вне [0, limit]."""
    if not _INT_RE.fullmatch(raw):
        return None
    # ведущие нули допустимы; длиннее лимита по цифрам быть не может
    if len(raw.lstrip("+-").lstrip("0")) > len(str(limit)):
        return None
    n = int(raw)
    if n < 0 or n > limit:
        return None
    return n


def render_plaintext(sequence: List[int]) -> Response:
    return PlainTextResponse(
        ", ".join(str(num) for num in sequence),
        media_type="text/plain",
    )


def render_json(sequence: List[int]) -> Response:
    # числа отдаём строками: JSON-клиенты теряют точность на больших значениях
    return JSONResponse([str(num) for num in sequence])


RENDERERS = {
    OutputFormat.plaintext: render_plaintext,
    OutputFormat.json: render_json,
}


def create_router(settings: Settings) -> APIRouter:
    """Роутер с единственным эндпоинтом ``GET /?n=<count>``."""
    router = APIRouter(tags=["fibonacci"])
    ensure_int_str_digits(settings.n_limit)
    render = RENDERERS[settings.output]
    out_of_range_message = f"Error: n must be an integer between 0 and {settings.n_limit}"

    @router.get("/")
    def get_fibonacci_sequence(request: Request):
        """Возвращает первые n чисел Фибоначчи в формате, выбранном при старте."""
        values = request.query_params.getlist("n")
        if not values or not values[0]:
            log.warning("Запрос без параметра n")
            return PlainTextResponse(MISSING_N_MESSAGE, status_code=422)

        count = parse_count(values[0], settings.n_limit)
        if count is None:
            log.warning("Некорректный параметр n=%r", values[0][:64])
            return PlainTextResponse(out_of_range_message, status_code=422)

        return render(fibonacci_sequence(count))

    return router
