"""
Сквозные обработчики запросов. Каждый отвечает за одно:
логирование, перехват падений, пустой 404,
ошибки записи ответа клиенту.
Логика эндпоинтов о них ничего не знает.
"""
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from fibserver.core.logger import get_logger

log = get_logger("middleware")


async def logging_middleware(request: Request, call_next):
    """Пишет в лог метод, путь, статус и время обработки запроса."""
    start = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - start) * 1000
    log.info(
        "%s %s %s %.2fms",
        request.method,
        request.url.path,
        response.status_code,
        elapsed_ms,
    )
    return response


async def recovery_middleware(request: Request, call_next):
    """Любое исключение из обработчика превращается в 500, сервер продолжает работу."""
    try:
        return await call_next(request)
    except Exception:
        log.exception("Необработанная ошибка при запросе %s %s", request.method, request.url.path)
        return PlainTextResponse("Internal Server Error", status_code=500)


class SafeSendMiddleware:
    """
    Внешний ASGI-слой: ошибка отправки ответа клиенту (обрыв соединения)
    только логируется. Статус к этому моменту уже ушёл или уже не дойдёт.
    """

    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        async def guarded_send(message):
            try:
                await send(message)
            except OSError as e:
                log.error(
                    "Ошибка записи ответа клиенту (%s %s): %s",
                    scope.get("method"),
                    scope.get("path"),
                    e,
                )

        await self.app(scope, receive, guarded_send)


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    # неизвестный путь: 404 без тела
    if exc.status_code == 404:
        return Response(status_code=404)
    return PlainTextResponse(str(exc.detail), status_code=exc.status_code, headers=exc.headers)


def install_middleware(app: FastAPI) -> None:
    """
    Подключает обработчики к приложению.
    Последний добавленный middleware внешний:
    safe send -> CORS -> logging -> recovery -> роут.
    """
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.middleware("http")(recovery_middleware)
    app.middleware("http")(logging_middleware)

    # Разрешаем запросы с фронтенда
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )
    app.add_middleware(SafeSendMiddleware)
