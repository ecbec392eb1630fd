from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from fibserver.app.middleware import install_middleware
from fibserver.app.routes_fibonacci import create_router
from fibserver.app.routes_health import router as health_router
from fibserver.core.config import load_settings
from fibserver.core.logger import get_logger
from fibserver.models.dto import Settings

# === ЛОГГЕР ===
log = get_logger("main")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Собирает приложение. Настройки передаются явно и не меняются до остановки."""
    if settings is None:
        settings = load_settings([])

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        log.info("🚀 Fibonacci server started")
        log.info(
            "Visit http://localhost:%s?n=10 to get the first 10 "
            "(or any other number in place of 10) Fibonacci numbers",
            settings.port,
        )
        log.info("Формат ответа: %s, лимит n: %s", settings.output.value, settings.n_limit)
        yield

    app = FastAPI(title="Fibonacci Server", lifespan=lifespan)
    app.state.settings = settings

    app.include_router(health_router)
    app.include_router(create_router(settings))
    install_middleware(app)

    return app
