import logging
import sys

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
ROOT_LOGGER = "fibserver"
HANDLER_NAME = "fibserver.stream"


def get_logger(name: str) -> logging.Logger:
    """Логгер в пространстве имён ``fibserver.*``."""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


def configure_logging(level: str = "INFO") -> None:
    """
    Настраивает вывод логов сервиса в stderr.
    Вызывается один раз из точки входа; повторный вызов не плодит хендлеры.
    """
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level.upper())

    if any(h.get_name() == HANDLER_NAME for h in logger.handlers):
        return

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.set_name(HANDLER_NAME)
    logger.addHandler(handler)
