import argparse
import os
from typing import Mapping, Optional, Sequence

from dotenv import load_dotenv
from pydantic import ValidationError

from fibserver.models.dto import OutputFormat, Settings


def build_parser(environ: Mapping[str, str]) -> argparse.ArgumentParser:
    """Флаги командной строки; значения по умолчанию берутся из окружения."""
    parser = argparse.ArgumentParser(
        prog="fibserver",
        description="HTTP-сервер, отдающий первые n чисел Фибоначчи",
    )
    parser.add_argument(
        "-p", "--port",
        type=int,
        default=environ.get("PORT", "8000"),
        help="Порт сервера (env PORT, по умолчанию 8000)",
    )
    parser.add_argument(
        "-o", "--output",
        choices=[f.value for f in OutputFormat],
        default=environ.get("OUTPUT", OutputFormat.plaintext.value),
        help="Формат ответа plaintext или json (env OUTPUT)",
    )
    parser.add_argument(
        "--host",
        default=environ.get("HOST", "0.0.0.0"),
        help="Адрес для прослушивания (env HOST)",
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=environ.get("N_LIMIT", "10000"),
        help="Максимальное n в запросе (env N_LIMIT)",
    )
    parser.add_argument(
        "--log-level",
        default=environ.get("LOG_LEVEL", "INFO"),
        help="Уровень логирования (env LOG_LEVEL)",
    )
    return parser


def load_settings(
    argv: Optional[Sequence[str]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Settings:
    """
    Собирает Settings: флаги > переменные окружения (.env тоже) > дефолты.
    Некорректная конфигурация завершает процесс через argparse (код 2).
    """
    if environ is None:
        load_dotenv()
        environ = os.environ

    parser = build_parser(environ)
    args = parser.parse_args(argv)

    try:
        return Settings(
            host=args.host,
            port=args.port,
            output=args.output,
            n_limit=args.limit,
            log_level=args.log_level,
        )
    except ValidationError as e:
        parser.error(f"некорректная конфигурация: {e}")
