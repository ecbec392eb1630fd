from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class OutputFormat(str, Enum):
    plaintext = "plaintext"
    json = "json"


class Settings(BaseModel):
    """Настройки процесса. Фиксируются при старте и дальше не меняются."""

    model_config = ConfigDict(frozen=True)

    host: str = "0.0.0.0"
    port: int = Field(8000, ge=1, le=65535)
    output: OutputFormat = OutputFormat.plaintext
    # защита от OOM: ограничиваем количество чисел в одном запросе
    n_limit: int = Field(10000, ge=0)
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        value = value.upper()
        if value not in LOG_LEVELS:
            raise ValueError(f"неизвестный уровень логирования: {value}")
        return value
