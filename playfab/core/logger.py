import logging
from typing import Any, Protocol


class Logger(Protocol):
    """Минимальный интерфейс логгера. logging.Logger подходит как есть."""

    def debug(self, msg: str, *args: Any) -> None: ...

    def info(self, msg: str, *args: Any) -> None: ...

    def warning(self, msg: str, *args: Any) -> None: ...

    def error(self, msg: str, *args: Any) -> None: ...


class NoopLogger:
    """Логгер по умолчанию: все вызовы ничего не делают."""

    def debug(self, msg: str, *args: Any) -> None:
        pass

    def info(self, msg: str, *args: Any) -> None:
        pass

    def warning(self, msg: str, *args: Any) -> None:
        pass

    def error(self, msg: str, *args: Any) -> None:
        pass


def setup_logging(level: str = "INFO") -> None:
    """Конфигурация root-логгера для скриптов (библиотека сама её не вызывает)."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
