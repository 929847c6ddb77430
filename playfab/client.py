import json
from typing import Any, Mapping, Optional, Union

from playfab.config.settings import Settings, get_settings
from playfab.core.exceptions import ConfigurationError
from playfab.core.logger import Logger, NoopLogger
from playfab.execution.executor import Call, RequestExecutor
from playfab.transport.http_client import HttpTransport

Body = Union[bytes, str, Mapping[str, Any]]


class PlayFab:
    """
    Точка входа для всех обёрток эндпоинтов.
    Хранит ключ, title id и версию каталога, владеет транспортом (пулом соединений).
    Неизменяем после создания, кроме логгера.
    """

    def __init__(
        self,
        secret_key: str,
        title_id: str,
        catalog_version: str,
        logger: Optional[Logger] = None,
        settings: Optional[Settings] = None,
        transport: Optional[HttpTransport] = None,
        executor: Optional[RequestExecutor] = None,
    ):
        # Fail-Fast: до создания транспорта, никакой сетевой активности
        if not secret_key:
            raise ConfigurationError("secret is required")
        if not catalog_version:
            raise ConfigurationError("catalog version is required")
        if not title_id:
            raise ConfigurationError("titleId is required")

        self._secret_key = secret_key
        self._title_id = title_id
        self._catalog_version = catalog_version

        self.settings = settings or Settings()
        self.base_url = self.settings.PLAYFAB_BASE_URL
        self.logger = logger or NoopLogger()

        self.transport = transport or HttpTransport(self.settings)
        self.executor = executor or RequestExecutor.from_settings(
            self.settings, self.transport, logger=self.logger
        )

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None, logger: Optional[Logger] = None) -> "PlayFab":
        """Собирает клиент из переменных окружения / .env"""
        settings = settings or get_settings()
        return cls(
            settings.PLAYFAB_SECRET_KEY,
            settings.PLAYFAB_TITLE_ID,
            settings.PLAYFAB_CATALOG_VERSION,
            logger=logger,
            settings=settings,
        )

    @property
    def title_id(self) -> str:
        return self._title_id

    @property
    def catalog_version(self) -> str:
        return self._catalog_version

    def set_logger(self, logger: Optional[Logger]) -> None:
        self.logger = logger or NoopLogger()
        self.executor.logger = self.logger

    def build_url(self, api: str, function_name: str) -> str:
        return self.base_url.format(title_id=self._title_id, api=api, function=function_name)

    def call(self, method: str, api: str, function_name: str, body: Body) -> bytes:
        """
        Вызывает удалённую функцию и возвращает тело ответа без разбора.
        Ошибки: ServiceError (и подклассы), TransportError.
        """
        if isinstance(body, bytes):
            payload = body
        elif isinstance(body, str):
            payload = body.encode("utf-8")
        else:
            payload = json.dumps(body).encode("utf-8")

        call = Call(method=method, api=api, function_name=function_name, body=payload)
        headers = {
            "Content-Type": "application/json",
            "X-SecretKey": self._secret_key,
        }
        return self.executor.execute(call, self.build_url(api, function_name), headers)

    def close(self) -> None:
        self.transport.close()

    def __enter__(self) -> "PlayFab":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def __repr__(self) -> str:
        return (
            f"PlayFab(title_id={self._title_id!r}, catalog_version={self._catalog_version!r}, "
            f"secret_key='***')"
        )
