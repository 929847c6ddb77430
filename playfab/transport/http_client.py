import logging
from typing import Any, Dict, Optional, Tuple

import httpx

from playfab.core.exceptions import TransportError

logger = logging.getLogger(__name__)


class HttpTransport:
    """
    Транспорт на базе httpx (синхронный).
    Держит один пул соединений на весь процесс; пул потокобезопасен,
    внешняя блокировка не нужна.
    """

    def __init__(self, settings: Any, transport: Optional[httpx.BaseTransport] = None):
        self.settings = settings

        timeout = httpx.Timeout(settings.HTTP_TIMEOUT)

        # Все вызовы идут на один хост ({title_id}.playfabapi.com),
        # поэтому лимит на хост и есть фактический лимит пула.
        max_connections = min(
            settings.HTTP_MAX_CONNECTIONS,
            settings.HTTP_MAX_CONNECTIONS_PER_HOST,
        )
        limits = httpx.Limits(
            max_keepalive_connections=max_connections,
            max_connections=max_connections,
            keepalive_expiry=settings.HTTP_KEEPALIVE_EXPIRY,
        )

        self._client = httpx.Client(
            timeout=timeout,
            limits=limits,
            transport=transport,
            verify=True,
        )
        logger.debug(
            f"HTTP pool ready: max_connections={max_connections}, "
            f"keepalive_expiry={settings.HTTP_KEEPALIVE_EXPIRY}s, timeout={settings.HTTP_TIMEOUT}s"
        )

    def send(
        self,
        method: str,
        url: str,
        headers: Dict[str, str],
        body: bytes,
        function_name: str = "",
    ) -> Tuple[int, bytes]:
        """
        Один HTTP-запрос. Возвращает (status_code, body).
        Любая ошибка запроса httpx (сеть, таймаут, декодирование тела) превращается в TransportError.
        """
        try:
            response = self._client.request(method, url, headers=headers, content=body)
            return response.status_code, response.content
        except httpx.TimeoutException as e:
            raise TransportError(function_name, f"Timeout: {e}") from e
        except httpx.RequestError as e:
            raise TransportError(function_name, f"{e.__class__.__name__}: {e}") from e

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "HttpTransport":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
