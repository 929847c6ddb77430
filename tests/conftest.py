from typing import Callable
from unittest.mock import MagicMock

import httpx
import pytest

from playfab.client import PlayFab
from playfab.config.settings import Settings
from playfab.execution.executor import RequestExecutor
from playfab.transport.http_client import HttpTransport
from tests.helpers import RecordingSleep


@pytest.fixture
def settings() -> Settings:
    return Settings(
        PLAYFAB_SECRET_KEY="secret",
        PLAYFAB_TITLE_ID="ABCD",
        PLAYFAB_CATALOG_VERSION="main",
        RETRY_BUDGET=3,
        RETRY_WAIT=1.0,
        _env_file=None,
    )


@pytest.fixture
def sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def logger() -> MagicMock:
    return MagicMock()


@pytest.fixture
def make_client(settings, sleep, logger) -> Callable[..., PlayFab]:
    """Клиент поверх httpx.MockTransport; handler получает httpx.Request."""
    created = []

    def factory(handler) -> PlayFab:
        transport = HttpTransport(settings, transport=httpx.MockTransport(handler))
        executor = RequestExecutor(
            transport,
            retry_budget=settings.RETRY_BUDGET,
            retry_wait=settings.RETRY_WAIT,
            retry_codes=settings.RETRY_HTTP_CODES,
            logger=logger,
            sleep=sleep,
        )
        client = PlayFab(
            "secret", "ABCD", "main",
            logger=logger,
            settings=settings,
            transport=transport,
            executor=executor,
        )
        created.append(client)
        return client

    yield factory

    for client in created:
        client.close()
