import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_fixed,
)

from playfab.core.exceptions import (
    ConflictError,
    ServiceError,
    TransientServiceError,
    TransportError,
)
from playfab.core.logger import Logger, NoopLogger
from playfab.execution.classifier import classify, to_exception

SUCCESS_CODE = 200

RETRYABLE_ERRORS = (ConflictError, TransientServiceError, TransportError)


@dataclass(frozen=True)
class Call:
    """Один логический вызов. Повторные попытки отправляют тот же Call."""
    method: str
    api: str
    function_name: str
    body: bytes


class RequestExecutor:
    """
    Выполняет Call с политикой ретраев:
    Conflict / Transient / сетевые ошибки -> пауза и повтор,
    всё остальное -> сразу наверх.
    После исчерпания бюджета наверх уходит последняя ошибка, как есть.
    """

    def __init__(
        self,
        transport: Any,
        retry_budget: int = 3,
        retry_wait: float = 1.0,
        retry_codes=(400, 502, 503),
        logger: Optional[Logger] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.transport = transport
        self.retry_budget = retry_budget
        self.retry_wait = retry_wait
        self.retry_codes = frozenset(retry_codes)
        self.logger = logger or NoopLogger()
        self._sleep = sleep

    @classmethod
    def from_settings(cls, settings: Any, transport: Any, logger: Optional[Logger] = None) -> "RequestExecutor":
        return cls(
            transport,
            retry_budget=settings.RETRY_BUDGET,
            retry_wait=settings.RETRY_WAIT,
            retry_codes=settings.RETRY_HTTP_CODES,
            logger=logger,
        )

    def _log_before_sleep(self, retry_state: RetryCallState) -> None:
        error = retry_state.outcome.exception()
        self.logger.error("waiting for retry after error - %s", str(error))

    def execute(self, call: Call, url: str, headers: Dict[str, str]) -> bytes:
        retrier = Retrying(
            retry=retry_if_exception_type(RETRYABLE_ERRORS),
            stop=stop_after_attempt(self.retry_budget + 1),
            wait=wait_fixed(self.retry_wait),
            before_sleep=self._log_before_sleep,
            sleep=self._sleep,
            reraise=True,
        )

        for attempt in retrier:
            with attempt:
                self.logger.debug(
                    "Starting attempt %d for playfab request %s",
                    attempt.retry_state.attempt_number,
                    call.function_name,
                )
                return self._attempt(call, url, headers)

    def _attempt(self, call: Call, url: str, headers: Dict[str, str]) -> bytes:
        # TransportError пробрасывается как есть и ретраится
        status_code, body = self.transport.send(
            call.method, url, headers, call.body, function_name=call.function_name
        )
        if status_code == SUCCESS_CODE:
            return body

        error = ServiceError(call.function_name, status_code, body)
        raise to_exception(error, classify(error, self.retry_codes))
