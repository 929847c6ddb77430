from typing import Optional


class PlayFabBaseError(Exception):
    """Базовый класс ошибок."""
    pass


class ConfigurationError(PlayFabBaseError):
    """Не задан обязательный параметр клиента. Никогда не ретраится."""
    pass


class TransportError(PlayFabBaseError):
    """
    Сетевые ошибки (DNS, Connection Refused, Timeout).
    HTTP-ответа нет, поэтому это НЕ ServiceError.
    Executor ретраит их так же, как Transient.
    """
    def __init__(self, function_name: str, message: str):
        self.function_name = function_name
        super().__init__(f"{function_name} - {message}")


class ServiceError(PlayFabBaseError):
    """
    PlayFab ответил не 200.
    Тело и статус сохраняются как есть, для диагностики.
    Сам по себе класс означает Fatal (без ретрая).
    """
    def __init__(
        self,
        function_name: str,
        status_code: Optional[int],
        body: bytes,
        message: Optional[str] = None,
    ):
        self.function_name = function_name
        self.status_code = status_code
        self.body = body
        if message is None:
            message = (
                f"Failed To Process Request With status code {status_code}: "
                f"{body.decode('utf-8', errors='replace')}"
            )
        self.message = message
        super().__init__(f"{function_name} - {message}")

    @classmethod
    def wrap(cls, error: "ServiceError", message: Optional[str] = None) -> "ServiceError":
        """Пересобирает ошибку в подкласс, сохраняя тело и код."""
        return cls(
            error.function_name,
            error.status_code,
            error.body,
            message if message is not None else error.message,
        )


class ConflictError(ServiceError):
    """status == "Conflict": операция не применилась, можно повторить."""
    pass


class TransientServiceError(ServiceError):
    """Временный сбой на стороне сервиса (502, 503, ...)."""
    pass


class UnparseableErrorResponse(ServiceError):
    """
    Тело ошибки не похоже на envelope PlayFab.
    Режим отказа неизвестен, поэтому ретраить вслепую нельзя.
    """
    pass


class ResponseFormatError(PlayFabBaseError):
    """В успешном ответе нет ожидаемого поля."""
    pass
