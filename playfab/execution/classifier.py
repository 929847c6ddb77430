import json
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional

from pydantic import ValidationError

from playfab.core.exceptions import (
    ConflictError,
    ServiceError,
    TransientServiceError,
    UnparseableErrorResponse,
)
from playfab.models.envelope import ErrorEnvelope

CONFLICT_STATUS = "Conflict"

# Используется, только если код ответа не сохранился.
TRANSIENT_MARKERS = ("Service Unavailable", "Bad Request", "Bad Gateway")


class FailureKind(str, Enum):
    """Типы отказов для принятия решений о ретраях"""
    CONFLICT = "conflict"                  # Состояние изменилось параллельно, повторяем
    TRANSIENT = "transient"                # Перегрузка / шлюз, повторяем
    FATAL_UNPARSEABLE = "fatal_unparseable"  # Тело не похоже на envelope, сразу наверх
    FATAL = "fatal"                        # Любой другой status, сразу наверх

    @property
    def retryable(self) -> bool:
        return self in (FailureKind.CONFLICT, FailureKind.TRANSIENT)


@dataclass(frozen=True)
class Classification:
    kind: FailureKind
    status: Optional[str] = None
    reason: str = ""


def classify(error: ServiceError, retry_codes: Iterable[int]) -> Classification:
    """
    Классификатор ответа PlayFab с кодом != 200.
    Отсутствие поля status это тоже результат классификации, а не падение.
    """
    body_text = error.body.decode("utf-8", errors="replace")

    # 1. Тело должно быть JSON
    try:
        payload = json.loads(error.body)
    except ValueError as e:
        return Classification(
            FailureKind.FATAL_UNPARSEABLE,
            reason=f"{e} originalError: {body_text}",
        )

    # 2. status обязателен и должен быть строкой
    try:
        envelope = ErrorEnvelope.model_validate(payload)
    except ValidationError:
        return Classification(
            FailureKind.FATAL_UNPARSEABLE,
            reason=f"Failed to parse status from error: {body_text}",
        )

    if envelope.status == CONFLICT_STATUS:
        return Classification(FailureKind.CONFLICT, status=envelope.status)

    # 3. Transient: по коду ответа, а если кода нет, то по тексту ошибки (совместимость)
    if error.status_code is not None:
        transient = error.status_code in set(retry_codes)
    else:
        transient = any(marker in error.message for marker in TRANSIENT_MARKERS)

    if transient:
        return Classification(FailureKind.TRANSIENT, status=envelope.status)

    return Classification(FailureKind.FATAL, status=envelope.status)


def to_exception(error: ServiceError, classification: Classification) -> ServiceError:
    """Подбирает подкласс ServiceError под результат классификации."""
    if classification.kind is FailureKind.CONFLICT:
        return ConflictError.wrap(error)
    if classification.kind is FailureKind.TRANSIENT:
        return TransientServiceError.wrap(error)
    if classification.kind is FailureKind.FATAL_UNPARSEABLE:
        return UnparseableErrorResponse.wrap(error, classification.reason)
    return error
