from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, StrictStr


class ErrorEnvelope(BaseModel):
    """
    Тело ответа PlayFab при ошибке.
    Обязателен только status; остальные поля опциональны и сохраняются как есть.
    """
    model_config = ConfigDict(extra="allow")

    status: StrictStr
    code: Any = None
    error: Any = None
    errorCode: Any = None
    errorMessage: Any = None


class SuccessEnvelope(BaseModel):
    """Тело успешного ответа: {"code": 200, "status": "OK", "data": {...}}"""
    model_config = ConfigDict(extra="allow")

    code: int = 200
    status: str = "OK"
    data: Optional[Dict[str, Any]] = None
