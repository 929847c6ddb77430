from playfab.client import PlayFab
from playfab.core.exceptions import (
    ConfigurationError,
    ConflictError,
    PlayFabBaseError,
    ResponseFormatError,
    ServiceError,
    TransientServiceError,
    TransportError,
    UnparseableErrorResponse,
)
from playfab.core.logger import Logger, NoopLogger
from playfab.services.server_api import ServerApi

__all__ = [
    "PlayFab",
    "ServerApi",
    "Logger",
    "NoopLogger",
    "PlayFabBaseError",
    "ConfigurationError",
    "TransportError",
    "ServiceError",
    "ConflictError",
    "TransientServiceError",
    "UnparseableErrorResponse",
    "ResponseFormatError",
]
