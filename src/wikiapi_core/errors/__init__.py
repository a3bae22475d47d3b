"""Error taxonomy for wiki API actions."""

from wikiapi_core.errors.exceptions import (
    ActionFailure,
    ApiError,
    ClientError,
    ConfigurationError,
    LoginFailedError,
    MalformedResponse,
    ProcessingError,
    ProtocolMisuse,
    ServerError,
    TransportFault,
    VersionMismatch,
    WikiApiError,
)
from wikiapi_core.errors.handler import raise_for_status
from wikiapi_core.errors.models import ApiErrorDetail

__all__ = [
    "ActionFailure",
    "ApiError",
    "ApiErrorDetail",
    "ClientError",
    "ConfigurationError",
    "LoginFailedError",
    "MalformedResponse",
    "ProcessingError",
    "ProtocolMisuse",
    "ServerError",
    "TransportFault",
    "VersionMismatch",
    "WikiApiError",
    "raise_for_status",
]
