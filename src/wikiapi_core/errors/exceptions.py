"""Structured exceptions for wiki API actions."""

from collections.abc import Iterable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import httpx

    from wikiapi_core.errors.models import ApiErrorDetail
    from wikiapi_core.versions import Version

# Upper bound for response text carried on exceptions and written to logs.
MAX_DETAIL_LENGTH = 700


def truncate(text: str, limit: int = MAX_DETAIL_LENGTH) -> str:
    """Cut ``text`` down to at most ``limit`` characters."""
    if len(text) > limit:
        return text[:limit]
    return text


class WikiApiError(Exception):
    """Base exception for everything raised by wikiapi_core."""

    pass


class ActionFailure(WikiApiError):
    """An action could not complete. Fatal to the action that raised it."""

    pass


class TransportFault(ActionFailure):
    """The driver failed to deliver a request or got a non-success status."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response: "httpx.Response | None" = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.response = response


class ClientError(TransportFault):
    """4xx answers from the server."""

    pass


class ServerError(TransportFault):
    """5xx answers from the server."""

    pass


class MalformedResponse(ActionFailure):
    """Response text is not parseable as XML."""

    def __init__(self, message: str, payload: str = ""):
        super().__init__(message)
        self.payload = truncate(payload)


class ProcessingError(ActionFailure):
    """Response carried an error element where a success payload was required."""

    def __init__(self, detail: str):
        self.detail = truncate(detail)
        super().__init__(self.detail)


class ApiError(ActionFailure):
    """Well-formed response in which the server rejected the request."""

    def __init__(self, code: str, info: str, detail: "ApiErrorDetail | None" = None):
        super().__init__(f"{code}: {info}")
        self.code = code
        self.info = info
        self.detail = detail

    @property
    def message(self) -> str:
        return self.info

    @classmethod
    def from_detail(cls, detail: "ApiErrorDetail") -> "ApiError":
        return cls(detail.code, detail.info, detail=detail)


class LoginFailedError(ApiError):
    """Login round trip returned a result other than ``Success``."""

    def __init__(self, code: str, info: str, token: str | None = None, **kwargs):
        super().__init__(code, info, **kwargs)
        self.token = token


class VersionMismatch(ActionFailure):
    """Detected dialect is not in the set an action declares support for."""

    def __init__(self, action_name: str, version: "Version", supported: Iterable["Version"]):
        self.action_name = action_name
        self.version = version
        self.supported = frozenset(supported)
        names = ", ".join(v.name for v in sorted(self.supported))
        super().__init__(f"{action_name} does not support {version.name} (supported: {names})")


class ProtocolMisuse(WikiApiError, RuntimeError):
    """The caller broke the action/driver interaction contract."""

    pass


class ConfigurationError(WikiApiError, ValueError):
    """Invalid static input such as an XPath expression that does not compile."""

    pass
