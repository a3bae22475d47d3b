"""Immutable description of one outbound request."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Literal
from urllib.parse import urlencode

DEFAULT_CHARSET = "utf-8"

HttpMethod = Literal["GET", "POST"]
ParamValue = str | bytes


@dataclass(frozen=True)
class HttpActionEnvelope:
    """One round trip's request: method, path, ordered parameters and charset.

    A fresh envelope is created for every round trip; instances are never
    mutated or reused.

    Example:
        ```python
        envelope = HttpActionEnvelope.get(
            "/api.php",
            {"action": "query", "meta": "siteinfo", "format": "xml"},
        )
        envelope.query_string()  # "action=query&meta=siteinfo&format=xml"
        ```
    """

    method: HttpMethod
    path: str
    parameters: Mapping[str, ParamValue] = field(default_factory=lambda: MappingProxyType({}))
    charset: str = DEFAULT_CHARSET

    def __post_init__(self) -> None:
        if self.method not in ("GET", "POST"):
            raise ValueError(f"Unsupported method {self.method!r}, expected GET or POST")
        params = dict(self.parameters)
        for key, value in params.items():
            if not isinstance(value, (str, bytes)):
                raise TypeError(f"Parameter {key!r} must be str or bytes, got {type(value).__name__}")
        object.__setattr__(self, "parameters", MappingProxyType(params))

    @classmethod
    def get(
        cls, path: str, parameters: Mapping[str, ParamValue] | None = None, charset: str = DEFAULT_CHARSET
    ) -> "HttpActionEnvelope":
        return cls("GET", path, MappingProxyType(dict(parameters or {})), charset)

    @classmethod
    def post(
        cls, path: str, parameters: Mapping[str, ParamValue] | None = None, charset: str = DEFAULT_CHARSET
    ) -> "HttpActionEnvelope":
        return cls("POST", path, MappingProxyType(dict(parameters or {})), charset)

    @property
    def has_binary(self) -> bool:
        return any(isinstance(value, bytes) for value in self.parameters.values())

    def query_string(self) -> str:
        """Url-encode the parameters in the envelope's charset."""
        return urlencode(list(self.parameters.items()), encoding=self.charset)

    def __repr__(self) -> str:
        # Values may hold passwords, so only names are shown
        return f"HttpActionEnvelope({self.method} {self.path} params={list(self.parameters)})"
