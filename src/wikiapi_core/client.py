"""Synchronous driver that executes actions over httpx.

Example:
    ```python
    from wikiapi_core.client import WikiClient

    with WikiClient("https://wiki.example.org/w") as client:
        print(client.version)
        client.login("Bot", "secret")
        for title in client.all_page_titles(namespace=0):
            print(title)
    ```
"""

import logging
from threading import Lock
from typing import TypeVar

import httpx

from wikiapi_core import __version__
from wikiapi_core.actions.base import Action, ListingAction
from wikiapi_core.actions.envelope import HttpActionEnvelope
from wikiapi_core.actions.listing import AllPageTitles
from wikiapi_core.actions.login import NEED_TOKEN, Login, LoginResult
from wikiapi_core.actions.meta import GetVersion, SiteInfo
from wikiapi_core.auth.credentials import (
    PASSWORD_ENV,
    PASSWORD_FILE_ENV,
    URL_ENV,
    USERNAME_ENV,
    CredentialResolver,
)
from wikiapi_core.cursor import PaginationCursor
from wikiapi_core.errors.exceptions import LoginFailedError, TransportFault
from wikiapi_core.errors.handler import raise_for_status
from wikiapi_core.parsing.converter import XmlConverter
from wikiapi_core.transport.retry import IdempotentOnlyRetry
from wikiapi_core.versions import DEFAULT_REGISTRY, Version, VersionRegistry

logger = logging.getLogger(__name__)

A = TypeVar("A", bound=Action)
T = TypeVar("T")

USER_AGENT = f"wikiapi-core/{__version__}"


class WikiClient:
    """Owns the HTTP session and drives actions to completion.

    One round trip is in flight at a time per action. The client detects the
    server dialect once, on first use, and passes it to every action it
    creates.

    Args:
        base_url: Wiki base URL; envelope paths are appended to it.
        http_client: Pre-configured httpx client. When given, ``transport``,
            ``timeout`` and ``max_retries`` are ignored and the caller keeps
            ownership.
        transport: Transport wrapped with IdempotentOnlyRetry.
        timeout: Request timeout in seconds.
        max_retries: Retries for idempotent requests on gateway errors.
        registry: Version registry shared with created actions.
        converter: Response parser shared with created actions.
        resolver: Source for login credentials.
    """

    def __init__(
        self,
        base_url: str,
        *,
        http_client: httpx.Client | None = None,
        transport: httpx.BaseTransport | None = None,
        timeout: float = 30.0,
        max_retries: int = 3,
        registry: VersionRegistry = DEFAULT_REGISTRY,
        converter: XmlConverter | None = None,
        resolver: CredentialResolver | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._owns_http_client = http_client is None
        if http_client is None:
            http_client = httpx.Client(
                base_url=self.base_url,
                transport=IdempotentOnlyRetry(
                    wrapped_transport=transport or httpx.HTTPTransport(),
                    max_retries=max_retries,
                ),
                timeout=httpx.Timeout(timeout),
                follow_redirects=True,
                headers={"User-Agent": USER_AGENT},
            )
        self._http = http_client
        self._registry = registry
        self._converter = converter
        self._resolver = resolver
        self._version: Version | None = None
        self._site_info: SiteInfo | None = None
        self._version_lock = Lock()

    @classmethod
    def from_env(cls, resolver: CredentialResolver | None = None, **kwargs) -> "WikiClient":
        """Create a client for the wiki named by ``WIKIAPI_URL``.

        Raises:
            CredentialNotFoundError: If no URL is configured.
        """
        resolver = resolver or CredentialResolver()
        base_url = resolver.resolve(env_var_name=URL_ENV, required=True, mask_in_logs=False)
        return cls(base_url, resolver=resolver, **kwargs)

    def __enter__(self) -> "WikiClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_http_client:
            self._http.close()

    def execute(self, envelope: HttpActionEnvelope) -> str:
        """Send one envelope and return the response text.

        Raises:
            TransportFault: If the request cannot be delivered or the server
                answers with a non-success status.
        """
        url = f"{self.base_url}{envelope.path}"
        try:
            if envelope.method == "GET":
                if envelope.parameters:
                    url = f"{url}?{envelope.query_string()}"
                response = self._http.get(url)
            elif envelope.has_binary:
                data = {k: v for k, v in envelope.parameters.items() if isinstance(v, str)}
                files = {k: (k, v) for k, v in envelope.parameters.items() if isinstance(v, bytes)}
                response = self._http.post(url, data=data, files=files)
            else:
                response = self._http.post(
                    url,
                    content=envelope.query_string().encode("ascii"),
                    headers={"Content-Type": f"application/x-www-form-urlencoded; charset={envelope.charset}"},
                )
        except httpx.HTTPError as e:
            logger.error(f"{envelope.method} {envelope.path} failed: {e}")
            raise TransportFault(f"{envelope.method} {envelope.path} failed: {e}") from e

        try:
            raise_for_status(response)
        except TransportFault as e:
            logger.error(str(e))
            raise
        return response.text

    def perform(self, action: A) -> A:
        """Run ``action`` until it is done and return it."""
        while True:
            envelope = action.next_envelope()
            if envelope is None:
                return action
            action.consume(self.execute(envelope))

    def cursor(self, action: ListingAction[T]) -> PaginationCursor[T]:
        return PaginationCursor(action, self.execute)

    @property
    def version(self) -> Version:
        """Server dialect, detected on first access."""
        return self._detect()

    def _detect(self) -> Version:
        if self._version is None:
            with self._version_lock:
                if self._version is None:
                    probe = self.perform(GetVersion(registry=self._registry, converter=self._converter))
                    self._site_info = probe.site_info
                    self._version = probe.detected_version()
                    logger.debug(f"{self.base_url} runs {probe.generator!r} ({self._version.name})")
        return self._version

    def site_info(self) -> SiteInfo:
        self._detect()
        return self._site_info

    def _action_options(self) -> dict:
        return {"version": self.version, "registry": self._registry, "converter": self._converter}

    def login(
        self,
        username: str | None = None,
        password: str | None = None,
        *,
        domain: str | None = None,
    ) -> LoginResult:
        """Log in, reading missing credentials from the environment.

        A ``NeedToken`` answer is handled by running one fresh Login action
        with the returned token.

        Raises:
            CredentialNotFoundError: If no username or password is configured.
            LoginFailedError: If the server rejects the login.
        """
        resolver = self._resolver or CredentialResolver()
        username = resolver.resolve(value=username, env_var_name=USERNAME_ENV, required=True, mask_in_logs=False)
        if password is None:
            password = resolver.resolve(env_var_name=PASSWORD_ENV) or resolver.resolve_from_file(
                env_var_name=PASSWORD_FILE_ENV, required=True
            )

        options = self._action_options()
        try:
            action = self.perform(Login(username, password, domain=domain, **options))
        except LoginFailedError as e:
            if e.code != NEED_TOKEN or not e.token:
                raise
            logger.debug(f"Login of {username!r} needs a token, retrying with a new login action")
            action = self.perform(Login(username, password, token=e.token, domain=domain, **options))
        return action.result

    def all_page_titles(
        self,
        namespace: int = 0,
        *,
        prefix: str | None = None,
        redirects: str = "all",
        start_from: str | None = None,
        limit: int = 50,
    ) -> PaginationCursor[str]:
        """Lazily enumerate page titles of a namespace."""
        action = AllPageTitles(
            namespace,
            prefix=prefix,
            redirects=redirects,
            start_from=start_from,
            limit=limit,
            **self._action_options(),
        )
        return self.cursor(action)
