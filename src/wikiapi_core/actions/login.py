"""Single round trip login."""

import logging
from dataclasses import dataclass

from wikiapi_core.actions.base import API_PATH, Action
from wikiapi_core.actions.envelope import HttpActionEnvelope
from wikiapi_core.errors.exceptions import LoginFailedError, MalformedResponse
from wikiapi_core.parsing.element import XmlElement
from wikiapi_core.versions import Version, versions_from

logger = logging.getLogger(__name__)

LOGIN_SUCCESS = "Success"
NEED_TOKEN = "NeedToken"


@dataclass(frozen=True)
class LoginResult:
    user_id: str
    username: str
    token: str = ""
    cookie_prefix: str = ""


class Login(Action):
    """Log in with ``action=login``.

    The action always finishes after one round trip. Servers that answer
    ``NeedToken`` put the token in the failure, and a new Login must be
    created with it.

    Args:
        username: Account name.
        password: Account password.
        token: Login token from a previous NeedToken answer.
        domain: Optional authentication domain.
    """

    SUPPORTED_VERSIONS = versions_from(Version.MW1_11)

    def __init__(
        self,
        username: str,
        password: str,
        *,
        token: str | None = None,
        domain: str | None = None,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self._username = username
        self._password = password
        self._token_param = token
        self._domain = domain
        self._result: LoginResult | None = None

    def _build_envelope(self, token: str | None) -> HttpActionEnvelope:
        params = {
            "action": "login",
            "lgname": self._username,
            "lgpassword": self._password,
        }
        if self._token_param:
            params["lgtoken"] = self._token_param
        if self._domain:
            params["lgdomain"] = self._domain
        params["format"] = "xml"
        return HttpActionEnvelope.post(API_PATH, params)

    def _process(self, root: XmlElement) -> str | None:
        login = root.find_first("login")
        if login is None:
            logger.error("login response has no <login> element")
            raise MalformedResponse("login response has no <login> element", payload=root.to_xml())

        result = login.attribute("result", "")
        if result != LOGIN_SUCCESS:
            logger.error(f"Login of {self._username!r} failed with result {result!r}")
            raise LoginFailedError(
                result or "unknown",
                login.attribute("details", "") or f"Login of {self._username!r} failed: {result}",
                token=login.attribute("token") or login.attribute("lgtoken"),
            )

        self._result = LoginResult(
            user_id=login.attribute("lguserid", ""),
            username=login.attribute("lgusername", ""),
            token=login.attribute("lgtoken", ""),
            cookie_prefix=login.attribute("cookieprefix", ""),
        )
        return None

    @property
    def result(self) -> LoginResult:
        if self._result is None:
            raise RuntimeError("Login has not completed")
        return self._result
