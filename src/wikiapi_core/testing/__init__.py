"""Testing utilities for code built on wikiapi_core.

Example:
    ```python
    from wikiapi_core.testing import ScriptedExecutor, siteinfo_xml

    executor = ScriptedExecutor([siteinfo_xml("MediaWiki 1.15.3")])
    action = executor.run(GetVersion())
    assert executor.envelopes[0].parameters["meta"] == "siteinfo"
    ```
"""

from collections.abc import Iterable
from typing import TypeVar
from xml.sax.saxutils import quoteattr

import httpx

from wikiapi_core.actions.base import Action
from wikiapi_core.actions.envelope import HttpActionEnvelope

A = TypeVar("A", bound=Action)


class ScriptedExecutor:
    """Answer envelopes with canned response texts, in order.

    Every envelope passed in is recorded in ``envelopes``.
    """

    def __init__(self, responses: Iterable[str]):
        self._responses = list(responses)
        self.envelopes: list[HttpActionEnvelope] = []

    @property
    def remaining(self) -> int:
        return len(self._responses)

    def __call__(self, envelope: HttpActionEnvelope) -> str:
        self.envelopes.append(envelope)
        if not self._responses:
            raise AssertionError(f"No scripted response left for {envelope!r}")
        return self._responses.pop(0)

    def run(self, action: A) -> A:
        """Drive ``action`` to completion with the scripted responses."""
        while True:
            envelope = action.next_envelope()
            if envelope is None:
                return action
            action.consume(self(envelope))


def xml_transport(
    responses: Iterable[str | httpx.Response],
    requests: list[httpx.Request] | None = None,
) -> httpx.MockTransport:
    """MockTransport answering each request with the next response.

    Strings become 200 responses with an XML content type. Requests are
    appended to ``requests`` when a list is given.
    """
    queue = list(responses)

    def handler(request: httpx.Request) -> httpx.Response:
        if requests is not None:
            requests.append(request)
        if not queue:
            return httpx.Response(500, text="no scripted response left")
        item = queue.pop(0)
        if isinstance(item, httpx.Response):
            return item
        return httpx.Response(200, text=item, headers={"Content-Type": "text/xml; charset=utf-8"})

    return httpx.MockTransport(handler)


def _attrs(attributes: dict[str, str]) -> str:
    return "".join(f" {key}={quoteattr(value)}" for key, value in attributes.items())


def api_error_xml(code: str, info: str) -> str:
    return f'<?xml version="1.0"?><api><error{_attrs({"code": code, "info": info})} /></api>'


def siteinfo_xml(generator: str, sitename: str = "TestWiki", **attributes: str) -> str:
    general = {
        "mainpage": "Main Page",
        "base": "http://wiki.example.org/wiki/Main_Page",
        "sitename": sitename,
        "generator": generator,
        "case": "first-letter",
        **attributes,
    }
    return f'<?xml version="1.0"?><api><query><general{_attrs(general)} /></query></api>'


def allpages_xml(
    titles: Iterable[str],
    next_from: str | None = None,
    *,
    apcontinue: str | None = None,
    continue_marker: str = "-||",
) -> str:
    """An allpages response page.

    ``next_from`` produces the ``<query-continue>`` form of released
    dialects, ``apcontinue`` the ``<continue>`` form of the development one.
    """
    pages = "".join(f'<p ns="0"{_attrs({"title": title})} />' for title in titles)
    body = f"<query><allpages>{pages}</allpages></query>"
    if next_from is not None:
        body += f"<query-continue><allpages{_attrs({'apfrom': next_from})} /></query-continue>"
    if apcontinue is not None:
        body = f"<continue{_attrs({'apcontinue': apcontinue, 'continue': continue_marker})} />" + body
    return f'<?xml version="1.0"?><api>{body}</api>'


def login_xml(result: str, **attributes: str) -> str:
    return f'<?xml version="1.0"?><api><login{_attrs({"result": result, **attributes})} /></api>'


__all__ = [
    "ScriptedExecutor",
    "allpages_xml",
    "api_error_xml",
    "login_xml",
    "siteinfo_xml",
    "xml_transport",
]
