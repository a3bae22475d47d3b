"""Paginated page title listing (``list=allpages``)."""

import logging

from wikiapi_core.actions.base import API_PATH, ListingAction
from wikiapi_core.actions.envelope import HttpActionEnvelope
from wikiapi_core.parsing.element import XmlElement
from wikiapi_core.versions import ALL_VERSIONS, Version

logger = logging.getLogger(__name__)

REDIRECT_FILTERS = frozenset(["all", "redirects", "nonredirects"])
DEFAULT_LIMIT = 50


class AllPageTitles(ListingAction[str]):
    """Enumerate page titles of one namespace.

    Released dialects up to 1.15 continue with
    ``<query-continue><allpages apfrom="..."/></query-continue>`` and expect
    ``apfrom`` on the next request. The development dialect continues with
    ``<continue apcontinue="..." continue="..."/>`` and expects both values
    back.

    Args:
        namespace: Namespace id to list.
        prefix: Only titles starting with this prefix.
        redirects: One of ``all``, ``redirects``, ``nonredirects``.
        start_from: Title to start from on the first request.
        limit: Titles per round trip.
    """

    SUPPORTED_VERSIONS = ALL_VERSIONS

    def __init__(
        self,
        namespace: int = 0,
        *,
        prefix: str | None = None,
        redirects: str = "all",
        start_from: str | None = None,
        limit: int = DEFAULT_LIMIT,
        **kwargs,
    ):
        if redirects not in REDIRECT_FILTERS:
            raise ValueError(f"redirects must be one of {sorted(REDIRECT_FILTERS)}, got {redirects!r}")
        if limit < 1:
            raise ValueError(f"limit must be positive, got {limit}")
        super().__init__(**kwargs)
        self._namespace = namespace
        self._prefix = prefix
        self._redirects = redirects
        self._start_from = start_from
        self._limit = limit
        self._continue_marker: str | None = None

    @property
    def uses_continue_element(self) -> bool:
        return self.dialect is Version.DEVELOPMENT

    def _build_envelope(self, token: str | None) -> HttpActionEnvelope:
        params = {
            "action": "query",
            "list": "allpages",
            "apnamespace": str(self._namespace),
            "apfilterredir": self._redirects,
            "aplimit": str(self._limit),
        }
        if self._prefix:
            params["apprefix"] = self._prefix

        if self.uses_continue_element:
            if token is None:
                params["continue"] = ""
                if self._start_from:
                    params["apfrom"] = self._start_from
            else:
                params["apcontinue"] = token
                params["continue"] = self._continue_marker or ""
        elif token is not None:
            params["apfrom"] = token
        elif self._start_from:
            params["apfrom"] = self._start_from

        params["format"] = "xml"
        return HttpActionEnvelope.get(API_PATH, params)

    def _process(self, root: XmlElement) -> str | None:
        query = root.child("query")
        allpages = query.child("allpages") if query is not None else None
        if allpages is not None:
            self._batch.extend(p.attribute("title", "") for p in allpages.children_named("p"))

        token = self._find_token(root)
        logger.debug(f"allpages round {self.rounds}: {len(self._batch)} titles, continue={token!r}")
        return token

    def _find_token(self, root: XmlElement) -> str | None:
        if self.uses_continue_element:
            marker = root.child("continue")
            if marker is None:
                return None
            self._continue_marker = marker.attribute("continue", "")
            return marker.attribute("apcontinue") or None

        query_continue = root.child("query-continue")
        if query_continue is None:
            return None
        allpages = query_continue.child("allpages")
        if allpages is None:
            return None
        return allpages.attribute("apfrom") or allpages.attribute("apcontinue") or None
