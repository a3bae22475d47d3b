"""Version probe based on the siteinfo meta query."""

import logging
from dataclasses import dataclass

from wikiapi_core.actions.base import API_PATH, Action
from wikiapi_core.actions.envelope import HttpActionEnvelope
from wikiapi_core.errors.exceptions import MalformedResponse
from wikiapi_core.parsing.element import XmlElement
from wikiapi_core.versions import ALL_VERSIONS, Version

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SiteInfo:
    """Attributes of the ``<general>`` siteinfo element."""

    generator: str = ""  # like "MediaWiki 1.16alpha"
    sitename: str = ""  # like "Wikipedia"
    base: str = ""  # like "http://de.wikipedia.org/wiki/Wikipedia:Hauptseite"
    case: str = ""  # like "first-letter"
    mainpage: str = ""  # like "Main Page"


class GetVersion(Action):
    """Detect the server dialect in a single round trip."""

    SUPPORTED_VERSIONS = ALL_VERSIONS

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self._site_info: SiteInfo | None = None

    def _build_envelope(self, token: str | None) -> HttpActionEnvelope:
        return HttpActionEnvelope.get(
            API_PATH,
            {"action": "query", "meta": "siteinfo", "format": "xml"},
        )

    def _process(self, root: XmlElement) -> str | None:
        general = root if root.qualified_name.lower() == "general" else root.find_first("general", ignore_case=True)
        if general is None:
            logger.error("siteinfo response has no <general> element")
            raise MalformedResponse("siteinfo response has no <general> element", payload=root.to_xml())
        self._site_info = SiteInfo(
            generator=general.attribute("generator", ""),
            sitename=general.attribute("sitename", ""),
            base=general.attribute("base", ""),
            case=general.attribute("case", ""),
            mainpage=general.attribute("mainpage", ""),
        )
        return None

    @property
    def site_info(self) -> SiteInfo:
        if self._site_info is None:
            raise RuntimeError("GetVersion has not consumed a response yet")
        return self._site_info

    @property
    def generator(self) -> str:
        return self.site_info.generator

    def detected_version(self) -> Version:
        """Classify the generator string with the action's registry."""
        return self._registry.classify(self.site_info.generator)
