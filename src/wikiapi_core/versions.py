"""Known server dialects and matching of detected dialects against actions.

A dialect is identified from the ``generator`` string of a siteinfo response,
for example ``"MediaWiki 1.15.3"``. Each action declares the dialects it
supports as a plain frozenset; running an action against any other dialect is
refused before a request is built.

Example:
    ```python
    from wikiapi_core.versions import DEFAULT_REGISTRY, Version

    DEFAULT_REGISTRY.classify("MediaWiki 1.15.3")  # Version.MW1_15
    DEFAULT_REGISTRY.classify("MediaWiki 1.16alpha")  # Version.DEVELOPMENT
    ```
"""

import logging
import re
from collections.abc import Iterable
from enum import Enum
from functools import total_ordering

from wikiapi_core.errors.exceptions import VersionMismatch

logger = logging.getLogger(__name__)


@total_ordering
class Version(Enum):
    """Server dialects ordered by release."""

    MW1_09 = (9, "1.9")
    MW1_10 = (10, "1.10")
    MW1_11 = (11, "1.11")
    MW1_12 = (12, "1.12")
    MW1_13 = (13, "1.13")
    MW1_14 = (14, "1.14")
    MW1_15 = (15, "1.15")
    DEVELOPMENT = (1000, "development")
    UNKNOWN = (1001, "unknown")

    @property
    def rank(self) -> int:
        return self.value[0]

    @property
    def number(self) -> str:
        return self.value[1]

    @property
    def is_release(self) -> bool:
        return self not in (Version.DEVELOPMENT, Version.UNKNOWN)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self.rank < other.rank


ALL_VERSIONS: frozenset[Version] = frozenset(Version)

# Marker right after the version number, e.g. "1.16alpha", "1.16 alpha", "1.17wmf1", "1.16.0rc1"
PRERELEASE_PATTERN = re.compile(r"\d[.\-\s]?(?:alpha|beta|rc|wmf)", re.IGNORECASE)


def versions_from(first: Version, last: Version = Version.DEVELOPMENT) -> frozenset[Version]:
    """All dialects between ``first`` and ``last`` inclusive."""
    return frozenset(v for v in Version if first <= v <= last)


class VersionRegistry:
    """Classifies generator strings and checks action support sets.

    Instances hold only tuples and are never mutated after construction, so
    one registry can be shared between threads.

    Args:
        known: Release dialects the registry recognises. Defaults to every
            release member of Version.
    """

    def __init__(self, known: Iterable[Version] | None = None):
        releases = [v for v in (known if known is not None else Version) if v.is_release]
        self._known: tuple[Version, ...] = tuple(sorted(releases))
        # Most specific token first: longer numbers, then newer releases
        self._match_order: tuple[Version, ...] = tuple(
            sorted(self._known, key=lambda v: (len(v.number), v.rank), reverse=True)
        )

    @property
    def known(self) -> tuple[Version, ...]:
        return self._known

    @property
    def newest(self) -> Version:
        return Version.DEVELOPMENT

    def classify(self, generator: str) -> Version:
        """Map a generator string onto a dialect.

        A pre-release marker wins over any numeric match. Numeric matching is
        plain substring containment, tried most specific token first; when one
        token is a prefix of another present in the same string the first
        hit in that order decides.

        Args:
            generator: Value of the siteinfo ``generator`` attribute.

        Returns:
            Matching Version, DEVELOPMENT for pre-releases, UNKNOWN otherwise
        """
        if PRERELEASE_PATTERN.search(generator):
            return Version.DEVELOPMENT

        for version in self._match_order:
            if version.number in generator:
                return version

        logger.info(f"Version is UNKNOWN for generator {generator!r}, using settings for the development version")
        return Version.UNKNOWN

    def effective(self, version: Version) -> Version:
        """Dialect whose behaviour applies; unknown servers act like the newest."""
        if version is Version.UNKNOWN:
            return self.newest
        return version

    def is_supported(self, version: Version, supported: Iterable[Version]) -> bool:
        return self.effective(version) in frozenset(supported)

    def ensure_supported(self, action_name: str, version: Version, supported: Iterable[Version]) -> None:
        """Raise VersionMismatch unless ``version`` is in ``supported``."""
        supported = frozenset(supported)
        if not self.is_supported(version, supported):
            error = VersionMismatch(action_name, version, supported)
            logger.error(str(error))
            raise error


DEFAULT_REGISTRY = VersionRegistry()
