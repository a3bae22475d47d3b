"""Parse API responses and map server-reported errors.

Every entry point works on already-retrieved response text and never blocks.
Failures are reported through the converter's ``ErrorReporter`` at the point
they are detected and then raised, so callers do not need to log again.

Example:
    ```python
    from wikiapi_core.parsing import get_checked

    root = get_checked(response_text)  # raises ApiError on <error .../>
    general = root.find_first("general")
    ```
"""

import re

from lxml import etree

from wikiapi_core.errors.exceptions import (
    ApiError,
    ConfigurationError,
    MalformedResponse,
    ProcessingError,
    ProtocolMisuse,
    truncate,
)
from wikiapi_core.errors.models import ApiErrorDetail
from wikiapi_core.parsing.element import XmlElement
from wikiapi_core.parsing.reporting import ErrorReporter, LoggingReporter


def _is_blank(text: str | None) -> bool:
    return text is None or not text.strip()


# Text is already decoded, so a declared encoding no longer applies
XML_DECLARATION = re.compile(r"^\s*<\?xml\s[^>]*\?>")


class XmlConverter:
    """Turn response text into XmlElement trees and typed failures.

    Args:
        reporter: Receives error diagnostics. Defaults to a LoggingReporter.
    """

    def __init__(self, reporter: ErrorReporter | None = None):
        self._reporter = reporter or LoggingReporter()
        # Hardened against entity expansion and external lookups
        self._parser = etree.XMLParser(
            resolve_entities=False,
            no_network=True,
            huge_tree=False,
        )

    def _parse_lxml(self, text: str | None) -> etree._Element | None:
        if _is_blank(text):
            return None
        try:
            root = etree.fromstring(XML_DECLARATION.sub("", text, count=1), self._parser)
        except etree.XMLSyntaxError as e:
            self._reporter.report(f"Unparsable response ({e}): {truncate(text)}")
            raise MalformedResponse(f"Response is not valid XML: {e}", payload=text) from e
        if root is None:
            raise ProtocolMisuse("Parsed document has no root element")
        return root

    def parse(self, text: str | None) -> XmlElement | None:
        """Parse response text.

        Args:
            text: Raw response body.

        Returns:
            Root element, or None for blank input

        Raises:
            MalformedResponse: If the text is not well-formed XML.
        """
        root = self._parse_lxml(text)
        if root is None:
            return None
        return XmlElement.from_lxml(root)

    def error_element_of(self, root: XmlElement) -> XmlElement | None:
        """Find the ``<error>`` element anywhere under ``root`` and report it."""
        element = root.error_element()
        if element is not None:
            self._reporter.report(ApiErrorDetail.from_element(element).to_log_message())
        return element

    def to_api_error(self, element: XmlElement) -> ApiError:
        """Build an ApiError from an ``<error>`` element.

        Raises:
            ValueError: If ``element`` is not an ``<error>`` element.
        """
        return ApiError.from_detail(ApiErrorDetail.from_element(element))

    def _require_root(self, text: str | None) -> XmlElement:
        root = self.parse(text)
        if root is None:
            self._reporter.report("Empty response where XML content was required")
            raise MalformedResponse("Response is empty", payload=text or "")
        return root

    def get_root_or_fail(self, text: str) -> XmlElement:
        """Parse ``text`` and fail on any server-reported error.

        Raises:
            MalformedResponse: If the text is blank or not valid XML.
            ProcessingError: If the response contains an error element. The
                detail is the response text cut to 700 characters.
        """
        root = self._require_root(text)
        if self.error_element_of(root) is not None:
            raise ProcessingError(text)
        return root

    def get_checked(self, text: str) -> XmlElement:
        """Parse ``text`` and raise the server's error as an ApiError.

        Raises:
            MalformedResponse: If the text is blank or not valid XML.
            ApiError: If the response contains an error element.
        """
        root = self._require_root(text)
        error_element = self.error_element_of(root)
        if error_element is not None:
            raise self.to_api_error(error_element)
        return root

    def fail_on_error(self, text: str) -> None:
        self.get_checked(text)

    def get_child(self, text: str, first: str, *names: str) -> XmlElement | None:
        """Follow a path of direct child names from the checked root."""
        element = self.get_checked(text)
        for name in (first, *names):
            element = element.child(name)
            if element is None:
                return None
        return element

    def xpath(self, text: str, expression: str) -> str:
        """Evaluate an XPath expression and return its string value.

        Raises:
            ConfigurationError: If the expression does not compile or evaluate.
            MalformedResponse: If the text is blank or not valid XML.
        """
        try:
            compiled = etree.XPath(expression)
        except etree.XPathError as e:
            self._reporter.report(f"Invalid XPath expression {expression!r}: {e}")
            raise ConfigurationError(f"Invalid XPath expression {expression!r}: {e}") from e

        root = self._parse_lxml(text)
        if root is None:
            self._reporter.report("Empty response where XML content was required")
            raise MalformedResponse("Response is empty", payload=text or "")

        try:
            result = compiled(root)
        except etree.XPathError as e:
            self._reporter.report(f"Cannot evaluate XPath expression {expression!r}: {e}")
            raise ConfigurationError(f"Cannot evaluate XPath expression {expression!r}: {e}") from e
        return _string_value(result)


def _string_value(result: object) -> str:
    if isinstance(result, list):
        if not result:
            return ""
        result = result[0]
    if isinstance(result, etree._Element):
        return "".join(result.itertext())
    if isinstance(result, bool):
        return "true" if result else "false"
    if isinstance(result, float) and result.is_integer():
        return str(int(result))
    return str(result)


_default_converter = XmlConverter()

parse = _default_converter.parse
error_element_of = _default_converter.error_element_of
to_api_error = _default_converter.to_api_error
get_root_or_fail = _default_converter.get_root_or_fail
get_checked = _default_converter.get_checked
fail_on_error = _default_converter.fail_on_error
get_child = _default_converter.get_child
xpath = _default_converter.xpath
