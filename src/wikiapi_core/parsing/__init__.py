"""XML response parsing and server error mapping."""

from wikiapi_core.parsing.converter import (
    XmlConverter,
    error_element_of,
    fail_on_error,
    get_checked,
    get_child,
    get_root_or_fail,
    parse,
    to_api_error,
    xpath,
)
from wikiapi_core.parsing.element import XmlElement
from wikiapi_core.parsing.reporting import CollectingReporter, ErrorReporter, LoggingReporter

__all__ = [
    "CollectingReporter",
    "ErrorReporter",
    "LoggingReporter",
    "XmlConverter",
    "XmlElement",
    "error_element_of",
    "fail_on_error",
    "get_checked",
    "get_child",
    "get_root_or_fail",
    "parse",
    "to_api_error",
    "xpath",
]
