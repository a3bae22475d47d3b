"""Value objects for server-reported errors."""

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from wikiapi_core.parsing.element import XmlElement

ERROR_ELEMENT_NAME = "error"


@dataclass(frozen=True)
class ApiErrorDetail:
    """The ``code``/``info`` pair of an ``<error>`` element.

    Example:
        ```xml
        <api><error code="badtoken" info="Invalid token" /></api>
        ```
    """

    code: str = ""  # machine readable token
    info: str = ""  # human readable text

    @classmethod
    def from_element(cls, element: "XmlElement") -> "ApiErrorDetail":
        """Read an error detail from an element named ``error``.

        Args:
            element: The ``<error>`` element.

        Returns:
            ApiErrorDetail with the element's ``code`` and ``info`` attributes

        Raises:
            ValueError: If the element is not named ``error``.
        """
        if element.qualified_name != ERROR_ELEMENT_NAME:
            raise ValueError(f"only <error> elements map to an api error, got <{element.qualified_name}>")
        return cls(
            code=element.attribute("code", ""),
            info=element.attribute("info", ""),
        )

    def to_log_message(self) -> str:
        return f"{self.code}: {self.info}"
