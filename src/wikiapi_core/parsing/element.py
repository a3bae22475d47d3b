"""Immutable XML element tree built from lxml parse results."""

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from lxml import etree


def _element_children(node: etree._Element) -> list[etree._Element]:
    # Comments and processing instructions have a non-string tag
    return [child for child in node if isinstance(child.tag, str)]


def _qualified_name(node: etree._Element) -> str:
    local_name = etree.QName(node).localname
    if node.prefix:
        return f"{node.prefix}:{local_name}"
    return local_name


def _local_tag(qualified_name: str) -> str:
    # Namespace declarations are not kept, so prefixes cannot be serialized
    return qualified_name.rpartition(":")[2]


@dataclass(frozen=True)
class XmlElement:
    """One parsed XML node.

    Trees are built and walked with explicit stacks so that deeply nested
    documents cannot exhaust the interpreter's recursion limit.
    """

    qualified_name: str
    attributes: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    children: tuple["XmlElement", ...] = ()
    text: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "attributes", MappingProxyType(dict(self.attributes)))
        if not isinstance(self.children, tuple):
            object.__setattr__(self, "children", tuple(self.children))

    @classmethod
    def build(
        cls,
        name: str,
        attributes: Mapping[str, str] | None = None,
        children: "tuple[XmlElement, ...] | list[XmlElement]" = (),
        text: str = "",
    ) -> "XmlElement":
        return cls(
            qualified_name=name,
            attributes=MappingProxyType(dict(attributes or {})),
            children=tuple(children),
            text=text,
        )

    @classmethod
    def from_lxml(cls, root: etree._Element) -> "XmlElement":
        """Convert an lxml element and its subtree.

        Args:
            root: Parsed lxml element.

        Returns:
            Equivalent immutable XmlElement tree
        """
        frames: list[tuple[etree._Element, list[etree._Element], list[XmlElement]]] = [
            (root, _element_children(root), [])
        ]
        while True:
            node, pending, done = frames[-1]
            if len(done) < len(pending):
                child = pending[len(done)]
                frames.append((child, _element_children(child), []))
                continue

            frames.pop()
            element = cls(
                qualified_name=_qualified_name(node),
                attributes=MappingProxyType(dict(node.attrib)),
                children=tuple(done),
                text=node.text or "",
            )
            if not frames:
                return element
            frames[-1][2].append(element)

    def attribute(self, name: str, default: str | None = None) -> str | None:
        return self.attributes.get(name, default)

    def child(self, name: str) -> "XmlElement | None":
        """First direct child with the given qualified name."""
        for element in self.children:
            if element.qualified_name == name:
                return element
        return None

    def children_named(self, name: str) -> list["XmlElement"]:
        return [element for element in self.children if element.qualified_name == name]

    def iter_descendants(self) -> Iterator["XmlElement"]:
        """Yield every element below this one in document (pre-)order."""
        stack = list(reversed(self.children))
        while stack:
            element = stack.pop()
            yield element
            stack.extend(reversed(element.children))

    def find_first(self, name: str, ignore_case: bool = False) -> "XmlElement | None":
        """First descendant named ``name``, or None."""
        wanted = name.lower() if ignore_case else name
        for element in self.iter_descendants():
            candidate = element.qualified_name.lower() if ignore_case else element.qualified_name
            if candidate == wanted:
                return element
        return None

    def find_all(self, name: str) -> list["XmlElement"]:
        return [element for element in self.iter_descendants() if element.qualified_name == name]

    def error_element(self) -> "XmlElement | None":
        return self.find_first("error")

    def to_xml(self) -> str:
        """Serialize this subtree back to XML text.

        Namespace prefixes are dropped from element names.
        """
        root = etree.Element(_local_tag(self.qualified_name), dict(self.attributes))
        root.text = self.text or None
        stack = [(root, self)]
        while stack:
            target, source = stack.pop()
            for child in source.children:
                sub = etree.SubElement(target, _local_tag(child.qualified_name), dict(child.attributes))
                sub.text = child.text or None
                stack.append((sub, child))
        return etree.tostring(root, encoding="unicode")
