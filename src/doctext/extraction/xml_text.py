"""Typed XML tree and document-order text harvesting.

Office Open XML producers nest text runs at varying depths (run inside
paragraph inside shape inside shape tree), so matching is done on the local
tag name only, ignoring ancestry and namespace.
"""

from __future__ import annotations

from typing import Collection, Mapping

from lxml import etree

from doctext.extraction.errors import UnparsableXml
from doctext.extraction.models import XmlElement, XmlNode, XmlText


def _build_parser() -> etree.XMLParser:
    return etree.XMLParser(resolve_entities=False, no_network=True, load_dtd=False, huge_tree=False)


def local_name(name: str) -> str:
    """Strip a ``{uri}`` or ``prefix:`` qualifier from a tag name."""

    if name.startswith("{"):
        return name.rsplit("}", 1)[-1]
    return name.rsplit(":", 1)[-1]


def parse_xml(document: str | bytes) -> XmlElement:
    """Parse one XML document into an :class:`XmlElement` tree."""

    raw = document.encode("utf-8") if isinstance(document, str) else document
    try:
        root = etree.fromstring(raw, parser=_build_parser())
    except (etree.XMLSyntaxError, ValueError) as exc:
        raise UnparsableXml(f"Malformed XML: {exc}") from exc
    if root is None:
        raise UnparsableXml("XML document has no root element")
    return _convert(root)


def _convert(element: etree._Element) -> XmlElement:
    children: list[XmlNode] = []
    if element.text:
        children.append(XmlText(element.text))
    for child in element:
        # comments, processing instructions and unresolved entities
        if isinstance(child.tag, str):
            children.append(_convert(child))
        if child.tail:
            children.append(XmlText(child.tail))

    attrs = {str(key): str(value) for key, value in element.attrib.items()}
    return XmlElement(name=element.tag, attrs=attrs, children=tuple(children))


def text_content(node: XmlNode) -> str:
    """Concatenate every text node below ``node`` in document order."""

    if isinstance(node, XmlText):
        return node.value
    return "".join(text_content(child) for child in node.children)


def find_elements(node: XmlNode, tag: str, *, nested: bool = False) -> list[XmlElement]:
    """Return elements whose local name is ``tag``, in document order.

    With ``nested=False`` the search does not descend into a matched element,
    so a match never contains another returned match.
    """

    found: list[XmlElement] = []
    _find(node, tag, nested, found)
    return found


def _find(node: XmlNode, tag: str, nested: bool, found: list[XmlElement]) -> None:
    if isinstance(node, XmlText):
        return
    if local_name(node.name) == tag:
        found.append(node)
        if not nested:
            return
    for child in node.children:
        _find(child, tag, nested, found)


def collect_text(
    node: XmlNode,
    text_tags: Collection[str],
    *,
    markers: Mapping[str, str] | None = None,
    skip_tags: Collection[str] = (),
) -> list[str]:
    """Harvest text-bearing elements below ``node`` in document order.

    ``text_tags`` elements contribute their full text content. ``markers``
    maps empty marker elements (tabs, breaks) to a literal fragment.
    ``skip_tags`` subtrees are ignored entirely.
    """

    fragments: list[str] = []
    _harvest(node, frozenset(text_tags), markers or {}, frozenset(skip_tags), fragments)
    return fragments


def _harvest(
    node: XmlNode,
    text_tags: frozenset[str],
    markers: Mapping[str, str],
    skip_tags: frozenset[str],
    fragments: list[str],
) -> None:
    if isinstance(node, XmlText):
        return

    tag = local_name(node.name)
    if tag in skip_tags:
        return
    if tag in text_tags:
        fragments.append(text_content(node))
        return

    marker = markers.get(tag)
    if marker is not None:
        fragments.append(marker)

    for child in node.children:
        _harvest(child, text_tags, markers, skip_tags, fragments)
