"""
Transforms from raw AWIS XML into generic nested trees.

AWIS has many response shapes (UrlInfo, TrafficHistory, SitesLinkingIn,
CategoryBrowse, CategoryListings...), so nothing here knows about them.
Elements become dict keys by local name; repeated siblings become lists;
leaves are strings.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Union

from lxml import etree
from logger_config import get_logger
from utils.exceptions import MalformedResponseError

logger = get_logger(__name__)

Tree = Union[str, Dict[str, Any], list]


@dataclass
class AwisResult:
    """Normalized AWIS response."""

    request_id: str
    status_code: str
    data: Dict[str, Any] = field(default_factory=dict)


def _local_name(name) -> str:
    return etree.QName(name).localname


def _text_parts(element) -> list:
    """Text directly inside an element: its text plus every child's tail."""
    return [element.text or ""] + [child.tail or "" for child in element]


def element_to_tree(element) -> Tree:
    """
    Convert an lxml element into a generic tree.

        <a><b>1</b><b>2</b><c x="y">3</c></a>
        => {"b": ["1", "2"], "c": {"@x": "y", "#text": "3"}}

    In mixed content the text runs around child elements are stripped and
    joined with single spaces under "#text": <a>x<b/>y</a> => "x y".
    """
    children = [child for child in element if isinstance(child.tag, str)]
    attributes = {
        f"@{_local_name(name)}": value
        for name, value in element.attrib.items()
    }

    if not children and not attributes:
        return "".join(_text_parts(element))

    tree: Dict[str, Any] = dict(attributes)
    for child in children:
        name = _local_name(child)
        value = element_to_tree(child)
        if name not in tree:
            tree[name] = value
        elif isinstance(tree[name], list):
            tree[name].append(value)
        else:
            tree[name] = [tree[name], value]

    text = " ".join(part.strip() for part in _text_parts(element) if part.strip())
    if text:
        tree["#text"] = text
    return tree


def parse_xml(content: Union[bytes, str]) -> Dict[str, Any]:
    """
    Parse an XML document (decoded as UTF-8) into a generic tree.

    Returns:
        {root_name: root_tree}

    Raises:
        lxml.etree.XMLSyntaxError: If the content is not well-formed XML.
    """
    if isinstance(content, str):
        content = content.encode("utf-8")

    parser = etree.XMLParser(
        encoding="utf-8", resolve_entities=False, no_network=True
    )
    root = etree.fromstring(content, parser=parser)
    return {_local_name(root): element_to_tree(root)}


def first_value(value: Tree) -> Tree:
    """First item of a repeated element, or the value itself."""
    if isinstance(value, list):
        if not value:
            raise MalformedResponseError((), "Empty element list in response")
        return value[0]
    return value


def get_path(tree: Tree, *path: str) -> Tree:
    """
    Walk a tree by element names, taking the first of repeated elements.

    Raises:
        MalformedResponseError: If any step of the path is missing.
    """
    node = tree
    for depth, name in enumerate(path):
        node = first_value(node)
        if not isinstance(node, dict) or name not in node:
            raise MalformedResponseError(path[:depth + 1])
        node = node[name]
    return node


def normalize_response(document: Dict[str, Any]) -> AwisResult:
    """
    Unwrap the document root and pull out request metadata.

    Args:
        document: Output of parse_xml

    Returns:
        AwisResult whose data is the first top-level element

    Raises:
        MalformedResponseError: If the request id or status is missing.
    """
    if not isinstance(document, dict) or not document:
        raise MalformedResponseError((), "Response document is empty")

    payload = next(iter(document.values()))

    request_id = first_value(
        get_path(payload, "Response", "OperationRequest", "RequestId")
    )
    status_code = first_value(
        get_path(payload, "Response", "ResponseStatus", "StatusCode")
    )

    logger.info(f"Request ID: {request_id}")
    logger.info(f"Response Status: {status_code}")

    return AwisResult(
        request_id=request_id,
        status_code=status_code,
        data=payload,
    )
