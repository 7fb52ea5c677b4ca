"""Document tree, structural paths, ranges, and HTML serialization."""

from glossmark.document.html_io import inner_html, outer_html, parse_html
from glossmark.document.paths import (
    StructuralPath,
    decode_path,
    encode_position,
    resolve_path,
)
from glossmark.document.ranges import (
    Position,
    Range,
    extract_contents,
    insert_node,
    make_range,
)
from glossmark.document.tree import (
    ElementNode,
    Node,
    TextNode,
    iter_document_order,
    text_content,
)

__all__ = [
    "ElementNode",
    "Node",
    "Position",
    "Range",
    "StructuralPath",
    "TextNode",
    "decode_path",
    "encode_position",
    "extract_contents",
    "inner_html",
    "insert_node",
    "iter_document_order",
    "make_range",
    "outer_html",
    "parse_html",
    "resolve_path",
    "text_content",
]
