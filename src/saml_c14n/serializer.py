"""
serializer.py — Canonical XML output

Walks a canonical tree and emits its exact text. Payload text is written
verbatim; escaping was applied when the document was tokenized. Element and
attribute prefixes are resolved against the tree being printed.

The whole document is rendered before anything is returned or written, so a
namespace failure never leaves partial canonical output behind.
"""

from __future__ import annotations
from typing import BinaryIO, List, Tuple, Union

from .namespaces import attribute_name, close_name, element_name
from .nodes import Element, Node, RootMarker
from .tokenizer import Comment, Directive, ProcessingInstruction, Text

ENCODING = "utf-8"


def _open(node: Node) -> Tuple[str, str]:
    """Return the (opening, closing) text for a single node."""
    value = node.value
    if isinstance(value, RootMarker):
        return "", ""
    if isinstance(value, Element):
        tag = element_name(node)
        if value.attributes:
            attrs = " ".join(f'{attribute_name(attr, node)}="{attr.value}"' for attr in value.attributes)
            start = f"<{tag} {attrs}>"
        else:
            start = f"<{tag}>"
        return start, f"</{close_name(node)}>"
    if isinstance(value, Text):
        return value.data, ""
    if isinstance(value, Comment):
        return f"<!--{value.data}-->", ""
    if isinstance(value, ProcessingInstruction):
        if value.instruction:
            return f"<?{value.target} {value.instruction}?>", ""
        return f"<?{value.target}?>", ""
    if isinstance(value, Directive):
        return f"<!{value.data}>", ""
    raise TypeError(f"unexpected node payload: {value!r}")


def serialize_text(tree: Node) -> str:
    """Render ``tree`` as canonical text.

    Raises:
        MalformedNamespaceReferenceError: A name's namespace is not declared
            by any enclosing element of the tree.
    """
    out: List[str] = []
    # Entries are nodes to open or closing text to emit.
    pending: List[Union[Node, str]] = [tree]
    while pending:
        item = pending.pop()
        if isinstance(item, str):
            out.append(item)
            continue
        start, end = _open(item)
        out.append(start)
        if end:
            pending.append(end)
        pending.extend(reversed(item.children))
    return "".join(out)


def serialize(tree: Node) -> bytes:
    """Render ``tree`` as canonical UTF-8 bytes."""
    return serialize_text(tree).encode(ENCODING)


def write_canonical(tree: Node, sink: BinaryIO) -> int:
    """Write the canonical bytes of ``tree`` to ``sink``; return the byte count."""
    data = serialize(tree)
    sink.write(data)
    return len(data)
