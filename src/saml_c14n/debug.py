"""Human-readable tree dumps for diagnosing canonicalization differences."""

from __future__ import annotations
import logging
from typing import List

from .nodes import Element, Node, RootMarker
from .tokenizer import Comment, Directive, ProcessingInstruction, QName, Text

logger = logging.getLogger(__name__)


def _name(name: QName) -> str:
    return f"{{{name.space}}}{name.local}" if name.space else name.local


def describe(node: Node) -> str:
    value = node.value
    if isinstance(value, RootMarker):
        return "Document"
    if isinstance(value, Element):
        line = f"Element {_name(value.name)}"
        if value.attributes:
            line += " [" + ", ".join(f"{_name(a.name)}={a.value!r}" for a in value.attributes) + "]"
        if node.namespace_scope:
            scope = ", ".join(f"{uri!r}->{_name(decl)}" for uri, decl in node.namespace_scope.items())
            line += f" scope({scope})"
        return line
    if isinstance(value, Text):
        return f"Text {value.data!r}"
    if isinstance(value, Comment):
        return f"Comment {value.data!r}"
    if isinstance(value, ProcessingInstruction):
        return f"PI {value.target} {value.instruction!r}"
    if isinstance(value, Directive):
        return f"Directive {value.data!r}"
    return f"Unknown {value!r}"


def dump_tree(node: Node, indent: str = "  ") -> str:
    """One line per node, children indented under their parent."""
    lines: List[str] = []
    pending = [(node, 0)]
    while pending:
        current, depth = pending.pop()
        lines.append(f"{indent * depth}{describe(current)}")
        value = current.value
        if isinstance(value, Element) and value.end is not None and value.end != value.name:
            lines.append(f"{indent * depth}  (closed as {_name(value.end)})")
        pending.extend((child, depth + 1) for child in reversed(current.children))
    return "\n".join(lines)


def log_tree(node: Node, level: int = logging.DEBUG) -> None:
    """Log the dump of ``node`` when ``level`` is enabled for this module."""
    if logger.isEnabledFor(level):
        logger.log(level, "tree:\n%s", dump_tree(node))
