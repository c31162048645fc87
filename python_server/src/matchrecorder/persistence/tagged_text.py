"""Tagged text — the nested ``<tag>value</tag>`` block encoding.

Low-level writer and reader shared by every serialized model. The
document-level layout (which tags, in which order) lives in
``recording_format``.

Leaf values are escaped (``&``, ``<``, ``>``) so player names and map
names survive a round trip.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Optional

_TAG_RE = re.compile(r"<(/?)([A-Za-z_][A-Za-z0-9_]*)>")

_ESCAPES = (("&", "&amp;"), ("<", "&lt;"), (">", "&gt;"))


class RecordingFormatError(ValueError):
    """Raised when serialized recording text is malformed."""


def escape(text: str) -> str:
    for raw, esc in _ESCAPES:
        text = text.replace(raw, esc)
    return text


def unescape(text: str) -> str:
    for raw, esc in reversed(_ESCAPES):
        text = text.replace(esc, raw)
    return text


# ===================================================================
# Writer
# ===================================================================

class TagWriter:
    """Accumulates an indented tagged-block document.

    Usage::

        w = TagWriter()
        w.open("tick")
        w.value("netid", 12)
        w.close("tick")
        text = w.getvalue()
    """

    def __init__(self, indent: str = "  ") -> None:
        self._lines: list[str] = []
        self._stack: list[str] = []
        self._indent = indent

    def _pad(self) -> str:
        return self._indent * len(self._stack)

    def open(self, tag: str) -> None:
        self._lines.append(f"{self._pad()}<{tag}>")
        self._stack.append(tag)

    def close(self, tag: str) -> None:
        if not self._stack or self._stack[-1] != tag:
            raise ValueError(f"close({tag!r}) does not match open block {self._stack[-1:]}")
        self._stack.pop()
        self._lines.append(f"{self._pad()}</{tag}>")

    def value(self, tag: str, value: object) -> None:
        self._lines.append(f"{self._pad()}<{tag}>{escape(str(value))}</{tag}>")

    def raw(self, block: str) -> None:
        """Append an already-serialized block at the current depth."""
        pad = self._pad()
        for line in block.splitlines():
            self._lines.append(pad + line)

    def getvalue(self) -> str:
        if self._stack:
            raise ValueError(f"Unclosed blocks: {self._stack}")
        return "\n".join(self._lines) + "\n"


# ===================================================================
# Reader
# ===================================================================

@dataclass
class Node:
    """One parsed ``<tag>`` block.

    A leaf has ``text`` and no children; a container has children and
    empty text.
    """

    tag: str
    text: str = ""
    children: list[Node] = field(default_factory=list)

    def cursor(self) -> NodeCursor:
        return NodeCursor(self)

    def all(self, tag: str) -> list[Node]:
        """All direct children with the given tag."""
        if self.text.strip():
            raise RecordingFormatError(f"<{self.tag}> must contain blocks, not text")
        wrong = [c.tag for c in self.children if c.tag != tag]
        if wrong:
            raise RecordingFormatError(
                f"<{self.tag}> may only contain <{tag}> blocks, found <{wrong[0]}>"
            )
        return list(self.children)


class NodeCursor:
    """Reads the children of a node strictly in order."""

    def __init__(self, node: Node) -> None:
        self._node = node
        self._pos = 0

    def peek(self) -> Optional[str]:
        if self._pos < len(self._node.children):
            return self._node.children[self._pos].tag
        return None

    def take(self, tag: str) -> Node:
        found = self.peek()
        if found != tag:
            where = f"<{found}>" if found else "end of block"
            raise RecordingFormatError(f"Expected <{tag}> in <{self._node.tag}>, found {where}")
        child = self._node.children[self._pos]
        self._pos += 1
        return child

    def take_optional(self, tag: str) -> Optional[Node]:
        if self.peek() == tag:
            return self.take(tag)
        return None

    def text(self, tag: str) -> str:
        node = self.take(tag)
        if node.children:
            raise RecordingFormatError(f"<{tag}> must be a leaf value")
        return node.text

    def int_value(self, tag: str) -> int:
        raw = self.text(tag)
        try:
            return int(raw)
        except ValueError:
            raise RecordingFormatError(f"<{tag}> is not an integer: {raw!r}")

    def float_value(self, tag: str) -> float:
        raw = self.text(tag)
        try:
            return float(raw)
        except ValueError:
            raise RecordingFormatError(f"<{tag}> is not a number: {raw!r}")

    def finish(self) -> None:
        """Assert every child has been consumed."""
        extra = self.peek()
        if extra is not None:
            raise RecordingFormatError(f"Unexpected <{extra}> in <{self._node.tag}>")


def parse_tagged(text: str) -> Node:
    """Parse a tagged-block document into a tree and return its root.

    Raises:
        RecordingFormatError: On mismatched tags, stray text between
            blocks, or anything other than exactly one root block.
    """
    root = Node(tag="")
    stack: list[Node] = [root]
    pos = 0
    for match in _TAG_RE.finditer(text):
        between = text[pos:match.start()]
        pos = match.end()
        closing, tag = match.group(1) == "/", match.group(2)
        top = stack[-1]
        if closing:
            if top is root or top.tag != tag:
                raise RecordingFormatError(f"Unexpected </{tag}> (open: <{top.tag or '-'}>)")
            if top.children:
                if between.strip():
                    raise RecordingFormatError(f"Stray text in <{tag}>: {between.strip()!r}")
            else:
                top.text = unescape(between)
            stack.pop()
        else:
            if between.strip():
                raise RecordingFormatError(f"Stray text before <{tag}>: {between.strip()!r}")
            node = Node(tag=tag)
            top.children.append(node)
            stack.append(node)
    if len(stack) > 1:
        raise RecordingFormatError(f"Unclosed <{stack[-1].tag}>")
    if text[pos:].strip():
        raise RecordingFormatError("Trailing text after last block")
    if len(root.children) != 1:
        raise RecordingFormatError(f"Expected one root block, found {len(root.children)}")
    return root.children[0]

