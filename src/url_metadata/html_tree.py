from __future__ import annotations

import html
import re
from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from html.parser import HTMLParser

from url_metadata.errors import ParseError


class NodeKind(str, Enum):
    DOCUMENT = "document"
    ELEMENT = "element"
    TEXT = "text"
    OTHER = "other"


@dataclass
class Node:
    kind: NodeKind
    tag: str = ""
    attrs: dict[str, str] = field(default_factory=dict)
    data: str = ""
    children: list[Node] = field(default_factory=list)

    def attr(self, key: str) -> str:
        return self.attrs.get(key, "")

    @property
    def first_child(self) -> Node | None:
        return self.children[0] if self.children else None

    def is_element(self, tag: str) -> bool:
        return self.kind is NodeKind.ELEMENT and self.tag == tag

    def iter_preorder(self) -> Iterator[Node]:
        """
        Depth-first pre-order walk in document order.

        Uses an explicit stack so deeply nested markup cannot hit the recursion limit.
        """
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))


VOID_ELEMENTS = frozenset(
    {
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "link",
        "meta",
        "param",
        "source",
        "track",
        "wbr",
    }
)

# title/textarea hold escapable raw text: markup inside them is text, entities are decoded.
# Comments, scripts and styles are matched too so a "<title>" inside them is left alone.
_RAW_TEXT_RE = re.compile(
    r"<!--.*?(?:-->|\Z)"
    r"|<(?P<script>script|style)\b[^>]*>.*?(?:</(?P=script)\s*>|\Z)"
    r"|(?P<open><(?P<tag>title|textarea)\b[^>]*>)(?P<text>.*?)(?P<close></(?P=tag)\s*>|\Z)",
    re.IGNORECASE | re.DOTALL,
)


class _TreeBuilder(HTMLParser):
    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.root = Node(kind=NodeKind.DOCUMENT)
        self._open: list[Node] = [self.root]

    def feed_document(self, text: str) -> None:
        pos = 0
        for m in _RAW_TEXT_RE.finditer(text):
            tag = m.group("tag")
            if not tag:
                continue
            self.feed(text[pos : m.start()])
            self.feed(m.group("open"))
            if m.group("text"):
                self.append_text(html.unescape(m.group("text")))
            self.feed(m.group("close") or f"</{tag}>")
            pos = m.end()
        self.feed(text[pos:])
        self.close()

    @staticmethod
    def _attrs_dict(attrs: list[tuple[str, str | None]]) -> dict[str, str]:
        out: dict[str, str] = {}
        for k, v in attrs or []:
            key = k.lower()
            # Repeated attributes: the last value wins.
            out[key] = v or ""
        return out

    def _append(self, node: Node) -> None:
        self._open[-1].children.append(node)

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        tag = tag.lower()
        node = Node(kind=NodeKind.ELEMENT, tag=tag, attrs=self._attrs_dict(attrs))
        self._append(node)
        if tag not in VOID_ELEMENTS:
            self._open.append(node)

    def handle_startendtag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        self._append(Node(kind=NodeKind.ELEMENT, tag=tag.lower(), attrs=self._attrs_dict(attrs)))

    def handle_endtag(self, tag: str) -> None:
        tag = tag.lower()
        if tag in VOID_ELEMENTS:
            return
        for i in range(len(self._open) - 1, 0, -1):
            if self._open[i].tag == tag:
                del self._open[i:]
                return
        # stray end tag: ignored

    def append_text(self, data: str) -> None:
        siblings = self._open[-1].children
        if siblings and siblings[-1].kind is NodeKind.TEXT:
            siblings[-1].data += data
            return
        self._append(Node(kind=NodeKind.TEXT, data=data))

    def handle_data(self, data: str) -> None:
        self.append_text(data)

    def handle_comment(self, data: str) -> None:
        self._append(Node(kind=NodeKind.OTHER, data=data))

    def handle_decl(self, decl: str) -> None:
        self._append(Node(kind=NodeKind.OTHER, data=decl))

    def handle_pi(self, data: str) -> None:
        self._append(Node(kind=NodeKind.OTHER, data=data))

    def unknown_decl(self, data: str) -> None:
        self._append(Node(kind=NodeKind.OTHER, data=data))


def parse_html(markup: str | bytes, *, encoding: str | None = None) -> Node:
    """
    Parse markup into a `Node` tree rooted at a DOCUMENT node.

    Bytes are decoded with `encoding` (utf-8 when unset), replacing undecodable sequences.
    Line endings are normalized to `\\n`. Unclosed elements are closed at end of input and
    stray end tags are dropped.
    """
    if isinstance(markup, bytes):
        try:
            text = markup.decode(encoding or "utf-8", errors="replace")
        except LookupError as e:
            raise ParseError(f"unknown document encoding: {encoding}") from e
    else:
        text = markup
    text = text.replace("\r\n", "\n").replace("\r", "\n")

    builder = _TreeBuilder()
    try:
        builder.feed_document(text)
    except Exception as e:  # noqa: BLE001
        raise ParseError(f"parsing HTML: {e}") from e
    return builder.root
