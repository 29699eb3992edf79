from __future__ import annotations

from dataclasses import dataclass, field

from url_metadata.html_tree import Node, NodeKind
from url_metadata.models import MetadataRecord
from url_metadata.urls import resolve_relative_urls

FAVICON_RELS = frozenset({"icon", "shortcut icon"})

# og:* property -> field; these overwrite unconditionally, so the last tag in the document wins.
_OPEN_GRAPH_FIELDS = {
    "og:title": "title",
    "og:description": "description",
    "og:image": "image_url",
    "og:site_name": "site_name",
    "og:type": "content_type",
}


@dataclass
class _Fields:
    title: str = ""
    description: str = ""
    site_name: str = ""
    image_url: str = ""
    favicon_url: str = ""
    content_type: str = ""
    author: str = ""
    keywords: list[str] = field(default_factory=list)
    language: str = ""

    def apply_meta(self, node: Node) -> None:
        prop = node.attr("property")
        name = node.attr("name")
        content = node.attr("content")

        target = _OPEN_GRAPH_FIELDS.get(prop)
        if target:
            setattr(self, target, content)

        if name == "description":
            if not self.description:
                self.description = content
        elif name == "author":
            self.author = content
        elif name == "keywords":
            if content:
                self.keywords = [k.strip() for k in content.split(",")]
        elif name == "language":
            self.language = content

    def apply_link(self, node: Node) -> None:
        if node.attr("rel") in FAVICON_RELS and not self.favicon_url:
            self.favicon_url = node.attr("href")


def _find_title(tree: Node) -> str:
    for node in tree.iter_preorder():
        if not node.is_element("title"):
            continue
        child = node.first_child
        if child is not None and child.kind is NodeKind.TEXT and child.data:
            return child.data
    return ""


def _find_favicon(tree: Node) -> str:
    for node in tree.iter_preorder():
        if node.is_element("link") and node.attr("rel") in FAVICON_RELS:
            href = node.attr("href")
            if href:
                return href
    return ""


def extract_metadata(tree: Node, source_url: str) -> MetadataRecord:
    """
    Extract page metadata from a parsed document.

    Open Graph tags win over standard meta tags, and `<title>` is used only when no
    `og:title` was found. Root-relative image and favicon links are resolved against
    `source_url`. Sparse or malformed markup yields empty fields, never an error.
    """
    fields = _Fields()
    for node in tree.iter_preorder():
        if node.kind is not NodeKind.ELEMENT:
            continue
        if node.tag == "meta":
            fields.apply_meta(node)
        elif node.tag == "link":
            fields.apply_link(node)

    if not fields.title:
        fields.title = _find_title(tree)
    # The inline pass above normally finds the favicon already.
    if not fields.favicon_url:
        fields.favicon_url = _find_favicon(tree)

    record = MetadataRecord(
        url=source_url,
        title=fields.title,
        description=fields.description,
        site_name=fields.site_name,
        image_url=fields.image_url,
        favicon_url=fields.favicon_url,
        content_type=fields.content_type,
        author=fields.author,
        keywords=fields.keywords,
        language=fields.language,
    )
    return resolve_relative_urls(record, source_url)
