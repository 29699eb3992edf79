from __future__ import annotations

import json
from dataclasses import dataclass, field


@dataclass(frozen=True)
class MetadataRecord:
    url: str
    title: str = ""
    description: str = ""
    site_name: str = ""
    image_url: str = ""
    favicon_url: str = ""
    content_type: str = ""
    author: str = ""
    keywords: list[str] = field(default_factory=list)
    language: str = ""

    def to_dict(self) -> dict[str, object]:
        """
        Field-ordered mapping using the public output keys.

        Every key is present even when empty; `content_type` is exposed as `type`.
        """
        return {
            "url": self.url,
            "title": self.title,
            "description": self.description,
            "site_name": self.site_name,
            "image_url": self.image_url,
            "favicon_url": self.favicon_url,
            "type": self.content_type,
            "author": self.author,
            "keywords": list(self.keywords),
            "language": self.language,
        }

    def to_json(self, *, indent: int | None = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)
