"""Entries: pieces of content in a space, mapped to and from the API representation."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

__all__ = [
    "EntryField",
    "Entry",
    "parse_content_value",
    "sort_keys_recursively",
]

# Characters the API's JSON encoder writes as escapes inside strings.
_JSON_ESCAPES = (
    ("&", "\\u0026"),
    ("<", "\\u003c"),
    (">", "\\u003e"),
    ("\u2028", "\\u2028"),
    ("\u2029", "\\u2029"),
)


def sort_keys_recursively(value: Any) -> Any:
    """Return the value with the keys of every mapping in it sorted."""
    if isinstance(value, dict):
        return {key: sort_keys_recursively(value[key]) for key in sorted(value)}
    if isinstance(value, list):
        return [sort_keys_recursively(item) for item in value]
    return value


def parse_content_value(value: str) -> Any:
    """Decode the text as JSON when it is JSON, otherwise keep it as text."""
    try:
        content: Any = json.loads(value)
    except ValueError:
        content = value
    return sort_keys_recursively(content)


def _content_text(content: Any) -> str:
    if isinstance(content, str):
        return content
    content = sort_keys_recursively(content)
    try:
        text = json.dumps(content, separators=(",", ":"), ensure_ascii=False)
    except (TypeError, ValueError):
        return str(content)
    for character, escape in _JSON_ESCAPES:
        text = text.replace(character, escape)
    return text


@dataclass
class EntryField:
    """The content of one field of an entry in one locale."""

    id: str
    content: str
    locale: str


@dataclass
class Entry:
    """An entry with its fields and its publication and archive state."""

    id: str | None = None
    entry_id: str | None = None
    version: int | None = None
    space_id: str | None = None
    environment: str | None = None
    content_type_id: str | None = None
    fields: list[EntryField] = field(default_factory=list)
    published: bool = False
    archived: bool = False

    def draft(self) -> dict[str, Any]:
        """Return the request body, with fields grouped by id and then by locale."""
        properties: dict[str, dict[str, Any]] = {}
        for item in self.fields:
            properties.setdefault(item.id, {})[item.locale] = parse_content_value(
                item.content
            )
        return {"fields": properties}

    def apply(self, data: dict[str, Any]) -> None:
        """Take over identity, state and fields from an API entry."""
        sys = data["sys"]
        self.id = sys["id"]
        self.entry_id = sys["id"]
        self.version = sys.get("version")
        self.space_id = sys["space"]["sys"]["id"]
        self.environment = sys["environment"]["sys"]["id"]
        self.content_type_id = sys["contentType"]["sys"]["id"]
        self.published = sys.get("publishedAt") is not None
        self.archived = sys.get("archivedAt") is not None
        self.build_fields(data)

    def build_fields(self, data: dict[str, Any]) -> None:
        """Rebuild the field list from an API entry; non-text content becomes JSON text."""
        self.fields = [
            EntryField(id=field_id, content=_content_text(content), locale=locale)
            for field_id, locales in (data.get("fields") or {}).items()
            for locale, content in locales.items()
        ]