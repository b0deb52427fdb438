from dataclasses import dataclass
from enum import Enum
from typing import Iterable


@dataclass(frozen=True)
class DocumentRegistryEntry:
    document_id: str
    web_route: str
    name: str


class DocumentRegistry:
    """Read-only set of documents the site knows how to serve.

    Entries keep their configured order. Lookups by external document id are
    exact; lookups by name ignore case and lookups by route ignore a leading
    slash.
    """

    def __init__(self, entries: Iterable[DocumentRegistryEntry] = ()) -> None:
        self._entries: tuple[DocumentRegistryEntry, ...] = tuple(entries)
        self._by_id: dict[str, DocumentRegistryEntry] = {}
        for entry in self._entries:
            if entry.document_id in self._by_id:
                raise ValueError(f"Duplicate document id in registry: {entry.document_id}")
            self._by_id[entry.document_id] = entry

    @property
    def entries(self) -> tuple[DocumentRegistryEntry, ...]:
        return self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(self._entries)

    def find_by_document_id(self, document_id: str) -> DocumentRegistryEntry | None:
        return self._by_id.get(document_id)

    def find_by_name(self, name: str) -> DocumentRegistryEntry | None:
        wanted = (name or "").casefold()
        for entry in self._entries:
            if entry.name.casefold() == wanted:
                return entry
        return None

    def find_by_route(self, route: str) -> DocumentRegistryEntry | None:
        wanted = (route or "").strip("/")
        for entry in self._entries:
            if entry.web_route.strip("/") == wanted:
                return entry
        return None


@dataclass(frozen=True)
class HeadingAnchor:
    generated_id: str
    original_id: str | None
    text: str
    level: int


@dataclass(frozen=True)
class ListStyleRule:
    selector: str
    list_style_type: str

    def to_css(self) -> str:
        return f"{self.selector}{{list-style-type:{self.list_style_type}}}"


class LinkKind(str, Enum):
    DIRECT = "direct"
    REDIRECT = "redirect"
    FRAGMENT = "fragment"
    OTHER = "other"


@dataclass(frozen=True)
class DocumentDto:
    id: str
    name: str
    content: str
    content_type: str = "text/html"
