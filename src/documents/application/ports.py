from dataclasses import dataclass, field
from typing import Mapping, Protocol, runtime_checkable


@dataclass(frozen=True)
class StoredFile:
    content: str
    content_type: str
    metadata: dict[str, str] = field(default_factory=dict)


@runtime_checkable
class RawHtmlSourcePort(Protocol):
    """Returns the exported HTML of one external document."""

    def fetch_html(self, document_id: str) -> str: ...


@runtime_checkable
class FileStoragePort(Protocol):
    def exists(self, container: str, path: str) -> bool: ...

    def get_file(self, container: str, path: str) -> StoredFile | None: ...

    def upload_file(
        self,
        container: str,
        path: str,
        content: str,
        content_type: str,
        metadata: Mapping[str, str],
    ) -> None: ...
