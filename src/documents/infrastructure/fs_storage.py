import json
from pathlib import Path
from typing import Mapping

from pathvalidate import sanitize_filename as lib_sanitize

from src.documents.application.ports import StoredFile

CONTENT_EXTENSIONS = {"text/html": ".html"}


def sanitize_filename(name: str) -> str:
    safe_name = lib_sanitize(name, replacement_text="_")
    if not safe_name:
        return "untitled"
    return safe_name


class FileSystemDocumentStorage:
    """Stores each file as <root>/<container>/<name><ext> plus a .meta.json sidecar."""

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)

    def _content_path(self, container: str, path: str, content_type: str = "text/html") -> Path:
        extension = CONTENT_EXTENSIONS.get(content_type, ".txt")
        return self.root / sanitize_filename(container) / f"{sanitize_filename(path)}{extension}"

    def _meta_path(self, container: str, path: str) -> Path:
        return self.root / sanitize_filename(container) / f"{sanitize_filename(path)}.meta.json"

    def exists(self, container: str, path: str) -> bool:
        return self._meta_path(container, path).exists()

    def get_file(self, container: str, path: str) -> StoredFile | None:
        meta_path = self._meta_path(container, path)
        if not meta_path.exists():
            return None
        meta = json.loads(meta_path.read_text(encoding="utf-8"))
        content_type = meta.get("content_type", "text/html")
        content = self._content_path(container, path, content_type).read_text(encoding="utf-8")
        return StoredFile(content=content, content_type=content_type, metadata=dict(meta.get("metadata", {})))

    def upload_file(
        self,
        container: str,
        path: str,
        content: str,
        content_type: str,
        metadata: Mapping[str, str],
    ) -> None:
        content_path = self._content_path(container, path, content_type)
        content_path.parent.mkdir(parents=True, exist_ok=True)
        content_path.write_text(content, encoding="utf-8")
        with self._meta_path(container, path).open("w", encoding="utf-8") as f:
            json.dump({"content_type": content_type, "metadata": dict(metadata)}, f, ensure_ascii=False, indent=2)
