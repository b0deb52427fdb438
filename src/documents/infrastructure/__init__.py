"""Infrastructure adapters for documents."""

from src.documents.infrastructure.export_client import GoogleDocsExportClient
from src.documents.infrastructure.fs_storage import FileSystemDocumentStorage
from src.documents.infrastructure.registry_json import load_registry

__all__ = ["FileSystemDocumentStorage", "GoogleDocsExportClient", "load_registry"]
