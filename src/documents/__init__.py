"""Document transformation package."""

from src.documents.application.html_processor import HtmlProcessor
from src.documents.domain.models import DocumentRegistry, DocumentRegistryEntry

__all__ = ["DocumentRegistry", "DocumentRegistryEntry", "HtmlProcessor"]
