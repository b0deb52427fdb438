from time import perf_counter

from src.config.logger_config import logger
from src.documents.application.html_processor import HtmlProcessor
from src.documents.application.ports import RawHtmlSourcePort
from src.documents.domain.models import DocumentDto, DocumentRegistry


class DocumentsService:
    def __init__(self, registry: DocumentRegistry, source: RawHtmlSourcePort, processor: HtmlProcessor) -> None:
        self.registry = registry
        self.source = source
        self.processor = processor

    def get_document_as_html(self, document_name: str) -> DocumentDto | None:
        """Fetch a configured document by name and return its processed HTML.

        Returns None when the name is not in the registry. Errors raised by the
        source are logged and propagated unchanged.
        """
        entry = self.registry.find_by_name(document_name)
        if entry is None:
            logger.warning("Document not found in configuration: {}", document_name)
            return None

        started = perf_counter()
        try:
            logger.debug("Exporting document: {} (id: {})", document_name, entry.document_id)
            raw_html = self.source.fetch_html(entry.document_id)
            logger.trace("Processing HTML for document: {} (original size: {} chars)", document_name, len(raw_html))

            processed_html = self.processor.process(raw_html)
            logger.trace("HTML processed for document: {} (processed size: {} chars)", document_name, len(processed_html))
        except Exception:
            logger.exception("Failed to export document: {} (id: {})", document_name, entry.document_id)
            raise

        duration_ms = int((perf_counter() - started) * 1000)
        logger.info(
            "Document exported successfully: {} ({} chars, {} ms)",
            document_name,
            len(processed_html),
            duration_ms,
        )
        return DocumentDto(id=entry.document_id, name=entry.name, content=processed_html)
