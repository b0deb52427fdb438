from src.config.logger_config import logger
from src.config.settings import Settings, load_settings
from src.documents.application.documents_service import DocumentsService
from src.documents.application.html_processor import HtmlProcessor
from src.documents.application.workflows.sync_documents import SyncDocumentsWorkflow, SyncSummary
from src.documents.infrastructure.export_client import GoogleDocsExportClient
from src.documents.infrastructure.fs_storage import FileSystemDocumentStorage
from src.documents.infrastructure.registry_json import load_registry


def build_documents_service(settings: Settings) -> DocumentsService:
    registry = load_registry(settings.registry_path)
    client = GoogleDocsExportClient(export_url=settings.export_url, timeout=settings.export_timeout)
    return DocumentsService(registry=registry, source=client, processor=HtmlProcessor(registry))


def run_sync(
    document_names: list[str] | None = None,
    settings: Settings | None = None,
    show_progress: bool = True,
) -> SyncSummary:
    settings = settings or load_settings()
    service = build_documents_service(settings)
    storage = FileSystemDocumentStorage(settings.storage_root)
    logger.info("Syncing documents into {}", settings.storage_root)
    return SyncDocumentsWorkflow(service=service, storage=storage).run(
        document_names=document_names,
        show_progress=show_progress,
    )
