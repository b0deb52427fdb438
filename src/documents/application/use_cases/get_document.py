from dataclasses import dataclass

from src.documents.application.documents_service import DocumentsService
from src.documents.errors import DocumentNotFoundError


@dataclass(frozen=True)
class GetDocumentQuery:
    document_name: str


class GetDocumentUseCase:
    def __init__(self, service: DocumentsService) -> None:
        self.service = service

    def execute(self, query: GetDocumentQuery) -> str:
        document = self.service.get_document_as_html(query.document_name)
        if document is None:
            raise DocumentNotFoundError(query.document_name)
        return document.content
