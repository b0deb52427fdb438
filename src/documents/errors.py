class DocumentNotFoundError(LookupError):
    def __init__(self, document_name: str) -> None:
        super().__init__(f"Document with name '{document_name}' was not found.")
        self.document_name = document_name


class DocumentExportError(RuntimeError):
    def __init__(self, document_id: str, reason: str) -> None:
        super().__init__(f"Export failed for document {document_id}: {reason}")
        self.document_id = document_id
        self.reason = reason
