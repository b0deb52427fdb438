from src.documents.domain.models import DocumentRegistry, DocumentRegistryEntry

BYLAWS_ID = "1ABC123"
RULES_ID = "1DEF456"


def make_registry() -> DocumentRegistry:
    return DocumentRegistry(
        [
            DocumentRegistryEntry(document_id=BYLAWS_ID, web_route="/about/bylaws", name="bylaws"),
            DocumentRegistryEntry(document_id=RULES_ID, web_route="/tournaments/rules", name="tournament-rules"),
        ]
    )
