"""Domain models and deterministic rules for document transformation."""

from src.documents.domain.models import (
    DocumentDto,
    DocumentRegistry,
    DocumentRegistryEntry,
    HeadingAnchor,
    LinkKind,
    ListStyleRule,
)
from src.documents.domain.rules import extract_list_style_rules, generate_anchor_id, rewrite_href

__all__ = [
    "DocumentDto",
    "DocumentRegistry",
    "DocumentRegistryEntry",
    "extract_list_style_rules",
    "generate_anchor_id",
    "HeadingAnchor",
    "LinkKind",
    "ListStyleRule",
    "rewrite_href",
]
