import re
from typing import Pattern
from urllib.parse import parse_qs, unquote, urlsplit

from src.documents.domain.models import DocumentRegistry, LinkKind, ListStyleRule

# https://docs.google.com/document/d/{id}/edit and the /u/{index}/ variant.
GOOGLE_DOCS_URL: Pattern[str] = re.compile(
    r"^https?://docs\.google\.com/document/(?:u/\d+/)?d/(?P<document_id>[^/?#]+)",
    re.I,
)
# https://www.google.com/url?q={destination}&sa=D&source=editors
GOOGLE_REDIRECT_URL: Pattern[str] = re.compile(r"^https?://(?:www\.)?google\.com/url\?", re.I)
HEADING_PREFIX: Pattern[str] = re.compile(r"^heading=", re.I)

ANCHOR_ID_INVALID = re.compile(r"[^a-z0-9.\-]+")
CONSECUTIVE_HYPHENS = re.compile(r"-{2,}")

# Numbering classes emitted by the exporter: .lst-kix_{list id}-{nesting level}
LIST_CLASS_SELECTOR: Pattern[str] = re.compile(r"^(?:ol|ul)?\.lst-kix_[A-Za-z0-9_]+-\d+$")
CSS_RULE = re.compile(r"([^{}]+)\{([^{}]*)\}")
CSS_COMMENT = re.compile(r"/\*.*?\*/", re.S)
LIST_STYLE_TYPE = re.compile(r"(?:^|;)\s*list-style-type\s*:\s*([^;]+?)\s*(?:;|$)", re.I)


def generate_anchor_id(text: str) -> str:
    """Turn heading text into a kebab-case id.

    "Section 10.3 - Hall of Fame" -> "section-10.3-hall-of-fame"
    """
    anchor = (text or "").lower()
    anchor = ANCHOR_ID_INVALID.sub("-", anchor)
    anchor = CONSECUTIVE_HYPHENS.sub("-", anchor)
    return anchor.strip("-")


def strip_heading_prefix(fragment: str) -> str:
    return HEADING_PREFIX.sub("", fragment, count=1)


def extract_list_style_rules(css: str) -> list[ListStyleRule]:
    rules: list[ListStyleRule] = []
    for match in CSS_RULE.finditer(CSS_COMMENT.sub("", css or "")):
        declarations = match.group(2)
        style_type = LIST_STYLE_TYPE.search(declarations)
        if not style_type:
            continue
        for selector in match.group(1).split(","):
            selector = selector.strip()
            if LIST_CLASS_SELECTOR.match(selector):
                rules.append(ListStyleRule(selector=selector, list_style_type=style_type.group(1)))
    return rules


def classify_href(href: str) -> LinkKind:
    if href.startswith("#"):
        return LinkKind.FRAGMENT
    if GOOGLE_DOCS_URL.match(href):
        return LinkKind.DIRECT
    if GOOGLE_REDIRECT_URL.match(href):
        return LinkKind.REDIRECT
    return LinkKind.OTHER


def rewrite_document_url(url: str, registry: DocumentRegistry) -> str | None:
    """Map a document URL onto its web route, or None when it is not ours."""
    match = GOOGLE_DOCS_URL.match(url)
    if not match:
        return None
    entry = registry.find_by_document_id(match.group("document_id"))
    if entry is None:
        return None

    _, sep, fragment = url.partition("#")
    fragment = unquote(strip_heading_prefix(fragment)) if sep else ""
    if fragment:
        return f"{entry.web_route}#{fragment}"
    return entry.web_route


def unwrap_redirect_url(href: str) -> str | None:
    try:
        query = urlsplit(href).query
    except ValueError:
        return None
    destinations = parse_qs(query).get("q")
    if not destinations:
        return None
    return destinations[0]


def rewrite_fragment(href: str, original_to_generated: dict[str, str]) -> str | None:
    target = unquote(strip_heading_prefix(href[1:]))
    generated = original_to_generated.get(target)
    if generated is None:
        return None
    return f"#{generated}"


def rewrite_href(
    href: str,
    registry: DocumentRegistry,
    original_to_generated: dict[str, str],
) -> str | None:
    """Return the replacement for href, or None to leave it untouched."""
    kind = classify_href(href)
    if kind is LinkKind.DIRECT:
        return rewrite_document_url(href, registry)
    if kind is LinkKind.REDIRECT:
        destination = unwrap_redirect_url(href)
        if destination is None:
            return None
        return rewrite_document_url(destination, registry)
    if kind is LinkKind.FRAGMENT:
        return rewrite_fragment(href, original_to_generated)
    return None
