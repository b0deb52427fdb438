import re

from bs4 import BeautifulSoup, Tag
from bs4.exceptions import ParserRejectedMarkup

from src.config.logger_config import logger
from src.documents.domain.models import DocumentRegistry, HeadingAnchor, ListStyleRule
from src.documents.domain.rules import extract_list_style_rules, generate_anchor_id, rewrite_href

BODY_TAG = re.compile(r"<body[\s>/]", re.I)
# Markup that can mention <body> without opening one.
NON_MARKUP = re.compile(r"<!--.*?(?:-->|\Z)|<(script|style|textarea|title)\b.*?(?:</\1\s*>|\Z)", re.I | re.S)
HEADING_TAGS = ("h1", "h2", "h3", "h4", "h5", "h6")


class HtmlProcessor:
    """Cleans an exported document and makes its anchors and links site-local.

    The processor holds no per-call state, so one instance can serve
    concurrent requests. Output depends only on the input markup and the
    registry, which keeps it usable as a cache key upstream.
    """

    def __init__(self, registry: DocumentRegistry) -> None:
        self.registry = registry

    def process(self, raw_html: str) -> str:
        if not raw_html or not has_body(raw_html):
            return raw_html

        try:
            soup = BeautifulSoup(raw_html, "lxml")
        except (ParserRejectedMarkup, ValueError) as exc:
            # lxml raises UnicodeEncodeError (a ValueError) on lone surrogates.
            logger.warning("Markup rejected by parser, returning raw HTML: {}", exc)
            return raw_html

        body = soup.body
        if body is None:
            return raw_html

        list_rules = self.extract_list_styles(soup)
        anchors = self.generate_anchor_ids(body)
        rewritten = self.rewrite_links(body, anchors)
        logger.debug(
            "HTML processed: headings={}, links_rewritten={}, list_style_rules={}",
            len(anchors),
            rewritten,
            len(list_rules),
        )
        return self._render(body, list_rules)

    @staticmethod
    def extract_list_styles(soup: BeautifulSoup) -> list[ListStyleRule]:
        rules: list[ListStyleRule] = []
        seen: set[ListStyleRule] = set()
        for style in soup.find_all("style"):
            for rule in extract_list_style_rules(style.get_text()):
                if rule not in seen:
                    seen.add(rule)
                    rules.append(rule)
            style.decompose()
        return rules

    @staticmethod
    def generate_anchor_ids(body: Tag) -> list[HeadingAnchor]:
        anchors: list[HeadingAnchor] = []
        used: set[str] = set()
        for heading in body.find_all(HEADING_TAGS):
            text = heading.get_text()
            original_id = heading.get("id") or None
            if original_id:
                heading["data-original-id"] = original_id

            generated_id = generate_anchor_id(text)
            if generated_id:
                generated_id = HtmlProcessor._unique_id(generated_id, used)
                heading["id"] = generated_id
            elif "id" in heading.attrs:
                # Nothing usable in the text; the page assigns its own id later.
                del heading["id"]

            anchors.append(
                HeadingAnchor(
                    generated_id=generated_id,
                    original_id=original_id,
                    text=" ".join(text.split()),
                    level=int(heading.name[1]),
                )
            )
        return anchors

    def rewrite_links(self, body: Tag, anchors: list[HeadingAnchor]) -> int:
        original_to_generated: dict[str, str] = {}
        for anchor in anchors:
            if anchor.original_id and anchor.generated_id:
                original_to_generated.setdefault(anchor.original_id, anchor.generated_id)

        rewritten = 0
        for link in body.find_all("a", href=True):
            href = link["href"]
            if not href:
                continue
            replacement = rewrite_href(href, self.registry, original_to_generated)
            if replacement is not None and replacement != href:
                link["href"] = replacement
                rewritten += 1
        return rewritten

    @staticmethod
    def _unique_id(base: str, used: set[str]) -> str:
        candidate = base
        suffix = 2
        while candidate in used:
            candidate = f"{base}-{suffix}"
            suffix += 1
        used.add(candidate)
        return candidate

    @staticmethod
    def _render(body: Tag, list_rules: list[ListStyleRule]) -> str:
        content = body.decode_contents()
        if not list_rules:
            return content
        css = "\n".join(rule.to_css() for rule in list_rules)
        return f"<style>\n{css}\n</style>\n{content}"


def has_body(raw_html: str) -> bool:
    return BODY_TAG.search(NON_MARKUP.sub("", raw_html)) is not None
