import unittest
from unittest.mock import patch

from bs4 import BeautifulSoup
from bs4.exceptions import ParserRejectedMarkup

from src.documents.application.html_processor import HtmlProcessor
from tests.documents.fixtures import make_registry


def _wrap(body: str, head: str = "") -> str:
    return f"<html><head>{head}</head><body>{body}</body></html>"


def _parse(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


def _hrefs(html: str) -> list[str]:
    return [a["href"] for a in _parse(html).find_all("a", href=True)]


class BodyExtractionTests(unittest.TestCase):
    def setUp(self):
        self.processor = HtmlProcessor(make_registry())

    def test_extracts_body_content(self):
        result = self.processor.process(
            _wrap("<h1>Test Document</h1><p>Content here</p>", head="<title>Test</title>")
        )
        self.assertIn("Test Document", result)
        self.assertIn("<p>Content here</p>", result)
        self.assertNotIn("<html", result)
        self.assertNotIn("<head", result)
        self.assertNotIn("<title>", result)

    def test_fragment_without_body_is_returned_unchanged(self):
        raw = '<div><h1 id="h.a">Title</h1><a href="https://docs.google.com/document/d/1ABC123/edit">x</a></div>'
        self.assertEqual(self.processor.process(raw), raw)

    def test_empty_input(self):
        self.assertEqual(self.processor.process(""), "")

    def test_empty_body(self):
        self.assertEqual(self.processor.process("<html><body></body></html>").strip(), "")

    def test_malformed_html_does_not_raise(self):
        raw = "<html>\n<body>\n<h1>Unclosed heading\n<p>Unclosed paragraph\n<div><span>Nested but unclosed\n</body>\n"
        result = self.processor.process(raw)
        self.assertIn("Unclosed heading", result)
        self.assertIn("Unclosed paragraph", result)

    def test_parser_rejection_returns_raw_html(self):
        raw = _wrap("<h1>Title</h1>")
        with patch(
            "src.documents.application.html_processor.BeautifulSoup",
            side_effect=ParserRejectedMarkup("rejected"),
        ):
            self.assertEqual(self.processor.process(raw), raw)

    def test_unencodable_text_returns_raw_html(self):
        raw = "<body><h1>\ud800</h1></body>"
        self.assertEqual(self.processor.process(raw), raw)

    def test_body_mentioned_outside_markup_is_not_a_body(self):
        for raw in (
            "<!-- <body> --><p>hi</p>",
            "<script>var shell = '<body>';</script><p>hi</p>",
            "<title>The <body> tag</title><p>hi</p>",
        ):
            with self.subTest(raw=raw):
                self.assertEqual(self.processor.process(raw), raw)

    def test_body_after_comment_is_still_found(self):
        result = self.processor.process("<!-- exported --><html><body><p>hi</p></body></html>")
        self.assertEqual(result, "<p>hi</p>")

    def test_output_is_deterministic(self):
        raw = _wrap(
            '<h1 id="h.a">Intro</h1><h2>Intro</h2>'
            '<p><a href="#h.a">up</a> <a href="https://docs.google.com/document/d/1ABC123/edit#heading=h.q">b</a></p>',
            head="<style>.lst-kix_x-0{list-style-type:decimal}</style>",
        )
        self.assertEqual(self.processor.process(raw), self.processor.process(raw))


class HeadingAnchorTests(unittest.TestCase):
    def setUp(self):
        self.processor = HtmlProcessor(make_registry())

    def test_all_heading_levels_get_ids(self):
        result = _parse(
            self.processor.process(
                _wrap(
                    "<h1>Main Title</h1><h2>Subtitle</h2><h3>Section</h3>"
                    "<h4>Subsection</h4><h5>Detail</h5><h6>Fine Print</h6>"
                )
            )
        )
        ids = [result.find(f"h{level}")["id"] for level in range(1, 7)]
        self.assertEqual(ids, ["main-title", "subtitle", "section", "subsection", "detail", "fine-print"])

    def test_original_ids_are_preserved_as_data_attribute(self):
        result = _parse(
            self.processor.process(
                _wrap('<h1 id="h.abc123">Article 1</h1><h2 id="h.def456">Section A</h2><h3>No Original ID</h3>')
            )
        )
        h1, h2, h3 = result.find("h1"), result.find("h2"), result.find("h3")
        self.assertEqual(h1["id"], "article-1")
        self.assertEqual(h1["data-original-id"], "h.abc123")
        self.assertEqual(h2["id"], "section-a")
        self.assertEqual(h2["data-original-id"], "h.def456")
        self.assertEqual(h3["id"], "no-original-id")
        self.assertIsNone(h3.get("data-original-id"))

    def test_special_characters_in_heading_text(self):
        result = _parse(
            self.processor.process(
                _wrap(
                    "<h1>Officers &amp; Board Members</h1><h2>President's Cup (2024)</h2>"
                    "<h3>Section 10.3 - Hall of Fame</h3>"
                )
            )
        )
        self.assertEqual(result.find("h1")["id"], "officers-board-members")
        self.assertEqual(result.find("h2")["id"], "president-s-cup-2024")
        self.assertEqual(result.find("h3")["id"], "section-10.3-hall-of-fame")

    def test_text_of_nested_spans_is_used(self):
        result = _parse(self.processor.process(_wrap('<h2 id="h.x"><span>Annual</span> <span>Meeting</span></h2>')))
        self.assertEqual(result.find("h2")["id"], "annual-meeting")

    def test_duplicate_heading_text_gets_numeric_suffix(self):
        result = _parse(self.processor.process(_wrap("<h2>Overview</h2><h2>Overview</h2><h2>Overview</h2>")))
        self.assertEqual([h["id"] for h in result.find_all("h2")], ["overview", "overview-2", "overview-3"])

    def test_heading_without_usable_text_keeps_no_id(self):
        result = _parse(self.processor.process(_wrap('<h1 id="h.stars">***</h1><h2>---</h2>')))
        h1, h2 = result.find("h1"), result.find("h2")
        self.assertIsNone(h1.get("id"))
        self.assertEqual(h1["data-original-id"], "h.stars")
        self.assertIsNone(h2.get("id"))


class LinkRewriteTests(unittest.TestCase):
    def setUp(self):
        self.processor = HtmlProcessor(make_registry())

    def test_registered_documents_become_routes(self):
        result = self.processor.process(
            _wrap(
                '<p><a href="https://docs.google.com/document/d/1ABC123/edit">Bylaws</a></p>'
                '<p><a href="https://docs.google.com/document/d/1DEF456/view">Rules</a></p>'
                '<p><a href="https://docs.google.com/document/d/1ABC123/preview">Again</a></p>'
            )
        )
        self.assertEqual(_hrefs(result), ["/about/bylaws", "/tournaments/rules", "/about/bylaws"])

    def test_heading_prefix_stripped_from_fragment(self):
        result = self.processor.process(
            _wrap(
                '<a href="https://docs.google.com/document/d/1ABC123/edit#heading=h.abc123">a</a>'
                '<a href="https://docs.google.com/document/d/1ABC123/edit#HEADING=h.abc123">b</a>'
                '<a href="https://docs.google.com/document/d/1ABC123/edit#h.xyz789">c</a>'
            )
        )
        self.assertEqual(_hrefs(result), ["/about/bylaws#h.abc123", "/about/bylaws#h.abc123", "/about/bylaws#h.xyz789"])

    def test_redirect_wrapped_links(self):
        result = self.processor.process(
            _wrap(
                '<a href="https://www.google.com/url?q=https://docs.google.com/document/d/1ABC123/edit&amp;sa=D&amp;source=editors">a</a>'
                '<a href="https://www.google.com/url?q=https://docs.google.com/document/d/1DEF456/edit%23heading%3Dh.xyz789&amp;sa=D">b</a>'
                '<a href="https://www.google.com/url?q=https://docs.google.com/document/u/0/d/1DEF456/edit&amp;sa=D">c</a>'
            )
        )
        self.assertEqual(_hrefs(result), ["/about/bylaws", "/tournaments/rules#h.xyz789", "/tournaments/rules"])

    def test_redirect_and_direct_links_produce_same_output(self):
        direct = self.processor.process(
            _wrap('<a href="https://docs.google.com/document/d/1DEF456/edit#heading=h.xyz789">Rules</a>')
        )
        wrapped = self.processor.process(
            _wrap(
                '<a href="https://www.google.com/url?q=https://docs.google.com/document/d/1DEF456/edit'
                '%23heading%3Dh.xyz789&amp;sa=D&amp;source=editors">Rules</a>'
            )
        )
        self.assertEqual(direct, wrapped)

    def test_unknown_and_unrelated_links_are_untouched(self):
        hrefs = [
            "https://docs.google.com/document/d/1UNKNOWN999/edit",
            "https://www.google.com/url?q=https://docs.google.com/document/d/1UNKNOWN999/edit&sa=D",
            "https://example.com",
            "/internal/page",
            "mailto:info@example.com",
            "tel:+15550100",
        ]
        body = "".join(f'<a href="{href.replace("&", "&amp;")}">x</a>' for href in hrefs)
        self.assertEqual(_hrefs(self.processor.process(_wrap(body))), hrefs)

    def test_links_without_href(self):
        result = self.processor.process(_wrap('<a>Link without href</a><a href="">Link with empty href</a>'))
        self.assertIn("Link without href", result)
        self.assertIn("Link with empty href", result)

    def test_fragment_links_follow_generated_ids(self):
        result = self.processor.process(
            _wrap(
                '<h1 id="h.abc123">Section 1</h1><p><a href="#h.abc123">one</a></p>'
                '<h2 id="h.xyz789">Annual Meeting</h2><p><a href="#heading=h.xyz789">two</a></p>'
                '<p><a href="#h.nonexistent">three</a></p>'
                '<p><a href="https://docs.google.com/document/d/1ABC123/edit#h.abc123">four</a></p>'
            )
        )
        self.assertEqual(_hrefs(result), ["#section-1", "#annual-meeting", "#h.nonexistent", "/about/bylaws#h.abc123"])

    def test_fragment_link_before_its_heading(self):
        result = self.processor.process(_wrap('<a href="#h.later">jump</a><h3 id="h.later">Later On</h3>'))
        self.assertEqual(_hrefs(result), ["#later-on"])


class ListStyleExtractionTests(unittest.TestCase):
    def setUp(self):
        self.processor = HtmlProcessor(make_registry())

    def test_list_styles_are_kept_and_others_dropped(self):
        head = (
            "<style>.lst-kix_abc123-0{list-style-type:lower-alpha}"
            ".lst-kix_abc123-1{list-style-type:lower-roman}"
            ".some-other-class{color:red}</style>"
        )
        result = self.processor.process(
            _wrap('<ol class="lst-kix_abc123-0"><li>First</li><li>Second</li></ol>', head=head)
        )
        self.assertTrue(result.startswith("<style>"))
        self.assertIn(".lst-kix_abc123-0{list-style-type:lower-alpha}", result)
        self.assertIn(".lst-kix_abc123-1{list-style-type:lower-roman}", result)
        self.assertNotIn("some-other-class", result)
        self.assertIn('<ol class="lst-kix_abc123-0">', result)

    def test_no_style_block_when_nothing_matches(self):
        result = self.processor.process(
            _wrap("<h1>Title</h1><p>Content</p>", head="<style>.some-class{color:blue}</style><style>  </style>")
        )
        self.assertNotIn("<style", result)
        self.assertIn("<p>Content</p>", result)

    def test_only_list_style_type_declarations_survive(self):
        head = (
            "<style>.lst-kix_def456-0{list-style-type:decimal}"
            ".lst-kix_def456-0{margin-left:20px}"
            ".lst-kix_ghi789-1{padding:10px}"
            ".not-a-list{list-style-type:disc}</style>"
        )
        result = self.processor.process(_wrap('<ol class="lst-kix_def456-0"><li>Item</li></ol>', head=head))
        self.assertIn(".lst-kix_def456-0{list-style-type:decimal}", result)
        self.assertNotIn("margin-left:20px", result)
        self.assertNotIn("padding:10px", result)
        self.assertNotIn(".not-a-list", result)

    def test_rules_from_several_blocks_are_merged_once(self):
        head = (
            "<style>.lst-kix_aaa-0{list-style-type:lower-alpha}</style>"
            "<style>.lst-kix_bbb-0{list-style-type:upper-alpha}"
            ".lst-kix_aaa-0{list-style-type:lower-alpha}</style>"
        )
        result = self.processor.process(_wrap("<p>x</p>", head=head))
        self.assertEqual(result.count("<style>"), 1)
        self.assertEqual(result.count(".lst-kix_aaa-0{list-style-type:lower-alpha}"), 1)
        self.assertIn(".lst-kix_bbb-0{list-style-type:upper-alpha}", result)

    def test_style_inside_body_is_filtered_too(self):
        result = self.processor.process(
            _wrap("<style>.c1{color:red}.lst-kix_z-0{list-style-type:square}</style><p>x</p>")
        )
        self.assertNotIn(".c1", result)
        self.assertIn(".lst-kix_z-0{list-style-type:square}", result)


class IntegrationTests(unittest.TestCase):
    def test_all_stages_together(self):
        processor = HtmlProcessor(make_registry())
        raw = _wrap(
            '<h1 id="h.abc123">Section 1</h1>'
            '<ol class="lst-kix_xyz-0"><li>First item</li></ol>'
            '<p>See <a href="#h.abc123">Section 1</a> above.</p>'
            '<p>Also see <a href="https://docs.google.com/document/d/1ABC123/edit">Bylaws</a>.</p>'
            '<p>Check <a href="https://example.com">external link</a>.</p>',
            head="<style>.lst-kix_xyz-0{list-style-type:lower-alpha}</style>",
        )
        result = processor.process(raw)
        doc = _parse(result)

        self.assertIn(".lst-kix_xyz-0{list-style-type:lower-alpha}", result)
        self.assertEqual(doc.find("h1")["id"], "section-1")
        self.assertEqual(doc.find("h1")["data-original-id"], "h.abc123")
        self.assertEqual(_hrefs(result), ["#section-1", "/about/bylaws", "https://example.com"])
