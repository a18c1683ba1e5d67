import unittest
import json
import logging
from unittest.mock import patch

from editor_content.models import StructuredDocument
from editor_content.renderer import HtmlRenderer, load_document, process_content, render_html

# Configure logging
logging.basicConfig(level=logging.INFO)


def _doc(*blocks, **extra):
    return json.dumps({"blocks": list(blocks), **extra})


class TestRenderHtmlParity(unittest.TestCase):
    """Verbatim output, matching how editor content has always been displayed."""

    def render(self, content):
        return render_html(content, escape=False)

    def test_header(self):
        content = '{"blocks":[{"type":"header","data":{"text":"Hello","level":1}}]}'
        self.assertEqual(self.render(content), "<h1>Hello</h1>")

    def test_header_level_defaults(self):
        self.assertEqual(self.render(_doc({"type": "header", "data": {"text": "x"}})), "<h2>x</h2>")
        self.assertEqual(self.render(_doc({"type": "header", "data": {"text": "x", "level": 9}})), "<h2>x</h2>")
        self.assertEqual(self.render(_doc({"type": "header", "data": {"text": "x", "level": "3"}})), "<h3>x</h3>")

    def test_paragraph(self):
        self.assertEqual(self.render(_doc({"type": "paragraph", "data": {"text": "A"}})), "<p>A</p>")
        self.assertEqual(self.render(_doc({"type": "paragraph", "data": {}})), "<p></p>")

    def test_inline_markup_kept(self):
        content = _doc({"type": "paragraph", "data": {"text": "<b>bold</b>"}})
        self.assertEqual(self.render(content), "<p><b>bold</b></p>")

    def test_ordered_list(self):
        content = '{"blocks":[{"type":"list","data":{"style":"ordered","items":["a","b"]}}]}'
        self.assertEqual(self.render(content), "<ol><li>a</li><li>b</li></ol>")

    def test_unordered_list(self):
        content = _doc({"type": "list", "data": {"items": ["a"]}})
        self.assertEqual(self.render(content), "<ul><li>a</li></ul>")

    def test_nested_list_items(self):
        content = _doc({"type": "list", "data": {"style": "unordered", "items": [{"content": "a", "items": []}]}})
        self.assertEqual(self.render(content), "<ul><li>a</li></ul>")

    def test_table_with_headings(self):
        content = _doc({"type": "table", "data": {"withHeadings": True, "content": [["A", "B"], ["1", "2"]]}})
        self.assertEqual(
            self.render(content),
            "<table><tr><th>A</th><th>B</th></tr><tr><td>1</td><td>2</td></tr></table>"
        )

    def test_table_without_headings(self):
        content = _doc({"type": "table", "data": {"content": [["A"], ["1"]]}})
        self.assertEqual(self.render(content), "<table><tr><td>A</td></tr><tr><td>1</td></tr></table>")

    def test_quote(self):
        content = '{"blocks":[{"type":"quote","data":{"text":"Q","caption":"Author"}}]}'
        self.assertEqual(self.render(content), "<blockquote>Q<cite>Author</cite></blockquote>")
        content = _doc({"type": "quote", "data": {"text": "Q"}})
        self.assertEqual(self.render(content), "<blockquote>Q</blockquote>")

    def test_code(self):
        content = _doc({"type": "code", "data": {"code": "x = 1"}})
        self.assertEqual(self.render(content), "<pre><code>x = 1</code></pre>")

    def test_image(self):
        content = _doc({"type": "image", "data": {"file": {"url": "http://x/a.png"}, "url": "http://x/old.png", "caption": "Logo"}})
        self.assertEqual(
            self.render(content),
            '<figure><img src="http://x/a.png" alt="Logo"/><figcaption>Logo</figcaption></figure>'
        )
        content = _doc({"type": "image", "data": {"url": "http://x/b.png"}})
        self.assertEqual(self.render(content), '<figure><img src="http://x/b.png" alt="Image"/></figure>')

    def test_checklist(self):
        content = _doc({"type": "checklist", "data": {"items": [{"text": "a", "checked": True}, {"text": "b"}]}})
        self.assertEqual(self.render(content), '<ul class="checklist"><li class="checked">a</li><li class="">b</li></ul>')

    def test_embed(self):
        content = _doc({"type": "embed", "data": {"embed": "https://example.com/v/1"}})
        self.assertEqual(self.render(content), '<div class="embed">https://example.com/v/1</div>')

    def test_unknown_kind(self):
        self.assertEqual(self.render(_doc({"type": "warning", "data": {"text": "careful"}})), "<p>careful</p>")
        self.assertEqual(self.render(_doc({"type": "delimiter", "data": {}})), "")

    def test_known_kind_with_bad_data_falls_back(self):
        self.assertEqual(self.render(_doc({"type": "list", "data": {"items": "oops", "text": "t"}})), "<p>t</p>")
        self.assertEqual(self.render(_doc({"type": "paragraph", "data": {"text": ["a"]}})), "")

    def test_ill_typed_optional_fields_use_defaults(self):
        content = _doc({"type": "list", "data": {"style": 1, "items": ["a"]}})
        self.assertEqual(self.render(content), "<ul><li>a</li></ul>")

        content = _doc({"type": "image", "data": {"file": "x", "url": "http://u/a.png"}})
        self.assertEqual(self.render(content), '<figure><img src="http://u/a.png" alt="Image"/></figure>')

        content = _doc({"type": "quote", "data": {"text": "Q", "caption": True}})
        self.assertEqual(self.render(content), "<blockquote>Q</blockquote>")

        content = _doc({"type": "image", "data": {"url": "u", "caption": ["c"]}})
        self.assertEqual(self.render(content), '<figure><img src="u" alt="Image"/></figure>')

    def test_blocks_in_order(self):
        content = _doc(
            {"type": "header", "data": {"text": "T", "level": 2}},
            {"type": "paragraph", "data": {"text": "A"}},
            {"type": "code", "data": {"code": "c"}},
        )
        self.assertEqual(self.render(content), "<h2>T</h2><p>A</p><pre><code>c</code></pre>")


class TestRenderTotality(unittest.TestCase):

    def test_missing_type_or_data(self):
        content = _doc(
            {"data": {"text": "no type"}},
            {"type": "paragraph"},
            {"type": "paragraph", "data": "not a mapping"},
            "not a block",
            {"type": "paragraph", "data": {"text": "kept"}},
        )
        self.assertEqual(render_html(content, escape=False), "<p>kept</p>")

    def test_invalid_documents(self):
        self.assertEqual(render_html('{"title": "no blocks"}'), "")
        self.assertEqual(render_html('{"blocks": [}'), "")
        self.assertEqual(render_html("<p>html</p>"), "")
        self.assertEqual(render_html({"blocks": "nope"}), "")
        self.assertEqual(render_html(None), "")

    def test_deterministic(self):
        content = _doc(
            {"type": "table", "data": {"withHeadings": True, "content": [["A"], ["1"]]}},
            {"type": "image", "data": {"url": "u", "caption": "c"}},
        )
        self.assertEqual(render_html(content), render_html(content))

    def test_accepts_mapping_and_model(self):
        raw = {"blocks": [{"type": "paragraph", "data": {"text": "A"}}]}
        self.assertEqual(render_html(raw, escape=False), "<p>A</p>")
        self.assertEqual(render_html(StructuredDocument.from_mapping(raw), escape=False), "<p>A</p>")

    def test_load_document_keeps_extra_fields(self):
        document = load_document(_doc(version="2.28.0"))
        self.assertEqual(document.to_dict(), {"blocks": [], "version": "2.28.0"})


class TestRenderHtmlEscaping(unittest.TestCase):
    """Escaping block text is a deliberate change from verbatim output."""

    def test_text_is_escaped(self):
        content = _doc({"type": "paragraph", "data": {"text": "<script>alert(1)</script>"}})
        self.assertEqual(render_html(content, escape=True), "<p>&lt;script&gt;alert(1)&lt;/script&gt;</p>")

    def test_attributes_are_escaped(self):
        content = _doc({"type": "image", "data": {"url": 'a"onerror="x', "caption": "A & B"}})
        self.assertEqual(
            render_html(content, escape=True),
            '<figure><img src="a&quot;onerror=&quot;x" alt="A &amp; B"/><figcaption>A &amp; B</figcaption></figure>'
        )

    def test_single_quote_is_escaped(self):
        content = _doc({"type": "paragraph", "data": {"text": "it's"}})
        self.assertEqual(render_html(content, escape=True), "<p>it&#x27;s</p>")

    def test_code_is_escaped(self):
        content = _doc({"type": "code", "data": {"code": "if a < b && c:"}})
        self.assertEqual(render_html(content, escape=True), "<pre><code>if a &lt; b &amp;&amp; c:</code></pre>")

    def test_default_follows_config(self):
        content = _doc({"type": "paragraph", "data": {"text": "<b>x</b>"}})
        with patch("editor_content.config.ESCAPE_HTML", False):
            self.assertEqual(HtmlRenderer().render(content), "<p><b>x</b></p>")
        with patch("editor_content.config.ESCAPE_HTML", True):
            self.assertEqual(HtmlRenderer().render(content), "<p>&lt;b&gt;x&lt;/b&gt;</p>")


class TestProcessContent(unittest.TestCase):

    def test_empty(self):
        self.assertEqual(process_content(""), "")
        self.assertEqual(process_content(None), "")

    def test_passthrough(self):
        self.assertEqual(process_content("<p>hi</p>"), "<p>hi</p>")
        self.assertEqual(process_content("plain text"), "plain text")
        self.assertEqual(process_content('{"title": "x"}'), '{"title": "x"}')

    def test_structured(self):
        content = _doc({"type": "paragraph", "data": {"text": "A"}})
        self.assertEqual(process_content(content, escape=False), "<p>A</p>")


if __name__ == "__main__":
    unittest.main()
