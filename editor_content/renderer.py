import html
import logging
from typing import Any, Dict, Optional, Union

from pydantic import ValidationError

from editor_content import config
from editor_content.detector import detect, parse_structured
from editor_content.models import (
    Block,
    ChecklistBlock,
    CodeBlock,
    ContentKind,
    EmbedBlock,
    HeaderBlock,
    ImageBlock,
    ListBlock,
    ParagraphBlock,
    QuoteBlock,
    StructuredDocument,
    TableBlock,
)

logger = logging.getLogger(__name__)

DocumentInput = Union[str, Dict[str, Any], StructuredDocument]


def load_document(doc: DocumentInput) -> Optional[StructuredDocument]:
    """Accepts a serialized document, a raw mapping or a model. None if it is not a block document."""
    if isinstance(doc, StructuredDocument):
        return doc

    if isinstance(doc, str):
        raw = parse_structured(doc)
    elif isinstance(doc, dict):
        raw = doc
    else:
        raw = None

    if raw is None:
        return None

    try:
        return StructuredDocument.from_mapping(raw)
    except ValidationError as e:
        logger.debug(f"Not a block document: {e.error_count()} errors")
        return None


class HtmlRenderer:
    """
    Renders a block document to an HTML fragment.

    With `escape` on (the default, see config.ESCAPE_HTML) every text value
    is HTML-escaped before insertion. With it off, text goes in verbatim,
    which is how editor output has historically been displayed: inline
    markup such as <b> inside paragraph text is kept as markup.
    """

    def __init__(self, escape: Optional[bool] = None):
        self.escape = config.ESCAPE_HTML if escape is None else escape

    def render(self, doc: DocumentInput) -> str:
        document = load_document(doc)
        if document is None:
            return ""
        return "".join(self._render_block(block) for block in document.blocks)

    def _text(self, value: str) -> str:
        if not value:
            return ""
        return html.escape(value) if self.escape else value

    def _render_block(self, block: Block) -> str:
        data = block.data

        if isinstance(block, HeaderBlock):
            return f"<h{data.level}>{self._text(data.text)}</h{data.level}>"

        elif isinstance(block, ParagraphBlock):
            return f"<p>{self._text(data.text)}</p>"

        elif isinstance(block, ListBlock):
            tag = "ol" if data.ordered else "ul"
            items = "".join(f"<li>{self._text(item)}</li>" for item in data.items)
            return f"<{tag}>{items}</{tag}>"

        elif isinstance(block, TableBlock):
            return self._render_table(block)

        elif isinstance(block, QuoteBlock):
            citation = f"<cite>{self._text(data.caption)}</cite>" if data.caption else ""
            return f"<blockquote>{self._text(data.text)}{citation}</blockquote>"

        elif isinstance(block, CodeBlock):
            return f"<pre><code>{self._text(data.code)}</code></pre>"

        elif isinstance(block, ImageBlock):
            caption = f"<figcaption>{self._text(data.caption)}</figcaption>" if data.caption else ""
            alt = data.caption or "Image"
            return f'<figure><img src="{self._text(data.src)}" alt="{self._text(alt)}"/>{caption}</figure>'

        elif isinstance(block, ChecklistBlock):
            items = "".join(
                f'<li class="{"checked" if item.checked else ""}">{self._text(item.text)}</li>'
                for item in data.items
            )
            return f'<ul class="checklist">{items}</ul>'

        elif isinstance(block, EmbedBlock):
            return f'<div class="embed">{self._text(data.embed)}</div>'

        # Unknown kinds: keep any free-standing text
        if data.text:
            return f"<p>{self._text(data.text)}</p>"
        return ""

    def _render_table(self, block: TableBlock) -> str:
        rows = []
        for row_index, row in enumerate(block.data.content):
            cell_tag = "th" if block.data.with_headings and row_index == 0 else "td"
            cells = "".join(f"<{cell_tag}>{self._text(cell)}</{cell_tag}>" for cell in row)
            rows.append(f"<tr>{cells}</tr>")
        return f"<table>{''.join(rows)}</table>"


def render_html(doc: DocumentInput, escape: Optional[bool] = None) -> str:
    return HtmlRenderer(escape=escape).render(doc)


def process_content(content: Optional[str], escape: Optional[bool] = None) -> str:
    """
    Display entry point: block documents become HTML, everything else is
    returned as stored.
    """
    kind = detect(content)
    if kind is ContentKind.EMPTY:
        return ""
    if kind is ContentKind.STRUCTURED:
        return render_html(content, escape=escape)
    return content
