import html
import logging
from typing import List, Optional

from lxml import etree
from lxml import html as lxml_html

from editor_content.models import (
    Block,
    EmbedBlock,
    EmbedData,
    HeaderBlock,
    HeaderData,
    ListBlock,
    ListData,
    ParagraphBlock,
    ParagraphData,
    QuoteBlock,
    QuoteData,
    StructuredDocument,
    TableBlock,
    TableData,
)

logger = logging.getLogger(__name__)

HEADING_LEVELS = {f"h{level}": level for level in range(1, 7)}


def _tag(element: etree._Element) -> Optional[str]:
    # Comments and processing instructions have a non-string tag
    if not isinstance(element.tag, str):
        return None
    return element.tag.lower()


def inner_html(element: etree._Element) -> str:
    parts = [html.escape(element.text, quote=False) if element.text else ""]
    for child in element:
        parts.append(etree.tostring(child, method="html", encoding="unicode", with_tail=True))
    return "".join(parts)


def outer_html(element: etree._Element) -> str:
    return etree.tostring(element, method="html", encoding="unicode", with_tail=False)


def _paragraph(text: str) -> ParagraphBlock:
    return ParagraphBlock(data=ParagraphData(text=text))


def _table_block(element: etree._Element) -> Optional[TableBlock]:
    rows = []
    first_row_is_heading = False
    for row in element.iter("tr"):
        cells = list(row.iter("td", "th"))
        if not cells:
            continue
        if not rows:
            first_row_is_heading = all(cell.tag == "th" for cell in cells)
        rows.append([inner_html(cell) for cell in cells])

    if not rows:
        return None
    return TableBlock(data=TableData(content=rows, with_headings=first_row_is_heading))


def element_to_block(element: etree._Element) -> Optional[Block]:
    tag = _tag(element)
    if tag is None:
        return None

    if tag in HEADING_LEVELS:
        return HeaderBlock(data=HeaderData(text=inner_html(element), level=HEADING_LEVELS[tag]))

    if tag == "p":
        return _paragraph(inner_html(element))

    if tag in ("ul", "ol"):
        items = [inner_html(li) for li in element.iter("li")]
        return ListBlock(data=ListData(style="ordered" if tag == "ol" else "unordered", items=items))

    if tag == "blockquote":
        return QuoteBlock(data=QuoteData(text=inner_html(element), caption=""))

    if tag == "table":
        return _table_block(element)

    if tag == "div" and "embed" in (element.get("class") or "").split():
        return EmbedBlock(data=EmbedData(embed=inner_html(element)))

    return _paragraph(outer_html(element))


def html_to_document(markup: Optional[str]) -> StructuredDocument:
    """
    Convert an HTML fragment into a block document, one block per top-level element.

    Anything that cannot be mapped ends up as a paragraph holding the original
    markup, so no content is lost on import.
    """
    if not markup or not markup.strip():
        return StructuredDocument(blocks=[])

    try:
        fragments = lxml_html.fragments_fromstring(markup)
    except (etree.ParserError, ValueError, AssertionError) as e:
        # lxml asserts on inputs that produce more than one <body>
        logger.debug(f"Could not parse HTML fragment, keeping it as one paragraph: {e}")
        return StructuredDocument(blocks=[_paragraph(markup)])

    blocks: List[Block] = []
    for fragment in fragments:
        if isinstance(fragment, str):
            if fragment.strip():
                blocks.append(_paragraph(html.escape(fragment.strip(), quote=False)))
            continue

        block = element_to_block(fragment)
        if block is not None:
            blocks.append(block)

        if fragment.tail and fragment.tail.strip():
            blocks.append(_paragraph(html.escape(fragment.tail.strip(), quote=False)))

    if not blocks:
        blocks.append(_paragraph(markup))

    return StructuredDocument(blocks=blocks)
