"""
Flat-text editing of stored content.

Block documents are flattened to text for a plain editing surface and the
edited text is committed back as a single paragraph block. This round trip
is lossy on purpose: lists, tables, images and the split into several
blocks do not survive an edit.
"""
import json
import logging
from typing import Optional

from editor_content import config
from editor_content.detector import parse_structured
from editor_content.models import BlockType, HeaderBlock
from editor_content.renderer import load_document

logger = logging.getLogger(__name__)


def to_editable_text(content: Optional[str]) -> Optional[str]:
    document = load_document(content) if content else None
    if document is None:
        return content

    fragments = []
    for block in document.blocks:
        text = getattr(block.data, "text", None)
        if not text or not isinstance(text, str):
            continue
        if isinstance(block, HeaderBlock):
            text += "\n"
        fragments.append(text)

    return "\n\n".join(fragments)


def commit_edited_text(original: Optional[str], new_text: str) -> str:
    raw = parse_structured(original)
    if raw is None:
        return new_text

    dropped = len(raw["blocks"])
    committed = dict(raw)
    committed["blocks"] = [
        {"type": BlockType.PARAGRAPH.value, "data": {"text": new_text}}
    ]
    logger.debug(f"Collapsed {dropped} blocks into a single paragraph")

    return json.dumps(committed, ensure_ascii=False, indent=config.JSON_INDENT)
