"""
Classifies stored content strings as structured documents, HTML, plain text or empty.
"""
import json
import logging
from typing import Any, Dict, Optional

from jsonschema import validate, ValidationError

from editor_content.models import ContentKind

logger = logging.getLogger(__name__)

# Only the document envelope is checked here; block shapes are handled by the models
DOCUMENT_SCHEMA = {
    "type": "object",
    "properties": {
        "blocks": {"type": "array"}
    },
    "required": ["blocks"]
}


def parse_structured(content: Optional[str]) -> Optional[Dict[str, Any]]:
    """
    Returns the parsed document mapping if `content` is a structured document,
    otherwise None. Never raises.
    """
    if not content or not isinstance(content, str):
        return None

    trimmed = content.strip()
    # Cheap pre-filter before paying for a parse
    if not (trimmed.startswith("{") and trimmed.endswith("}")):
        return None

    try:
        parsed = json.loads(trimmed)
    except (ValueError, RecursionError) as e:
        logger.debug(f"Content looks like JSON but does not parse: {e}")
        return None

    try:
        validate(instance=parsed, schema=DOCUMENT_SCHEMA)
    except ValidationError as e:
        logger.debug(f"JSON content is not a block document: {e.message}")
        return None

    return parsed


def is_structured(content: Optional[str]) -> bool:
    return parse_structured(content) is not None


def detect(content: Optional[str]) -> ContentKind:
    if not content:
        return ContentKind.EMPTY

    if is_structured(content):
        return ContentKind.STRUCTURED

    if "<" in content and ">" in content:
        return ContentKind.HTML

    return ContentKind.PLAIN_TEXT
