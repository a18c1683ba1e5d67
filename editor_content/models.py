import json
import logging
from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, TypeAdapter, ValidationError, field_validator

logger = logging.getLogger(__name__)


class ContentKind(str, Enum):
    HTML = "html"
    STRUCTURED = "structured"
    PLAIN_TEXT = "plain_text"
    EMPTY = "empty"


class BlockType(Enum):
    HEADER = "header"
    PARAGRAPH = "paragraph"
    LIST = "list"
    TABLE = "table"
    QUOTE = "quote"
    CODE = "code"
    IMAGE = "image"
    CHECKLIST = "checklist"
    EMBED = "embed"
    UNKNOWN = "unknown"


def _as_text(value: Any) -> Any:
    # Editor output uses null for "no text" and occasionally bare numbers
    if value is None:
        return ""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


Text = Annotated[str, BeforeValidator(_as_text)]


def _text_or_empty(value: Any) -> str:
    # Optional decoration (captions, urls): an ill-typed value is dropped, not fatal
    value = _as_text(value)
    return value if isinstance(value, str) else ""


OptionalText = Annotated[str, BeforeValidator(_text_or_empty)]


class BlockData(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)


class HeaderData(BlockData):
    text: Text = ""
    level: int = Field(default=2, description="Heading level, 1-6")

    @field_validator("level", mode="before")
    @classmethod
    def _level_or_default(cls, value: Any) -> int:
        try:
            level = int(value)
        except (TypeError, ValueError, OverflowError):
            return 2
        return level if 1 <= level <= 6 else 2


class ParagraphData(BlockData):
    text: Text = ""


class ListData(BlockData):
    style: Optional[str] = None
    items: List[Text] = Field(default_factory=list)

    @field_validator("items", mode="before")
    @classmethod
    def _flatten_items(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, list):
            # Nested-list editor output stores items as {"content": ..., "items": [...]}
            return [item.get("content", "") if isinstance(item, dict) else item for item in value]
        return value

    @field_validator("style", mode="before")
    @classmethod
    def _style_or_default(cls, value: Any) -> Optional[str]:
        # Anything but a string renders as an unordered list
        return value if isinstance(value, str) else None

    @property
    def ordered(self) -> bool:
        return self.style == "ordered"


class TableData(BlockData):
    content: List[List[Text]] = Field(default_factory=list)
    with_headings: bool = Field(default=False, alias="withHeadings")

    @field_validator("content", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("with_headings", mode="before")
    @classmethod
    def _truthy(cls, value: Any) -> bool:
        return bool(value)


class QuoteData(BlockData):
    text: Text = ""
    caption: OptionalText = ""


class CodeData(BlockData):
    code: Text = ""


class ImageFile(BlockData):
    url: OptionalText = ""


class ImageData(BlockData):
    url: OptionalText = ""
    file: Optional[ImageFile] = None
    caption: OptionalText = ""

    @field_validator("file", mode="before")
    @classmethod
    def _file_or_none(cls, value: Any) -> Any:
        # A non-object `file` is ignored so `url` can still be used
        if isinstance(value, (dict, ImageFile)):
            return value
        return None

    @property
    def src(self) -> str:
        if self.file and self.file.url:
            return self.file.url
        return self.url


class ChecklistItem(BlockData):
    text: Text = ""
    checked: bool = False

    @field_validator("checked", mode="before")
    @classmethod
    def _truthy(cls, value: Any) -> bool:
        return bool(value)


class ChecklistData(BlockData):
    items: List[ChecklistItem] = Field(default_factory=list)

    @field_validator("items", mode="before")
    @classmethod
    def _coerce_items(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, list):
            return [{"text": item} if isinstance(item, str) else item for item in value]
        return value


class EmbedData(BlockData):
    embed: Text = ""


class UnknownData(BlockData):
    text: str = ""


class HeaderBlock(BaseModel):
    model_config = ConfigDict(extra="allow")
    type: Literal["header"] = "header"
    data: HeaderData = Field(default_factory=HeaderData)


class ParagraphBlock(BaseModel):
    model_config = ConfigDict(extra="allow")
    type: Literal["paragraph"] = "paragraph"
    data: ParagraphData = Field(default_factory=ParagraphData)


class ListBlock(BaseModel):
    model_config = ConfigDict(extra="allow")
    type: Literal["list"] = "list"
    data: ListData = Field(default_factory=ListData)


class TableBlock(BaseModel):
    model_config = ConfigDict(extra="allow")
    type: Literal["table"] = "table"
    data: TableData = Field(default_factory=TableData)


class QuoteBlock(BaseModel):
    model_config = ConfigDict(extra="allow")
    type: Literal["quote"] = "quote"
    data: QuoteData = Field(default_factory=QuoteData)


class CodeBlock(BaseModel):
    model_config = ConfigDict(extra="allow")
    type: Literal["code"] = "code"
    data: CodeData = Field(default_factory=CodeData)


class ImageBlock(BaseModel):
    model_config = ConfigDict(extra="allow")
    type: Literal["image"] = "image"
    data: ImageData = Field(default_factory=ImageData)


class ChecklistBlock(BaseModel):
    model_config = ConfigDict(extra="allow")
    type: Literal["checklist"] = "checklist"
    data: ChecklistData = Field(default_factory=ChecklistData)


class EmbedBlock(BaseModel):
    model_config = ConfigDict(extra="allow")
    type: Literal["embed"] = "embed"
    data: EmbedData = Field(default_factory=EmbedData)


class UnknownBlock(BaseModel):
    """Any block kind this package does not model. Only a free-standing `text` is kept."""
    type: str = "unknown"
    data: UnknownData = Field(default_factory=UnknownData)


KnownBlock = Annotated[
    Union[
        HeaderBlock,
        ParagraphBlock,
        ListBlock,
        TableBlock,
        QuoteBlock,
        CodeBlock,
        ImageBlock,
        ChecklistBlock,
        EmbedBlock,
    ],
    Field(discriminator="type"),
]

Block = Union[
    HeaderBlock,
    ParagraphBlock,
    ListBlock,
    TableBlock,
    QuoteBlock,
    CodeBlock,
    ImageBlock,
    ChecklistBlock,
    EmbedBlock,
    UnknownBlock,
]

_known_block_adapter = TypeAdapter(KnownBlock)
_KNOWN_TYPES = {t.value for t in BlockType if t is not BlockType.UNKNOWN}


def parse_block(raw: Any) -> Optional[Block]:
    """
    Turn one raw block mapping into its typed variant.

    Returns None when the block has no `type` or no `data` mapping; such blocks
    contribute nothing. Ill-typed optional fields (style, captions, urls) fall
    back to their defaults. A known kind whose content fields do not fit its
    model is downgraded to an UnknownBlock so that its `text` (if any) still shows.
    """
    if isinstance(raw, BaseModel):
        return raw
    if not isinstance(raw, dict):
        return None

    block_type = raw.get("type")
    data = raw.get("data")
    if not block_type or not isinstance(block_type, str) or not isinstance(data, dict):
        return None

    if block_type in _KNOWN_TYPES:
        try:
            return _known_block_adapter.validate_python(raw)
        except ValidationError as e:
            logger.debug(f"Block of type '{block_type}' has unexpected data, treating as unknown: {e.error_count()} errors")

    text = data.get("text")
    return UnknownBlock(type=block_type, data=UnknownData(text=text if isinstance(text, str) else ""))


class StructuredDocument(BaseModel):
    """
    Block-based rich-text document: an ordered `blocks` list plus any
    top-level fields (`time`, `version`, ...) carried through untouched.
    """
    model_config = ConfigDict(extra="allow")

    blocks: List[Block] = Field(default_factory=list, description="Blocks in reading order")

    @field_validator("blocks", mode="before")
    @classmethod
    def _parse_blocks(cls, value: Any) -> List[Block]:
        if not isinstance(value, list):
            raise ValueError("blocks must be a list")
        parsed = []
        for raw in value:
            block = parse_block(raw)
            if block is None:
                logger.debug("Skipping block without type or data")
                continue
            parsed.append(block)
        return parsed

    @classmethod
    def from_mapping(cls, raw: Dict[str, Any]) -> "StructuredDocument":
        return cls.model_validate(raw)

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)

    def to_json(self, indent: Optional[int] = None) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=indent)
