from dataclasses import dataclass, field

from .plan import ItemKind


@dataclass(frozen=True)
class TableData:
    caption: str
    headers: list[str]
    rows: list[list[str]]


@dataclass(frozen=True)
class ImagePlaceholder:
    caption: str
    sequence: int
    description: str = ""


@dataclass(frozen=True)
class Reference:
    text: str
    order: int


@dataclass(frozen=True)
class ContentBlock:
    block_order: int
    item_id: str
    kind: ItemKind
    title: str
    aim_code: str | None = None
    criterion_code: str | None = None
    content: str = ""
    table: TableData | None = None
    image: ImagePlaceholder | None = None
    references: list[Reference] = field(default_factory=list)
    tokens_used: int = 0
    generated_at: str | None = None
