from dataclasses import dataclass, field

from .blocks import Reference


@dataclass(frozen=True)
class Heading:
    text: str
    level: int
    anchor: str


@dataclass(frozen=True)
class Paragraph:
    text: str


@dataclass(frozen=True)
class DocumentTable:
    number: int
    caption: str
    headers: list[str]
    rows: list[list[str]]
    anchor: str

    @property
    def label(self) -> str:
        return f"Table {self.number}. {self.caption}"


@dataclass(frozen=True)
class Figure:
    number: int
    caption: str
    anchor: str
    description: str = ""

    @property
    def label(self) -> str:
        return f"Figure {self.number}. {self.caption}"


@dataclass(frozen=True)
class ReferenceList:
    entries: list[Reference]


DocumentNode = Heading | Paragraph | DocumentTable | Figure | ReferenceList


@dataclass(frozen=True)
class Document:
    title: str
    nodes: list[DocumentNode] = field(default_factory=list)
    table_count: int = 0
    figure_count: int = 0

    def headings(self, level: int | None = None) -> list[Heading]:
        return [
            node
            for node in self.nodes
            if isinstance(node, Heading) and (level is None or node.level == level)
        ]

    def tables(self) -> list[DocumentTable]:
        return [node for node in self.nodes if isinstance(node, DocumentTable)]

    def figures(self) -> list[Figure]:
        return [node for node in self.nodes if isinstance(node, Figure)]
