from enum import Enum
from dataclasses import dataclass, field

from .brief import Criterion, LearningAim, Tier


class ItemKind(Enum):
    INTRODUCTION = "INTRODUCTION"
    LEARNING_AIM = "LEARNING_AIM"
    CRITERION = "CRITERION"
    CONCLUSION = "CONCLUSION"
    REFERENCES = "REFERENCES"


@dataclass(frozen=True)
class OutlineItem:
    kind: ItemKind
    title: str
    aim_code: str | None = None
    criterion_code: str | None = None
    criterion_description: str | None = None
    tier: Tier | None = None

    @property
    def criterion_ref(self) -> str | None:
        if self.kind != ItemKind.CRITERION:
            return None
        return f"{self.aim_code}.{self.criterion_code}"

    @property
    def item_id(self) -> str:
        if self.kind == ItemKind.LEARNING_AIM:
            return f"aim_{self.aim_code}"
        if self.kind == ItemKind.CRITERION:
            return f"criterion_{self.criterion_ref}"
        return self.kind.value.lower()

    @classmethod
    def introduction(cls) -> "OutlineItem":
        return cls(kind=ItemKind.INTRODUCTION, title="Introduction")

    @classmethod
    def learning_aim(cls, aim: LearningAim) -> "OutlineItem":
        return cls(kind=ItemKind.LEARNING_AIM, title=aim.heading, aim_code=aim.code)

    @classmethod
    def criterion(cls, criterion: Criterion) -> "OutlineItem":
        return cls(
            kind=ItemKind.CRITERION,
            title=f"{criterion.code}: {criterion.description}",
            aim_code=criterion.aim,
            criterion_code=criterion.code,
            criterion_description=criterion.description,
            tier=criterion.tier,
        )

    @classmethod
    def conclusion(cls) -> "OutlineItem":
        return cls(kind=ItemKind.CONCLUSION, title="Conclusion")

    @classmethod
    def references(cls) -> "OutlineItem":
        return cls(kind=ItemKind.REFERENCES, title="References")


@dataclass(frozen=True)
class TableRequirement:
    criterion_ref: str
    title: str


@dataclass(frozen=True)
class ImageRequirement:
    criterion_ref: str
    caption: str
    sequence: int


@dataclass(frozen=True)
class GenerationPlan:
    items: list[OutlineItem]
    tables: list[TableRequirement] = field(default_factory=list)
    images: list[ImageRequirement] = field(default_factory=list)
    planner_tokens: int = 0
    source: str = "model"

    def table_for(self, criterion_ref: str) -> TableRequirement | None:
        for requirement in self.tables:
            if requirement.criterion_ref == criterion_ref:
                return requirement
        return None

    def image_for(self, criterion_ref: str) -> ImageRequirement | None:
        for requirement in self.images:
            if requirement.criterion_ref == criterion_ref:
                return requirement
        return None
