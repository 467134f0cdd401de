from .assignment import TRANSITIONS, Assignment, AssignmentStatus
from .blocks import ContentBlock, ImagePlaceholder, Reference, TableData
from .brief import (
    BriefSnapshot,
    Criterion,
    Grade,
    LearningAim,
    StudentContext,
    Tier,
)
from .document import (
    Document,
    DocumentNode,
    DocumentTable,
    Figure,
    Heading,
    Paragraph,
    ReferenceList,
)
from .plan import (
    GenerationPlan,
    ImageRequirement,
    ItemKind,
    OutlineItem,
    TableRequirement,
)


__all__ = [
    "TRANSITIONS",
    "Assignment",
    "AssignmentStatus",
    "BriefSnapshot",
    "ContentBlock",
    "Criterion",
    "Document",
    "DocumentNode",
    "DocumentTable",
    "Figure",
    "GenerationPlan",
    "Grade",
    "Heading",
    "ImagePlaceholder",
    "ImageRequirement",
    "ItemKind",
    "LearningAim",
    "OutlineItem",
    "Paragraph",
    "Reference",
    "ReferenceList",
    "StudentContext",
    "TableData",
    "TableRequirement",
    "Tier",
]
