import json
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError

from briefwriter.core.errors import AugmentationError
from briefwriter.llm import CompletionAdapter, CompletionOptions, CompletionResult
from briefwriter.models import (
    BriefSnapshot,
    Criterion,
    ImagePlaceholder,
    ImageRequirement,
    TableData,
    TableRequirement,
)
from briefwriter.models.contracts import TableResponse
from briefwriter.utils.json_utils import loads_lenient
from briefwriter.utils.logger import logger

DEFAULT_HEADERS = ["Aspect", "Description", "Application"]

# Declared student inputs that seed table rows, in prompt order
PROJECT_FACTS = [
    ("toolsUsed", "TOOLS/TECHNOLOGIES USED BY STUDENT"),
    ("featuresImplemented", "FEATURES IMPLEMENTED"),
    ("dataSources", "DATA SOURCES USED"),
    ("testingMethods", "TESTING METHODS"),
    ("projectDescription", "PROJECT DESCRIPTION"),
]


@dataclass(frozen=True)
class Augmentation:
    payload: TableData | ImagePlaceholder
    tokens_used: int = 0


def default_table(criterion: Criterion, title: str) -> TableData:
    return TableData(
        caption=title or f"Analysis for {criterion.code}",
        headers=list(DEFAULT_HEADERS),
        rows=[
            [f"Key Concept {n}", "Definition of this concept", "How it applies to the scenario"]
            for n in range(1, 4)
        ],
    )


def build_table_prompt(snapshot: BriefSnapshot, criterion: Criterion, title: str) -> str:
    facts = []
    if snapshot.student is not None:
        for key, label in PROJECT_FACTS:
            value = snapshot.student.get_input(key)
            if isinstance(value, list):
                value = ", ".join(str(v) for v in value)
            if value:
                facts.append(f"{label}: {value}")

    return f"""Generate a TABLE for a BTEC assignment criterion based on the STUDENT'S ACTUAL PROJECT.

CRITERION: {criterion.code}
DESCRIPTION: {criterion.description}
TABLE TITLE: {title}
UNIT: {snapshot.unit_name}
SCENARIO: {snapshot.scenario}
{chr(10).join(facts)}

REQUIREMENTS:
- 3-5 columns
- 3-5 rows of data based on the student's ACTUAL tools, features and data
- Clear academic headers
- The table is evidence of what the STUDENT actually did

Output as JSON:
{{
  "caption": "Table title describing what this table shows",
  "headers": ["Column1", "Column2", "Column3"],
  "rows": [["Data 1.1", "Data 1.2", "Data 1.3"]]
}}

Generate the table now. Output ONLY the JSON."""


class Augmenter:
    """Builds the table or image that a plan requirement attaches to a criterion.

    Never raises to the caller: a table that cannot be produced is replaced
    by a generic three-row template.
    """

    def __init__(self, llm_client: CompletionAdapter, config: dict[str, Any] | None = None):
        config = config or {}
        self.llm_client = llm_client
        self.temperature = config.get("temperature", 0.7)
        self.max_tokens = config.get("max_tokens", 800)

    def augment(
        self,
        snapshot: BriefSnapshot,
        criterion: Criterion,
        requirement: TableRequirement | ImageRequirement,
        seed: int | None = None,
    ) -> Augmentation:
        if isinstance(requirement, ImageRequirement):
            return Augmentation(self.build_image(criterion, requirement))
        return self.build_table(snapshot, criterion, requirement, seed)

    def build_table(
        self,
        snapshot: BriefSnapshot,
        criterion: Criterion,
        requirement: TableRequirement,
        seed: int | None = None,
    ) -> Augmentation:
        logger.info(f"Generating table for criterion {criterion.ref}")
        tokens = 0

        try:
            result = self._request_table(snapshot, criterion, requirement, seed)
            tokens = result.total_tokens
            if not result.ok:
                raise AugmentationError(f"{result.kind.value}: {result.message}")
            table = self._parse_table(result.text, requirement.title or f"Analysis for {criterion.code}")
        except AugmentationError as e:
            logger.warning(f"Table for {criterion.ref} replaced with default: {e}")
            table = default_table(criterion, requirement.title)

        return Augmentation(table, tokens)

    def _request_table(
        self, snapshot: BriefSnapshot, criterion: Criterion, requirement: TableRequirement, seed: int | None
    ) -> CompletionResult:
        try:
            return self.llm_client.complete(
                build_table_prompt(snapshot, criterion, requirement.title),
                CompletionOptions(
                    temperature=self.temperature,
                    max_tokens=self.max_tokens,
                    seed=seed,
                    json_mode=True,
                ),
            )
        except Exception as e:
            raise AugmentationError(f"table request raised {type(e).__name__}: {e}") from e

    def build_image(self, criterion: Criterion, requirement: ImageRequirement) -> ImagePlaceholder:
        return ImagePlaceholder(
            caption=requirement.caption,
            sequence=requirement.sequence,
            description=f"Placeholder illustrating {criterion.description}",
        )

    def _parse_table(self, text: str, fallback_caption: str) -> TableData:
        try:
            data = loads_lenient(text)
            parsed = TableResponse.model_validate(data)
        except (json.JSONDecodeError, ValidationError) as e:
            raise AugmentationError(f"malformed table output: {e}") from e

        width = len(parsed.headers)
        rows = [
            ["" if cell is None else str(cell) for cell in (row + [""] * width)[:width]] for row in parsed.rows
        ]
        return TableData(
            caption=parsed.caption.strip() or fallback_caption,
            headers=[str(h) for h in parsed.headers],
            rows=rows,
        )
