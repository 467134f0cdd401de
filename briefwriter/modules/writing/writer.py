import json
import zlib
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from pydantic import ValidationError

from briefwriter.core.errors import ProviderError
from briefwriter.llm import CompletionAdapter, CompletionOk, CompletionOptions
from briefwriter.models import (
    BriefSnapshot,
    ContentBlock,
    GenerationPlan,
    ImagePlaceholder,
    ItemKind,
    OutlineItem,
    Reference,
    TableData,
)
from briefwriter.models.contracts import ReferencesResponse
from briefwriter.modules.augmentation import Augmenter
from briefwriter.storage.blocks import BlockStore
from briefwriter.utils.json_utils import loads_lenient
from briefwriter.utils.logger import logger

from .prompt_builder import (
    WRITER_SYSTEM_PROMPT,
    build_conclusion_prompt,
    build_criterion_prompt,
    build_introduction_prompt,
    build_learning_aim_prompt,
    build_references_prompt,
)

DEFAULT_REFERENCES = [
    Reference(text="BTEC National IT Student Book. Pearson Education.", order=1),
    Reference(text="Computing and IT. Cambridge University Press.", order=2),
    Reference(
        text="BBC Bitesize (2024) Computing Resources. Available at: https://www.bbc.co.uk/bitesize",
        order=3,
    ),
]

DEFAULT_REFERENCE_COUNTS = {"PASS": 3, "MERIT": 5, "DISTINCTION": 8}

MAX_TOKENS = {
    ItemKind.INTRODUCTION: 500,
    ItemKind.LEARNING_AIM: 400,
    ItemKind.CRITERION: 1500,
    ItemKind.CONCLUSION: 500,
    ItemKind.REFERENCES: 1200,
}


def variation_seed(assignment_id: str, block_order: int) -> int:
    """Deterministic per-block seed: the id's last 8 chars read as hex, plus the block order."""
    try:
        base = int(assignment_id[-8:], 16)
    except ValueError:
        base = zlib.crc32(assignment_id.encode("utf-8"))
    return base + block_order


@dataclass(frozen=True)
class WritingJob:
    assignment_id: str
    snapshot: BriefSnapshot
    plan: GenerationPlan


class ContentWriter:
    def __init__(
        self,
        llm_client: CompletionAdapter,
        block_store: BlockStore,
        augmenter: Augmenter,
        config: dict[str, Any] | None = None,
    ):
        config = config or {}
        self.llm_client = llm_client
        self.block_store = block_store
        self.augmenter = augmenter
        self.temperature = config.get("temperature", 0.85)
        self.reference_temperature = config.get("reference_temperature", 0.8)
        self.context_chars = config.get("context_chars", 200)
        self.reference_counts = {**DEFAULT_REFERENCE_COUNTS, **config.get("reference_counts", {})}

    def write_all(self, job: WritingJob) -> list[ContentBlock]:
        """Write and persist one block per outline item, in order.

        Stops at the first failed item; blocks already written stay persisted.
        """
        blocks: list[ContentBlock] = []
        rolling_context = ""

        for block_order, item in enumerate(job.plan.items):
            logger.info(f"Writing block {block_order}: {item.item_id}")
            block = self.write_block(item, rolling_context, job, block_order)
            self.block_store.append_block(job.assignment_id, block)
            blocks.append(block)
            rolling_context = self.rolling_context(block)

        logger.info(f"All {len(blocks)} blocks written for {job.assignment_id}")
        return blocks

    def rolling_context(self, block: ContentBlock) -> str:
        if not block.content:
            return ""
        return block.content[-self.context_chars :]

    def write_block(self, item: OutlineItem, rolling_context: str, job: WritingJob, block_order: int) -> ContentBlock:
        seed = variation_seed(job.assignment_id, block_order)
        tag = f"Session {job.assignment_id[-8:]}, Block {block_order}"

        if item.kind == ItemKind.REFERENCES:
            references, tokens = self._write_references(item, job.snapshot, seed)
            return self._block(item, block_order, references=references, tokens_used=tokens)

        if item.kind == ItemKind.INTRODUCTION:
            prompt = build_introduction_prompt(job.snapshot, tag)
        elif item.kind == ItemKind.LEARNING_AIM:
            prompt = build_learning_aim_prompt(job.snapshot, item, rolling_context, tag)
        elif item.kind == ItemKind.CRITERION:
            prompt = build_criterion_prompt(job.snapshot, item, rolling_context, tag)
        else:
            prompt = build_conclusion_prompt(job.snapshot, rolling_context, tag)

        result = self._complete(item, prompt, seed, self.temperature)
        tokens = result.total_tokens
        table = image = None

        if item.kind == ItemKind.CRITERION:
            table, image, extra_tokens = self._augment(item, job, seed)
            tokens += extra_tokens

        return self._block(item, block_order, content=result.text, table=table, image=image, tokens_used=tokens)

    def _complete(self, item: OutlineItem, prompt: str, seed: int, temperature: float, json_mode: bool = False) -> CompletionOk:
        result = self.llm_client.complete(
            prompt,
            CompletionOptions(
                system_prompt=None if json_mode else WRITER_SYSTEM_PROMPT,
                temperature=temperature,
                max_tokens=MAX_TOKENS[item.kind],
                seed=seed,
                json_mode=json_mode,
            ),
        )
        if not result.ok:
            logger.error(f"Completion failed for {item.item_id}: {result.kind.value}: {result.message}")
            raise ProviderError(
                f"Completion failed for {item.item_id}: {result.message}",
                kind=result.kind.value,
                item_id=item.item_id,
            )
        return result

    def _augment(
        self, item: OutlineItem, job: WritingJob, seed: int
    ) -> tuple[TableData | None, ImagePlaceholder | None, int]:
        ref = item.criterion_ref
        criterion = job.snapshot.find_criterion(ref)
        table = image = None
        tokens = 0

        table_requirement = job.plan.table_for(ref) if job.snapshot.include_tables else None
        if table_requirement is not None:
            augmentation = self.augmenter.augment(job.snapshot, criterion, table_requirement, seed)
            table = augmentation.payload
            tokens += augmentation.tokens_used

        image_requirement = job.plan.image_for(ref) if job.snapshot.include_images else None
        if image_requirement is not None:
            image = self.augmenter.augment(job.snapshot, criterion, image_requirement).payload

        return table, image, tokens

    def _write_references(self, item: OutlineItem, snapshot: BriefSnapshot, seed: int) -> tuple[list[Reference], int]:
        count = self.reference_counts.get(snapshot.target_grade.value, 3)
        result = self._complete(
            item, build_references_prompt(snapshot, count), seed, self.reference_temperature, json_mode=True
        )

        try:
            references = self._parse_references(result.text, count)
        except (json.JSONDecodeError, ValidationError) as e:
            logger.warning(f"Failed to parse references, using defaults: {e}")
            references = list(DEFAULT_REFERENCES)

        logger.info(f"Generated {len(references)} references")
        return references, result.total_tokens

    def _parse_references(self, text: str, count: int) -> list[Reference]:
        data = loads_lenient(text)
        if isinstance(data, list):
            data = {"references": data}
        parsed = ReferencesResponse.model_validate(data)

        entries = [
            Reference(text=entry.text.strip(), order=entry.order or entry.id or index)
            for index, entry in enumerate(parsed.references, start=1)
        ]
        entries.sort(key=lambda r: r.order)
        return entries[:count]

    def _block(self, item: OutlineItem, block_order: int, **fields) -> ContentBlock:
        return ContentBlock(
            block_order=block_order,
            item_id=item.item_id,
            kind=item.kind,
            title=item.title,
            aim_code=item.aim_code,
            criterion_code=item.criterion_code,
            generated_at=datetime.now(UTC).isoformat(),
            **fields,
        )
