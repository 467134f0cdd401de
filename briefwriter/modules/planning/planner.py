import json
from typing import Any

from pydantic import ValidationError

from briefwriter.llm import CompletionAdapter, CompletionOptions
from briefwriter.models import (
    BriefSnapshot,
    GenerationPlan,
    ImageRequirement,
    ItemKind,
    OutlineItem,
    TableRequirement,
)
from briefwriter.models.contracts import OutlineEntry, OutlineResponse
from briefwriter.utils.json_utils import loads_lenient
from briefwriter.utils.logger import logger

from .fallback import build_fallback_plan, canonical_outline, validate_snapshot
from .prompts import PLANNER_SYSTEM_PROMPT, build_planner_prompt


class OutlineRejected(Exception):
    """Raised internally when the model outline cannot be used as-is."""


class OutlinePlanner:
    def __init__(self, llm_client: CompletionAdapter, config: dict[str, Any] | None = None):
        config = config or {}
        self.llm_client = llm_client
        self.temperature = config.get("temperature", 0.1)
        self.max_tokens = config.get("max_tokens", 2000)
        self.max_images = config.get("max_images", 2)

    def plan(self, snapshot: BriefSnapshot) -> GenerationPlan:
        validate_snapshot(snapshot)
        logger.info(f"Planning outline for {snapshot.title} (grade {snapshot.target_grade.value})")

        result = self.llm_client.complete(
            build_planner_prompt(snapshot, self.max_images),
            CompletionOptions(
                system_prompt=PLANNER_SYSTEM_PROMPT,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
                json_mode=True,
            ),
        )
        tokens = result.total_tokens

        if not result.ok:
            logger.warning(f"Planner call failed ({result.kind.value}: {result.message}), using fallback outline")
            return build_fallback_plan(snapshot, self.max_images, tokens)

        try:
            plan = self._plan_from_response(result.text, snapshot, tokens)
        except OutlineRejected as e:
            logger.warning(f"Planner output rejected ({e}), using fallback outline")
            return build_fallback_plan(snapshot, self.max_images, tokens)

        logger.info(
            f"Outline planned: {len(plan.items)} items, {len(plan.tables)} tables, {len(plan.images)} images"
        )
        return plan

    def _plan_from_response(self, text: str, snapshot: BriefSnapshot, tokens: int) -> GenerationPlan:
        response = self._decode(text)

        items = [self._to_item(entry, snapshot) for entry in response.outline]
        expected = canonical_outline(snapshot)
        if [i.item_id for i in items] != [i.item_id for i in expected]:
            raise OutlineRejected("outline does not match the visible criteria of the brief")

        planned_refs = {item.criterion_ref for item in expected if item.criterion_ref}

        tables: list[TableRequirement] = []
        if snapshot.include_tables:
            for spec in response.tables:
                ref = self._resolve_ref(spec.criterion, snapshot, planned_refs)
                if any(t.criterion_ref == ref for t in tables):
                    continue
                tables.append(TableRequirement(criterion_ref=ref, title=spec.title or f"Analysis for {ref}"))

        images: list[ImageRequirement] = []
        if snapshot.include_images:
            for spec in response.images:
                if len(images) >= self.max_images:
                    break
                ref = self._resolve_ref(spec.criterion, snapshot, planned_refs)
                if any(i.criterion_ref == ref for i in images):
                    continue
                images.append(
                    ImageRequirement(
                        criterion_ref=ref,
                        caption=spec.caption or f"Illustration for {ref}",
                        sequence=len(images) + 1,
                    )
                )

        # Canonical items keep brief wording regardless of model titles
        return GenerationPlan(items=expected, tables=tables, images=images, planner_tokens=tokens, source="model")

    def _decode(self, text: str) -> OutlineResponse:
        try:
            data = loads_lenient(text)
        except json.JSONDecodeError as e:
            raise OutlineRejected(f"invalid JSON: {e}") from e

        if isinstance(data, dict) and "error" in data:
            raise OutlineRejected(f"planner reported error {data['error']}")

        try:
            return OutlineResponse.model_validate(data)
        except ValidationError as e:
            raise OutlineRejected(f"schema violation: {e.error_count()} errors") from e

    def _to_item(self, entry: OutlineEntry, snapshot: BriefSnapshot) -> OutlineItem:
        kind = ItemKind(entry.type)

        if kind == ItemKind.LEARNING_AIM:
            aim = snapshot.find_aim((entry.aim or "").strip().upper())
            if aim is None:
                raise OutlineRejected(f"unknown learning aim {entry.aim}")
            return OutlineItem.learning_aim(aim)

        if kind == ItemKind.CRITERION:
            code = (entry.criterion or "").strip()
            ref = code if "." in code or not entry.aim else f"{entry.aim.strip().upper()}.{code}"
            criterion = snapshot.find_criterion(ref)
            if criterion is None:
                raise OutlineRejected(f"unknown criterion {ref}")
            return OutlineItem.criterion(criterion)

        return {
            ItemKind.INTRODUCTION: OutlineItem.introduction,
            ItemKind.CONCLUSION: OutlineItem.conclusion,
            ItemKind.REFERENCES: OutlineItem.references,
        }[kind]()

    def _resolve_ref(self, raw: str, snapshot: BriefSnapshot, planned_refs: set[str]) -> str:
        criterion = snapshot.find_criterion(raw)
        if criterion is None or criterion.ref not in planned_refs:
            raise OutlineRejected(f"requirement references unplanned criterion {raw}")
        return criterion.ref
