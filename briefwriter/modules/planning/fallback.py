from briefwriter.core.errors import PlanningError
from briefwriter.models import (
    BriefSnapshot,
    GenerationPlan,
    ImageRequirement,
    OutlineItem,
    TableRequirement,
    Tier,
)


def validate_snapshot(snapshot: BriefSnapshot) -> None:
    if not snapshot.learning_aims:
        raise PlanningError("Brief snapshot has no learning aims")
    if not snapshot.criteria_for_tier(Tier.PASS):
        raise PlanningError("Brief snapshot has no pass criteria")


def canonical_outline(snapshot: BriefSnapshot) -> list[OutlineItem]:
    """The only outline shape a plan may have for this snapshot.

    Aims without any visible criterion are left out entirely.
    """
    items = [OutlineItem.introduction()]

    for aim in snapshot.learning_aims:
        criteria = snapshot.criteria_for_aim(aim.code)
        if not criteria:
            continue
        items.append(OutlineItem.learning_aim(aim))
        items.extend(OutlineItem.criterion(c) for c in criteria)

    items.append(OutlineItem.conclusion())
    items.append(OutlineItem.references())
    return items


def build_fallback_plan(snapshot: BriefSnapshot, max_images: int = 2, planner_tokens: int = 0) -> GenerationPlan:
    validate_snapshot(snapshot)
    items = canonical_outline(snapshot)
    criteria = [snapshot.find_criterion(item.criterion_ref) for item in items if item.criterion_ref]

    tables: list[TableRequirement] = []
    if snapshot.include_tables:
        targets = [c for c in criteria if c.tier == Tier.MERIT]
        if not targets:
            targets = [c for c in criteria if c.tier == Tier.PASS][:1]
        tables = [TableRequirement(criterion_ref=c.ref, title=f"Analysis for {c.code}") for c in targets]

    images: list[ImageRequirement] = []
    if snapshot.include_images:
        targets = [c for c in criteria if c.tier == Tier.PASS][: max(0, max_images)]
        images = [
            ImageRequirement(criterion_ref=c.ref, caption=f"Illustration for {c.code}: {c.description}", sequence=n)
            for n, c in enumerate(targets, start=1)
        ]

    return GenerationPlan(
        items=items,
        tables=tables,
        images=images,
        planner_tokens=planner_tokens,
        source="fallback",
    )
