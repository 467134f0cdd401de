from enum import Enum
from dataclasses import dataclass, field
from typing import Any


class Tier(Enum):
    PASS = "pass"
    MERIT = "merit"
    DISTINCTION = "distinction"

    @property
    def rank(self) -> int:
        return _TIER_ORDER.index(self)


_TIER_ORDER = [Tier.PASS, Tier.MERIT, Tier.DISTINCTION]


class Grade(Enum):
    PASS = "PASS"
    MERIT = "MERIT"
    DISTINCTION = "DISTINCTION"

    def visible_tiers(self) -> list[Tier]:
        """Tiers whose criteria are written for this target grade."""
        return _TIER_ORDER[: _GRADE_ORDER.index(self) + 1]


_GRADE_ORDER = [Grade.PASS, Grade.MERIT, Grade.DISTINCTION]


@dataclass(frozen=True)
class LearningAim:
    code: str
    title: str

    @property
    def heading(self) -> str:
        return f"Learning Aim {self.code}: {self.title}"


@dataclass(frozen=True)
class Criterion:
    code: str
    description: str
    tier: Tier
    aim: str

    @property
    def ref(self) -> str:
        return f"{self.aim}.{self.code}"


@dataclass(frozen=True)
class StudentContext:
    profile: dict[str, str] = field(default_factory=dict)
    inputs: dict[str, Any] = field(default_factory=dict)

    def get_input(self, *keys: str) -> Any:
        for key in keys:
            value = self.inputs.get(key)
            if value:
                return value
        return None


@dataclass(frozen=True)
class BriefSnapshot:
    unit_name: str
    unit_code: str
    level: int
    scenario: str
    learning_aims: list[LearningAim]
    criteria: list[Criterion]
    language: str
    target_grade: Grade
    include_tables: bool = False
    include_images: bool = False
    checklist_of_evidence: list[str] = field(default_factory=list)
    sources: list[str] = field(default_factory=list)
    student: StudentContext | None = None

    @property
    def title(self) -> str:
        return f"{self.unit_name} ({self.unit_code})"

    def criteria_for_tier(self, tier: Tier) -> list[Criterion]:
        return [c for c in self.criteria if c.tier == tier]

    def criteria_for_aim(self, aim_code: str, visible_only: bool = True) -> list[Criterion]:
        tiers = self.target_grade.visible_tiers() if visible_only else _TIER_ORDER
        selected = [c for c in self.criteria if c.aim == aim_code and c.tier in tiers]
        # Stable sort keeps declared order within a tier
        return sorted(selected, key=lambda c: c.tier.rank)

    def visible_criteria(self) -> list[Criterion]:
        visible = []
        for aim in self.learning_aims:
            visible.extend(self.criteria_for_aim(aim.code))
        return visible

    def find_aim(self, code: str) -> LearningAim | None:
        for aim in self.learning_aims:
            if aim.code == code:
                return aim
        return None

    def find_criterion(self, ref: str) -> Criterion | None:
        """Resolve 'A.P1' or a bare 'P1' when the bare code is unambiguous."""
        ref = ref.strip()
        for criterion in self.criteria:
            if criterion.ref == ref:
                return criterion

        matches = [c for c in self.criteria if c.code == ref]
        if len(matches) == 1:
            return matches[0]
        return None
