from enum import Enum
from dataclasses import dataclass


class AssignmentStatus(Enum):
    DRAFT = "DRAFT"
    GENERATING = "GENERATING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


# Lifecycle edges driven by a generation run. Returning to DRAFT is a
# separate administrative reset, never a run transition.
TRANSITIONS: dict[AssignmentStatus, set[AssignmentStatus]] = {
    AssignmentStatus.DRAFT: {AssignmentStatus.GENERATING},
    AssignmentStatus.GENERATING: {AssignmentStatus.COMPLETED, AssignmentStatus.FAILED},
    AssignmentStatus.COMPLETED: set(),
    AssignmentStatus.FAILED: set(),
}


@dataclass
class Assignment:
    assignment_id: str
    user_id: str
    status: AssignmentStatus = AssignmentStatus.DRAFT
    total_tokens_used: int = 0
    planner_tokens: int = 0
    total_ai_calls: int = 0
    created_at: str | None = None
    started_at: str | None = None
    completed_at: str | None = None
    duration_ms: int | None = None
    error: str | None = None
    document_path: str | None = None
