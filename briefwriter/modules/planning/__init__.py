from .fallback import build_fallback_plan, canonical_outline, validate_snapshot
from .planner import OutlinePlanner

__all__ = ["OutlinePlanner", "build_fallback_plan", "canonical_outline", "validate_snapshot"]
