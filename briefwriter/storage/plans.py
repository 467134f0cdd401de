from pathlib import Path

from briefwriter.core.errors import PersistenceError
from briefwriter.models import GenerationPlan

from .helpers import load_dataclass, save_dataclass


class PlanStore:
	"""One plan per assignment, written once before any block exists."""

	def __init__(self, storage_path: Path):
		self.storage_path = Path(storage_path)

	def _file(self, assignment_id: str) -> Path:
		return self.storage_path / assignment_id / 'plan.json'

	def save(self, assignment_id: str, plan: GenerationPlan) -> None:
		if self.exists(assignment_id):
			raise PersistenceError(f'Plan already written for assignment {assignment_id}')
		save_dataclass(self._file(assignment_id), plan)

	def load(self, assignment_id: str) -> GenerationPlan | None:
		if not self.exists(assignment_id):
			return None
		return load_dataclass(self._file(assignment_id), GenerationPlan)

	def exists(self, assignment_id: str) -> bool:
		return self._file(assignment_id).exists()

	def delete(self, assignment_id: str) -> None:
		if self.exists(assignment_id):
			self._file(assignment_id).unlink()
