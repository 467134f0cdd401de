from pathlib import Path

from briefwriter.models import Assignment

from .helpers import load_dataclass, save_dataclass


class AssignmentStore:
	def __init__(self, storage_path: Path):
		self.storage_path = Path(storage_path)

	def assignment_dir(self, assignment_id: str) -> Path:
		return self.storage_path / assignment_id

	def _file(self, assignment_id: str) -> Path:
		return self.assignment_dir(assignment_id) / 'assignment.json'

	def save(self, assignment: Assignment) -> None:
		save_dataclass(self._file(assignment.assignment_id), assignment)

	def load(self, assignment_id: str) -> Assignment | None:
		if not self.exists(assignment_id):
			return None
		return load_dataclass(self._file(assignment_id), Assignment)

	def exists(self, assignment_id: str) -> bool:
		return self._file(assignment_id).exists()
