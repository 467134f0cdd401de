from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from briefwriter.core.errors import NotFoundError
from briefwriter.models import BriefSnapshot
from briefwriter.parsers.brief_parser import BriefParser

from .helpers import read_json, write_json


class SnapshotProvider(ABC):
	@abstractmethod
	def get_snapshot(self, assignment_id: str) -> BriefSnapshot:
		raise NotImplementedError


class FileSnapshotProvider(SnapshotProvider):
	"""Raw briefs stored as <briefs_dir>/<assignment_id>.json, normalized on read."""

	def __init__(self, briefs_dir: Path, parser: BriefParser | None = None):
		self.briefs_dir = Path(briefs_dir)
		self.parser = parser or BriefParser()

	def _file(self, assignment_id: str) -> Path:
		return self.briefs_dir / f'{assignment_id}.json'

	def save_brief(self, assignment_id: str, raw: dict[str, Any]) -> None:
		write_json(self._file(assignment_id), raw)

	def has_brief(self, assignment_id: str) -> bool:
		return self._file(assignment_id).exists()

	def get_snapshot(self, assignment_id: str) -> BriefSnapshot:
		if not self.has_brief(assignment_id):
			raise NotFoundError(f'No brief found for assignment {assignment_id}')
		return self.parser.parse(read_json(self._file(assignment_id)))
