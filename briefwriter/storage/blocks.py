import threading
from pathlib import Path

from briefwriter.core.errors import PersistenceError
from briefwriter.models import ContentBlock

from .helpers import load_dataclass, save_dataclass


class BlockStore:
	def __init__(self, storage_path: Path):
		self.storage_path = Path(storage_path)
		self._lock = threading.Lock()

	def blocks_dir(self, assignment_id: str) -> Path:
		return self.storage_path / assignment_id / 'blocks'

	def append_block(self, assignment_id: str, block: ContentBlock) -> None:
		with self._lock:
			expected = self.count(assignment_id)
			if block.block_order != expected:
				raise PersistenceError(
					f'Block order {block.block_order} out of sequence for {assignment_id}, expected {expected}'
				)

			file_path = self.blocks_dir(assignment_id) / f'block_{block.block_order:03d}.json'
			save_dataclass(file_path, block)

	def list_blocks(self, assignment_id: str) -> list[ContentBlock]:
		blocks = [load_dataclass(path, ContentBlock) for path in self._files(assignment_id)]
		return sorted(blocks, key=lambda b: b.block_order)

	def count(self, assignment_id: str) -> int:
		return len(self._files(assignment_id))

	def clear(self, assignment_id: str) -> None:
		with self._lock:
			try:
				for path in self._files(assignment_id):
					path.unlink()
			except OSError as e:
				raise PersistenceError(f'Failed to clear blocks for {assignment_id}: {e}') from e

	def _files(self, assignment_id: str) -> list[Path]:
		directory = self.blocks_dir(assignment_id)
		if not directory.exists():
			return []
		return sorted(directory.glob('block_*.json'))
